"""Notification dispatcher.

For one event: resolve interested tokens per language, render, send one
multicast per language, prune tokens the transport rejects for good.
"""

from __future__ import annotations

import logging
from typing import Protocol

from matchrelay._redact import mask_token
from matchrelay.models.notification import BatchResponse, DispatchReport, PushMessage
from matchrelay.notifications.registry import SubscriptionRegistry
from matchrelay.notifications.templates import TemplateCatalog
from matchrelay.state.events import MatchEvent

_logger = logging.getLogger(__name__)


class PushSender(Protocol):
    """Structural push transport interface.

    ``responses`` in the returned batch follow the order of
    ``message.tokens``.
    """

    async def send_multicast(self, message: PushMessage) -> BatchResponse: ...


class NotificationDispatcher:
    """Sends localized notifications for detected match events."""

    def __init__(
        self,
        registry: SubscriptionRegistry,
        sender: PushSender,
        *,
        templates: TemplateCatalog | None = None,
    ) -> None:
        self._registry = registry
        self._sender = sender
        self._templates = templates if templates is not None else TemplateCatalog()

    async def dispatch(self, event: MatchEvent) -> DispatchReport:
        """Send *event* to every interested subscriber.

        Never raises: transport failures are logged and reported.
        """
        report = DispatchReport(match_id=event.match_id, kind=event.kind.value)
        groups = await self._registry.resolve_interested_tokens(event.team_names)
        if not groups:
            _logger.debug("No subscriber follows %s vs %s", event.team1, event.team2)
            return report

        for language, tokens in groups.items():
            if not tokens:
                continue
            title, body = self._templates.render(event, language)
            message = PushMessage(title=title, body=body, data=event.data(), tokens=tokens)
            try:
                response = await self._sender.send_multicast(message)
            except Exception as exc:
                _logger.warning(
                    "Push send failed for match %s (%s, %d token(s))",
                    event.match_id,
                    language,
                    len(tokens),
                    exc_info=True,
                )
                report.failed += len(tokens)
                report.errors.append(f"{language}: {exc}")
                continue

            report.languages.append(language)
            report.sent += response.success_count
            report.failed += response.failure_count
            await self._prune(tokens, response, report)

        if report.pruned:
            _logger.info("Removed %d invalid delivery token(s)", len(report.pruned))

        _logger.info(
            "Sent %d %s notification(s) for %s vs %s",
            report.sent,
            event.kind.value,
            event.team1,
            event.team2,
        )
        return report

    async def _prune(self, tokens: list[str], response: BatchResponse, report: DispatchReport) -> None:
        for token, result in zip(tokens, response.responses, strict=False):
            if not result.is_permanent_failure:
                continue
            await self._registry.unregister(token)
            report.pruned.append(token)
            _logger.debug("Pruned %s (%s)", mask_token(token), result.error_code or "no error code")
