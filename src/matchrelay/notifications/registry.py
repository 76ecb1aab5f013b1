"""Subscription registry: delivery token -> favorite teams and language."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from matchrelay._constants import DEFAULT_LANGUAGE, TOKENS_KEY
from matchrelay._redact import mask_token
from matchrelay.exceptions import InvalidArgumentError, MalformedSubscriptionError, StoreUnavailableError
from matchrelay.ingestion.normalize import normalize_name
from matchrelay.models.subscription import Subscription, clean_team_list, decode_subscription, normalize_language
from matchrelay.notifications.aliases import AliasTable
from matchrelay.state.store import Store

_logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Stores subscriptions and resolves which tokens care about a match."""

    def __init__(
        self,
        store: Store,
        *,
        aliases: AliasTable | None = None,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._store = store
        self._aliases = aliases if aliases is not None else AliasTable()
        self._default_language = default_language

    async def register(
        self,
        token: str | None,
        favorite_teams: Sequence[str] | None,
        language: str | None = None,
    ) -> dict[str, bool]:
        """Create or overwrite the subscription of *token*.

        Raises
        ------
        InvalidArgumentError
            If the token is missing, *favorite_teams* is not a non-empty list
            of names, or *language* is not a string.
        StoreUnavailableError
            If the subscription could not be written.
        """
        cleaned_token = token.strip() if isinstance(token, str) else ""
        if not cleaned_token:
            raise InvalidArgumentError("token is required")
        if not isinstance(favorite_teams, (list, tuple)):
            raise InvalidArgumentError("favoriteTeams must be a list of team names")
        if language is not None and not isinstance(language, str):
            raise InvalidArgumentError("language must be a string")
        teams = clean_team_list(favorite_teams)
        if not teams:
            raise InvalidArgumentError("favoriteTeams must contain at least one team name")

        subscription = Subscription(
            token=cleaned_token,
            favorite_teams=teams,
            language=normalize_language(language, self._default_language),
        )
        if not await self._store.hset(TOKENS_KEY, cleaned_token, subscription.record()):
            raise StoreUnavailableError("subscription could not be stored")

        _logger.info(
            "Registered %s for %d team(s), language=%s",
            mask_token(cleaned_token),
            len(teams),
            subscription.language,
        )
        return {"success": True}

    async def unregister(self, token: str | None) -> dict[str, bool]:
        """Delete the subscription of *token*; unknown tokens are fine."""
        cleaned_token = token.strip() if isinstance(token, str) else ""
        if cleaned_token:
            await self._store.hdel(TOKENS_KEY, cleaned_token)
            _logger.info("Unregistered %s", mask_token(cleaned_token))
        return {"success": True}

    async def get(self, token: str) -> Subscription | None:
        raw = await self._store.hget(TOKENS_KEY, token)
        if raw is None:
            return None
        try:
            return decode_subscription(token, raw, default_language=self._default_language)
        except MalformedSubscriptionError:
            _logger.warning("Subscription of %s is malformed", mask_token(token))
            return None

    def matches_team(self, favorite: str, candidate: str) -> bool:
        """Case-insensitive equality, or membership of one alias group."""
        if normalize_name(favorite) == normalize_name(candidate):
            return True
        return self._aliases.same_group(favorite, candidate)

    def is_interested(self, subscription: Subscription, team_names: Sequence[str]) -> bool:
        return any(
            self.matches_team(favorite, team)
            for favorite in subscription.favorite_teams
            for team in team_names
        )

    async def subscriptions(self) -> list[Subscription]:
        """All decodable subscriptions. Malformed records are skipped."""
        records = await self._store.hgetall(TOKENS_KEY)
        subscriptions: list[Subscription] = []
        for token, raw in records.items():
            try:
                subscriptions.append(decode_subscription(token, raw, default_language=self._default_language))
            except MalformedSubscriptionError as exc:
                _logger.warning("Skipping malformed subscription of %s: %s", mask_token(token), exc)
        return subscriptions

    async def resolve_interested_tokens(self, team_names: Sequence[str]) -> dict[str, list[str]]:
        """Tokens interested in any of *team_names*, grouped by language."""
        grouped: dict[str, list[str]] = {}
        for subscription in await self.subscriptions():
            if self.is_interested(subscription, team_names):
                grouped.setdefault(subscription.language, []).append(subscription.token)
        return grouped
