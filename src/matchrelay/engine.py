"""Relay engine: sync cycle, read API and subscription API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from matchrelay._constants import TOURNAMENTS_KEY, standings_key
from matchrelay.config import RelayConfig
from matchrelay.exceptions import MatchRelayError, ServiceUnavailableError, UpstreamError
from matchrelay.ingestion.merge import EntityMerger
from matchrelay.models.match import Match
from matchrelay.models.notification import DispatchReport
from matchrelay.models.snapshots import MatchesSnapshot, StandingsSnapshot, TournamentsSnapshot
from matchrelay.models.standings import StandingEntry
from matchrelay.models.team import Player, Team, TeamLogo
from matchrelay.notifications.aliases import AliasTable
from matchrelay.notifications.detector import EventDetector
from matchrelay.notifications.dispatcher import NotificationDispatcher, PushSender
from matchrelay.notifications.registry import SubscriptionRegistry
from matchrelay.notifications.templates import TemplateCatalog
from matchrelay.provider import MatchProvider
from matchrelay.standings import compute_standings
from matchrelay.state.store import Store
from matchrelay.teams import TeamDirectory

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RelayEngine:
    """Polling cache and notification relay.

    Usage::

        async with PandaScoreClient(config) as provider:
            async with RelayEngine(config, store=store, provider=provider, sender=sender) as engine:
                await engine.run_polling()

    The engine holds every dependency explicitly; nothing is module-global.
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        store: Store | None = None,
        provider: MatchProvider | None = None,
        sender: PushSender | None = None,
        aliases: AliasTable | None = None,
        templates: TemplateCatalog | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._store = store if store is not None else Store(None, timeout=config.store_timeout)
        self._provider = provider
        self._clock = clock
        self._merger = EntityMerger(self._store, ttl_seconds=config.matches_ttl, clock=clock)
        self._registry = SubscriptionRegistry(
            self._store,
            aliases=aliases,
            default_language=config.default_language,
        )
        self._detector = EventDetector(self._store, reminder_window=config.reminder_window, clock=clock)
        self._dispatcher: NotificationDispatcher | None = None
        if sender is not None:
            self._dispatcher = NotificationDispatcher(
                self._registry,
                sender,
                templates=templates or TemplateCatalog(default_language=config.default_language),
            )
        self._teams = TeamDirectory(provider, ttl_seconds=config.teams_cache_ttl) if provider is not None else None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RelayEngine:
        if self._store.has_backend and not await self._store.ping():
            _logger.warning("Key-value store unreachable at startup; using local cache only")
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._store.close()

    @property
    def store(self) -> Store:
        return self._store

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def notifications_enabled(self) -> bool:
        return self._config.notifications_enabled and self._dispatcher is not None

    def _require_provider(self) -> MatchProvider:
        if self._provider is None:
            raise MatchRelayError("No match provider configured")
        return self._provider

    # ------------------------------------------------------------------
    # Sync cycle
    # ------------------------------------------------------------------

    async def ingest_matches(self, matches: Sequence[Match]) -> MatchesSnapshot:
        """Merge a fetched snapshot, then detect and dispatch events."""
        snapshot = await self._merger.merge(matches)
        if matches and self.notifications_enabled:
            await self._notify(snapshot.matches)
        return snapshot

    async def _notify(self, matches: Sequence[Match]) -> list[DispatchReport]:
        assert self._dispatcher is not None  # noqa: S101
        reports: list[DispatchReport] = []
        for event in await self._detector.detect(matches):
            report = await self._dispatcher.dispatch(event)
            if not report.ok:
                _logger.warning("Dispatch of %s for match %s had errors: %s", event.kind.value, event.match_id, report.errors)
            reports.append(report)
        return reports

    async def refresh_matches(self) -> MatchesSnapshot | None:
        """Fetch the full schedule and ingest it.

        Returns ``None`` when the provider failed; the cache is left untouched.
        """
        provider = self._require_provider()
        try:
            fetched = await provider.fetch_schedule(self._clock())
        except UpstreamError as exc:
            _logger.warning("Skipping sync cycle, provider failed: %s", exc)
            return None
        return await self.ingest_matches(fetched)

    async def refresh_live_matches(self) -> list[Match]:
        """Fetch the twelve-hour live window and ingest it if non-empty."""
        provider = self._require_provider()
        try:
            fetched = await provider.fetch_live_window(self._clock())
        except UpstreamError as exc:
            _logger.warning("Skipping live refresh, provider failed: %s", exc)
            return []
        running = sum(1 for match in fetched if match.status == "running")
        if running:
            _logger.info("Found %d live match(es) in the live window", running)
        if fetched:
            await self.ingest_matches(fetched)
        return fetched

    async def run_polling(self, interval: float | None = None) -> None:
        """Refresh now, then every *interval* seconds, until cancelled."""
        period = interval if interval is not None else self._config.poll_interval
        _logger.info("Polling provider every %.0fs", period)
        while True:
            try:
                await self.refresh_matches()
            except Exception:
                _logger.exception("Polling cycle failed")
            await asyncio.sleep(period)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    async def get_matches(self) -> MatchesSnapshot:
        """The reconciled match history.

        A connected but empty store is filled by one fetch-and-merge; no
        events are detected on this path.

        Raises
        ------
        ServiceUnavailableError
            If no snapshot is stored and none could be fetched.
        """
        snapshot = await self._merger.load()
        if snapshot is None and self._store.is_connected and self._provider is not None:
            snapshot = await self._fill_empty_history(self._provider)
        if snapshot is None:
            raise ServiceUnavailableError("Match history temporarily unavailable")
        return snapshot

    async def _fill_empty_history(self, provider: MatchProvider) -> MatchesSnapshot | None:
        try:
            fetched = await provider.fetch_schedule(self._clock())
        except UpstreamError as exc:
            _logger.warning("Match history empty and provider failed: %s", exc)
            return None
        if not fetched:
            return None
        _logger.info("Match history empty; filled from a fresh fetch")
        return await self._merger.merge(fetched)

    async def get_tournaments(self) -> TournamentsSnapshot:
        """Qualifying tournaments, from cache or freshly fetched."""
        cached = await self._store.get(TOURNAMENTS_KEY)
        if isinstance(cached, dict):
            try:
                return TournamentsSnapshot.model_validate(cached)
            except ValidationError:
                _logger.warning("Cached tournaments unreadable; refetching", exc_info=True)
        return await self.refresh_tournaments()

    async def refresh_tournaments(self) -> TournamentsSnapshot:
        """Fetch, filter and cache tournaments. Failures yield an empty list."""
        if self._provider is None:
            return TournamentsSnapshot(last_update=self._clock())
        try:
            fetched = await self._provider.fetch_tournaments(self._clock())
        except UpstreamError as exc:
            _logger.warning("Could not fetch tournaments: %s", exc)
            return TournamentsSnapshot(last_update=self._clock())

        qualifying = [
            tournament
            for tournament in fetched
            if tournament.qualifies(
                tiers=self._config.qualifying_tiers,
                prize_pool_threshold=self._config.prize_pool_threshold,
            )
        ]
        snapshot = TournamentsSnapshot(tournaments=qualifying, last_update=self._clock(), count=len(qualifying))
        if not qualifying:
            _logger.info("None of %d tournaments qualify; nothing cached", len(fetched))
            return snapshot
        await self._store.set(TOURNAMENTS_KEY, snapshot.payload(), self._config.cache_ttl)
        _logger.info("Cached %d of %d tournaments", len(qualifying), len(fetched))
        return snapshot

    async def get_standings(self, tournament_id: int) -> StandingsSnapshot:
        """Standings of one tournament, computed from its matches when needed."""
        key = standings_key(tournament_id)
        cached = await self._store.get(key)
        if isinstance(cached, dict):
            try:
                return StandingsSnapshot.model_validate(cached)
            except ValidationError:
                _logger.warning("Cached standings for %s unreadable; refetching", tournament_id, exc_info=True)

        if self._provider is None:
            return StandingsSnapshot(last_update=self._clock())
        try:
            tournament = await self._provider.fetch_tournament(tournament_id)
        except UpstreamError as exc:
            _logger.warning("Could not fetch tournament %s: %s", tournament_id, exc)
            return StandingsSnapshot(last_update=self._clock())

        standings: list[StandingEntry] = []
        try:
            standings = await self._provider.fetch_standings(tournament_id)
        except UpstreamError:
            _logger.info("Standings not available for tournament %s", tournament_id)

        matches: list[Match] = []
        try:
            matches = await self._provider.fetch_tournament_matches(tournament_id)
        except UpstreamError:
            _logger.info("Could not fetch matches for tournament %s", tournament_id)

        if not standings and matches:
            standings = compute_standings(matches)

        snapshot = StandingsSnapshot(
            tournament=tournament,
            standings=standings,
            matches=matches,
            last_update=self._clock(),
        )
        await self._store.set(key, snapshot.payload(), self._config.cache_ttl)
        return snapshot

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def register(
        self,
        token: str | None,
        favorite_teams: Sequence[str] | None,
        language: str | None = None,
    ) -> dict[str, bool]:
        return await self._registry.register(token, favorite_teams, language)

    async def unregister(self, token: str | None) -> dict[str, bool]:
        return await self._registry.unregister(token)

    # ------------------------------------------------------------------
    # Team pass-through
    # ------------------------------------------------------------------

    async def search_teams(self, query: str) -> list[Team]:
        if not query or not query.strip():
            raise ValueError("query is required")
        return await self._require_provider().search_teams(query.strip())

    async def get_team(self, team_id: int) -> Team:
        return await self._require_provider().fetch_team(team_id)

    async def get_team_players(self, team_id: int) -> list[Player]:
        return await self._require_provider().fetch_team_players(team_id)

    async def get_all_teams(self) -> list[TeamLogo]:
        if self._teams is None:
            raise MatchRelayError("No match provider configured")
        return await self._teams.teams()

    async def get_team_logos(self) -> dict[str, str]:
        if self._teams is None:
            raise MatchRelayError("No match provider configured")
        return await self._teams.logos()

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def health(self) -> dict[str, str]:
        return {
            "status": "running",
            "store": "connected" if self._store.is_connected else "disconnected",
            "notifications": "enabled" if self.notifications_enabled else "disabled",
        }
