"""Async client for the PandaScore match data API."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol

import aiohttp

from matchrelay._api import matches as _matches_api
from matchrelay._api import teams as _teams_api
from matchrelay._api import tournaments as _tournaments_api
from matchrelay._transport import HttpTransport, Transport
from matchrelay.config import RelayConfig
from matchrelay.exceptions import MatchRelayError
from matchrelay.models.match import Match
from matchrelay.models.standings import StandingEntry
from matchrelay.models.team import Player, Team
from matchrelay.models.tournament import Tournament


class MatchProvider(Protocol):
    """What the engine needs from the upstream provider."""

    async def fetch_schedule(self, now: datetime) -> list[Match]: ...

    async def fetch_live_window(self, now: datetime) -> list[Match]: ...

    async def fetch_tournaments(self, now: datetime) -> list[Tournament]: ...

    async def fetch_tournament(self, tournament_id: int) -> Tournament: ...

    async def fetch_standings(self, tournament_id: int) -> list[StandingEntry]: ...

    async def fetch_tournament_matches(self, tournament_id: int) -> list[Match]: ...

    async def search_teams(self, query: str) -> list[Team]: ...

    async def fetch_team(self, team_id: int) -> Team: ...

    async def fetch_team_players(self, team_id: int) -> list[Player]: ...

    async def fetch_team_directory(self) -> list[Team]: ...


class PandaScoreClient:
    """Async client for the provider endpoints the relay uses.

    Usage::

        async with PandaScoreClient(config) as provider:
            matches = await provider.fetch_schedule(datetime.now(UTC))
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PandaScoreClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MatchRelayError("Client not initialized. Use 'async with PandaScoreClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Matches
    # ------------------------------------------------------------------

    async def fetch_schedule(self, now: datetime | None = None) -> list[Match]:
        """Past week, next year and live matches."""
        return await _matches_api.fetch_schedule(self._require_transport(), self._config, now or datetime.now(UTC))

    async def fetch_live_window(self, now: datetime | None = None) -> list[Match]:
        """Matches starting within twelve hours of *now*."""
        return await _matches_api.fetch_live_window(self._require_transport(), self._config, now or datetime.now(UTC))

    async def fetch_tournament_matches(self, tournament_id: int) -> list[Match]:
        return await _matches_api.fetch_tournament_matches(self._require_transport(), self._config, tournament_id)

    # ------------------------------------------------------------------
    # Tournaments
    # ------------------------------------------------------------------

    async def fetch_tournaments(self, now: datetime | None = None) -> list[Tournament]:
        return await _tournaments_api.fetch_tournaments(
            self._require_transport(), self._config, now or datetime.now(UTC)
        )

    async def fetch_tournament(self, tournament_id: int) -> Tournament:
        return await _tournaments_api.fetch_tournament(self._require_transport(), self._config, tournament_id)

    async def fetch_standings(self, tournament_id: int) -> list[StandingEntry]:
        return await _tournaments_api.fetch_standings(self._require_transport(), tournament_id)

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    async def search_teams(self, query: str) -> list[Team]:
        return await _teams_api.search_teams(self._require_transport(), self._config, query)

    async def fetch_team(self, team_id: int) -> Team:
        return await _teams_api.fetch_team(self._require_transport(), self._config, team_id)

    async def fetch_team_players(self, team_id: int) -> list[Player]:
        return await _teams_api.fetch_team_players(self._require_transport(), self._config, team_id)

    async def fetch_team_directory(self) -> list[Team]:
        return await _teams_api.fetch_team_directory(self._require_transport(), self._config)
