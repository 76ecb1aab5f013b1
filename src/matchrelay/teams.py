"""In-memory team directory with logo lookup.

The directory is refreshed at most once per TTL. When a refresh fails, an
expired directory is served rather than nothing.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from matchrelay._constants import TEAMS_CACHE_TTL_SECONDS
from matchrelay.exceptions import UpstreamError
from matchrelay.models.team import TeamLogo
from matchrelay.provider import MatchProvider

_logger = logging.getLogger(__name__)


class TeamDirectory:
    def __init__(
        self,
        provider: MatchProvider,
        *,
        ttl_seconds: float = TEAMS_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._teams: list[TeamLogo] | None = None
        self._expires_at: float | None = None

    def _fresh(self) -> bool:
        return self._teams is not None and self._expires_at is not None and self._clock() < self._expires_at

    async def teams(self) -> list[TeamLogo]:
        """Teams that have a logo.

        Raises
        ------
        UpstreamError
            If the provider fails and no directory was ever loaded.
        """
        if self._fresh():
            assert self._teams is not None  # noqa: S101
            return list(self._teams)

        try:
            fetched = await self._provider.fetch_team_directory()
        except UpstreamError as exc:
            if self._teams is not None:
                _logger.warning("Team directory refresh failed (%s); serving expired copy", exc)
                return list(self._teams)
            raise

        self._teams = [TeamLogo.from_team(team) for team in fetched if team.image_url]
        self._expires_at = self._clock() + self._ttl_seconds
        _logger.info("Loaded %d teams with logos", len(self._teams))
        return list(self._teams)

    async def logos(self) -> dict[str, str]:
        """Logo URL by team name, and by acronym where one exists."""
        logos: dict[str, str] = {}
        for team in await self.teams():
            logos[team.name] = team.logo
            if team.acronym:
                logos[team.acronym] = team.logo
        return logos
