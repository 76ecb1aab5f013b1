"""Tournament endpoints.

Endpoints:
  - /{game}/tournaments            (upcoming and running)
  - /{game}/tournaments/{id}       (detail)
  - /tournaments/{id}/standings    (not available for every tournament)
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import ValidationError

from matchrelay._api._common import fetch_list, fetch_object, time_range
from matchrelay._constants import TOURNAMENT_WINDOW
from matchrelay._transport import Transport
from matchrelay.config import RelayConfig
from matchrelay.exceptions import TransientUpstreamError
from matchrelay.models.standings import StandingEntry
from matchrelay.models.tournament import Tournament

_logger = logging.getLogger(__name__)


async def fetch_tournaments(transport: Transport, config: RelayConfig, now: datetime) -> list[Tournament]:
    """Tournaments starting between now and two months ahead (unfiltered)."""
    records = await fetch_list(
        transport,
        f"/{config.game}/tournaments",
        {
            "filter[running]": "true,false",
            "range[begin_at]": time_range(now, now + TOURNAMENT_WINDOW),
            "sort": "begin_at",
            "per_page": 20,
        },
    )
    tournaments: list[Tournament] = []
    for record in records:
        try:
            tournaments.append(Tournament.model_validate(record))
        except ValidationError:
            _logger.debug("Skipping malformed tournament record", exc_info=True)
    return tournaments


async def fetch_tournament(transport: Transport, config: RelayConfig, tournament_id: int) -> Tournament:
    record = await fetch_object(transport, f"/{config.game}/tournaments/{tournament_id}")
    try:
        return Tournament.model_validate(record)
    except ValidationError as exc:
        raise TransientUpstreamError(
            f"Unreadable tournament {tournament_id}",
            endpoint=f"/{config.game}/tournaments/{tournament_id}",
        ) from exc


async def fetch_standings(transport: Transport, tournament_id: int) -> list[StandingEntry]:
    records = await fetch_list(transport, f"/tournaments/{tournament_id}/standings")
    entries: list[StandingEntry] = []
    for record in records:
        try:
            entries.append(StandingEntry.model_validate(record))
        except ValidationError:
            _logger.debug("Skipping malformed standings row", exc_info=True)
    return entries
