"""Team endpoints.

Endpoints:
  - /{game}/teams               (search and directory listing)
  - /{game}/teams/{id}          (detail)
  - /teams/{id}/players         (active roster)
"""

from __future__ import annotations

import asyncio

from matchrelay._api._common import fetch_list, fetch_object
from matchrelay._constants import PAGE_SIZE, TEAM_DIRECTORY_PAGES
from matchrelay._transport import Transport
from matchrelay.config import RelayConfig
from matchrelay.models.team import Player, Team

# Pause between directory pages; the provider rate-limits bursts.
_PAGE_DELAY_S = 0.5


async def search_teams(transport: Transport, config: RelayConfig, query: str) -> list[Team]:
    records = await fetch_list(
        transport,
        f"/{config.game}/teams",
        {"search[name]": query, "per_page": 20},
        timeout=config.live_request_timeout,
    )
    return [Team.model_validate(record) for record in records]


async def fetch_team(transport: Transport, config: RelayConfig, team_id: int) -> Team:
    record = await fetch_object(transport, f"/{config.game}/teams/{team_id}", timeout=config.live_request_timeout)
    return Team.model_validate(record)


async def fetch_team_players(transport: Transport, config: RelayConfig, team_id: int) -> list[Player]:
    records = await fetch_list(
        transport,
        f"/teams/{team_id}/players",
        {"filter[active]": True},
        timeout=config.live_request_timeout,
    )
    return [Player.model_validate(record) for record in records]


async def fetch_team_directory(
    transport: Transport,
    config: RelayConfig,
    *,
    max_pages: int = TEAM_DIRECTORY_PAGES,
    page_delay: float = _PAGE_DELAY_S,
) -> list[Team]:
    """Recently modified teams, a few pages deep."""
    teams: list[Team] = []
    for page in range(1, max_pages + 1):
        records = await fetch_list(
            transport,
            f"/{config.game}/teams",
            {"per_page": PAGE_SIZE, "page": page, "sort": "-modified_at"},
        )
        if not records:
            break
        teams.extend(Team.model_validate(record) for record in records)
        if page < max_pages and page_delay > 0:
            await asyncio.sleep(page_delay)
    return teams
