"""Match endpoints.

Endpoints:
  - /{game}/matches          (time-window listings)
  - /{game}/matches/running  (everything live right now)
"""

from __future__ import annotations

import logging
from datetime import datetime

from matchrelay._api._common import fetch_list, fetch_pages, time_range
from matchrelay._constants import FUTURE_WINDOW, LIVE_WINDOW, PAGE_SIZE, PAST_WINDOW, SCHEDULE_PAGES
from matchrelay._transport import Transport
from matchrelay.config import RelayConfig
from matchrelay.exceptions import UpstreamError
from matchrelay.ingestion.merge import parse_match_records
from matchrelay.models.match import Match

_logger = logging.getLogger(__name__)

_STATUS_FILTER = "running,not_started,finished"


async def fetch_schedule(transport: Transport, config: RelayConfig, now: datetime) -> list[Match]:
    """Past week, next year and every running match, in that order.

    The running listing is best-effort: its failure only costs this cycle's
    live refresh. Failures of the two window listings propagate.
    """
    endpoint = f"/{config.game}/matches"

    future = await fetch_pages(
        transport,
        endpoint,
        {
            "sort": "begin_at",
            "filter[status]": _STATUS_FILTER,
            "range[begin_at]": time_range(now, now + FUTURE_WINDOW),
            "per_page": PAGE_SIZE,
        },
        max_pages=SCHEDULE_PAGES,
    )
    _logger.debug("Fetched %d future matches", len(future))

    past = await fetch_pages(
        transport,
        endpoint,
        {
            "sort": "-begin_at",
            "filter[status]": _STATUS_FILTER,
            "range[begin_at]": time_range(now - PAST_WINDOW, now),
            "per_page": PAGE_SIZE,
        },
        max_pages=SCHEDULE_PAGES,
    )
    _logger.debug("Fetched %d past matches", len(past))

    try:
        running = await fetch_running(transport, config)
    except UpstreamError as exc:
        _logger.warning("Could not fetch running matches: %s", exc)
        running = []

    matches = parse_match_records(past) + parse_match_records(future) + running
    _logger.info(
        "Fetched %d matches from provider (%d past, %d future, %d live)",
        len(matches),
        len(past),
        len(future),
        len(running),
    )
    return matches


async def fetch_running(transport: Transport, config: RelayConfig) -> list[Match]:
    records = await fetch_list(transport, f"/{config.game}/matches/running", {"per_page": PAGE_SIZE})
    return parse_match_records(records)


async def fetch_live_window(transport: Transport, config: RelayConfig, now: datetime) -> list[Match]:
    """One page of matches starting within twelve hours either side of *now*."""
    records = await fetch_list(
        transport,
        f"/{config.game}/matches",
        {
            "sort": "begin_at",
            "filter[status]": _STATUS_FILTER,
            "range[begin_at]": time_range(now - LIVE_WINDOW, now + LIVE_WINDOW),
            "per_page": PAGE_SIZE,
        },
        timeout=config.live_request_timeout,
    )
    return parse_match_records(records)


async def fetch_tournament_matches(transport: Transport, config: RelayConfig, tournament_id: int) -> list[Match]:
    records = await fetch_list(
        transport,
        f"/{config.game}/matches",
        {"filter[tournament_id]": tournament_id, "sort": "-begin_at", "per_page": 50},
    )
    return parse_match_records(records)
