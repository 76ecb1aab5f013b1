#!/usr/bin/env python3
"""Run one relay sync cycle against the live provider and dump the result.

Fetches the schedule, merges it into an in-process store and prints the
reconciled history, qualifying tournaments and (optionally) one standings
table. No push notifications are sent.

Usage
-----
Set environment variables and run::

    export PANDASCORE_API_KEY="your-token"
    python scripts/poll_once.py

Options::

    --live               Also fetch the twelve-hour live window
    --tournament ID      Also fetch standings for this tournament
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from matchrelay import MemoryBackend, PandaScoreClient, RelayConfig, RelayEngine, Store  # noqa: E402
from matchrelay.models import Match  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _match_line(match: Match) -> str:
    team1, team2 = match.team_names
    begin = match.begin_at.isoformat() if match.begin_at else "tbd"
    return f"  {match.id:>8}  {begin:<25}  {str(match.status):<12}  {team1} {match.score_string} {team2}"


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run one matchrelay sync cycle for debugging / development.",
    )
    parser.add_argument("--live", action="store_true", help="Also fetch the live window")
    parser.add_argument("--tournament", type=int, help="Also fetch standings for this tournament id")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = RelayConfig.from_env(notifications_enabled=False)
    result: dict[str, Any] = {"timestamp": datetime.now(UTC).isoformat()}
    out: list[str] = [_section("matchrelay poll_once"), f"  time      : {result['timestamp']}"]

    async with PandaScoreClient(config) as provider:
        store = Store(MemoryBackend(), timeout=config.store_timeout)
        async with RelayEngine(config, store=store, provider=provider) as engine:
            snapshot = await engine.refresh_matches()
            if snapshot is None:
                print("Provider unavailable; nothing fetched", file=sys.stderr)
                sys.exit(1)
            if args.live:
                await engine.refresh_live_matches()
                snapshot = await engine.get_matches()

            result["matches"] = snapshot.payload()
            out.append(_section(f"MATCHES ({snapshot.count})"))
            out.extend(_match_line(match) for match in snapshot.matches)

            tournaments = await engine.get_tournaments()
            result["tournaments"] = tournaments.payload()
            out.append(_section(f"TOURNAMENTS ({tournaments.count})"))
            out.extend(f"  {t.id:>8}  tier={t.tier or '-'}  {t.name}" for t in tournaments.tournaments)

            if args.tournament is not None:
                standings = await engine.get_standings(args.tournament)
                result["standings"] = standings.payload()
                out.append(_section(f"STANDINGS {args.tournament}"))
                out.extend(
                    f"  {entry.rank:>3}. {entry.team.name:<30} {entry.wins}W {entry.losses}L {entry.points}pts"
                    for entry in standings.standings
                )

    # ── Output ──
    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    if args.json_mode:
        if not args.output:
            print(payload)
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
