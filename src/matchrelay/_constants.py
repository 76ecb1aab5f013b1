"""Internal constants shared across the library."""

from datetime import timedelta

BASE_URL = "https://api.pandascore.co"
DEFAULT_GAME = "csgo"
USER_AGENT = "matchrelay/0.3"

# ------------------------------------------------------------------
# Store key schema (shared with deployed readers, do not rename)
# ------------------------------------------------------------------

MATCHES_KEY = "cs2:matches"
TOURNAMENTS_KEY = "cs2:tournaments"
STANDINGS_KEY_PREFIX = "cs2:standings:"
TOKENS_KEY = "fcm:tokens"
MATCH_STATUS_KEY = "match:statuses"
MATCH_SCORE_KEY = "match:scores"
REMINDERS_SENT_KEY = "match:reminders"


def standings_key(tournament_id: int | str) -> str:
    return f"{STANDINGS_KEY_PREFIX}{tournament_id}"


# ------------------------------------------------------------------
# Cache lifetimes
# ------------------------------------------------------------------

MATCHES_TTL_SECONDS = int(timedelta(days=7).total_seconds())
CACHE_TTL_SECONDS = 1800
TEAMS_CACHE_TTL_SECONDS = 24 * 3600

# ------------------------------------------------------------------
# Provider query windows
# ------------------------------------------------------------------

PAST_WINDOW = timedelta(days=7)
FUTURE_WINDOW = timedelta(days=365)
LIVE_WINDOW = timedelta(hours=12)
TOURNAMENT_WINDOW = timedelta(days=61)
SCHEDULE_PAGES = 2
TEAM_DIRECTORY_PAGES = 3
PAGE_SIZE = 100

# ------------------------------------------------------------------
# Notification rules
# ------------------------------------------------------------------

REMINDER_WINDOW = timedelta(minutes=15)
DEFAULT_LANGUAGE = "en"

# ------------------------------------------------------------------
# Tournament qualification
# ------------------------------------------------------------------

QUALIFYING_TIERS: tuple[str, ...] = ("s", "a", "b")
PRIZE_POOL_THRESHOLD = 10_000
