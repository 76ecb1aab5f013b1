"""Data models for provider records and read-API payloads."""

from matchrelay.models._base import ApiModel, ProviderRecord, ProviderTimestamp
from matchrelay.models.match import Match, MatchResult, MatchStatus, Opponent
from matchrelay.models.notification import (
    PERMANENT_ERROR_CODES,
    BatchResponse,
    DispatchReport,
    PushMessage,
    SendResponse,
)
from matchrelay.models.snapshots import MatchesSnapshot, StandingsSnapshot, TournamentsSnapshot
from matchrelay.models.standings import StandingEntry
from matchrelay.models.subscription import Subscription, SubscriptionRecord, decode_subscription
from matchrelay.models.team import Player, Team, TeamLogo
from matchrelay.models.tournament import Tournament

__all__ = [
    "ApiModel",
    "BatchResponse",
    "DispatchReport",
    "Match",
    "MatchResult",
    "MatchStatus",
    "MatchesSnapshot",
    "Opponent",
    "PERMANENT_ERROR_CODES",
    "Player",
    "ProviderRecord",
    "ProviderTimestamp",
    "PushMessage",
    "SendResponse",
    "StandingEntry",
    "StandingsSnapshot",
    "Subscription",
    "SubscriptionRecord",
    "Team",
    "TeamLogo",
    "Tournament",
    "TournamentsSnapshot",
    "decode_subscription",
]
