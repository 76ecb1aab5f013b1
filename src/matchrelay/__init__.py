"""matchrelay - Async polling cache and push-notification relay for esports match data."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("matchrelay")
except PackageNotFoundError:
    __version__ = "0+local"
from matchrelay.config import RelayConfig
from matchrelay.engine import RelayEngine
from matchrelay.exceptions import (
    InvalidArgumentError,
    MalformedSubscriptionError,
    MatchRelayConfigError,
    MatchRelayError,
    ServiceUnavailableError,
    StoreUnavailableError,
    TransientUpstreamError,
    UpstreamError,
    UpstreamRequestError,
)
from matchrelay.models import (
    BatchResponse,
    DispatchReport,
    Match,
    MatchesSnapshot,
    MatchStatus,
    PushMessage,
    SendResponse,
    StandingEntry,
    StandingsSnapshot,
    Subscription,
    Team,
    Tournament,
    TournamentsSnapshot,
)
from matchrelay.notifications import AliasTable, PushSender, TemplateCatalog
from matchrelay.provider import MatchProvider, PandaScoreClient
from matchrelay.state.backend import KeyValueBackend, MemoryBackend
from matchrelay.state.store import Store

__all__ = [
    "__version__",
    "AliasTable",
    "BatchResponse",
    "DispatchReport",
    "InvalidArgumentError",
    "KeyValueBackend",
    "MalformedSubscriptionError",
    "Match",
    "MatchProvider",
    "MatchRelayConfigError",
    "MatchRelayError",
    "MatchStatus",
    "MatchesSnapshot",
    "MemoryBackend",
    "PandaScoreClient",
    "PushMessage",
    "PushSender",
    "RelayConfig",
    "RelayEngine",
    "SendResponse",
    "ServiceUnavailableError",
    "StandingEntry",
    "StandingsSnapshot",
    "Store",
    "StoreUnavailableError",
    "Subscription",
    "Team",
    "TemplateCatalog",
    "Tournament",
    "TournamentsSnapshot",
    "TransientUpstreamError",
    "UpstreamError",
    "UpstreamRequestError",
]
