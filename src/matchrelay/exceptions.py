"""Custom exception hierarchy for matchrelay."""

from __future__ import annotations


class MatchRelayError(Exception):
    """Base exception for all matchrelay errors."""


class MatchRelayConfigError(MatchRelayError):
    """Invalid or missing configuration."""


class UpstreamError(MatchRelayError):
    """The match data provider could not serve a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TransientUpstreamError(UpstreamError):
    """Timeout, network failure, 5xx, rate limit or an unreadable body.

    The polling cycle that hit it is skipped and the previous cache keeps
    being served.
    """


class UpstreamRequestError(UpstreamError):
    """Provider rejected the request (4xx other than 429)."""


class StoreUnavailableError(MatchRelayError):
    """A mandatory write to the key-value store did not go through."""


class ServiceUnavailableError(MatchRelayError):
    """Neither the store nor the local fallback holds a matches snapshot."""


class InvalidArgumentError(MatchRelayError, ValueError):
    """Caller supplied a missing token or an empty favorites list."""


class MalformedSubscriptionError(MatchRelayError):
    """A stored subscription record could not be decoded."""

    def __init__(self, message: str, *, token: str = "") -> None:
        self.token = token
        super().__init__(message)
