"""Push message and delivery report models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Transport error codes that mean the token will never work again.
PERMANENT_ERROR_CODES: frozenset[str] = frozenset(
    {
        "messaging/registration-token-not-registered",
        "messaging/invalid-registration-token",
        "messaging/invalid-argument",
        "registration-token-not-registered",
        "invalid-registration-token",
        "invalid-argument",
        "unregistered",
    }
)


class PushMessage(BaseModel):
    """One multicast send: same title/body/data for every token."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict)
    tokens: list[str] = Field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        """Multicast payload in the transport's wire shape."""
        return {
            "notification": {"title": self.title, "body": self.body},
            "data": dict(self.data),
            "tokens": list(self.tokens),
        }


class SendResponse(BaseModel):
    """Delivery outcome for one token, in the same order as the request tokens."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error_code: str | None = None
    message_id: str | None = None

    @property
    def is_permanent_failure(self) -> bool:
        """A failure without a code is treated as permanent."""
        if self.success:
            return False
        return self.error_code is None or self.error_code in PERMANENT_ERROR_CODES


class BatchResponse(BaseModel):
    """Per-token results of a multicast send."""

    model_config = ConfigDict(frozen=True)

    responses: list[SendResponse] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for response in self.responses if response.success)

    @property
    def failure_count(self) -> int:
        return len(self.responses) - self.success_count


class DispatchReport(BaseModel):
    """What a dispatch did. Always returned, never raised."""

    match_id: int
    kind: str
    sent: int = 0
    failed: int = 0
    pruned: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
