"""Tournament model."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import field_validator

from matchrelay._constants import PRIZE_POOL_THRESHOLD, QUALIFYING_TIERS
from matchrelay.ingestion.normalize import leading_int
from matchrelay.models._base import ProviderRecord, ProviderTimestamp


class Tournament(ProviderRecord):
    """A tournament (one stage of a league serie)."""

    id: int
    name: str = ""
    tier: str | None = None
    """Provider tier classification, ``"s"`` being the highest."""
    prizepool: str | None = None
    """Free-text prize pool (e.g. ``"250000 United States Dollar"``)."""
    begin_at: ProviderTimestamp = None
    end_at: ProviderTimestamp = None

    @field_validator("prizepool", mode="before")
    @classmethod
    def _prizepool_as_text(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @property
    def prize_pool_amount(self) -> int | None:
        return leading_int(self.prizepool)

    def qualifies(
        self,
        *,
        tiers: Iterable[str] = QUALIFYING_TIERS,
        prize_pool_threshold: int = PRIZE_POOL_THRESHOLD,
    ) -> bool:
        """Whether the tournament belongs in the cached tournament list."""
        if self.tier and self.tier.strip().lower() in {tier.lower() for tier in tiers}:
            return True
        amount = self.prize_pool_amount
        return amount is not None and amount > prize_pool_threshold
