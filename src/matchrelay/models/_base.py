"""Base models for provider records and read-API payloads.

Provider records inherit from :class:`ProviderRecord`:

* keys stay snake_case, exactly as the provider sends them;
* fields the library does not model are kept (``extra="allow"``) so the
  cached records pass through to read clients unchanged;
* ``record()`` dumps the JSON-ready dict that is persisted in the store.

Read-API payloads inherit from :class:`ApiModel`, which maps snake_case
fields to the camelCase keys clients expect (``lastUpdate``,
``matchesPlayed``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from matchrelay.ingestion.normalize import parse_timestamp

ProviderTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces provider ISO-8601 strings to UTC datetimes."""


class ProviderRecord(BaseModel):
    """Base for records fetched from the match data provider."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
    )

    def record(self) -> dict[str, Any]:
        """JSON-ready dict including the provider fields that are not modelled."""
        return self.model_dump(mode="json")


class ApiModel(BaseModel):
    """Base for payloads served by the read API."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
