"""Subscription model and stored-record decoding.

Subscriptions live in one hash, ``token -> JSON``. Two record shapes exist in
deployed stores:

* legacy: a plain JSON list of favorite team names;
* current: ``{"favoriteTeams": [...], "language": "xx"}``.

:func:`decode_subscription` turns either shape into a :class:`Subscription`
once, at read time. Nothing past the registry sees the legacy shape.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field, TypeAdapter, ValidationError, field_validator

from matchrelay._constants import DEFAULT_LANGUAGE
from matchrelay.exceptions import MalformedSubscriptionError
from matchrelay.models._base import ApiModel


def normalize_language(value: str | None, default: str = DEFAULT_LANGUAGE) -> str:
    if value is None:
        return default
    cleaned = value.strip().lower().replace("_", "-")
    return cleaned or default


def clean_team_list(teams: Any) -> list[str]:
    """Trim names, drop blanks and duplicates, keep first-seen order."""
    if not isinstance(teams, (list, tuple)):
        return []
    cleaned: list[str] = []
    seen: set[str] = set()
    for team in teams:
        if not isinstance(team, str):
            continue
        name = team.strip()
        key = name.casefold()
        if not name or key in seen:
            continue
        seen.add(key)
        cleaned.append(name)
    return cleaned


class SubscriptionRecord(ApiModel):
    """Stored value of a subscription (token is the hash field)."""

    favorite_teams: list[str]
    language: str | None = None

    @field_validator("favorite_teams")
    @classmethod
    def _non_empty(cls, value: list[str]) -> list[str]:
        cleaned = clean_team_list(value)
        if not cleaned:
            raise ValueError("favoriteTeams must contain at least one team name")
        return cleaned


_STORED_SHAPES: TypeAdapter[list[str] | SubscriptionRecord] = TypeAdapter(list[str] | SubscriptionRecord)


class Subscription(ApiModel):
    """A subscriber: delivery token, favorite teams and language."""

    token: str
    favorite_teams: list[str] = Field(min_length=1)
    language: str = DEFAULT_LANGUAGE

    def record(self) -> str:
        """JSON value written to the subscriptions hash."""
        stored = SubscriptionRecord(favorite_teams=self.favorite_teams, language=self.language)
        return json.dumps(stored.model_dump(by_alias=True), separators=(",", ":"))


def decode_subscription(token: str, raw: Any, *, default_language: str = DEFAULT_LANGUAGE) -> Subscription:
    """Decode a stored subscription value of either shape.

    Raises
    ------
    MalformedSubscriptionError
        If the value is not JSON, matches neither shape, or names no team.
    """
    data = raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedSubscriptionError("subscription value is not JSON", token=token) from exc

    try:
        decoded = _STORED_SHAPES.validate_python(data)
    except ValidationError as exc:
        raise MalformedSubscriptionError(
            f"subscription value has an unknown shape: {exc.error_count()} error(s)",
            token=token,
        ) from exc

    if isinstance(decoded, SubscriptionRecord):
        teams = decoded.favorite_teams
        language = normalize_language(decoded.language, default_language)
    else:
        teams = clean_team_list(decoded)
        language = default_language

    if not teams:
        raise MalformedSubscriptionError("subscription names no team", token=token)
    return Subscription(token=token, favorite_teams=teams, language=language)
