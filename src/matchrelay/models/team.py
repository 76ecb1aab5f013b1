"""Team and player models."""

from __future__ import annotations

from pydantic import Field

from matchrelay.models._base import ProviderRecord


class Team(ProviderRecord):
    """A team as referenced by matches, searches and standings."""

    id: int | None = None
    """Provider team id."""
    name: str = ""
    """Display name (e.g. ``"Natus Vincere"``)."""
    acronym: str | None = None
    """Short name (e.g. ``"NAVI"``)."""
    image_url: str | None = None
    """Logo URL."""
    slug: str | None = None
    location: str | None = None
    """Country code of the organisation."""


class Player(ProviderRecord):
    """A rostered player, passed through from the provider."""

    id: int | None = None
    name: str = ""
    """In-game nickname."""
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    nationality: str | None = None
    image_url: str | None = None
    active: bool | None = Field(default=None)


class TeamLogo(ProviderRecord):
    """Compact team entry used by the team directory."""

    id: int | None = None
    name: str = ""
    acronym: str | None = None
    logo: str = ""

    @classmethod
    def from_team(cls, team: Team) -> TeamLogo:
        return cls(id=team.id, name=team.name, acronym=team.acronym, logo=team.image_url or "")
