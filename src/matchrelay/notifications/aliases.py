"""Team alias groups used when matching favorites against match opponents.

Format: canonical name -> equivalent names. A canonical name and its
equivalents form one group. Two names are aliases only if one group holds
both; groups never chain into each other.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from matchrelay.ingestion.normalize import normalize_name

DEFAULT_ALIASES: dict[str, frozenset[str]] = {
    "navi": frozenset({"natus vincere", "na'vi", "na`vi", "na vi"}),
    "faze": frozenset({"faze clan"}),
    "nip": frozenset({"ninjas in pyjamas"}),
    "g2": frozenset({"g2 esports"}),
    "vitality": frozenset({"team vitality"}),
    "mouz": frozenset({"mousesports"}),
    "liquid": frozenset({"team liquid"}),
    "big": frozenset({"big clan"}),
    "spirit": frozenset({"team spirit"}),
    "ence": frozenset({"ence esports"}),
}


class AliasTable:
    """Lookup of alias groups, built from a ``canonical -> aliases`` mapping."""

    def __init__(self, groups: Mapping[str, Iterable[str]] | None = None) -> None:
        source = DEFAULT_ALIASES if groups is None else groups
        self._groups: list[frozenset[str]] = []
        self._index: dict[str, list[int]] = {}
        for canonical, aliases in source.items():
            self.add_group(canonical, aliases)

    def add_group(self, canonical: str, aliases: Iterable[str]) -> None:
        members = frozenset(normalize_name(name) for name in (canonical, *aliases) if name and name.strip())
        if not members:
            return
        position = len(self._groups)
        self._groups.append(members)
        for member in members:
            self._index.setdefault(member, []).append(position)

    def groups_of(self, name: str) -> set[int]:
        return set(self._index.get(normalize_name(name), ()))

    def same_group(self, first: str, second: str) -> bool:
        return bool(self.groups_of(first) & self.groups_of(second))

    def __len__(self) -> int:
        return len(self._groups)
