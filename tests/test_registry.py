from __future__ import annotations

import json

import pytest

from matchrelay._constants import TOKENS_KEY
from matchrelay.exceptions import InvalidArgumentError, StoreUnavailableError
from matchrelay.notifications.aliases import AliasTable
from matchrelay.notifications.registry import SubscriptionRegistry
from matchrelay.state.backend import MemoryBackend
from matchrelay.state.store import Store


def _registry(store: Store | None = None) -> SubscriptionRegistry:
    return SubscriptionRegistry(store if store is not None else Store(MemoryBackend()))


@pytest.mark.asyncio
async def test_register_stores_current_record_shape() -> None:
    store = Store(MemoryBackend())
    registry = _registry(store)

    result = await registry.register(" tok-1 ", ["NAVI", "navi", " FaZe "], "ES")

    assert result == {"success": True}
    raw = await store.hget(TOKENS_KEY, "tok-1")
    assert json.loads(raw) == {"favoriteTeams": ["NAVI", "FaZe"], "language": "es"}


@pytest.mark.asyncio
async def test_register_defaults_language() -> None:
    registry = _registry()
    await registry.register("tok-1", ["NAVI"])

    subscription = await registry.get("tok-1")
    assert subscription is not None
    assert subscription.language == "en"


@pytest.mark.asyncio
async def test_register_overwrites_previous_subscription() -> None:
    registry = _registry()
    await registry.register("tok-1", ["NAVI"], "en")
    await registry.register("tok-1", ["G2"], "fr")

    subscription = await registry.get("tok-1")
    assert subscription is not None
    assert subscription.favorite_teams == ["G2"]
    assert subscription.language == "fr"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("token", "teams", "language"),
    [
        (None, ["NAVI"], None),
        ("   ", ["NAVI"], None),
        ("tok", [], None),
        ("tok", None, None),
        ("tok", ["", "  "], None),
        ("tok", "NaVi", None),
        ("tok", {"NaVi": True}, None),
        ("tok", ["NaVi"], 7),
    ],
)
async def test_register_rejects_invalid_arguments(token, teams, language) -> None:
    store = Store(MemoryBackend())
    with pytest.raises(InvalidArgumentError):
        await _registry(store).register(token, teams, language)
    assert await store.hgetall(TOKENS_KEY) == {}


@pytest.mark.asyncio
async def test_register_fails_loudly_when_store_is_down() -> None:
    with pytest.raises(StoreUnavailableError):
        await _registry(Store(None)).register("tok", ["NAVI"])


@pytest.mark.asyncio
async def test_unregister_is_idempotent() -> None:
    registry = _registry()
    await registry.register("tok-1", ["NAVI"])

    assert await registry.unregister("tok-1") == {"success": True}
    assert await registry.unregister("tok-1") == {"success": True}
    assert await registry.unregister(None) == {"success": True}
    assert await registry.get("tok-1") is None


def test_matches_team_uses_case_and_alias_groups() -> None:
    registry = _registry()

    assert registry.matches_team("navi", "NAVI")
    assert registry.matches_team("Natus Vincere", "NAVI")
    assert registry.matches_team("NaVi", "natus vincere")
    assert registry.matches_team("FaZe", "FaZe Clan")
    assert not registry.matches_team("NAVI", "FaZe")


def test_alias_groups_do_not_chain() -> None:
    aliases = AliasTable({"alpha": ["beta"], "beta": ["gamma"]})
    registry = SubscriptionRegistry(Store(MemoryBackend()), aliases=aliases)

    assert registry.matches_team("alpha", "beta")
    assert registry.matches_team("beta", "gamma")
    assert not registry.matches_team("alpha", "gamma")


@pytest.mark.asyncio
async def test_resolve_interested_tokens_groups_by_language() -> None:
    registry = _registry()
    await registry.register("tok-en", ["Natus Vincere"], "en")
    await registry.register("tok-es", ["faze"], "es")
    await registry.register("tok-other", ["G2"], "en")

    groups = await registry.resolve_interested_tokens(("NAVI", "FaZe"))

    assert groups == {"en": ["tok-en"], "es": ["tok-es"]}


@pytest.mark.asyncio
async def test_legacy_and_malformed_records() -> None:
    store = Store(MemoryBackend())
    await store.hset(TOKENS_KEY, "tok-legacy", json.dumps(["NAVI"]))
    await store.hset(TOKENS_KEY, "tok-broken", "{not json")
    await store.hset(TOKENS_KEY, "tok-empty", json.dumps({"favoriteTeams": []}))
    registry = _registry(store)

    subscriptions = await registry.subscriptions()
    assert [subscription.token for subscription in subscriptions] == ["tok-legacy"]
    assert subscriptions[0].language == "en"

    groups = await registry.resolve_interested_tokens(("Natus Vincere", "G2"))
    assert groups == {"en": ["tok-legacy"]}
