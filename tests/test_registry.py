import pytest

from petstat.data_loader import AbilityDef, TriggerKind
from petstat.registry import AbilityRegistry, load_default_registry, parse_tier


@pytest.fixture
def registry():
    return load_default_registry()


@pytest.mark.parametrize("raw", ["PetXpBoost", "XP Boost I", "xp boost 1", "  Pet XP Boost I  ", "PETXPBOOST"])
def test_resolve_by_id_name_or_alias(registry, raw):
    assert registry.resolve(raw).id == "PetXpBoost"


@pytest.mark.parametrize("raw", ["Telekinesis", "", "   ", None])
def test_unknown_resolves_to_none(registry, raw):
    assert registry.resolve(raw) is None


def test_resolve_does_not_mutate(registry):
    before = len(registry)
    registry.resolve("Not An Ability")
    assert len(registry) == before
    assert "Not An Ability" not in registry


def test_later_definition_wins():
    a = AbilityDef(id="A", name="Shared", trigger=TriggerKind.CONTINUOUS, base_probability=1)
    b = AbilityDef(id="B", name="Shared", trigger=TriggerKind.CONTINUOUS, base_probability=2)
    reg = AbilityRegistry.define([a, b])
    assert reg.resolve("shared").id == "B"
    assert reg.resolve("a").id == "A"


@pytest.mark.parametrize("ability_id, expected", [
    ("SeedFinderIV", (4, "Seed Finder")),
    ("PetXpBoostII", (2, "XP Boost")),
    ("ProduceScaleBoost", (1, "Crop Size Boost")),
    ("EggGrowthBoostIII", (3, "Egg Growth Boost")),
    ("Copycat", (1, "Copycat")),
])
def test_parse_tier(registry, ability_id, expected):
    assert parse_tier(registry.get(ability_id)) == expected


def test_parse_tier_from_digit():
    ability = AbilityDef(id="Foo2", name="Foo 2", trigger=TriggerKind.ON_HATCH)
    assert parse_tier(ability) == (2, "Foo")
