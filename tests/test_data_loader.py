import math

import pytest
from pydantic import ValidationError

from petstat.data_loader import (
    AbilityCategory,
    CreatureSnapshot,
    TriggerKind,
    get_ability_defs,
    get_species_defs,
    load_ability_defs,
    load_roster,
)


def test_load_bundled_abilities():
    abilities = get_ability_defs()
    ids = [a.id for a in abilities]
    assert len(ids) == len(set(ids))

    scale = next(a for a in abilities if a.id == "ProduceScaleBoost")
    assert scale.base_probability == 0.30
    assert scale.effect_magnitude == 6.0
    assert scale.trigger is TriggerKind.CONTINUOUS
    assert scale.dynamic_value


def test_xp_abilities_are_continuous():
    xp = [a for a in get_ability_defs() if a.category == AbilityCategory.XP and a.trigger.is_continuous]
    assert {a.id for a in xp} == {"PetXpBoost", "PetXpBoostII"}


def test_load_bundled_species():
    species = {s.id: s for s in get_species_defs()}
    assert len(species) == 15
    assert species["turtle"].hunger_depletion_minutes == 90
    assert species["capybara"].hours_to_mature == 144
    assert species["worm"].max_scale == 2.0


def test_missing_table_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ability_defs(tmp_path / "nope.toml")


def test_malformed_entry_rejected(tmp_path):
    path = tmp_path / "abilities.toml"
    path.write_text(
        '[[abilities]]\nid = "Bad"\nname = "Bad"\ntrigger = "continuous"\nbase_probability = -1\n'
    )
    with pytest.raises(ValidationError):
        load_ability_defs(path)


def test_unknown_trigger_rejected(tmp_path):
    path = tmp_path / "abilities.toml"
    path.write_text('[[abilities]]\nid = "Bad"\nname = "Bad"\ntrigger = "on_sneeze"\n')
    with pytest.raises(ValidationError):
        load_ability_defs(path)


def test_snapshot_from_loose_mapping():
    snap = CreatureSnapshot.from_mapping({
        "petId": 17,
        "species": "Chicken",
        "strength": "62",
        "xp": 1500,
        "hunger_pct": 140,
        "abilities": ["XP Boost I", None, "", 5, "Crop Eater"],
    })
    assert snap.creature_id == "17"
    assert snap.strength == 62.0
    assert snap.xp == 1500.0
    assert snap.hunger_pct == 100.0
    assert snap.abilities == ["XP Boost I", "Crop Eater"]


@pytest.mark.parametrize("bad", ["abc", True, math.nan, math.inf, 250, -3])
def test_snapshot_bad_strength_is_unknown(bad):
    snap = CreatureSnapshot.from_mapping({"id": "x", "strength": bad})
    assert snap.strength is None


def test_snapshot_label_fallback():
    assert CreatureSnapshot(creature_id="c1").label == "c1"
    assert CreatureSnapshot(creature_id="c1", species="Bee").label == "Bee"
    assert CreatureSnapshot(creature_id="c1", species="Bee", name="Buzz").label == "Buzz"


def test_load_roster(tmp_path):
    path = tmp_path / "roster.toml"
    path.write_text(
        '[[creatures]]\n'
        'creature_id = "a"\n'
        'species = "Chicken"\n'
        'strength = 70\n'
        'xp = 0\n'
        'abilities = ["XP Boost I"]\n'
        '\n'
        '[[creatures]]\n'
        'creature_id = "b"\n'
        'species = "Worm"\n'
    )
    roster = load_roster(path)
    assert [c.creature_id for c in roster] == ["a", "b"]
    assert roster[0].abilities == ["XP Boost I"]
    assert roster[1].strength is None


def test_load_roster_keeps_creatures_with_bad_fields(tmp_path):
    path = tmp_path / "roster.toml"
    path.write_text(
        '[[creatures]]\n'
        'creature_id = "a"\n'
        'species = "Chicken"\n'
        'strength = 80\n'
        '\n'
        '[[creatures]]\n'
        'creature_id = "b"\n'
        'species = "Chicken"\n'
        'strength = 101\n'
        'xp = -5\n'
        'abilities = "XP Boost I"\n'
        'updated_at = 2026-01-02T03:04:05Z\n'
    )
    roster = load_roster(path)
    assert [c.creature_id for c in roster] == ["a", "b"]
    assert roster[0].strength == 80
    assert roster[1].strength is None
    assert roster[1].xp is None
    assert roster[1].abilities == []
    assert roster[1].updated_at.year == 2026


def test_load_roster_without_ids_is_stable(tmp_path):
    path = tmp_path / "roster.toml"
    path.write_text(
        '[[creatures]]\nspecies = "Bee"\nname = "Buzz"\n'
        '\n'
        '[[creatures]]\nspecies = "Bee"\nname = "Buzz"\n'
    )
    first = [c.creature_id for c in load_roster(path)]
    second = [c.creature_id for c in load_roster(path)]
    assert first == second == ["Bee:Buzz:0", "Bee:Buzz:1"]


def test_snapshot_fallback_id_is_deterministic():
    payload = {"species": "Chicken", "name": "Clucky", "strength": 70}
    assert CreatureSnapshot.from_mapping(payload).creature_id == "Chicken:Clucky"
    assert CreatureSnapshot.from_mapping(dict(payload)).creature_id == "Chicken:Clucky"
    assert CreatureSnapshot.from_mapping({}, index=3).creature_id == "creature:3"


def test_load_roster_rejects_non_array(tmp_path):
    path = tmp_path / "roster.toml"
    path.write_text('creatures = "nope"\n')
    with pytest.raises(ValueError):
        load_roster(path)
