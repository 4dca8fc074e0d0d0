import pytest

from petstat.aggregation import (
    combine_expected,
    combine_probabilities,
    combine_team_rate,
    shared_xp_per_hour,
    xp_contributions,
)
from petstat.data_loader import CreatureSnapshot
from petstat.registry import load_default_registry
from petstat.report import build_team_report


def test_probability_combination_is_complement_of_product():
    p1, p2 = 0.3, 0.2
    combined = combine_probabilities([p1, p2])
    assert combined == pytest.approx(1 - (1 - p1) * (1 - p2))
    assert max(p1, p2) < combined < p1 + p2


def test_probability_combination_edges():
    assert combine_probabilities([]) == 0.0
    assert combine_probabilities([None, 0.4]) == pytest.approx(0.4)
    assert combine_probabilities([1.0, 0.5]) == 1.0


def test_expected_combination_is_linear():
    r1, r2 = 5400.0, 53.76
    assert combine_expected([r1, r2]) == r1 + r2
    assert combine_expected([r1, None]) == r1
    assert combine_expected([]) == 0.0


def test_only_continuous_xp_abilities_contribute():
    team = [
        CreatureSnapshot(creature_id="a", strength=100, abilities=["XP Boost I", "Hatch XP Boost I", "Crop Eater"]),
        CreatureSnapshot(creature_id="b", strength=50, abilities=["Moonwalk"]),
    ]
    stats = xp_contributions(team, load_default_registry())
    assert [(s.creature_id, s.ability_id) for s in stats] == [("a", "PetXpBoost")]


def test_team_rate():
    team = [
        CreatureSnapshot(creature_id="a", strength=100, abilities=["PetXpBoost"]),
        CreatureSnapshot(creature_id="b", strength=80, abilities=["XP Boost II"]),
    ]
    rate = combine_team_rate(xp_contributions(team, load_default_registry()))
    # 30%/min -> 18 procs/h at 300 XP, plus 35%/min * 0.8 -> 16.8 procs/h at 320 XP
    assert rate.bonus_xp_per_hour == pytest.approx(5400 + 5376)
    assert rate.procs_per_hour == pytest.approx(18 + 16.8)
    p1, p2 = 0.3, 0.35 * 0.8
    assert rate.chance_per_minute == pytest.approx(1 - (1 - p1) * (1 - p2))
    assert shared_xp_per_hour(rate) == pytest.approx(3600 + 10776)


def test_shared_pool_identical_for_every_creature():
    team = [
        CreatureSnapshot(creature_id="a", species="Chicken", strength=70, xp=0, abilities=["XP Boost I"]),
        CreatureSnapshot(creature_id="b", species="Pig", strength=85, xp=0, abilities=["XP Boost II"]),
        CreatureSnapshot(creature_id="c", species="Bee", strength=60, xp=0, abilities=[]),
    ]
    report = build_team_report(team)
    expected = 3600 + report.team_rate.bonus_xp_per_hour
    assert report.shared_xp_per_hour == expected

    for creature in report.creatures:
        prog = creature.progression
        assert prog.time_to_next.hours == pytest.approx(prog.xp_needed_next / expected)

    # the ability-less creature levels at the full team rate
    bee = next(c for c in report.creatures if c.creature_id == "c")
    assert bee.progression.time_to_next.hours == pytest.approx(1440 / expected)
