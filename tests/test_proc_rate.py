import pytest

from petstat.config import AnalyticsConfig
from petstat.data_loader import AbilityDef, EffectUnit, TriggerKind
from petstat.proc_rate import compute_multiplier, compute_proc_stats
from petstat.registry import load_default_registry


def _ability(ability_id):
    return load_default_registry().get(ability_id)


def test_multiplier_floor():
    for strength in range(0, 101):
        m = compute_multiplier(strength)
        assert 0.25 <= m <= 1.0
    assert compute_multiplier(100) == 1.0
    assert compute_multiplier(10) == 0.25
    assert compute_multiplier(62) == 0.62


def test_multiplier_missing_strength_uses_baseline():
    assert compute_multiplier(None) == 1.0
    assert compute_multiplier(None, AnalyticsConfig(default_strength=50)) == 0.5


def test_probability_cap_under_scaling():
    absurd = AbilityDef(id="Absurd", name="Absurd", trigger=TriggerKind.CONTINUOUS, base_probability=10_000)
    for strength in (0, 25, 62, 100):
        stats = compute_proc_stats(absurd, strength)
        assert stats.chance_per_second * 60 <= 0.95 + 1e-12
        assert stats.chance_per_minute <= 0.95 + 1e-12


def test_str62_crop_size_boost():
    stats = compute_proc_stats(_ability("ProduceScaleBoost"), 62)
    per_tick = 0.30 / 100 / 60 * 0.62

    assert stats.multiplier == 0.62
    assert stats.chance_per_second == pytest.approx(per_tick, rel=1e-12)
    # 0.30%/min * 0.62 = 0.186%/min -> 0.1116 procs/hour
    assert stats.procs_per_hour == pytest.approx(0.1116, rel=1e-12)
    assert stats.procs_per_day == pytest.approx(0.1116 * 24, rel=1e-12)
    # each proc is 6% * 0.62 = 3.72% size
    assert stats.effect_per_proc == pytest.approx(3.72, rel=1e-12)
    assert stats.effect_per_hour == pytest.approx(0.415152, rel=1e-12)
    assert not stats.strength_assumed


def test_xp_boost_full_strength():
    stats = compute_proc_stats(_ability("PetXpBoost"), 100)
    # 30%/min -> 0.5% per second -> 18 procs/hour at 300 XP each
    assert stats.procs_per_hour == pytest.approx(18.0)
    assert stats.effect_per_hour == pytest.approx(5400.0)
    assert stats.minutes_between_procs == pytest.approx(60 / 18)


def test_zero_probability_yields_zero_procs():
    stats = compute_proc_stats(_ability("HungerBoost"), 80)
    assert stats.procs_per_hour == 0.0
    assert stats.minutes_between_procs is None


def test_no_magnitude_is_null_effect():
    stats = compute_proc_stats(_ability("SeedFinderI"), 80)
    assert stats.procs_per_hour > 0
    assert stats.effect_per_proc is None
    assert stats.effect_per_hour is None


def test_missing_strength_is_flagged():
    stats = compute_proc_stats(_ability("PetXpBoost"), None)
    assert stats.strength_assumed
    assert stats.strength == 100.0
    assert stats.multiplier == 1.0


def test_event_trigger_has_no_hourly_rate():
    stats = compute_proc_stats(_ability("DoubleHarvest"), 50)
    assert stats.procs_per_hour == 0.0
    assert stats.chance_per_second == 0.0
    # 5% per harvest at half strength
    assert stats.chance_per_event == pytest.approx(0.025)


def test_effect_not_scaled_when_flagged():
    flat = AbilityDef(
        id="Flat", name="Flat", trigger=TriggerKind.CONTINUOUS, base_probability=60,
        effect_magnitude=10.0, effect_unit=EffectUnit.TIME, effect_scales_with_strength=False,
    )
    stats = compute_proc_stats(flat, 50)
    assert stats.effect_per_proc == 10.0
    assert stats.effect_per_hour == pytest.approx(stats.procs_per_hour * 10.0)
    assert stats.effect_unit == "time"
