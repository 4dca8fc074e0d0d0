import numpy as np
import pytest

from petstat.proc_history import analyze_proc_history, detect_streaks, variance_pct


def test_no_procs():
    assert analyze_proc_history("PetXpBoost", [], 18.0, now=100.0) is None


def test_steady_rate():
    times = [i * 600.0 for i in range(19)]  # every 10 minutes for 3 hours
    stats = analyze_proc_history("PetXpBoost", times, 6.0, now=10800.0)
    assert stats.total_procs == 19
    assert stats.procs_per_hour == pytest.approx(19 / 3)
    assert stats.variance == pytest.approx((19 / 3 - 6) / 6 * 100)
    assert stats.mean_interval == 600.0
    assert stats.min_interval == stats.max_interval == 600.0
    # procs at 7200..10800
    assert stats.recent_procs == 7
    assert stats.hot_streaks == []
    assert stats.cold_streaks == []


def test_single_proc_has_no_intervals():
    stats = analyze_proc_history("PetXpBoost", [50.0], 18.0, now=3650.0)
    assert stats.mean_interval is None
    assert stats.procs_per_hour == pytest.approx(1.0)


def test_hot_streak():
    times = [i * 240.0 for i in range(10)]  # 10 procs in 36 minutes, expected 1/h
    stats = analyze_proc_history("Lucky", times, 1.0, now=2200.0)
    assert len(stats.hot_streaks) == 1
    streak = stats.hot_streaks[0]
    assert streak.kind == "hot"
    assert streak.proc_count == 10
    assert streak.start == 0.0
    assert stats.current_streak == streak


def test_cold_streak():
    hot, cold = detect_streaks(np.asarray([0.0, 3000.0]), 10.0)
    assert hot == []
    assert len(cold) == 1
    assert cold[0].proc_count == 2
    assert cold[0].expected_procs == pytest.approx(10 * 3000 / 3600)


def test_no_expected_rate():
    stats = analyze_proc_history("Event", [0.0, 10.0, 20.0], 0.0, now=30.0)
    assert stats.variance is None
    assert stats.recent_variance is None
    assert stats.hot_streaks == []


def test_variance_pct():
    assert variance_pct(15, 10) == 50
    assert variance_pct(5, 0) is None
