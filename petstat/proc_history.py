"""
PetStat - petstat/proc_history.py
Observed proc analysis: actual vs. expected rates, intervals and streaks.
=========================================================================
Version:     0.2
Stack:       Python 3.12 | NumPy
Status:      Stable. Stateless; callers supply the proc timestamps.

Streaks
-------
  A one-hour window is opened at every proc. Windows spanning less than
  MIN_STREAK_SECONDS are ignored. A window is hot when it holds at least
  HOT_RATIO x the expected procs (and at least MIN_HOT_PROCS), cold when it
  holds at most COLD_RATIO x expected (with at least MIN_COLD_EXPECTED
  expected). Overlapping windows collapse to the most extreme one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

# ============================================================
# DESIGN VARIABLE DEFAULTS
# ============================================================

HOUR_SECONDS: float = 3600.0
DAY_SECONDS: float = 86400.0
STREAK_WINDOW_SECONDS: float = 3600.0
MIN_STREAK_SECONDS: float = 1800.0
HOT_RATIO: float = 1.5
COLD_RATIO: float = 0.5
MIN_HOT_PROCS: int = 3
MIN_COLD_EXPECTED: float = 3.0
MAX_STREAKS: int = 5
CURRENT_STREAK_SECONDS: float = 300.0


@dataclass(frozen=True)
class ProcStreak:
    kind: str                 # "hot" | "cold"
    start: float
    end: float
    proc_count: int
    expected_procs: float
    variance: float           # percent deviation from expected
    duration: float


@dataclass(frozen=True)
class ProcHistoryStats:
    ability_id: str
    total_procs: int
    first_proc_at: float
    last_proc_at: float
    procs_per_hour: float
    procs_per_day: float
    expected_per_hour: float
    variance: Optional[float]
    mean_interval: Optional[float]
    min_interval: Optional[float]
    max_interval: Optional[float]
    recent_procs: int
    recent_variance: Optional[float]
    hot_streaks: List[ProcStreak] = field(default_factory=list)
    cold_streaks: List[ProcStreak] = field(default_factory=list)
    current_streak: Optional[ProcStreak] = None


def variance_pct(actual: float, expected: float) -> Optional[float]:
    if expected <= 0:
        return None
    return (actual - expected) / expected * 100


def _dedupe(streaks: List[ProcStreak]) -> List[ProcStreak]:
    kept: List[ProcStreak] = []
    for s in sorted(streaks, key=lambda s: abs(s.variance), reverse=True):
        if all(s.end < k.start or s.start > k.end for k in kept):
            kept.append(s)
    kept.sort(key=lambda s: s.start, reverse=True)
    return kept[:MAX_STREAKS]


def detect_streaks(times: np.ndarray, expected_per_hour: float) -> Tuple[List[ProcStreak], List[ProcStreak]]:
    """times must be sorted ascending, in seconds."""
    hot: List[ProcStreak] = []
    cold: List[ProcStreak] = []
    if len(times) < 2 or expected_per_hour <= 0:
        return hot, cold

    ends = np.searchsorted(times, times + STREAK_WINDOW_SECONDS, side="left")
    for i, start in enumerate(times):
        count = int(ends[i] - i)
        last = float(times[ends[i] - 1])
        duration = min(STREAK_WINDOW_SECONDS, last - float(start))
        if duration < MIN_STREAK_SECONDS:
            continue

        expected = expected_per_hour * duration / HOUR_SECONDS
        denom = max(1.0, expected)
        ratio = count / denom
        variance = (count - expected) / denom * 100

        if ratio >= HOT_RATIO and count >= MIN_HOT_PROCS:
            hot.append(ProcStreak("hot", float(start), last, count, expected, variance, duration))
        elif ratio <= COLD_RATIO and expected >= MIN_COLD_EXPECTED:
            cold.append(ProcStreak("cold", float(start), last, count, expected, variance, duration))

    return _dedupe(hot), _dedupe(cold)


def analyze_proc_history(
    ability_id: str,
    timestamps: Sequence[float],
    expected_per_hour: float,
    now: float,
) -> Optional[ProcHistoryStats]:
    """
    Compare observed procs (epoch seconds) with the expected hourly rate.
    Returns None when there are no procs to analyze.
    """
    if not timestamps:
        return None

    times = np.sort(np.asarray(timestamps, dtype=np.float64))
    first, last = float(times[0]), float(times[-1])
    total = int(times.size)

    elapsed = max(1.0, now - first)
    per_hour = total / (elapsed / HOUR_SECONDS)
    per_day = total / max(0.001, elapsed / DAY_SECONDS)

    intervals = np.diff(times)
    if intervals.size:
        mean_iv: Optional[float] = float(intervals.mean())
        min_iv: Optional[float] = float(intervals.min())
        max_iv: Optional[float] = float(intervals.max())
    else:
        mean_iv = min_iv = max_iv = None

    recent = int(np.count_nonzero(times >= now - HOUR_SECONDS))
    hot, cold = detect_streaks(times, expected_per_hour)

    current = None
    for candidates in (hot, cold):
        if candidates and now - candidates[0].end < CURRENT_STREAK_SECONDS:
            current = candidates[0]
            break

    return ProcHistoryStats(
        ability_id=ability_id,
        total_procs=total,
        first_proc_at=first,
        last_proc_at=last,
        procs_per_hour=per_hour,
        procs_per_day=per_day,
        expected_per_hour=expected_per_hour,
        variance=variance_pct(per_hour, expected_per_hour),
        mean_interval=mean_iv,
        min_interval=min_iv,
        max_interval=max_iv,
        recent_procs=recent,
        recent_variance=variance_pct(recent, expected_per_hour),
        hot_streaks=hot,
        cold_streaks=cold,
        current_streak=current,
    )
