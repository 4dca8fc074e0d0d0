"""
PetStat - petstat/efficiency.py
Efficiency ranking and observed XP gain: score, rank and level-estimate creatures.
==================================================================================
Version:     0.1
Stack:       Python 3.12 | NumPy
Status:      Stable. Stateless; callers keep the XP samples.

Score
-----
  Each of XP/h, procs/h and value/h is scaled against a "very good" reference
  rate and clamped to 0..100. The score is the weighted sum
      0.5 * value + 0.3 * xp + 0.2 * procs
  so a creature that maxes all three scores 100.

Observed XP rate
----------------
  XP samples are (epoch_seconds, xp) pairs for one creature. Only the newest
  MAX_XP_SAMPLES are used; the rate is last-minus-first over the span between
  them. A flat or falling XP total gives no rate (the creature was swapped out
  or the reading reset), never a negative one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np

from petstat.components import CreatureReport, TeamReport
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import SpeciesDef

logger = logging.getLogger(__name__)

# ============================================================
# DESIGN VARIABLE DEFAULTS
# ============================================================

REFERENCE_XP_PER_HOUR: float = 5000.0
REFERENCE_PROCS_PER_HOUR: float = 20.0
REFERENCE_VALUE_PER_HOUR: float = 1_000_000.0

VALUE_WEIGHT: float = 0.5
XP_WEIGHT: float = 0.3
PROCS_WEIGHT: float = 0.2

MIN_XP_SAMPLES: int = 2
MAX_XP_SAMPLES: int = 10
MIN_TRACKING_SECONDS: float = 300.0

# (min samples, min span seconds) per confidence tier, best first
HIGH_CONFIDENCE: Tuple[int, float] = (5, 300.0)
MEDIUM_CONFIDENCE: Tuple[int, float] = (3, 120.0)

# Thresholds for the human-readable "best because" line
REASON_XP_PER_HOUR: float = 1000.0
REASON_VALUE_PER_HOUR: float = 100_000.0
REASON_PROCS_PER_HOUR: float = 5.0

XpSample = Tuple[float, float]    # (epoch seconds, total xp)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass(frozen=True)
class XpGainRate:
    xp_per_hour: Optional[float]
    samples: int
    span_seconds: float
    xp_gained: float
    confidence: Confidence


@dataclass(frozen=True)
class LevelEstimate:
    level: Optional[int]
    max_level: int
    confidence: Confidence
    total_xp_needed: Optional[float]
    xp_per_hour: Optional[float]


@dataclass(frozen=True)
class CreatureEfficiency:
    creature_id: str
    label: str
    species: Optional[str]
    xp_per_hour: float
    procs_per_hour: float
    value_per_hour: float
    top_ability: Optional[str]
    score: float


@dataclass(frozen=True)
class EfficiencyRankings:
    by_score: List[CreatureEfficiency] = field(default_factory=list)
    by_xp_rate: List[CreatureEfficiency] = field(default_factory=list)
    by_value: List[CreatureEfficiency] = field(default_factory=list)
    by_procs: List[CreatureEfficiency] = field(default_factory=list)

    @property
    def best(self) -> Optional[CreatureEfficiency]:
        if not self.by_score or self.by_score[0].score <= 0:
            return None
        return self.by_score[0]


def _scaled(rate: float, reference: float) -> float:
    return min(100.0, max(0.0, rate) / reference * 100)


def efficiency_score(xp_per_hour: float, procs_per_hour: float, value_per_hour: float) -> float:
    return (VALUE_WEIGHT * _scaled(value_per_hour, REFERENCE_VALUE_PER_HOUR)
            + XP_WEIGHT * _scaled(xp_per_hour, REFERENCE_XP_PER_HOUR)
            + PROCS_WEIGHT * _scaled(procs_per_hour, REFERENCE_PROCS_PER_HOUR))


def _confidence(samples: int, span_seconds: float) -> Confidence:
    if samples >= HIGH_CONFIDENCE[0] and span_seconds >= HIGH_CONFIDENCE[1]:
        return Confidence.HIGH
    if samples >= MEDIUM_CONFIDENCE[0] and span_seconds >= MEDIUM_CONFIDENCE[1]:
        return Confidence.MEDIUM
    return Confidence.LOW


def xp_gain_rate(samples: Sequence[XpSample]) -> XpGainRate:
    """Observed XP per hour from the newest samples. Order of input does not matter."""
    if len(samples) < MIN_XP_SAMPLES:
        return XpGainRate(None, len(samples), 0.0, 0.0, Confidence.NONE)

    data = np.asarray(samples, dtype=np.float64)
    data = data[np.argsort(data[:, 0], kind="stable")][-MAX_XP_SAMPLES:]
    span = float(data[-1, 0] - data[0, 0])
    gained = float(data[-1, 1] - data[0, 1])
    count = int(data.shape[0])

    if span <= 0 or gained <= 0:
        return XpGainRate(None, count, max(0.0, span), max(0.0, gained), Confidence.NONE)
    return XpGainRate(gained / span * 3600, count, span, gained, _confidence(count, span))


def session_xp_rate(samples: Sequence[XpSample]) -> Optional[float]:
    """
    XP/h over a tracking session, or None until MIN_TRACKING_SECONDS have
    passed.
    """
    rate = xp_gain_rate(samples)
    if rate.xp_per_hour is None or rate.span_seconds < MIN_TRACKING_SECONDS:
        return None
    return rate.xp_per_hour


def estimate_level(
    xp: Optional[float],
    species: Optional[SpeciesDef],
    samples: Sequence[XpSample],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> LevelEstimate:
    """
    Level (0..level_allowance) implied by total xp when only the observed XP
    rate is known. All levels are the same XP apart, so the creature has
    matured after rate * hours_to_mature XP.
    """
    max_level = config.level_allowance
    none = LevelEstimate(None, max_level, Confidence.NONE, None, None)
    if xp is None:
        return none

    rate = xp_gain_rate(samples)
    if rate.xp_per_hour is None:
        return none
    if species is None or species.hours_to_mature is None:
        return LevelEstimate(None, max_level, Confidence.NONE, None, rate.xp_per_hour)

    total = rate.xp_per_hour * species.hours_to_mature
    level = min(max_level, max(0.0, xp / total * max_level))
    return LevelEstimate(math.floor(level + 0.5), max_level, rate.confidence, total, rate.xp_per_hour)


def creature_efficiency(report: CreatureReport, xp_per_hour: Optional[float]) -> CreatureEfficiency:
    """
    Expected procs and value per hour summed over the creature's known
    abilities. xp_per_hour is the rate to score on (observed or shared);
    None counts as zero.
    """
    procs = 0.0
    value = 0.0
    top: Optional[str] = None
    top_value = 0.0
    for ab in report.abilities:
        if not ab.known or ab.stats is None:
            continue
        procs += ab.stats.procs_per_hour
        if ab.value_per_hour is not None:
            value += ab.value_per_hour
            if ab.value_per_hour > top_value:
                top_value = ab.value_per_hour
                top = ab.ability_id

    xp_rate = xp_per_hour or 0.0
    return CreatureEfficiency(
        creature_id=report.creature_id,
        label=report.label,
        species=report.species,
        xp_per_hour=xp_rate,
        procs_per_hour=procs,
        value_per_hour=value,
        top_ability=top,
        score=efficiency_score(xp_rate, procs, value),
    )


def rank_efficiencies(items: Sequence[CreatureEfficiency]) -> EfficiencyRankings:
    """Descending rankings; ties keep input order."""
    def ranked(key) -> List[CreatureEfficiency]:
        return sorted(items, key=key, reverse=True)

    return EfficiencyRankings(
        by_score=ranked(lambda e: e.score),
        by_xp_rate=ranked(lambda e: e.xp_per_hour),
        by_value=ranked(lambda e: e.value_per_hour),
        by_procs=ranked(lambda e: e.procs_per_hour),
    )


def rank_team(
    team: TeamReport,
    xp_samples: Optional[Mapping[str, Sequence[XpSample]]] = None,
) -> EfficiencyRankings:
    """
    Rank every reported creature. A creature with a usable observed session
    rate is scored on it; the rest fall back to the shared team XP rate.
    """
    xp_samples = xp_samples or {}
    items: List[CreatureEfficiency] = []
    for report in team.creatures:
        observed = session_xp_rate(xp_samples.get(report.creature_id, ()))
        rate = team.shared_xp_per_hour if observed is None else observed
        items.append(creature_efficiency(report, rate))
    logger.debug("Ranked %d creatures by efficiency", len(items))
    return rank_efficiencies(items)


def best_reason(item: CreatureEfficiency) -> str:
    reasons: List[str] = []
    if item.xp_per_hour > REASON_XP_PER_HOUR:
        reasons.append(f"{round(item.xp_per_hour)} XP/hr")
    if item.value_per_hour > REASON_VALUE_PER_HOUR:
        reasons.append(f"{item.value_per_hour / 1000:.0f}K coins/hr")
    if item.procs_per_hour > REASON_PROCS_PER_HOUR:
        reasons.append(f"{item.procs_per_hour:.1f} procs/hr")
    return ", ".join(reasons) if reasons else "All-around performance"

