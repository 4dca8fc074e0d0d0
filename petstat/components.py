"""
PetStat - petstat/components.py
Result records returned by the calculators.
==============================================
Version:     0.2
Stack:       Python 3.12 | dataclasses
Status:      Stable. Every record is frozen; callers render, never mutate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EstimateStatus(str, Enum):
    ESTIMATED = "estimated"
    AT_CAP = "at_cap"
    INDETERMINATE = "indeterminate"   # zero or negative rate
    UNAVAILABLE = "unavailable"       # inputs missing


@dataclass(frozen=True)
class TimeEstimate:
    status: EstimateStatus
    hours: Optional[float] = None

    @property
    def minutes(self) -> Optional[float]:
        return None if self.hours is None else self.hours * 60

    @property
    def estimated_hours(self) -> Optional[float]:
        """Hours as a comparable number; None unless the status is ESTIMATED."""
        return self.hours if self.status is EstimateStatus.ESTIMATED else None

    @classmethod
    def at_cap(cls) -> "TimeEstimate":
        return cls(EstimateStatus.AT_CAP)

    @classmethod
    def indeterminate(cls) -> "TimeEstimate":
        return cls(EstimateStatus.INDETERMINATE)

    @classmethod
    def unavailable(cls) -> "TimeEstimate":
        return cls(EstimateStatus.UNAVAILABLE)


@dataclass(frozen=True)
class ProcStats:
    ability_id: str
    strength: float
    strength_assumed: bool
    multiplier: float
    chance_per_second: float            # fraction, capped
    chance_per_minute: float            # fraction, chance_per_second * 60
    procs_per_hour: float
    procs_per_day: float
    minutes_between_procs: Optional[float]
    chance_per_event: Optional[float] = None   # event-driven triggers only
    effect_per_proc: Optional[float] = None
    effect_per_hour: Optional[float] = None
    effect_unit: Optional[str] = None
    creature_id: Optional[str] = None


@dataclass(frozen=True)
class ProgressionState:
    strength: Optional[float]
    xp: Optional[float]
    xp_per_level: Optional[float]
    levels_gained: Optional[int]
    hatch_level: Optional[float]
    level_cap: Optional[float]
    at_cap: bool
    levels_remaining: Optional[int]
    xp_toward_next: Optional[float]
    xp_needed_next: Optional[float]
    xp_needed_cap: Optional[float]
    time_to_next: TimeEstimate
    time_to_cap: TimeEstimate
    feeds_to_next: Optional[int] = None
    feeds_to_cap: Optional[int] = None

    @property
    def available(self) -> bool:
        return self.level_cap is not None

    @classmethod
    def unavailable(cls) -> "ProgressionState":
        return cls(
            strength=None, xp=None, xp_per_level=None,
            levels_gained=None, hatch_level=None, level_cap=None,
            at_cap=False, levels_remaining=None,
            xp_toward_next=None, xp_needed_next=None, xp_needed_cap=None,
            time_to_next=TimeEstimate.unavailable(),
            time_to_cap=TimeEstimate.unavailable(),
        )


@dataclass(frozen=True)
class HungerStats:
    capacity: Optional[float]
    capacity_assumed: bool
    depletion_minutes: Optional[float]
    rate_per_minute: Optional[float]
    feeds_per_hour: Optional[float]
    minutes_until_starving: Optional[float]
    hunger_pct: Optional[float]


@dataclass(frozen=True)
class CombinedTeamRate:
    chance_per_second: float
    chance_per_minute: float
    procs_per_hour: float
    bonus_xp_per_hour: float
    contributors: Tuple[ProcStats, ...] = ()


@dataclass(frozen=True)
class DynamicEffect:
    """A valuation produced by the garden bridge for one proc."""
    value_per_proc: float
    unit: str = "coins"
    detail: Optional[str] = None


@dataclass(frozen=True)
class AbilityReport:
    raw: str
    known: bool
    ability_id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    trigger: Optional[str] = None
    stats: Optional[ProcStats] = None
    dynamic: Optional[DynamicEffect] = None
    value_per_hour: Optional[float] = None
    value_detail: Optional[str] = None

    @property
    def value_per_day(self) -> Optional[float]:
        return None if self.value_per_hour is None else self.value_per_hour * 24


@dataclass(frozen=True)
class CreatureReport:
    creature_id: str
    label: str
    species: Optional[str]
    strength: Optional[float]
    max_strength: Optional[int]
    abilities: List[AbilityReport] = field(default_factory=list)
    progression: ProgressionState = field(default_factory=ProgressionState.unavailable)
    hunger: Optional[HungerStats] = None

    def metrics(self) -> Dict[str, Any]:
        """Flat numeric view used by compare_reports."""
        prog = self.progression
        hunger = self.hunger
        out: Dict[str, Any] = {
            "strength": self.strength,
            "max_strength": self.max_strength,
            "level_cap": prog.level_cap,
            "levels_remaining": prog.levels_remaining,
            "hours_to_next_level": prog.time_to_next.estimated_hours,
            "hours_to_cap": prog.time_to_cap.estimated_hours,
            "feeds_per_hour": hunger.feeds_per_hour if hunger else None,
            "minutes_until_starving": hunger.minutes_until_starving if hunger else None,
        }
        for ab in self.abilities:
            if ab.known and ab.stats is not None:
                out[f"{ab.ability_id}.procs_per_hour"] = ab.stats.procs_per_hour
                out[f"{ab.ability_id}.effect_per_hour"] = ab.stats.effect_per_hour
        return out


@dataclass(frozen=True)
class TeamReport:
    team_rate: CombinedTeamRate
    shared_xp_per_hour: float
    creatures: List[CreatureReport] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)   # creature ids whose report could not be built


@dataclass(frozen=True)
class MetricComparison:
    metric: str
    left: Optional[float]
    right: Optional[float]

    @property
    def delta(self) -> Optional[float]:
        if self.left is None or self.right is None:
            return None
        return self.right - self.left

    @property
    def higher(self) -> Optional[str]:
        d = self.delta
        if d is None or d == 0:
            return None
        return "right" if d > 0 else "left"
