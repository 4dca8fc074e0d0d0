"""
PetStat - petstat/progression.py
Progression Calculator: dynamic level cap, XP to next level / cap, time estimates.
==================================================================================
Version:     0.4
Stack:       Python 3.12
Status:      Stable.

Level cap recovery
------------------
  A creature hatches at some strength H and may gain LEVEL_ALLOWANCE (30)
  levels on top of it, never past GLOBAL_MAX_LEVEL (100). H is not stored by
  the game, so it is estimated from the observed pair (strength, xp):

      levels_gained = min(30, floor(xp / xp_per_level))
      hatch_level   = strength - levels_gained
      level_cap     = min(hatch_level + 30, 100)

  This is a best-effort heuristic. It drifts when XP has been reset or
  strength was adjusted out of band, so it is recomputed on every call and
  never cached.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Tuple

from petstat.components import EstimateStatus, HungerStats, ProgressionState, TimeEstimate
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.hunger import feeds_for_levels

# ============================================================
# DESIGN VARIABLE DEFAULTS
# ============================================================

MIN_MAX_STRENGTH: int = 80
MAX_STRENGTH_SPREAD: int = 20     # max strength spans 80..100 across the scale range

_NAME_MAX_LEVEL_RE = re.compile(r"[\(\[](\d+)[\)\]]")


def time_to_level(xp_needed: Optional[float], xp_per_hour: Optional[float]) -> TimeEstimate:
    if xp_needed is None:
        return TimeEstimate.unavailable()
    if xp_needed <= 0:
        return TimeEstimate.at_cap()
    if xp_per_hour is None:
        return TimeEstimate.unavailable()
    if xp_per_hour <= 0:
        return TimeEstimate.indeterminate()
    return TimeEstimate(EstimateStatus.ESTIMATED, xp_needed / xp_per_hour)


def recover_level_cap(
    strength: float,
    xp: float,
    xp_per_level: float,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Tuple[int, float, float]:
    """Returns (levels_gained, hatch_level, level_cap). See module docstring."""
    levels_gained = min(config.level_allowance, math.floor(xp / xp_per_level))
    hatch_level = strength - levels_gained
    level_cap = min(hatch_level + config.level_allowance, config.global_max_level)
    return levels_gained, hatch_level, level_cap


def compute_progression(
    strength: Optional[float],
    xp: Optional[float],
    xp_per_level: Optional[float],
    xp_per_hour: Optional[float],
    hunger: Optional[HungerStats] = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> ProgressionState:
    """
    Progression snapshot for one creature.

    xp_per_hour is the shared team rate, supplied by the caller. Missing
    strength, xp or xp_per_level yields ProgressionState.unavailable().
    """
    if strength is None or xp is None or xp_per_level is None or xp_per_level <= 0:
        return ProgressionState.unavailable()

    levels_gained, hatch_level, level_cap = recover_level_cap(strength, xp, xp_per_level, config)

    if strength >= level_cap:
        return ProgressionState(
            strength=strength, xp=xp, xp_per_level=xp_per_level,
            levels_gained=levels_gained, hatch_level=hatch_level, level_cap=level_cap,
            at_cap=True, levels_remaining=0,
            xp_toward_next=None, xp_needed_next=None, xp_needed_cap=None,
            time_to_next=TimeEstimate.at_cap(),
            time_to_cap=TimeEstimate.at_cap(),
        )

    levels_remaining = math.ceil(level_cap - strength)
    xp_toward_next = xp % xp_per_level
    xp_needed_next = xp_per_level - xp_toward_next
    xp_needed_cap = xp_needed_next + xp_per_level * (levels_remaining - 1)

    feeds_next = feeds_cap = None
    if hunger is not None:
        feeds_next = feeds_for_levels(1, xp_per_level, xp_per_hour,
                                      hunger.capacity, hunger.depletion_minutes)
        feeds_cap = feeds_for_levels(levels_remaining, xp_per_level, xp_per_hour,
                                     hunger.capacity, hunger.depletion_minutes)

    return ProgressionState(
        strength=strength, xp=xp, xp_per_level=xp_per_level,
        levels_gained=levels_gained, hatch_level=hatch_level, level_cap=level_cap,
        at_cap=False, levels_remaining=levels_remaining,
        xp_toward_next=xp_toward_next,
        xp_needed_next=xp_needed_next,
        xp_needed_cap=xp_needed_cap,
        time_to_next=time_to_level(xp_needed_next, xp_per_hour),
        time_to_cap=time_to_level(xp_needed_cap, xp_per_hour),
        feeds_to_next=feeds_next,
        feeds_to_cap=feeds_cap,
    )


def max_strength_from_scale(target_scale: Optional[float], max_scale: Optional[float]) -> Optional[int]:
    """
    Max strength implied by a creature's size: 80 at scale 1.0, 100 at the
    species max scale. Out-of-range results are rejected as bad data.
    """
    if not target_scale or target_scale < 1:
        return None
    if not max_scale or max_scale <= 1:
        return None
    ratio = (target_scale - 1) / (max_scale - 1)
    result = math.floor(ratio * MAX_STRENGTH_SPREAD + MIN_MAX_STRENGTH)
    if result < MIN_MAX_STRENGTH or result > MIN_MAX_STRENGTH + MAX_STRENGTH_SPREAD:
        return None
    return result


def parse_max_level(name: Optional[str]) -> Optional[int]:
    """Players often tag names with the cap, e.g. 'Rex (92)'."""
    if not name:
        return None
    match = _NAME_MAX_LEVEL_RE.search(name)
    return int(match.group(1)) if match else None


def strength_from_max_level(
    max_level: Optional[int],
    xp: Optional[float],
    xp_per_level: Optional[float],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """Inverse of recover_level_cap for snapshots that lack a strength reading."""
    if max_level is None or xp is None or not xp_per_level or xp_per_level <= 0:
        return None
    if not MIN_MAX_STRENGTH <= max_level <= config.global_max_level:
        return None
    hatch_level = max_level - config.level_allowance
    levels_gained = min(config.level_allowance, math.floor(xp / xp_per_level))
    return float(hatch_level + levels_gained)
