"""
PetStat - petstat/hunger.py
Hunger Calculator: depletion rate, feeds per hour and feeds-per-level schedules.
================================================================================
Version:     0.2
Stack:       Python 3.12
Status:      Stable.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from petstat.components import HungerStats
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import SpeciesDef


def depletion_rate(capacity: Optional[float], depletion_minutes: Optional[float]) -> Optional[float]:
    """Hunger units lost per minute."""
    if not capacity or not depletion_minutes or capacity <= 0 or depletion_minutes <= 0:
        return None
    return capacity / depletion_minutes


def feeds_per_hour(capacity: Optional[float], depletion_minutes: Optional[float]) -> Optional[float]:
    rate = depletion_rate(capacity, depletion_minutes)
    if rate is None:
        return None
    # each feed restores to full
    return rate * 60 / capacity


def minutes_until_starving(hunger_pct: Optional[float], capacity: Optional[float],
                           depletion_minutes: Optional[float]) -> Optional[float]:
    rate = depletion_rate(capacity, depletion_minutes)
    if rate is None or hunger_pct is None:
        return None
    pct = max(0.0, min(100.0, hunger_pct))
    # capacity / rate is the full depletion time
    return (pct / 100) * depletion_minutes


def feeds_for_levels(levels: int, xp_per_level: Optional[float], xp_per_hour: Optional[float],
                     capacity: Optional[float], depletion_minutes: Optional[float]) -> Optional[int]:
    """
    Feeds needed to earn `levels` levels at the given XP rate, assuming the
    creature is kept fed the whole time. One extra feed primes the hunger bar.
    """
    rate = depletion_rate(capacity, depletion_minutes)
    if rate is None or not xp_per_level or xp_per_level <= 0:
        return None
    if xp_per_hour is None or xp_per_hour <= 0 or levels < 0:
        return None

    minutes_needed = xp_per_level * levels / xp_per_hour * 60
    depleted = rate * minutes_needed
    return math.ceil(round(depleted / capacity, 9)) + 1


def resolve_capacity(species: Optional[SpeciesDef],
                     config: AnalyticsConfig = DEFAULT_CONFIG) -> Tuple[Optional[float], bool]:
    """(capacity, assumed). Capacity is the one constant with a global fallback."""
    if species is not None and species.hunger_capacity is not None:
        return species.hunger_capacity, False
    if config.use_default_hunger_capacity:
        return config.default_hunger_capacity, True
    return None, False


def compute_hunger(species: Optional[SpeciesDef], hunger_pct: Optional[float],
                   config: AnalyticsConfig = DEFAULT_CONFIG) -> Optional[HungerStats]:
    if species is None:
        return None
    capacity, assumed = resolve_capacity(species, config)
    minutes = species.hunger_depletion_minutes
    return HungerStats(
        capacity=capacity,
        capacity_assumed=assumed,
        depletion_minutes=minutes,
        rate_per_minute=depletion_rate(capacity, minutes),
        feeds_per_hour=feeds_per_hour(capacity, minutes),
        minutes_until_starving=minutes_until_starving(hunger_pct, capacity, minutes),
        hunger_pct=hunger_pct,
    )
