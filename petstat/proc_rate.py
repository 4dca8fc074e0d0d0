"""
PetStat - petstat/proc_rate.py
Proc-Rate Calculator: strength-scaled chance, expected procs and effect per hour.
=================================================================================
Version:     0.4
Stack:       Python 3.12
Status:      Stable.

Model
-----
  The game rolls every continuous ability once per second (one tick).
  base_probability is a percent per minute, so the per-tick chance is
  base / 60 / 100, scaled by the strength multiplier and capped at 95% per
  minute. All "per hour" figures are expectations, never samples.
"""

from __future__ import annotations

from typing import Optional

from petstat.components import ProcStats
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import AbilityDef


def compute_multiplier(strength: Optional[float], config: AnalyticsConfig = DEFAULT_CONFIG) -> float:
    """STR acts as a percentage: STR 62 -> 0.62x, never below the floor."""
    if strength is None:
        strength = config.default_strength
    return max(config.min_multiplier, strength / 100)


def chance_per_tick(ability: AbilityDef, multiplier: float,
                    config: AnalyticsConfig = DEFAULT_CONFIG) -> float:
    per_minute = max(0.0, ability.base_probability) / 100
    raw = per_minute / config.ticks_per_minute * multiplier
    return min(config.max_chance_per_tick, raw)


def chance_per_event(ability: AbilityDef, multiplier: float,
                     config: AnalyticsConfig = DEFAULT_CONFIG) -> float:
    """Chance an event-driven ability fires on one qualifying event."""
    return min(config.max_chance_per_minute, max(0.0, ability.base_probability) / 100 * multiplier)


def effect_per_proc(ability: AbilityDef, multiplier: float) -> Optional[float]:
    if ability.effect_magnitude is None:
        return None
    if ability.effect_scales_with_strength:
        return ability.effect_magnitude * multiplier
    return ability.effect_magnitude


def compute_proc_stats(
    ability: AbilityDef,
    strength: Optional[float],
    config: AnalyticsConfig = DEFAULT_CONFIG,
    creature_id: Optional[str] = None,
) -> ProcStats:
    """
    Expected rates for one (creature, ability) pair.

    Missing strength falls back to config.default_strength and the result is
    flagged strength_assumed. Event-driven triggers have no fixed trial rate,
    so they report zero procs per hour and a per-event chance instead.
    """
    assumed = strength is None
    effective_strength = config.default_strength if strength is None else strength
    multiplier = compute_multiplier(effective_strength, config)
    per_proc = effect_per_proc(ability, multiplier)
    unit = ability.effect_unit.value if ability.effect_unit else None

    if not ability.trigger.is_continuous:
        return ProcStats(
            ability_id=ability.id,
            strength=effective_strength,
            strength_assumed=assumed,
            multiplier=multiplier,
            chance_per_second=0.0,
            chance_per_minute=0.0,
            procs_per_hour=0.0,
            procs_per_day=0.0,
            minutes_between_procs=None,
            chance_per_event=chance_per_event(ability, multiplier, config),
            effect_per_proc=per_proc,
            effect_per_hour=None if per_proc is None else 0.0,
            effect_unit=unit,
            creature_id=creature_id,
        )

    per_tick = chance_per_tick(ability, multiplier, config)
    procs_per_hour = per_tick * config.ticks_per_hour
    return ProcStats(
        ability_id=ability.id,
        strength=effective_strength,
        strength_assumed=assumed,
        multiplier=multiplier,
        chance_per_second=per_tick,
        chance_per_minute=per_tick * config.ticks_per_minute,
        procs_per_hour=procs_per_hour,
        procs_per_day=procs_per_hour * 24,
        minutes_between_procs=60 / procs_per_hour if procs_per_hour > 0 else None,
        effect_per_proc=per_proc,
        effect_per_hour=None if per_proc is None else procs_per_hour * per_proc,
        effect_unit=unit,
        creature_id=creature_id,
    )
