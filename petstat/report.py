"""
PetStat - petstat/report.py
Comparison-ready bundles per creature and for the whole active team.
====================================================================
Version:     0.3
Stack:       Python 3.12
Status:      Stable.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from petstat.aggregation import shared_xp_per_hour, team_rate_for
from petstat.components import (
    AbilityReport,
    CreatureReport,
    MetricComparison,
    ProcStats,
    TeamReport,
)
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import AbilityDef, CreatureSnapshot, EffectUnit
from petstat.hunger import compute_hunger
from petstat.proc_rate import compute_proc_stats
from petstat.progression import (
    compute_progression,
    max_strength_from_scale,
    parse_max_level,
    strength_from_max_level,
)
from petstat.registry import AbilityRegistry, load_default_registry
from petstat.species import SpeciesTable, load_default_species_table, xp_per_level
from petstat.valuation import VALUE_UNAVAILABLE, ValuationCache

logger = logging.getLogger(__name__)


def _unknown_ability(raw: str, strength: Optional[float], creature_id: str,
                     config: AnalyticsConfig) -> AbilityReport:
    zero = ProcStats(
        ability_id=raw,
        strength=config.default_strength if strength is None else strength,
        strength_assumed=strength is None,
        multiplier=0.0,
        chance_per_second=0.0,
        chance_per_minute=0.0,
        procs_per_hour=0.0,
        procs_per_day=0.0,
        minutes_between_procs=None,
        creature_id=creature_id,
    )
    return AbilityReport(raw=raw, known=False, stats=zero)


def build_ability_report(
    raw: str,
    ability: Optional[AbilityDef],
    snapshot: CreatureSnapshot,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    valuation: Optional[ValuationCache] = None,
) -> AbilityReport:
    if ability is None:
        return _unknown_ability(raw, snapshot.strength, snapshot.creature_id, config)

    stats = compute_proc_stats(ability, snapshot.strength, config, creature_id=snapshot.creature_id)
    dynamic = None
    value_per_hour = None
    detail = None

    if ability.dynamic_value:
        dynamic = valuation.resolve(ability, snapshot.strength) if valuation else None
        if dynamic is None:
            detail = VALUE_UNAVAILABLE
        else:
            value_per_hour = stats.procs_per_hour * dynamic.value_per_proc
            detail = dynamic.detail
    elif ability.effect_unit == EffectUnit.CURRENCY:
        value_per_hour = stats.effect_per_hour

    return AbilityReport(
        raw=raw,
        known=True,
        ability_id=ability.id,
        name=ability.name,
        category=ability.category.value,
        trigger=ability.trigger.value,
        stats=stats,
        dynamic=dynamic,
        value_per_hour=value_per_hour,
        value_detail=detail,
    )


def build_creature_report(
    snapshot: CreatureSnapshot,
    xp_per_hour: Optional[float],
    registry: Optional[AbilityRegistry] = None,
    species_table: Optional[SpeciesTable] = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    valuation: Optional[ValuationCache] = None,
) -> CreatureReport:
    """
    Everything known about one creature. xp_per_hour is the shared team rate;
    fields that depend on missing inputs are None rather than zero.
    """
    if registry is None:
        registry = load_default_registry()
    if species_table is None:
        species_table = load_default_species_table()

    species = species_table.get(snapshot.species)
    xpl = xp_per_level(species, config) if species else None

    strength = snapshot.strength
    if strength is None:
        strength = strength_from_max_level(parse_max_level(snapshot.name), snapshot.xp, xpl, config)

    hunger = compute_hunger(species, snapshot.hunger_pct, config)
    progression = compute_progression(strength, snapshot.xp, xpl, xp_per_hour, hunger, config)

    if progression.level_cap is not None:
        max_strength: Optional[int] = int(progression.level_cap)
    else:
        max_strength = max_strength_from_scale(snapshot.target_scale, species.max_scale if species else None)

    abilities = [
        build_ability_report(raw, registry.resolve(raw), snapshot, config, valuation)
        for raw in snapshot.abilities
    ]

    return CreatureReport(
        creature_id=snapshot.creature_id,
        label=snapshot.label,
        species=species.name if species else snapshot.species,
        strength=strength,
        max_strength=max_strength,
        abilities=abilities,
        progression=progression,
        hunger=hunger,
    )


def build_team_report(
    snapshots: Sequence[CreatureSnapshot],
    registry: Optional[AbilityRegistry] = None,
    species_table: Optional[SpeciesTable] = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    valuation: Optional[ValuationCache] = None,
) -> TeamReport:
    """
    Reports for the whole active team. All creatures share one XP rate.
    A creature whose report cannot be built is listed in `failed`; the rest
    are still reported.
    """
    if registry is None:
        registry = load_default_registry()
    if species_table is None:
        species_table = load_default_species_table()

    team_rate = team_rate_for(snapshots, registry, config)
    shared = shared_xp_per_hour(team_rate, config)

    reports: List[CreatureReport] = []
    failed: List[str] = []
    for snap in snapshots:
        try:
            reports.append(build_creature_report(snap, shared, registry, species_table, config, valuation))
        except (ArithmeticError, ValueError, TypeError):
            logger.exception("Could not build report for creature %s", snap.creature_id)
            failed.append(snap.creature_id)

    return TeamReport(team_rate=team_rate, shared_xp_per_hour=shared, creatures=reports, failed=failed)


def compare_reports(left: CreatureReport, right: CreatureReport) -> List[MetricComparison]:
    """Metric-by-metric comparison of two creatures, left's metric order first."""
    lm: Dict[str, Optional[float]] = left.metrics()
    rm: Dict[str, Optional[float]] = right.metrics()
    keys = list(lm) + [k for k in rm if k not in lm]
    return [MetricComparison(k, lm.get(k), rm.get(k)) for k in keys]


def near_max_level(reports: Sequence[CreatureReport], within_levels: int,
                   include_capped: bool = False) -> List[CreatureReport]:
    """Creatures at most `within_levels` levels below their cap."""
    out = []
    for r in reports:
        prog = r.progression
        if prog.levels_remaining is None:
            continue
        if prog.at_cap and not include_capped:
            continue
        if prog.levels_remaining <= within_levels:
            out.append(r)
    return out
