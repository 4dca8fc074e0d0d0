"""
PetStat - petstat/aggregation.py
Aggregation Layer: team-wide XP pool and probability combination.
=================================================================
Version:     0.3
Stack:       Python 3.12 | NumPy
Status:      Stable.

Combination rules
-----------------
  Probabilities of independent procs: 1 - prod(1 - p_i)   (combine_probabilities)
  Expected effects (XP/hour etc.):    sum(r_i)             (combine_expected)
  The two are kept separate; summing probabilities can exceed 1.

Shared XP pool
--------------
  Every active creature earns BASE_XP_PER_HOUR plus the whole team bonus,
  regardless of which creature's ability produced it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from petstat.components import CombinedTeamRate, ProcStats
from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import AbilityCategory, AbilityDef, CreatureSnapshot
from petstat.proc_rate import compute_proc_stats
from petstat.registry import AbilityRegistry

logger = logging.getLogger(__name__)


def combine_probabilities(probabilities: Iterable[Optional[float]]) -> float:
    """Chance that at least one of several independent events happens."""
    values = [p for p in probabilities if p is not None]
    if not values:
        return 0.0
    arr = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    return float(1.0 - np.prod(1.0 - arr))


def combine_expected(values: Iterable[Optional[float]]) -> float:
    """Linearity of expectation: expected totals simply add."""
    total = 0.0
    for v in values:
        if v is not None:
            total += v
    return total


def is_xp_contributor(ability: AbilityDef) -> bool:
    return ability.category == AbilityCategory.XP and ability.trigger.is_continuous


def xp_contributions(
    snapshots: Sequence[CreatureSnapshot],
    registry: AbilityRegistry,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[ProcStats]:
    """ProcStats for every (creature, continuous XP ability) pair on the team."""
    out: List[ProcStats] = []
    for snap in snapshots:
        for raw in snap.abilities:
            ability = registry.resolve(raw)
            if ability is None or not is_xp_contributor(ability):
                continue
            out.append(compute_proc_stats(ability, snap.strength, config, creature_id=snap.creature_id))
    return out


def combine_team_rate(stats: Sequence[ProcStats]) -> CombinedTeamRate:
    return CombinedTeamRate(
        chance_per_second=combine_probabilities(s.chance_per_second for s in stats),
        chance_per_minute=combine_probabilities(s.chance_per_minute for s in stats),
        procs_per_hour=combine_expected(s.procs_per_hour for s in stats),
        bonus_xp_per_hour=combine_expected(s.effect_per_hour for s in stats),
        contributors=tuple(stats),
    )


def shared_xp_per_hour(team_rate: CombinedTeamRate, config: AnalyticsConfig = DEFAULT_CONFIG) -> float:
    """XP/hour every active creature earns: base tick XP plus the whole team bonus."""
    return config.base_xp_per_hour + team_rate.bonus_xp_per_hour


def team_rate_for(
    snapshots: Sequence[CreatureSnapshot],
    registry: AbilityRegistry,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> CombinedTeamRate:
    rate = combine_team_rate(xp_contributions(snapshots, registry, config))
    logger.debug("Team XP bonus: %.1f/h from %d contributors",
                 rate.bonus_xp_per_hour, len(rate.contributors))
    return rate
