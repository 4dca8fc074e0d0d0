"""
PetStat - petstat/species.py
Species Lookup Tables: hunger, maturity, XP-per-level and max scale constants.
==============================================================================
Version:     0.2
Stack:       Python 3.12 | Pydantic v2
Status:      Stable. Externally maintained data; read-only here.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Optional, Set

from petstat.config import DEFAULT_CONFIG, AnalyticsConfig
from petstat.data_loader import SpeciesDef, get_species_defs

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def species_key(raw: object) -> str:
    """'Dragon-Fly ' -> 'dragonfly'."""
    if not isinstance(raw, str):
        return ""
    return _NON_ALNUM.sub("", raw.lower())


def xp_per_level(species: SpeciesDef, config: AnalyticsConfig = DEFAULT_CONFIG) -> Optional[float]:
    """
    XP a creature of this species needs per level.
    An explicit override wins; otherwise one level is earned every
    hours_to_mature / level_allowance hours at the base XP rate.
    """
    if species.xp_per_level_override is not None:
        return species.xp_per_level_override
    if species.hours_to_mature is None or config.level_allowance <= 0:
        return None
    return config.base_xp_per_hour * species.hours_to_mature / config.level_allowance


class SpeciesTable:
    def __init__(self, entries: Iterable[SpeciesDef]) -> None:
        self._by_key: Dict[str, SpeciesDef] = {}
        for entry in entries:
            self._by_key[species_key(entry.id)] = entry
            self._by_key[species_key(entry.name)] = entry
        self._warned: Set[str] = set()

    def get(self, species: Optional[str]) -> Optional[SpeciesDef]:
        key = species_key(species)
        if not key:
            return None
        found = self._by_key.get(key)
        if found is None and key not in self._warned:
            self._warned.add(key)
            logger.warning("No species constants for %r", species)
        return found

    def xp_per_level(self, species: Optional[str],
                     config: AnalyticsConfig = DEFAULT_CONFIG) -> Optional[float]:
        entry = self.get(species)
        return xp_per_level(entry, config) if entry else None

    def __contains__(self, species: object) -> bool:
        return species_key(species) in self._by_key


_DEFAULT_TABLE: Optional[SpeciesTable] = None


def load_default_species_table() -> SpeciesTable:
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = SpeciesTable(get_species_defs())
    return _DEFAULT_TABLE
