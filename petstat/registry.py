"""
PetStat - petstat/registry.py
Ability Registry: case-insensitive lookup by id, display name or alias.
========================================================================
Version:     0.3
Stack:       Python 3.12 | Pydantic v2
Status:      Stable. Read-only after define().
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Iterator, Optional, Set, Tuple

from petstat.data_loader import AbilityDef, get_ability_defs

logger = logging.getLogger(__name__)

# Trailing tier: roman numeral (I..IV) or a plain digit, optionally space separated.
_TIER_RE = re.compile(r"\s*(IV|I{1,3}|\d+)$")
_ROMAN = {"I": 1, "II": 2, "III": 3, "IV": 4}
_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")


def normalize_key(raw: object) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip().lower()


class AbilityRegistry:
    """
    Immutable-after-build table of AbilityDef.
    resolve() never raises; unknown identifiers return None.
    """

    def __init__(self) -> None:
        self._defs: Dict[str, AbilityDef] = {}
        self._lookup: Dict[str, AbilityDef] = {}
        self._unknown_seen: Set[str] = set()

    @classmethod
    def define(cls, entries: Iterable[AbilityDef]) -> "AbilityRegistry":
        registry = cls()
        for entry in entries:
            registry._defs[entry.id] = entry
            for key in entry.lookup_keys():
                norm = normalize_key(key)
                if norm:
                    registry._lookup[norm] = entry
        logger.debug("Ability registry built: %d abilities, %d lookup keys",
                     len(registry._defs), len(registry._lookup))
        return registry

    def resolve(self, raw: Optional[str]) -> Optional[AbilityDef]:
        key = normalize_key(raw)
        if not key:
            return None
        found = self._lookup.get(key)
        if found is None and key not in self._unknown_seen:
            self._unknown_seen.add(key)
            logger.debug("Unknown ability identifier: %r", raw)
        return found

    def get(self, ability_id: str) -> Optional[AbilityDef]:
        return self._defs.get(ability_id)

    def __contains__(self, raw: object) -> bool:
        return normalize_key(raw) in self._lookup

    def __iter__(self) -> Iterator[AbilityDef]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)


_DEFAULT_REGISTRY: Optional[AbilityRegistry] = None


def load_default_registry() -> AbilityRegistry:
    """Registry built from the bundled abilities table. Cached globally."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is not None:
        return _DEFAULT_REGISTRY
    _DEFAULT_REGISTRY = AbilityRegistry.define(get_ability_defs())
    return _DEFAULT_REGISTRY


def parse_tier(ability: AbilityDef) -> Tuple[int, str]:
    """
    Split an ability into (tier, base name).
    "Seed Finder IV" -> (4, "Seed Finder"); untiered abilities are tier 1.
    """
    for text in (ability.name, _CAMEL_RE.sub(" ", ability.id)):
        match = _TIER_RE.search(text)
        if match is None:
            continue
        token = match.group(1)
        tier = int(token) if token.isdigit() else _ROMAN[token]
        return tier, text[:match.start()].strip()
    return 1, ability.name
