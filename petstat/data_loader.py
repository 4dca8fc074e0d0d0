"""
PetStat - petstat/data_loader.py
Static content schemas and TOML loaders powered by Pydantic.
=============================================================================================
Version:     0.3
Stack:       Python 3.12 | Pydantic v2 | tomllib
Status:      Core data validation and loading layer.
"""

from __future__ import annotations

import logging
import tomllib
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# ================================================================================
# ENUMS
# ================================================================================

class TriggerKind(str, Enum):
    CONTINUOUS = "continuous"          # rolled every simulated tick
    ON_HARVEST = "on_harvest"
    ON_SELL_BATCH = "on_sell_batch"    # selling all crops at once
    ON_SELL_SINGLE = "on_sell_single"  # selling one pet
    ON_HATCH = "on_hatch"

    @property
    def is_continuous(self) -> bool:
        return self is TriggerKind.CONTINUOUS


class AbilityCategory(str, Enum):
    PLANT_GROWTH = "plant_growth"
    EGG_GROWTH = "egg_growth"
    XP = "xp"
    COINS = "coins"
    MISC = "misc"


class EffectUnit(str, Enum):
    TIME = "time"              # minutes
    EXPERIENCE = "experience"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"

# ================================================================================
# SCHEMAS
# ================================================================================

class AbilityDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    aliases: List[str] = Field(default_factory=list)
    category: AbilityCategory = AbilityCategory.MISC
    trigger: TriggerKind
    base_probability: float = Field(default=0.0, ge=0.0)  # percent per minute for continuous triggers
    roll_period_minutes: float = Field(default=1.0, gt=0.0)  # display grouping only
    effect_magnitude: Optional[float] = None
    effect_unit: Optional[EffectUnit] = None
    effect_scales_with_strength: bool = True
    dynamic_value: bool = False  # priced against the live garden
    effect_label: Optional[str] = None
    notes: Optional[str] = None

    def lookup_keys(self) -> List[str]:
        return [self.id, self.name, *self.aliases]


class SpeciesDef(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    id: str
    name: str
    hunger_capacity: Optional[float] = Field(default=None, gt=0.0)
    hunger_depletion_minutes: Optional[float] = Field(default=None, gt=0.0)
    hours_to_mature: Optional[float] = Field(default=None, gt=0.0)
    max_scale: Optional[float] = Field(default=None, gt=0.0)
    xp_per_level_override: Optional[float] = Field(default=None, gt=0.0, alias="xp_per_level")


class CreatureSnapshot(BaseModel):
    """
    Read-only stats of one active creature, re-read on every refresh.
    Any field the bridge could not read is None ("unknown"), never zero.
    """
    model_config = ConfigDict(frozen=True)
    creature_id: str
    species: Optional[str] = None
    name: Optional[str] = None
    strength: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    xp: Optional[float] = Field(default=None, ge=0.0)
    hunger_value: Optional[float] = None
    hunger_pct: Optional[float] = None
    abilities: List[str] = Field(default_factory=list)
    target_scale: Optional[float] = None
    updated_at: Optional[datetime] = None

    @field_validator("hunger_pct")
    @classmethod
    def _clamp_pct(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        return max(0.0, min(100.0, value))

    @property
    def label(self) -> str:
        return self.name or self.species or self.creature_id

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], index: Optional[int] = None) -> "CreatureSnapshot":
        """
        Build a snapshot from a loosely typed bridge payload.

        Out-of-range or malformed fields become None. Without an explicit id the
        creature is keyed by species, name and roster position, so the same
        payload always maps to the same id.
        """
        creature_id = None
        for key in ("creature_id", "id", "petId", "pet_id"):
            if mapping.get(key):
                creature_id = str(mapping[key])
                break

        abilities_raw = mapping.get("abilities") or []
        if not isinstance(abilities_raw, (list, tuple)):
            abilities_raw = []
        abilities = [a for a in abilities_raw if isinstance(a, str) and a.strip()]

        strength = _as_float(mapping.get("strength"))
        if strength is not None and not 0.0 <= strength <= 100.0:
            strength = None
        xp = _as_float(mapping.get("xp"))
        if xp is not None and xp < 0:
            xp = None

        updated_at = mapping.get("updated_at")
        if not isinstance(updated_at, datetime):
            updated_at = None

        species = mapping.get("species")
        name = mapping.get("name")
        if not creature_id:
            parts = [str(species) if species else "creature"]
            if name:
                parts.append(str(name))
            if index is not None:
                parts.append(str(index))
            creature_id = ":".join(parts)
        return cls(
            creature_id=creature_id,
            species=str(species) if species else None,
            name=str(name) if name else None,
            strength=strength,
            xp=xp,
            hunger_value=_as_float(mapping.get("hunger_value", mapping.get("hunger"))),
            hunger_pct=_as_float(mapping.get("hunger_pct")),
            abilities=abilities,
            target_scale=_as_float(mapping.get("target_scale")),
            updated_at=updated_at,
        )


class AbilityCollectionDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    abilities: List[AbilityDef]


class SpeciesCollectionDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    species: List[SpeciesDef]


def _as_float(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if result != result or result in (float("inf"), float("-inf")):
        return None
    return result

# ================================================================================
# LOADERS & CACHE (JIT)
# ================================================================================

_ABILITY_CACHE: Optional[List[AbilityDef]] = None
_SPECIES_CACHE: Optional[List[SpeciesDef]] = None

DATA_DIR = Path(__file__).parent / "data"


def get_ability_defs() -> List[AbilityDef]:
    """Loads all ability definitions from TOML. Cached globally."""
    global _ABILITY_CACHE
    if _ABILITY_CACHE is not None:
        return _ABILITY_CACHE

    _ABILITY_CACHE = load_ability_defs(DATA_DIR / "abilities.toml")
    return _ABILITY_CACHE


def get_species_defs() -> List[SpeciesDef]:
    """Loads all species constants from TOML. Cached globally."""
    global _SPECIES_CACHE
    if _SPECIES_CACHE is not None:
        return _SPECIES_CACHE

    _SPECIES_CACHE = load_species_defs(DATA_DIR / "species.toml")
    return _SPECIES_CACHE


def load_ability_defs(path: Path) -> List[AbilityDef]:
    if not path.exists():
        raise FileNotFoundError(f"Ability table not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    collection = AbilityCollectionDef(**data)
    logger.debug("Loaded %d ability definitions from %s", len(collection.abilities), path)
    return collection.abilities


def load_species_defs(path: Path) -> List[SpeciesDef]:
    if not path.exists():
        raise FileNotFoundError(f"Species table not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    collection = SpeciesCollectionDef(**data)
    logger.debug("Loaded %d species from %s", len(collection.species), path)
    return collection.species


def load_roster(path: Path) -> List[CreatureSnapshot]:
    """Loads a roster of creature snapshots (a [[creatures]] table) from TOML."""
    if not path.exists():
        raise FileNotFoundError(f"Roster not found: {path}")

    with open(path, "rb") as f:
        data: Dict[str, Any] = tomllib.load(f)

    entries = data.get("creatures", [])
    if not isinstance(entries, list):
        raise ValueError(f"Roster {path}: 'creatures' must be an array of tables")

    roster: List[CreatureSnapshot] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Roster %s: entry %d is not a table, skipped", path, index)
            continue
        roster.append(CreatureSnapshot.from_mapping(entry, index=index))
    logger.debug("Loaded %d creatures from %s", len(roster), path)
    return roster


def clear_caches() -> None:
    global _ABILITY_CACHE, _SPECIES_CACHE
    _ABILITY_CACHE = None
    _SPECIES_CACHE = None
