"""
PetStat - petstat/config.py
Design variables for the analytics engine, with optional TOML overrides.
========================================================================
Version:     0.2
Stack:       Python 3.12 | Pydantic v2 | tomllib
Status:      Stable.

Design Variables (all values configurable - do not hardcode)
-------------------------------------------------------------
  TICKS_PER_HOUR            3600   - continuous abilities roll once per second
  MIN_MULTIPLIER            0.25   - strength multiplier floor
  MAX_CHANCE_PER_MINUTE     0.95   - per-ability proc ceiling
  LEVEL_ALLOWANCE           30     - levels a creature gains from hatch to maturity
  GLOBAL_MAX_LEVEL          100    - absolute strength ceiling
  BASE_XP_PER_HOUR          3600   - XP every active creature earns without abilities
  DEFAULT_STRENGTH          100    - assumed when a snapshot has no strength
  DEFAULT_HUNGER_CAPACITY   100000 - fallback when a species has no known capacity
  VALUATION_TTL_SECONDS     5.0    - lifetime of a garden valuation context
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ============================================================
# DESIGN VARIABLE DEFAULTS
# Change here or override via AnalyticsConfig. Never hardcode elsewhere.
# ============================================================

TICKS_PER_HOUR: int = 3600
MIN_MULTIPLIER: float = 0.25
MAX_CHANCE_PER_MINUTE: float = 0.95
LEVEL_ALLOWANCE: int = 30
GLOBAL_MAX_LEVEL: int = 100
BASE_XP_PER_HOUR: float = 3600.0
DEFAULT_STRENGTH: float = 100.0
DEFAULT_HUNGER_CAPACITY: float = 100_000.0
VALUATION_TTL_SECONDS: float = 5.0


class AnalyticsConfig(BaseModel):
    """Frozen bundle of design variables passed into the calculators."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    ticks_per_hour: int = Field(default=TICKS_PER_HOUR, gt=0)
    min_multiplier: float = Field(default=MIN_MULTIPLIER, ge=0.0, le=1.0)
    max_chance_per_minute: float = Field(default=MAX_CHANCE_PER_MINUTE, gt=0.0, le=1.0)
    level_allowance: int = Field(default=LEVEL_ALLOWANCE, ge=0)
    global_max_level: int = Field(default=GLOBAL_MAX_LEVEL, gt=0)
    base_xp_per_hour: float = Field(default=BASE_XP_PER_HOUR, ge=0.0)
    default_strength: float = Field(default=DEFAULT_STRENGTH, ge=0.0, le=100.0)
    default_hunger_capacity: float = Field(default=DEFAULT_HUNGER_CAPACITY, gt=0.0)
    use_default_hunger_capacity: bool = True
    valuation_ttl_seconds: float = Field(default=VALUATION_TTL_SECONDS, ge=0.0)

    @property
    def ticks_per_minute(self) -> float:
        return self.ticks_per_hour / 60

    @property
    def max_chance_per_tick(self) -> float:
        # 95% per minute = ~1.58% per second
        return self.max_chance_per_minute / self.ticks_per_minute


DEFAULT_CONFIG = AnalyticsConfig()


def load_config(path: Optional[Path] = None) -> AnalyticsConfig:
    """
    Load an AnalyticsConfig from a TOML file.
    Missing path (None) returns the defaults. Keys may sit at the top level
    or under an [analytics] table.
    """
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return AnalyticsConfig(**data.get("analytics", data))
