"""
PetStat - petstat/valuation.py
Valuation Bridge interface and its short-TTL context cache.
===========================================================
Version:     0.2
Stack:       Python 3.12 | threading
Status:      Stable.

The garden valuation context prices abilities whose effect depends on the
live garden (crop size boosts, mutation granters). Building it is expensive,
so one context is shared for VALUATION_TTL_SECONDS. The bridge may be absent
or fail at any time; failures surface as None and the report shows the
value as unavailable.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol, Tuple

from petstat.components import DynamicEffect
from petstat.config import VALUATION_TTL_SECONDS, AnalyticsConfig
from petstat.data_loader import AbilityDef

logger = logging.getLogger(__name__)

VALUE_UNAVAILABLE = "Garden context not available"


class ValuationBridge(Protocol):
    def build_context(self) -> Optional[Any]: ...

    def resolve_dynamic_effect(self, ability_id: str, context: Any,
                               strength: Optional[float]) -> Optional[DynamicEffect]: ...


class ValuationCache:
    """
    Single-slot cache for the bridge context: (value, built_at).
    The lock makes overlapping refreshes build at most once per TTL window.
    A failed or empty build is not cached.
    """

    def __init__(self, bridge: Optional[ValuationBridge],
                 ttl_seconds: float = VALUATION_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self._bridge = bridge
        self._ttl = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._slot: Optional[Tuple[Any, float]] = None
        self._lock = threading.Lock()
        self.builds = 0

    @classmethod
    def from_config(cls, bridge: Optional[ValuationBridge], config: AnalyticsConfig,
                    clock: Callable[[], float] = time.monotonic) -> "ValuationCache":
        return cls(bridge, ttl_seconds=config.valuation_ttl_seconds, clock=clock)

    @property
    def available(self) -> bool:
        return self._bridge is not None

    def context(self) -> Optional[Any]:
        if self._bridge is None:
            return None
        with self._lock:
            now = self._clock()
            if self._slot is not None:
                value, built_at = self._slot
                if now - built_at < self._ttl:
                    return value
                self._slot = None

            try:
                value = self._bridge.build_context()
            except Exception:
                logger.warning("Valuation context build failed", exc_info=True)
                return None
            self.builds += 1
            if value is not None and self._ttl > 0:
                self._slot = (value, now)
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._slot = None

    def resolve(self, ability: AbilityDef, strength: Optional[float]) -> Optional[DynamicEffect]:
        """Price one proc of a dynamic ability. Static abilities never reach the bridge."""
        if not ability.dynamic_value or self._bridge is None:
            return None
        ctx = self.context()
        if ctx is None:
            return None
        try:
            return self._bridge.resolve_dynamic_effect(ability.id, ctx, strength)
        except Exception:
            logger.warning("Valuation of %s failed", ability.id, exc_info=True)
            return None
