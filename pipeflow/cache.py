"""
Explicit friction factor cache.

The core keeps no process-wide state. A cache is an object the caller creates
and passes wherever a friction factor callable is accepted:

    cache = FrictionFactorCache()
    solve_flowrate(target, geometry, fluid, bracket, friction_factor=cache)

Keys are (Re, eps/D) rounded to ``significant_figures``, so nearby trial
points of a solve share an entry.
"""

import logging
import math
import threading
from typing import Any, Dict

import numpy as np

from .churchill import darcy_friction_factor

logger = logging.getLogger("pipeflow-mcp.cache")


def _round_significant(value: float, figures: int) -> float:
    if value == 0 or not math.isfinite(value):
        return value
    return round(value, figures - 1 - int(math.floor(math.log10(abs(value)))))


class FrictionFactorCache:
    """Memoising wrapper around a friction factor callable ``(Re, eps/D) -> f``."""

    def __init__(self, friction_factor=darcy_friction_factor, significant_figures: int = 12,
                 maxsize: int = 10000):
        if significant_figures < 1:
            raise ValueError(f"significant_figures must be >= 1, got {significant_figures}")
        self.friction_factor = friction_factor
        self.significant_figures = significant_figures
        self.maxsize = maxsize
        self._entries: Dict[tuple, float] = {}
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0}

    def __call__(self, reynolds_number, roughness_ratio):
        if np.ndim(reynolds_number) or np.ndim(roughness_ratio):
            # Arrays are evaluated directly
            return self.friction_factor(reynolds_number, roughness_ratio)

        re = float(reynolds_number)
        eps = float(roughness_ratio)
        key = (_round_significant(re, self.significant_figures),
               _round_significant(eps, self.significant_figures))
        with self._lock:
            if key in self._entries:
                self._stats["hits"] += 1
                return self._entries[key]

        # Evaluated at the exact inputs so validation sees the caller's values
        f = self.friction_factor(re, eps)
        with self._lock:
            self._stats["misses"] += 1
            if len(self._entries) >= self.maxsize:
                # Drop the oldest entry (dicts keep insertion order)
                self._entries.pop(next(iter(self._entries)))
            self._entries[key] = f
        return f

    def __len__(self):
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Hit/miss counts and hit rate in percent."""
        with self._lock:
            total = self._stats["hits"] + self._stats["misses"]
            return {
                "cache_hits": self._stats["hits"],
                "cache_misses": self._stats["misses"],
                "total_calls": total,
                "hit_rate_percent": (self._stats["hits"] / total * 100) if total > 0 else 0,
                "entries": len(self._entries),
            }

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._stats = {"hits": 0, "misses": 0}
        logger.debug("Friction factor cache cleared")
