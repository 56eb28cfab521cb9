"""Utilities for the wildcard draw subsystem."""

from .engine import DrawResult, WildcardDrawEngine
from .exclusion import exclusion_for_round

__all__ = [
    "DrawResult",
    "WildcardDrawEngine",
    "exclusion_for_round",
]
