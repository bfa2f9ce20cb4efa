"""Numeric helpers for weights and interpolation."""

from __future__ import annotations


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation between *start* and *end*."""
    return start + (end - start) * t
