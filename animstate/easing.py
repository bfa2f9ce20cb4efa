"""Easing functions for weight ramps and transitions, backed by easing-functions.

Every easing function maps a normalized progress ``k`` in ``[0, 1]`` to an
eased value (which may overshoot for Back/Elastic). Functions are grouped in
families exposing ``ease_in``, ``ease_out`` and ``ease_in_out``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from easing_functions import (
    BackEaseIn,
    BackEaseInOut,
    BackEaseOut,
    BounceEaseIn,
    BounceEaseInOut,
    BounceEaseOut,
    CircularEaseIn,
    CircularEaseInOut,
    CircularEaseOut,
    CubicEaseIn,
    CubicEaseInOut,
    CubicEaseOut,
    ElasticEaseIn,
    ElasticEaseInOut,
    ElasticEaseOut,
    ExponentialEaseIn,
    ExponentialEaseInOut,
    ExponentialEaseOut,
    LinearInOut,
    QuadEaseIn,
    QuadEaseInOut,
    QuadEaseOut,
    QuarticEaseIn,
    QuarticEaseInOut,
    QuarticEaseOut,
    QuinticEaseIn,
    QuinticEaseInOut,
    QuinticEaseOut,
    SineEaseIn,
    SineEaseInOut,
    SineEaseOut,
)

logger = logging.getLogger(__name__)

EasingFn = Callable[[float], float]


def _make_easing(easing_cls: type[Any]) -> EasingFn:
    curve = easing_cls(start=0.0, end=1.0, duration=1.0)
    return lambda k: curve.ease(k)


@dataclass(frozen=True)
class EasingFamily:
    """A named group of in/out/in-out easing curves."""

    name: str
    ease_in: EasingFn
    ease_out: EasingFn
    ease_in_out: EasingFn

    @classmethod
    def from_classes(cls, name: str, ease_in: type, ease_out: type, ease_in_out: type) -> EasingFamily:
        return cls(name, _make_easing(ease_in), _make_easing(ease_out), _make_easing(ease_in_out))


linear = _make_easing(LinearInOut)

Linear = EasingFamily("linear", linear, linear, linear)
Quadratic = EasingFamily.from_classes("quadratic", QuadEaseIn, QuadEaseOut, QuadEaseInOut)
Cubic = EasingFamily.from_classes("cubic", CubicEaseIn, CubicEaseOut, CubicEaseInOut)
Quartic = EasingFamily.from_classes("quartic", QuarticEaseIn, QuarticEaseOut, QuarticEaseInOut)
Quintic = EasingFamily.from_classes("quintic", QuinticEaseIn, QuinticEaseOut, QuinticEaseInOut)
Sinusoidal = EasingFamily.from_classes("sinusoidal", SineEaseIn, SineEaseOut, SineEaseInOut)
Exponential = EasingFamily.from_classes(
    "exponential", ExponentialEaseIn, ExponentialEaseOut, ExponentialEaseInOut
)
Circular = EasingFamily.from_classes("circular", CircularEaseIn, CircularEaseOut, CircularEaseInOut)
Elastic = EasingFamily.from_classes("elastic", ElasticEaseIn, ElasticEaseOut, ElasticEaseInOut)
Back = EasingFamily.from_classes("back", BackEaseIn, BackEaseOut, BackEaseInOut)
Bounce = EasingFamily.from_classes("bounce", BounceEaseIn, BounceEaseOut, BounceEaseInOut)

FAMILIES: dict[str, EasingFamily] = {
    family.name: family
    for family in (
        Linear, Quadratic, Cubic, Quartic, Quintic, Sinusoidal,
        Exponential, Circular, Elastic, Back, Bounce,
    )
}

_VARIANTS = {
    "in": "ease_in",
    "out": "ease_out",
    "in_out": "ease_in_out",
    "inout": "ease_in_out",
}


def parse_easing(name: str | None) -> EasingFn:
    """Parse an easing name from config, e.g. ``"cubic.in_out"``.

    A bare family name uses its in-out variant. Unknown names fall back to
    linear.
    """
    if not name:
        return linear
    family_name, _, variant = name.lower().strip().partition(".")
    family = FAMILIES.get(family_name)
    if family is None:
        logger.warning("Unknown easing %r, using linear", name)
        return linear
    if not variant or variant == "none":
        return family.ease_in_out
    attr = _VARIANTS.get(variant)
    if attr is None:
        logger.warning("Unknown easing variant %r for %s, using in_out", variant, family.name)
        return family.ease_in_out
    return getattr(family, attr)


def easing_name(fn: EasingFn | None) -> str:
    """Reverse of :func:`parse_easing` for built-in functions ("" if unknown)."""
    if fn is None or fn is linear:
        return "linear"
    for family in FAMILIES.values():
        for variant, attr in _VARIANTS.items():
            if variant == "inout":
                continue
            if getattr(family, attr) is fn:
                return f"{family.name}.{variant}"
    return ""
