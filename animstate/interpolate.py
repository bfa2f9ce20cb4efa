"""Tick-driven interpolation and timers built on CancellableFuture.

The interpolated value is a pure function of elapsed time
(:meth:`Interpolation.value_at`); the future returned by
:func:`interpolate_property` only signals completion and carries the
per-tick driver that feeds ``delta_time`` into the task.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from animstate.constants import MS_PER_SECOND
from animstate.easing import EasingFn, linear
from animstate.future import CancellableFuture, Hook
from animstate.util.numeric import clamp, lerp

logger = logging.getLogger(__name__)


@dataclass
class Interpolation:
    """A resumable interpolation from ``start_value`` to ``target_value``."""

    start_value: float
    target_value: float
    duration_ms: float
    easing_fn: EasingFn = field(default=linear)
    elapsed_ms: float = 0.0

    @property
    def finished(self) -> bool:
        return self.elapsed_ms >= self.duration_ms

    @property
    def progress(self) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return clamp(self.elapsed_ms / self.duration_ms)

    def value_at(self, elapsed_ms: float) -> float:
        """Value after *elapsed_ms*; exactly ``target_value`` once finished."""
        if self.duration_ms <= 0 or elapsed_ms >= self.duration_ms:
            return self.target_value
        k = clamp(elapsed_ms / self.duration_ms)
        return lerp(self.start_value, self.target_value, self.easing_fn(k))

    def advance(self, delta_ms: float) -> float:
        self.elapsed_ms += max(0.0, delta_ms)
        return self.value_at(self.elapsed_ms)


def interpolate_property(
    owner: Any,
    attribute: str,
    target: float,
    seconds: float = 0.0,
    easing_fn: EasingFn | None = None,
    on_finish: Hook | None = None,
    on_error: Hook | None = None,
    on_cancel: Hook | None = None,
    on_progress: Callable[[float], None] | None = None,
) -> CancellableFuture:
    """Animate ``owner.<attribute>`` to *target* over *seconds*.

    Each ``execute(delta_time_ms)`` on the returned future advances the
    interpolation. With ``seconds <= 0`` the attribute is written and the
    future resolved at construction.
    """
    task = Interpolation(
        start_value=getattr(owner, attribute),
        target_value=target,
        duration_ms=max(0.0, seconds) * MS_PER_SECOND,
        easing_fn=easing_fn or linear,
    )

    def _step(resolve, reject, cancel, delta_time: float = 0.0) -> None:
        try:
            setattr(owner, attribute, task.advance(delta_time))
            if on_progress is not None:
                on_progress(task.progress)
        except Exception as e:  # surfaced through the future
            logger.debug("Interpolation of %s.%s failed: %s", type(owner).__name__, attribute, e)
            reject(e)
            return
        if task.finished:
            resolve(None)

    return CancellableFuture(_step, on_finish, on_error, on_cancel)


def wait(
    seconds: float = 0.0,
    on_finish: Hook | None = None,
    on_progress: Callable[[float], None] | None = None,
    on_error: Hook | None = None,
    on_cancel: Hook | None = None,
) -> CancellableFuture:
    """Return a future that resolves after *seconds* of accumulated ticks."""
    duration_ms = max(0.0, seconds) * MS_PER_SECOND
    elapsed = {"ms": 0.0}

    def _step(resolve, reject, cancel, delta_time: float = 0.0) -> None:
        elapsed["ms"] += max(0.0, delta_time)
        if on_progress is not None:
            on_progress(1.0 if duration_ms <= 0 else clamp(elapsed["ms"] / duration_ms))
        if elapsed["ms"] >= duration_ms:
            resolve(None)

    return CancellableFuture(_step, on_finish, on_error, on_cancel)
