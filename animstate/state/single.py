"""Leaf state bound to a single animation clip."""

from __future__ import annotations

import logging
import math
from typing import Callable

from animstate.constants import (
    BLEND_ADDITIVE,
    BLEND_OVERRIDE,
    DEFAULT_CLIP_DURATION,
    DEFAULT_LOOP_COUNT,
    DEFAULT_TIME_SCALE,
    MS_PER_SECOND,
)
from animstate.easing import EasingFn
from animstate.errors import InvalidArgumentError
from animstate.future import CancellableFuture, Hook
from animstate.interpolate import interpolate_property
from animstate.state.state import NextCallback, State
from animstate.util.numeric import clamp

logger = logging.getLogger(__name__)

# apply(internal_weight, normalized_time): pushes the state's output to
# whatever actually poses the model.
ClipApplier = Callable[[float, float], None]


class SingleState(State):
    """Plays one clip and reports its weight and time to a clip applier.

    The state keeps its own clip clock. While playing, each update advances
    the clock by ``delta_time * time_scale``; once ``loop_count`` loops have
    elapsed the clock holds on the last frame and the play future resolves.

    Args:
        name: Name of the state.
        weight: Initial weight.
        applier: Called as ``applier(internal_weight, normalized_time)``
                 whenever either value changes.
        duration: Clip length in seconds.
        loop_count: Number of loops before finishing, ``math.inf`` to loop
                    forever.
        time_scale: Playback speed multiplier.
        blend_mode: ``"override"`` or ``"additive"``.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = 0.0,
        applier: ClipApplier | None = None,
        duration: float = DEFAULT_CLIP_DURATION,
        loop_count: float = DEFAULT_LOOP_COUNT,
        time_scale: float = DEFAULT_TIME_SCALE,
        blend_mode: str = BLEND_OVERRIDE,
    ) -> None:
        if duration <= 0:
            raise InvalidArgumentError(f"Cannot create SingleState {name}. Duration must be greater than zero.")
        if blend_mode not in (BLEND_OVERRIDE, BLEND_ADDITIVE):
            raise InvalidArgumentError(f"Cannot create SingleState {name}. Unknown blend mode {blend_mode!r}.")
        self._applier = applier
        self._duration = float(duration)
        self._loop_count = self._validate_loop_count(loop_count)
        self._time_scale = float(time_scale)
        self._blend_mode = blend_mode
        self._clip_time = 0.0
        self._clip_playing = False
        super().__init__(name=name, weight=weight)
        self._futures["time_scale"] = CancellableFuture.resolved_with()

    @staticmethod
    def _validate_loop_count(loop_count: float) -> float:
        if loop_count == math.inf:
            return math.inf
        if loop_count < 1 or int(loop_count) != loop_count:
            raise InvalidArgumentError(f"Loop count must be a positive integer or infinity, got {loop_count}.")
        return int(loop_count)

    @property
    def applier(self) -> ClipApplier | None:
        return self._applier

    @applier.setter
    def applier(self, applier: ClipApplier | None) -> None:
        self._applier = applier
        self._apply()

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def blend_mode(self) -> str:
        return self._blend_mode

    @property
    def loop_count(self) -> float:
        return self._loop_count

    @loop_count.setter
    def loop_count(self, loop_count: float) -> None:
        self._loop_count = self._validate_loop_count(loop_count)

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @time_scale.setter
    def time_scale(self, time_scale: float) -> None:
        self._time_scale = float(time_scale)

    @property
    def time_scale_pending(self) -> bool:
        return self._futures["time_scale"].pending

    def set_time_scale(
        self,
        time_scale: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the playback speed to *time_scale* over *seconds*."""
        self._futures["time_scale"].cancel()
        self._futures["time_scale"] = interpolate_property(
            self, "time_scale", time_scale, seconds=seconds, easing_fn=easing_fn
        )
        return self._futures["time_scale"]

    @property
    def normalized_time(self) -> float:
        """Position within the current loop, 0-1."""
        if self._clip_finished:
            return 1.0
        return (self._clip_time % self._duration) / self._duration

    @normalized_time.setter
    def normalized_time(self, time: float) -> None:
        loops_done = math.floor(self._clip_time / self._duration) if not self._clip_finished else 0
        self._clip_time = (loops_done + clamp(time)) * self._duration
        self._apply()

    @property
    def _clip_finished(self) -> bool:
        return self._loop_count != math.inf and self._clip_time >= self._duration * self._loop_count

    def _apply(self) -> None:
        if self._applier is not None:
            self._applier(self._internal_weight, self.normalized_time)

    def _rewind(self) -> None:
        self._clip_time = 0.0

    def update_internal_weight(self, factor: float) -> None:
        super().update_internal_weight(factor)
        self._apply()

    def update(self, delta_time: float) -> None:
        if self._discarded or self._paused:
            return
        super().update(delta_time)
        if not self._clip_playing:
            return

        self._clip_time += max(0.0, delta_time) * self._time_scale / MS_PER_SECOND
        self._clip_time = max(0.0, self._clip_time)
        if self._clip_finished:
            self._clip_time = self._duration * self._loop_count
            self._clip_playing = False
            logger.debug("Clip %s finished after %s loop(s)", self.name, self._loop_count)
            self._apply()
            self._futures["play"].resolve(None)
            return
        self._apply()

    def play(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        if not self._discarded:
            self._rewind()
            self._clip_playing = True
        return super().play(on_finish, on_error, on_cancel)

    def resume(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        if not self._discarded:
            if self._clip_finished:
                self._rewind()
            self._clip_playing = True
        return super().resume(on_finish, on_error, on_cancel)

    def cancel(self) -> bool:
        self._clip_playing = False
        return super().cancel()

    def stop(self) -> bool:
        self._clip_playing = False
        self._rewind()
        self._apply()
        return super().stop()

    def discard(self) -> None:
        if self._discarded:
            return
        self._clip_playing = False
        super().discard()
        self._futures["time_scale"] = CancellableFuture.resolved_with()
        self._applier = None
