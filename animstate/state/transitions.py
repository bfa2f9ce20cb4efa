"""Crossfade from a set of outgoing states to one target state."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from animstate.constants import MS_PER_SECOND
from animstate.easing import EasingFn, easing_name, linear
from animstate.future import CancellableFuture, Hook
from animstate.state.state import NextCallback, State
from animstate.util.numeric import clamp, lerp

logger = logging.getLogger(__name__)


class TransitionState(State):
    """Temporarily stands in for a player's current state during a blend.

    A single progress value in ``[0, 1]`` advances by
    ``delta_time / transition_time`` each tick and is passed through the
    easing function. Outgoing states scale down from the weight they had
    when the transition started; the target ramps up to full weight. When
    progress reaches 1 the completion callback hands control back to the
    owner.

    One instance is reused by its player, so :meth:`configure` always
    rebuilds the whole configuration.
    """

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name, weight=0.0)
        self._from: list[State] = []
        self._from_weights: list[float] = []
        self._to: State | None = None
        self._to_start_weight = 0.0
        self._transition_time = 0.0
        self._easing_fn: EasingFn = linear
        self._on_finish: Callable[[], None] | None = None
        self._progress = 1.0

    @property
    def name(self) -> str:
        return self._to.name if self._to is not None else self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = name

    @property
    def target(self) -> State | None:
        return self._to

    @property
    def outgoing(self) -> list[State]:
        return list(self._from)

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def active(self) -> bool:
        return self._to is not None and self._progress < 1.0

    @property
    def internal_weight(self) -> float:
        total = sum(state.internal_weight for state in self._from)
        if self._to is not None:
            total += self._to.internal_weight
        return total

    def _involved(self) -> list[State]:
        states = list(self._from)
        if self._to is not None:
            states.append(self._to)
        return states

    def configure(
        self,
        outgoing: Iterable[State],
        target: State,
        transition_time: float,
        easing_fn: EasingFn | None = None,
        on_finish: Callable[[], None] | None = None,
    ) -> None:
        """Set up a new blend from *outgoing* to *target*."""
        outgoing = [state for state in outgoing if state is not target]
        keep = {id(state) for state in outgoing}
        keep.add(id(target))
        for state in self._involved():
            if id(state) not in keep:
                state.deactivate()

        self._from = outgoing
        self._to = target
        self.reset(transition_time, easing_fn, on_finish)

    def reset(
        self,
        transition_time: float,
        easing_fn: EasingFn | None = None,
        on_finish: Callable[[], None] | None = None,
    ) -> None:
        """Restart the blend from the states' current weights."""
        for state in self._involved():
            # A ramp still in flight would fight the transition
            if state.weight_pending:
                state.set_weight(state.weight)

        self._from_weights = [state.weight for state in self._from]
        self._to_start_weight = self._to.weight if self._to is not None else 0.0
        self._transition_time = max(0.0, transition_time)
        self._easing_fn = easing_fn or linear
        self._on_finish = on_finish
        self._progress = 0.0
        self._paused = False
        self._futures["weight"].cancel()
        self._futures["weight"] = CancellableFuture()
        logger.debug(
            "Transition to %s from %s over %.3fs (%s)",
            self.name, [state.name for state in self._from], self._transition_time,
            easing_name(self._easing_fn) or "custom",
        )

    def update_internal_weight(self, factor: float) -> None:
        super().update_internal_weight(factor)
        for state in self._involved():
            state.update_internal_weight(self._internal_weight)

    def _apply_progress(self) -> None:
        eased = self._easing_fn(self._progress)
        for state, start_weight in zip(self._from, self._from_weights):
            state.weight = (1.0 - eased) * start_weight
        if self._to is not None:
            self._to.weight = lerp(self._to_start_weight, 1.0, eased)

    def update(self, delta_time: float) -> None:
        if self._discarded or self._paused or self._to is None:
            return

        if self._progress < 1.0:
            if self._transition_time <= 0:
                self._progress = 1.0
            else:
                self._progress = clamp(
                    self._progress + delta_time / (self._transition_time * MS_PER_SECOND)
                )
            self._apply_progress()

        super().update(delta_time)
        for state in self._involved():
            state.update(delta_time)

        if self._progress >= 1.0 and self._futures["weight"].pending:
            self._complete()

    def _complete(self) -> None:
        outgoing = self._from
        for state in outgoing:
            state.weight = 0.0
            state.deactivate()
            state.cancel()
        if self._to is not None:
            self._to.weight = 1.0
        self._from = []
        self._from_weights = []
        self._futures["weight"].resolve(None)

        on_finish, self._on_finish = self._on_finish, None
        if on_finish is not None:
            on_finish()

    # --- Playback ---

    def play(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        self._paused = False
        if self._to is None:
            return CancellableFuture.resolved_with()
        self._futures["play"] = self._to.play(on_finish, on_error, on_cancel, on_next)
        return self._futures["play"]

    def resume(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        self._paused = False
        # cancel() and stop() settle the weight future that gates the hand-over
        if self.active and not self._futures["weight"].pending:
            self._futures["weight"] = CancellableFuture()
        for state in self._from:
            state.resume()
        if self._to is None:
            return CancellableFuture.resolved_with()
        self._futures["play"] = self._to.resume(on_finish, on_error, on_cancel, on_next)
        return self._futures["play"]

    def pause(self) -> bool:
        for state in self._involved():
            state.pause()
        return super().pause()

    def cancel(self) -> bool:
        for state in self._involved():
            state.cancel()
        return super().cancel()

    def stop(self) -> bool:
        for state in self._involved():
            state.stop()
        return super().stop()

    def discard(self) -> None:
        """Release references without discarding states owned elsewhere."""
        if self._discarded:
            return
        super().discard()
        self._from = []
        self._from_weights = []
        self._to = None
        self._on_finish = None
