"""States that blend a collection of sub-states."""

from __future__ import annotations

import logging

from animstate.easing import EasingFn
from animstate.errors import NotFoundError
from animstate.future import CancellableFuture, Hook
from animstate.state.container import ContainerState
from animstate.state.state import NextCallback

logger = logging.getLogger(__name__)


class BlendState(ContainerState):
    """Plays every sub-state at once, each at its own weight.

    The reported ``internal_weight`` is the sum of the sub-states' internal
    weights. Playback fans out to every sub-state; the blend finishes when
    all of them have finished, and a rejection or cancellation of any one
    is propagated to the rest.
    """

    @property
    def internal_weight(self) -> float:
        return sum(state.internal_weight for state in self._container)

    def get_blend_weight(self, name: str) -> float:
        state = self.get_state(name)
        if state is None:
            raise NotFoundError(name, "get weight of", self.name)
        return state.weight

    def set_blend_weight(
        self,
        name: str,
        weight: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the weight of the sub-state *name*."""
        state = self.get_state(name)
        if state is None:
            raise NotFoundError(name, "set weight of", self.name)
        return state.set_weight(weight, seconds, easing_fn)

    def _child_factor(self) -> float:
        return self._internal_weight

    def update_internal_weight(self, factor: float) -> None:
        super().update_internal_weight(factor)
        child_factor = self._child_factor()
        for state in self._container:
            state.update_internal_weight(child_factor)

    def update(self, delta_time: float) -> None:
        if self._discarded:
            return
        super().update(delta_time)
        if self._paused:
            return
        for state in self._container:
            state.update(delta_time)

    def _join_children(self, child_futures, on_finish, on_error, on_cancel) -> CancellableFuture:
        return self._track_play(CancellableFuture.all(child_futures), on_finish, on_error, on_cancel)

    def play(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        inert = self._inert("play")
        if inert is not None:
            return inert
        self._paused = False
        child_futures = [state.play() for state in self._container]
        return self._join_children(child_futures, on_finish, on_error, on_cancel)

    def pause(self) -> bool:
        for state in self._container:
            state.pause()
        return super().pause()

    def resume(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        inert = self._inert("resume")
        if inert is not None:
            return inert
        self._paused = False
        child_futures = [state.resume() for state in self._container]
        if self._futures["play"].pending:
            return self._futures["finish"]
        callbacks = self._play_callbacks
        return self._join_children(
            child_futures,
            on_finish or callbacks["on_finish"],
            on_error or callbacks["on_error"],
            on_cancel or callbacks["on_cancel"],
        )

    def cancel(self) -> bool:
        for state in self._container:
            state.cancel()
        return super().cancel()

    def stop(self) -> bool:
        for state in self._container:
            state.stop()
        return super().stop()


class FreeBlendState(BlendState):
    """Blend whose sub-state influence never exceeds its own weight.

    Sub-states receive ``internal_weight / max(sum(sub weights), 1)``, so a
    set of sub-states whose weights add up to more than 1 is normalized
    while a partial set keeps its absolute weights.
    """

    def _child_factor(self) -> float:
        total = sum(state.weight for state in self._container)
        return self._internal_weight / max(total, 1.0)
