"""State base class: a named, weighted unit of controllable playback."""

from __future__ import annotations

import logging
from typing import Any, Callable

from animstate.easing import EasingFn
from animstate.future import CancellableFuture, Hook
from animstate.interpolate import interpolate_property
from animstate.util.numeric import clamp

logger = logging.getLogger(__name__)

NextCallback = Callable[[dict[str, Any]], Any]


class State:
    """Base class for every state in the graph.

    A state has a user ``weight`` in ``[0, 1]`` and an ``internal_weight``,
    the weight after multiplying through every ancestor. Playback is a set
    of named futures (``finish``, ``weight``, ``play`` and whatever a
    subclass adds) that :meth:`update` advances once per tick.

    Args:
        name: Name of the state. Containers make it unique on insertion.
              Defaults to the class name.
        weight: Initial 0-1 influence of the state.
    """

    def __init__(self, name: str | None = None, weight: float = 0.0) -> None:
        self.name = name if name is not None else type(self).__name__
        self._weight = clamp(weight)
        self._internal_weight = self._weight
        self._factor = 1.0
        self._paused = False
        self._discarded = False
        self._futures: dict[str, CancellableFuture] = self._fresh_futures()
        self._play_callbacks: dict[str, Hook | None] = {
            "on_finish": None,
            "on_error": None,
            "on_cancel": None,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} weight={self._weight:.3f}>"

    @staticmethod
    def _fresh_futures() -> dict[str, CancellableFuture]:
        return {
            "finish": CancellableFuture.resolved_with(),
            "weight": CancellableFuture.resolved_with(),
            "play": CancellableFuture.resolved_with(),
        }

    # --- Properties ---

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def discarded(self) -> bool:
        return self._discarded

    @property
    def weight(self) -> float:
        return self._weight

    @weight.setter
    def weight(self, value: float) -> None:
        self._weight = clamp(value)

    @property
    def weight_pending(self) -> bool:
        return self._futures["weight"].pending

    @property
    def internal_weight(self) -> float:
        return self._internal_weight

    @property
    def finish_future(self) -> CancellableFuture:
        return self._futures["finish"]

    # --- Weight ---

    def set_weight(
        self,
        weight: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the user weight to *weight* over *seconds*.

        Any weight animation already in flight is canceled first.
        """
        self._futures["weight"].cancel()
        self._futures["weight"] = interpolate_property(
            self, "weight", clamp(weight), seconds=seconds, easing_fn=easing_fn
        )
        return self._futures["weight"]

    def update_internal_weight(self, factor: float) -> None:
        """Multiply the user weight by *factor* to get the internal weight."""
        self._factor = factor
        self._internal_weight = self._weight * factor

    def deactivate(self) -> None:
        """Force the internal weight to 0 before control switches away."""
        self.update_internal_weight(0.0)

    # --- Per-frame ---

    def update(self, delta_time: float) -> None:
        """Advance pending futures by *delta_time* milliseconds.

        Own futures run first, then the internal weight is recomputed from
        the last factor so anything below sees this tick's weight.
        """
        if self._discarded or self._paused:
            return
        for future in list(self._futures.values()):
            future.execute(delta_time)
        self.update_internal_weight(self._factor)

    # --- Playback ---

    def _start_play(
        self,
        on_finish: Hook | None,
        on_error: Hook | None,
        on_cancel: Hook | None,
    ) -> CancellableFuture:
        return self._track_play(CancellableFuture(), on_finish, on_error, on_cancel)

    def _track_play(
        self,
        play: CancellableFuture,
        on_finish: Hook | None,
        on_error: Hook | None,
        on_cancel: Hook | None,
    ) -> CancellableFuture:
        """Install *play* as the play future and rebuild ``finish``.

        Callbacks are attached after the finish join so a callback that
        switches states sees this state's playback already settled.
        """
        self._play_callbacks.update(on_finish=on_finish, on_error=on_error, on_cancel=on_cancel)
        self._futures["play"] = play
        self._futures["finish"] = CancellableFuture.all([play, self._futures["weight"]])
        play.then(on_finish, on_error, on_cancel)
        return self._futures["finish"]

    def _inert(self, operation: str) -> CancellableFuture | None:
        if self._discarded:
            logger.warning("Cannot %s state %s. State has been discarded.", operation, self.name)
            return CancellableFuture.canceled_with()
        return None

    def play(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Start playback from the beginning.

        Returns the ``finish`` future: the join of the play future and any
        weight animation still running. ``on_next`` is only used by
        sequencing states.
        """
        inert = self._inert("play")
        if inert is not None:
            return inert
        self._paused = False
        return self._start_play(on_finish, on_error, on_cancel)

    def pause(self) -> bool:
        """Stop pending futures from being executed."""
        self._paused = True
        return True

    def resume(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Resume playback, starting a new play future if none is pending."""
        inert = self._inert("resume")
        if inert is not None:
            return inert
        self._paused = False
        if not self._futures["play"].pending:
            callbacks = self._play_callbacks
            return self._start_play(
                on_finish or callbacks["on_finish"],
                on_error or callbacks["on_error"],
                on_cancel or callbacks["on_cancel"],
            )
        return self._futures["finish"]

    def cancel(self) -> bool:
        """Cancel playback and every pending future."""
        self._paused = True
        for future in list(self._futures.values()):
            future.cancel()
        return True

    def stop(self) -> bool:
        """Stop playback and resolve every pending future."""
        self._paused = True
        for future in list(self._futures.values()):
            future.resolve(None)
        return True

    def discard(self) -> None:
        """Cancel everything and drop future references. Safe to call twice."""
        if self._discarded:
            return
        self._discarded = True
        self.cancel()
        self._futures = self._fresh_futures()
