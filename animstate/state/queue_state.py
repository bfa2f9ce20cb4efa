"""Sequential playback of sub-states."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator

from animstate.constants import DEFAULT_TRANSITION_TIME
from animstate.easing import EasingFn
from animstate.future import CancellableFuture, Hook
from animstate.state.player import PlayerState
from animstate.state.state import NextCallback, State

logger = logging.getLogger(__name__)


class QueueState(PlayerState):
    """Plays its sub-states one after another in insertion order.

    Each entry advances to the next when it finishes, crossfading with the
    queue's transition time. Reaching the end resolves the queue's finish
    future, or starts over from the first entry when ``wrap`` is set.

    ``on_next`` callbacks receive ``{"name", "can_advance", "is_queue_end"}``
    before each entry starts. ``can_advance`` is False for the last entry and for
    entries that loop forever.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = 0.0,
        states: Iterable[State] = (),
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
        wrap: bool = False,
    ) -> None:
        super().__init__(name=name, weight=weight, states=states,
                         transition_time=transition_time, easing_fn=easing_fn)
        self.wrap = wrap
        self._queue: Iterator[str] = iter(())
        self._done = True
        self._on_next: NextCallback | None = None

    @property
    def done(self) -> bool:
        """Whether the queue has reached its end."""
        return self._done

    def _reset(self) -> str | None:
        """Restart the queue iterator and return the first name."""
        self._queue = iter(self.get_state_names())
        name = next(self._queue, None)
        self._done = name is None
        return name

    def _signal_next(self, name: str, on_next: NextCallback | None) -> None:
        if on_next is None:
            return
        names = self.get_state_names()
        is_queue_end = bool(names) and name == names[-1]
        state = self.get_state(name)
        loops_forever = getattr(state, "loop_count", 1) == math.inf
        on_next({
            "name": name,
            "can_advance": not loops_forever and not is_queue_end,
            "is_queue_end": is_queue_end,
        })

    def _advance_callback(self, on_next: NextCallback | None):
        def _on_entry_finished(value=None):
            if not self._paused and not self.is_transitioning:
                self.next(on_next)
            return value
        return _on_entry_finished

    def next(self, on_next: NextCallback | None = None, wrap: bool | None = None) -> CancellableFuture:
        """Start the next entry in the queue.

        Args:
            on_next: Called before the next entry starts.
            wrap: Start over at the end of the queue. Defaults to the
                  queue's ``wrap`` setting.
        """
        if on_next is None:
            on_next = self._on_next
        if wrap is None:
            wrap = self.wrap

        name = next(self._queue, None)
        if name is None and wrap:
            logger.debug("Queue %s wrapping to its first entry", self.name)
            name = self._reset()
        self._done = name is None
        self._paused = False

        if name is None:
            logger.debug("Queue %s reached its end", self.name)
            self._futures["finish"].resolve(None)
            return self._futures["finish"]

        self._signal_next(name, on_next)
        self._player.play_animation(
            name,
            self._player.transition_time,
            self._player.easing_fn,
            self._advance_callback(on_next),
            self._play_callbacks["on_error"],
        )
        return self._futures["finish"]

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
        self._on_next = on_next
        name = self._reset()
        super().play(on_finish, on_error, on_cancel)

        if self._done:
            self._futures["finish"].resolve(None)
            return self._futures["finish"]

        if name != self.current_animation:
            self._signal_next(name, on_next)
        self._player.play_animation(
            name,
            self._player.transition_time if self.current_state is not None else 0.0,
            self._player.easing_fn,
            self._advance_callback(on_next),
            on_error,
        )
        return self._futures["finish"]

    def pause(self) -> bool:
        paused = super().pause()
        self._player.pause_animation()
        return paused

    def resume(
        self,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        if self._done:
            return self.play(on_finish, on_error, on_cancel, on_next)

        inert = self._inert("resume")
        if inert is not None:
            return inert
        if on_next is not None:
            self._on_next = on_next
        super().resume(on_finish, on_error, on_cancel)
        self._player.resume_animation(
            self.current_animation,
            self._player.transition_time,
            self._player.easing_fn,
            self._advance_callback(self._on_next),
            on_error,
        )
        return self._futures["finish"]

    def cancel(self) -> bool:
        canceled = super().cancel()
        self._player.cancel_animation()
        return canceled

    def stop(self) -> bool:
        stopped = super().stop()
        self._player.stop_animation()
        self._done = True
        return stopped
