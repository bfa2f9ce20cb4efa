"""Random playback of sub-states at random intervals."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from animstate.constants import (
    DEFAULT_PLAY_INTERVAL,
    DEFAULT_TRANSITION_TIME,
    RANDOM_INTERVAL_MAX_FACTOR,
    RANDOM_INTERVAL_MIN_FACTOR,
)
from animstate.easing import EasingFn
from animstate.errors import InvalidArgumentError
from animstate.future import CancellableFuture, Hook
from animstate.interpolate import wait
from animstate.state.player import PlayerState
from animstate.state.state import NextCallback, State

logger = logging.getLogger(__name__)


class RandomAnimationState(PlayerState):
    """Plays a random sub-state, then picks another after a random delay.

    The delay is drawn uniformly from ``[play_interval / 4, play_interval * 2]``
    seconds. The next pick never repeats the current sub-state unless it is
    the only one. The state keeps playing until it is stopped or canceled.

    Args:
        play_interval: Base interval between picks, in seconds.
        rng: Random generator, for reproducible picks.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = 0.0,
        states: Iterable[State] = (),
        play_interval: float = DEFAULT_PLAY_INTERVAL,
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(name=name, weight=weight, states=states,
                         transition_time=transition_time, easing_fn=easing_fn)
        self.play_interval = play_interval
        self._rng = rng if rng is not None else np.random.default_rng()
        self._futures["timer"] = CancellableFuture.resolved_with()

    @property
    def play_interval(self) -> float:
        return self._play_interval

    @play_interval.setter
    def play_interval(self, seconds: float) -> None:
        if not seconds > 0:
            raise InvalidArgumentError(
                f"Cannot set play interval for {self.name} to {seconds}. Interval must be greater than zero."
            )
        self._play_interval = float(seconds)

    @property
    def timer_pending(self) -> bool:
        return self._futures["timer"].pending

    def _reset_timer(self, on_error: Hook | None) -> None:
        delay = float(self._rng.uniform(
            self._play_interval * RANDOM_INTERVAL_MIN_FACTOR,
            self._play_interval * RANDOM_INTERVAL_MAX_FACTOR,
        ))
        self._futures["timer"].cancel()
        self._futures["timer"] = wait(
            delay, on_finish=lambda _: self.play_random_animation(on_error)
        )

    def play_random_animation(self, on_error: Hook | None = None) -> CancellableFuture:
        """Restart the timer and play a random sub-state."""
        self._reset_timer(on_error)

        names = self.get_state_names()
        current = self.current_animation
        if current in names and len(names) > 1:
            names.remove(current)
        if not names:
            logger.warning("Cannot play a random animation in %s. It has no sub-states.", self.name)
            return CancellableFuture.canceled_with()

        name = names[int(self._rng.integers(0, len(names)))]
        logger.debug("%s picked %s", self.name, name)
        return self._player.play_animation(
            name,
            self._player.transition_time,
            self._player.easing_fn,
            None,
            on_error,
        )

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
        self.play_random_animation(on_error)
        return super().play(on_finish, on_error, on_cancel)

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
        inert = self._inert("resume")
        if inert is not None:
            return inert
        if self.current_state is not None:
            self._player.resume_animation(
                self.current_animation,
                self._player.transition_time,
                self._player.easing_fn,
                None,
                on_error,
            )
        if not self.timer_pending:
            self._reset_timer(on_error or self._play_callbacks["on_error"])
        return super().resume(on_finish, on_error, on_cancel)

    def cancel(self) -> bool:
        canceled = super().cancel()
        self._player.cancel_animation()
        return canceled

    def stop(self) -> bool:
        # Resolving the timer would schedule another pick
        self._futures["timer"].cancel()
        stopped = super().stop()
        self._player.stop_animation()
        return stopped

    def discard(self) -> None:
        if self._discarded:
            return
        super().discard()
        self._futures["timer"] = CancellableFuture.resolved_with()
