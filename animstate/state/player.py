"""Decides which state has control of a container's output."""

from __future__ import annotations

import logging
from typing import Iterable

from animstate.constants import DEFAULT_TRANSITION_TIME
from animstate.easing import EasingFn
from animstate.errors import InvalidArgumentError, NotFoundError
from animstate.future import CancellableFuture, Hook
from animstate.state.container import ContainerState, StateContainer
from animstate.state.state import NextCallback, State
from animstate.state.transitions import TransitionState

logger = logging.getLogger(__name__)


def _validate_transition_time(seconds: float, owner: str) -> float:
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            f"Cannot set transition time for {owner} to {seconds!r}. Seconds must be numeric."
        ) from None
    if not seconds >= 0:
        raise InvalidArgumentError(
            f"Cannot set transition time for {owner} to {seconds}. "
            "Seconds must be greater than or equal to zero."
        )
    return seconds


class Player:
    """Controls playback of one state at a time within a container.

    Either a real state from the container is in control (direct), or the
    player's shared :class:`TransitionState` is, while it crossfades from
    every state that still has weight to the requested one.

    Args:
        container: The states this player chooses from.
        transition_time: Default crossfade duration in seconds.
        easing_fn: Default easing function for crossfades.
        owner_name: Name used in log and error messages.
    """

    def __init__(
        self,
        container: StateContainer,
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
        owner_name: str = "",
    ) -> None:
        self._container = container
        self.owner_name = owner_name or container.owner_name
        self._transition_time = _validate_transition_time(transition_time, self.owner_name)
        self._easing_fn = easing_fn
        self._transition_state = TransitionState()
        self._current_state: State | None = None
        self._factor = 1.0

    @property
    def transition_time(self) -> float:
        return self._transition_time

    @transition_time.setter
    def transition_time(self, seconds: float) -> None:
        self._transition_time = _validate_transition_time(seconds, self.owner_name)

    @property
    def easing_fn(self) -> EasingFn | None:
        return self._easing_fn

    @easing_fn.setter
    def easing_fn(self, fn: EasingFn | None) -> None:
        self._easing_fn = fn

    @property
    def current_state(self) -> State | None:
        return self._current_state

    @property
    def current_animation(self) -> str | None:
        if self._current_state is not None:
            return self._current_state.name
        return None

    @property
    def is_transitioning(self) -> bool:
        return self._current_state is self._transition_state

    @property
    def transition_state(self) -> TransitionState:
        return self._transition_state

    def _hand_over(self, target: State) -> None:
        self._current_state = target
        self._transition_state.weight = 0.0
        logger.debug("%s: transition to %s complete", self.owner_name, target.name)

    def _prepare_current_state(
        self,
        name: str | None,
        operation: str,
        transition_time: float,
        easing_fn: EasingFn | None,
        on_error: Hook | None,
    ) -> None:
        target = self._container.get_state(name) if name else None
        if target is None:
            error = NotFoundError(name or "", operation, self.owner_name)
            if on_error is not None:
                on_error(error)
            raise error

        if self.current_animation != name:
            if transition_time <= 0:
                # Switch immediately
                previous = self._current_state
                if previous is not None:
                    previous.cancel()
                    previous.weight = 0.0
                    previous.deactivate()
                self._current_state = target
                logger.debug("%s: switched to %s", self.owner_name, name)
            else:
                # Blend out of everything that still has weight
                outgoing = [
                    state for state in self._container
                    if state is not target and (state.weight > 0 or state.weight_pending)
                ]
                self._transition_state.configure(
                    outgoing,
                    target,
                    transition_time,
                    easing_fn,
                    lambda: self._hand_over(target),
                )
                self._current_state = self._transition_state
        elif operation == "play":
            self._current_state.cancel()
            if self.is_transitioning:
                self._transition_state.reset(
                    transition_time,
                    easing_fn,
                    lambda: self._hand_over(target),
                )

        self._current_state.weight = 1.0
        self._current_state.update_internal_weight(self._factor)

    def _resolve_options(
        self, transition_time: float | None, easing_fn: EasingFn | None
    ) -> tuple[float, EasingFn | None]:
        if transition_time is None:
            transition_time = self._transition_time
        if easing_fn is None:
            easing_fn = self._easing_fn
        return transition_time, easing_fn

    def play_animation(
        self,
        name: str | None,
        transition_time: float | None = None,
        easing_fn: EasingFn | None = None,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Play the state *name* from the beginning.

        With a positive transition time the player crossfades to it.
        Returns the state's finish future, or a rejected future carrying a
        :class:`NotFoundError` if no state has that name.
        """
        transition_time, easing_fn = self._resolve_options(transition_time, easing_fn)
        try:
            self._prepare_current_state(name, "play", transition_time, easing_fn, on_error)
        except NotFoundError as e:
            logger.warning("%s", e)
            return CancellableFuture.rejected_with(e)
        return self._current_state.play(on_finish, on_error, on_cancel, on_next)

    def resume_animation(
        self,
        name: str | None = None,
        transition_time: float | None = None,
        easing_fn: EasingFn | None = None,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Resume *name* (default: the current state) without restarting it."""
        if name is None and self._current_state is not None:
            name = self._current_state.name
        transition_time, easing_fn = self._resolve_options(transition_time, easing_fn)
        try:
            self._prepare_current_state(name, "resume", transition_time, easing_fn, on_error)
        except NotFoundError as e:
            logger.warning("%s", e)
            return CancellableFuture.rejected_with(e)
        return self._current_state.resume(on_finish, on_error, on_cancel, on_next)

    def pause_animation(self) -> bool:
        if self._current_state is None:
            return False
        return self._current_state.pause()

    def cancel_animation(self) -> bool:
        if self._current_state is None:
            return False
        return self._current_state.cancel()

    def stop_animation(self) -> bool:
        if self._current_state is None:
            return False
        return self._current_state.stop()

    def update_internal_weight(self, factor: float) -> None:
        """Propagate the owner's internal weight to the state in control."""
        self._factor = factor
        if self._current_state is not None:
            self._current_state.update_internal_weight(factor)

    def update(self, delta_time: float) -> None:
        if self._current_state is not None:
            self._current_state.update(delta_time)

    def forget(self, state: State) -> None:
        """Drop references to *state*, which is leaving the container."""
        transition = self._transition_state
        if state is self._current_state:
            self._current_state = None
        elif self.is_transitioning and (state is transition.target or state in transition.outgoing):
            transition.cancel()
            self._current_state = None
        if state is transition.target or state in transition.outgoing:
            transition.discard()
            self._transition_state = TransitionState()

    def discard(self) -> None:
        self._transition_state.discard()
        self._transition_state = TransitionState()
        self._current_state = None


class PlayerState(ContainerState):
    """A state whose sub-states are controlled one at a time by a :class:`Player`.

    The player receives this state's own internal weight as its factor.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = 0.0,
        states: Iterable[State] = (),
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
    ) -> None:
        super().__init__(name=name, weight=weight, states=states)
        self._player = Player(self._container, transition_time, easing_fn, owner_name=self.name)

    @property
    def player(self) -> Player:
        return self._player

    @property
    def transition_time(self) -> float:
        return self._player.transition_time

    @transition_time.setter
    def transition_time(self, seconds: float) -> None:
        self._player.transition_time = seconds

    @property
    def easing_fn(self) -> EasingFn | None:
        return self._player.easing_fn

    @easing_fn.setter
    def easing_fn(self, fn: EasingFn | None) -> None:
        self._player.easing_fn = fn

    @property
    def current_state(self) -> State | None:
        return self._player.current_state

    @property
    def current_animation(self) -> str | None:
        return self._player.current_animation

    @property
    def is_transitioning(self) -> bool:
        return self._player.is_transitioning

    @property
    def internal_weight(self) -> float:
        current = self._player.current_state
        return current.internal_weight if current is not None else 0.0

    def remove_state(self, name: str) -> bool:
        state = self.get_state(name)
        if state is not None:
            self._player.forget(state)
        return super().remove_state(name)

    def update_internal_weight(self, factor: float) -> None:
        super().update_internal_weight(factor)
        self._player.update_internal_weight(self._internal_weight)

    def update(self, delta_time: float) -> None:
        if self._discarded:
            return
        super().update(delta_time)
        if not self._paused:
            self._player.update(delta_time)

    def discard(self) -> None:
        if self._discarded:
            return
        self._player.discard()
        super().discard()
