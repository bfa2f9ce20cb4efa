"""Animation layers: a player of named animations with a blend mode."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from animstate.constants import (
    BLEND_ADDITIVE,
    BLEND_OVERRIDE,
    DEFAULT_LAYER_WEIGHT,
    DEFAULT_TRANSITION_TIME,
)
from animstate.easing import EasingFn
from animstate.errors import InvalidArgumentError, NotFoundError
from animstate.future import CancellableFuture, Hook
from animstate.state.player import PlayerState
from animstate.state.state import NextCallback, State


class LayerBlendMode(Enum):
    """How a layer combines with the layers below it."""

    OVERRIDE = BLEND_OVERRIDE   # Takes its weight out of the layers below
    ADDITIVE = BLEND_ADDITIVE   # Adds on top without consuming weight


def parse_blend_mode(value: LayerBlendMode | str) -> LayerBlendMode:
    """Return the blend mode for *value*, accepting mode names."""
    if isinstance(value, LayerBlendMode):
        return value
    try:
        return LayerBlendMode(str(value).lower())
    except ValueError:
        raise InvalidArgumentError(f"Unknown layer blend mode {value!r}.") from None


class AnimationLayer(PlayerState):
    """One layer of a mixer. Plays one of its animations at a time.

    Args:
        name: Layer name.
        weight: 0-1 influence of the layer over the layers below.
        blend_mode: :class:`LayerBlendMode` or its name.
        states: Initial animations.
        transition_time: Default crossfade duration between animations.
        easing_fn: Default crossfade easing.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = DEFAULT_LAYER_WEIGHT,
        blend_mode: LayerBlendMode | str = LayerBlendMode.OVERRIDE,
        states: Iterable[State] = (),
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
    ) -> None:
        super().__init__(name=name, weight=weight, states=states,
                         transition_time=transition_time, easing_fn=easing_fn)
        self.blend_mode = parse_blend_mode(blend_mode)

    def _require(self, name: str, operation: str) -> State:
        state = self.get_state(name)
        if state is None:
            raise NotFoundError(name, operation, self.name)
        return state

    def get_animation_weight(self, name: str) -> float:
        return self._require(name, "get weight of").weight

    def set_animation_weight(
        self,
        name: str,
        weight: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the user weight of animation *name*."""
        return self._require(name, "set weight of").set_weight(weight, seconds, easing_fn)

    def play_animation(
        self,
        name: str,
        transition_time: float | None = None,
        easing_fn: EasingFn | None = None,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        return self._player.play_animation(
            name, transition_time, easing_fn, on_finish, on_error, on_cancel, on_next
        )

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
        return self._player.resume_animation(
            name, transition_time, easing_fn, on_finish, on_error, on_cancel, on_next
        )

    def pause_animation(self) -> bool:
        return self._player.pause_animation()

    def cancel_animation(self) -> bool:
        return self._player.cancel_animation()

    def stop_animation(self) -> bool:
        return self._player.stop_animation()
