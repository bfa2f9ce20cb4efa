"""Animation mixer: ordered layers of animations and playback events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable

from animstate.constants import DEFAULT_LAYER_WEIGHT, DEFAULT_TRANSITION_TIME
from animstate.easing import EasingFn
from animstate.errors import InvalidArgumentError, NotFoundError
from animstate.future import CancellableFuture, Hook
from animstate.layer import AnimationLayer, LayerBlendMode
from animstate.state.blend import BlendState, FreeBlendState
from animstate.state.queue_state import QueueState
from animstate.state.random_state import RandomAnimationState
from animstate.state.single import SingleState
from animstate.state.state import NextCallback, State
from animstate.util.naming import get_unique_name

logger = logging.getLogger(__name__)


class AnimationType(Enum):
    """Kinds of animation a layer can hold."""

    SINGLE = "single"           # One clip
    FREE_BLEND = "free_blend"   # Several clips blended by weight
    QUEUE = "queue"             # Clips played in sequence
    RANDOM = "random"           # Clips picked at random intervals


_ANIMATION_CLASSES: dict[AnimationType, type[State]] = {
    AnimationType.SINGLE: SingleState,
    AnimationType.FREE_BLEND: FreeBlendState,
    AnimationType.QUEUE: QueueState,
    AnimationType.RANDOM: RandomAnimationState,
}


def create_animation(animation_type: AnimationType | str, name: str, **options: Any) -> State:
    """Instantiate the state class for *animation_type* with *options*."""
    animation_type = parse_animation_type(animation_type)
    cls = _ANIMATION_CLASSES[animation_type]
    try:
        return cls(name=name, **options)
    except TypeError as e:
        raise InvalidArgumentError(f"Cannot create {animation_type.value} animation {name}. {e}") from e


def parse_animation_type(value: AnimationType | str) -> AnimationType:
    """Return the animation type for *value*, accepting type names."""
    if isinstance(value, AnimationType):
        return value
    key = str(value).lower().replace("-", "_")
    for animation_type in AnimationType:
        if key in (animation_type.value, animation_type.name.lower()):
            return animation_type
    raise InvalidArgumentError(f"Unknown animation type {value!r}.")


class MixerEvent(Enum):
    """Events emitted by the mixer."""

    LAYER_ADDED = auto()
    LAYER_REMOVED = auto()
    LAYER_RENAMED = auto()
    ANIMATION_ADDED = auto()
    ANIMATION_REMOVED = auto()
    ANIMATION_RENAMED = auto()
    PLAY = auto()        # Animation started
    PLAY_NEXT = auto()   # Queue moved to its next entry
    PAUSE = auto()
    RESUME = auto()
    INTERRUPT = auto()   # Animation was canceled
    STOP = auto()        # Animation finished


@dataclass
class MixerMessage:
    """Payload delivered to mixer listeners."""

    event: MixerEvent
    layer_name: str = ""
    animation_name: str = ""
    old_name: str = ""       # Renames only
    new_name: str = ""       # Renames only
    index: int = -1          # Layer position, for layer events
    can_advance: bool = False
    is_queue_end: bool = False


Listener = Callable[[MixerMessage], None]


class AnimationMixer:
    """Blends animations organized into layers.

    Layers are ordered bottom to top. Each :meth:`update` walks them top
    down: an override layer takes its weight out of what is left for the
    layers beneath it, an additive layer is applied at full strength on
    top of whatever is below.

    Structural operations on a missing layer raise :class:`NotFoundError`.
    Playback of a missing layer or animation returns a rejected future.
    """

    def __init__(self) -> None:
        self._layers: list[AnimationLayer] = []
        self._listeners: dict[MixerEvent, list[Listener]] = {event: [] for event in MixerEvent}
        self._paused = False

    def __repr__(self) -> str:
        return f"<AnimationMixer layers={self.layers!r}>"

    # --- Events ---

    def on(self, event: MixerEvent, callback: Listener) -> None:
        """Register *callback* to receive messages for *event*."""
        self._listeners[event].append(callback)

    def off(self, event: MixerEvent, callback: Listener) -> bool:
        """Unregister *callback*. Returns False if it was not registered."""
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            return False
        return True

    def _emit(self, event: MixerEvent, **fields: Any) -> None:
        message = MixerMessage(event, **fields)
        for callback in list(self._listeners[event]):
            callback(message)

    # --- Layers ---

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def layers(self) -> list[str]:
        """Layer names, bottom to top."""
        return [layer.name for layer in self._layers]

    def _index_of(self, name: str) -> int:
        for index, layer in enumerate(self._layers):
            if layer.name == name:
                return index
        return -1

    def get_layer(self, name: str) -> AnimationLayer:
        index = self._index_of(name)
        if index == -1:
            raise NotFoundError(name, "access layer", kind="layer")
        return self._layers[index]

    def add_layer(
        self,
        name: str = "Layer",
        index: int | None = None,
        weight: float = DEFAULT_LAYER_WEIGHT,
        blend_mode: LayerBlendMode | str = LayerBlendMode.OVERRIDE,
        transition_time: float = DEFAULT_TRANSITION_TIME,
        easing_fn: EasingFn | None = None,
    ) -> str:
        """Create a layer and insert it at *index* (default: on top).

        Returns the layer's name, made unique among existing layers.
        """
        unique = get_unique_name(name, self.layers)
        if unique != name:
            logger.warning("Layer name %s is not unique. New layer will be named %s.", name, unique)

        layer = AnimationLayer(unique, weight, blend_mode,
                               transition_time=transition_time, easing_fn=easing_fn)
        if index is None:
            index = len(self._layers)
        elif index < 0:
            index = max(0, len(self._layers) + index + 1)
        index = min(index, len(self._layers))
        self._layers.insert(index, layer)

        logger.info("Added layer %s at index %d", unique, index)
        self._emit(MixerEvent.LAYER_ADDED, layer_name=unique, index=index)
        return unique

    def remove_layer(self, name: str) -> None:
        """Remove and discard the layer *name*."""
        index = self._index_of(name)
        if index == -1:
            raise NotFoundError(name, "remove layer", kind="layer")
        layer = self._layers.pop(index)
        layer.discard()
        logger.info("Removed layer %s", name)
        self._emit(MixerEvent.LAYER_REMOVED, layer_name=name, index=index)

    def rename_layer(self, current_name: str, new_name: str) -> str:
        """Rename a layer. Returns the new name, made unique if needed."""
        layer = self.get_layer(current_name)
        if new_name == current_name:
            return current_name
        others = [name for name in self.layers if name != current_name]
        unique = get_unique_name(new_name, others)
        if unique != new_name:
            logger.warning("Layer name %s is not unique. Layer will be named %s.", new_name, unique)
        layer.name = unique
        self._emit(MixerEvent.LAYER_RENAMED, layer_name=unique, old_name=current_name, new_name=unique)
        return unique

    def move_layer(self, name: str, index: int) -> int:
        """Move a layer to *index*. Returns the index it ended up at."""
        current = self._index_of(name)
        if current == -1:
            raise NotFoundError(name, "move layer", kind="layer")
        layer = self._layers.pop(current)
        if index < 0:
            index = len(self._layers) + index + 1
        index = max(0, min(index, len(self._layers)))
        self._layers.insert(index, layer)
        return index

    def get_layer_weight(self, name: str) -> float:
        return self.get_layer(name).weight

    def set_layer_weight(
        self,
        name: str,
        weight: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the weight of layer *name*."""
        return self.get_layer(name).set_weight(weight, seconds, easing_fn)

    # --- Animations ---

    def add_animation(
        self,
        layer_name: str,
        animation_name: str = "Animation",
        animation_type: AnimationType | str = AnimationType.SINGLE,
        **options: Any,
    ) -> str:
        """Create an animation of *animation_type* on a layer.

        ``options`` are passed to the state class of the type, e.g.
        ``applier`` and ``duration`` for single animations or ``states``
        for composite ones. Returns the animation's unique name.
        """
        layer = self.get_layer(layer_name)
        animation_type = parse_animation_type(animation_type)
        state = create_animation(animation_type, animation_name, **options)

        name = layer.add_state(state)
        logger.debug("Added %s animation %s to layer %s", animation_type.value, name, layer_name)
        self._emit(MixerEvent.ANIMATION_ADDED, layer_name=layer_name, animation_name=name)
        return name

    def remove_animation(self, layer_name: str, animation_name: str) -> bool:
        """Remove and discard an animation. Returns False if it did not exist."""
        layer = self.get_layer(layer_name)
        removed = layer.remove_state(animation_name)
        if removed:
            self._emit(MixerEvent.ANIMATION_REMOVED, layer_name=layer_name, animation_name=animation_name)
        return removed

    def rename_animation(self, layer_name: str, current_name: str, new_name: str) -> str:
        layer = self.get_layer(layer_name)
        name = layer.rename_state(current_name, new_name)
        if name != current_name:
            self._emit(
                MixerEvent.ANIMATION_RENAMED,
                layer_name=layer_name,
                animation_name=name,
                old_name=current_name,
                new_name=name,
            )
        return name

    def get_animations(self, layer_name: str) -> list[str]:
        return self.get_layer(layer_name).get_state_names()

    def get_animation(self, layer_name: str, animation_name: str) -> State:
        state = self.get_layer(layer_name).get_state(animation_name)
        if state is None:
            raise NotFoundError(animation_name, "access animation", layer_name)
        return state

    def get_animation_type(self, layer_name: str, animation_name: str) -> AnimationType:
        state = self.get_animation(layer_name, animation_name)
        # Subclasses first so a layer subclassing a composite still resolves
        for animation_type in (AnimationType.RANDOM, AnimationType.QUEUE,
                               AnimationType.FREE_BLEND, AnimationType.SINGLE):
            if isinstance(state, _ANIMATION_CLASSES[animation_type]):
                return animation_type
        raise InvalidArgumentError(f"Animation {animation_name} has unsupported type {type(state).__name__}.")

    def get_current_animation(self, layer_name: str) -> str | None:
        return self.get_layer(layer_name).current_animation

    def _blend_state(self, layer_name: str, animation_name: str) -> BlendState:
        state = self.get_animation(layer_name, animation_name)
        if not isinstance(state, BlendState):
            raise InvalidArgumentError(
                f"Cannot access blend weights of {animation_name} on layer {layer_name}. "
                "Animation is not a blend."
            )
        return state

    def get_animation_blend_weight(self, layer_name: str, animation_name: str, blend_name: str) -> float:
        return self._blend_state(layer_name, animation_name).get_blend_weight(blend_name)

    def set_animation_blend_weight(
        self,
        layer_name: str,
        animation_name: str,
        blend_name: str,
        weight: float,
        seconds: float = 0.0,
        easing_fn: EasingFn | None = None,
    ) -> CancellableFuture:
        """Animate the weight of one sub-state of a blend animation."""
        return self._blend_state(layer_name, animation_name).set_blend_weight(
            blend_name, weight, seconds, easing_fn
        )

    # --- Playback ---

    def _playback_layer(self, layer_name: str, operation: str, on_error: Hook | None) -> AnimationLayer | CancellableFuture:
        index = self._index_of(layer_name)
        if index != -1:
            return self._layers[index]
        error = NotFoundError(layer_name, operation, kind="layer")
        logger.warning("%s", error)
        if on_error is not None:
            on_error(error)
        return CancellableFuture.rejected_with(error)

    def _wrap_callbacks(
        self,
        layer_name: str,
        animation_name: str,
        on_finish: Hook | None,
        on_cancel: Hook | None,
        on_next: NextCallback | None,
    ) -> tuple[Hook, Hook, NextCallback]:
        def _finished(value: Any = None) -> Any:
            self._emit(MixerEvent.STOP, layer_name=layer_name, animation_name=animation_name)
            if on_finish is not None:
                on_finish(value)
            return value

        def _interrupted(value: Any = None) -> Any:
            self._emit(MixerEvent.INTERRUPT, layer_name=layer_name, animation_name=animation_name)
            if on_cancel is not None:
                on_cancel(value)
            return value

        def _next(info: dict[str, Any]) -> None:
            self._emit(
                MixerEvent.PLAY_NEXT,
                layer_name=layer_name,
                animation_name=info["name"],
                can_advance=info["can_advance"],
                is_queue_end=info["is_queue_end"],
            )
            if on_next is not None:
                on_next(info)

        return _finished, _interrupted, _next

    def play_animation(
        self,
        layer_name: str,
        animation_name: str,
        transition_time: float | None = None,
        easing_fn: EasingFn | None = None,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Play an animation from the start on its layer.

        Emits ``PLAY`` now, then ``STOP`` when it finishes or ``INTERRUPT``
        when it is canceled. Queues also emit ``PLAY_NEXT`` per entry.
        """
        layer = self._playback_layer(layer_name, "play animation on", on_error)
        if isinstance(layer, CancellableFuture):
            return layer

        finished, interrupted, advanced = self._wrap_callbacks(
            layer_name, animation_name, on_finish, on_cancel, on_next
        )
        future = layer.play_animation(
            animation_name, transition_time, easing_fn, finished, on_error, interrupted, advanced
        )
        if not future.rejected:
            self._emit(MixerEvent.PLAY, layer_name=layer_name, animation_name=animation_name)
        return future

    def resume_animation(
        self,
        layer_name: str,
        animation_name: str | None = None,
        transition_time: float | None = None,
        easing_fn: EasingFn | None = None,
        on_finish: Hook | None = None,
        on_error: Hook | None = None,
        on_cancel: Hook | None = None,
        on_next: NextCallback | None = None,
    ) -> CancellableFuture:
        """Resume an animation (default: the layer's current one)."""
        layer = self._playback_layer(layer_name, "resume animation on", on_error)
        if isinstance(layer, CancellableFuture):
            return layer

        if animation_name is None:
            animation_name = layer.current_animation
        finished, interrupted, advanced = self._wrap_callbacks(
            layer_name, animation_name or "", on_finish, on_cancel, on_next
        )
        future = layer.resume_animation(
            animation_name, transition_time, easing_fn, finished, on_error, interrupted, advanced
        )
        if not future.rejected:
            self._emit(MixerEvent.RESUME, layer_name=layer_name, animation_name=animation_name)
        return future

    def _layer_for_control(self, layer_name: str, operation: str) -> AnimationLayer | None:
        index = self._index_of(layer_name)
        if index == -1:
            logger.warning("Cannot %s on layer %s. No layer exists with this name.", operation, layer_name)
            return None
        return self._layers[index]

    def pause_animation(self, layer_name: str) -> bool:
        layer = self._layer_for_control(layer_name, "pause animation")
        if layer is None or not layer.pause_animation():
            return False
        self._emit(MixerEvent.PAUSE, layer_name=layer_name, animation_name=layer.current_animation or "")
        return True

    def stop_animation(self, layer_name: str) -> bool:
        """Stop the current animation, resolving it as finished."""
        layer = self._layer_for_control(layer_name, "stop animation")
        return layer is not None and layer.stop_animation()

    def cancel_animation(self, layer_name: str) -> bool:
        """Cancel the current animation, reporting it as interrupted."""
        layer = self._layer_for_control(layer_name, "cancel animation")
        return layer is not None and layer.cancel_animation()

    # --- Mixer ---

    def pause(self) -> None:
        """Stop advancing every layer until :meth:`resume`."""
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def update(self, delta_time: float) -> None:
        """Advance every layer by *delta_time* milliseconds and reweight them."""
        if self._paused:
            return

        remaining = 1.0
        for layer in reversed(list(self._layers)):
            layer.update(delta_time)
            if layer.blend_mode is LayerBlendMode.ADDITIVE:
                layer.update_internal_weight(1.0)
            else:
                layer.update_internal_weight(remaining)
                remaining *= 1.0 - layer.weight

    def discard(self) -> None:
        """Discard every layer and drop all listeners."""
        layers, self._layers = self._layers, []
        for layer in layers:
            layer.discard()
        for listeners in self._listeners.values():
            listeners.clear()
        logger.info("Mixer discarded")
