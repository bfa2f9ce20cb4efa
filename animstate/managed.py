"""Layers managed by name, tracked through mixer events.

A :class:`LayerManager` lets a controller (a look-at, a gesture driver, a
lip-sync driver ...) register the layers and animations it wants to drive
before they exist on the mixer. Registrations become active as the mixer
reports the matching layers and animations, and inactive again when they
are removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from animstate.constants import DEFAULT_BLEND_TIME
from animstate.easing import EasingFn
from animstate.mixer import AnimationMixer, MixerEvent, MixerMessage

logger = logging.getLogger(__name__)


@dataclass
class ManagedAnimation:
    """Options registered for one animation of a managed layer."""

    options: dict[str, Any] = field(default_factory=dict)
    is_active: bool = False


@dataclass
class ManagedLayer:
    """Options registered for a managed layer."""

    blend_time: float = DEFAULT_BLEND_TIME
    easing_fn: EasingFn | None = None
    animations: dict[str, ManagedAnimation] = field(default_factory=dict)
    is_active: bool = False


class LayerManager:
    """Tracks registered layers and blends their weights as a group.

    Args:
        mixer: The mixer whose events decide which registrations are active.
    """

    def __init__(self, mixer: AnimationMixer) -> None:
        self._mixer = mixer
        self._layers: dict[str, ManagedLayer] = {}
        self._handlers: dict[MixerEvent, Callable[[MixerMessage], None]] = {
            MixerEvent.LAYER_ADDED: self._on_layer_added,
            MixerEvent.LAYER_REMOVED: self._on_layer_removed,
            MixerEvent.LAYER_RENAMED: self._on_layer_renamed,
            MixerEvent.ANIMATION_ADDED: self._on_animation_added,
            MixerEvent.ANIMATION_REMOVED: self._on_animation_removed,
            MixerEvent.ANIMATION_RENAMED: self._on_animation_renamed,
        }
        for event, handler in self._handlers.items():
            mixer.on(event, handler)

    @property
    def mixer(self) -> AnimationMixer:
        return self._mixer

    @property
    def managed_layers(self) -> dict[str, ManagedLayer]:
        return self._layers

    # --- Mixer events ---

    def _on_layer_added(self, message: MixerMessage) -> None:
        layer = self._layers.get(message.layer_name)
        if layer is None:
            return
        layer.is_active = True
        existing = self._mixer.get_animations(message.layer_name)
        for name, animation in layer.animations.items():
            animation.is_active = name in existing

    def _on_layer_removed(self, message: MixerMessage) -> None:
        layer = self._layers.get(message.layer_name)
        if layer is None:
            return
        layer.is_active = False
        for animation in layer.animations.values():
            animation.is_active = False

    def _on_layer_renamed(self, message: MixerMessage) -> None:
        layer = self._layers.pop(message.old_name, None)
        if layer is not None:
            self._layers[message.new_name] = layer

    def _on_animation_added(self, message: MixerMessage) -> None:
        layer = self._layers.get(message.layer_name)
        if layer is not None and message.animation_name in layer.animations:
            layer.animations[message.animation_name].is_active = True

    def _on_animation_removed(self, message: MixerMessage) -> None:
        layer = self._layers.get(message.layer_name)
        if layer is not None and message.animation_name in layer.animations:
            layer.animations[message.animation_name].is_active = False

    def _on_animation_renamed(self, message: MixerMessage) -> None:
        layer = self._layers.get(message.layer_name)
        if layer is None:
            return
        animation = layer.animations.pop(message.old_name, None)
        if animation is not None:
            layer.animations[message.new_name] = animation

    # --- Registration ---

    def register_layer(
        self,
        name: str,
        blend_time: float | None = None,
        easing_fn: EasingFn | None = None,
        animations: dict[str, dict[str, Any]] | None = None,
    ) -> ManagedLayer:
        """Register (or update) a managed layer and its animations."""
        layer = self._layers.get(name)
        if layer is None:
            layer = self._layers[name] = ManagedLayer()
        if blend_time is not None:
            layer.blend_time = blend_time
        if easing_fn is not None:
            layer.easing_fn = easing_fn
        layer.is_active = name in self._mixer.layers

        for animation_name, options in (animations or {}).items():
            self.register_animation(name, animation_name, **options)
        return layer

    def register_animation(self, layer_name: str, animation_name: str, **options: Any) -> ManagedAnimation:
        """Register (or update) an animation, registering its layer if needed."""
        layer = self._layers.get(layer_name)
        if layer is None:
            layer = self.register_layer(layer_name)

        animation = layer.animations.setdefault(animation_name, ManagedAnimation())
        animation.options.update(options)
        animation.is_active = layer.is_active and animation_name in self._mixer.get_animations(layer_name)
        return animation

    def is_layer_active(self, name: str) -> bool:
        layer = self._layers.get(name)
        return layer is not None and layer.is_active

    def is_animation_active(self, layer_name: str, animation_name: str) -> bool:
        layer = self._layers.get(layer_name)
        if layer is None:
            return False
        animation = layer.animations.get(animation_name)
        return animation is not None and animation.is_active

    # --- Weights ---

    def set_layer_weights(
        self,
        name_filter: Callable[[str], bool] | None = None,
        weight: float = 1.0,
        seconds: float | None = None,
        easing_fn: EasingFn | None = None,
    ) -> None:
        """Animate the weight of every active managed layer passing *name_filter*.

        ``seconds`` defaults to each layer's own blend time, ``easing_fn``
        to each layer's own easing.
        """
        for name, layer in list(self._layers.items()):
            if name_filter is not None and not name_filter(name):
                continue
            if not layer.is_active:
                continue
            self._mixer.set_layer_weight(
                name,
                weight,
                layer.blend_time if seconds is None else seconds,
                easing_fn or layer.easing_fn,
            )

    def enable(self, seconds: float | None = None, easing_fn: EasingFn | None = None) -> None:
        """Blend every active managed layer to full weight."""
        self.set_layer_weights(None, 1.0, seconds, easing_fn)

    def disable(self, seconds: float | None = None, easing_fn: EasingFn | None = None) -> None:
        """Blend every active managed layer out."""
        self.set_layer_weights(None, 0.0, seconds, easing_fn)

    def discard(self) -> None:
        """Stop listening to the mixer and forget every registration."""
        for event, handler in self._handlers.items():
            self._mixer.off(event, handler)
        self._layers.clear()
