"""TOML mixer profiles: loading, saving, and building a mixer from them."""

from __future__ import annotations

import logging
import math
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import tomli_w

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from animstate.constants import (
    BLEND_OVERRIDE,
    DEFAULT_BLEND_TIME,
    DEFAULT_CLIP_DURATION,
    DEFAULT_EASING,
    DEFAULT_LAYER_WEIGHT,
    DEFAULT_PLAY_INTERVAL,
    DEFAULT_TIME_SCALE,
    DEFAULT_TRANSITION_TIME,
)
from animstate.easing import parse_easing
from animstate.managed import LayerManager
from animstate.mixer import AnimationMixer, AnimationType, create_animation, parse_animation_type
from animstate.state.single import ClipApplier
from animstate.state.state import State

logger = logging.getLogger(__name__)


@dataclass
class AnimationConfig:
    """Configuration for one animation, or one sub-state of a composite."""

    name: str
    type: str = AnimationType.SINGLE.value
    weight: float = 0.0
    # Single
    duration: float = DEFAULT_CLIP_DURATION
    loop_count: int = 0          # 0 = loop forever
    time_scale: float = DEFAULT_TIME_SCALE
    blend_mode: str = BLEND_OVERRIDE
    # Queue / random
    play_interval: float = DEFAULT_PLAY_INTERVAL
    wrap: bool = False
    transition_time: float | None = None   # None = layer default
    easing: str = ""                       # "" = layer default
    states: list[AnimationConfig] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> AnimationConfig:
        return cls(
            name=data["name"],
            type=data.get("type", AnimationType.SINGLE.value),
            weight=data.get("weight", 0.0),
            duration=data.get("duration", DEFAULT_CLIP_DURATION),
            loop_count=data.get("loop_count", 0),
            time_scale=data.get("time_scale", DEFAULT_TIME_SCALE),
            blend_mode=data.get("blend_mode", BLEND_OVERRIDE),
            play_interval=data.get("play_interval", DEFAULT_PLAY_INTERVAL),
            wrap=data.get("wrap", False),
            transition_time=data.get("transition_time"),
            easing=data.get("easing", ""),
            states=[cls._from_dict(s) for s in data.get("states", [])],
        )

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "weight": self.weight,
        }
        animation_type = parse_animation_type(self.type)
        if animation_type is AnimationType.SINGLE:
            data.update(
                duration=self.duration,
                loop_count=self.loop_count,
                time_scale=self.time_scale,
                blend_mode=self.blend_mode,
            )
        else:
            if animation_type is AnimationType.RANDOM:
                data["play_interval"] = self.play_interval
            if animation_type is AnimationType.QUEUE:
                data["wrap"] = self.wrap
            if self.transition_time is not None:
                data["transition_time"] = self.transition_time
            if self.easing:
                data["easing"] = self.easing
            data["states"] = [s._to_dict() for s in self.states]
        return data


@dataclass
class LayerConfig:
    """Configuration for one mixer layer."""

    name: str
    weight: float = DEFAULT_LAYER_WEIGHT
    blend_mode: str = BLEND_OVERRIDE
    transition_time: float | None = None   # None = general default
    easing: str = ""                       # "" = general default
    blend_time: float | None = None        # None = general default
    animations: list[AnimationConfig] = field(default_factory=list)


@dataclass
class GeneralConfig:
    """Defaults shared by every layer."""

    profile_name: str = "Default"
    transition_time: float = DEFAULT_TRANSITION_TIME
    easing: str = DEFAULT_EASING
    blend_time: float = DEFAULT_BLEND_TIME


@dataclass
class MixerConfig:
    """Top-level mixer profile."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    layers: list[LayerConfig] = field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def from_toml(cls, path: Path) -> MixerConfig:
        """Load a profile from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls._from_dict(data, config_path=path)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], config_path: Path | None = None) -> MixerConfig:
        """Build config from a parsed TOML dict."""
        general_data = data.get("general", {})
        general = GeneralConfig(
            profile_name=general_data.get("profile_name", "Default"),
            transition_time=general_data.get("transition_time", DEFAULT_TRANSITION_TIME),
            easing=general_data.get("easing", DEFAULT_EASING),
            blend_time=general_data.get("blend_time", DEFAULT_BLEND_TIME),
        )

        layers = []
        for layer in data.get("layers", []):
            layers.append(LayerConfig(
                name=layer["name"],
                weight=layer.get("weight", DEFAULT_LAYER_WEIGHT),
                blend_mode=layer.get("blend_mode", BLEND_OVERRIDE),
                transition_time=layer.get("transition_time"),
                easing=layer.get("easing", ""),
                blend_time=layer.get("blend_time"),
                animations=[AnimationConfig._from_dict(a) for a in layer.get("animations", [])],
            ))

        return cls(general=general, layers=layers, config_path=config_path)

    def to_toml(self, path: Path) -> None:
        """Save the profile to a TOML file."""
        data = self._to_dict()
        with open(path, "wb") as f:
            tomli_w.dump(data, f)

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to a TOML-compatible dict."""
        layers = []
        for layer in self.layers:
            entry: dict[str, Any] = {
                "name": layer.name,
                "weight": layer.weight,
                "blend_mode": layer.blend_mode,
            }
            if layer.transition_time is not None:
                entry["transition_time"] = layer.transition_time
            if layer.easing:
                entry["easing"] = layer.easing
            if layer.blend_time is not None:
                entry["blend_time"] = layer.blend_time
            entry["animations"] = [a._to_dict() for a in layer.animations]
            layers.append(entry)

        return {
            "general": {
                "profile_name": self.general.profile_name,
                "transition_time": self.general.transition_time,
                "easing": self.general.easing,
                "blend_time": self.general.blend_time,
            },
            "layers": layers,
        }


# clip_binder(layer_name, animation_config) -> applier for a single state
ClipBinder = Callable[[str, AnimationConfig], ClipApplier]


def _build_state(
    layer_name: str,
    config: AnimationConfig,
    transition_time: float,
    easing: str,
    clip_binder: ClipBinder | None,
) -> State:
    animation_type = parse_animation_type(config.type)

    if animation_type is AnimationType.SINGLE:
        return create_animation(
            animation_type,
            config.name,
            weight=config.weight,
            applier=clip_binder(layer_name, config) if clip_binder is not None else None,
            duration=config.duration,
            loop_count=math.inf if config.loop_count <= 0 else config.loop_count,
            time_scale=config.time_scale,
            blend_mode=config.blend_mode,
        )

    if config.transition_time is not None:
        transition_time = config.transition_time
    easing = config.easing or easing
    states = [_build_state(layer_name, s, transition_time, easing, clip_binder) for s in config.states]

    if animation_type is AnimationType.FREE_BLEND:
        return create_animation(animation_type, config.name, weight=config.weight, states=states)

    options: dict[str, Any] = {
        "weight": config.weight,
        "states": states,
        "transition_time": transition_time,
        "easing_fn": parse_easing(easing),
    }
    if animation_type is AnimationType.QUEUE:
        options["wrap"] = config.wrap
    else:
        options["play_interval"] = config.play_interval
    return create_animation(animation_type, config.name, **options)


def build_mixer(config: MixerConfig, clip_binder: ClipBinder | None = None) -> AnimationMixer:
    """Create a mixer with every layer and animation in *config*.

    Args:
        config: The profile to build.
        clip_binder: Called as ``clip_binder(layer_name, animation_config)``
                     for every single animation; returns its clip applier.

    Raises:
        InvalidArgumentError: An animation has an unknown type or invalid
            options.
    """
    mixer = AnimationMixer()
    general = config.general

    for layer_config in config.layers:
        transition_time = (
            layer_config.transition_time
            if layer_config.transition_time is not None
            else general.transition_time
        )
        easing = layer_config.easing or general.easing
        layer_name = mixer.add_layer(
            layer_config.name,
            weight=layer_config.weight,
            blend_mode=layer_config.blend_mode,
            transition_time=transition_time,
            easing_fn=parse_easing(easing),
        )
        layer = mixer.get_layer(layer_name)
        for animation_config in layer_config.animations:
            state = _build_state(layer_name, animation_config, transition_time, easing, clip_binder)
            layer.add_state(state)

    logger.info("Built mixer %r from profile %s", mixer.layers, general.profile_name)
    return mixer


def build_layer_manager(config: MixerConfig, mixer: AnimationMixer) -> LayerManager:
    """Register every layer of *config* with a new :class:`LayerManager`."""
    manager = LayerManager(mixer)
    for layer_config in config.layers:
        manager.register_layer(
            layer_config.name,
            blend_time=(
                layer_config.blend_time
                if layer_config.blend_time is not None
                else config.general.blend_time
            ),
            easing_fn=parse_easing(layer_config.easing) if layer_config.easing else None,
            animations={a.name: {} for a in layer_config.animations},
        )
    return manager


def get_config_dir() -> Path:
    """Return the XDG config directory for animstate.

    Uses $XDG_CONFIG_HOME/animstate if set, otherwise ~/.config/animstate.
    Creates the directory (and profiles/ subdirectory) if they don't exist.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg) / "animstate"
    else:
        base = Path.home() / ".config" / "animstate"
    profiles_dir = base / "profiles"
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return base


def list_profiles() -> list[Path]:
    """List all .toml profiles in the default profiles directory."""
    return sorted((get_config_dir() / "profiles").glob("*.toml"))


def load_profile(path: Path) -> MixerConfig:
    """Load a profile from a TOML file."""
    return MixerConfig.from_toml(path)


def get_default_config() -> MixerConfig:
    """Return a profile with a single empty base layer."""
    return MixerConfig(layers=[LayerConfig(name="Base")])
