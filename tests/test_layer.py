"""Tests for AnimationLayer."""

from __future__ import annotations

import pytest

from animstate.errors import InvalidArgumentError, NotFoundError
from animstate.layer import AnimationLayer, LayerBlendMode, parse_blend_mode


class TestAnimationLayer:
    """Tests for layer defaults and animation access."""

    def test_defaults(self) -> None:
        """Layers start at full weight in override mode."""
        layer = AnimationLayer("Base")
        assert layer.weight == 1.0
        assert layer.blend_mode is LayerBlendMode.OVERRIDE

    def test_blend_mode_by_name(self) -> None:
        """Blend modes parse from their names."""
        assert parse_blend_mode("Additive") is LayerBlendMode.ADDITIVE
        with pytest.raises(InvalidArgumentError):
            parse_blend_mode("screen")

    def test_animation_weight(self, make_single, ticker) -> None:
        """Animation weights can be read and animated."""
        layer = AnimationLayer("Base", states=[make_single("walk", loop_count=float("inf"))])
        layer.play_animation("walk")
        future = layer.set_animation_weight("walk", 0.5, seconds=1)
        ticker(layer, 1)
        assert future.resolved
        assert layer.get_animation_weight("walk") == 0.5
        with pytest.raises(NotFoundError):
            layer.get_animation_weight("run")

    def test_playback_delegates_to_player(self, make_single) -> None:
        """Layer playback controls the current animation."""
        layer = AnimationLayer("Base", states=[make_single("walk"), make_single("run")])
        layer.play_animation("walk")
        assert layer.current_animation == "walk"
        assert layer.pause_animation()
        assert layer.get_state("walk").paused
        layer.resume_animation()
        assert not layer.get_state("walk").paused
        assert layer.stop_animation()
        assert layer.get_state("walk").finish_future.resolved
