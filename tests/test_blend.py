"""Tests for BlendState and FreeBlendState."""

from __future__ import annotations

import pytest

from animstate.errors import NotFoundError
from animstate.state.blend import BlendState, FreeBlendState


class TestBlendWeights:
    """Tests for blend weight access and propagation."""

    def test_set_blend_weight_over_two_seconds(self, make_single, ticker) -> None:
        """A 2 second ramp reaches exactly 1 and resolves by the fourth 1 s tick."""
        blend = BlendState("blend", 1.0, [make_single("idle", weight=0.0)])
        future = blend.set_blend_weight("idle", 1.0, seconds=2)

        ticker(blend, 1)
        assert future.pending
        assert blend.get_blend_weight("idle") == pytest.approx(0.5)
        ticker(blend, 3)
        assert blend.get_blend_weight("idle") == 1.0
        assert future.resolved
        assert not future.canceled

    def test_unknown_blend_name_raises(self, make_single) -> None:
        """Weights of unknown sub-states cannot be read or set."""
        blend = BlendState("blend", states=[make_single("a")])
        with pytest.raises(NotFoundError):
            blend.get_blend_weight("ghost")
        with pytest.raises(NotFoundError):
            blend.set_blend_weight("ghost", 1.0)

    def test_internal_weight_is_sum_of_children(self, make_single) -> None:
        """A blend reports the total influence of its sub-states."""
        blend = BlendState("blend", 0.5, [make_single("a", weight=1.0), make_single("b", weight=0.5)])
        blend.update_internal_weight(1.0)
        assert blend.get_state("a").internal_weight == pytest.approx(0.5)
        assert blend.get_state("b").internal_weight == pytest.approx(0.25)
        assert blend.internal_weight == pytest.approx(0.75)

    def test_free_blend_normalizes_overfull_weights(self, make_single) -> None:
        """Sub-weights summing above 1 are scaled down."""
        blend = FreeBlendState("blend", 1.0, [make_single("a", weight=1.0), make_single("b", weight=1.0)])
        blend.update_internal_weight(1.0)
        assert blend.get_state("a").internal_weight == pytest.approx(0.5)
        assert blend.internal_weight == pytest.approx(1.0)

    def test_free_blend_keeps_partial_weights(self, make_single) -> None:
        """Sub-weights summing below 1 are used as they are."""
        blend = FreeBlendState("blend", 1.0, [make_single("a", weight=0.25), make_single("b", weight=0.25)])
        blend.update_internal_weight(1.0)
        assert blend.get_state("a").internal_weight == pytest.approx(0.25)
        assert blend.internal_weight == pytest.approx(0.5)


class TestBlendPlayback:
    """Tests for playback fan-out."""

    def test_finishes_when_all_children_finish(self, make_single, ticker) -> None:
        """The blend's finish waits for its longest child."""
        finished = []
        blend = BlendState("blend", 1.0, [make_single("short", duration=1.0), make_single("long", duration=2.0)])
        finish = blend.play(on_finish=finished.append)
        ticker(blend, 1)
        assert finish.pending
        ticker(blend, 1)
        assert finish.resolved
        assert len(finished) == 1

    def test_cancel_one_child_cancels_siblings(self, make_single) -> None:
        """A canceled child interrupts the whole blend."""
        canceled = []
        blend = BlendState("blend", 1.0, [make_single("a"), make_single("b")])
        finish = blend.play(on_cancel=canceled.append)
        b_finish = blend.get_state("b").finish_future

        blend.get_state("a").cancel()

        assert finish.canceled
        assert b_finish.canceled
        assert len(canceled) == 1

    def test_pause_fans_out(self, make_single, ticker) -> None:
        """Pausing the blend pauses every child."""
        blend = BlendState("blend", 1.0, [make_single("a"), make_single("b")])
        blend.play()
        blend.pause()
        ticker(blend, 1, 500)
        assert all(state.paused for state in blend.states)
        assert blend.get_state("a").normalized_time == 0.0

    def test_stop_resolves(self, make_single) -> None:
        """Stopping the blend resolves its finish."""
        blend = BlendState("blend", 1.0, [make_single("a"), make_single("b")])
        finish = blend.play()
        blend.stop()
        assert finish.resolved
