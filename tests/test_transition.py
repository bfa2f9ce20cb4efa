"""Tests for TransitionState crossfades."""

from __future__ import annotations

import pytest

from animstate.easing import Quadratic
from animstate.state.state import State
from animstate.state.transitions import TransitionState


class TestTransitionState:
    """Tests for the reusable crossfade state."""

    def test_crossfade_weights(self, ticker) -> None:
        """Outgoing weights scale down while the target ramps up."""
        a, b, c = State("a", 1.0), State("b", 0.5), State("c", 0.0)
        finished = []
        transition = TransitionState()
        transition.configure([a, b], c, 1.0, on_finish=lambda: finished.append(True))

        ticker(transition, 1, 250)
        assert a.weight == pytest.approx(0.75)
        assert b.weight == pytest.approx(0.375)
        assert c.weight == pytest.approx(0.25)
        assert transition.active

        ticker(transition, 1, 750)
        assert (a.weight, b.weight, c.weight) == (0.0, 0.0, 1.0)
        assert finished == [True]
        assert not transition.active

    def test_easing_applies_to_progress(self, ticker) -> None:
        """The eased progress drives the weights."""
        a, b = State("a", 1.0), State("b", 0.0)
        transition = TransitionState()
        transition.configure([a], b, 1.0, Quadratic.ease_in)
        ticker(transition, 1, 500)
        assert b.weight == pytest.approx(0.25)
        assert a.weight == pytest.approx(0.75)

    def test_outgoing_states_are_canceled_on_completion(self, ticker) -> None:
        """States blended out stop playing when the blend completes."""
        a, b = State("a", 1.0), State("b", 0.0)
        a_finish = a.play()
        transition = TransitionState()
        transition.configure([a], b, 0.5)
        ticker(transition, 1, 500)
        assert a_finish.canceled
        assert a.internal_weight == 0.0

    def test_name_follows_target(self) -> None:
        """The transition reports its target's name."""
        a, b = State("a", 1.0), State("b")
        transition = TransitionState()
        transition.configure([a], b, 1.0)
        assert transition.name == "b"

    def test_reconfigure_drops_stale_states(self, ticker) -> None:
        """States from a previous configuration lose their influence."""
        a, b, c = State("a", 1.0), State("b"), State("c")
        transition = TransitionState()
        transition.configure([a], b, 1.0)
        transition.weight = 1.0
        transition.update_internal_weight(1.0)
        assert a.internal_weight == 1.0

        transition.configure([b], c, 1.0)
        assert a.internal_weight == 0.0
        assert transition.outgoing == [b]
        assert transition.target is c

    def test_reset_cancels_weight_ramps(self) -> None:
        """A weight ramp in flight is stopped by a new blend."""
        a, b = State("a", 1.0), State("b")
        ramp = b.set_weight(1.0, seconds=5)
        transition = TransitionState()
        transition.configure([a], b, 1.0)
        assert ramp.canceled

    def test_internal_weight_is_sum_of_involved(self, ticker) -> None:
        """Mid-blend the transition reports the combined influence."""
        a, b = State("a", 1.0), State("b")
        transition = TransitionState()
        transition.configure([a], b, 1.0)
        transition.weight = 1.0
        transition.update_internal_weight(1.0)
        ticker(transition, 1, 500)
        assert transition.internal_weight == pytest.approx(1.0)
