"""Tests for Player and PlayerState."""

from __future__ import annotations

import pytest

from animstate.errors import InvalidArgumentError, NotFoundError
from animstate.state.container import StateContainer
from animstate.state.player import Player, PlayerState


@pytest.fixture
def player_state(make_single) -> PlayerState:
    """A fully weighted player over two one-second clips."""
    state = PlayerState("player", 1.0, [make_single("a"), make_single("b")])
    state.update_internal_weight(1.0)
    return state


class TestDirectSwitch:
    """Tests for switching without a transition."""

    def test_switch_moves_weight_in_same_update(self, player_state, ticker) -> None:
        """The old state drops to 0 and the new one gets full weight at once."""
        a, b = player_state.get_state("a"), player_state.get_state("b")
        player_state.player.play_animation("a")
        ticker(player_state, 1, 16)
        assert a.internal_weight == 1.0

        player_state.player.play_animation("b", transition_time=0)
        ticker(player_state, 1, 16)

        assert a.internal_weight == 0.0
        assert b.internal_weight == 1.0
        assert player_state.current_animation == "b"
        assert not player_state.is_transitioning

    def test_switch_interrupts_previous(self, player_state) -> None:
        """The previous state is canceled when control moves away."""
        interrupted = []
        player_state.player.play_animation("a", on_cancel=interrupted.append)
        player_state.player.play_animation("b")
        assert len(interrupted) == 1

    def test_replay_restarts_current(self, player_state, ticker) -> None:
        """Playing the current state again starts it from the beginning."""
        a = player_state.get_state("a")
        first = player_state.player.play_animation("a")
        ticker(player_state, 1, 500)
        second = player_state.player.play_animation("a")
        assert first.canceled
        assert second.pending
        assert a.normalized_time == 0.0

    def test_internal_weight_follows_current(self, player_state) -> None:
        """A player state reports its current state's influence."""
        assert player_state.internal_weight == 0.0
        player_state.player.play_animation("a")
        assert player_state.internal_weight == 1.0


class TestCrossfade:
    """Tests for switching through the shared transition."""

    def test_crossfade_then_hand_over(self, player_state, ticker) -> None:
        """A positive transition time blends and then hands control over."""
        a, b = player_state.get_state("a"), player_state.get_state("b")
        a.loop_count = float("inf")
        player_state.player.play_animation("a")
        player_state.player.play_animation("b", transition_time=1.0)

        assert player_state.is_transitioning
        assert player_state.current_animation == "b"

        ticker(player_state, 1, 500)
        assert a.internal_weight == pytest.approx(0.5)
        assert b.internal_weight == pytest.approx(0.5)

        ticker(player_state, 1, 500)
        assert not player_state.is_transitioning
        assert player_state.current_state is b
        assert a.internal_weight == 0.0
        assert b.internal_weight == 1.0
        assert player_state.player.transition_state.weight == 0.0

    def test_transition_instance_is_reused(self, player_state, ticker) -> None:
        """Consecutive crossfades use the same transition object."""
        transition = player_state.player.transition_state
        player_state.player.play_animation("a")
        player_state.player.play_animation("b", transition_time=0.5)
        ticker(player_state, 1, 500)
        player_state.player.play_animation("a", transition_time=0.5)
        assert player_state.player.transition_state is transition
        assert transition.target is player_state.get_state("a")

    def test_replay_mid_transition_resets_it(self, player_state, ticker) -> None:
        """Replaying the target mid-blend restarts the blend in place."""
        player_state.player.play_animation("a")
        player_state.player.play_animation("b", transition_time=1.0)
        ticker(player_state, 1, 500)
        player_state.player.play_animation("b", transition_time=1.0)
        assert player_state.is_transitioning
        assert player_state.player.transition_state.progress == 0.0


class TestErrors:
    """Tests for error handling."""

    def test_unknown_name_rejects(self, player_state) -> None:
        """Playing a missing state rejects and keeps the current state."""
        errors = []
        player_state.player.play_animation("a")
        future = player_state.player.play_animation("ghost", on_error=errors.append)

        assert future.rejected
        assert isinstance(future.value, NotFoundError)
        assert future.value.operation == "play"
        assert player_state.current_animation == "a"
        assert len(errors) == 1

    def test_resume_unknown_name_rejects(self, player_state) -> None:
        """resume reports the operation it failed in."""
        future = player_state.player.resume_animation("ghost")
        assert future.rejected
        assert future.value.operation == "resume"

    def test_negative_transition_time_raises(self) -> None:
        """Negative transition times are programming errors."""
        with pytest.raises(InvalidArgumentError):
            Player(StateContainer(), transition_time=-1)
        state = PlayerState("player")
        with pytest.raises(InvalidArgumentError):
            state.transition_time = -0.5


class TestPlayerState:
    """Tests for container changes under a player."""

    def test_removing_current_state_clears_it(self, player_state) -> None:
        """A removed state is no longer current."""
        player_state.player.play_animation("a")
        player_state.remove_state("a")
        assert player_state.current_state is None

    def test_pause_and_resume_animation(self, player_state, ticker) -> None:
        """pause_animation holds the current clip until resumed."""
        a = player_state.get_state("a")
        player_state.player.play_animation("a")
        player_state.player.pause_animation()
        ticker(player_state, 1, 500)
        assert a.normalized_time == 0.0
        player_state.player.resume_animation()
        ticker(player_state, 1, 500)
        assert a.normalized_time == pytest.approx(0.5)

    def test_discard(self, player_state) -> None:
        """Discarding releases the current state and discards children."""
        a = player_state.get_state("a")
        player_state.player.play_animation("a")
        player_state.discard()
        assert player_state.current_state is None
        assert a.discarded

    def test_resumed_crossfade_still_hands_over(self, player_state, ticker) -> None:
        """A crossfade canceled midway completes once resumed."""
        a, b = player_state.get_state("a"), player_state.get_state("b")
        player_state.player.play_animation("a")
        player_state.player.play_animation("b", transition_time=1.0)
        ticker(player_state, 1, 250)

        player_state.player.cancel_animation()
        player_state.player.resume_animation()
        ticker(player_state, 10, 250)

        assert not player_state.is_transitioning
        assert player_state.current_state is b
        assert player_state.player.transition_state.progress == 1.0
        assert a.weight == 0.0

    def test_stopped_crossfade_still_hands_over(self, player_state, ticker) -> None:
        """Stopping then resuming a crossfade does not leave it stuck."""
        b = player_state.get_state("b")
        player_state.player.play_animation("a")
        player_state.player.play_animation("b", transition_time=1.0)
        ticker(player_state, 1, 250)

        player_state.player.stop_animation()
        player_state.player.resume_animation()
        ticker(player_state, 10, 250)

        assert not player_state.is_transitioning
        assert player_state.current_state is b
