"""Tests for tick-driven interpolation and timers."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from animstate.easing import Quadratic
from animstate.interpolate import Interpolation, interpolate_property, wait


@dataclass
class Target:
    value: float = 0.0


class TestInterpolation:
    """Tests for the pure interpolation task."""

    def test_value_is_function_of_elapsed_time(self) -> None:
        """value_at does not depend on how time was accumulated."""
        task = Interpolation(0.0, 10.0, 1000.0)
        assert task.value_at(250) == pytest.approx(2.5)
        assert task.value_at(1000) == 10.0
        assert task.value_at(5000) == 10.0

    def test_advance_accumulates(self) -> None:
        """advance adds to elapsed time and reports progress."""
        task = Interpolation(0.0, 1.0, 1000.0, easing_fn=Quadratic.ease_in)
        assert task.advance(500) == pytest.approx(0.25)
        assert task.progress == pytest.approx(0.5)
        assert not task.finished
        task.advance(500)
        assert task.finished

    def test_zero_duration_is_immediately_done(self) -> None:
        """A zero-length task sits at its target."""
        task = Interpolation(3.0, 7.0, 0.0)
        assert task.finished
        assert task.value_at(0) == 7.0


class TestInterpolateProperty:
    """Tests for interpolate_property."""

    def test_ramps_attribute_per_tick(self) -> None:
        """The attribute follows elapsed time and ends exactly on target."""
        target = Target()
        future = interpolate_property(target, "value", 1.0, seconds=2)
        future.execute(1000)
        assert target.value == pytest.approx(0.5)
        assert future.pending
        future.execute(1000)
        assert target.value == 1.0
        assert future.resolved

    def test_zero_seconds_sets_immediately(self) -> None:
        """With no duration the value is written at construction."""
        target = Target()
        future = interpolate_property(target, "value", 4.0)
        assert target.value == 4.0
        assert future.resolved

    def test_progress_callback(self) -> None:
        """on_progress receives normalized progress."""
        seen = []
        target = Target()
        future = interpolate_property(target, "value", 1.0, seconds=1, on_progress=seen.append)
        future.execute(500)
        assert seen[-1] == pytest.approx(0.5)

    def test_setter_error_rejects(self) -> None:
        """An exception while writing rejects the future."""

        class Broken:
            value = 0.0

            def __setattr__(self, name, value):
                if value > 0.5:
                    raise RuntimeError("too high")
                object.__setattr__(self, name, value)

        errors = []
        future = interpolate_property(Broken(), "value", 1.0, seconds=1, on_error=errors.append)
        future.execute(400)
        assert future.pending
        future.execute(400)
        assert future.rejected
        assert isinstance(errors[0], RuntimeError)

    def test_cancel_keeps_partial_value(self) -> None:
        """Canceling leaves the attribute where the ramp got to."""
        target = Target()
        future = interpolate_property(target, "value", 1.0, seconds=1)
        future.execute(300)
        future.cancel()
        future.execute(700)
        assert future.canceled
        assert target.value == pytest.approx(0.3)


class TestWait:
    """Tests for wait()."""

    def test_resolves_after_accumulated_time(self) -> None:
        """wait resolves once enough delta time has been fed in."""
        finished = []
        future = wait(1.5, on_finish=finished.append)
        future.execute(1000)
        assert future.pending
        future.execute(500)
        assert future.resolved
        assert finished == [None]

    def test_zero_seconds_resolves_at_construction(self) -> None:
        """A zero wait is already done."""
        assert wait(0).resolved
