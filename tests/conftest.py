"""Shared pytest fixtures for animstate tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pytest

from animstate.state.single import SingleState


@dataclass
class RecordingApplier:
    """Clip applier that records every (internal_weight, normalized_time) push."""

    calls: list[tuple[float, float]] = field(default_factory=list)

    def __call__(self, weight: float, time: float) -> None:
        self.calls.append((weight, time))

    @property
    def last_weight(self) -> float:
        return self.calls[-1][0] if self.calls else 0.0

    @property
    def last_time(self) -> float:
        return self.calls[-1][1] if self.calls else 0.0


@pytest.fixture
def applier() -> RecordingApplier:
    """A fresh recording clip applier."""
    return RecordingApplier()


@pytest.fixture
def make_single():
    """Factory for single states with their own recording applier."""

    def _make(name: str, loop_count: float = 1, duration: float = 1.0, weight: float = 0.0) -> SingleState:
        return SingleState(name, weight, RecordingApplier(), duration=duration, loop_count=loop_count)

    return _make


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible random picks."""
    return np.random.default_rng(1234)


def tick(target, count: int, delta_time: float = 1000.0) -> None:
    """Call ``target.update(delta_time)`` *count* times."""
    for _ in range(count):
        target.update(delta_time)


@pytest.fixture
def ticker():
    """The :func:`tick` helper as a fixture."""
    return tick
