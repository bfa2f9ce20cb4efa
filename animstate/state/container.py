"""Ordered collections of uniquely named states."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from animstate.errors import NotFoundError
from animstate.state.state import State
from animstate.util.naming import get_unique_name

logger = logging.getLogger(__name__)


class StateContainer:
    """Maps unique names to states, preserving insertion order.

    Adding a state whose name is taken renames the state with an incremented
    numeric suffix. Adding the same instance twice is a no-op.

    Args:
        owner_name: Name used in log and error messages.
    """

    def __init__(self, owner_name: str = "") -> None:
        self.owner_name = owner_name
        self._states: dict[str, State] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[State]:
        return iter(list(self._states.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def get_state(self, name: str) -> State | None:
        return self._states.get(name)

    def get_state_names(self) -> list[str]:
        return list(self._states.keys())

    def contains_instance(self, state: State) -> bool:
        return any(existing is state for existing in self._states.values())

    def add_state(self, state: State) -> str:
        """Add *state* and return the (possibly changed) unique name."""
        if self.contains_instance(state):
            logger.warning(
                "Cannot add state %s to %s. State was already added.", state.name, self.owner_name
            )
            return state.name

        unique_name = get_unique_name(state.name, self._states)
        if unique_name != state.name:
            logger.warning(
                "State name %s is not unique in %s. State will be added as %s.",
                state.name, self.owner_name, unique_name,
            )
            state.name = unique_name

        self._states[state.name] = state
        return state.name

    def remove_state(self, name: str) -> bool:
        """Discard and remove the state called *name*. Returns False if absent."""
        state = self._states.pop(name, None)
        if state is None:
            logger.warning(
                "Did not remove state %s from %s. No state exists with this name.", name, self.owner_name
            )
            return False
        state.discard()
        return True

    def rename_state(self, current_name: str, new_name: str) -> str:
        """Rename a state, resolving collisions. Returns the final name."""
        state = self._states.get(current_name)
        if state is None:
            raise NotFoundError(current_name, "rename", self.owner_name)
        if current_name == new_name:
            return current_name

        others = [name for name in self._states if name != current_name]
        unique_name = get_unique_name(new_name, others)
        if unique_name != new_name:
            logger.warning(
                "State name %s is not unique in %s. State will be renamed to %s.",
                new_name, self.owner_name, unique_name,
            )

        # Rebuild to keep the renamed state at its original position
        self._states = {
            (unique_name if name == current_name else name): existing
            for name, existing in self._states.items()
        }
        state.name = unique_name
        return unique_name

    def discard_states(self) -> None:
        states, self._states = list(self._states.values()), {}
        for state in states:
            state.discard()


class ContainerState(State):
    """A state that owns a :class:`StateContainer` of sub-states.

    Container operations are delegated to the owned container.

    Args:
        name: Name of the state.
        weight: Initial weight.
        states: Sub-states to add in order.
    """

    def __init__(
        self,
        name: str | None = None,
        weight: float = 0.0,
        states: Iterable[State] = (),
    ) -> None:
        super().__init__(name=name, weight=weight)
        self._container = StateContainer(owner_name=self.name)
        for state in states:
            self.add_state(state)

    @property
    def states(self) -> StateContainer:
        return self._container

    def get_state(self, name: str) -> State | None:
        return self._container.get_state(name)

    def get_state_names(self) -> list[str]:
        return self._container.get_state_names()

    def add_state(self, state: State) -> str:
        self._container.owner_name = self.name
        return self._container.add_state(state)

    def remove_state(self, name: str) -> bool:
        return self._container.remove_state(name)

    def rename_state(self, current_name: str, new_name: str) -> str:
        return self._container.rename_state(current_name, new_name)

    def discard_states(self) -> None:
        self._container.discard_states()

    def discard(self) -> None:
        if self._discarded:
            return
        super().discard()
        self.discard_states()
