"""Error types raised or carried by rejected futures."""

from __future__ import annotations


class AnimStateError(Exception):
    """Base class for all animstate errors."""


class NotFoundError(AnimStateError, LookupError):
    """An operation referenced a state or layer name that does not exist.

    ``kind`` names what was looked up (a state or a layer).
    ``operation`` records what was attempted (``"play"``, ``"resume"``,
    ``"rename"`` ...) so the rejection can be traced back to its call.
    """

    def __init__(self, name: str, operation: str, owner: str = "", kind: str = "state") -> None:
        self.name = name
        self.operation = operation
        self.owner = owner
        where = f" in {owner}" if owner else ""
        super().__init__(f"Cannot {operation} {name!r}{where}. No {kind} exists with this name.")

    def __str__(self) -> str:
        return self.args[0]


class InvalidArgumentError(AnimStateError, ValueError):
    """A programming error: bad argument passed to a synchronous call."""


class FutureRejectedError(AnimStateError):
    """Raised by ``CancellableFuture.result()`` when the future was rejected
    with a value that is not itself an exception."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Future rejected with {value!r}")


class FuturePendingError(AnimStateError):
    """``result()`` was called on a future that has not completed yet."""
