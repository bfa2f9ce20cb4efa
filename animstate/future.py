"""Cancellable futures driven by an external frame clock.

A :class:`CancellableFuture` is a resolve/reject/cancel-once result. Unlike
an asyncio future it can carry an *executable* that is re-invoked every time
:meth:`CancellableFuture.execute` is called, which is how time-stepped work
(weight ramps, timers, clip playback) makes progress once per tick.

Completion callbacks run synchronously inside ``resolve``/``reject``/``cancel``
so a whole state graph settles within the ``update`` call that finished it.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import Any, Callable, Iterable

from animstate.errors import FuturePendingError, FutureRejectedError, InvalidArgumentError

logger = logging.getLogger(__name__)

Hook = Callable[[Any], Any]
Settle = Callable[[Any], None]
Executable = Callable[..., Any]


class FutureStatus(Enum):
    PENDING = auto()
    RESOLVED = auto()
    REJECTED = auto()
    CANCELED = auto()


def _noop(resolve: Settle, reject: Settle, cancel: Settle, *args: Any) -> None:
    pass


class CancellableFuture:
    """A future that can be resolved, rejected or canceled by its owner.

    Args:
        executable: Called as ``executable(resolve, reject, cancel, *args)``
            once at construction (with no extra args) and again on every
            :meth:`execute` while the future is pending.
        on_resolve: Transforms the value when the future resolves.
        on_reject: Transforms the value when the future rejects.
        on_cancel: Transforms the value when the future is canceled.

    Canceling completes the future successfully (awaiting it returns the
    cancel value) but :attr:`canceled` becomes ``True`` so callers can tell
    an interruption apart from a normal finish.
    """

    def __init__(
        self,
        executable: Executable | None = None,
        on_resolve: Hook | None = None,
        on_reject: Hook | None = None,
        on_cancel: Hook | None = None,
    ) -> None:
        if executable is None:
            executable = _noop
        if not callable(executable):
            raise InvalidArgumentError("Cannot create CancellableFuture. Executable must be callable.")
        for label, hook in (("on_resolve", on_resolve), ("on_reject", on_reject), ("on_cancel", on_cancel)):
            if hook is not None and not callable(hook):
                raise InvalidArgumentError(f"Cannot create CancellableFuture. {label} must be callable.")

        self._status = FutureStatus.PENDING
        self._value: Any = None
        self._executable = executable
        self._hooks = {
            FutureStatus.RESOLVED: on_resolve,
            FutureStatus.REJECTED: on_reject,
            FutureStatus.CANCELED: on_cancel,
        }
        self._callbacks: list[Callable[[CancellableFuture], None]] = []

        executable(self.resolve, self.reject, self.cancel)

    def __repr__(self) -> str:
        return f"<CancellableFuture {self._status.name.lower()}>"

    # --- Status ---

    @property
    def status(self) -> FutureStatus:
        return self._status

    @property
    def pending(self) -> bool:
        return self._status is FutureStatus.PENDING

    @property
    def resolved(self) -> bool:
        return self._status is FutureStatus.RESOLVED

    @property
    def rejected(self) -> bool:
        return self._status is FutureStatus.REJECTED

    @property
    def canceled(self) -> bool:
        return self._status is FutureStatus.CANCELED

    @property
    def done(self) -> bool:
        return self._status is not FutureStatus.PENDING

    @property
    def value(self) -> Any:
        """The settled value (after hooks), or ``None`` while pending."""
        return self._value

    def result(self) -> Any:
        """Return the settled value, raising if the future was rejected."""
        if self.pending:
            raise FuturePendingError("Future has not completed yet")
        if self.rejected:
            if isinstance(self._value, BaseException):
                raise self._value
            raise FutureRejectedError(self._value)
        return self._value

    # --- Settling ---

    def resolve(self, value: Any = None) -> None:
        self._settle(FutureStatus.RESOLVED, value)

    def reject(self, value: Any = None) -> None:
        self._settle(FutureStatus.REJECTED, value)

    def cancel(self, value: Any = None) -> None:
        self._settle(FutureStatus.CANCELED, value)

    def _settle(self, status: FutureStatus, value: Any) -> None:
        if self._status is not FutureStatus.PENDING:
            return
        self._status = status

        hook = self._hooks[status]
        if hook is not None:
            value = hook(value)
        self._value = value

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def execute(self, *args: Any) -> None:
        """Re-run the executable to try to make progress. No-op unless pending."""
        if self.pending:
            self._executable(self.resolve, self.reject, self.cancel, *args)

    def add_done_callback(self, callback: Callable[[CancellableFuture], None]) -> None:
        """Call ``callback(self)`` once the future completes (now, if it has)."""
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def then(
        self,
        on_resolve: Hook | None = None,
        on_reject: Hook | None = None,
        on_cancel: Hook | None = None,
    ) -> CancellableFuture:
        """Call the matching function with the settled value once done.

        Unlike the constructor hooks these run after every earlier
        listener (joins included) has seen the result, and their return
        value is ignored.
        """
        def _dispatch(future: CancellableFuture) -> None:
            if future.canceled:
                callback = on_cancel
            elif future.rejected:
                callback = on_reject
            else:
                callback = on_resolve
            if callback is not None:
                callback(future.value)

        self.add_done_callback(_dispatch)
        return self

    def __await__(self):
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def _transfer(future: CancellableFuture) -> None:
            if waiter.done():
                return
            if future.rejected:
                error = future.value
                if not isinstance(error, BaseException):
                    error = FutureRejectedError(error)
                waiter.set_exception(error)
            else:
                waiter.set_result(future.value)

        self.add_done_callback(_transfer)
        return waiter.__await__()

    # --- Constructors ---

    @classmethod
    def resolved_with(cls, value: Any = None) -> CancellableFuture:
        """Return an already resolved future."""
        return cls(lambda resolve, reject, cancel: resolve(value))

    @classmethod
    def rejected_with(cls, value: Any = None) -> CancellableFuture:
        """Return an already rejected future."""
        return cls(lambda resolve, reject, cancel: reject(value))

    @classmethod
    def canceled_with(cls, value: Any = None) -> CancellableFuture:
        """Return an already canceled future."""
        return cls(lambda resolve, reject, cancel: cancel(value))

    @classmethod
    def all(
        cls,
        iterable: Iterable[Any],
        on_resolve: Hook | None = None,
        on_reject: Hook | None = None,
        on_cancel: Hook | None = None,
    ) -> CancellableFuture:
        """Join futures and plain values into one future.

        Resolves with the list of values in input order once every item has
        resolved. The first rejection rejects the result and every tracked
        future still pending; the first cancellation does the same with
        cancel. Settling the result from outside is forwarded to every
        tracked future. Plain values count as already resolved.
        """
        try:
            items = list(iterable)
        except TypeError:
            error = "Cannot execute CancellableFuture.all. First argument must be iterable."
            if on_reject is not None:
                error = on_reject(error)
            return cls.rejected_with(error)

        tracked = [item for item in items if isinstance(item, CancellableFuture)]

        def _forward(settle: Callable[[CancellableFuture, Any], None], hook: Hook | None) -> Hook:
            def _hook(value: Any) -> Any:
                siblings = list(tracked)
                tracked.clear()
                for item in siblings:
                    settle(item, value)
                return hook(value) if hook is not None else value
            return _hook

        result = cls(
            None,
            _forward(CancellableFuture.resolve, on_resolve),
            _forward(CancellableFuture.reject, on_reject),
            _forward(CancellableFuture.cancel, on_cancel),
        )

        total = len(items)
        values: list[Any] = [None] * total
        tracker = {"failed": False, "resolved": 0}

        def _item_resolved(index: int, value: Any) -> None:
            values[index] = value
            tracker["resolved"] += 1
            if tracker["resolved"] == total:
                result.resolve(list(values))

        def _item_failed(settle: Callable[[CancellableFuture, Any], None], value: Any) -> None:
            if not tracker["failed"]:
                tracker["failed"] = True
                settle(result, value)

        def _watch(index: int, item: Any) -> None:
            if isinstance(item, CancellableFuture):
                def _on_done(future: CancellableFuture) -> None:
                    if tracker["failed"] or not result.pending:
                        return
                    if future.rejected:
                        _item_failed(CancellableFuture.reject, future.value)
                    elif future.canceled:
                        _item_failed(CancellableFuture.cancel, future.value)
                    else:
                        _item_resolved(index, future.value)
                item.add_done_callback(_on_done)
            elif asyncio.isfuture(item):
                def _on_asyncio_done(future: asyncio.Future) -> None:
                    if tracker["failed"] or not result.pending:
                        return
                    if future.cancelled():
                        _item_failed(CancellableFuture.cancel, None)
                    elif future.exception() is not None:
                        _item_failed(CancellableFuture.reject, future.exception())
                    else:
                        _item_resolved(index, future.result())
                item.add_done_callback(_on_asyncio_done)
            else:
                _item_resolved(index, item)

        if total == 0:
            result.resolve([])
            return result

        for index, item in enumerate(items):
            if tracker["failed"] or not result.pending:
                break
            _watch(index, item)

        return result
