# src/todolist/core/context.py

from __future__ import annotations

import threading
import time

from ..tasks.errors import DeadlineExceededError, OperationCanceledError


class OpContext:
    """
    Cancellation / deadline token passed to every repository call.

    - deadline is a time.monotonic() timestamp (None = no deadline)
    - cancel() may be called from any thread

    Backends without blocking I/O ignore it; file and SQLite backends check it
    around their I/O.
    """

    __slots__ = ("deadline", "_cancelled")

    def __init__(self, *, deadline: float | None = None) -> None:
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> OpContext:
        return cls(deadline=time.monotonic() + max(0.0, float(seconds)))

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def error(self) -> OperationCanceledError | None:
        """The error check() would raise, or None while the context is live."""
        if self.cancelled:
            return OperationCanceledError("operation canceled")
        if self.expired:
            return DeadlineExceededError("operation deadline exceeded")
        return None

    def check(self) -> None:
        err = self.error()
        if err is not None:
            raise err


def check_ctx(ctx: OpContext | None) -> None:
    if ctx is not None:
        ctx.check()
