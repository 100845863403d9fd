"""Cooperative cancellation and completion tracking.

CancellableContext bundles three things that one logical job needs when
it runs several tracked operations (probe, then encode):

- a cancel signal that any thread may raise, any number of times
- a counter of outstanding units of work (add/done)
- a one-shot "all work drained" event

Cancellation only signals intent. Each unit of work watches the signal
and finishes on its own; the context never force-completes anything.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum


class OperationState(Enum):
    """Lifecycle state of a CancellableContext."""

    ACTIVE = "active"
    CANCEL_REQUESTED = "cancel_requested"
    DRAINED = "drained"


class CancellableContext:
    """Cancellation/completion token shared by the operations of one job.

    Thread-safe: add(), done() and cancel() may be called concurrently from
    any number of threads.

    Example:
        context = CancellableContext()
        runner.run_streaming(context, "ffmpeg", args, sink)  # tracked unit
        ...
        context.cancel()  # from a signal handler or another thread
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._drained: threading.Event | None = None
        self._outstanding = 0
        self._registered = 0
        self._state = OperationState.ACTIVE
        self._callbacks: dict[int, Callable[[], None]] = {}
        self._next_callback_id = 0

    @property
    def state(self) -> OperationState:
        """Current lifecycle state."""
        with self._lock:
            return self._state

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._cancelled.is_set()

    @property
    def outstanding(self) -> int:
        """Number of registered units that have not called done()."""
        with self._lock:
            return self._outstanding

    def add(self, count: int = 1) -> None:
        """Register additional units of outstanding work.

        Args:
            count: Number of units to register. Must be positive.

        Raises:
            ValueError: If count is not positive.
            RuntimeError: If the context has already drained. Tracking new
                work on a drained context is a programming error.
        """
        if count <= 0:
            raise ValueError(f"add() count must be positive, got {count}")
        with self._lock:
            if self._state is OperationState.DRAINED:
                raise RuntimeError("Cannot track new work on a drained context")
            self._outstanding += count
            self._registered += count

    def done(self) -> None:
        """Mark one unit of work complete.

        Raises:
            ValueError: If more units are marked done than were added.
        """
        with self._lock:
            if self._outstanding <= 0:
                raise ValueError("done() called more times than add() registered")
            self._outstanding -= 1
            if self._outstanding > 0:
                return
            self._state = OperationState.DRAINED
            drained = self._drained
        self._logger.debug("Context drained after %d unit(s)", self._registered)
        if drained is not None:
            drained.set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent and safe from any thread."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            if self._state is OperationState.ACTIVE:
                self._state = OperationState.CANCEL_REQUESTED
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()

        self._logger.debug("Cancellation requested")
        # Callbacks run outside the lock so they may call back into the context
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                self._logger.warning("Cancel callback raised: %s", e)

    def add_cancel_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback to run once when cancellation is requested.

        If the context is already cancelled the callback runs immediately.

        Args:
            callback: Zero-argument callable. Must not block.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled.is_set():
                callback_id = self._next_callback_id
                self._next_callback_id += 1
                self._callbacks[callback_id] = callback

                def remove() -> None:
                    with self._lock:
                        self._callbacks.pop(callback_id, None)

                return remove

        callback()
        return lambda: None

    def wait_cancelled(self, timeout: float | None = None) -> bool:
        """Block until cancellation is requested.

        Returns:
            True if cancelled, False if the timeout elapsed first.
        """
        return self._cancelled.wait(timeout)

    def waiting(self) -> threading.Event:
        """Return the one-shot event set when all tracked work has drained.

        The event is created on first use. It is set exactly once, the first
        time the outstanding count returns to zero. A context that never
        registers work never drains.
        """
        with self._lock:
            if self._drained is None:
                self._drained = threading.Event()
                if self._state is OperationState.DRAINED:
                    self._drained.set()
            return self._drained

    def wait(self, timeout: float | None = None) -> bool:
        """Block until all tracked work has drained.

        Returns:
            True if drained, False if the timeout elapsed first.
        """
        return self.waiting().wait(timeout)

    def __repr__(self) -> str:
        return (
            f"CancellableContext(state={self.state.value}, "
            f"outstanding={self.outstanding}, cancelled={self.cancelled})"
        )
