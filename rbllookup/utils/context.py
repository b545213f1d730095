"""Cancellation and deadline tokens for DNS lookups.

A LookupContext is passed into every resolver call. Resolvers wait on it
alongside the in-flight query and give up as soon as it is cancelled or its
deadline passes.
"""

import threading
import time
from typing import List, Optional

import dns.exception


class LookupCancelled(dns.exception.DNSException):
    """The lookup context was cancelled."""


class DeadlineExceeded(dns.exception.Timeout):
    """The lookup context deadline was exceeded."""


class LookupContext:
    """Cancellable, optionally deadline-bearing lookup context.

    Args:
        timeout: Seconds from now until the deadline, or None for no deadline.

    Example:
        >>> with LookupContext(timeout=5) as ctx:
        ...     result = client.lookup_by_host(ctx, "smtp.gmail.com")
    """

    def __init__(self, timeout: Optional[float] = None):
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._waiters: List[threading.Event] = []

    def __enter__(self) -> "LookupContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()

    @property
    def deadline(self) -> Optional[float]:
        """Monotonic deadline, or None."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel the context and wake every pending waiter."""
        with self._lock:
            self._cancelled.set()
            waiters = list(self._waiters)
        for waiter in waiters:
            waiter.set()

    def err(self) -> Optional[dns.exception.DNSException]:
        """Return the reason this context is done, or None if still live."""
        if self.cancelled:
            return LookupCancelled()
        if self.expired:
            return DeadlineExceeded()
        return None

    def subscribe(self, waiter: threading.Event) -> None:
        """Register an event to be set when the context is cancelled."""
        with self._lock:
            if self._cancelled.is_set():
                waiter.set()
            self._waiters.append(waiter)

    def unsubscribe(self, waiter: threading.Event) -> None:
        with self._lock:
            if waiter in self._waiters:
                self._waiters.remove(waiter)
