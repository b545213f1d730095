"""Unit tests for LookupContext."""

import threading
from time import sleep

import dns.exception

from rbllookup.utils.context import DeadlineExceeded, LookupCancelled, LookupContext


class TestLookupContext:
    """Test cancellation and deadline tracking."""

    def test_background_context_is_live(self):
        ctx = LookupContext()

        assert ctx.cancelled is False
        assert ctx.expired is False
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert ctx.err() is None

    def test_cancel(self):
        ctx = LookupContext(timeout=60)
        ctx.cancel()

        assert ctx.cancelled is True
        assert isinstance(ctx.err(), LookupCancelled)

    def test_deadline_expires(self):
        ctx = LookupContext(timeout=0.01)
        sleep(0.02)

        assert ctx.expired is True
        assert ctx.remaining() == 0.0
        err = ctx.err()
        assert isinstance(err, DeadlineExceeded)
        assert isinstance(err, dns.exception.Timeout)

    def test_remaining_counts_down(self):
        ctx = LookupContext(timeout=30)

        assert 0 < ctx.remaining() <= 30

    def test_context_manager_cancels_on_exit(self):
        with LookupContext() as ctx:
            assert ctx.cancelled is False

        assert ctx.cancelled is True

    def test_cancel_wakes_subscribers(self):
        ctx = LookupContext()
        waiter = threading.Event()
        ctx.subscribe(waiter)

        ctx.cancel()

        assert waiter.is_set()

    def test_subscribe_after_cancel_is_woken(self):
        ctx = LookupContext()
        ctx.cancel()
        waiter = threading.Event()

        ctx.subscribe(waiter)

        assert waiter.is_set()

    def test_unsubscribed_waiter_is_not_woken(self):
        ctx = LookupContext()
        waiter = threading.Event()
        ctx.subscribe(waiter)
        ctx.unsubscribe(waiter)

        ctx.cancel()

        assert not waiter.is_set()

    def test_error_messages(self):
        assert str(LookupCancelled()) == "The lookup context was cancelled."
        assert str(DeadlineExceeded()) == "The lookup context deadline was exceeded."
