"""pytest fixtures for testing."""

from typing import Dict, List, Union

import dns.resolver
import pytest

from rbllookup.utils.context import LookupContext


Answer = Union[List[str], Exception]


class FakeResolver:
    """In-memory resolver; unknown names raise NXDOMAIN.

    Values are either a list of answers or an exception to raise.
    """

    def __init__(
        self,
        ip_addrs: Dict[str, Answer] | None = None,
        hosts: Dict[str, Answer] | None = None,
        txt: Dict[str, Answer] | None = None,
    ):
        self.ip_addrs = ip_addrs or {}
        self.hosts = hosts or {}
        self.txt = txt or {}
        self.calls: List[tuple] = []

    def _answer(self, ctx, table, kind, name):
        self.calls.append((kind, name))
        err = ctx.err()
        if err is not None:
            raise err
        value = table.get(name)
        if value is None:
            raise dns.resolver.NXDOMAIN()
        if isinstance(value, Exception):
            raise value
        return list(value)

    def lookup_ip_addr(self, ctx, host):
        return self._answer(ctx, self.ip_addrs, "ip_addr", host)

    def lookup_host(self, ctx, name):
        return self._answer(ctx, self.hosts, "host", name)

    def lookup_txt(self, ctx, name):
        return self._answer(ctx, self.txt, "txt", name)


@pytest.fixture
def fake_resolver():
    """Empty fake resolver; tests fill in its tables."""
    return FakeResolver()


@pytest.fixture
def ctx():
    """Live lookup context without a deadline."""
    with LookupContext() as context:
        yield context
