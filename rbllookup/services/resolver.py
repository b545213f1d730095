"""DNS resolution capability used by the blacklist client.

The client only depends on the Resolver protocol, so tests can substitute
a fake. DNSPythonResolver is the production implementation on top of
dnspython.
"""

import ipaddress
import logging
import threading
from concurrent.futures import Future
from typing import Iterable, List, Optional, Protocol

import dns.exception
import dns.resolver

from rbllookup.utils.context import DeadlineExceeded, LookupCancelled, LookupContext
from rbllookup.utils.ip_utils import AddressNotApplicable


logger = logging.getLogger(__name__)


class PartialAnswer(dns.exception.DNSException):
    """Some addresses resolved but part of the resolution failed.

    Raised by address lookups when one record type answered and another
    failed (e.g. A answered, AAAA timed out).
    """

    supp_kwargs = {"addresses", "cause"}
    fmt = "Partial answer {addresses}: {cause}"

    @property
    def addresses(self) -> List[str]:
        return list(self.kwargs["addresses"])

    @property
    def cause(self) -> dns.exception.DNSException:
        return self.kwargs["cause"]


class Resolver(Protocol):
    """DNS operations needed for DNSBL lookups.

    Every method takes a LookupContext and raises a
    dns.exception.DNSException subclass on failure.
    """

    def lookup_ip_addr(self, ctx: LookupContext, host: str) -> List[str]:
        """Resolve a hostname (or literal IP) to IPv4 and IPv6 addresses."""
        ...

    def lookup_host(self, ctx: LookupContext, name: str) -> List[str]:
        """Resolve a query name to the addresses it answers with."""
        ...

    def lookup_txt(self, ctx: LookupContext, name: str) -> List[str]:
        """Resolve a query name to its TXT record values."""
        ...


def categorize_failure(exception: BaseException) -> str:
    """Categorize a lookup failure for logging and summaries.

    Args:
        exception: The exception captured for a finding or result.

    Returns:
        str: One of: timeout, cancelled, nxdomain, no_answer, no_nameservers,
             not_applicable, unknown_error.
    """
    if isinstance(exception, PartialAnswer):
        return categorize_failure(exception.cause)
    if isinstance(exception, LookupCancelled):
        return "cancelled"
    elif isinstance(exception, dns.exception.Timeout):
        return "timeout"
    elif isinstance(exception, dns.resolver.NXDOMAIN):
        return "nxdomain"
    elif isinstance(exception, dns.resolver.NoAnswer):
        return "no_answer"
    elif isinstance(exception, dns.resolver.NoNameservers):
        return "no_nameservers"
    elif isinstance(exception, AddressNotApplicable):
        return "not_applicable"
    else:
        return "unknown_error"


class DNSPythonResolver:
    """Resolver backed by dns.resolver.Resolver.

    Each query runs on its own daemon thread while the calling thread waits
    for whichever comes first: the answer, context cancellation, or the
    context deadline. The query lifetime is capped by the time left on the
    context, so an abandoned query's thread exits within that lifetime.

    Args:
        nameservers: Nameserver IPs to use instead of the system configuration.
        timeout: Default lifetime in seconds for a single query.
    """

    def __init__(
        self,
        nameservers: Optional[Iterable[str]] = None,
        timeout: float = 5,
    ):
        self._resolver = dns.resolver.Resolver()
        if nameservers:
            self._resolver.nameservers = list(nameservers)
        self._resolver.lifetime = timeout
        self._closed = False

    def __enter__(self) -> "DNSPythonResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Refuse new queries; in-flight queries end within their lifetime."""
        self._closed = True

    def _run(self, future: Future, qname: str, rdtype: str, lifetime: float) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            answer = self._resolver.resolve(qname, rdtype, lifetime=lifetime)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(answer)

    def _query(
        self, ctx: LookupContext, qname: str, rdtype: str
    ) -> dns.resolver.Answer:
        if self._closed:
            raise RuntimeError("cannot query after the resolver is closed")

        err = ctx.err()
        if err is not None:
            raise err

        lifetime = self._resolver.lifetime
        remaining = ctx.remaining()
        if remaining is not None:
            lifetime = min(lifetime, remaining)

        logger.debug(f"Querying {rdtype} {qname} (lifetime {lifetime:.2f}s)")
        future: Future = Future()
        done = threading.Event()
        future.add_done_callback(lambda _: done.set())
        ctx.subscribe(done)
        try:
            threading.Thread(
                target=self._run,
                args=(future, qname, rdtype, lifetime),
                name=f"rbllookup-dns-{rdtype}",
                daemon=True,
            ).start()
            done.wait(ctx.remaining())
        finally:
            ctx.unsubscribe(done)

        if future.done():
            return future.result()

        # Abandon the query; its thread finishes within its own lifetime
        future.cancel()
        raise ctx.err() or DeadlineExceeded()

    def _addresses(self, ctx: LookupContext, name: str) -> List[str]:
        try:
            return [str(ipaddress.ip_address(name))]
        except ValueError:
            pass

        addresses: List[str] = []
        failure: Optional[dns.exception.DNSException] = None

        for rdtype in ("A", "AAAA"):
            try:
                answer = self._query(ctx, name, rdtype)
            except dns.resolver.NoAnswer:
                continue
            except dns.resolver.NXDOMAIN:
                # Only authoritative when nothing else has been learned
                if failure is None and not addresses:
                    raise
                break
            except dns.exception.DNSException as e:
                logger.debug(f"{rdtype} lookup for {name} failed: {type(e).__name__}")
                if failure is None:
                    failure = e
                continue
            addresses.extend(rdata.address for rdata in answer)

        if failure is not None:
            if addresses:
                raise PartialAnswer(addresses=addresses, cause=failure)
            raise failure
        return addresses

    def lookup_ip_addr(self, ctx: LookupContext, host: str) -> List[str]:
        return self._addresses(ctx, host)

    def lookup_host(self, ctx: LookupContext, name: str) -> List[str]:
        return self._addresses(ctx, name)

    def lookup_txt(self, ctx: LookupContext, name: str) -> List[str]:
        answer = self._query(ctx, name, "TXT")
        # A TXT record may be split into several character-strings
        return [
            b"".join(rdata.strings).decode("utf-8", errors="replace")
            for rdata in answer
        ]
