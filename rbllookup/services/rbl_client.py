"""Blacklist client for DNSBL lookups."""

import logging
from typing import List, Optional

import dns.exception
import dns.resolver

from rbllookup.models.lookup_result import AddressFinding, LookupResult
from rbllookup.services.resolver import DNSPythonResolver, PartialAnswer, Resolver
from rbllookup.utils.context import LookupContext
from rbllookup.utils.ip_utils import (
    AddressNotApplicable,
    IPInput,
    as_ipv4,
    build_dnsbl_query,
)


logger = logging.getLogger(__name__)

# Responses meaning "no such name", as opposed to a failed query
CLEAN_MISSES = (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer)


class BlacklistClient:
    """Looks up addresses on a single DNSBL zone.

    The client holds no mutable state, so one instance can be shared by
    concurrent callers as long as the resolver is thread-safe.
    Lookups never raise for DNS failures; they are recorded in the result.

    Args:
        zone: DNSBL zone to query (e.g. "zen.spamhaus.org").
        lookup_txt: Whether to fetch the TXT record for listed addresses.
        resolver: DNS resolver; a DNSPythonResolver is created if omitted.

    Example:
        >>> with BlacklistClient("b.barracudacentral.org") as client:
        ...     result = client.lookup_by_host(LookupContext(timeout=10), "smtp.gmail.com")
        >>> result.list
        'b.barracudacentral.org'
    """

    def __init__(
        self,
        zone: str,
        lookup_txt: bool = True,
        resolver: Optional[Resolver] = None,
    ):
        if not zone:
            raise ValueError("DNSBL zone cannot be empty")
        self._zone = zone
        self._lookup_txt = lookup_txt
        # Only a resolver created here is closed by close()
        self._owns_resolver = resolver is None
        self._resolver = resolver if resolver is not None else DNSPythonResolver()

    def __enter__(self) -> "BlacklistClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the default resolver; an injected resolver is left open."""
        if self._owns_resolver:
            self._resolver.close()

    @property
    def zone(self) -> str:
        return self._zone

    @property
    def lookup_txt(self) -> bool:
        return self._lookup_txt

    def __repr__(self) -> str:
        return f"BlacklistClient(zone={self._zone!r}, lookup_txt={self._lookup_txt})"

    def _first_txt(self, ctx: LookupContext, query: str) -> str:
        try:
            txt = self._resolver.lookup_txt(ctx, query)
        except dns.exception.DNSException as e:
            # TXT records are advisory only
            logger.debug(f"TXT lookup for {query} failed: {type(e).__name__}")
            return ""
        return txt[0] if txt else ""

    def lookup_by_address(self, ctx: LookupContext, address: IPInput) -> LookupResult:
        """Look up one IPv4 address on the DNSBL.

        Args:
            ctx: Cancellation and deadline context for all DNS queries.
            address: IPv4 address as a string or ipaddress object.

        Returns:
            LookupResult: One finding per DNSBL answer, or a single unlisted
            finding. Non-IPv4 input yields no findings and a result-level
            AddressNotApplicable error.
        """
        ip = as_ipv4(address)
        if ip is None:
            logger.warning(f"Skipping {address}: not an IPv4 address")
            return LookupResult(
                list=self._zone,
                host=str(address),
                error=True,
                error_type=AddressNotApplicable(f"Invalid IPv4 address: {address}"),
            )

        ip_str = str(ip)
        query = build_dnsbl_query(ip, self._zone)

        error: Optional[dns.exception.DNSException] = None
        try:
            addrs = self._resolver.lookup_host(ctx, query)
        except PartialAnswer as e:
            addrs = e.addresses
            error = e.cause
        except CLEAN_MISSES:
            addrs = []
        except dns.exception.DNSException as e:
            logger.debug(f"Lookup of {query} failed: {type(e).__name__}")
            addrs = []
            error = e

        findings: List[AddressFinding] = []
        if not addrs:
            if error is not None:
                findings.append(AddressFinding.failed(ip_str, error))
            else:
                findings.append(AddressFinding(address=ip_str, listed=False))
        else:
            # Redundant TXT queries keep each finding self-contained
            for addr in addrs:
                findings.append(
                    AddressFinding(
                        address=ip_str,
                        listed=True,
                        listed_address=addr,
                        text=self._first_txt(ctx, query) if self._lookup_txt else "",
                        error=error is not None,
                        error_type=error,
                    )
                )

        return LookupResult(list=self._zone, host=ip_str, results=tuple(findings))

    def lookup_by_host(self, ctx: LookupContext, hostname: str) -> LookupResult:
        """Look up every IPv4 address of a hostname on the DNSBL.

        Args:
            ctx: Cancellation and deadline context for all DNS queries.
            hostname: Hostname or literal IP address.

        Returns:
            LookupResult: Findings for each IPv4 address, in resolution order.
            If the hostname cannot be resolved the findings are empty; a
            failure other than a missing name sets the result-level error.
        """
        try:
            addrs = self._resolver.lookup_ip_addr(ctx, hostname)
        except PartialAnswer as e:
            logger.warning(f"Partial resolution of {hostname}: {e.cause}")
            addrs = e.addresses
        except CLEAN_MISSES:
            logger.debug(f"{hostname} has no addresses")
            return LookupResult(list=self._zone, host=hostname)
        except dns.exception.DNSException as e:
            logger.warning(f"Could not resolve {hostname}: {type(e).__name__}")
            return LookupResult(
                list=self._zone, host=hostname, error=True, error_type=e
            )

        findings: List[AddressFinding] = []
        for addr in addrs:
            if as_ipv4(addr) is None:
                continue
            findings.extend(self.lookup_by_address(ctx, addr).results)

        return LookupResult(list=self._zone, host=hostname, results=tuple(findings))
