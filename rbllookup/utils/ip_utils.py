"""IP address utilities for DNSBL queries."""

import ipaddress
from typing import Optional, Union


IPInput = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


class AddressNotApplicable(ValueError):
    """Address cannot be used in a DNSBL query (not IPv4)."""


def as_ipv4(ip: IPInput) -> Optional[ipaddress.IPv4Address]:
    """Coerce an address to IPv4, or None if it has no IPv4 form.

    IPv4-mapped IPv6 addresses (``::ffff:a.b.c.d``) map to their IPv4 form.

    Examples:
        >>> as_ipv4("203.0.113.45")
        IPv4Address('203.0.113.45')
        >>> as_ipv4("::ffff:192.0.2.1")
        IPv4Address('192.0.2.1')
        >>> as_ipv4("2001:db8::1") is None
        True
    """
    if isinstance(ip, str):
        try:
            ip = ipaddress.ip_address(ip.strip())
        except ValueError:
            return None

    if isinstance(ip, ipaddress.IPv4Address):
        return ip
    if isinstance(ip, ipaddress.IPv6Address):
        return ip.ipv4_mapped
    return None


def is_valid_ipv4(ip: IPInput) -> bool:
    """Validate if value is a usable IPv4 address.

    Args:
        ip: IP address string or ipaddress object to validate.

    Returns:
        bool: True if valid IPv4, False otherwise.

    Examples:
        >>> is_valid_ipv4("203.0.113.45")
        True
        >>> is_valid_ipv4("256.0.0.1")
        False
        >>> is_valid_ipv4("::1")
        False
    """
    return as_ipv4(ip) is not None


def reverse_ip(ip: IPInput) -> str:
    """Convert IPv4 address to reverse DNS format for DNSBL queries.

    DNSBL queries require reversed octets. For example:
    203.0.113.45 becomes 45.113.0.203

    Args:
        ip: IPv4 address in dotted-quad format, or an ipaddress object.

    Returns:
        str: Reversed IP address, or "" if the address is not IPv4.

    Examples:
        >>> reverse_ip("203.0.113.45")
        '45.113.0.203'
        >>> reverse_ip("192.168.1.1")
        '1.1.168.192'
        >>> reverse_ip("2001:db8::1")
        ''
    """
    addr = as_ipv4(ip)
    if addr is None:
        return ""

    octets = str(addr).split(".")
    return ".".join(reversed(octets))


def build_dnsbl_query(ip: IPInput, zone: str) -> str:
    """Build DNSBL query hostname for DNS lookup.

    Args:
        ip: IPv4 address to check.
        zone: DNSBL zone domain (e.g., "zen.spamhaus.org").

    Returns:
        str: DNSBL query hostname (e.g., "45.113.0.203.zen.spamhaus.org").

    Raises:
        AddressNotApplicable: If IP is not IPv4.
        ValueError: If zone is empty.

    Examples:
        >>> build_dnsbl_query("203.0.113.45", "zen.spamhaus.org")
        '45.113.0.203.zen.spamhaus.org'
    """
    if not zone:
        raise ValueError("DNSBL zone cannot be empty")

    reversed_ip = reverse_ip(ip)
    if not reversed_ip:
        raise AddressNotApplicable(f"Invalid IPv4 address: {ip}")
    return f"{reversed_ip}.{zone}"
