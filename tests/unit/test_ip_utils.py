"""Unit tests for IP utility functions."""

import ipaddress

import pytest

from rbllookup.utils.ip_utils import (
    AddressNotApplicable,
    as_ipv4,
    build_dnsbl_query,
    is_valid_ipv4,
    reverse_ip,
)


def test_is_valid_ipv4_valid():
    """Test validation of valid IPv4 addresses."""
    assert is_valid_ipv4("203.0.113.45") is True
    assert is_valid_ipv4("192.168.1.1") is True
    assert is_valid_ipv4("0.0.0.0") is True
    assert is_valid_ipv4("255.255.255.255") is True
    assert is_valid_ipv4(ipaddress.IPv4Address("198.51.100.7")) is True


def test_is_valid_ipv4_invalid():
    """Test validation rejects invalid IPv4 addresses."""
    assert is_valid_ipv4("256.0.0.1") is False  # Out of range
    assert is_valid_ipv4("192.168.1") is False  # Incomplete
    assert is_valid_ipv4("::1") is False  # IPv6
    assert is_valid_ipv4("not an ip") is False  # Invalid format
    assert is_valid_ipv4("") is False  # Empty string


def test_as_ipv4_unwraps_mapped_ipv6():
    """Test IPv4-mapped IPv6 addresses are treated as IPv4."""
    assert as_ipv4("::ffff:192.0.2.1") == ipaddress.IPv4Address("192.0.2.1")
    assert as_ipv4(ipaddress.IPv6Address("2001:db8::1")) is None


def test_reverse_ip():
    """Test IP reversal for DNSBL queries."""
    assert reverse_ip("203.0.113.45") == "45.113.0.203"
    assert reverse_ip("192.168.1.1") == "1.1.168.192"
    assert reverse_ip("8.8.8.8") == "8.8.8.8"  # Palindrome
    assert reverse_ip(ipaddress.ip_address("64.233.171.108")) == "108.171.233.64"


def test_reverse_ip_not_applicable():
    """Test reverse_ip returns an empty string for non-IPv4 input."""
    assert reverse_ip("2001:db8::1") == ""
    assert reverse_ip(ipaddress.IPv6Address("::1")) == ""
    assert reverse_ip("256.0.0.1") == ""
    assert reverse_ip("not an ip") == ""


@pytest.mark.parametrize(
    "ip", ["192.168.1.1", "203.0.113.45", "10.0.0.255", "1.2.3.4", "0.0.0.0"]
)
def test_reverse_ip_is_self_inverse(ip):
    """Test reversing twice yields the original address."""
    assert reverse_ip(reverse_ip(ip)) == ip


def test_build_dnsbl_query():
    """Test DNSBL query hostname construction."""
    assert (
        build_dnsbl_query("203.0.113.45", "zen.spamhaus.org")
        == "45.113.0.203.zen.spamhaus.org"
    )
    assert (
        build_dnsbl_query("192.168.1.1", "bl.spamcop.net")
        == "1.1.168.192.bl.spamcop.net"
    )


def test_build_dnsbl_query_invalid_ip():
    """Test build_dnsbl_query refuses to build a degenerate query name."""
    with pytest.raises(AddressNotApplicable, match="Invalid IPv4 address"):
        build_dnsbl_query("invalid", "zen.spamhaus.org")

    with pytest.raises(ValueError):
        build_dnsbl_query("2001:db8::1", "zen.spamhaus.org")


def test_build_dnsbl_query_empty_zone():
    """Test build_dnsbl_query raises ValueError for empty zone."""
    with pytest.raises(ValueError, match="DNSBL zone cannot be empty"):
        build_dnsbl_query("203.0.113.45", "")
