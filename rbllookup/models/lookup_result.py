"""DNSBL lookup result models."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _error_name(cause: Optional[BaseException]) -> Optional[str]:
    return type(cause).__name__ if cause is not None else None


@dataclass(frozen=True)
class AddressFinding:
    """Listing determination for one address on one DNSBL.

    Attributes:
        address: IPv4 address that was searched.
        listed: Whether the address is on the list.
        listed_address: Address returned by the DNSBL answer. Lists often
            encode the listing reason in it (e.g. 127.0.0.2).
        text: First TXT record value for the query name, if any.
        error: Whether resolution failed.
        error_type: Exception that caused the failure.

    Invariants:
        - not listed implies empty listed_address and text
        - error implies error_type is set
    """

    address: str
    listed: bool = False
    listed_address: str = ""
    text: str = ""
    error: bool = False
    error_type: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if not self.listed and (self.listed_address or self.text):
            raise ValueError("Unlisted finding cannot carry listed_address or text")
        if self.error and self.error_type is None:
            raise ValueError("Errored finding requires an error_type")

    @classmethod
    def failed(cls, address: str, cause: BaseException) -> "AddressFinding":
        """Build an unlisted finding that records a resolution failure."""
        return cls(address=address, error=True, error_type=cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict; error_type becomes its class name."""
        return {
            "address": self.address,
            "listed": self.listed,
            "listed_address": self.listed_address,
            "text": self.text,
            "error": self.error,
            "error_type": _error_name(self.error_type),
        }


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one lookup against one DNSBL.

    Attributes:
        list: DNSBL zone that was searched.
        host: Host or IP that was passed in (e.g. smtp.gmail.com).
        results: Findings, one per address searched, in resolution order.
        error: Whether the lookup failed before any address was queried
            (host did not resolve, address not IPv4).
        error_type: Exception for a result-level failure.
    """

    list: str
    host: str
    results: Tuple[AddressFinding, ...] = field(default_factory=tuple)
    error: bool = False
    error_type: Optional[BaseException] = None

    def is_listed(self) -> bool:
        """Check if any searched address is listed.

        Returns:
            bool: True if at least one finding is listed.
        """
        return any(r.listed for r in self.results)

    def has_errors(self) -> bool:
        """Check if the lookup or any finding hit a resolution failure."""
        return self.error or any(r.error for r in self.results)

    def listed_findings(self) -> Tuple[AddressFinding, ...]:
        return tuple(r for r in self.results if r.listed)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict with snake_case keys."""
        return {
            "list": self.list,
            "host": self.host,
            "results": [r.to_dict() for r in self.results],
            "error": self.error,
            "error_type": _error_name(self.error_type),
        }
