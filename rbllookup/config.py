"""Configuration module for rbllookup.

Loads and validates environment variables. Command-line flags override
these values.
"""

import ipaddress
import os
from dataclasses import dataclass, field
from typing import List


DEFAULT_ZONE = "bl.mailspike.net"
TRUE_VALUES = ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # DNSBL Configuration
    rbl_zone: str = DEFAULT_ZONE
    lookup_txt: bool = True

    # DNS Configuration
    dns_timeout: int = 5
    dns_nameservers: List[str] = field(default_factory=list)

    # Operational Configuration
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ValueError: If variables are invalid.

        Returns:
            Config: Validated configuration instance.
        """
        # DNSBL Configuration
        rbl_zone = os.getenv("RBL_ZONE", DEFAULT_ZONE).strip().rstrip(".")
        if not rbl_zone:
            raise ValueError("RBL_ZONE cannot be empty")

        lookup_txt = cls._get_bool_env("RBL_LOOKUP_TXT", "true")

        # DNS Configuration
        try:
            dns_timeout = int(os.getenv("DNS_TIMEOUT", "5"))
        except ValueError:
            raise ValueError("DNS_TIMEOUT must be an integer") from None
        if not 1 <= dns_timeout <= 60:
            raise ValueError("DNS_TIMEOUT must be between 1 and 60 seconds")

        dns_nameservers_str = os.getenv("DNS_NAMESERVERS", "")
        dns_nameservers = [
            ns.strip() for ns in dns_nameservers_str.split(",") if ns.strip()
        ]
        for ns in dns_nameservers:
            try:
                ipaddress.ip_address(ns)
            except ValueError:
                raise ValueError(
                    f"DNS_NAMESERVERS contains invalid address: {ns}"
                ) from None

        # Operational Configuration
        verbose = cls._get_bool_env("VERBOSE", "false")

        return cls(
            rbl_zone=rbl_zone,
            lookup_txt=lookup_txt,
            dns_timeout=dns_timeout,
            dns_nameservers=dns_nameservers,
            verbose=verbose,
        )

    @staticmethod
    def _get_bool_env(key: str, default: str) -> bool:
        """Parse a boolean environment variable.

        Args:
            key: Environment variable name.
            default: Value used when the variable is not set.

        Returns:
            bool: True for "true", "1" or "yes" (case-insensitive).
        """
        return os.getenv(key, default).strip().lower() in TRUE_VALUES
