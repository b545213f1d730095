"""Command-line entry point for rbllookup."""

import argparse
import logging
import sys
import time
from typing import List, Optional

from rbllookup.config import Config
from rbllookup.services.logger import log_lookup, setup_logging
from rbllookup.services.rbl_client import BlacklistClient
from rbllookup.services.resolver import DNSPythonResolver
from rbllookup.services.result_reporter import FORMATS, ResultReporter
from rbllookup.utils.context import LookupContext
from rbllookup.utils.ip_utils import as_ipv4


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rbllookup",
        description="Check whether a host or IPv4 address is listed on a DNSBL.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--host", help="The host to lookup. Mutually exclusive to --ip"
    )
    target.add_argument("--ip", help="The IP to lookup. Mutually exclusive to --host")
    parser.add_argument("--zone", help="DNSBL zone to query (default: $RBL_ZONE)")
    parser.add_argument(
        "--no-txt",
        dest="lookup_txt",
        action="store_false",
        default=None,
        help="Skip TXT record lookups for listed addresses",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Overall lookup deadline in seconds (default: $DNS_TIMEOUT)",
    )
    parser.add_argument(
        "--format", choices=FORMATS, default="text", help="Output format"
    )
    parser.add_argument("--verbose", action="store_true", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function.

    Returns:
        int: Exit code (0 for success, 1 for configuration errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # parse_args exits with status 2 on usage errors
    if args.ip is not None and as_ipv4(args.ip) is None:
        parser.error(f"Supplied IP unable to be parsed: {args.ip}")
    if args.host is not None and not args.host.strip():
        parser.error("--host cannot be empty")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(verbose=bool(args.verbose) or config.verbose)

    zone = args.zone or config.rbl_zone
    lookup_txt = config.lookup_txt if args.lookup_txt is None else args.lookup_txt
    timeout = args.timeout if args.timeout is not None else config.dns_timeout

    with DNSPythonResolver(
        nameservers=config.dns_nameservers, timeout=timeout
    ) as resolver:
        client = BlacklistClient(zone, lookup_txt=lookup_txt, resolver=resolver)
        start = time.time()

        with LookupContext(timeout=timeout) as ctx:
            if args.host is not None:
                result = client.lookup_by_host(ctx, args.host)
            else:
                result = client.lookup_by_address(ctx, args.ip)

        log_lookup(result, duration_ms=int((time.time() - start) * 1000))

    print(ResultReporter.render(result, args.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
