"""Structured JSON logging."""

import logging
import sys
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from rbllookup.models.lookup_result import LookupResult
from rbllookup.services.resolver import categorize_failure


# Run ID for correlating log entries from one process
RUN_ID = str(uuid.uuid4())


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds run_id and standardized fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record.

        Args:
            log_record: The log record to modify.
            record: The original logging.LogRecord.
            message_dict: Additional fields from the logging call.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = (
            datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        )
        log_record["run_id"] = RUN_ID
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure structured JSON logging for the application.

    Logs go to stderr so stdout stays free for lookup reports.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        logging.Logger: Configured root logger.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    json_handler = logging.StreamHandler(sys.stderr)
    formatter = CustomJsonFormatter("%(message)s")
    json_handler.setFormatter(formatter)
    logger.addHandler(json_handler)

    return logger


def log_lookup(result: LookupResult, duration_ms: int) -> None:
    """Log structured summary of one lookup.

    Args:
        result: Completed lookup result.
        duration_ms: Lookup time in milliseconds.
    """
    failures = Counter(
        categorize_failure(r.error_type) for r in result.results if r.error
    )
    if result.error:
        failures[categorize_failure(result.error_type)] += 1

    logger = logging.getLogger(__name__)
    logger.info(
        "Lookup completed",
        extra={
            "list": result.list,
            "host": result.host,
            "addresses": len({r.address for r in result.results}),
            "listed": len(result.listed_findings()),
            "failures": dict(failures),
            "duration_ms": duration_ms,
        },
    )
