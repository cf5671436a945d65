"""Structured logging configuration for zaldo.

Ledger warnings and maintenance audit records travel on log records as
``ledger_warning`` and ``audit`` attributes, so the JSON formatter can emit
them as structured fields instead of free text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from zaldo.models.base import LedgerWarning

CLI_LOGGER = "zaldo.cli"


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for zaldo.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("zaldo").setLevel(log_level)

    # Reduce noise from external libraries
    logging.getLogger("psycopg").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with ledger payloads as nested fields."""

    PAYLOAD_FIELDS = ("ledger_warning", "audit")

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in self.PAYLOAD_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        # Decimals and dates inside payloads
        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``zaldo`` hierarchy.

    Scripts run as ``__main__`` log as ``zaldo.cli`` so that the level set by
    ``setup_logging`` applies to them too.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).

    Returns
    -------
    logging.Logger
        Configured logger.
    """
    if name == "__main__":
        name = CLI_LOGGER
    return logging.getLogger(name)


def log_ledger_warning(logger: logging.Logger, warning: LedgerWarning) -> LedgerWarning:
    """Log a ledger warning at WARNING level with its structured payload."""
    logger.warning(
        "%s",
        warning.message,
        extra={
            "ledger_warning": {
                "code": warning.code.value,
                "entity_type": warning.entity_type,
                "entity_id": warning.entity_id,
            }
        },
    )
    return warning
