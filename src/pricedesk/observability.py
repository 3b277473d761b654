"""Structured JSON logging."""

import logging
import sys
from datetime import datetime, UTC
from typing import Any, Dict, TextIO

from pythonjsonlogger.json import JsonFormatter


class PricedeskJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and service name."""

    def add_fields(
        self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "pricedesk"


def setup_logging(level: str = "WARNING", stream: TextIO | None = None) -> None:
    """Configure structured JSON logging on the root logger.

    Args:
        level: Log level name
        stream: Destination stream; defaults to stderr so command output on
            stdout stays machine readable
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(PricedeskJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)
