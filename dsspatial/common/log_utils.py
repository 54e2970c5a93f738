"""Logging utilities for structured client logging.

Provides configuration loading, a JSON formatter for structured output and
a filter that enhances log records with dispatch context:
- ds.operation: the operation being dispatched
- ds.connection: the connection currently being called
"""

import json
import logging
import logging.config
import os
from pathlib import Path

from dsspatial.common.tracing import ctx_connection, ctx_operation

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).parent.parent.parent


def configure_logging(structured: bool | None = None) -> None:
    """Configure logging from a JSON dictConfig file.

    Structured mode uses logging.json with JSON records carrying the dispatch
    context. Otherwise logging-dev.json with a readable text format is used.

    Args:
        structured: Force structured (True) or text (False) output. Defaults
            to the DSSPATIAL_LOG_JSON environment variable.
    """
    if structured is None:
        structured = os.environ.get("DSSPATIAL_LOG_JSON", "false").lower() == "true"

    config_file = "logging.json" if structured else "logging-dev.json"
    config_path = _PROJECT_ROOT / config_file

    if config_path.exists():
        with open(config_path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        # Fallback to basic config if file not found
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


class ExtraFieldsFilter(logging.Filter):
    """Adds dispatch context fields to log records.

    Enhances log records with:
    - ds.operation: operation name set by the dispatcher
    - ds.connection: connection name set for each per-connection call

    Both are also exposed as flat attributes (ds_operation, ds_connection)
    for plain text formatters.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        operation = ctx_operation.get()
        connection = ctx_connection.get()

        record.ds_operation = operation or "-"
        record.ds_connection = connection or "-"

        ds = {}
        if operation:
            ds["operation"] = operation
        if connection:
            ds["connection"] = connection
        if ds:
            record.ds = ds

        return True


class JsonFormatter(logging.Formatter):
    """Formats each record as one JSON object per line.

    Fields: timestamp, level, logger, ds.operation, ds.connection, message,
    and error.stack_trace when the record carries an exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "ds.operation": getattr(record, "ds_operation", "-"),
            "ds.connection": getattr(record, "ds_connection", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["error.stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
