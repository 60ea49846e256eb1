"""
Logging setup for the job board service.

Log calls attach request and connection context through ``extra=``: the
submitted job form and photo name on job creation, the created job's id, and
the connection settings in use when the database probe fails. Both formatters
collect those fields under one ``context`` entry so they can be searched
without knowing every call site.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

# Keys passed via ``extra=`` that belong to the job board domain
CONTEXT_FIELDS = ("form", "photo", "job_id", "config_used")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Domain fields attached to a record, in declaration order."""
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class JobBoardJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter emitting one object per record.

    Every record carries timestamp, level, logger, module and function.
    Warnings and above add line and pathname. Domain extras are moved out of
    the top level and nested under ``context``.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName

        if record.levelno >= logging.WARNING:
            log_record['line'] = record.lineno
            log_record['pathname'] = record.pathname

        context = record_context(record)
        for name in context:
            log_record.pop(name, None)
        if context:
            log_record['context'] = context


class ReadableFormatter(logging.Formatter):
    """Plain-text formatter for development; appends domain extras as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " | " + " ".join(f"{name}={value!r}" for name, value in context.items())
        return line


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Route all logging to stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines when True, readable text otherwise
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = JobBoardJsonFormatter('%(module)s %(message)s')
    else:
        formatter = ReadableFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # Engine and pool chatter stays below the service's own log lines
    for name in ("sqlalchemy.engine", "sqlalchemy.pool", "multipart", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
