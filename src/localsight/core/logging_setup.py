# src/localsight/core/logging_setup.py
"""Configures the root logger for the exporter process."""

import logging
import sys

import structlog

PLAIN_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
HANDLER_NAME = "localsight"


def _json_formatter() -> logging.Formatter:
    """
    Formatter that renders stdlib log records as one JSON object per line.
    Modules keep using logging.getLogger(__name__); structlog only renders.
    """
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(debug: bool = False, json_log: bool = False, stream=None) -> logging.Handler:
    """
    Installs a single stream handler on the root logger and returns it.

    Calling this again replaces the handler installed by the previous call;
    handlers added by anyone else are left alone.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    if json_log:
        handler.setFormatter(_json_formatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.INFO if debug else logging.WARNING)
    return handler
