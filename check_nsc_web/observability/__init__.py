"""Observability utilities: logging setup.

This module configures standard logging on stderr (stdout carries the plugin
line) and, if available, integrates `structlog` for structured logs. The
dependency on `structlog` is optional to keep the plugin lightweight.
"""

from __future__ import annotations

import importlib
import logging
import sys


def setup_logging(level: str = "WARNING") -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "WARNING".

    Behavior
    --------
    - Initializes Python's logging on stderr with the requested level.
    - Keeps the HTTP client libraries at WARNING unless DEBUG is requested.
    - If `structlog` is installed, configures it with a filtering bound logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        stream=sys.stderr,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    transport_level = logging.WARNING
    if numeric_level <= logging.DEBUG:
        transport_level = logging.DEBUG
    for logger_name in ("httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(transport_level)

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        )
    except ModuleNotFoundError:  # pragma: no cover
        pass
