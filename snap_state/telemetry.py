"""
Structured logging for the state store.

All modules log through structlog with JSON output so load/save events and
cache corruption can be picked up by whatever collects stdout. Importing this
module only sets up structlog; the stdlib root logger is left to the host
application unless ``configure_logging`` is called.
"""

import logging
import sys

import structlog


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str = "INFO") -> None:
    """
    Route log output to stdout and set the minimum log level.

    Args:
        level: Standard level name (DEBUG, INFO, WARNING, ERROR)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    _configure_structlog()


def get_logger(name: str):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


_configure_structlog()
