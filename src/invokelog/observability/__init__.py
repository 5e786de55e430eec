"""invokelog observability: the status logger used as the internal error channel.

Public API:
    setup_status_logging(cfg)    — Wire formatter x destination to the status logger
    shutdown_status_logging()    — Detach and close (also used in tests)
    get_logger(name)             — Get a structured status logger
    register_formatter(n, cls)   — Register custom LogFormatter
    register_destination(n, cls) — Register custom LogDestination
"""

from invokelog.observability.config import StatusConfig
from invokelog.observability.logging import (
    STATUS_LOGGER,
    LogDestination,
    LogFormatter,
    get_logger,
    register_destination,
    register_formatter,
    setup_status_logging,
    shutdown_status_logging,
)

__all__ = [
    "STATUS_LOGGER",
    "StatusConfig",
    "setup_status_logging",
    "shutdown_status_logging",
    "get_logger",
    "LogFormatter",
    "LogDestination",
    "register_formatter",
    "register_destination",
]
