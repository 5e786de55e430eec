"""Status logger configuration, env-var driven.

All settings have safe defaults. Zero config required: internal errors are
rendered by structlog's console renderer to stderr at WARNING and above.

Status logging architecture:
    LogFormatter (how records are structured) × LogDestination (where they go)

    Formatter: INVOKELOG_STATUS_FORMATTER=structlog (default) | stdlib
    Destination: INVOKELOG_STATUS_DESTINATION=stderr (default) | jsonl
    Renderer: INVOKELOG_STATUS_FORMAT=console (default) | json
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class StatusConfig:
    """Status logger configuration, env-var driven."""

    formatter: str = field(
        default_factory=lambda: os.environ.get("INVOKELOG_STATUS_FORMATTER", "structlog")
    )  # "structlog" | "stdlib"

    destination: str = field(
        default_factory=lambda: os.environ.get("INVOKELOG_STATUS_DESTINATION", "stderr")
    )  # "stderr" | "jsonl"

    level: str = field(
        default_factory=lambda: os.environ.get("INVOKELOG_STATUS_LEVEL", "WARNING")
    )

    format: str = field(
        default_factory=lambda: os.environ.get("INVOKELOG_STATUS_FORMAT", "console")
    )  # "console" | "json"

    # JSONL file destination
    jsonl_path: str | None = field(
        default_factory=lambda: os.environ.get("INVOKELOG_STATUS_PATH")
    )
