"""Default record layout: the message text followed by a line terminator."""

from __future__ import annotations

import logging

DEFAULT_PATTERN = "%(message)s"
DEFAULT_TERMINATOR = "\n"


class PatternLayout(logging.Formatter):
    """%-style Formatter that appends a terminator to every rendered record.

    Targets receive exactly what a stream would: one line per record,
    traceback included when the record carries exc_info.
    """

    def __init__(
        self,
        pattern: str = DEFAULT_PATTERN,
        terminator: str = DEFAULT_TERMINATOR,
        datefmt: str | None = None,
    ) -> None:
        super().__init__(pattern, datefmt=datefmt)
        self.pattern = pattern
        self.terminator = terminator

    def format(self, record: logging.LogRecord) -> str:
        return super().format(record) + self.terminator

    def __repr__(self) -> str:
        return f"PatternLayout({self.pattern!r}, terminator={self.terminator!r})"


def default_layout() -> PatternLayout:
    return PatternLayout()
