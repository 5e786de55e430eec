"""Shared fixtures: sample target state and status logger capture."""

from __future__ import annotations

import logging
import uuid

import pytest
import sample_targets

from invokelog.observability import STATUS_LOGGER, shutdown_status_logging


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture(autouse=True)
def _reset_state():
    """Reset sample targets and status logging before and after each test."""
    sample_targets.reset()
    shutdown_status_logging()
    yield
    shutdown_status_logging()
    sample_targets.reset()


@pytest.fixture()
def status_records():
    """Capture status logger records (the status logger does not propagate)."""
    status_logger = logging.getLogger(STATUS_LOGGER)
    handler = _ListHandler()
    previous = status_logger.level
    status_logger.addHandler(handler)
    status_logger.setLevel(logging.DEBUG)
    yield handler.records
    status_logger.removeHandler(handler)
    status_logger.setLevel(previous)


@pytest.fixture()
def app_logger():
    """Fresh, non-propagating logger for attaching handlers under test."""
    logger = logging.getLogger(f"invokelog.tests.{uuid.uuid4().hex}")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
