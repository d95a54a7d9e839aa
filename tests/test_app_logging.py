"""Tests for logging configuration."""

import logging

from exam_prep.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("exam_prep")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
