"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest

from lbreconciler.main import HANDLER_NAME, JsonFormatter, setup_logging


@pytest.fixture
def clean_root_logger() -> Generator[logging.Logger, None, None]:
    root_logger = logging.getLogger()
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_extra_fields_are_included(self) -> None:
        record = logging.LogRecord(
            "lbreconciler.render", logging.INFO, __file__, 1, "Created", (), None
        )
        record.lb_name = "lb1"

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "Created"
        assert data["level"] == "INFO"
        assert data["logger"] == "lbreconciler.render"
        assert data["lb_name"] == "lb1"
        assert data["timestamp"].endswith("Z")
        assert "msg" not in data


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_repeated_setup_keeps_one_handler(self, clean_root_logger: logging.Logger) -> None:
        setup_logging()
        setup_logging(json_output=False, level=logging.DEBUG)

        ours = [h for h in clean_root_logger.handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JsonFormatter)
        assert clean_root_logger.level == logging.DEBUG
