"""Tests for logging configuration module."""

from __future__ import annotations

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

import pytest

from genomesim.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_log_format,
    get_log_level,
    get_logger,
    record_context,
)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo configure_logging side effects after each test."""
    logger = logging.getLogger("genomesim")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def make_record(
    name: str = "genomesim.test",
    level: int = logging.INFO,
    msg: str = "Test message",
    args: tuple = (),
    **extra: object,
) -> logging.LogRecord:
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="/path/to/sampler.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestEnvironment:
    """Tests for LOG_LEVEL and LOG_FORMAT parsing."""

    def test_default_level_is_info(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_level() == logging.INFO

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("WARN", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("nonsense", logging.INFO),
        ],
    )
    def test_level_values(self, value: str, expected: int) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": value}):
            assert get_log_level() == expected

    def test_default_format_is_text(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_format() == "text"

    def test_json_format_case_insensitive(self) -> None:
        with patch.dict(os.environ, {"LOG_FORMAT": "JSON"}):
            assert get_log_format() == "json"

    def test_invalid_format_defaults_to_text(self) -> None:
        with patch.dict(os.environ, {"LOG_FORMAT": "yaml"}):
            assert get_log_format() == "text"


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_formats_as_valid_json(self) -> None:
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "genomesim.test"
        assert "timestamp" in data

    def test_source_only_for_debug_and_error(self) -> None:
        formatter = JSONFormatter()
        info = json.loads(formatter.format(make_record(level=logging.INFO)))
        error = json.loads(formatter.format(make_record(level=logging.ERROR)))
        assert "source" not in info
        assert error["source"]["line"] == 42

    def test_extra_fields_are_kept(self) -> None:
        record = make_record(simulation_id="abc", offspring=3)
        data = json.loads(JSONFormatter().format(record))
        assert data["extra"] == {"simulation_id": "abc", "offspring": 3}

    def test_formats_message_with_args(self) -> None:
        record = make_record(msg="Simulated %d offspring for %s", args=(3, "height"))
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Simulated 3 offspring for height"


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_shortens_package_logger_name(self) -> None:
        record = make_record(name="genomesim.engine.sampler")
        output = TextFormatter(use_colors=False).format(record)
        assert "[engine.sampler]" in output
        assert "genomesim.engine.sampler" not in output

    def test_foreign_logger_name_unchanged(self) -> None:
        output = TextFormatter(use_colors=False).format(make_record(name="uvicorn.access"))
        assert "[uvicorn.access]" in output

    def test_context_rendered_as_pairs(self) -> None:
        record = make_record(user_id="u1", simulation_id="s1")
        output = TextFormatter(use_colors=False).format(record)
        assert output.endswith("simulation_id=s1 user_id=u1")

    def test_includes_source_for_debug(self) -> None:
        record = make_record(level=logging.DEBUG)
        record.filename = "sampler.py"
        output = TextFormatter(use_colors=False).format(record)
        assert "sampler.py:42" in output


class TestRecordContext:
    """Tests for record_context."""

    def test_plain_record_has_no_context(self) -> None:
        assert record_context(make_record()) == {}


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configures_package_logger(self) -> None:
        logger = configure_logging(level=logging.DEBUG, format_type="text")
        assert logger is logging.getLogger("genomesim")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        configure_logging(level=logging.INFO, format_type="text")
        configure_logging(level=logging.INFO, format_type="text")
        assert len(logging.getLogger("genomesim").handlers) == 1

    def test_uses_json_formatter(self) -> None:
        configure_logging(level=logging.INFO, format_type="json")
        handler = logging.getLogger("genomesim").handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_quiets_httpx(self) -> None:
        configure_logging(level=logging.DEBUG, format_type="text")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_reads_from_environment(self) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING", "LOG_FORMAT": "json"}):
            configure_logging()
        logger = logging.getLogger("genomesim")
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)


class TestGetLogger:
    """Tests for get_logger convenience function."""

    def test_prefixes_package(self) -> None:
        assert get_logger("my_module").name == "genomesim.my_module"

    def test_preserves_package_prefix(self) -> None:
        assert get_logger("genomesim.engine").name == "genomesim.engine"
        assert get_logger("genomesim").name == "genomesim"

    def test_similar_prefix_is_not_mistaken(self) -> None:
        assert get_logger("genomesimulator").name == "genomesim.genomesimulator"


class TestIntegration:
    """End-to-end logging through a stream handler."""

    def test_json_logging_to_stream(self) -> None:
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(JSONFormatter())

        logger = logging.getLogger("genomesim.test_json_integration")
        logger.handlers[:] = [handler]
        logger.setLevel(logging.INFO)
        logger.propagate = False

        logger.warning("Save failed", extra={"user_id": "u1"})

        data = json.loads(buffer.getvalue().strip())
        assert data["message"] == "Save failed"
        assert data["level"] == "WARNING"
        assert data["extra"] == {"user_id": "u1"}
