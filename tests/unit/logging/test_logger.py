# tests/unit/logging/test_logger.py - v2
"""Tests for logging/logger.py - logger factory and formatters."""

from __future__ import annotations

import json
import logging

from kbloader.logging.context import clear_context, set_document_context, set_load_context
from kbloader.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_load_context("load42", "local:docs")
        set_document_context("guide.md")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"] == {
            "load_id": "load42", "source": "local:docs", "document": "guide.md",
        }

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"documents": 3})))
        assert parsed["data"] == {"documents": 3}


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_load_and_document(self):
        set_load_context("abc123", "local:docs")
        set_document_context("a.md")
        output = TextFormatter().format(_record())
        assert "[abc123]" in output
        assert "(a.md)" in output


class TestGetLogger:
    def test_returns_namespaced_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "kbloader.test_module"


class TestSetupLogging:
    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("kbloader")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("kbloader")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("kbloader").handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "kb.log"
        setup_logging(log_file=log_file, rotation="1MB", retention=2)
        root = logging.getLogger("kbloader")
        assert len(root.handlers) == 2
        assert log_file.parent.is_dir()
        for handler in root.handlers[1:]:
            handler.close()
        setup_logging()
