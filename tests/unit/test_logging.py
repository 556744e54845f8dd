"""Tests for resplane logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from resplane.runtime.logging import (
    JSONLFormatter,
    get_logger,
    log_with_context,
    setup_logging,
)


class TestSetupLogging:
    def test_writes_jsonl(self, tmp_path: Path) -> None:
        log_file = setup_logging(tmp_path, level=logging.DEBUG, console=False)
        assert log_file == tmp_path / "resplane.log"

        logger = get_logger("Provider")
        log_with_context(logger, logging.INFO, "Created 2 Cluster resource(s)", count=2)
        for handler in logging.getLogger("resplane").handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["level"] == "INFO"
        assert entry["component"] == "Provider"
        assert entry["message"] == "Created 2 Cluster resource(s)"
        assert entry["context"] == {"count": 2}

    def test_file_output_can_be_disabled(self) -> None:
        assert setup_logging(None, console=False) is None
        assert logging.getLogger("resplane").handlers == []

    def test_setup_replaces_handlers(self, tmp_path: Path) -> None:
        setup_logging(tmp_path, console=True)
        setup_logging(tmp_path, console=True)
        assert len(logging.getLogger("resplane").handlers) == 2


class TestGetLogger:
    def test_loggers_are_cached(self) -> None:
        assert get_logger("Catalog") is get_logger("Catalog")

    def test_logger_name(self) -> None:
        assert get_logger("Event Bus").name == "resplane.event_bus"


class TestJSONLFormatter:
    def test_warning_includes_source(self) -> None:
        record = logging.LogRecord(
            name="resplane.provider",
            level=logging.WARNING,
            pathname="provider.py",
            lineno=10,
            msg="Backend update failed",
            args=(),
            exc_info=None,
        )
        entry = json.loads(JSONLFormatter().format(record))
        assert entry["source"]["line"] == 10
        assert "context" not in entry
