# Area: Shared Tests
"""Tests for structured error blocks and logging setup."""

import json
import logging

from victordle._shared.logging_config import (
    JSONFormatter,
    TerminalFormatter,
    log_engine_error,
    setup_logging,
)
from victordle.errors import (
    DocumentNotFoundError,
    GameRuleError,
    InvalidGuessError,
    NotYourTurnError,
    StoreError,
    VictordleError,
)


class TestErrorHierarchy:
    """Tests for exception classes and their context."""

    def test_not_found_is_store_error(self):
        error = DocumentNotFoundError("games", "match_1")
        assert isinstance(error, StoreError)
        assert isinstance(error, VictordleError)
        assert error.context() == {"operation": "update", "collection": "games", "doc_id": "match_1"}

    def test_rule_errors_share_base(self):
        error = NotYourTurnError("match_1", "u2", "u1")
        assert isinstance(error, GameRuleError)
        assert error.current_turn == "u1"
        assert "u1" in str(error)

    def test_format_error_log_block(self):
        block = InvalidGuessError("match_1", "u1", "CL4SS", "must be 5 letters A-Z").format_error_log()
        assert "ENGINE ERROR" in block
        assert "INVALID_GUESS" in block
        assert '"guess": "CL4SS"' in block


class TestFormatters:
    """Tests for terminal and JSON formatters."""

    def _record(self, **extra):
        record = logging.LogRecord("victordle.test", logging.WARNING, __file__, 1, "hello", (), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_formatter_includes_context_keys(self):
        data = json.loads(JSONFormatter().format(self._record(user_id="u1", session_id="match_1")))
        assert data["level"] == "WARNING"
        assert data["message"] == "hello"
        assert data["user_id"] == "u1"
        assert data["session_id"] == "match_1"

    def test_terminal_formatter_does_not_mutate_record(self):
        record = self._record()
        output = TerminalFormatter("%(levelname)s %(message)s").format(record)
        assert "hello" in output
        assert record.levelname == "WARNING"


class TestSetupLogging:
    """Tests for setup_logging() and log_engine_error()."""

    def test_file_handler_writes_json(self, tmp_path):
        log_path = tmp_path / "logs" / "victordle.log"
        setup_logging(str(log_path), level=logging.DEBUG)
        pkg_logger = logging.getLogger("victordle")
        try:
            assert pkg_logger.propagate is False
            assert len(pkg_logger.handlers) == 2
            log_engine_error(StoreError("set", "queues", "u1", "offline"), logging.WARNING)
            for handler in pkg_logger.handlers:
                handler.flush()
            line = log_path.read_text(encoding="utf-8").strip().splitlines()[-1]
            data = json.loads(line)
            assert data["error_type"] == "StoreError"
            assert "STORE_ERROR" in data["message"]
        finally:
            for handler in list(pkg_logger.handlers):
                handler.close()
                pkg_logger.removeHandler(handler)

    def test_no_file_handler_when_disabled(self):
        setup_logging(None)
        pkg_logger = logging.getLogger("victordle")
        try:
            assert len(pkg_logger.handlers) == 1
        finally:
            pkg_logger.handlers.clear()
