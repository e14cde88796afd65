"""
Logging System Test Suite
"""

import logging
import logging.handlers
import os
import sys

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from rich.text import Text

from tokendao.constants import (
    LOG_BACKUP_COUNT,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_MAX_FILE_SIZE,
)
from tokendao.logger import (
    DaoLogHighlighter,
    LogManager,
    TerminalSafeFormatter,
    get_logger,
)


class TestLogManager:

    def test_singleton(self):
        assert LogManager() is LogManager()

    def test_configured_on_import(self):
        assert LogManager().is_configured

    def test_get_logger(self):
        logger = get_logger("tokendao.tests")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "tokendao.tests"

    def test_valid_log_format_kept(self):
        fmt = "%(levelname)s %(message)s"
        assert LogManager.validate_log_format(fmt) == fmt

    def test_malformed_log_format_falls_back(self):
        assert LogManager.validate_log_format("(message)s") == LOG_FORMAT.default()
        assert LogManager.validate_log_format("") == LOG_FORMAT.default()

    def test_date_format(self):
        assert LogManager.validate_date_format("%Y-%m-%d") == "%Y-%m-%d"
        assert LogManager.validate_date_format("nonsense") == LOG_DATE_FORMAT.default()
        assert LogManager.validate_date_format("") == LOG_DATE_FORMAT.default()

    def test_file_output(self, tmp_path):
        log_file = tmp_path / "logs" / "tokendao.log"
        manager = LogManager()
        try:
            manager.reconfigure(log_level="INFO", log_file=log_file, file_output=True)
            root = logging.getLogger()
            rotating = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
            assert len(rotating) == 1
            assert rotating[0].maxBytes == LOG_MAX_FILE_SIZE
            assert rotating[0].backupCount == LOG_BACKUP_COUNT

            get_logger("tokendao.tests").info("Deposit \x1b[31mred\x1b[0m made")
            rotating[0].flush()
            text = log_file.read_text(encoding="utf-8")
            assert "Deposit red made" in text
            assert "\x1b" not in text
        finally:
            for handler in logging.getLogger().handlers:
                handler.close()
            manager.reconfigure()


class TestTerminalSafeFormatter:

    def test_strips_ansi_and_control_chars(self):
        raw = "\x1b[31mred\x1b[0m desc\r\x07ription"
        assert TerminalSafeFormatter.sanitize(raw) == "red description"

    def test_keeps_newlines_and_tabs(self):
        assert TerminalSafeFormatter.sanitize("a\tb\nc") == "a\tb\nc"

    def test_format_sanitizes_message(self):
        formatter = TerminalSafeFormatter(fmt="%(message)s")
        record = logging.LogRecord(
            name="t", level=logging.INFO, pathname="", lineno=0,
            msg="Proposal \x1b[2Jadded", args=(), exc_info=None,
        )
        assert formatter.format(record) == "Proposal added"


class TestHighlighter:

    def test_highlights_governance_tokens(self):
        text = Text(f"ProposalFinished #12 by 0x{'ab' * 20} FINISHED")
        DaoLogHighlighter().highlight(text)
        styles = {span.style for span in text.spans}
        assert "tokendao.event" in styles
        assert "tokendao.proposal_id" in styles
        assert "tokendao.address" in styles
        assert "tokendao.status" in styles
