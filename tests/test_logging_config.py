"""Tests for ledgernotes.logging_config module."""

import logging

import pytest

from ledgernotes.logging_config import (
    log_export,
    log_load,
    log_migration,
    log_save,
    setup_ledgernotes_logging,
)


@pytest.fixture
def log_dir(data_home):
    return data_home / "logs"


class TestSetupLedgernotesLogging:
    """Tests for setup_ledgernotes_logging."""

    def test_returns_package_logger(self, log_dir):
        logger = setup_ledgernotes_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "ledgernotes"

    def test_creates_log_directory(self, log_dir):
        assert not log_dir.exists()
        setup_ledgernotes_logging()
        assert log_dir.exists()

    def test_log_file_named_with_date(self, log_dir):
        setup_ledgernotes_logging()
        log_files = list(log_dir.glob("local-*.log"))
        assert len(log_files) == 1

    def test_default_level_info(self, log_dir):
        assert setup_ledgernotes_logging().level == logging.INFO

    def test_level_argument_case_insensitive(self, log_dir):
        assert setup_ledgernotes_logging("debug").level == logging.DEBUG

    def test_level_from_environment(self, log_dir, monkeypatch):
        monkeypatch.setenv("LEDGERNOTES_LOG_LEVEL", "WARNING")
        assert setup_ledgernotes_logging().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, log_dir):
        assert setup_ledgernotes_logging("LOUD").level == logging.INFO

    def test_repeated_setup_keeps_one_handler(self, log_dir):
        setup_ledgernotes_logging()
        logger = setup_ledgernotes_logging()
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1

    def test_messages_reach_the_file(self, log_dir):
        logger = setup_ledgernotes_logging()
        logging.getLogger("ledgernotes.storage.sqlite").info("hello from storage")
        for handler in logger.handlers:
            handler.flush()
        (log_file,) = log_dir.glob("local-*.log")
        content = log_file.read_text(encoding="utf-8")
        assert "hello from storage" in content
        assert "[ledgernotes.storage.sqlite]" in content


class TestEventHelpers:
    """The log_* helpers write greppable key=value lines."""

    @pytest.fixture(autouse=True)
    def capture_info(self, caplog):
        caplog.set_level(logging.INFO, logger="ledgernotes")

    def test_log_load(self, caplog):
        log_load(3, "Ledger", "ledger")
        assert "event=load note_id=3 mode=Ledger state=ledger" in caplog.text

    def test_log_save(self, caplog):
        log_save(3, ["title", "content"], success=False)
        assert "event=save note_id=3 fields=title,content success=False" in caplog.text

    def test_log_save_without_fields(self, caplog):
        log_save(3, [])
        assert "fields=- success=True" in caplog.text

    def test_log_migration(self, caplog):
        log_migration(4, "legacy", True)
        assert "event=migration note_id=4 source=legacy rewrite=True" in caplog.text

    def test_log_export_quotes_paths_with_spaces(self, caplog, tmp_path):
        log_export(5, "md", tmp_path / "my notes" / "a.md")
        assert "event=export note_id=5 format=md path=\"" in caplog.text
        assert "success=True" in caplog.text
