# File: tests/unit/test_config.py
"""
Unit tests for configuration loading and the logger setup.
"""

import json
import logging

import pytest
import pytz

from clinic_agenda.core.config_manager import Config, _env_bool
from clinic_agenda.models import GridConfig
from clinic_agenda.utils.logger import setup_logger


class TestConfig:

    def test_grid_config_from_settings(self):
        config = Config.grid_config()

        assert isinstance(config, GridConfig)
        assert config.start_hour == Config.START_HOUR
        assert config.slot_minutes == Config.SLOT_MINUTES

    def test_load_grid_config_merges_file_over_settings(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps({'start_hour': 8, 'slot_minutes': 30}), encoding='utf-8')

        config = Config.load_grid_config(path)

        assert config.start_hour == 8
        assert config.slot_minutes == 30
        assert config.end_hour == Config.END_HOUR

    def test_load_grid_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.load_grid_config(tmp_path / "missing.json")

    def test_load_grid_config_invalid_values(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps({'start_hour': 22, 'end_hour': 8}), encoding='utf-8')

        with pytest.raises(ValueError):
            Config.load_grid_config(path)

    def test_timezone(self, monkeypatch):
        monkeypatch.setattr(Config, "TARGET_TIMEZONE", "Europe/Madrid")

        assert Config.timezone() == pytz.timezone("Europe/Madrid")

    def test_validate_ok(self, monkeypatch):
        monkeypatch.setattr(Config, "TARGET_TIMEZONE", "Europe/Madrid")

        assert Config.validate() is True

    @pytest.mark.parametrize("attr, value", [
        ("END_HOUR", 5),
        ("SLOT_MINUTES", 0),
        ("TARGET_TIMEZONE", "Mars/Olympus"),
        ("LUNCH_START", "noon"),
        ("DEFAULT_EVENT_DURATION", 0),
    ])
    def test_validate_reports_errors(self, monkeypatch, attr, value):
        monkeypatch.setattr(Config, "TARGET_TIMEZONE", "Europe/Madrid")
        monkeypatch.setattr(Config, attr, value)

        assert Config.validate() is False

    @pytest.mark.parametrize("raw, expected", [
        ("1", True), ("true", True), ("Yes", True), ("0", False), ("off", False), ("", False),
    ])
    def test_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("AGENDA_TEST_FLAG", raw)

        assert _env_bool("AGENDA_TEST_FLAG", not expected) is expected

    def test_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("AGENDA_TEST_FLAG", raising=False)

        assert _env_bool("AGENDA_TEST_FLAG", True) is True


class TestLogger:

    def test_setup_logger_does_not_duplicate_handlers(self):
        first = setup_logger("clinic_agenda.tests.dup")
        count = len(first.handlers)
        second = setup_logger("clinic_agenda.tests.dup")

        assert first is second
        assert len(second.handlers) == count

    def test_file_logging_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("AGENDA_LOG_TO_FILE", "0")

        logger = setup_logger("clinic_agenda.tests.nofile")

        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_file_logging(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AGENDA_LOG_TO_FILE", "1")
        monkeypatch.setenv("AGENDA_LOG_DIR", str(tmp_path / "logs"))

        logger = setup_logger("clinic_agenda.tests.file")
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        files = list((tmp_path / "logs").glob("clinic_agenda_*.log"))
        assert len(files) == 1
        assert "hello" in files[0].read_text(encoding='utf-8')

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
