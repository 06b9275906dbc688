"""Tests for the environment config, logging setup and entry point."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

import main
from clubsheets.shared.config import Config
from clubsheets.shared.logger import setup_logging
from clubsheets.shared.utils import sleep_for

from fakes import FakeGspreadClient, FakeGspreadWorksheet


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    load_dotenv = MagicMock()
    monkeypatch.setattr("clubsheets.shared.config.load_dotenv", load_dotenv)
    monkeypatch.setenv("KEYS_PATH", "keys/bot.json")
    monkeypatch.setenv("CONFIG_SPREADSHEET_ID", "config")
    return load_dotenv


class TestConfig:
    def test_from_env(self, env: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REPORT_MODULES", "club.camps, club.sessions,")
        monkeypatch.setenv("RELAX_TIME_EACH_ROUND", "300")

        config = Config.from_env()

        env.assert_called_once_with("settings.env")
        assert config.KEYS_PATH == "keys/bot.json"
        assert config.CONFIG_SHEET_NAME == "Reports"
        assert config.LOG_LEVEL == "INFO"
        assert config.RELAX_TIME_EACH_ROUND == 300
        assert config.report_modules == ["club.camps", "club.sessions"]

    def test_missing_required_value(self, env: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CONFIG_SPREADSHEET_ID")

        with pytest.raises(ValidationError):
            Config.from_env()


def test_setup_logging_adds_one_handler() -> None:
    logger = setup_logging("DEBUG")
    setup_logging("DEBUG")

    try:
        assert logger.name == "clubsheets"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def test_main_runs_config_sheet(env: MagicMock) -> None:
    gspread_client = FakeGspreadClient()
    config_sheet = gspread_client.register("config").register(
        FakeGspreadWorksheet("Reports", [["enabled", "report"]])
    )

    with patch("main.service_account", return_value=gspread_client) as service_account:
        try:
            main.main(Config.from_env())
        finally:
            logging.getLogger("clubsheets").handlers.clear()
            logging.getLogger("clubsheets").setLevel(logging.NOTSET)

    service_account.assert_called_once_with(filename="keys/bot.json")
    assert gspread_client.opened == ["config"]
    assert config_sheet.call_names() == ["get_all_values"]


def test_sleep_for_logs_and_sleeps(no_sleep: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="clubsheets.shared.utils"):
        sleep_for(300)

    no_sleep.assert_called_once_with(300)
    assert "Sleep for 300 seconds" in caplog.text
