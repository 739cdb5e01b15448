"""
Tests for editor configuration and JSON logging setup.
"""

import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from xsdedit.config import EditorConfig, _env_flag
from xsdedit.logging_config import build_logging_config, setup_logging


@pytest.fixture
def restore_xsdedit_logger():
    """Undo setup_logging so later tests see the default logger state."""
    logger = logging.getLogger("xsdedit")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestEditorConfig:
    """Tests for EditorConfig."""

    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("TRUE", True), (" true ", True), ("false", False), ("1", False)],
    )
    def test_env_flag(self, monkeypatch, value, expected):
        """Test only 'true' (any case) enables a flag."""
        monkeypatch.setenv("XSDEDIT_TEST_FLAG", value)
        assert _env_flag("XSDEDIT_TEST_FLAG", "false") is expected

    def test_env_flag_default(self, monkeypatch):
        """Test the default applies when the variable is unset."""
        monkeypatch.delenv("XSDEDIT_TEST_FLAG", raising=False)
        assert _env_flag("XSDEDIT_TEST_FLAG", "true") is True

    def test_as_dict(self):
        """Test the diagnostic view lists every setting."""
        assert set(EditorConfig.as_dict()) == {"log_level", "xs_prefix", "roundtrip_check"}


class TestLoggingConfig:
    """Tests for build_logging_config and setup_logging."""

    def test_build(self):
        """Test the dictConfig mapping uses the JSON formatter on stdout."""
        config = build_logging_config("debug")
        assert config["formatters"]["json"]["()"] is jsonlogger.JsonFormatter
        assert config["handlers"]["console"]["stream"] == "ext://sys.stdout"
        assert config["loggers"]["xsdedit"]["level"] == "DEBUG"
        assert config["loggers"]["xsdedit"]["propagate"] is False

    def test_build_default_level(self, monkeypatch):
        """Test the configured level is used when none is passed."""
        monkeypatch.setattr(EditorConfig, "LOG_LEVEL", "WARNING")
        assert build_logging_config()["loggers"]["xsdedit"]["level"] == "WARNING"

    def test_setup_writes_json(self, restore_xsdedit_logger, capsys):
        """Test records are written as JSON carrying the command extras."""
        setup_logging("info")
        logging.getLogger("xsdedit.commands").info(
            "Element added", extra={"command_type": "addElement", "address": "/element:a"}
        )
        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["message"] == "Element added"
        assert record["command_type"] == "addElement"
        assert record["address"] == "/element:a"
        assert record["levelname"] == "INFO"
