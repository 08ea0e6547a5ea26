"""
Unit tests for bridge configuration.

Tests cover:
- BridgeConfig defaults and validation
- Environment variable loading
- .env file handling
"""

import logging

import pytest

from etabs_bridge.core.config import BridgeConfig
from etabs_bridge.core.constants import ETABS_HELPER_PROGID, ETABS_PROGID
from etabs_bridge.core.data_models import US_KIP_FT, ManagerCallContext, UnitConfiguration
from etabs_bridge.core.errors import NativeCallError
from etabs_bridge.core.observers import CallEvent, EventKind, LoggingCallObserver, configure_logging

ENV_VARS = (
    "ETABS_PROGID", "ETABS_HELPER_PROGID", "ETABS_PROCESS_NAME", "ETABS_MIN_VERSION",
    "ETABS_PROGRAM_PATH", "ETABS_START_UI", "ETABS_LOG_LEVEL", "ETABS_DEFAULT_UNITS",
)


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so variables loaded from .env files are removed afterwards
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestBridgeConfig:
    """Tests for BridgeConfig initialization and validation."""

    def test_defaults(self):
        config = BridgeConfig()
        assert config.progid == ETABS_PROGID
        assert config.helper_progid == ETABS_HELPER_PROGID
        assert config.process_name == "ETABS"
        assert config.min_version == 22
        assert config.program_path is None
        assert config.start_ui is True
        assert config.units == UnitConfiguration()

    def test_log_level_normalized(self):
        assert BridgeConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            BridgeConfig(log_level="LOUD")

    def test_invalid_min_version(self):
        with pytest.raises(ValueError, match="Minimum version must be positive"):
            BridgeConfig(min_version=0)

    def test_empty_progid(self):
        with pytest.raises(ValueError, match="ProgID is required"):
            BridgeConfig(progid="")

    def test_invalid_units(self):
        with pytest.raises(ValueError):
            BridgeConfig(default_units="kN_parsec_C")

    def test_units_property(self):
        assert BridgeConfig(default_units="kip_ft_F").units == US_KIP_FT


class TestFromEnv:
    """Tests for environment loading."""

    def test_defaults_without_env(self, clean_env):
        config = BridgeConfig.from_env()
        assert config.min_version == 22
        assert config.start_ui is True

    def test_reads_variables(self, clean_env):
        clean_env.setenv("ETABS_MIN_VERSION", "21")
        clean_env.setenv("ETABS_PROGRAM_PATH", r"C:\ETABS\ETABS.exe")
        clean_env.setenv("ETABS_START_UI", "false")
        clean_env.setenv("ETABS_LOG_LEVEL", "warning")
        clean_env.setenv("ETABS_DEFAULT_UNITS", "kN_mm_C")
        config = BridgeConfig.from_env()
        assert config.min_version == 21
        assert config.program_path == r"C:\ETABS\ETABS.exe"
        assert config.start_ui is False
        assert config.log_level == "WARNING"
        assert config.units.preset_code == 5

    def test_invalid_min_version(self, clean_env):
        clean_env.setenv("ETABS_MIN_VERSION", "twenty-two")
        with pytest.raises(ValueError, match="Invalid ETABS_MIN_VERSION"):
            BridgeConfig.from_env()

    def test_env_file(self, clean_env, tmp_path):
        pytest.importorskip("dotenv")
        env_file = tmp_path / ".env"
        env_file.write_text("ETABS_MIN_VERSION=23\nETABS_PROCESS_NAME=ETABS64\n")
        config = BridgeConfig.from_env(str(env_file))
        assert config.min_version == 23
        assert config.process_name == "ETABS64"

    def test_missing_env_file(self, clean_env, tmp_path):
        pytest.importorskip("dotenv")
        with pytest.raises(FileNotFoundError):
            BridgeConfig.from_env(str(tmp_path / "missing.env"))


class TestLoggingCallObserver:
    """Tests for the default logging observer."""

    def test_levels(self, caplog):
        observer = LoggingCallObserver()
        context = ManagerCallContext("FrameObj.SetSection", ("B1",))
        with caplog.at_level(logging.DEBUG, logger="etabs_bridge"):
            observer.notify(CallEvent(EventKind.SUCCEEDED, context))
            observer.notify(CallEvent(EventKind.FAILED, context, NativeCallError("failed", return_code=1)))
            observer.notify(CallEvent(EventKind.BULK_COMPLETED, context, detail="1/1 succeeded, 0 failed"))
        levels = [record.levelname for record in caplog.records]
        assert levels == ["DEBUG", "WARNING", "INFO"]
        assert "FrameObj.SetSection on 'B1' succeeded" in caplog.records[0].getMessage()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_level(self):
        bridge_logger = logging.getLogger("etabs_bridge")
        level = bridge_logger.level
        yield
        bridge_logger.setLevel(level)

    def test_accepts_lowercase(self):
        configure_logging("debug")
        assert logging.getLogger("etabs_bridge").level == logging.DEBUG

    def test_uses_config_log_level(self):
        configure_logging(BridgeConfig(log_level="warning"))
        assert logging.getLogger("etabs_bridge").level == logging.WARNING

    def test_reads_environment_by_default(self, clean_env):
        clean_env.setenv("ETABS_LOG_LEVEL", "error")
        configure_logging()
        assert logging.getLogger("etabs_bridge").level == logging.ERROR
