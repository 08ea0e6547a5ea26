"""
Bridge Configuration Module.

Handles configuration of the ETABS connection: COM program ids, the process
name used by discovery, the supported version floor and the defaults applied
to new sessions.

Usage:
    config = BridgeConfig.from_env()
    manager = ConnectionManager(config=config)
    handle = manager.attach()
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

from .constants import (
    ETABS_HELPER_PROGID,
    ETABS_PROCESS_NAME,
    ETABS_PROGID,
    MINIMUM_SUPPORTED_VERSION,
)
from .data_models import UnitConfiguration

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class BridgeConfig:
    """ETABS bridge configuration.

    Attributes:
        progid: ProgID of the running ETABS application object
        helper_progid: ProgID of the ETABSv1 helper used to start new instances
        process_name: Executable stem matched during discovery
        min_version: Minimum supported major version
        program_path: Optional ETABS.exe path for create_new (latest install if None)
        start_ui: Show the ETABS window when starting a new instance
        log_level: Level used by configure_logging
        default_units: Preset name applied to new blank models (e.g. kN_m_C)
    """

    progid: str = ETABS_PROGID
    helper_progid: str = ETABS_HELPER_PROGID
    process_name: str = ETABS_PROCESS_NAME
    min_version: int = MINIMUM_SUPPORTED_VERSION
    program_path: Optional[str] = None
    start_ui: bool = True
    log_level: str = "INFO"
    default_units: str = "kN_m_C"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.progid:
            raise ValueError("ProgID is required")

        if not self.helper_progid:
            raise ValueError("Helper ProgID is required")

        if not self.process_name:
            raise ValueError("Process name is required")

        if self.min_version < 1:
            raise ValueError("Minimum version must be positive")

        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of: {', '.join(_LOG_LEVELS)}"
            )

        # Raises ValueError for an unknown preset
        UnitConfiguration.from_preset_name(self.default_units)

    @property
    def units(self) -> UnitConfiguration:
        """Default units as a UnitConfiguration"""
        return UnitConfiguration.from_preset_name(self.default_units)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "BridgeConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            BridgeConfig instance with loaded configuration

        Raises:
            ValueError: If a variable holds an invalid value
            FileNotFoundError: If env_file is specified but doesn't exist

        Environment Variables:
            ETABS_PROGID: ProgID of the application object
            ETABS_HELPER_PROGID: ProgID of the helper object
            ETABS_PROCESS_NAME: Executable stem (default: ETABS)
            ETABS_MIN_VERSION: Minimum supported major version
            ETABS_PROGRAM_PATH: Optional path to ETABS.exe
            ETABS_START_UI: Show the UI on create_new (true/false)
            ETABS_LOG_LEVEL: Logging level
            ETABS_DEFAULT_UNITS: Unit preset name for new models
        """
        # Load .env file if specified
        if env_file:
            cls._load_env_file(env_file)

        min_version_str = os.getenv("ETABS_MIN_VERSION", str(MINIMUM_SUPPORTED_VERSION))
        try:
            min_version = int(min_version_str)
        except ValueError:
            raise ValueError(f"Invalid ETABS_MIN_VERSION: {min_version_str}. Must be an integer")

        config = cls(
            progid=os.getenv("ETABS_PROGID", ETABS_PROGID),
            helper_progid=os.getenv("ETABS_HELPER_PROGID", ETABS_HELPER_PROGID),
            process_name=os.getenv("ETABS_PROCESS_NAME", ETABS_PROCESS_NAME),
            min_version=min_version,
            program_path=os.getenv("ETABS_PROGRAM_PATH") or None,
            start_ui=os.getenv("ETABS_START_UI", "true").lower() == "true",
            log_level=os.getenv("ETABS_LOG_LEVEL", "INFO"),
            default_units=os.getenv("ETABS_DEFAULT_UNITS", "kN_m_C"),
        )
        logger.debug(f"Loaded bridge configuration (min version {config.min_version})")
        return config

    @staticmethod
    def _load_env_file(env_file: str) -> None:
        """Load environment variables from .env file.

        Args:
            env_file: Path to .env file

        Raises:
            FileNotFoundError: If env_file doesn't exist
        """
        try:
            from dotenv import load_dotenv
        except ImportError:
            raise ImportError(
                "python-dotenv is required for .env file support. "
                "Install with: pip install python-dotenv"
            )
        if not os.path.isfile(env_file) or not load_dotenv(env_file):
            raise FileNotFoundError(f".env file not found: {env_file}")
