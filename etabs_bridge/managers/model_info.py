"""
Model information and file pass-through calls.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from ..core.data_models import UnitConfiguration
from ..core.errors import ValidationError, require_name
from .base import BaseManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramInfo:
    """Program identification reported by GetProgramInfo"""
    program_name: str
    version: str
    level: str


@dataclass(frozen=True)
class VersionInfo:
    """Version string and number reported by GetVersion"""
    version: str
    number: float


class ModelInfoManager(BaseManager):
    """Program info, model file location and lock state."""

    def program_info(self) -> ProgramInfo:
        name, version, level = self._outputs(
            self._context("GetProgramInfo"), "GetProgramInfo", 3, "", "", "")
        return ProgramInfo(str(name), str(version), str(level))

    def version(self) -> VersionInfo:
        version, number = self._outputs(self._context("GetVersion"), "GetVersion", 2, "", 0.0)
        return VersionInfo(str(version), float(number))

    def filename(self, include_path: bool = True) -> str:
        """Model file name; empty string for an unsaved model."""
        return str(self._query(self._context("GetModelFilename"), "GetModelFilename", include_path) or "")

    def filepath(self) -> str:
        return str(self._query(self._context("GetModelFilepath"), "GetModelFilepath") or "")

    def is_locked(self) -> bool:
        return bool(self._query(self._context("GetModelIsLocked"), "GetModelIsLocked"))

    def set_locked(self, locked: bool) -> None:
        """Lock or unlock the model. Unlocking deletes analysis results."""
        self._execute(self._context("SetModelIsLocked"), "SetModelIsLocked", bool(locked))


class FileManager(BaseManager):
    """New, open and save pass-through calls."""

    def new_blank_model(self, units: Optional[UnitConfiguration] = None) -> None:
        """Initialize a new blank model in the given units (config default if omitted)."""
        units = units or self._handle.config.units
        context = self._context("InitializeNewModel", str(units))
        if not isinstance(units, UnitConfiguration):
            raise ValidationError("units", units, "must be a UnitConfiguration", context)
        if units.preset_code is None:
            raise ValidationError("units", units, "no native unit preset matches this combination", context)
        self._execute(context, "InitializeNewModel", units.preset_code)
        self._execute(self._context("File.NewBlank"), "File.NewBlank")
        # Refresh the cache; present units follow the new model
        self._handle.units.get()
        logger.info(f"Initialized new blank model in {units}")

    def open(self, path: str) -> None:
        context = self._context("File.OpenFile", str(path))
        require_name(path, "path", context)
        self._execute(context, "File.OpenFile", path)
        self._handle.units.get()
        logger.info(f"Opened model {path}")

    def save(self, path: Optional[str] = None) -> None:
        """Save the model, to path when given, else to its current file."""
        context = self._context("File.Save", path or ())
        if path is not None:
            require_name(path, "path", context)
        self._execute(context, "File.Save", path or "")
        logger.info(f"Saved model{' to ' + path if path else ''}")
