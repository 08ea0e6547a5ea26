"""
Unit system cache.

Holds the present unit configuration of one model session. The cached value
always reflects the last successful native get or set; reads never fail.
"""

from typing import TYPE_CHECKING
import logging

from ..core.data_models import ManagerCallContext, UnitConfiguration
from ..core.errors import EtabsError, UnexpectedError, ValidationError
from ..core.mapper import split_native
from ..core.observers import CallEvent, EventKind

if TYPE_CHECKING:
    from .model_handle import ModelHandle

logger = logging.getLogger(__name__)


class UnitSystemCache:
    """Present units of a model session (default kN, m, C)."""

    def __init__(self, handle: "ModelHandle", initial: UnitConfiguration = UnitConfiguration()):
        self._handle = handle
        self._cached = initial

    @property
    def cached(self) -> UnitConfiguration:
        """Last known configuration, without a native call"""
        return self._cached

    def set(self, units: UnitConfiguration) -> bool:
        """Set the present units.

        Returns:
            True once the native call succeeded and the cache is updated

        Raises:
            ValidationError: if units is not a UnitConfiguration
            NativeCallError: if the native call returned a nonzero code;
                the cache is left unchanged
        """
        context = ManagerCallContext("SetPresentUnits_2", (str(units),))
        if not isinstance(units, UnitConfiguration):
            raise ValidationError("units", units, "must be a UnitConfiguration", context)
        return_code, _ = split_native(self._handle.invoke(
            context, "SetPresentUnits_2",
            units.force.value, units.length.value, units.temperature.value))
        if return_code != 0:
            error = self._handle.translator.native_error(return_code, context)
            self._handle.emit(CallEvent(EventKind.FAILED, context, error))
            raise error
        self._cached = units
        self._handle.emit(CallEvent(EventKind.SUCCEEDED, context))
        logger.debug(f"Present units set to {units}")
        return True

    def get(self) -> UnitConfiguration:
        """Read the present units; on any failure return the cached value."""
        context = ManagerCallContext("GetPresentUnits_2")
        try:
            return_code, outputs = split_native(
                self._handle.invoke(context, "GetPresentUnits_2", 0, 0, 0))
            if return_code != 0:
                logger.warning(
                    f"GetPresentUnits_2 returned {return_code}; using cached units {self._cached}")
                return self._cached
            units = UnitConfiguration.from_codes(*outputs[:3])
        except (EtabsError, ValueError, TypeError) as e:
            logger.warning(f"Could not read present units ({e}); using cached units {self._cached}")
            return self._cached
        self._cached = units
        return units

    def database_units(self) -> UnitConfiguration:
        """Units the model database is stored in (GetDatabaseUnits).

        Raises:
            UnexpectedError: if the native layer returned an unknown preset code
        """
        context = ManagerCallContext("GetDatabaseUnits")
        code = self._handle.invoke(context, "GetDatabaseUnits")
        try:
            return UnitConfiguration.from_preset_code(code)
        except (ValueError, TypeError) as e:
            raise UnexpectedError(str(e), context=context) from e
