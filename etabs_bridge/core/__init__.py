"""Core building blocks: data models, error taxonomy, mapping and batching."""

from .bulk import BulkOperationCoordinator, CancellationToken
from .config import BridgeConfig
from .data_models import (
    ForceUnit,
    HandleState,
    ItemType,
    ItemTypeElm,
    LengthUnit,
    ManagerCallContext,
    SessionDescriptor,
    TemperatureUnit,
    UnitConfiguration,
)
from .errors import (
    EtabsError,
    NativeCallError,
    UnavailableSessionError,
    UnexpectedError,
    UnsupportedVersionError,
    ValidationError,
)
from .mapper import ArrayResultMapper, RawCallResult, RecordDecoder
from .observers import CallEvent, CallObserver, EventKind, LoggingCallObserver, configure_logging
from .outcome import BulkOutcome, Failure, OperationOutcome, Success
from .translator import ErrorTranslator

__all__ = [
    "ArrayResultMapper",
    "BridgeConfig",
    "BulkOperationCoordinator",
    "BulkOutcome",
    "CallEvent",
    "CallObserver",
    "CancellationToken",
    "ErrorTranslator",
    "EtabsError",
    "EventKind",
    "Failure",
    "ForceUnit",
    "HandleState",
    "ItemType",
    "ItemTypeElm",
    "LengthUnit",
    "LoggingCallObserver",
    "ManagerCallContext",
    "NativeCallError",
    "OperationOutcome",
    "RawCallResult",
    "RecordDecoder",
    "SessionDescriptor",
    "Success",
    "TemperatureUnit",
    "UnavailableSessionError",
    "UnexpectedError",
    "UnitConfiguration",
    "UnsupportedVersionError",
    "ValidationError",
    "configure_logging",
]
