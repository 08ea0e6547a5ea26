"""
etabs_bridge - typed Python access to the ETABS automation API

Adapts the procedural, array-oriented ETABSv1 COM surface into managers
returning typed records, under one error taxonomy, with bulk operations that
report partial failures and a model handle that owns the native session.

Components:
- ConnectionManager: discover, attach to or start ETABS instances
- ModelHandle: session owner exposing units and per-category managers
- ArrayResultMapper / ErrorTranslator / BulkOperationCoordinator: the
  adaptation machinery shared by all managers
- BridgeConfig: environment-driven configuration

Usage:
    from etabs_bridge import ConnectionManager, UnitConfiguration

    with ConnectionManager().attach() as handle:
        handle.units.set(UnitConfiguration())
        outcome = handle.points.coordinates_many(["1", "2", "3"])
        print(outcome.summary())
"""

from .core import (
    ArrayResultMapper,
    BridgeConfig,
    BulkOperationCoordinator,
    BulkOutcome,
    CallEvent,
    CallObserver,
    CancellationToken,
    ErrorTranslator,
    EtabsError,
    EventKind,
    Failure,
    ForceUnit,
    HandleState,
    ItemType,
    ItemTypeElm,
    LengthUnit,
    LoggingCallObserver,
    ManagerCallContext,
    NativeCallError,
    OperationOutcome,
    RawCallResult,
    RecordDecoder,
    SessionDescriptor,
    Success,
    TemperatureUnit,
    UnavailableSessionError,
    UnexpectedError,
    UnitConfiguration,
    UnsupportedVersionError,
    ValidationError,
    configure_logging,
)
from .core.data_models import (
    METRIC_KN_M,
    METRIC_KN_MM,
    METRIC_N_M,
    METRIC_N_MM,
    US_KIP_FT,
    US_KIP_IN,
    CaseStatus,
    ComboEntryType,
    ComboType,
    LoadCaseType,
    LoadPatternType,
    MaterialType,
    ObjectType,
    ShellType,
    SlabType,
)
from .core.outcome import records_to_frame
from .session import ConnectionManager, ModelHandle, UnitSystemCache

__version__ = "0.1.0"

__all__ = [
    "ArrayResultMapper",
    "BridgeConfig",
    "BulkOperationCoordinator",
    "BulkOutcome",
    "CallEvent",
    "CallObserver",
    "CancellationToken",
    "CaseStatus",
    "ComboEntryType",
    "ComboType",
    "ConnectionManager",
    "ErrorTranslator",
    "EtabsError",
    "EventKind",
    "Failure",
    "ForceUnit",
    "HandleState",
    "ItemType",
    "ItemTypeElm",
    "LengthUnit",
    "LoadCaseType",
    "LoadPatternType",
    "LoggingCallObserver",
    "METRIC_KN_M",
    "METRIC_KN_MM",
    "METRIC_N_M",
    "METRIC_N_MM",
    "ManagerCallContext",
    "MaterialType",
    "ModelHandle",
    "NativeCallError",
    "ObjectType",
    "OperationOutcome",
    "RawCallResult",
    "RecordDecoder",
    "SessionDescriptor",
    "ShellType",
    "SlabType",
    "Success",
    "TemperatureUnit",
    "US_KIP_FT",
    "US_KIP_IN",
    "UnavailableSessionError",
    "UnexpectedError",
    "UnitConfiguration",
    "UnitSystemCache",
    "UnsupportedVersionError",
    "ValidationError",
    "configure_logging",
    "records_to_frame",
]
