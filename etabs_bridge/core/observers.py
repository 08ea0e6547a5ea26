"""
Call observers.

Mapper and translator stay pure; every outcome of a native call is published
to the observers registered on a ModelHandle. LoggingCallObserver is the
default and routes events to the standard logging module.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import logging

from .config import BridgeConfig
from .data_models import ManagerCallContext
from .errors import EtabsError

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kind of a call event"""
    SUCCEEDED = "succeeded"        # native call returned 0
    FAILED = "failed"              # nonzero return code
    FAULTED = "faulted"            # runtime fault translated to the taxonomy
    ITEM_FAILED = "item_failed"    # one identifier of a bulk operation failed
    BULK_COMPLETED = "bulk_completed"
    CANCELLED = "cancelled"
    LIFECYCLE = "lifecycle"        # attach / create / close


@dataclass(frozen=True)
class CallEvent:
    """One observed call outcome.

    Attributes:
        kind: Event kind
        context: Call context
        error: Error raised or recorded, if any
        detail: Free-form detail (bulk summary, lifecycle step)
    """
    kind: EventKind
    context: ManagerCallContext
    error: Optional[EtabsError] = None
    detail: str = ""


class CallObserver(ABC):
    """Receiver of call events."""

    @abstractmethod
    def notify(self, event: CallEvent) -> None:
        pass


class LoggingCallObserver(CallObserver):
    """Log call events: DEBUG for success, WARNING for native failures,
    ERROR for runtime faults and INFO for lifecycle events."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def notify(self, event: CallEvent) -> None:
        description = event.context.describe()
        if event.kind == EventKind.SUCCEEDED:
            self.log.debug(f"{description} succeeded")
        elif event.kind in (EventKind.FAILED, EventKind.ITEM_FAILED):
            self.log.warning(f"{description} failed: {event.error}")
        elif event.kind == EventKind.FAULTED:
            self.log.error(f"{description} raised {type(event.error).__name__}: {event.error}")
        elif event.kind == EventKind.BULK_COMPLETED:
            self.log.info(f"{event.context.operation}: {event.detail}")
        elif event.kind == EventKind.CANCELLED:
            self.log.warning(f"{event.context.operation} cancelled: {event.detail}")
        else:
            self.log.info(f"{description}: {event.detail}")


def configure_logging(level: Union[str, BridgeConfig, None] = None) -> None:
    """Basic console logging for scripts using the bridge.

    Args:
        level: Level name, or a BridgeConfig whose log_level is used
            (ETABS_LOG_LEVEL via BridgeConfig.from_env when omitted)

    Usage:
        config = BridgeConfig.from_env()
        configure_logging(config)
    """
    if level is None:
        level = BridgeConfig.from_env()
    if isinstance(level, BridgeConfig):
        level = level.log_level
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger("etabs_bridge").setLevel(numeric_level)
