"""
Bulk operation coordination.

Drives a multi-identifier operation either through one native bulk call
(filter "All" or a group name) or through a per-item loop, and aggregates the
partial failures into a BulkOutcome.
"""

from typing import Callable, Iterable, Mapping, Optional, TypeVar
import threading

from .data_models import ManagerCallContext
from .errors import EtabsError, UnavailableSessionError, ValidationError, require_names
from .observers import CallEvent, EventKind
from .outcome import BulkOutcome

T = TypeVar("T")

Emitter = Callable[[CallEvent], None]


class CancellationToken:
    """Cooperative cancellation flag, checked between bulk iterations."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class BulkOperationCoordinator:
    """Run an operation across identifiers with partial-failure semantics.

    Per identifier, NativeCallError and UnexpectedError are recorded in
    `failed` and the loop continues. UnavailableSessionError (the session is
    gone) and ValidationError (bad local input) abort the run and propagate.
    A cancelled run returns the partial outcome with `cancelled=True`.
    """

    def __init__(self, emit: Optional[Emitter] = None):
        self._emit = emit

    def _notify(self, kind: EventKind, context: ManagerCallContext, error=None, detail: str = "") -> None:
        if self._emit is not None:
            self._emit(CallEvent(kind, context, error, detail))

    def run(
        self,
        identifiers: Iterable[str],
        operation: Callable[[str], T],
        *,
        operation_name: str,
        bulk_operation: Optional[Callable[[list], Mapping[str, T]]] = None,
        cancel_token: Optional[CancellationToken] = None,
        item_type: Optional[str] = None,
    ) -> BulkOutcome[T]:
        """Execute `operation` for every identifier.

        Args:
            identifiers: Target identifiers; validated and de-duplicated
            operation: Per-item call returning the decoded value
            operation_name: Name used in contexts and messages
            bulk_operation: Optional single native call returning
                identifier -> value for the identifiers it covered
            cancel_token: Optional cancellation token
            item_type: Item type recorded in the call context

        Returns:
            BulkOutcome with one entry per identifier in succeeded or failed,
            or listed in not_attempted after cancellation

        Raises:
            ValidationError: for an empty or malformed identifier list
        """
        names = require_names(identifiers, "identifiers", ManagerCallContext(operation_name))
        context = ManagerCallContext(operation_name, tuple(names), item_type)
        outcome: BulkOutcome[T] = BulkOutcome(total_requested=len(names))

        if bulk_operation is not None:
            try:
                found = bulk_operation(names)
            except (UnavailableSessionError, ValidationError):
                raise
            except EtabsError as exc:
                # Fall back to per-item calls
                self._notify(EventKind.FAILED, context, exc, "bulk call failed, retrying per item")
            else:
                for name in names:
                    if name in found:
                        outcome.succeeded[name] = found[name]

        pending = [name for name in names if name not in outcome.succeeded]
        for index, name in enumerate(pending):
            if cancel_token is not None and cancel_token.is_cancelled:
                outcome.cancelled = True
                outcome.not_attempted = pending[index:]
                self._notify(EventKind.CANCELLED, context,
                             detail=f"{len(outcome.not_attempted)} not attempted")
                return outcome
            try:
                outcome.succeeded[name] = operation(name)
            except (UnavailableSessionError, ValidationError):
                raise
            except EtabsError as exc:
                outcome.failed[name] = str(exc)
                self._notify(EventKind.ITEM_FAILED, context.for_target(name), exc)

        self._notify(EventKind.BULK_COMPLETED, context, detail=outcome.summary())
        return outcome
