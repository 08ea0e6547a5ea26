"""
Error translation between the native call surface and the bridge taxonomy.

The translator is pure: it builds and returns (or raises) taxonomy errors and
never logs. Logging of call outcomes is done by observers.
"""

from typing import List, Optional, TypeVar

from .constants import RETURN_OK, SESSION_LOST_HRESULTS
from .data_models import ManagerCallContext
from .errors import (
    EtabsError,
    NativeCallError,
    UnavailableSessionError,
    UnexpectedError,
)
from .outcome import Failure, OperationOutcome

T = TypeVar("T")


def _hresult_of(exc: BaseException) -> Optional[int]:
    """Extract a COM HRESULT from a pywin32 com_error or similar fault."""
    hresult = getattr(exc, "hresult", None)
    if isinstance(hresult, int):
        return hresult
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], int) and not isinstance(args[0], bool):
        return args[0]
    return None


class ErrorTranslator:
    """Map native return codes and runtime faults onto the bridge taxonomy."""

    def native_error(self, return_code: int, context: ManagerCallContext) -> NativeCallError:
        """Build the error for a nonzero return code."""
        return NativeCallError(
            "Native call failed",
            context=context,
            return_code=return_code,
        )

    def check(self, return_code: int, context: ManagerCallContext) -> None:
        """Raise NativeCallError unless return_code is zero."""
        if return_code != RETURN_OK:
            raise self.native_error(return_code, context)

    def unwrap(self, outcome: OperationOutcome[T]) -> List[T]:
        """Return the records of a success, raise NativeCallError for a failure."""
        if isinstance(outcome, Failure):
            raise NativeCallError(
                outcome.message,
                context=outcome.context,
                return_code=outcome.return_code,
            )
        return list(outcome.records)

    def translate(self, exc: BaseException, context: ManagerCallContext) -> EtabsError:
        """Convert an arbitrary exception raised by a native call.

        Taxonomy errors pass through; COM faults meaning the server is gone
        become UnavailableSessionError; everything else is UnexpectedError.
        """
        if isinstance(exc, EtabsError):
            if exc.context is None:
                exc.context = context
            return exc
        hresult = _hresult_of(exc)
        if hresult in SESSION_LOST_HRESULTS:
            return UnavailableSessionError(
                f"Native session is no longer reachable: {exc}",
                context=context,
            )
        return UnexpectedError(
            f"{type(exc).__name__}: {exc}",
            context=context,
        )
