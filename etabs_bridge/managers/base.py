"""
Base class of the per-category managers.

A manager is a thin call-site: it validates arguments, issues native calls
through its ModelHandle, decodes outputs with the ArrayResultMapper and turns
nonzero return codes into NativeCallError.
"""

from dataclasses import fields as dataclass_fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple, Union

from ..core.constants import COUNT_FIELD, RETURN_OK
from ..core.data_models import ManagerCallContext
from ..core.errors import UnexpectedError
from ..core.mapper import ColumnDecoder, Decoder, split_native
from ..core.observers import CallEvent, EventKind
from ..core.outcome import Failure, OperationOutcome

if TYPE_CHECKING:
    from ..session.model_handle import ModelHandle

_NAMES = ColumnDecoder("names")


class BaseManager:
    """Shared plumbing of all managers."""

    def __init__(self, handle: "ModelHandle"):
        self._handle = handle
        self._mapper = handle.mapper
        self._translator = handle.translator
        self._coordinator = handle.coordinator

    def _context(
        self,
        operation: str,
        targets: Union[str, Iterable[str]] = (),
        item_type: Optional[Union[Enum, str]] = None,
    ) -> ManagerCallContext:
        if isinstance(targets, str):
            targets = (targets,)
        if isinstance(item_type, Enum):
            item_type = item_type.name
        return ManagerCallContext(operation, tuple(targets), item_type)

    def _invoke(self, context: ManagerCallContext, path: str, *args: Any) -> Tuple[int, Tuple[Any, ...]]:
        """Issue a native call; return (return_code, outputs) unchecked."""
        return split_native(self._handle.invoke(context, path, *args))

    def _execute(self, context: ManagerCallContext, path: str, *args: Any) -> Tuple[Any, ...]:
        """Issue a native call and return its ByRef outputs.

        Raises:
            NativeCallError: for a nonzero return code
        """
        return_code, outputs = self._invoke(context, path, *args)
        if return_code != RETURN_OK:
            error = self._translator.native_error(return_code, context)
            self._handle.emit(CallEvent(EventKind.FAILED, context, error))
            raise error
        self._handle.emit(CallEvent(EventKind.SUCCEEDED, context))
        return outputs

    def _outputs(self, context: ManagerCallContext, path: str, count: int, *args: Any) -> Tuple[Any, ...]:
        """Like _execute, returning exactly the first `count` ByRef outputs.

        Raises:
            UnexpectedError: if the native call returned fewer outputs
        """
        outputs = self._execute(context, path, *args)
        if len(outputs) < count:
            error = UnexpectedError(
                f"Native call returned {len(outputs)} outputs, expected {count}", context=context)
            self._handle.emit(CallEvent(EventKind.FAULTED, context, error))
            raise error
        return outputs[:count]

    def _query(self, context: ManagerCallContext, path: str, *args: Any) -> Any:
        """Raw value of a call whose return value is data, not a status code."""
        value = self._handle.invoke(context, path, *args)
        self._handle.emit(CallEvent(EventKind.SUCCEEDED, context))
        return value

    def _fetch(
        self,
        context: ManagerCallContext,
        path: str,
        args: Sequence[Any],
        output_fields: Sequence[str],
        decoder: Decoder,
        count_field: Optional[str] = COUNT_FIELD,
        scalar_fields: Sequence[str] = (),
    ) -> OperationOutcome:
        """Issue an array-returning call and decode it into an outcome."""
        value = self._handle.invoke(context, path, *args)
        try:
            outcome = self._mapper.fetch(
                lambda: value,
                output_fields, decoder, context,
                count_field=count_field, scalar_fields=scalar_fields,
            )
        except UnexpectedError as e:
            self._handle.emit(CallEvent(EventKind.FAULTED, context, e))
            raise
        if isinstance(outcome, Failure):
            error = self._translator.native_error(outcome.return_code, context)
            self._handle.emit(CallEvent(EventKind.FAILED, context, error))
        else:
            self._handle.emit(CallEvent(EventKind.SUCCEEDED, context))
        return outcome

    def _records(self, *args: Any, **kwargs: Any) -> List[Any]:
        """Like _fetch but return the record list, raising NativeCallError on failure."""
        return self._translator.unwrap(self._fetch(*args, **kwargs))

    def _names(self, context: ManagerCallContext, path: str, *args: Any) -> List[str]:
        """Decode a GetNameList-style call: (count, names) after the inputs."""
        return [str(name) for name in self._records(
            context, path, (*args, 0, []), (COUNT_FIELD, "names"), _NAMES)]


def output_fields(record_type) -> Tuple[str, ...]:
    """Native output order of a results-style call: count, then the record fields."""
    return (COUNT_FIELD,) + tuple(f.name for f in dataclass_fields(record_type))


def placeholders(record_type) -> Tuple[list, ...]:
    """Empty ByRef array arguments, one per record field."""
    return tuple([] for _ in dataclass_fields(record_type))
