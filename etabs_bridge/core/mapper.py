"""
Array Result Mapper - decode parallel output arrays into typed records

Native "get" calls return a record count, a return code and K parallel arrays,
one per column. The mapper turns that into an OperationOutcome of typed
records; "set many" calls use the mirror operation, transposing records into
equal-length arrays.

Under pywin32 a call with ByRef parameters returns a tuple holding the
function's return value first, followed by every ByRef argument in order. A
call without ByRef parameters returns the bare return value.
"""

from dataclasses import dataclass, field, fields as dataclass_fields, is_dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

import numpy as np

from .constants import COUNT_FIELD, RETURN_OK
from .data_models import ManagerCallContext
from .errors import EtabsError, UnexpectedError, ValidationError
from .outcome import Failure, OperationOutcome, Success

T = TypeVar("T")

Decoder = Callable[[int, Mapping[str, Sequence[Any]]], T]


def split_native(values: Any) -> Tuple[int, Tuple[Any, ...]]:
    """Split a native call result into (return_code, outputs)."""
    if isinstance(values, (tuple, list)):
        if not values:
            raise UnexpectedError("Native call returned an empty result")
        head, outputs = values[0], tuple(values[1:])
    else:
        head, outputs = values, ()
    try:
        return int(head), outputs
    except (TypeError, ValueError):
        raise UnexpectedError(f"Native return code is not an integer: {head!r}")


def _as_sequence(value: Any) -> Sequence[Any]:
    """Normalize a SAFEARRAY output (tuple, list, ndarray or None)."""
    if value is None:
        return ()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (str, bytes)):
        return (value,)
    try:
        return tuple(value)
    except TypeError:
        return (value,)


@dataclass
class RawCallResult:
    """Direct decode of one native call.

    Attributes:
        count: Declared number of records
        return_code: Native return code
        arrays: Field name -> output array
        scalars: Field name -> scalar output
    """
    count: int
    return_code: int
    arrays: Dict[str, Sequence[Any]] = field(default_factory=dict)
    scalars: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_native(
        cls,
        values: Any,
        output_fields: Sequence[str],
        count_field: Optional[str] = COUNT_FIELD,
        scalar_fields: Sequence[str] = (),
    ) -> "RawCallResult":
        """Name the outputs of a pywin32 call result.

        Args:
            values: Raw value returned by the native call
            output_fields: Names of the ByRef outputs, in call order
            count_field: Output holding the record count; None to use the
                length of the first array
            scalar_fields: Outputs that are scalars rather than arrays

        Returns:
            RawCallResult. Outputs missing from a short tuple are simply
            absent; the length check at decode time reports them.
        """
        return_code, outputs = split_native(values)
        arrays: Dict[str, Sequence[Any]] = {}
        scalars: Dict[str, Any] = {}
        count = 0
        for name, value in zip(output_fields, outputs):
            if name == count_field:
                try:
                    count = int(value or 0)
                except (TypeError, ValueError):
                    raise UnexpectedError(f"Native record count is not an integer: {value!r}")
            elif name in scalar_fields:
                scalars[name] = value
            else:
                arrays[name] = _as_sequence(value)
        if count_field is None and arrays:
            count = len(next(iter(arrays.values())))
        return cls(count=count, return_code=return_code, arrays=arrays, scalars=scalars)


class RecordDecoder(Generic[T]):
    """Decoder building dataclass records from parallel arrays.

    Each init field of the record type is read from the array of the same
    name unless field_map redirects it. Converters post-process a value
    (e.g. an enum constructor for an integer code).
    """

    def __init__(
        self,
        record_type: Type[T],
        field_map: Optional[Mapping[str, str]] = None,
        converters: Optional[Mapping[str, Callable[[Any], Any]]] = None,
    ):
        if not is_dataclass(record_type):
            raise TypeError(f"{record_type!r} is not a dataclass")
        field_map = dict(field_map or {})
        self.record_type = record_type
        self.field_map = {
            f.name: field_map.get(f.name, f.name)
            for f in dataclass_fields(record_type) if f.init
        }
        self.converters = dict(converters or {})

    @property
    def fields(self) -> Tuple[str, ...]:
        """Array names consulted by this decoder"""
        return tuple(self.field_map.values())

    def __call__(self, index: int, arrays: Mapping[str, Sequence[Any]]) -> T:
        values = {}
        for attribute, source in self.field_map.items():
            value = arrays[source][index]
            converter = self.converters.get(attribute)
            values[attribute] = converter(value) if converter else value
        return self.record_type(**values)


class ColumnDecoder:
    """Decoder returning the raw value of a single array (e.g. a name list)."""

    def __init__(self, field_name: str, converter: Optional[Callable[[Any], Any]] = None):
        self.field_name = field_name
        self.converter = converter

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.field_name,)

    def __call__(self, index: int, arrays: Mapping[str, Sequence[Any]]) -> Any:
        value = arrays[self.field_name][index]
        return self.converter(value) if self.converter else value


class ArrayResultMapper:
    """Generic decode/encode between parallel arrays and typed records."""

    def fetch(
        self,
        call: Callable[[], Any],
        output_fields: Sequence[str],
        decoder: Decoder[T],
        context: ManagerCallContext,
        count_field: Optional[str] = COUNT_FIELD,
        scalar_fields: Sequence[str] = (),
    ) -> OperationOutcome[T]:
        """Issue a native call and decode its outputs."""
        raw = RawCallResult.from_native(
            call(), output_fields, count_field=count_field, scalar_fields=scalar_fields)
        return self.decode(raw, decoder, context)

    def decode(
        self,
        raw: RawCallResult,
        decoder: Decoder[T],
        context: ManagerCallContext,
    ) -> OperationOutcome[T]:
        """Decode a raw result.

        A nonzero return code yields a Failure without touching the arrays,
        which are not trustworthy on failure. On success every consulted
        array must hold at least `count` values.

        Raises:
            UnexpectedError: if the native layer broke its own contract
        """
        if raw.return_code != RETURN_OK:
            return Failure(
                return_code=raw.return_code,
                message=f"{context.describe()} failed with return code {raw.return_code}",
                context=context,
            )
        if raw.count < 0:
            raise UnexpectedError(f"Native call reported a negative count ({raw.count})", context=context)
        if raw.count == 0:
            return Success(records=(), scalars=dict(raw.scalars))

        consulted = getattr(decoder, "fields", None) or tuple(raw.arrays)
        for name in consulted:
            if name not in raw.arrays:
                raise UnexpectedError(f"Native output '{name}' is missing", context=context)
            if len(raw.arrays[name]) < raw.count:
                raise UnexpectedError(
                    f"Native output '{name}' has {len(raw.arrays[name])} values "
                    f"but {raw.count} records were declared",
                    context=context,
                )

        try:
            records = tuple(decoder(index, raw.arrays) for index in range(raw.count))
        except EtabsError:
            raise
        except Exception as exc:
            raise UnexpectedError(f"Could not decode record: {exc}", context=context) from exc
        return Success(records=records, scalars=dict(raw.scalars))

    def encode(
        self,
        records: Sequence[Any],
        field_map: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, List[Any]]:
        """Transpose dataclass records into equal-length parallel arrays.

        Args:
            records: Records of one dataclass type
            field_map: Optional attribute -> array name mapping; when given,
                only the mapped attributes are encoded

        Returns:
            Array name -> list of values, all of length len(records)
        """
        records = list(records)
        if not records:
            return {name: [] for name in (field_map or {}).values()}
        record_type = type(records[0])
        if not is_dataclass(record_type):
            raise ValidationError("records", records, "must be dataclass instances")
        for index, record in enumerate(records):
            if type(record) is not record_type:
                raise ValidationError(
                    f"records[{index}]", record,
                    f"expected {record_type.__name__}, got {type(record).__name__}")
        if field_map is None:
            field_map = {f.name: f.name for f in dataclass_fields(record_type)}
        arrays: Dict[str, List[Any]] = {name: [] for name in field_map.values()}
        for record in records:
            for attribute, name in field_map.items():
                arrays[name].append(getattr(record, attribute))
        return arrays
