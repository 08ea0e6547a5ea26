"""
Operation outcomes returned by the array mapper and the bulk coordinator.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, ClassVar, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, Tuple, TypeVar, Union

import numpy as np
import pandas as pd

from .data_models import ManagerCallContext

T = TypeVar("T")


def records_to_frame(records: Iterable[Any]) -> pd.DataFrame:
    """Dataclass records as a DataFrame, one row per record, one column per field."""
    rows = [asdict(record) if is_dataclass(record) else record for record in records]
    return pd.DataFrame(rows)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Decoded records of a successful native call.

    Attributes:
        records: Decoded records, one per native result row
        scalars: Scalar outputs returned next to the arrays (e.g. base elevation)
        return_code: Always 0
    """
    records: Tuple[T, ...] = ()
    scalars: Mapping[str, Any] = field(default_factory=dict)
    return_code: int = 0

    is_success: ClassVar[bool] = True

    @property
    def error_message(self) -> Optional[str]:
        return None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.records)

    def column(self, name: str) -> np.ndarray:
        """Values of one record attribute as a numpy array."""
        return np.asarray([getattr(record, name) for record in self.records])

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame, one row per record."""
        return records_to_frame(self.records)


@dataclass(frozen=True)
class Failure:
    """A native call that returned a nonzero code. Never carries records.

    Attributes:
        return_code: Native return code
        message: Diagnostic message naming the operation and identifiers
        context: Call context of the failed operation
    """
    return_code: int
    message: str
    context: Optional[ManagerCallContext] = None

    is_success: ClassVar[bool] = False

    @property
    def records(self) -> Tuple[()]:
        return ()

    @property
    def error_message(self) -> str:
        return self.message

    def __len__(self) -> int:
        return 0

    def __iter__(self) -> Iterator[Any]:
        return iter(())


OperationOutcome = Union[Success[T], Failure]


@dataclass
class BulkOutcome(Generic[T]):
    """Ledger of a multi-item operation.

    Attributes:
        total_requested: Number of distinct identifiers requested
        succeeded: Identifier -> decoded value
        failed: Identifier -> error message
        cancelled: Whether the run stopped on a cancellation request
        not_attempted: Identifiers skipped after cancellation
    """
    total_requested: int
    succeeded: Dict[str, T] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    cancelled: bool = False
    not_attempted: List[str] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.cancelled and not self.failed and len(self.succeeded) == self.total_requested

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        text = f"{self.success_count}/{self.total_requested} succeeded, {self.failure_count} failed"
        if self.cancelled:
            text += f", cancelled with {len(self.not_attempted)} not attempted"
        return text
