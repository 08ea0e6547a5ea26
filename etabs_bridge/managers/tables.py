"""
Database tables as pandas DataFrames.

Table data travels as one flat string array, row-major, with one column per
field key. Display tables are read with GetTableForDisplayArray; edits are
staged with SetTableForEditingArray and committed with ApplyEditedTables.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.constants import ALL_GROUP
from ..core.errors import UnexpectedError, ValidationError, require_name, require_names
from ..core.mapper import RecordDecoder
from .base import BaseManager


@dataclass(frozen=True)
class TableInfo:
    """A database table known to the model"""
    key: str
    name: str
    import_type: int   # 0 not importable, 1 importable not interactive, 2 interactive, 3 interactive when unlocked


@dataclass(frozen=True)
class TableEditResult:
    """Messages reported by ApplyEditedTables"""
    fatal_errors: int
    error_messages: int
    warning_messages: int
    info_messages: int
    import_log: str = ""

    @property
    def ok(self) -> bool:
        return self.fatal_errors == 0 and self.error_messages == 0


_TABLE_INFO = RecordDecoder(
    TableInfo,
    field_map={"key": "keys", "name": "names", "import_type": "import_types"},
    converters={"key": str, "name": str, "import_type": int},
)


def _reshape(data: Sequence, rows: int, columns: Sequence[str], context) -> pd.DataFrame:
    """Flat row-major data -> DataFrame with the given columns."""
    width = len(columns)
    values = list(data or ())
    if rows and len(values) < rows * width:
        raise UnexpectedError(
            f"Table data has {len(values)} values, expected {rows} x {width}", context=context)
    matrix = np.asarray(values[:rows * width], dtype=object).reshape(rows, width)
    return pd.DataFrame(matrix, columns=list(columns))


class DatabaseTableManager(BaseManager):
    """Database table call-sites (DatabaseTables)."""

    def available_tables(self) -> List[TableInfo]:
        return self._records(
            self._context("DatabaseTables.GetAvailableTables"), "DatabaseTables.GetAvailableTables",
            (0, [], [], []), ("count", "keys", "names", "import_types"), _TABLE_INFO)

    def table(
        self,
        key: str,
        fields: Optional[Sequence[str]] = None,
        group: str = ALL_GROUP,
    ) -> pd.DataFrame:
        """Table for display as a DataFrame of strings.

        Args:
            key: Table key, e.g. "Joint Coordinates"
            fields: Field keys to include (all when omitted)
            group: Group whose objects are reported

        The table version is kept in DataFrame.attrs["table_version"].
        """
        context = self._context("DatabaseTables.GetTableForDisplayArray", key, group)
        require_name(key, "key", context)
        require_name(group, "group", context)
        requested = require_names(fields, "fields", context) if fields is not None else []
        _, version, included, rows, data = self._outputs(
            context, "DatabaseTables.GetTableForDisplayArray", 5,
            key, requested, group, 0, [], 0, [])
        columns = [str(c) for c in (included or ())]
        frame = _reshape(data, int(rows), columns, context)
        frame.attrs["table_version"] = int(version)
        frame.attrs["table_key"] = key
        return frame

    def set_table_for_editing(self, key: str, frame: pd.DataFrame) -> None:
        """Stage an edited table. Columns are field keys; values are sent as strings."""
        context = self._context("DatabaseTables.SetTableForEditingArray", key)
        require_name(key, "key", context)
        if not isinstance(frame, pd.DataFrame):
            raise ValidationError("frame", frame, "must be a pandas DataFrame", context)
        if frame.columns.empty:
            raise ValidationError("frame", frame, "must have at least one column", context)
        columns = [str(c) for c in frame.columns]
        data = frame.astype(object).where(frame.notna(), "").astype(str).to_numpy().ravel().tolist()
        self._execute(
            context, "DatabaseTables.SetTableForEditingArray",
            key, int(frame.attrs.get("table_version", 0)), columns, len(frame), data)

    def apply_edited_tables(self, fill_log: bool = True) -> TableEditResult:
        """Commit staged edits. Messages are returned; inspect `ok` before relying on the model."""
        context = self._context("DatabaseTables.ApplyEditedTables")
        fatal, errors, warnings, infos, log = self._outputs(
            context, "DatabaseTables.ApplyEditedTables", 5, fill_log, 0, 0, 0, 0, "")
        return TableEditResult(int(fatal), int(errors), int(warnings), int(infos), str(log or ""))

    def cancel_editing(self) -> None:
        self._execute(self._context("DatabaseTables.CancelTableEditing"), "DatabaseTables.CancelTableEditing")
