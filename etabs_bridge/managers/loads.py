"""
Load patterns, load cases and response combinations.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.bulk import CancellationToken
from ..core.data_models import ComboEntryType, ComboType, LoadCaseType, LoadPatternType
from ..core.errors import UnexpectedError, ValidationError, require_name, require_range
from ..core.mapper import ColumnDecoder, RecordDecoder
from ..core.outcome import BulkOutcome
from .base import BaseManager


@dataclass(frozen=True)
class ComboEntry:
    """One case or nested combination of a response combination"""
    name: str
    scale_factor: float = 1.0
    entry_type: ComboEntryType = ComboEntryType.LOAD_CASE


_COMBO_ENTRIES = RecordDecoder(
    ComboEntry,
    field_map={"entry_type": "entry_types", "name": "names", "scale_factor": "scale_factors"},
    converters={
        "entry_type": lambda code: ComboEntryType(int(code)),
        "name": str,
        "scale_factor": float,
    },
)


class LoadPatternManager(BaseManager):
    """Load patterns (LoadPatterns)."""

    def names(self) -> List[str]:
        return self._names(self._context("LoadPatterns.GetNameList"), "LoadPatterns.GetNameList")

    def add(
        self,
        name: str,
        pattern_type: LoadPatternType,
        self_weight_multiplier: float = 0.0,
        add_load_case: bool = True,
    ) -> None:
        """Add a load pattern, optionally with its linear static load case."""
        context = self._context("LoadPatterns.Add", name, pattern_type)
        require_name(name, context=context)
        if not isinstance(pattern_type, LoadPatternType):
            raise ValidationError("pattern_type", pattern_type, "must be a LoadPatternType", context)
        require_range(self_weight_multiplier, "self_weight_multiplier", 0.0, context=context)
        self._execute(
            context, "LoadPatterns.Add", name, pattern_type.value, self_weight_multiplier, add_load_case)

    def delete(self, name: str) -> None:
        context = self._context("LoadPatterns.Delete", name)
        require_name(name, context=context)
        self._execute(context, "LoadPatterns.Delete", name)

    def load_type(self, name: str) -> LoadPatternType:
        context = self._context("LoadPatterns.GetLoadType", name)
        require_name(name, context=context)
        code, = self._outputs(context, "LoadPatterns.GetLoadType", 1, name, 0)
        try:
            return LoadPatternType(int(code))
        except (TypeError, ValueError) as e:
            raise UnexpectedError(f"Unknown load pattern type code {code!r}", context=context) from e

    def self_weight_multiplier(self, name: str) -> float:
        context = self._context("LoadPatterns.GetSelfWTMultiplier", name)
        require_name(name, context=context)
        value, = self._outputs(context, "LoadPatterns.GetSelfWTMultiplier", 1, name, 0.0)
        return float(value)


class LoadCaseManager(BaseManager):
    """Load cases (LoadCases)."""

    def names(self, case_type: Optional[LoadCaseType] = None) -> List[str]:
        """Load case names, optionally filtered by case type."""
        context = self._context("LoadCases.GetNameList", item_type=case_type)
        if case_type is None:
            return self._names(context, "LoadCases.GetNameList")
        if not isinstance(case_type, LoadCaseType):
            raise ValidationError("case_type", case_type, "must be a LoadCaseType", context)
        return self._records(
            context, "LoadCases.GetNameList", (0, [], case_type.value),
            ("count", "names"), ColumnDecoder("names", str))

    def delete(self, name: str) -> None:
        context = self._context("LoadCases.Delete", name)
        require_name(name, context=context)
        self._execute(context, "LoadCases.Delete", name)


class ComboManager(BaseManager):
    """Response combinations (RespCombo)."""

    def names(self) -> List[str]:
        return self._names(self._context("RespCombo.GetNameList"), "RespCombo.GetNameList")

    def add(self, name: str, combo_type: ComboType = ComboType.LINEAR_ADDITIVE) -> None:
        context = self._context("RespCombo.Add", name, combo_type)
        require_name(name, context=context)
        if not isinstance(combo_type, ComboType):
            raise ValidationError("combo_type", combo_type, "must be a ComboType", context)
        self._execute(context, "RespCombo.Add", name, combo_type.value)

    def delete(self, name: str) -> None:
        context = self._context("RespCombo.Delete", name)
        require_name(name, context=context)
        self._execute(context, "RespCombo.Delete", name)

    def case_list(self, name: str) -> List[ComboEntry]:
        context = self._context("RespCombo.GetCaseList", name)
        require_name(name, context=context)
        return self._records(
            context, "RespCombo.GetCaseList", (name, 0, [], [], []),
            ("count", "entry_types", "names", "scale_factors"), _COMBO_ENTRIES)

    def set_case_list(
        self,
        name: str,
        entries: Sequence[ComboEntry],
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[float]:
        """Add or update the entries of a combination, one native call per entry.

        Returns:
            BulkOutcome keyed by entry name; succeeded values are the scale factors
        """
        context = self._context("RespCombo.SetCaseList", name)
        require_name(name, "combo", context)
        entries = list(entries or ())
        by_name = {}
        for index, entry in enumerate(entries):
            if not isinstance(entry, ComboEntry):
                raise ValidationError(f"entries[{index}]", entry, "must be a ComboEntry", context)
            require_range(entry.scale_factor, f"entries[{index}].scale_factor", context=context)
            if entry.entry_type == ComboEntryType.LOAD_COMBO and entry.name == name:
                raise ValidationError(f"entries[{index}]", entry, "a combination cannot include itself", context)
            by_name.setdefault(entry.name, entry)

        def apply(entry_name: str) -> float:
            entry = by_name[entry_name]
            self._execute(
                self._context("RespCombo.SetCaseList", (name, entry_name), entry.entry_type),
                "RespCombo.SetCaseList", name, entry.entry_type.value, entry_name, entry.scale_factor)
            return entry.scale_factor

        return self._coordinator.run(
            [entry.name for entry in entries], apply,
            operation_name="RespCombo.SetCaseList", cancel_token=cancel_token)
