"""
Steel frame and concrete frame design.
"""

from dataclasses import dataclass
from typing import List, Tuple
import logging

from ..core.data_models import ItemType
from ..core.errors import UnexpectedError, require_name
from ..core.mapper import RecordDecoder
from .base import BaseManager, output_fields, placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SteelDesignSummary:
    """Governing steel design ratio of one frame"""
    frame_name: str
    ratio: float
    ratio_type: int        # 1 PMM, 2 major shear, 3 minor shear, 4 major beam-column capacity, ...
    location: float
    combo_name: str
    error_summary: str
    warning_summary: str

    @property
    def passed(self) -> bool:
        return self.ratio <= 1.0 and not self.error_summary


@dataclass(frozen=True)
class ConcreteBeamSummary:
    """Concrete beam design: required reinforcement areas at one station"""
    frame_name: str
    location: float
    top_combo: str
    top_area: float
    bottom_combo: str
    bottom_area: float
    shear_combo: str
    shear_area: float
    torsion_long_combo: str
    torsion_long_area: float
    torsion_trans_combo: str
    torsion_trans_area: float
    error_summary: str
    warning_summary: str


@dataclass(frozen=True)
class ConcreteColumnSummary:
    """Concrete column design at one station"""
    frame_name: str
    design_option: int     # 1 = design, 2 = check
    location: float
    pmm_combo: str
    pmm_area: float
    pmm_ratio: float
    shear_major_combo: str
    shear_major_area: float
    shear_minor_combo: str
    shear_minor_area: float
    error_summary: str
    warning_summary: str


@dataclass(frozen=True)
class VerifyPassedResult:
    """Frames that failed or were not checked by the last design run"""
    not_passed_or_unchecked: int
    not_passed: int
    unchecked: int
    frame_names: Tuple[str, ...] = ()

    @property
    def all_passed(self) -> bool:
        return self.not_passed_or_unchecked == 0


_STEEL_SUMMARY = RecordDecoder(SteelDesignSummary, converters={"ratio": float, "ratio_type": int})
_BEAM_SUMMARY = RecordDecoder(ConcreteBeamSummary)
_COLUMN_SUMMARY = RecordDecoder(ConcreteColumnSummary, converters={"design_option": int})


class _DesignManager(BaseManager):
    """Code selection, design run and availability, shared by both materials."""

    _prefix = ""

    def code(self) -> str:
        code, = self._outputs(self._context(f"{self._prefix}.GetCode"), f"{self._prefix}.GetCode", 1, "")
        return str(code)

    def set_code(self, code: str) -> None:
        context = self._context(f"{self._prefix}.SetCode", code)
        require_name(code, "code", context)
        self._execute(context, f"{self._prefix}.SetCode", code)

    def start_design(self) -> None:
        """Run the design. Analysis results must be available."""
        logger.info(f"Starting {self._prefix} run")
        self._execute(self._context(f"{self._prefix}.StartDesign"), f"{self._prefix}.StartDesign")

    def results_available(self) -> bool:
        return bool(self._query(
            self._context(f"{self._prefix}.GetResultsAvailable"), f"{self._prefix}.GetResultsAvailable"))


class SteelDesignManager(_DesignManager):
    """Steel frame design (DesignSteel)."""

    _prefix = "DesignSteel"

    def summary_results(self, name: str, item_type: ItemType = ItemType.OBJECTS) -> List[SteelDesignSummary]:
        context = self._context("DesignSteel.GetSummaryResults", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "DesignSteel.GetSummaryResults",
            (name, 0, *placeholders(SteelDesignSummary), item_type.value),
            output_fields(SteelDesignSummary), _STEEL_SUMMARY)

    def verify_passed(self) -> VerifyPassedResult:
        context = self._context("DesignSteel.VerifyPassed")
        total, not_passed, unchecked, names = self._outputs(
            context, "DesignSteel.VerifyPassed", 4, 0, 0, 0, [])
        names = tuple(str(n) for n in (names or ()))
        if len(names) < int(total):
            raise UnexpectedError(
                f"Native output 'names' has {len(names)} values but {total} were declared",
                context=context)
        return VerifyPassedResult(int(total), int(not_passed), int(unchecked), names[:int(total)])


class ConcreteDesignManager(_DesignManager):
    """Concrete frame design (DesignConcrete)."""

    _prefix = "DesignConcrete"

    def beam_summary(self, name: str, item_type: ItemType = ItemType.OBJECTS) -> List[ConcreteBeamSummary]:
        context = self._context("DesignConcrete.GetSummaryResultsBeam", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "DesignConcrete.GetSummaryResultsBeam",
            (name, 0, *placeholders(ConcreteBeamSummary), item_type.value),
            output_fields(ConcreteBeamSummary), _BEAM_SUMMARY)

    def column_summary(self, name: str, item_type: ItemType = ItemType.OBJECTS) -> List[ConcreteColumnSummary]:
        context = self._context("DesignConcrete.GetSummaryResultsColumn", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "DesignConcrete.GetSummaryResultsColumn",
            (name, 0, *placeholders(ConcreteColumnSummary), item_type.value),
            output_fields(ConcreteColumnSummary), _COLUMN_SUMMARY)
