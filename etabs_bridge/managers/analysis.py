"""
Analysis control: model creation, run, case status and run flags.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from ..core.bulk import CancellationToken
from ..core.constants import DOF_COUNT
from ..core.data_models import CaseStatus
from ..core.errors import UnexpectedError, require_length, require_name
from ..core.mapper import RecordDecoder
from ..core.outcome import BulkOutcome
from .base import BaseManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaseStatusRecord:
    """Run status of one analysis case"""
    case_name: str
    status: CaseStatus

    @property
    def is_finished(self) -> bool:
        return self.status == CaseStatus.FINISHED


@dataclass(frozen=True)
class RunCaseFlag:
    """Whether a case is set to run"""
    case_name: str
    run: bool


_STATUS = RecordDecoder(
    CaseStatusRecord,
    field_map={"case_name": "names", "status": "statuses"},
    converters={"case_name": str, "status": lambda code: CaseStatus(int(code))},
)
_RUN_FLAGS = RecordDecoder(
    RunCaseFlag,
    field_map={"case_name": "names", "run": "flags"},
    converters={"case_name": str, "run": bool},
)


class AnalysisManager(BaseManager):
    """Analysis call-sites (Analyze)."""

    def create_analysis_model(self) -> None:
        self._execute(self._context("Analyze.CreateAnalysisModel"), "Analyze.CreateAnalysisModel")

    def run(self) -> None:
        """Run the analysis. The model must have been saved to a file."""
        logger.info("Running analysis")
        self._execute(self._context("Analyze.RunAnalysis"), "Analyze.RunAnalysis")
        logger.info("Analysis complete")

    def case_status(self) -> List[CaseStatusRecord]:
        return self._records(
            self._context("Analyze.GetCaseStatus"), "Analyze.GetCaseStatus", (0, [], []),
            ("count", "names", "statuses"), _STATUS)

    def all_cases_finished(self) -> bool:
        statuses = self.case_status()
        return bool(statuses) and all(record.is_finished for record in statuses)

    def run_flags(self) -> List[RunCaseFlag]:
        return self._records(
            self._context("Analyze.GetRunCaseFlag"), "Analyze.GetRunCaseFlag", (0, [], []),
            ("count", "names", "flags"), _RUN_FLAGS)

    def set_run_flag(self, case_name: str, run: bool) -> None:
        context = self._context("Analyze.SetRunCaseFlag", case_name)
        require_name(case_name, "case_name", context)
        self._execute(context, "Analyze.SetRunCaseFlag", case_name, bool(run), False)

    def set_run_flag_all(self, run: bool) -> None:
        self._execute(self._context("Analyze.SetRunCaseFlag", item_type="All"),
                      "Analyze.SetRunCaseFlag", "", bool(run), True)

    def set_run_flags_many(
        self,
        case_names: Sequence[str],
        run: bool,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[bool]:
        def apply(case_name: str) -> bool:
            self.set_run_flag(case_name, run)
            return bool(run)

        return self._coordinator.run(
            case_names, apply, operation_name="Analyze.SetRunCaseFlag", cancel_token=cancel_token)

    def active_dof(self) -> List[bool]:
        """Active degrees of freedom (UX, UY, UZ, RX, RY, RZ)."""
        context = self._context("Analyze.GetActiveDOF")
        values, = self._outputs(context, "Analyze.GetActiveDOF", 1, [False] * DOF_COUNT)
        values = [bool(v) for v in (values or ())]
        if len(values) != DOF_COUNT:
            raise UnexpectedError(f"Native DOF array has {len(values)} values", context=context)
        return values

    def set_active_dof(self, dof: Sequence[bool]) -> None:
        context = self._context("Analyze.SetActiveDOF")
        require_length(dof, "dof", DOF_COUNT, context)
        self._execute(context, "Analyze.SetActiveDOF", [bool(v) for v in dof])

    def delete_results(self, case_name: Optional[str] = None) -> None:
        """Delete results of one case, or of all cases when case_name is None."""
        if case_name is None:
            self._execute(self._context("Analyze.DeleteResults", item_type="All"),
                          "Analyze.DeleteResults", "", True)
            return
        context = self._context("Analyze.DeleteResults", case_name)
        require_name(case_name, "case_name", context)
        self._execute(context, "Analyze.DeleteResults", case_name, False)
