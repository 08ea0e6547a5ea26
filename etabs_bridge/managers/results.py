"""
Analysis results.

Every results call returns parallel arrays, one row per (object, element,
load case, step). Results are reported for the cases and combinations
selected for output (see select_for_output).

Usage:
    results = handle.results
    results.select_for_output(cases=["DEAD"])
    frame = records_to_frame(results.joint_displacements("1"))
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.bulk import CancellationToken
from ..core.constants import ALL_GROUP
from ..core.data_models import ItemTypeElm
from ..core.errors import ValidationError, require_name, require_names
from ..core.mapper import RecordDecoder
from ..core.outcome import BulkOutcome
from .base import BaseManager, output_fields, placeholders


@dataclass(frozen=True)
class JointDisplacement:
    """Joint displacement in present units"""
    object_name: str
    element_name: str
    load_case: str
    step_type: str
    step_num: float
    u1: float
    u2: float
    u3: float
    r1: float
    r2: float
    r3: float


@dataclass(frozen=True)
class JointReaction:
    """Joint reaction in present units"""
    object_name: str
    element_name: str
    load_case: str
    step_type: str
    step_num: float
    f1: float
    f2: float
    f3: float
    m1: float
    m2: float
    m3: float


@dataclass(frozen=True)
class BaseReaction:
    """Structure base reaction for one case / step"""
    load_case: str
    step_type: str
    step_num: float
    fx: float
    fy: float
    fz: float
    mx: float
    my: float
    mz: float


@dataclass
class BaseReactions:
    """Base reactions and the global point the moments are reported about"""
    reactions: List[BaseReaction] = field(default_factory=list)
    reference_point: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __len__(self) -> int:
        return len(self.reactions)


@dataclass(frozen=True)
class FrameForce:
    """Frame internal forces at one output station"""
    object_name: str
    object_station: float
    element_name: str
    element_station: float
    load_case: str
    step_type: str
    step_num: float
    p: float
    v2: float
    v3: float
    t: float
    m2: float
    m3: float


@dataclass(frozen=True)
class StoryDrift:
    """Story drift in one direction"""
    story: str
    load_case: str
    step_type: str
    step_num: float
    direction: str
    drift: float
    label: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ModalPeriod:
    """Period and frequencies of one mode"""
    load_case: str
    step_type: str
    step_num: float
    period: float
    frequency: float
    circular_frequency: float
    eigenvalue: float


@dataclass(frozen=True)
class ModalMassRatio:
    """Modal participating mass ratios of one mode"""
    load_case: str
    step_type: str
    step_num: float
    period: float
    ux: float
    uy: float
    uz: float
    sum_ux: float
    sum_uy: float
    sum_uz: float
    rx: float
    ry: float
    rz: float
    sum_rx: float
    sum_ry: float
    sum_rz: float


_JOINT_DISPLACEMENT = RecordDecoder(JointDisplacement)
_JOINT_REACTION = RecordDecoder(JointReaction)
_BASE_REACTION = RecordDecoder(BaseReaction)
_FRAME_FORCE = RecordDecoder(FrameForce)
_STORY_DRIFT = RecordDecoder(StoryDrift)
_MODAL_PERIOD = RecordDecoder(ModalPeriod)
_MODAL_MASS = RecordDecoder(ModalMassRatio)


class ResultsManager(BaseManager):
    """Analysis results call-sites (Results, Results.Setup)."""

    # ------------------------------------------------------------------
    # Output selection
    # ------------------------------------------------------------------

    def deselect_all(self) -> None:
        self._execute(
            self._context("Results.Setup.DeselectAllCasesAndCombosForOutput"),
            "Results.Setup.DeselectAllCasesAndCombosForOutput")

    def select_case(self, name: str, selected: bool = True) -> None:
        context = self._context("Results.Setup.SetCaseSelectedForOutput", name)
        require_name(name, context=context)
        self._execute(context, "Results.Setup.SetCaseSelectedForOutput", name, selected)

    def select_combo(self, name: str, selected: bool = True) -> None:
        context = self._context("Results.Setup.SetComboSelectedForOutput", name)
        require_name(name, context=context)
        self._execute(context, "Results.Setup.SetComboSelectedForOutput", name, selected)

    def select_for_output(
        self,
        cases: Sequence[str] = (),
        combos: Sequence[str] = (),
        deselect_others: bool = True,
    ) -> None:
        """Select cases and combinations for output, clearing the previous selection."""
        context = self._context("Results.Setup", [*cases, *combos])
        if not cases and not combos:
            raise ValidationError("cases", cases, "select at least one case or combination", context)
        cases = require_names(cases, "cases", context) if cases else []
        combos = require_names(combos, "combos", context) if combos else []
        if deselect_others:
            self.deselect_all()
        for name in cases:
            self.select_case(name)
        for name in combos:
            self.select_combo(name)

    # ------------------------------------------------------------------
    # Joint results
    # ------------------------------------------------------------------

    def joint_displacements(
        self,
        name: str,
        item_type: ItemTypeElm = ItemTypeElm.OBJECT_ELM,
    ) -> List[JointDisplacement]:
        context = self._context("Results.JointDispl", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "Results.JointDispl", (name, item_type.value, 0, *placeholders(JointDisplacement)),
            output_fields(JointDisplacement), _JOINT_DISPLACEMENT)

    def joint_reactions(
        self,
        name: str,
        item_type: ItemTypeElm = ItemTypeElm.OBJECT_ELM,
    ) -> List[JointReaction]:
        context = self._context("Results.JointReact", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "Results.JointReact", (name, item_type.value, 0, *placeholders(JointReaction)),
            output_fields(JointReaction), _JOINT_REACTION)

    def joint_reactions_many(
        self,
        names: Sequence[str],
        group: str = ALL_GROUP,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[List[JointReaction]]:
        """Reactions of many joints.

        One JointReact call over `group` (all objects by default) covers the
        requested joints; joints missing from it are read one by one.
        """
        require_name(group, "group", self._context("Results.JointReact", group))

        def bulk(requested: List[str]) -> Dict[str, List[JointReaction]]:
            wanted = set(requested)
            found: Dict[str, List[JointReaction]] = {}
            for record in self.joint_reactions(group, ItemTypeElm.GROUP_ELM):
                if record.object_name in wanted:
                    found.setdefault(record.object_name, []).append(record)
            return found

        return self._coordinator.run(
            names, self.joint_reactions,
            operation_name="Results.JointReact",
            bulk_operation=bulk,
            cancel_token=cancel_token,
            item_type=ItemTypeElm.GROUP_ELM.name,
        )

    def base_reactions(self) -> BaseReactions:
        context = self._context("Results.BaseReact")
        outcome = self._fetch(
            context, "Results.BaseReact", (0, *placeholders(BaseReaction), 0.0, 0.0, 0.0),
            output_fields(BaseReaction) + ("gx", "gy", "gz"), _BASE_REACTION,
            scalar_fields=("gx", "gy", "gz"))
        reactions = self._translator.unwrap(outcome)
        point = tuple(float(outcome.scalars.get(axis) or 0.0) for axis in ("gx", "gy", "gz"))
        return BaseReactions(reactions, point)

    # ------------------------------------------------------------------
    # Frame, story and modal results
    # ------------------------------------------------------------------

    def frame_forces(
        self,
        name: str,
        item_type: ItemTypeElm = ItemTypeElm.OBJECT_ELM,
    ) -> List[FrameForce]:
        context = self._context("Results.FrameForce", name, item_type)
        require_name(name, context=context)
        return self._records(
            context, "Results.FrameForce", (name, item_type.value, 0, *placeholders(FrameForce)),
            output_fields(FrameForce), _FRAME_FORCE)

    def story_drifts(self) -> List[StoryDrift]:
        return self._records(
            self._context("Results.StoryDrifts"), "Results.StoryDrifts",
            (0, *placeholders(StoryDrift)), output_fields(StoryDrift), _STORY_DRIFT)

    def modal_periods(self) -> List[ModalPeriod]:
        return self._records(
            self._context("Results.ModalPeriod"), "Results.ModalPeriod",
            (0, *placeholders(ModalPeriod)), output_fields(ModalPeriod), _MODAL_PERIOD)

    def modal_mass_ratios(self) -> List[ModalMassRatio]:
        return self._records(
            self._context("Results.ModalParticipatingMassRatios"), "Results.ModalParticipatingMassRatios",
            (0, *placeholders(ModalMassRatio)), output_fields(ModalMassRatio), _MODAL_MASS)
