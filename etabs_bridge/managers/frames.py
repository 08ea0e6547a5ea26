"""
Frame objects: connectivity, sections, releases and distributed loads.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.bulk import CancellationToken
from ..core.constants import DOF_COUNT
from ..core.data_models import ItemType
from ..core.errors import (
    UnexpectedError,
    ValidationError,
    require_length,
    require_name,
    require_range,
)
from ..core.outcome import BulkOutcome
from .base import BaseManager


@dataclass(frozen=True)
class FramePoints:
    """End points of a frame object"""
    name: str
    point_i: str
    point_j: str


@dataclass(frozen=True)
class FrameSection:
    """Section assignment of a frame object"""
    name: str
    section: str
    auto_select_list: str = ""   # auto select list name, empty if none


def _free() -> List[bool]:
    return [False] * DOF_COUNT


def _zero() -> List[float]:
    return [0.0] * DOF_COUNT


@dataclass
class FrameReleases:
    """End releases (P, V2, V3, T, M2, M3) and partial fixity spring values"""
    i_end: List[bool] = field(default_factory=_free)
    j_end: List[bool] = field(default_factory=_free)
    start_values: List[float] = field(default_factory=_zero)
    end_values: List[float] = field(default_factory=_zero)

    @classmethod
    def pinned_moments(cls) -> "FrameReleases":
        """M2 and M3 released at both ends"""
        ends = [False, False, False, False, True, True]
        return cls(i_end=list(ends), j_end=list(ends))

    def validate(self) -> None:
        for parameter in ("i_end", "j_end", "start_values", "end_values"):
            require_length(getattr(self, parameter), parameter, DOF_COUNT)
        for index in range(DOF_COUNT):
            # P or T released at both ends is unstable
            if self.i_end[index] and self.j_end[index] and index in (0, 3):
                raise ValidationError(
                    "releases", self, "axial and torsion cannot be released at both ends")


class FrameManager(BaseManager):
    """Frame object call-sites (FrameObj)."""

    def names(self) -> List[str]:
        return self._names(self._context("FrameObj.GetNameList"), "FrameObj.GetNameList")

    def points(self, name: str) -> FramePoints:
        context = self._context("FrameObj.GetPoints", name)
        require_name(name, context=context)
        point_i, point_j = self._outputs(context, "FrameObj.GetPoints", 2, name, "", "")
        return FramePoints(name, str(point_i), str(point_j))

    def section(self, name: str) -> FrameSection:
        context = self._context("FrameObj.GetSection", name)
        require_name(name, context=context)
        section, auto_select = self._outputs(context, "FrameObj.GetSection", 2, name, "", "")
        return FrameSection(name, str(section), str(auto_select or ""))

    def set_section(self, name: str, section: str, item_type: ItemType = ItemType.OBJECTS) -> None:
        context = self._context("FrameObj.SetSection", name, item_type)
        require_name(name, context=context)
        require_name(section, "section", context)
        self._execute(context, "FrameObj.SetSection", name, section, item_type.value, 0.0, 0.0)

    def set_section_many(
        self,
        names: Sequence[str],
        section: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[bool]:
        """Assign one section to many frames, collecting per-frame failures."""
        require_name(section, "section", self._context("FrameObj.SetSection"))

        def assign(name: str) -> bool:
            self.set_section(name, section)
            return True

        return self._coordinator.run(
            names, assign, operation_name="FrameObj.SetSection", cancel_token=cancel_token)

    def add_by_point(self, point_i: str, point_j: str, section: str = "Default", user_name: str = "") -> str:
        """Add a frame between two existing points; returns the assigned name."""
        context = self._context("FrameObj.AddByPoint", (point_i, point_j))
        require_name(point_i, "point_i", context)
        require_name(point_j, "point_j", context)
        if point_i == point_j:
            raise ValidationError("point_j", point_j, "must differ from point_i", context)
        outputs = self._execute(context, "FrameObj.AddByPoint", point_i, point_j, "", section, user_name)
        return str(outputs[0]) if outputs else user_name

    def add_by_coord(
        self,
        start: Sequence[float],
        end: Sequence[float],
        section: str = "Default",
        user_name: str = "",
        csys: str = "Global",
    ) -> str:
        """Add a frame between two (x, y, z) coordinates; returns the assigned name."""
        context = self._context("FrameObj.AddByCoord", user_name or ())
        require_length(start, "start", 3, context)
        require_length(end, "end", 3, context)
        for index, value in enumerate((*start, *end)):
            require_range(value, f"coordinates[{index}]", context=context)
        if tuple(start) == tuple(end):
            raise ValidationError("end", end, "must differ from start", context)
        outputs = self._execute(
            context, "FrameObj.AddByCoord", *start, *end, "", section, user_name, csys)
        return str(outputs[0]) if outputs else user_name

    def releases(self, name: str) -> FrameReleases:
        context = self._context("FrameObj.GetReleases", name)
        require_name(name, context=context)
        outputs = self._outputs(
            context, "FrameObj.GetReleases", 4, name, _free(), _free(), _zero(), _zero())
        arrays = [list(values or ()) for values in outputs]
        if any(len(values) != DOF_COUNT for values in arrays):
            raise UnexpectedError("Native releases do not have six values per end", context=context)
        i_end, j_end, start_values, end_values = arrays
        return FrameReleases(
            [bool(v) for v in i_end], [bool(v) for v in j_end],
            [float(v) for v in start_values], [float(v) for v in end_values])

    def set_releases(self, name: str, releases: FrameReleases, item_type: ItemType = ItemType.OBJECTS) -> None:
        context = self._context("FrameObj.SetReleases", name, item_type)
        require_name(name, context=context)
        releases.validate()
        self._execute(
            context, "FrameObj.SetReleases", name,
            list(releases.i_end), list(releases.j_end),
            list(releases.start_values), list(releases.end_values), item_type.value)

    def set_distributed_load(
        self,
        name: str,
        load_pattern: str,
        direction: int,
        value_start: float,
        value_end: Optional[float] = None,
        dist_start: float = 0.0,
        dist_end: float = 1.0,
        relative: bool = True,
        load_type: int = 1,
        csys: str = "Global",
        replace: bool = True,
        item_type: ItemType = ItemType.OBJECTS,
    ) -> None:
        """Assign a (trapezoidal) distributed load to a frame.

        Args:
            name: Frame, group or ignored name depending on item_type
            load_pattern: Load pattern name
            direction: Load direction code (1-3 local, 4-6 global X/Y/Z, 10 gravity, 11 projected gravity)
            value_start: Load at dist_start
            value_end: Load at dist_end (uniform when omitted)
            dist_start: Start distance from the I-end
            dist_end: End distance from the I-end
            relative: Distances are relative (0-1) rather than absolute
            load_type: 1 = force per length, 2 = moment per length
        """
        context = self._context("FrameObj.SetLoadDistributed", name, item_type)
        require_name(name, context=context)
        require_name(load_pattern, "load_pattern", context)
        require_range(direction, "direction", 1, 11, context)
        require_range(load_type, "load_type", 1, 2, context)
        value_end = value_start if value_end is None else value_end
        require_range(value_start, "value_start", context=context)
        require_range(value_end, "value_end", context=context)
        if relative:
            require_range(dist_start, "dist_start", 0.0, 1.0, context)
            require_range(dist_end, "dist_end", 0.0, 1.0, context)
        else:
            require_range(dist_start, "dist_start", 0.0, context=context)
            require_range(dist_end, "dist_end", 0.0, context=context)
        if dist_end < dist_start:
            raise ValidationError("dist_end", dist_end, "must not be smaller than dist_start", context)
        self._execute(
            context, "FrameObj.SetLoadDistributed", name, load_pattern, load_type, direction,
            dist_start, dist_end, value_start, value_end, csys, relative, replace, item_type.value)
