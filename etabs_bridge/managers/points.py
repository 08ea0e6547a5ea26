"""
Point objects: names, coordinates, restraints.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.bulk import CancellationToken
from ..core.constants import COUNT_FIELD, DOF_COUNT
from ..core.data_models import ItemType
from ..core.errors import UnexpectedError, require_length, require_name, require_range
from ..core.mapper import RecordDecoder
from ..core.outcome import BulkOutcome
from .base import BaseManager


@dataclass(frozen=True)
class PointCoordinates:
    """Cartesian coordinates of a point object in present units"""
    name: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class PointRestraint:
    """Restrained degrees of freedom of a point (True = restrained)"""
    ux: bool = False
    uy: bool = False
    uz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False

    @classmethod
    def fixed(cls) -> "PointRestraint":
        return cls(True, True, True, True, True, True)

    @classmethod
    def pinned(cls) -> "PointRestraint":
        return cls(True, True, True, False, False, False)

    @classmethod
    def from_sequence(cls, values: Sequence[bool]) -> "PointRestraint":
        require_length(values, "restraint", DOF_COUNT)
        return cls(*(bool(v) for v in values))

    def to_list(self) -> List[bool]:
        return [self.ux, self.uy, self.uz, self.rx, self.ry, self.rz]

    @property
    def is_free(self) -> bool:
        return not any(self.to_list())


_COORDINATES = RecordDecoder(PointCoordinates)
_ALL_POINTS_FIELDS = (COUNT_FIELD, "name", "x", "y", "z")


class PointManager(BaseManager):
    """Point object call-sites (PointObj)."""

    def names(self) -> List[str]:
        return self._names(self._context("PointObj.GetNameList"), "PointObj.GetNameList")

    def names_on_story(self, story: str) -> List[str]:
        context = self._context("PointObj.GetNameListOnStory", story)
        require_name(story, "story", context)
        return self._names(context, "PointObj.GetNameListOnStory", story)

    def all_points(self, csys: str = "Global") -> List[PointCoordinates]:
        """Names and coordinates of every point in one native call."""
        context = self._context("PointObj.GetAllPoints")
        return self._records(
            context, "PointObj.GetAllPoints", (0, [], [], [], [], csys),
            _ALL_POINTS_FIELDS, _COORDINATES)

    def coordinates(self, name: str, csys: str = "Global") -> PointCoordinates:
        context = self._context("PointObj.GetCoordCartesian", name)
        require_name(name, context=context)
        x, y, z = self._outputs(context, "PointObj.GetCoordCartesian", 3, name, 0.0, 0.0, 0.0, csys)
        return PointCoordinates(name, float(x), float(y), float(z))

    def coordinates_many(
        self,
        names: Sequence[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[PointCoordinates]:
        """Coordinates of many points; one GetAllPoints call, per-point calls for the rest."""

        def bulk(requested: List[str]) -> Dict[str, PointCoordinates]:
            wanted = set(requested)
            return {p.name: p for p in self.all_points() if p.name in wanted}

        return self._coordinator.run(
            names, self.coordinates,
            operation_name="PointObj.GetCoordCartesian",
            bulk_operation=bulk,
            cancel_token=cancel_token,
        )

    def restraints(self, name: str) -> PointRestraint:
        context = self._context("PointObj.GetRestraint", name)
        require_name(name, context=context)
        values, = self._outputs(context, "PointObj.GetRestraint", 1, name, [False] * DOF_COUNT)
        values = list(values or [])
        if len(values) != DOF_COUNT:
            raise UnexpectedError(f"Native restraint has {len(values)} values, expected {DOF_COUNT}", context=context)
        return PointRestraint.from_sequence(values)

    def set_restraints(
        self,
        name: str,
        restraint: PointRestraint,
        item_type: ItemType = ItemType.OBJECTS,
    ) -> None:
        context = self._context("PointObj.SetRestraint", name, item_type)
        require_name(name, context=context)
        self._execute(context, "PointObj.SetRestraint", name, restraint.to_list(), item_type.value)

    def set_restraints_many(
        self,
        names: Sequence[str],
        restraint: PointRestraint,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[bool]:
        """Apply one restraint to many points, collecting per-point failures."""

        def apply(name: str) -> bool:
            self.set_restraints(name, restraint)
            return True

        return self._coordinator.run(
            names, apply, operation_name="PointObj.SetRestraint", cancel_token=cancel_token)

    def add_cartesian(
        self,
        x: float,
        y: float,
        z: float,
        user_name: str = "",
        csys: str = "Global",
    ) -> str:
        """Add a point object; returns the name ETABS assigned."""
        context = self._context("PointObj.AddCartesian", user_name or ())
        for parameter, value in (("x", x), ("y", y), ("z", z)):
            require_range(value, parameter, context=context)
        outputs = self._execute(context, "PointObj.AddCartesian", x, y, z, "", user_name, csys)
        return str(outputs[0]) if outputs else user_name

    def count(self) -> int:
        return int(self._query(self._context("PointObj.Count"), "PointObj.Count"))
