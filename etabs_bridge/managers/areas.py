"""
Area objects: connectivity, properties and uniform loads.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.bulk import CancellationToken
from ..core.data_models import ItemType
from ..core.errors import (
    UnexpectedError,
    ValidationError,
    require_name,
    require_range,
    require_same_length,
)
from ..core.outcome import BulkOutcome
from .base import BaseManager


@dataclass(frozen=True)
class AreaPoints:
    """Corner points of an area object, in order"""
    name: str
    points: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.points)


class AreaManager(BaseManager):
    """Area object call-sites (AreaObj)."""

    def names(self) -> List[str]:
        return self._names(self._context("AreaObj.GetNameList"), "AreaObj.GetNameList")

    def points(self, name: str) -> AreaPoints:
        context = self._context("AreaObj.GetPoints", name)
        require_name(name, context=context)
        count, points = self._outputs(context, "AreaObj.GetPoints", 2, name, 0, [])
        points = tuple(str(p) for p in (points or ()))
        if len(points) < int(count):
            raise UnexpectedError(
                f"Native output 'points' has {len(points)} values but {count} were declared",
                context=context)
        return AreaPoints(name, points[:int(count)])

    def property(self, name: str) -> str:
        context = self._context("AreaObj.GetProperty", name)
        require_name(name, context=context)
        prop, = self._outputs(context, "AreaObj.GetProperty", 1, name, "")
        return str(prop)

    def set_property(self, name: str, prop: str, item_type: ItemType = ItemType.OBJECTS) -> None:
        context = self._context("AreaObj.SetProperty", name, item_type)
        require_name(name, context=context)
        require_name(prop, "prop", context)
        self._execute(context, "AreaObj.SetProperty", name, prop, item_type.value)

    def set_property_many(
        self,
        names: Sequence[str],
        prop: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[bool]:
        """Assign one property to many areas, collecting per-area failures."""
        require_name(prop, "prop", self._context("AreaObj.SetProperty"))

        def assign(name: str) -> bool:
            self.set_property(name, prop)
            return True

        return self._coordinator.run(
            names, assign, operation_name="AreaObj.SetProperty", cancel_token=cancel_token)

    def add_by_coord(
        self,
        x: Sequence[float],
        y: Sequence[float],
        z: Sequence[float],
        prop: str = "Default",
        user_name: str = "",
        csys: str = "Global",
    ) -> str:
        """Add an area from corner coordinates; returns the assigned name."""
        context = self._context("AreaObj.AddByCoord", user_name or ())
        count = require_same_length(context, x=x, y=y, z=z)
        if count < 3:
            raise ValidationError("x", x, "an area needs at least 3 corner points", context)
        for axis, values in (("x", x), ("y", y), ("z", z)):
            for index, value in enumerate(values):
                require_range(value, f"{axis}[{index}]", context=context)
        outputs = self._execute(
            context, "AreaObj.AddByCoord", count, list(x), list(y), list(z),
            "", prop, user_name, csys)
        # ByRef outputs: X, Y, Z, Name
        return str(outputs[3]) if len(outputs) > 3 else user_name

    def set_uniform_load(
        self,
        name: str,
        load_pattern: str,
        value: float,
        direction: int = 10,
        replace: bool = True,
        csys: str = "Global",
        item_type: ItemType = ItemType.OBJECTS,
    ) -> None:
        """Assign a uniform load (force per area) to an area; direction 10 is gravity."""
        context = self._context("AreaObj.SetLoadUniform", name, item_type)
        require_name(name, context=context)
        require_name(load_pattern, "load_pattern", context)
        require_range(value, "value", context=context)
        require_range(direction, "direction", 1, 11, context)
        self._execute(
            context, "AreaObj.SetLoadUniform", name, load_pattern, value, direction,
            replace, csys, item_type.value)
