"""
Groups and the interactive selection.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.bulk import CancellationToken
from ..core.data_models import ObjectType
from ..core.errors import ValidationError, require_name
from ..core.mapper import RecordDecoder
from ..core.outcome import BulkOutcome
from .base import BaseManager


@dataclass(frozen=True)
class ObjectAssignment:
    """An object referenced by a group or the selection"""
    object_type: ObjectType
    name: str


_ASSIGNMENTS = RecordDecoder(
    ObjectAssignment,
    field_map={"object_type": "object_types", "name": "object_names"},
    converters={"object_type": lambda code: ObjectType(int(code)), "name": str},
)
_ASSIGNMENT_FIELDS = ("count", "object_types", "object_names")

# Object families that support SetGroupAssign
_GROUP_ASSIGN_PATHS = {
    ObjectType.POINT: "PointObj.SetGroupAssign",
    ObjectType.FRAME: "FrameObj.SetGroupAssign",
    ObjectType.AREA: "AreaObj.SetGroupAssign",
}


class GroupManager(BaseManager):
    """Group definitions and assignments (GroupDef)."""

    def names(self) -> List[str]:
        return self._names(self._context("GroupDef.GetNameList"), "GroupDef.GetNameList")

    def define(self, name: str) -> None:
        """Add a group, or reinitialize an existing one."""
        context = self._context("GroupDef.SetGroup", name)
        require_name(name, context=context)
        self._execute(context, "GroupDef.SetGroup", name)

    def delete(self, name: str) -> None:
        context = self._context("GroupDef.Delete", name)
        require_name(name, context=context)
        self._execute(context, "GroupDef.Delete", name)

    def assignments(self, name: str) -> List[ObjectAssignment]:
        context = self._context("GroupDef.GetAssignments", name)
        require_name(name, context=context)
        return self._records(
            context, "GroupDef.GetAssignments", (name, 0, [], []),
            _ASSIGNMENT_FIELDS, _ASSIGNMENTS)

    def assign_many(
        self,
        group: str,
        object_type: ObjectType,
        names: Sequence[str],
        remove: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulkOutcome[bool]:
        """Add (or remove) many objects of one family to a group."""
        context = self._context("SetGroupAssign", group, object_type)
        require_name(group, "group", context)
        path = _GROUP_ASSIGN_PATHS.get(object_type)
        if path is None:
            raise ValidationError(
                "object_type", object_type, "must be POINT, FRAME or AREA", context)

        def assign(name: str) -> bool:
            self._execute(self._context(path, name), path, name, group, remove, 0)
            return True

        return self._coordinator.run(
            names, assign, operation_name=path, cancel_token=cancel_token,
            item_type=object_type.name)


class SelectionManager(BaseManager):
    """Interactive selection (SelectObj)."""

    def selected(self) -> List[ObjectAssignment]:
        return self._records(
            self._context("SelectObj.GetSelected"), "SelectObj.GetSelected", (0, [], []),
            _ASSIGNMENT_FIELDS, _ASSIGNMENTS)

    def clear(self) -> None:
        self._execute(self._context("SelectObj.ClearSelection"), "SelectObj.ClearSelection")

    def select_group(self, name: str, deselect: bool = False) -> None:
        context = self._context("SelectObj.Group", name)
        require_name(name, context=context)
        self._execute(context, "SelectObj.Group", name, deselect)

    def select_all(self, deselect: bool = False) -> None:
        self._execute(self._context("SelectObj.All"), "SelectObj.All", deselect)
