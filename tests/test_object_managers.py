"""
Unit tests for the model object managers: points, frames, areas, stories,
groups and selection.
"""

import pytest

from etabs_bridge.core.bulk import CancellationToken
from etabs_bridge.core.data_models import ItemType, ObjectType
from etabs_bridge.core.errors import NativeCallError, UnexpectedError, ValidationError
from etabs_bridge.core.observers import EventKind
from etabs_bridge.managers.frames import FrameReleases
from etabs_bridge.managers.groups import ObjectAssignment
from etabs_bridge.managers.points import PointCoordinates, PointRestraint
from etabs_bridge.managers.stories import StoryDefinition
from tests.fixtures.com_fakes import FakeComError


class TestPointManager:
    """Tests for PointManager."""

    def test_names(self, handle, sap_model):
        sap_model.respond("PointObj.GetNameList", (0, 3, ("1", "2", "3")))
        assert handle.points.names() == ["1", "2", "3"]
        assert sap_model.calls_to("PointObj.GetNameList") == [(0, [])]

    def test_names_failure(self, handle, sap_model, recorder):
        sap_model.respond("PointObj.GetNameList", (1, 0, ()))
        with pytest.raises(NativeCallError) as info:
            handle.points.names()
        assert info.value.return_code == 1
        assert recorder.kinds()[-1] == EventKind.FAILED

    def test_names_on_story(self, handle, sap_model):
        sap_model.respond("PointObj.GetNameListOnStory", (0, 1, ("7",)))
        assert handle.points.names_on_story("Story1") == ["7"]
        assert sap_model.calls_to("PointObj.GetNameListOnStory") == [("Story1", 0, [])]

    def test_coordinates(self, handle, sap_model):
        sap_model.respond("PointObj.GetCoordCartesian", (0, 1.0, 2.0, 3.5))
        assert handle.points.coordinates("1") == PointCoordinates("1", 1.0, 2.0, 3.5)

    def test_invalid_name_never_reaches_native(self, handle, sap_model):
        with pytest.raises(ValidationError):
            handle.points.coordinates("")
        assert sap_model.calls == []

    def test_coordinates_many_uses_bulk_call(self, handle, sap_model):
        """Test that points found by GetAllPoints are not queried one by one."""
        sap_model.respond("PointObj.GetAllPoints", (
            0, 2, ("1", "2"), (0.0, 5.0), (0.0, 0.0), (0.0, 3.0)))
        sap_model.respond("PointObj.GetCoordCartesian", (1, 0.0, 0.0, 0.0))
        outcome = handle.points.coordinates_many(["1", "2", "99"])
        assert outcome.succeeded["2"] == PointCoordinates("2", 5.0, 0.0, 3.0)
        assert list(outcome.failed) == ["99"]
        assert [args[0] for args in sap_model.calls_to("PointObj.GetCoordCartesian")] == ["99"]
        assert outcome.summary() == "2/3 succeeded, 1 failed"

    def test_all_points_failure_message(self, handle, sap_model):
        sap_model.respond("PointObj.GetAllPoints", (1, 0, (), (), (), ()))
        with pytest.raises(NativeCallError) as info:
            handle.points.all_points("Local")
        assert "PointObj.GetAllPoints" in str(info.value)
        assert "item type" not in str(info.value)
        assert sap_model.calls_to("PointObj.GetAllPoints")[0][-1] == "Local"

    def test_coordinates_many_cancelled(self, handle, sap_model):
        sap_model.respond("PointObj.GetAllPoints", (1, 0, (), (), (), ()))
        token = CancellationToken()
        token.cancel()
        outcome = handle.points.coordinates_many(["1", "2"], cancel_token=token)
        assert outcome.cancelled
        assert outcome.not_attempted == ["1", "2"]

    def test_restraints(self, handle, sap_model):
        sap_model.respond("PointObj.GetRestraint", (0, (True, True, True, False, False, False)))
        assert handle.points.restraints("1") == PointRestraint.pinned()

    def test_restraints_wrong_length(self, handle, sap_model):
        sap_model.respond("PointObj.GetRestraint", (0, (True, True)))
        with pytest.raises(UnexpectedError):
            handle.points.restraints("1")

    def test_set_restraints_many(self, handle, sap_model):
        sap_model.respond("PointObj.SetRestraint", lambda name, values, item: 1 if name == "3" else 0)
        outcome = handle.points.set_restraints_many(["1", "2", "3"], PointRestraint.fixed())
        assert set(outcome.succeeded) == {"1", "2"}
        assert list(outcome.failed) == ["3"]
        assert sap_model.calls_to("PointObj.SetRestraint")[0] == ("1", [True] * 6, 0)

    def test_set_restraints_many_survives_item_fault(self, handle, sap_model):
        """Test that a COM fault on one point is recorded and the rest still run."""
        def set_restraint(name, values, item):
            if name == "BAD":
                raise FakeComError(-2147352567, "Exception occurred.")
            return 0

        sap_model.respond("PointObj.SetRestraint", set_restraint)
        outcome = handle.points.set_restraints_many(["1", "BAD", "3"], PointRestraint.fixed())
        assert set(outcome.succeeded) == {"1", "3"}
        assert list(outcome.failed) == ["BAD"]
        assert "Exception occurred." in outcome.failed["BAD"]
        assert [args[0] for args in sap_model.calls_to("PointObj.SetRestraint")] == ["1", "BAD", "3"]

    def test_add_cartesian(self, handle, sap_model):
        sap_model.respond("PointObj.AddCartesian", (0, "12"))
        assert handle.points.add_cartesian(1.0, 2.0, 3.0) == "12"

    def test_count(self, handle, sap_model):
        sap_model.respond("PointObj.Count", 42)
        assert handle.points.count() == 42

    def test_restraint_helpers(self):
        assert PointRestraint().is_free
        assert PointRestraint.from_sequence([1, 1, 1, 1, 1, 1]) == PointRestraint.fixed()
        with pytest.raises(ValidationError):
            PointRestraint.from_sequence([True])


class TestFrameManager:
    """Tests for FrameManager."""

    def test_points(self, handle, sap_model):
        sap_model.respond("FrameObj.GetPoints", (0, "1", "2"))
        points = handle.frames.points("B1")
        assert (points.point_i, points.point_j) == ("1", "2")

    def test_section(self, handle, sap_model):
        sap_model.respond("FrameObj.GetSection", (0, "W14X90", ""))
        assert handle.frames.section("C1").section == "W14X90"

    def test_set_section_group(self, handle, sap_model):
        handle.frames.set_section("Columns", "C600", ItemType.GROUP)
        assert sap_model.calls_to("FrameObj.SetSection") == [("Columns", "C600", 1, 0.0, 0.0)]

    def test_add_by_point_rejects_same_point(self, handle, sap_model):
        with pytest.raises(ValidationError):
            handle.frames.add_by_point("1", "1")
        assert sap_model.calls == []

    def test_releases(self, handle, sap_model):
        ends = (False, False, False, False, True, True)
        sap_model.respond("FrameObj.GetReleases", (0, ends, ends, (0.0,) * 6, (0.0,) * 6))
        assert handle.frames.releases("B1") == FrameReleases.pinned_moments()

    def test_unstable_releases_rejected(self, handle, sap_model):
        releases = FrameReleases(i_end=[True] + [False] * 5, j_end=[True] + [False] * 5)
        with pytest.raises(ValidationError, match="axial and torsion"):
            handle.frames.set_releases("B1", releases)
        assert sap_model.calls == []

    def test_distributed_load(self, handle, sap_model):
        handle.frames.set_distributed_load("B1", "DEAD", 10, 5.0)
        args, = sap_model.calls_to("FrameObj.SetLoadDistributed")
        assert args[:8] == ("B1", "DEAD", 1, 10, 0.0, 1.0, 5.0, 5.0)

    @pytest.mark.parametrize("kwargs", [
        {"direction": 12},
        {"dist_start": 0.8, "dist_end": 0.2},
        {"dist_end": 1.5},
        {"load_type": 3},
    ])
    def test_distributed_load_validation(self, handle, kwargs):
        arguments = {"direction": 10, **kwargs}
        with pytest.raises(ValidationError):
            handle.frames.set_distributed_load("B1", "DEAD", value_start=1.0, **arguments)


class TestAreaManager:
    """Tests for AreaManager."""

    def test_points(self, handle, sap_model):
        sap_model.respond("AreaObj.GetPoints", (0, 4, ("1", "2", "3", "4")))
        area = handle.areas.points("F1")
        assert area.count == 4

    def test_points_short_array(self, handle, sap_model):
        sap_model.respond("AreaObj.GetPoints", (0, 4, ("1", "2")))
        with pytest.raises(UnexpectedError):
            handle.areas.points("F1")

    def test_add_by_coord(self, handle, sap_model):
        sap_model.respond("AreaObj.AddByCoord", (0, (), (), (), "F9"))
        name = handle.areas.add_by_coord([0, 1, 1], [0, 0, 1], [3, 3, 3], prop="Slab1")
        assert name == "F9"

    def test_add_by_coord_needs_three_points(self, handle):
        with pytest.raises(ValidationError, match="at least 3"):
            handle.areas.add_by_coord([0, 1], [0, 0], [0, 0])

    def test_add_by_coord_unequal_arrays(self, handle):
        with pytest.raises(ValidationError, match="equal lengths"):
            handle.areas.add_by_coord([0, 1, 1], [0, 0], [0, 0, 0])

    def test_set_property_many(self, handle, sap_model):
        outcome = handle.areas.set_property_many(["F1", "F2"], "Slab1")
        assert outcome.all_succeeded
        assert len(sap_model.calls_to("AreaObj.SetProperty")) == 2


class TestStoryManager:
    """Tests for StoryManager."""

    def test_get_stories(self, handle, sap_model):
        sap_model.respond("Story.GetStories_2", (
            0, 1.5, 2, ("Story1", "Story2"), (4.5, 7.5), (3.0, 3.0),
            (True, False), ("None", "Story1"), (False, False), (0.0, 0.0), (0, 0)))
        layout = handle.stories.get_stories()
        assert layout.base_elevation == 1.5
        assert layout.names == ["Story1", "Story2"]
        assert layout.total_height == 6.0
        assert layout.stories[1].similar_to == "Story1"
        assert layout.stories[1].is_master is False

    def test_set_stories(self, handle, sap_model):
        stories = [StoryDefinition("L1", 4.0), StoryDefinition("L2", 3.0, is_master=False, similar_to="L1")]
        handle.stories.set_stories(0.0, stories)
        args, = sap_model.calls_to("Story.SetStories_2")
        assert args[0:4] == (0.0, 2, ["L1", "L2"], [4.0, 3.0])
        assert args[4] == [True, False]
        assert args[5] == ["None", "L1"]

    @pytest.mark.parametrize("stories", [
        [],
        [StoryDefinition("L1", 0.0)],
        [StoryDefinition("L1", 3.0), StoryDefinition("L1", 3.0)],
        [("L1", 3.0)],
    ])
    def test_set_stories_validation(self, handle, sap_model, stories):
        with pytest.raises(ValidationError):
            handle.stories.set_stories(0.0, stories)
        assert sap_model.calls == []


class TestGroupsAndSelection:
    """Tests for GroupManager and SelectionManager."""

    def test_assignments(self, handle, sap_model):
        sap_model.respond("GroupDef.GetAssignments", (0, 2, (1, 2), ("1", "B1")))
        assert handle.groups.assignments("Core") == [
            ObjectAssignment(ObjectType.POINT, "1"),
            ObjectAssignment(ObjectType.FRAME, "B1"),
        ]

    def test_assign_many(self, handle, sap_model):
        outcome = handle.groups.assign_many("Core", ObjectType.FRAME, ["B1", "B2"])
        assert outcome.all_succeeded
        assert sap_model.calls_to("FrameObj.SetGroupAssign") == [
            ("B1", "Core", False, 0), ("B2", "Core", False, 0)]

    def test_assign_many_unsupported_type(self, handle):
        with pytest.raises(ValidationError):
            handle.groups.assign_many("Core", ObjectType.LINK, ["L1"])

    def test_selection(self, handle, sap_model):
        sap_model.respond("SelectObj.GetSelected", (0, 1, (5,), ("F1",)))
        handle.selection.select_group("Core")
        assert handle.selection.selected() == [ObjectAssignment(ObjectType.AREA, "F1")]
        assert sap_model.calls_to("SelectObj.Group") == [("Core", False)]
