"""
Unit tests for BulkOperationCoordinator and BulkOutcome.
"""

import pytest

from etabs_bridge.core.bulk import BulkOperationCoordinator, CancellationToken
from etabs_bridge.core.errors import NativeCallError, UnavailableSessionError, UnexpectedError, ValidationError
from etabs_bridge.core.observers import EventKind
from etabs_bridge.core.outcome import BulkOutcome
from tests.fixtures.com_fakes import RecordingObserver


def _failing_on(*bad):
    def operation(name):
        if name in bad:
            raise NativeCallError("Native call failed", return_code=1)
        return name.lower()
    return operation


class TestBulkOperationCoordinator:
    """Tests for per-item and bulk execution."""

    def setup_method(self):
        self.recorder = RecordingObserver()
        self.coordinator = BulkOperationCoordinator(emit=self.recorder.notify)

    def test_partial_failure(self):
        """Test that one failing identifier does not stop the others."""
        outcome = self.coordinator.run(["A", "BAD", "C"], _failing_on("BAD"), operation_name="Test")
        assert outcome.total_requested == 3
        assert outcome.succeeded == {"A": "a", "C": "c"}
        assert list(outcome.failed) == ["BAD"]
        assert "return code 1" in outcome.failed["BAD"]
        assert not outcome.all_succeeded
        assert outcome.summary() == "2/3 succeeded, 1 failed"

    def test_every_identifier_accounted_for(self):
        names = ["1", "2", "3", "4"]
        outcome = self.coordinator.run(names, _failing_on("2", "4"), operation_name="Test")
        assert set(outcome.succeeded) | set(outcome.failed) == set(names)
        assert not set(outcome.succeeded) & set(outcome.failed)

    def test_all_succeeded(self):
        outcome = self.coordinator.run(["A", "B"], _failing_on(), operation_name="Test")
        assert outcome.all_succeeded
        assert self.recorder.kinds()[-1] == EventKind.BULK_COMPLETED

    def test_item_failures_are_published(self):
        self.coordinator.run(["A", "BAD"], _failing_on("BAD"), operation_name="Test")
        failed = self.recorder.of_kind(EventKind.ITEM_FAILED)
        assert len(failed) == 1
        assert failed[0].context.targets == ("BAD",)

    def test_lost_session_aborts(self):
        """Test that a lost session aborts the whole run."""
        def operation(name):
            if name == "B":
                raise UnavailableSessionError("gone")
            return name

        with pytest.raises(UnavailableSessionError):
            self.coordinator.run(["A", "B", "C"], operation, operation_name="Test")

    def test_unexpected_item_error_is_recorded(self):
        """Test that a fault on one identifier is recorded and the run continues."""
        def operation(name):
            if name == "B":
                raise UnexpectedError("COM fault on B")
            return name

        outcome = self.coordinator.run(["A", "B", "C"], operation, operation_name="Test")
        assert outcome.succeeded == {"A": "A", "C": "C"}
        assert outcome.failed == {"B": "COM fault on B"}
        assert self.recorder.kinds()[-1] == EventKind.BULK_COMPLETED

    def test_item_validation_error_aborts(self):
        def operation(name):
            raise ValidationError("restraint", None, "must have 6 values")

        with pytest.raises(ValidationError):
            self.coordinator.run(["A", "B"], operation, operation_name="Test")

    def test_unexpected_bulk_error_falls_back_to_items(self):
        def bulk(names):
            raise UnexpectedError("array contract broken")

        outcome = self.coordinator.run(
            ["A", "B"], lambda name: name, operation_name="Test", bulk_operation=bulk)
        assert outcome.all_succeeded

    def test_duplicates_collapsed(self):
        calls = []

        def operation(name):
            calls.append(name)
            return name

        outcome = self.coordinator.run(["A", "B", "A"], operation, operation_name="Test")
        assert calls == ["A", "B"]
        assert outcome.total_requested == 2

    @pytest.mark.parametrize("identifiers", [[], None, "A", ["A", ""]])
    def test_invalid_identifiers(self, identifiers):
        with pytest.raises(ValidationError):
            self.coordinator.run(identifiers, _failing_on(), operation_name="Test")

    def test_cancellation_returns_partial_outcome(self):
        token = CancellationToken()

        def operation(name):
            if name == "B":
                token.cancel()
            return name

        outcome = self.coordinator.run(["A", "B", "C", "D"], operation, operation_name="Test", cancel_token=token)
        assert outcome.cancelled
        assert list(outcome.succeeded) == ["A", "B"]
        assert outcome.not_attempted == ["C", "D"]
        assert not outcome.all_succeeded
        assert "cancelled with 2 not attempted" in outcome.summary()
        assert EventKind.CANCELLED in self.recorder.kinds()

    def test_bulk_call_covers_found_identifiers(self):
        """Test that per-item calls are only made for identifiers the bulk call missed."""
        per_item = []

        def operation(name):
            per_item.append(name)
            raise NativeCallError("not found", return_code=1)

        outcome = self.coordinator.run(
            ["A", "B", "Z"], operation, operation_name="Test",
            bulk_operation=lambda names: {"A": 1, "B": 2, "X": 9})
        assert outcome.succeeded == {"A": 1, "B": 2}
        assert per_item == ["Z"]
        assert list(outcome.failed) == ["Z"]

    def test_bulk_failure_falls_back_to_items(self):
        def bulk(names):
            raise NativeCallError("bulk failed", return_code=1)

        outcome = self.coordinator.run(
            ["A", "B"], lambda name: name, operation_name="Test", bulk_operation=bulk)
        assert outcome.succeeded == {"A": "A", "B": "B"}
        assert self.recorder.kinds()[0] == EventKind.FAILED


class TestBulkOutcome:
    """Tests for BulkOutcome accessors."""

    def test_counts(self):
        outcome = BulkOutcome(total_requested=3, succeeded={"A": 1}, failed={"B": "x"})
        assert outcome.success_count == 1
        assert outcome.failure_count == 1
        assert not outcome.all_succeeded
