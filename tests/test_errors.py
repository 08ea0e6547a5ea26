"""
Unit tests for the error taxonomy, argument validation and ErrorTranslator.
"""

import pytest

from etabs_bridge.core.constants import RPC_E_DISCONNECTED, RPC_S_SERVER_UNAVAILABLE
from etabs_bridge.core.data_models import ManagerCallContext
from etabs_bridge.core.errors import (
    EtabsError,
    NativeCallError,
    UnavailableSessionError,
    UnexpectedError,
    UnsupportedVersionError,
    ValidationError,
    require_length,
    require_name,
    require_names,
    require_positive,
    require_range,
    require_same_length,
)
from etabs_bridge.core.outcome import Failure, Success
from etabs_bridge.core.translator import ErrorTranslator
from tests.fixtures.com_fakes import FakeComError

CONTEXT = ManagerCallContext("FrameObj.SetSection", ("B1",), "OBJECTS")


class TestTaxonomy:
    """Tests for the exception classes."""

    def test_all_errors_share_base(self):
        for cls in (ValidationError, UnavailableSessionError, UnsupportedVersionError,
                    NativeCallError, UnexpectedError):
            assert issubclass(cls, EtabsError)

    def test_message_names_operation_and_targets(self):
        error = NativeCallError("Native call failed", context=CONTEXT, return_code=1)
        text = str(error)
        assert "FrameObj.SetSection" in text
        assert "'B1'" in text
        assert "return code 1" in text
        assert error.operation == "FrameObj.SetSection"
        assert error.targets == ("B1",)

    def test_unsupported_version_attributes(self):
        error = UnsupportedVersionError("21.0.0", 22)
        assert error.detected_version == "21.0.0"
        assert error.required_version == 22
        assert "Minimum required version: 22" in str(error)

    def test_validation_error_parameter(self):
        error = ValidationError("name", "", "cannot be empty")
        assert error.parameter == "name"
        assert "Invalid parameter 'name'" in str(error)

    def test_context_truncates_many_targets(self):
        context = ManagerCallContext("Op", tuple(str(i) for i in range(8)))
        assert "(+3 more)" in context.describe()


class TestValidators:
    """Tests for the argument validation helpers."""

    @pytest.mark.parametrize("value", [None, "", "   ", 5])
    def test_require_name_rejects(self, value):
        with pytest.raises(ValidationError):
            require_name(value)

    def test_require_names_dedupes_in_order(self):
        assert require_names(["b", "a", "b"]) == ["b", "a"]

    def test_require_names_rejects_string(self):
        with pytest.raises(ValidationError, match="not a string"):
            require_names("abc")

    def test_require_names_rejects_empty(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            require_names([])

    def test_require_names_reports_index(self):
        with pytest.raises(ValidationError, match=r"names\[1\]"):
            require_names(["a", ""])

    def test_require_range(self):
        assert require_range(0.5, "u", -1, 0.5) == 0.5
        with pytest.raises(ValidationError, match="<= 0.5"):
            require_range(0.6, "u", -1, 0.5)
        with pytest.raises(ValidationError, match="NaN"):
            require_range(float("nan"), "u")
        with pytest.raises(ValidationError, match="must be a number"):
            require_range(True, "u")

    def test_require_positive(self):
        with pytest.raises(ValidationError, match="positive"):
            require_positive(0, "height")

    def test_require_length(self):
        with pytest.raises(ValidationError, match="must have 6 values"):
            require_length([1, 2], "dof", 6)

    def test_require_same_length(self):
        assert require_same_length(x=[1, 2], y=[3, 4]) == 2
        with pytest.raises(ValidationError, match="x=2, y=1"):
            require_same_length(x=[1, 2], y=[3])


class TestErrorTranslator:
    """Tests for ErrorTranslator."""

    def setup_method(self):
        self.translator = ErrorTranslator()

    def test_check_zero_passes(self):
        self.translator.check(0, CONTEXT)

    def test_check_nonzero_raises(self):
        with pytest.raises(NativeCallError) as info:
            self.translator.check(1, CONTEXT)
        assert info.value.return_code == 1
        assert info.value.context == CONTEXT

    @pytest.mark.parametrize("hresult", [RPC_S_SERVER_UNAVAILABLE, RPC_E_DISCONNECTED])
    def test_lost_session_hresult(self, hresult):
        """Test that COM faults meaning the server is gone become UnavailableSessionError."""
        error = self.translator.translate(FakeComError(hresult), CONTEXT)
        assert isinstance(error, UnavailableSessionError)
        assert error.context == CONTEXT

    def test_other_com_fault_is_unexpected(self):
        error = self.translator.translate(FakeComError(-2147352567), CONTEXT)
        assert isinstance(error, UnexpectedError)

    def test_plain_exception_is_unexpected(self):
        error = self.translator.translate(RuntimeError("boom"), CONTEXT)
        assert isinstance(error, UnexpectedError)
        assert "RuntimeError: boom" in error.message

    def test_taxonomy_error_passes_through(self):
        original = ValidationError("name", "", "cannot be empty")
        assert self.translator.translate(original, CONTEXT) is original
        assert original.context == CONTEXT

    def test_unwrap(self):
        assert self.translator.unwrap(Success(records=(1, 2))) == [1, 2]
        with pytest.raises(NativeCallError) as info:
            self.translator.unwrap(Failure(return_code=2, message="failed", context=CONTEXT))
        assert info.value.return_code == 2
