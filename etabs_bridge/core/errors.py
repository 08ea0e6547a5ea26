"""
Exception taxonomy for the ETABS automation bridge.

Callers only ever observe the classes defined here:

- ValidationError: malformed caller input, rejected before any native call
- UnavailableSessionError: handle not attached, or the native process is gone
- UnsupportedVersionError: native version below the configured floor
- NativeCallError: native call returned a nonzero code
- UnexpectedError: any other runtime fault, wrapped

The module also holds the argument validation helpers used by every
call-site before the native layer is touched.
"""

from typing import Any, Iterable, List, Optional, Sequence

from .data_models import ManagerCallContext


class EtabsError(Exception):
    """Base exception for all bridge errors.

    Attributes:
        message: Error description
        context: Operation and target identifiers of the failed call
        return_code: Native return code (if applicable)
    """

    def __init__(
        self,
        message: str,
        context: Optional[ManagerCallContext] = None,
        return_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.return_code = return_code

    @property
    def operation(self) -> Optional[str]:
        return self.context.operation if self.context else None

    @property
    def targets(self) -> tuple:
        return self.context.targets if self.context else ()

    def __str__(self) -> str:
        parts = [self.message]
        if self.context:
            parts.insert(0, f"[{self.context.describe()}]")
        if self.return_code is not None:
            parts.append(f"(return code {self.return_code})")
        return " ".join(parts)


class ValidationError(EtabsError):
    """Raised for malformed caller input; never reaches the native layer.

    Attributes:
        parameter: Name of the offending parameter
        value: The rejected value
    """

    def __init__(
        self,
        parameter: str,
        value: Any,
        message: str,
        context: Optional[ManagerCallContext] = None,
    ):
        super().__init__(f"Invalid parameter '{parameter}': {message}", context=context)
        self.parameter = parameter
        self.value = value


class UnavailableSessionError(EtabsError):
    """Raised when the handle is not attached or the native session was lost."""
    pass


class UnsupportedVersionError(EtabsError):
    """Raised during attach when the native version is below the floor.

    Attributes:
        detected_version: Version string of the rejected instance
        required_version: Minimum major version
    """

    def __init__(self, detected_version: str, required_version: int):
        super().__init__(
            f"ETABS version {detected_version} is not supported. "
            f"Minimum required version: {required_version}"
        )
        self.detected_version = detected_version
        self.required_version = required_version


class NativeCallError(EtabsError):
    """Raised when a native call returns a nonzero code."""
    pass


class UnexpectedError(EtabsError):
    """Wraps any other runtime fault (transport, interop, broken contract)."""
    pass


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------

def require_name(
    value: Any,
    parameter: str = "name",
    context: Optional[ManagerCallContext] = None,
) -> str:
    """Return value if it is a non-blank string, else raise ValidationError."""
    if value is None:
        raise ValidationError(parameter, value, "cannot be None", context)
    if not isinstance(value, str):
        raise ValidationError(parameter, value, f"must be a string, got {type(value).__name__}", context)
    if not value.strip():
        raise ValidationError(parameter, value, "cannot be empty", context)
    return value


def require_names(
    values: Any,
    parameter: str = "names",
    context: Optional[ManagerCallContext] = None,
) -> List[str]:
    """Validate a non-empty collection of names.

    Duplicates are dropped, first occurrence wins.
    """
    if values is None:
        raise ValidationError(parameter, values, "cannot be None", context)
    if isinstance(values, str):
        raise ValidationError(parameter, values, "must be a collection of names, not a string", context)
    names: List[str] = []
    seen = set()
    for index, value in enumerate(values):
        require_name(value, f"{parameter}[{index}]", context)
        if value not in seen:
            seen.add(value)
            names.append(value)
    if not names:
        raise ValidationError(parameter, values, "cannot be empty", context)
    return names


def require_range(
    value: Any,
    parameter: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    context: Optional[ManagerCallContext] = None,
) -> float:
    """Validate a numeric value against inclusive bounds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(parameter, value, "must be a number", context)
    if value != value:  # NaN
        raise ValidationError(parameter, value, "cannot be NaN", context)
    if minimum is not None and value < minimum:
        raise ValidationError(parameter, value, f"must be >= {minimum}", context)
    if maximum is not None and value > maximum:
        raise ValidationError(parameter, value, f"must be <= {maximum}", context)
    return value


def require_positive(
    value: Any,
    parameter: str,
    context: Optional[ManagerCallContext] = None,
) -> float:
    """Validate a strictly positive number."""
    require_range(value, parameter, context=context)
    if value <= 0:
        raise ValidationError(parameter, value, "must be positive", context)
    return value


def require_length(
    values: Sequence[Any],
    parameter: str,
    expected: int,
    context: Optional[ManagerCallContext] = None,
) -> Sequence[Any]:
    """Validate that a sequence has exactly the expected length."""
    if values is None:
        raise ValidationError(parameter, values, "cannot be None", context)
    if len(values) != expected:
        raise ValidationError(
            parameter, values, f"must have {expected} values, got {len(values)}", context)
    return values


def require_same_length(
    context: Optional[ManagerCallContext] = None,
    **arrays: Iterable[Any],
) -> int:
    """Validate that all keyword arrays have the same length; return it."""
    lengths = {name: len(list(values)) for name, values in arrays.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise ValidationError(
            "arrays", lengths, f"parallel arrays must have equal lengths ({detail})", context)
    return next(iter(lengths.values()), 0)
