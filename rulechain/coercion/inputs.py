"""Classification of dynamically typed input.

Every apply call classifies its raw input exactly once. The families then
dispatch on the closed InputKind instead of inspecting Python types again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rulechain.coercion.kinds import FLOAT64, NumericKind, kind_of


class InputKind(Enum):
    """Closed set of input shapes understood by the coercion engine."""

    NONE = "none"
    NATIVE = "native"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Input:
    """A classified input value.

    Attributes:
        kind: Shape of the input.
        value: The input as a plain Python value. ctypes instances are
            unwrapped to their int or float.
        numeric: Fixed width of numeric input. None for a Python int, which
            has arbitrary precision.
        type_name: Name of the input's type for error messages.
    """

    kind: InputKind
    value: Any
    numeric: NumericKind | None = None
    type_name: str = ""


def type_name(value: Any) -> str:
    """Return the name used for a value's type in error messages."""
    return classify(value).type_name


def classify(value: Any, native: tuple[type, ...] = ()) -> Input:
    """Classify a raw input value.

    Args:
        value: Raw input
        native: The family's target types. Instances of these classify as
            NATIVE before any other check except None. A bool is NATIVE
            only when bool itself is a target type.

    Returns:
        The classified Input.

    Example:
        >>> classify(ctypes.c_int8(5)).numeric.name
        'int8'
        >>> classify(1.5).kind
        <InputKind.FLOAT: 'float'>
        >>> classify(True).kind
        <InputKind.UNKNOWN: 'unknown'>
    """
    if value is None:
        return Input(InputKind.NONE, None, type_name="nil")
    if isinstance(value, bool):
        kind = InputKind.NATIVE if bool in native else InputKind.UNKNOWN
        return Input(kind, value, type_name="bool")
    if native and isinstance(value, native):
        return Input(InputKind.NATIVE, value, _numeric_of(value), _name_of(value))
    if isinstance(value, int):
        return Input(InputKind.INTEGER, value, type_name="int")
    if isinstance(value, float):
        return Input(InputKind.FLOAT, value, FLOAT64, "float64")
    if isinstance(value, str):
        return Input(InputKind.STRING, value, type_name="string")

    numeric = kind_of(value)
    if numeric is not None:
        kind = InputKind.INTEGER if numeric.integral else InputKind.FLOAT
        return Input(kind, value.value, numeric, numeric.name)

    return Input(InputKind.UNKNOWN, value, type_name=type(value).__name__)


def _numeric_of(value: Any) -> NumericKind | None:
    if isinstance(value, float):
        return FLOAT64
    return None


def _name_of(value: Any) -> str:
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float64"
    if isinstance(value, str):
        return "string"
    return type(value).__name__
