"""Fixed-width numeric kinds.

Python has a single arbitrary-precision int and a single double-precision
float, so fixed-width numbers are modelled with ctypes: each NumericKind pairs
a display name with the ctypes type that stores it. Range and precision
checks use the round-trip technique: store the value in the ctypes type, read
it back and compare. ctypes wraps on integer overflow and rounds on float
narrowing, so any difference means the value does not fit.
"""

import ctypes
import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class NumericKind:
    """A fixed-width numeric type.

    Attributes:
        name: Name used in debug strings and error messages (e.g. "int8").
        ctype: ctypes type used for storage and round-trip checks.
        integral: True for integer kinds, False for floating-point kinds.
        signed: True if the kind can hold negative values.
        bits: Storage width in bits.
    """

    name: str
    ctype: type
    integral: bool
    signed: bool
    bits: int

    @property
    def shape(self) -> tuple[bool, bool, int]:
        """Identity of the storage layout, ignoring the display name."""
        return (self.integral, self.signed, self.bits)

    @property
    def min_value(self) -> int:
        if not self.integral:
            raise TypeError(f"{self.name} has no integral bounds")
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if not self.integral:
            raise TypeError(f"{self.name} has no integral bounds")
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def convert(self, value: Any) -> Any:
        """Store a value in this kind and read it back."""
        return self.ctype(value).value

    def fits(self, value: Any) -> bool:
        """Return True if the value survives a round trip through this kind."""
        if self.integral:
            return self.min_value <= value <= self.max_value and self.convert(value) == value
        if isinstance(value, float) and math.isnan(value):
            return True
        try:
            return self.convert(value) == value
        except OverflowError:
            return False

    def __str__(self) -> str:
        return self.name


INT = NumericKind("int", ctypes.c_int64, True, True, 64)
UINT = NumericKind("uint", ctypes.c_uint64, True, False, 64)
INT8 = NumericKind("int8", ctypes.c_int8, True, True, 8)
INT16 = NumericKind("int16", ctypes.c_int16, True, True, 16)
INT32 = NumericKind("int32", ctypes.c_int32, True, True, 32)
INT64 = NumericKind("int64", ctypes.c_int64, True, True, 64)
UINT8 = NumericKind("uint8", ctypes.c_uint8, True, False, 8)
UINT16 = NumericKind("uint16", ctypes.c_uint16, True, False, 16)
UINT32 = NumericKind("uint32", ctypes.c_uint32, True, False, 32)
UINT64 = NumericKind("uint64", ctypes.c_uint64, True, False, 64)
FLOAT32 = NumericKind("float32", ctypes.c_float, False, True, 32)
FLOAT64 = NumericKind("float64", ctypes.c_double, False, True, 64)

INTEGER_KINDS = (INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64)
FLOAT_KINDS = (FLOAT32, FLOAT64)

_BY_SHAPE = {kind.shape: kind for kind in INTEGER_KINDS + FLOAT_KINDS}

# Every ctypes integer class; several of these are aliases of each other.
_INTEGER_CTYPES = (
    ctypes.c_byte,
    ctypes.c_ubyte,
    ctypes.c_short,
    ctypes.c_ushort,
    ctypes.c_int,
    ctypes.c_uint,
    ctypes.c_long,
    ctypes.c_ulong,
    ctypes.c_longlong,
    ctypes.c_ulonglong,
    ctypes.c_size_t,
    ctypes.c_ssize_t,
)


def kind_of_ctype(ctype: type) -> NumericKind | None:
    """Return the kind matching a ctypes numeric type, or None.

    Example:
        >>> kind_of_ctype(ctypes.c_short).name
        'int16'
        >>> kind_of_ctype(ctypes.c_char) is None
        True
    """
    if ctype is ctypes.c_float:
        return FLOAT32
    if ctype is ctypes.c_double:
        return FLOAT64
    if ctype not in _INTEGER_CTYPES:
        return None
    signed = ctype(-1).value < 0
    return _BY_SHAPE.get((True, signed, 8 * ctypes.sizeof(ctype)))


def kind_of(value: Any) -> NumericKind | None:
    """Return the kind of a ctypes numeric instance, or None."""
    return kind_of_ctype(type(value))
