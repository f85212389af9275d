"""Output sinks for apply.

Python has no pointers, so callers pass an Output object for apply to write
into. The shape of the sink is explicit rather than discovered by inspecting
types:

- Output() holds the family's target type (int, float, timedelta, ...)
- Output.dynamic(current) is treated as whatever its current value is, and
  receives a value of that same type
- Output.numeric(ctype) holds a number of a fixed width, e.g. a duration
  expressed as a count of units
- Output.text() holds the string form of the value

Example:
    >>> seconds = Output.numeric(ctypes.c_int32)
    >>> Duration().with_unit(timedelta(seconds=1)).apply("90s", seconds)
    []
    >>> seconds.value
    90
"""

import ctypes
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rulechain.coercion.kinds import INT64, FLOAT64, NumericKind, kind_of, kind_of_ctype
from rulechain.core.exceptions import RuleConfigurationError


class SinkKind(Enum):
    """How an Output receives a value."""

    TARGET = "target"
    DYNAMIC = "dynamic"
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True)
class Sink:
    """An Output resolved to a concrete shape for one apply call.

    ``kind`` is never DYNAMIC. ``numeric`` is set for NUMERIC sinks.
    ``wrap`` is the ctypes type to store when writing back into a dynamic
    Output that held a ctypes instance.
    """

    kind: SinkKind
    numeric: NumericKind | None = None
    wrap: type | None = None


class Output:
    """A mutable slot that apply writes its result into."""

    __slots__ = ("kind", "numeric_kind", "value")

    def __init__(self, value: Any = None) -> None:
        self.kind = SinkKind.TARGET
        self.numeric_kind: NumericKind | None = None
        self.value = value

    @classmethod
    def dynamic(cls, value: Any = None) -> "Output":
        output = cls(value)
        output.kind = SinkKind.DYNAMIC
        return output

    @classmethod
    def numeric_of(cls, kind: NumericKind) -> "Output":
        output = cls()
        output.kind = SinkKind.NUMERIC
        output.numeric_kind = kind
        return output

    @classmethod
    def numeric(cls, ctype: type = ctypes.c_int64) -> "Output":
        kind = kind_of_ctype(ctype)
        if kind is None:
            raise RuleConfigurationError(
                "Numeric output requires a ctypes integer or float type",
                ctype=getattr(ctype, "__name__", repr(ctype)),
            )
        return cls.numeric_of(kind)

    @classmethod
    def text(cls) -> "Output":
        output = cls()
        output.kind = SinkKind.TEXT
        return output

    def resolve(self, native: tuple[type, ...]) -> Sink | None:
        """Resolve this output to a concrete sink shape.

        A dynamic output is resolved from its current value: None or a value
        of a native type makes it a target sink, a string makes it a text
        sink, and a number makes it a numeric sink of that number's width.

        Args:
            native: The applying family's target types

        Returns:
            The resolved Sink, or None if the dynamic value's type cannot be
            written by this family.
        """
        if self.kind is not SinkKind.DYNAMIC:
            return Sink(self.kind, self.numeric_kind)

        current = self.value
        if current is None:
            return Sink(SinkKind.TARGET)
        if isinstance(current, bool):
            return Sink(SinkKind.TARGET) if bool in native else None
        if isinstance(current, native):
            return Sink(SinkKind.TARGET)
        if isinstance(current, str):
            return Sink(SinkKind.TEXT)
        if isinstance(current, int):
            return Sink(SinkKind.NUMERIC, INT64)
        if isinstance(current, float):
            return Sink(SinkKind.NUMERIC, FLOAT64)
        kind = kind_of(current)
        if kind is not None:
            return Sink(SinkKind.NUMERIC, kind, type(current))
        return None

    def write(self, sink: Sink, value: Any) -> None:
        if sink.wrap is not None:
            value = sink.wrap(value)
        self.value = value

    def __repr__(self) -> str:
        if self.kind is SinkKind.NUMERIC:
            return f"Output.numeric({self.numeric_kind}, value={self.value!r})"
        return f"Output({self.kind.value}, value={self.value!r})"
