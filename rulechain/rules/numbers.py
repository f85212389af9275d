"""Integer and float rule sets.

Integer families (Int, Int8 ... Uint64) produce Python ints limited to the
range of their fixed-width kind. Float families (Float32, Float64) produce
Python floats; Float32 values are always exactly representable as a 32-bit
float.

Example:
    >>> Int().with_base(16).validate("BeEf").value
    48879
    >>> Float64().with_rounding(Rounding.HALF_EVEN, 2).validate(124.125).value
    124.12
    >>> Int8().validate(1024).first().message
    'value is out of range for int8'
"""

from dataclasses import dataclass
from typing import Any

from rulechain.binding import Sink, SinkKind
from rulechain.coercion.inputs import Input
from rulechain.coercion.kinds import (
    FLOAT32,
    FLOAT64,
    INT,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    NumericKind,
)
from rulechain.coercion.numbers import coerce_float, coerce_integer, format_float, format_integer
from rulechain.core.chain import Coerced, Conflict, Options
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError
from rulechain.core.rounding import Rounding, round_scaled
from rulechain.core.violations import Violation
from rulechain.rules.common import ValueRuleSet


@dataclass(frozen=True)
class NumberOptions(Options):
    """Settings of a numeric rule set.

    Attributes:
        kind: Fixed-width kind of the target type.
        strict: Reject every input that is not already of the target type.
        base: Numeric base for parsing and formatting integer strings.
        rounding: Rounding policy for non-integral or over-precise input.
        precision: Decimal places kept by float rounding.
        fixed_output: Decimal places for float text output, zero-padded.
    """

    kind: NumericKind = INT
    strict: bool = False
    base: int = 10
    rounding: Rounding = Rounding.NONE
    precision: int = 0
    fixed_output: int | None = None


class NumberRuleSet(ValueRuleSet[Any]):
    """Modifiers common to integer and float rule sets."""

    __slots__ = ()

    @property
    def kind(self) -> NumericKind:
        return self._options.kind

    @property
    def target_name(self) -> str:
        return self._options.kind.name

    def with_strict(self):
        """Return a new rule set that rejects input not already of the target type."""
        return self._derive("WithStrict()", Conflict.STRICT, strict=True)


class IntRuleSet(NumberRuleSet):
    """Rule set for a fixed-width integer kind."""

    __slots__ = ()

    native = (int,)

    def __init__(self, kind: NumericKind = INT) -> None:
        if not kind.integral:
            raise RuleConfigurationError("IntRuleSet requires an integer kind", kind=kind.name)
        super().__init__(NumberOptions(kind=kind), f"IntRuleSet[{kind.name}]")

    def _check_value(self, builder: str, value: Any) -> int:
        value = super()._check_value(builder, value)
        if not self.kind.fits(value):
            raise RuleConfigurationError(
                f"{builder} value is out of range for {self.kind.name}",
                builder=builder,
                rule_set=self.describe(),
                value=value,
            )
        return value

    def _render(self, value: int) -> str:
        return str(value)

    def with_base(self, base: int) -> "IntRuleSet":
        """Return a new rule set that parses and formats strings in ``base``.

        Base 0 infers the base from a ``0x``, ``0o`` or ``0b`` prefix when
        parsing and formats in base 10.

        Raises:
            RuleConfigurationError: If base is not 0 or between 2 and 36
        """
        if base != 0 and not 2 <= base <= 36:
            raise RuleConfigurationError(
                "Base must be 0 or between 2 and 36",
                builder="with_base",
                rule_set=self.describe(),
                base=base,
            )
        return self._derive(f"WithBase({base})", Conflict.BASE, base=base)

    def with_rounding(self, rounding: Rounding) -> "IntRuleSet":
        """Return a new rule set that rounds float input with ``rounding``.

        Without a rounding policy, float input must already be integral.
        """
        return self._derive(f"WithRounding({rounding})", Conflict.ROUNDING, rounding=rounding)

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        options = self._options
        value = coerce_integer(
            ctx,
            item,
            options.kind,
            strict=options.strict,
            base=options.base,
            rounding=options.rounding,
        )
        if isinstance(value, Violation):
            return value
        return Coerced(value)

    def _bind(self, ctx: RuleContext, sink: Sink, value: int, coerced: Coerced) -> Any:
        if sink.kind is SinkKind.TARGET:
            return value
        if sink.kind is SinkKind.TEXT:
            return format_integer(value, self._options.base)
        if sink.kind is SinkKind.NUMERIC:
            target = sink.numeric
            if target.integral:
                return value if target.fits(value) else ctx.range_violation(target.name)
            converted = target.convert(float(value))
            if int(converted) != value:
                return ctx.range_violation(target.name)
            return converted
        return self._unsupported_sink(ctx, sink)


class FloatRuleSet(NumberRuleSet):
    """Rule set for a float kind."""

    __slots__ = ()

    native = (float,)

    def __init__(self, kind: NumericKind = FLOAT64) -> None:
        if kind.integral:
            raise RuleConfigurationError("FloatRuleSet requires a float kind", kind=kind.name)
        super().__init__(NumberOptions(kind=kind), f"FloatRuleSet[{kind.name}]")

    def _check_value(self, builder: str, value: Any) -> float:
        if isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        return super()._check_value(builder, value)

    def _render(self, value: float) -> str:
        return repr(value)

    def with_rounding(self, rounding: Rounding, precision: int = 0) -> "FloatRuleSet":
        """Return a new rule set that rounds values to ``precision`` decimals.

        Rounding is applied after coercion, before any rule runs. HalfUp
        rounds ties away from zero; HalfEven rounds ties to the even digit.

        Raises:
            RuleConfigurationError: If precision is negative
        """
        if precision < 0:
            raise RuleConfigurationError(
                "Rounding precision cannot be negative",
                builder="with_rounding",
                rule_set=self.describe(),
                precision=precision,
            )
        return self._derive(
            f"WithRounding({rounding}, {precision})",
            Conflict.ROUNDING,
            rounding=rounding,
            precision=precision,
        )

    def with_fixed_output(self, precision: int) -> "FloatRuleSet":
        """Return a new rule set that writes text output with exactly ``precision`` decimals."""
        if precision < 0:
            raise RuleConfigurationError(
                "Output precision cannot be negative",
                builder="with_fixed_output",
                rule_set=self.describe(),
                precision=precision,
            )
        return self._derive(f"WithFixedOutput({precision})", Conflict.FIXED_OUTPUT, fixed_output=precision)

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        value = coerce_float(ctx, item, self._options.kind, strict=self._options.strict)
        if isinstance(value, Violation):
            return value
        return Coerced(value)

    def _normalize(self, value: float) -> float:
        options = self._options
        rounded = round_scaled(value, options.rounding, options.precision)
        return options.kind.convert(rounded)

    def _bind(self, ctx: RuleContext, sink: Sink, value: float, coerced: Coerced) -> Any:
        options = self._options
        if sink.kind is SinkKind.TARGET:
            return value
        if sink.kind is SinkKind.TEXT:
            precision = options.precision if options.rounding is not Rounding.NONE else None
            return format_float(value, options.kind, fixed=options.fixed_output, precision=precision)
        if sink.kind is SinkKind.NUMERIC and not sink.numeric.integral:
            if not sink.numeric.fits(value):
                return ctx.range_violation(sink.numeric.name)
            return value
        return self._unsupported_sink(ctx, sink)


_ROOTS = {
    kind: IntRuleSet(kind)
    for kind in (INT, UINT, INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64)
}
_ROOTS[FLOAT32] = FloatRuleSet(FLOAT32)
_ROOTS[FLOAT64] = FloatRuleSet(FLOAT64)


def Int() -> IntRuleSet:
    """Rule set for a 64-bit signed integer."""
    return _ROOTS[INT]


def Uint() -> IntRuleSet:
    """Rule set for a 64-bit unsigned integer."""
    return _ROOTS[UINT]


def Int8() -> IntRuleSet:
    return _ROOTS[INT8]


def Int16() -> IntRuleSet:
    return _ROOTS[INT16]


def Int32() -> IntRuleSet:
    return _ROOTS[INT32]


def Int64() -> IntRuleSet:
    return _ROOTS[INT64]


def Uint8() -> IntRuleSet:
    return _ROOTS[UINT8]


def Uint16() -> IntRuleSet:
    return _ROOTS[UINT16]


def Uint32() -> IntRuleSet:
    return _ROOTS[UINT32]


def Uint64() -> IntRuleSet:
    return _ROOTS[UINT64]


def Float32() -> FloatRuleSet:
    return _ROOTS[FLOAT32]


def Float64() -> FloatRuleSet:
    return _ROOTS[FLOAT64]
