"""Duration rule set.

Durations are ``datetime.timedelta`` values. Integer input is a count of the
configured unit (one microsecond by default), string input uses the compact
``1h30m`` syntax, and a numeric output receives the duration divided by the
unit.

Example:
    >>> seconds = Duration().with_unit(timedelta(seconds=1)).with_rounding(Rounding.HALF_EVEN)
    >>> out = Output.numeric(ctypes.c_int64)
    >>> seconds.apply("6.5s", out)
    []
    >>> out.value
    6
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from rulechain.binding import Sink, SinkKind
from rulechain.coercion.inputs import Input, InputKind
from rulechain.coercion.kinds import INT64
from rulechain.coercion.temporal import format_duration, parse_duration, to_microseconds
from rulechain.core.chain import Coerced, Conflict, Options
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError
from rulechain.core.labels import quote, token
from rulechain.core.rounding import Rounding, divide_rounded
from rulechain.core.violations import ErrorCode, Violation
from rulechain.rules.common import ValueRuleSet

MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class DurationOptions(Options):
    """Settings of a duration rule set.

    Attributes:
        unit: Size of one integer step, for integer input and numeric output.
        rounding: How a duration is rounded to a whole number of units.
            With Rounding.NONE, a remainder is an error for numeric output
            and kept as-is otherwise.
    """

    unit: timedelta = MICROSECOND
    rounding: Rounding = Rounding.NONE


class DurationRuleSet(ValueRuleSet[timedelta]):
    """Rule set for ``timedelta`` values."""

    __slots__ = ()

    native = (timedelta,)

    def __init__(self) -> None:
        super().__init__(DurationOptions(), "DurationRuleSet")

    @property
    def target_name(self) -> str:
        return "duration"

    @property
    def unit(self) -> timedelta:
        return self._options.unit

    def _render(self, value: timedelta) -> str:
        return format_duration(value)

    def with_unit(self, unit: timedelta) -> "DurationRuleSet":
        """Return a new rule set that counts integers in steps of ``unit``.

        Raises:
            RuleConfigurationError: If unit is not positive
        """
        if unit <= timedelta(0):
            raise RuleConfigurationError(
                "Duration unit must be positive",
                builder="with_unit",
                rule_set=self.describe(),
                unit=format_duration(unit),
            )
        return self._derive(token("WithUnit", quote(format_duration(unit))), Conflict.UNIT, unit=unit)

    def with_rounding(self, rounding: Rounding) -> "DurationRuleSet":
        """Return a new rule set that rounds durations to a whole number of units.

        The quotient is computed with floor division. HalfUp rounds ties
        toward positive infinity and HalfEven rounds ties to an even
        quotient. When a rounding policy is set, every output, including a
        ``timedelta`` output, receives the rounded duration.
        """
        return self._derive(f"WithRounding({rounding})", Conflict.ROUNDING, rounding=rounding)

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        if item.kind is InputKind.NATIVE:
            return Coerced(item.value)

        if item.kind is InputKind.INTEGER and (item.numeric is None or item.numeric.shape == INT64.shape):
            try:
                return Coerced(item.value * self._options.unit)
            except OverflowError:
                return ctx.range_violation(self.target_name)

        if item.kind is InputKind.STRING:
            try:
                return Coerced(parse_duration(item.value))
            except ValueError as exc:
                return ctx.violation(ErrorCode.PATTERN, str(exc))

        return ctx.type_violation(self.target_name, item.type_name)

    def _normalize(self, value: timedelta) -> timedelta:
        rounding = self._options.rounding
        if rounding is Rounding.NONE:
            return value
        unit = to_microseconds(self._options.unit)
        quotient = divide_rounded(to_microseconds(value), unit, rounding)
        return timedelta(microseconds=quotient * unit)

    def _bind(self, ctx: RuleContext, sink: Sink, value: timedelta, coerced: Coerced) -> Any:
        if sink.kind is SinkKind.TARGET:
            return value
        if sink.kind is SinkKind.TEXT:
            return format_duration(value)
        if sink.kind is not SinkKind.NUMERIC:
            return self._unsupported_sink(ctx, sink)

        quotient, remainder = divmod(to_microseconds(value), to_microseconds(self._options.unit))
        if remainder:
            return ctx.violation(
                ErrorCode.RANGE,
                self.target_name,
                message=(
                    f"duration {format_duration(value)} is not evenly divisible "
                    f"by unit {format_duration(self._options.unit)}"
                ),
            )

        target = sink.numeric
        if target.integral:
            return quotient if target.fits(quotient) else ctx.range_violation(target.name)
        converted = target.convert(float(quotient))
        if int(converted) != quotient:
            return ctx.range_violation(target.name)
        return converted


_ROOT = DurationRuleSet()


def Duration() -> DurationRuleSet:
    """Rule set for ``timedelta`` values."""
    return _ROOT
