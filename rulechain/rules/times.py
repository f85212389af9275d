"""Time rule set.

Times are ``datetime.datetime`` values. String input is parsed with the
layouts configured through with_layouts; a text output receives the time
formatted with the explicit output layout, or else the layout that parsed the
input, or else RFC 3339. Wherever times are compared, naive ones are read as
UTC; the value itself is passed on unchanged.

Example:
    >>> dates = Time().with_layouts("%Y-%m-%d")
    >>> out = Output.text()
    >>> dates.apply("2024-05-01", out)
    []
    >>> out.value
    '2024-05-01'
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from rulechain.binding import Sink, SinkKind
from rulechain.coercion.inputs import Input, InputKind
from rulechain.coercion.temporal import DEFAULT_TIME_LAYOUT, format_duration, format_time, parse_time
from rulechain.core.chain import Coerced, Conflict, Options
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError
from rulechain.core.labels import quote, token, values_token
from rulechain.core.violations import ErrorCode, Violation
from rulechain.rules.common import ValueRuleSet
from rulechain.rules.custom import RuleBase


@dataclass(frozen=True)
class TimeOptions(Options):
    """Settings of a time rule set.

    Attributes:
        layouts: Accepted input layouts in the order they are tried: the
            layouts of the most recent with_layouts call come first.
        output_layout: Layout for text output, overriding the input layout.
    """

    layouts: tuple[str, ...] = ()
    output_layout: str | None = None


def as_utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC. Aware datetimes are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _until(ctx: RuleContext, value: datetime) -> timedelta:
    """Return value - now, reading naive datetimes as UTC."""
    return as_utc(value) - as_utc(ctx.current_time())


class MinDiffRule(RuleBase):
    """Requires ``value - now`` to be at least a given duration."""

    def __init__(self, minimum: timedelta) -> None:
        self.minimum = minimum

    def evaluate(self, ctx: RuleContext, value: datetime) -> list[Violation]:
        if _until(ctx, value) < self.minimum:
            return [
                ctx.violation(
                    ErrorCode.MIN,
                    format_duration(self.minimum),
                    message=f"must be on or after {format_duration(self.minimum)} from now",
                )
            ]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, MinDiffRule)

    def describe(self) -> str:
        return token("WithMinDiff", format_duration(self.minimum))


class MaxDiffRule(RuleBase):
    """Requires ``value - now`` to be at most a given duration."""

    def __init__(self, maximum: timedelta) -> None:
        self.maximum = maximum

    def evaluate(self, ctx: RuleContext, value: datetime) -> list[Violation]:
        if _until(ctx, value) > self.maximum:
            return [
                ctx.violation(
                    ErrorCode.MAX,
                    format_duration(self.maximum),
                    message=f"must be on or before {format_duration(self.maximum)} from now",
                )
            ]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, MaxDiffRule)

    def describe(self) -> str:
        return token("WithMaxDiff", format_duration(self.maximum))


class TimeRuleSet(ValueRuleSet[datetime]):
    """Rule set for ``datetime`` values."""

    __slots__ = ()

    native = (datetime,)

    def __init__(self) -> None:
        super().__init__(TimeOptions(), "TimeRuleSet")

    @property
    def target_name(self) -> str:
        return "date time"

    @property
    def layouts(self) -> tuple[str, ...]:
        return self._options.layouts

    @property
    def output_layout(self) -> str | None:
        return self._options.output_layout

    def _render(self, value: datetime) -> str:
        return value.isoformat()

    # Naive and aware times compare as instants, with naive ones read as UTC.
    _key = staticmethod(as_utc)

    def with_layouts(self, layout: str, *rest: str) -> "TimeRuleSet":
        """Return a new rule set that also accepts strings in the given layouts.

        Layouts use ``strptime`` directives and accumulate across calls. The
        first matching layout wins, so list specific layouts before general
        ones.
        """
        added = (layout, *rest)
        return self._derive(
            values_token("WithLayouts", added),
            layouts=added + self._options.layouts,
        )

    def with_output_layout(self, layout: str) -> "TimeRuleSet":
        """Return a rule set that formats text output with ``layout``.

        Returns this rule set unchanged if it already uses that layout.
        """
        if not layout:
            raise RuleConfigurationError(
                "Output layout cannot be empty",
                builder="with_output_layout",
                rule_set=self.describe(),
            )
        if self._options.output_layout == layout:
            return self
        return self._derive(
            token("WithOutputLayout", quote(layout)),
            Conflict.OUTPUT_LAYOUT,
            output_layout=layout,
        )

    def with_min_diff(self, minimum: timedelta) -> "TimeRuleSet":
        """Require times at least ``minimum`` after the current time.

        A negative duration allows times in the past, e.g.
        ``with_min_diff(-timedelta(days=1))`` accepts anything from one day
        ago onwards. The current time is read once per apply call.
        """
        return self.with_rule(MinDiffRule(minimum))

    def with_max_diff(self, maximum: timedelta) -> "TimeRuleSet":
        """Require times at most ``maximum`` after the current time."""
        return self.with_rule(MaxDiffRule(maximum))

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        if item.kind is InputKind.NATIVE:
            return Coerced(item.value)
        if item.kind is InputKind.STRING:
            parsed = parse_time(item.value, self._options.layouts)
            if parsed is None:
                return ctx.type_violation(self.target_name, item.type_name)
            value, layout = parsed
            return Coerced(value, layout)
        return ctx.type_violation(self.target_name, item.type_name)

    def _bind(self, ctx: RuleContext, sink: Sink, value: datetime, coerced: Coerced) -> Any:
        if sink.kind is SinkKind.TARGET:
            return value
        if sink.kind is SinkKind.TEXT:
            layout = self._options.output_layout or coerced.source or DEFAULT_TIME_LAYOUT
            return format_time(value, layout)
        return self._unsupported_sink(ctx, sink)


_ROOT = TimeRuleSet()


def Time() -> TimeRuleSet:
    """Rule set for ``datetime`` values."""
    return _ROOT
