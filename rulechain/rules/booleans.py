"""Boolean rule set.

Example:
    >>> Bool().validate("true").value
    True
    >>> Bool().validate(0).value
    False
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rulechain.binding import Sink, SinkKind
from rulechain.coercion.inputs import Input, InputKind
from rulechain.core.chain import Coerced, Conflict, Options, RuleSet
from rulechain.core.context import RuleContext
from rulechain.core.violations import Violation
from rulechain.rules.custom import FuncRule, RuleOutcome

_TRUE = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE = frozenset({"0", "f", "F", "false", "FALSE", "False"})


@dataclass(frozen=True)
class BoolOptions(Options):
    strict: bool = False


def parse_bool(text: str) -> bool | None:
    """Parse the spellings accepted for booleans, or return None."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


class BoolRuleSet(RuleSet[bool]):
    """Rule set for ``bool`` values.

    Without strict mode, strings such as ``"true"`` or ``"0"`` are parsed and
    numbers are true when non-zero.
    """

    __slots__ = ()

    native = (bool,)

    def __init__(self) -> None:
        super().__init__(BoolOptions(), "BoolRuleSet")

    @property
    def target_name(self) -> str:
        return "bool"

    def with_strict(self) -> "BoolRuleSet":
        """Return a new rule set that only accepts ``bool`` input."""
        return self._derive("WithStrict()", Conflict.STRICT, strict=True)

    def with_rule_func(self, func: Callable[[RuleContext, bool], RuleOutcome]) -> "BoolRuleSet":
        return self.with_rule(FuncRule(func))

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        if item.kind is InputKind.NATIVE:
            return Coerced(item.value)
        if self._options.strict:
            return ctx.type_violation(self.target_name, item.type_name)
        if item.kind is InputKind.STRING:
            parsed = parse_bool(item.value)
            if parsed is None:
                return ctx.type_violation(self.target_name, item.type_name)
            return Coerced(parsed)
        if item.kind in (InputKind.INTEGER, InputKind.FLOAT):
            return Coerced(item.value != 0)
        return ctx.type_violation(self.target_name, item.type_name)

    def _bind(self, ctx: RuleContext, sink: Sink, value: bool, coerced: Coerced) -> Any:
        if sink.kind is SinkKind.TARGET:
            return value
        if sink.kind is SinkKind.TEXT:
            return "true" if value else "false"
        return self._unsupported_sink(ctx, sink)


_ROOT = BoolRuleSet()


def Bool() -> BoolRuleSet:
    """Rule set for ``bool`` values."""
    return _ROOT
