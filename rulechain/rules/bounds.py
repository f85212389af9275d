"""Minimum and maximum rules.

These rules work for any ordered value type: numbers, strings (compared
lexically), durations and times. A new minimum replaces any earlier minimum,
inclusive or exclusive, and likewise for maximums.

A family can pass a ``key`` that maps values to a comparable form before
comparing, the way times read naive values as UTC.
"""

from abc import abstractmethod
from collections.abc import Callable
from typing import Any

from rulechain.core.context import RuleContext
from rulechain.core.labels import token
from rulechain.core.violations import ErrorCode, Violation
from rulechain.rules.custom import RuleBase


def identity(value: Any) -> Any:
    return value


class BoundRule(RuleBase):
    """Shared implementation of the four bound rules."""

    name: str = ""
    code: ErrorCode = ErrorCode.UNKNOWN
    side: str = ""

    def __init__(
        self,
        bound: Any,
        render: Callable[[Any], str] = str,
        key: Callable[[Any], Any] = identity,
    ) -> None:
        self.bound = bound
        self.render = render
        self.key = key

    @abstractmethod
    def violates(self, value: Any, bound: Any) -> bool:
        """Compare a keyed value against the keyed bound."""

    def evaluate(self, ctx: RuleContext, value: Any) -> list[Violation]:
        if self.violates(self.key(value), self.key(self.bound)):
            return [ctx.violation(self.code, self.render(self.bound))]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, BoundRule) and other.side == self.side

    def describe(self) -> str:
        return token(self.name, self.render(self.bound))


class MinRule(BoundRule):
    name = "WithMin"
    code = ErrorCode.MIN
    side = "min"

    def violates(self, value: Any, bound: Any) -> bool:
        return value < bound


class MinExclusiveRule(BoundRule):
    name = "WithMinExclusive"
    code = ErrorCode.MIN_EXCLUSIVE
    side = "min"

    def violates(self, value: Any, bound: Any) -> bool:
        return value <= bound


class MaxRule(BoundRule):
    name = "WithMax"
    code = ErrorCode.MAX
    side = "max"

    def violates(self, value: Any, bound: Any) -> bool:
        return value > bound


class MaxExclusiveRule(BoundRule):
    name = "WithMaxExclusive"
    code = ErrorCode.MAX_EXCLUSIVE
    side = "max"

    def violates(self, value: Any, bound: Any) -> bool:
        return value >= bound
