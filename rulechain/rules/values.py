"""Allowed and rejected value rules."""

from collections.abc import Callable, Iterable
from typing import Any

from rulechain.core.context import RuleContext
from rulechain.core.labels import display, values_token
from rulechain.core.violations import ErrorCode, Violation
from rulechain.rules.bounds import identity
from rulechain.rules.custom import RuleBase


class ValuesRule(RuleBase):
    """Membership rule over a sorted, de-duplicated set of values.

    An allow-list reports NOT_ALLOWED for values outside the set and replaces
    any earlier allow-list; the builder merges the earlier values in first. A
    reject-list reports FORBIDDEN for values inside the set and never
    replaces anything, so reject-lists accumulate.

    Values are sorted and looked up by ``key(value)``.
    """

    def __init__(
        self,
        values: Iterable[Any],
        allow: bool,
        render: Callable[[Any], str] = display,
        key: Callable[[Any], Any] = identity,
    ) -> None:
        self.values = tuple(sorted(set(values), key=key))
        self.allow = allow
        self.render = render
        self.key = key
        self._lookup = frozenset(key(v) for v in self.values)

    def evaluate(self, ctx: RuleContext, value: Any) -> list[Violation]:
        found = self.key(value) in self._lookup
        if self.allow and not found:
            return [ctx.violation(ErrorCode.NOT_ALLOWED)]
        if not self.allow and found:
            return [ctx.violation(ErrorCode.FORBIDDEN)]
        return []

    def replaces(self, other: Any) -> bool:
        return self.allow and isinstance(other, ValuesRule) and other.allow

    def describe(self) -> str:
        name = "WithAllowedValues" if self.allow else "WithRejectedValues"
        return values_token(name, self.values, self.render)
