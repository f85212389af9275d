"""Builders shared by every value family.

ValueRuleSet adds the comparison, membership and custom-rule builders to the
generic chain. Families only describe how to check a builder argument
(_check_value), how to render one in the debug string (_render) and, where
needed, how to make values comparable (_key).
"""

from collections.abc import Callable
from typing import Any, TypeVar

from rulechain.core.chain import RuleSet
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError
from rulechain.core.labels import display
from rulechain.rules.bounds import MaxExclusiveRule, MaxRule, MinExclusiveRule, MinRule, identity
from rulechain.rules.custom import FuncRule, RuleOutcome
from rulechain.rules.values import ValuesRule

T = TypeVar("T")
VS = TypeVar("VS", bound="ValueRuleSet[Any]")


class ValueRuleSet(RuleSet[T]):
    """Rule set with min/max, allowed/rejected value and custom-rule builders."""

    __slots__ = ()

    def _check_value(self, builder: str, value: Any) -> T:
        """Validate a builder argument, returning it in the target type.

        Raises:
            RuleConfigurationError: If the argument has the wrong type
        """
        if not isinstance(value, self.native) or isinstance(value, bool):
            raise RuleConfigurationError(
                f"{builder} expects {self.target_name}, got {type(value).__name__}",
                builder=builder,
                rule_set=self.describe(),
                value=value,
            )
        return value

    def _render(self, value: T) -> str:
        return display(value)

    _key = staticmethod(identity)

    def with_min(self: VS, value: T) -> VS:
        """Require values greater than or equal to ``value``.

        Replaces any earlier with_min or with_min_exclusive.
        """
        return self.with_rule(MinRule(self._check_value("with_min", value), self._render, self._key))

    def with_max(self: VS, value: T) -> VS:
        """Require values less than or equal to ``value``.

        Replaces any earlier with_max or with_max_exclusive.
        """
        return self.with_rule(MaxRule(self._check_value("with_max", value), self._render, self._key))

    def with_min_exclusive(self: VS, value: T) -> VS:
        return self.with_rule(
            MinExclusiveRule(
                self._check_value("with_min_exclusive", value), self._render, self._key
            )
        )

    def with_max_exclusive(self: VS, value: T) -> VS:
        return self.with_rule(
            MaxExclusiveRule(
                self._check_value("with_max_exclusive", value), self._render, self._key
            )
        )

    def with_range(self: VS, minimum: T, maximum: T) -> VS:
        """Shorthand for ``with_min(minimum).with_max(maximum)``.

        Raises:
            RuleConfigurationError: If minimum is not less than maximum
        """
        minimum = self._check_value("with_range", minimum)
        maximum = self._check_value("with_range", maximum)
        if self._key(minimum) >= self._key(maximum):
            raise RuleConfigurationError(
                "Range minimum must be less than maximum",
                builder="with_range",
                rule_set=self.describe(),
                minimum=minimum,
                maximum=maximum,
            )
        return self.with_min(minimum).with_max(maximum)

    def with_allowed_values(self: VS, value: T, *rest: T) -> VS:
        """Only allow the given values.

        Values accumulate: the values of an earlier with_allowed_values call
        are merged into the new rule, which replaces the earlier one.
        """
        values = [self._check_value("with_allowed_values", v) for v in (value, *rest)]
        existing = self.find_rule(lambda rule: isinstance(rule, ValuesRule) and rule.allow)
        if existing is not None:
            values.extend(existing.values)
        return self.with_rule(ValuesRule(values, True, self._render, self._key))

    def with_rejected_values(self: VS, value: T, *rest: T) -> VS:
        """Reject the given values. Each call adds a separate rule."""
        values = [self._check_value("with_rejected_values", v) for v in (value, *rest)]
        return self.with_rule(ValuesRule(values, False, self._render, self._key))

    def with_rule_func(self: VS, func: Callable[[RuleContext, T], RuleOutcome]) -> VS:
        """Append a rule backed by a plain function ``func(ctx, value)``."""
        return self.with_rule(FuncRule(func))
