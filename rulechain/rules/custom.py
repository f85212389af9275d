"""Custom rule helpers.

This module provides two ways to write rules that plug into any rule set:

- RuleBase: an abstract base class with sensible defaults for replaces and
  describe, so a subclass only has to implement evaluate
- rule_func / FuncRule: adapt a plain function ``fn(ctx, value)``

Example:
    >>> @rule_func
    ... def even(ctx, value):
    ...     if value % 2:
    ...         return [ctx.violation(ErrorCode.UNEXPECTED, message="must be even")]
    ...     return []
    >>>
    >>> Int().with_rule(even).describe()
    'IntRuleSet[int].WithRuleFunc(<function>)'
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from functools import update_wrapper
from typing import Any

from rulechain.core.context import RuleContext
from rulechain.core.protocols import Mutated
from rulechain.core.violations import Violation

RuleOutcome = Sequence[Violation] | Mutated | None


class RuleBase(ABC):
    """Base class for custom rules.

    Subclasses implement evaluate. By default a rule replaces nothing and
    describes itself as ``WithRule(<ClassName>)``.

    Example:
        >>> class NonZero(RuleBase):
        ...     def evaluate(self, ctx, value):
        ...         if value == 0:
        ...             return [ctx.violation(ErrorCode.FORBIDDEN)]
        ...         return []
        ...
        >>> Float64().with_rule(NonZero()).describe()
        'FloatRuleSet[float64].WithRule(NonZero)'
    """

    @abstractmethod
    def evaluate(self, ctx: RuleContext, value: Any) -> RuleOutcome:
        """Check a value and return its violations."""

    def replaces(self, other: Any) -> bool:
        return False

    def describe(self) -> str:
        return f"WithRule({type(self).__name__})"

    def __str__(self) -> str:
        return self.describe()


class FuncRule(RuleBase):
    """A rule backed by a plain function.

    The function receives the context and the value, and returns a sequence
    of violations, a Mutated result, or None for no violations.
    """

    def __init__(self, func: Callable[[RuleContext, Any], RuleOutcome]) -> None:
        self.func = func
        update_wrapper(self, func)

    def evaluate(self, ctx: RuleContext, value: Any) -> RuleOutcome:
        return self.func(ctx, value)

    def describe(self) -> str:
        return "WithRuleFunc(<function>)"

    def __call__(self, ctx: RuleContext, value: Any) -> RuleOutcome:
        return self.func(ctx, value)


def rule_func(func: Callable[[RuleContext, Any], RuleOutcome]) -> FuncRule:
    """Decorator turning a function into a rule.

    Args:
        func: Function taking ``(ctx, value)`` and returning violations

    Returns:
        A FuncRule that can be passed to ``with_rule``.
    """
    return FuncRule(func)
