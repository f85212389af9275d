"""Rule protocol definitions.

This module defines the Rule protocol that every value rule must implement,
and the Mutated result a rule returns when it canonicalises the value it was
given.

Protocols:
    - Rule: Evaluates a typed value and reports violations

All implementations must:
    - Be immutable after construction (a rule may be shared by many chains)
    - Not mutate the value they are given
    - Be deterministic for a given value and context
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, TypeVar

if TYPE_CHECKING:
    from rulechain.core.context import RuleContext
    from rulechain.core.violations import Violation

T_contra = TypeVar("T_contra", contravariant=True)


class Mutated(NamedTuple):
    """Result of a rule that replaces the value it evaluated.

    The new value is passed to the rules that run after this one, but only
    when ``violations`` is empty.
    """

    value: Any
    violations: "Sequence[Violation]" = ()


class Rule(Protocol[T_contra]):
    """Protocol for value rules.

    A rule is the atomic unit of validation logic attached to a rule-set
    chain. It checks a value that has already been coerced to the chain's
    target type.

    Example:
        >>> class EvenRule:
        ...     def evaluate(self, ctx, value):
        ...         if value % 2:
        ...             return [ctx.violation(ErrorCode.UNEXPECTED, message="must be even")]
        ...         return []
        ...
        ...     def replaces(self, other):
        ...         return isinstance(other, EvenRule)
        ...
        ...     def describe(self):
        ...         return "WithRule(Even)"
        ...
        >>> Int().with_rule(EvenRule()).validate(3).is_valid
        False
    """

    def evaluate(self, ctx: "RuleContext", value: T_contra) -> "Sequence[Violation] | Mutated":
        """Check a value and report every problem found.

        Args:
            ctx: Context of the current apply call. Use ``ctx.violation`` to
                build violations so paths and error overrides are applied.
            value: Value already coerced to the chain's target type

        Returns:
            A (possibly empty) sequence of violations, or a Mutated result
            carrying a replacement value and its violations.
        """
        ...

    def replaces(self, other: Any) -> bool:
        """Return True if adding this rule should drop ``other`` from the chain.

        The relation is asymmetric: it is asked of the incoming rule about
        each rule already in the chain.
        """
        ...

    def describe(self) -> str:
        """Return the token shown for this rule in the chain's debug string."""
        ...
