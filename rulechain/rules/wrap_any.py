"""Type-erasing adapter for rule sets.

AnyRuleSet lets a structure validator hold rule sets of different value
families behind one interface. It keeps only a reference to the wrapped
rule set and forwards every call to it.
"""

from typing import TYPE_CHECKING, Any

from rulechain.binding import Output
from rulechain.core.context import RuleContext
from rulechain.core.violations import Violation

if TYPE_CHECKING:
    from rulechain.core.chain import RuleSet
    from rulechain.result import ValidationResult


class AnyRuleSet:
    """Forwards apply, validate, required and describe to a wrapped rule set.

    Example:
        >>> fields = {"age": Int().with_min(0).any(), "name": String().with_required().any()}
        >>> fields["name"].is_required()
        True
        >>> str(fields["age"])
        'IntRuleSet[int].WithMin(0).Any()'
    """

    __slots__ = ("_inner",)

    def __init__(self, inner: "RuleSet[Any]") -> None:
        self._inner = inner

    @property
    def inner(self) -> "RuleSet[Any]":
        return self._inner

    def apply(self, value: Any, output: Output, ctx: RuleContext | None = None) -> list[Violation]:
        return self._inner.apply(value, output, ctx)

    def validate(self, value: Any, ctx: RuleContext | None = None) -> "ValidationResult":
        return self._inner.validate(value, ctx)

    def is_required(self) -> bool:
        return self._inner.is_required()

    def with_required(self) -> "AnyRuleSet":
        return AnyRuleSet(self._inner.with_required())

    def with_nil(self) -> "AnyRuleSet":
        return AnyRuleSet(self._inner.with_nil())

    def any(self) -> "AnyRuleSet":
        return self

    def describe(self) -> str:
        return f"{self._inner.describe()}.Any()"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<AnyRuleSet {self.describe()}>"
