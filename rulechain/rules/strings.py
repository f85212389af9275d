"""String rule set.

Example:
    >>> slug = String().with_min_len(3).with_regexp(r"^[a-z0-9-]+$", "must be a slug")
    >>> [v.message for v in slug.validate("A").violations]
    ['must be a slug', 'must be at least 3 characters long']
"""

import re
from dataclasses import dataclass
from typing import Any

from rulechain.coercion.inputs import Input, InputKind
from rulechain.core.chain import Coerced, Conflict, Options
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError
from rulechain.core.labels import token, truncate
from rulechain.core.violations import ErrorCode, Violation
from rulechain.rules.common import ValueRuleSet
from rulechain.rules.custom import RuleBase


@dataclass(frozen=True)
class StringOptions(Options):
    strict: bool = False


class MinLenRule(RuleBase):
    """Requires at least ``minimum`` characters."""

    def __init__(self, minimum: int) -> None:
        self.minimum = minimum

    def evaluate(self, ctx: RuleContext, value: str) -> list[Violation]:
        if len(value) < self.minimum:
            return [ctx.violation(ErrorCode.MIN_LEN, self.minimum)]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, MinLenRule)

    def describe(self) -> str:
        return token("WithMinLen", str(self.minimum))


class MaxLenRule(RuleBase):
    """Allows at most ``maximum`` characters."""

    def __init__(self, maximum: int) -> None:
        self.maximum = maximum

    def evaluate(self, ctx: RuleContext, value: str) -> list[Violation]:
        if len(value) > self.maximum:
            return [ctx.violation(ErrorCode.MAX_LEN, self.maximum)]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, MaxLenRule)

    def describe(self) -> str:
        return token("WithMaxLen", str(self.maximum))


class RegexpRule(RuleBase):
    """Requires the pattern to match somewhere in the value.

    Regexp rules never replace each other, so several can be combined.
    """

    def __init__(self, pattern: re.Pattern[str], message: str | None = None) -> None:
        self.pattern = pattern
        self.message = message

    def evaluate(self, ctx: RuleContext, value: str) -> list[Violation]:
        if self.pattern.search(value) is None:
            return [ctx.violation(ErrorCode.PATTERN, self.pattern.pattern, message=self.message)]
        return []

    def describe(self) -> str:
        return token("WithRegexp", truncate(self.pattern.pattern))


def _float_text(value: float) -> str:
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


class StringRuleSet(ValueRuleSet[str]):
    """Rule set for ``str`` values."""

    __slots__ = ()

    native = (str,)

    def __init__(self) -> None:
        super().__init__(StringOptions(), "StringRuleSet")

    @property
    def target_name(self) -> str:
        return "string"

    def with_strict(self) -> "StringRuleSet":
        """Return a new rule set that only accepts ``str`` input."""
        return self._derive("WithStrict()", Conflict.STRICT, strict=True)

    def _check_length(self, builder: str, length: int) -> int:
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            raise RuleConfigurationError(
                "Length must be a non-negative integer",
                builder=builder,
                rule_set=self.describe(),
                length=length,
            )
        return length

    def with_min_len(self, minimum: int) -> "StringRuleSet":
        """Require at least ``minimum`` characters (code points)."""
        return self.with_rule(MinLenRule(self._check_length("with_min_len", minimum)))

    def with_max_len(self, maximum: int) -> "StringRuleSet":
        """Allow at most ``maximum`` characters (code points)."""
        return self.with_rule(MaxLenRule(self._check_length("with_max_len", maximum)))

    def with_regexp(self, pattern: "str | re.Pattern[str]", message: str | None = None) -> "StringRuleSet":
        """Require values matching ``pattern``.

        The pattern is searched for, not anchored; use ``^`` and ``$`` to
        match the whole value.

        Args:
            pattern: Regular expression source or compiled pattern
            message: Long message for violations, replacing the default

        Raises:
            RuleConfigurationError: If the pattern is empty or invalid
        """
        if isinstance(pattern, str):
            if not pattern:
                raise RuleConfigurationError(
                    "Pattern cannot be empty", builder="with_regexp", rule_set=self.describe()
                )
            try:
                pattern = re.compile(pattern)
            except re.error as exc:
                raise RuleConfigurationError(
                    f"Invalid pattern: {exc}",
                    builder="with_regexp",
                    rule_set=self.describe(),
                    pattern=pattern,
                ) from exc
        return self.with_rule(RegexpRule(pattern, message))

    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        if item.kind is InputKind.NATIVE:
            return Coerced(item.value)
        if self._options.strict:
            return ctx.type_violation(self.target_name, item.type_name)
        if item.kind is InputKind.INTEGER:
            return Coerced(str(item.value))
        if item.kind is InputKind.FLOAT:
            return Coerced(_float_text(item.value))
        return ctx.type_violation(self.target_name, item.type_name)


_ROOT = StringRuleSet()


def String() -> StringRuleSet:
    """Rule set for ``str`` values."""
    return _ROOT
