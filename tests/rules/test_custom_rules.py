"""Tests for custom rules: RuleBase subclasses, rule_func and plain protocol objects."""

from typing import Any

import pytest

from rulechain import ErrorCode, FuncRule, Int, RuleBase, RuleContext, rule_func


class NonZero(RuleBase):
    def evaluate(self, ctx: RuleContext, value: Any):
        if value == 0:
            return [ctx.violation(ErrorCode.FORBIDDEN)]
        return []


class Parity:
    """Rule implemented without RuleBase; only the protocol methods."""

    def __init__(self, even: bool) -> None:
        self.even = even

    def evaluate(self, ctx: RuleContext, value: int):
        if (value % 2 == 0) != self.even:
            return [ctx.violation(ErrorCode.UNEXPECTED, message="wrong parity")]
        return []

    def replaces(self, other: Any) -> bool:
        return isinstance(other, Parity)

    def describe(self) -> str:
        return f"WithParity({'even' if self.even else 'odd'})"


class TestRuleBase:
    def test_defaults(self) -> None:
        rule = NonZero()
        assert rule.describe() == "WithRule(NonZero)"
        assert str(rule) == "WithRule(NonZero)"
        assert not rule.replaces(NonZero())

    def test_in_chain(self) -> None:
        chain = Int().with_rule(NonZero())
        assert chain.describe() == "IntRuleSet[int].WithRule(NonZero)"
        assert chain.validate(0).first().code is ErrorCode.FORBIDDEN

    def test_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            RuleBase()


class TestRuleFunc:
    def test_decorator(self) -> None:
        @rule_func
        def even(ctx: RuleContext, value: int):
            if value % 2:
                return [ctx.violation(ErrorCode.UNEXPECTED, message="must be even")]
            return None

        assert isinstance(even, FuncRule)
        assert even.__name__ == "even"
        assert Int().with_rule(even).validate(3).first().message == "must be even"
        assert Int().with_rule(even).validate(4).is_valid

    def test_with_rule_func(self) -> None:
        chain = Int().with_rule_func(lambda ctx, value: [ctx.violation(ErrorCode.UNEXPECTED)])
        assert chain.describe() == "IntRuleSet[int].WithRuleFunc(<function>)"
        assert chain.validate(1).first().message == "value was not expected"

    def test_func_rule_is_callable(self) -> None:
        rule = FuncRule(lambda ctx, value: [])
        assert rule(RuleContext(), 1) == []


class TestProtocolRules:
    def test_custom_replaces(self) -> None:
        chain = Int().with_rule(Parity(True)).with_min(0).with_rule(Parity(False))
        assert chain.describe() == "IntRuleSet[int].WithMin(0).WithParity(odd)"
        assert chain.validate(3).is_valid
        assert chain.validate(2).first().message == "wrong parity"
