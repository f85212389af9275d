"""Tests for the type-erasing AnyRuleSet adapter."""

from rulechain import AnyRuleSet, ErrorCode, Int, Output, RuleContext, String


class TestAnyRuleSet:
    def test_describe(self) -> None:
        wrapped = Int().with_min(0).any()
        assert wrapped.describe() == "IntRuleSet[int].WithMin(0).Any()"
        assert str(wrapped) == "IntRuleSet[int].WithMin(0).Any()"
        assert repr(wrapped) == "<AnyRuleSet IntRuleSet[int].WithMin(0).Any()>"

    def test_forwards_apply(self) -> None:
        output = Output()
        assert Int().with_min(0).any().apply("7", output) == []
        assert output.value == 7

    def test_forwards_validate_with_context(self) -> None:
        result = Int().with_min(0).any().validate(-1, RuleContext().with_path("age"))
        assert result.first().path == "/age"
        assert result.first().code is ErrorCode.MIN

    def test_required_and_nil(self) -> None:
        wrapped = String().any()
        assert not wrapped.is_required()
        required = wrapped.with_required()
        assert isinstance(required, AnyRuleSet)
        assert required.is_required()
        assert required.inner.describe() == "StringRuleSet.WithRequired()"
        assert wrapped.with_nil().validate(None).is_valid

    def test_any_is_idempotent(self) -> None:
        wrapped = Int().any()
        assert wrapped.any() is wrapped

    def test_heterogeneous_fields(self) -> None:
        fields = {"age": Int().with_min(0).any(), "name": String().with_min_len(1).any()}
        record = {"age": "41", "name": ""}
        ctx = RuleContext()
        failed = {
            name: rule_set.validate(record[name], ctx.with_path(name)).violations
            for name, rule_set in fields.items()
        }
        assert failed["age"] == []
        assert [v.path for v in failed["name"]] == ["/name"]
