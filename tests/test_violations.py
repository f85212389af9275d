"""Tests for violations, message catalogs, error overrides and paths."""

from dataclasses import replace

import pytest

from rulechain import (
    ErrorCode,
    ErrorConfig,
    ErrorType,
    Int,
    MessageCatalog,
    RuleContext,
    String,
    Violation,
)


class TestErrorCode:
    def test_only_internal_is_internal(self) -> None:
        assert ErrorCode.INTERNAL.error_type is ErrorType.INTERNAL
        assert all(
            code.error_type is ErrorType.VALIDATION
            for code in ErrorCode
            if code is not ErrorCode.INTERNAL
        )


class TestMessageCatalog:
    def test_default_messages(self) -> None:
        catalog = MessageCatalog()
        assert catalog.short(ErrorCode.MIN) == "below minimum"
        assert catalog.long(ErrorCode.MIN, (3,)) == "must be at least 3"
        assert catalog.long(ErrorCode.TYPE, ("int", "string")) == "expected int but got string"

    def test_partial_override_falls_back_to_defaults(self) -> None:
        catalog = MessageCatalog({ErrorCode.MIN: ("te klein", "minimaal {0}")})
        assert catalog.long(ErrorCode.MIN, (3,)) == "minimaal 3"
        assert catalog.long(ErrorCode.MAX, (3,)) == "must be at most 3"

    def test_missing_params_leave_template_unformatted(self) -> None:
        assert MessageCatalog().long(ErrorCode.MIN) == "must be at least {0}"

    def test_catalog_from_context(self) -> None:
        ctx = RuleContext(catalog=MessageCatalog({ErrorCode.MIN: ("te klein", "minimaal {0}")}))
        violation = Int().with_min(3).validate(1, ctx).first()
        assert violation.message == "minimaal 3"
        assert violation.short == "te klein"
        assert violation.params == ("3",)


class TestViolation:
    def test_format_with_and_without_path(self) -> None:
        assert Violation(ErrorCode.MIN, "too small").format() == "too small"
        assert str(Violation(ErrorCode.MIN, "too small", path="/age")) == "/age: too small"

    def test_is_internal(self) -> None:
        assert Violation(ErrorCode.INTERNAL, "boom").is_internal()
        assert not Violation(ErrorCode.RANGE, "big").is_internal()


class TestPaths:
    def test_nested_path(self) -> None:
        ctx = RuleContext().with_path("items").with_index(2).with_path("price")
        violation = Int().validate("x", ctx).first()
        assert violation.path == "/items/2/price"

    def test_segments_are_escaped(self) -> None:
        ctx = RuleContext().with_path("a/b").with_path("c~d")
        assert ctx.path == "/a~1b/c~0d"

    def test_root_path_is_empty(self) -> None:
        assert Int().validate("x").first().path == ""


class TestErrorConfig:
    def test_message_override(self) -> None:
        violation = Int().with_min(3).with_error_message("small", "too small").validate(1).first()
        assert violation.message == "too small"
        assert violation.short == "small"
        assert violation.code is ErrorCode.MIN

    def test_override_applies_to_coercion_errors(self) -> None:
        violation = Int().with_error_message("nope", "not a number").validate("abc").first()
        assert violation.code is ErrorCode.TYPE
        assert violation.message == "not a number"

    def test_code_override(self) -> None:
        violation = Int().with_max(1).with_error_code(ErrorCode.FORBIDDEN).validate(2).first()
        assert violation.code is ErrorCode.FORBIDDEN

    def test_latest_override_wins(self) -> None:
        chain = Int().with_min(3).with_error_message("a", "first").with_error_message("b", "second")
        assert chain.validate(1).first().message == "second"
        assert chain.describe() == 'IntRuleSet[int].WithMin(3).WithErrorMessage("b", "second")'

    def test_meta_accumulates(self) -> None:
        chain = Int().with_min(3).with_error_meta("a", 1).with_error_meta("b", 2)
        assert chain.validate(1).first().meta == {"a": 1, "b": 2}

    def test_uris(self) -> None:
        chain = (
            String()
            .with_min_len(2)
            .with_docs_uri("https://example.com/docs")
            .with_trace_uri("https://example.com/trace")
        )
        violation = chain.validate("a").first()
        assert violation.docs_uri == "https://example.com/docs"
        assert violation.trace_uri == "https://example.com/trace"

    def test_callback_runs_last(self) -> None:
        def shout(ctx: RuleContext, violation: Violation) -> Violation:
            return replace(violation, message=violation.message.upper())

        chain = Int().with_min(3).with_error_message("small", "too small").with_error_callback(shout)
        assert chain.validate(1).first().message == "TOO SMALL"

    def test_callback_receives_context(self) -> None:
        seen: list[str] = []

        def record(ctx: RuleContext, violation: Violation) -> Violation:
            seen.append(ctx.path)
            return violation

        Int().with_min(3).with_error_callback(record).validate(1, RuleContext().with_path("n"))
        assert seen == ["/n"]

    def test_apply_without_overrides_returns_same_violation(self) -> None:
        violation = Violation(ErrorCode.MIN, "too small")
        assert ErrorConfig().apply(violation) is violation

    @pytest.mark.parametrize(
        ("config", "field", "expected"),
        [
            (ErrorConfig(short="s"), "short", "s"),
            (ErrorConfig(long="l"), "message", "l"),
            (ErrorConfig(code=ErrorCode.RANGE), "code", ErrorCode.RANGE),
            (ErrorConfig(docs_uri="d"), "docs_uri", "d"),
            (ErrorConfig(trace_uri="t"), "trace_uri", "t"),
        ],
    )
    def test_apply_single_field(self, config: ErrorConfig, field: str, expected: object) -> None:
        violation = config.apply(Violation(ErrorCode.MIN, "too small"))
        assert getattr(violation, field) == expected
