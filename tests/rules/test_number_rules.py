"""Tests for integer and float rule sets."""

import ctypes
import math

import pytest

from rulechain import (
    ErrorCode,
    Float32,
    Float64,
    Int,
    Int8,
    IntRuleSet,
    Output,
    Rounding,
    RuleConfigurationError,
    Uint,
    Uint8,
)
from rulechain.coercion.kinds import FLOAT64


def codes(result) -> list[ErrorCode]:
    return [violation.code for violation in result.violations]


class TestIntBounds:
    def test_min_and_max(self) -> None:
        chain = Int().with_min(3).with_max(10)
        assert codes(chain.validate(2)) == [ErrorCode.MIN]
        assert chain.validate(2).first().message == "must be at least 3"
        assert chain.validate(3).value == 3
        assert codes(chain.validate(11)) == [ErrorCode.MAX]

    def test_exclusive_bounds(self) -> None:
        chain = Int().with_min_exclusive(3).with_max_exclusive(10)
        assert codes(chain.validate(3)) == [ErrorCode.MIN_EXCLUSIVE]
        assert codes(chain.validate(10)) == [ErrorCode.MAX_EXCLUSIVE]
        assert chain.validate(4).is_valid

    def test_range(self) -> None:
        assert Int().with_range(1, 5).describe() == "IntRuleSet[int].WithMin(1).WithMax(5)"
        with pytest.raises(RuleConfigurationError):
            Int().with_range(5, 5)

    def test_allowed_and_rejected(self) -> None:
        allowed = Int().with_allowed_values(1, 5)
        assert codes(allowed.validate(3)) == [ErrorCode.NOT_ALLOWED]
        assert allowed.validate(5).is_valid
        rejected = Int().with_rejected_values(3)
        assert codes(rejected.validate(3)) == [ErrorCode.FORBIDDEN]

    def test_builder_argument_checks(self) -> None:
        with pytest.raises(RuleConfigurationError):
            Int().with_min("3")
        with pytest.raises(RuleConfigurationError):
            Int().with_min(True)
        with pytest.raises(RuleConfigurationError):
            Int8().with_max(1000)
        with pytest.raises(RuleConfigurationError):
            IntRuleSet(FLOAT64)


class TestIntCoercion:
    def test_base_16(self) -> None:
        assert Int().with_base(16).validate("BeEf").value == 48879

    @pytest.mark.parametrize(("base", "text"), [(16, "0x1F"), (8, "0o17"), (2, "0b101")])
    def test_fixed_base_rejects_prefix(self, base: int, text: str) -> None:
        result = Int().with_base(base).validate(text)
        assert codes(result) == [ErrorCode.TYPE]
        assert result.first().message == "expected int but got string"

    def test_base_0_infers_prefix(self) -> None:
        chain = Int().with_base(0)
        assert chain.validate("0x10").value == 16
        assert chain.validate("010").value == 8

    @pytest.mark.parametrize("base", [1, 37, -2])
    def test_invalid_base(self, base: int) -> None:
        with pytest.raises(RuleConfigurationError):
            Int().with_base(base)

    @pytest.mark.parametrize("value", [1024, ctypes.c_int16(1024), 1024.0, "1024"])
    def test_int8_out_of_range(self, value: object) -> None:
        result = Int8().validate(value)
        assert codes(result) == [ErrorCode.RANGE]
        assert result.first().message == "value is out of range for int8"

    def test_fixed_width_input(self) -> None:
        assert Int8().validate(ctypes.c_int64(100)).value == 100
        assert Uint().validate(ctypes.c_uint64(2**64 - 1)).value == 2**64 - 1

    def test_unsigned_rejects_negative(self) -> None:
        assert codes(Uint8().validate(-1)) == [ErrorCode.RANGE]
        assert codes(Uint().validate("-1")) == [ErrorCode.TYPE]

    def test_float_input(self) -> None:
        assert Int().validate(123.0).value == 123
        assert Int().validate(123 + 1e-10).value == 123
        result = Int().validate(123.12)
        assert codes(result) == [ErrorCode.TYPE]
        assert result.first().message == "expected int but got float64"

    @pytest.mark.parametrize(
        ("rounding", "value", "expected"),
        [
            (Rounding.DOWN, 2.9, 2),
            (Rounding.UP, 2.1, 3),
            (Rounding.HALF_UP, 2.5, 3),
            (Rounding.HALF_EVEN, 2.5, 2),
            (Rounding.HALF_EVEN, -2.5, -2),
        ],
    )
    def test_float_rounding(self, rounding: Rounding, value: float, expected: int) -> None:
        assert Int().with_rounding(rounding).validate(value).value == expected

    def test_rounded_value_is_range_checked(self) -> None:
        assert codes(Int8().with_rounding(Rounding.HALF_UP).validate(1024.6)) == [ErrorCode.RANGE]

    def test_non_finite_floats(self) -> None:
        assert codes(Int().validate(math.nan)) == [ErrorCode.TYPE]
        assert codes(Int().validate(math.inf)) == [ErrorCode.RANGE]

    def test_strings(self) -> None:
        assert Int().validate("12").value == 12
        result = Int().validate("abc")
        assert result.first().message == "expected int but got string"

    def test_bool_is_not_a_number(self) -> None:
        assert Int().validate(True).first().message == "expected int but got bool"

    def test_strict(self) -> None:
        chain = Int8().with_strict()
        assert chain.validate(5).value == 5
        assert chain.validate(ctypes.c_int8(5)).value == 5
        assert codes(chain.validate(ctypes.c_int16(5))) == [ErrorCode.TYPE]
        assert codes(chain.validate("5")) == [ErrorCode.TYPE]
        assert codes(chain.validate(5.0)) == [ErrorCode.TYPE]
        assert chain.describe() == "IntRuleSet[int8].WithStrict()"


class TestFloat:
    def test_rounding_half_even(self) -> None:
        assert Float64().with_rounding(Rounding.HALF_EVEN, 2).validate(124.125).value == 124.12
        assert Float64().with_rounding(Rounding.HALF_EVEN, 2).validate(124.115).value == 124.12

    def test_rounding_half_up(self) -> None:
        assert Float64().with_rounding(Rounding.HALF_UP, 2).validate(-124.125).value == -124.13

    def test_rounding_runs_before_rules(self) -> None:
        chain = Float64().with_rounding(Rounding.DOWN, 0).with_max(2.0)
        assert chain.validate(2.9).is_valid

    def test_negative_precision(self) -> None:
        with pytest.raises(RuleConfigurationError):
            Float64().with_rounding(Rounding.UP, -1)

    def test_integer_input(self) -> None:
        assert Float64().validate(3).value == 3.0
        assert codes(Float64().validate(2**53 + 1)) == [ErrorCode.RANGE]

    def test_string_input(self) -> None:
        assert Float64().validate("1.5").value == 1.5
        assert codes(Float64().validate("1e400")) == [ErrorCode.RANGE]
        assert Float64().validate("abc").first().message == "expected float64 but got string"

    def test_float32_requires_exact_values(self) -> None:
        assert codes(Float32().validate(0.1)) == [ErrorCode.RANGE]
        assert Float32().validate(0.5).value == 0.5
        assert Float32().validate(ctypes.c_float(0.1)).value == ctypes.c_float(0.1).value
        assert Float32().validate(2**24).value == float(2**24)
        assert codes(Float32().validate(2**24 + 1)) == [ErrorCode.RANGE]

    def test_strict(self) -> None:
        chain = Float32().with_strict()
        assert codes(chain.validate(ctypes.c_double(0.5))) == [ErrorCode.TYPE]
        assert codes(chain.validate(1)) == [ErrorCode.TYPE]
        assert chain.validate(ctypes.c_float(0.5)).value == 0.5

    def test_nan_passes_bounds(self) -> None:
        assert Float64().validate(math.nan).is_valid

    def test_describe(self) -> None:
        assert Float64().with_min(2.5).describe() == "FloatRuleSet[float64].WithMin(2.5)"
        assert Float64().with_min(3).describe() == "FloatRuleSet[float64].WithMin(3.0)"
        assert Float64().with_rounding(Rounding.HALF_EVEN, 2).describe() == (
            "FloatRuleSet[float64].WithRounding(HalfEven, 2)"
        )


class TestFloatText:
    def _text(self, chain, value: float) -> str:
        output = Output.text()
        assert chain.apply(value, output) == []
        return output.value

    def test_rounded_text(self) -> None:
        chain = Float64().with_rounding(Rounding.HALF_EVEN, 2)
        assert self._text(chain, 123.456) == "123.46"
        assert self._text(chain, 100.0) == "100"

    def test_fixed_output(self) -> None:
        chain = Float64().with_fixed_output(2)
        assert self._text(chain, 1.5) == "1.50"
        assert chain.describe() == "FloatRuleSet[float64].WithFixedOutput(2)"

    def test_default_text(self) -> None:
        assert self._text(Float64(), 0.1) == "0.1"

    def test_float32_text(self) -> None:
        chain = Float32().with_rounding(Rounding.HALF_EVEN, 1)
        assert self._text(chain, ctypes.c_float(123.456)) == "123.5"
