"""Typed value validation with immutable rule-set chains.

Build a rule set for a value family with chained builder calls, then apply it
to input of any type. The input is coerced to the family's type, every rule
runs, and all violations are reported together.

Example:
    >>> from rulechain import Int, Output
    >>> age = Int().with_min(0).with_max(150)
    >>> out = Output()
    >>> age.apply("42", out)
    []
    >>> out.value
    42
    >>> [v.code for v in age.apply(-1, out)]
    [<ErrorCode.MIN: 'min'>]
"""

from rulechain.binding import Output, SinkKind
from rulechain.coercion.temporal import DEFAULT_TIME_LAYOUT, RFC3339, RFC3339_MICRO
from rulechain.core.chain import Conflict, RuleSet
from rulechain.core.context import RuleContext
from rulechain.core.exceptions import RuleConfigurationError, RulechainError, ValidationError
from rulechain.core.protocols import Mutated, Rule
from rulechain.core.rounding import Rounding
from rulechain.core.violations import ErrorCode, ErrorConfig, ErrorType, MessageCatalog, Violation
from rulechain.result import ValidationResult
from rulechain.rules.booleans import Bool, BoolRuleSet
from rulechain.rules.custom import FuncRule, RuleBase, rule_func
from rulechain.rules.durations import Duration, DurationRuleSet
from rulechain.rules.numbers import (
    Float32,
    Float64,
    FloatRuleSet,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    IntRuleSet,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from rulechain.rules.strings import String, StringRuleSet
from rulechain.rules.times import Time, TimeRuleSet
from rulechain.rules.wrap_any import AnyRuleSet

__version__ = "0.1.0"

__all__ = [
    "AnyRuleSet",
    "Bool",
    "BoolRuleSet",
    "Conflict",
    "DEFAULT_TIME_LAYOUT",
    "Duration",
    "DurationRuleSet",
    "ErrorCode",
    "ErrorConfig",
    "ErrorType",
    "Float32",
    "Float64",
    "FloatRuleSet",
    "FuncRule",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntRuleSet",
    "MessageCatalog",
    "Mutated",
    "Output",
    "RFC3339",
    "RFC3339_MICRO",
    "Rounding",
    "Rule",
    "RuleBase",
    "RuleConfigurationError",
    "RuleContext",
    "RuleSet",
    "RulechainError",
    "SinkKind",
    "String",
    "StringRuleSet",
    "Time",
    "TimeRuleSet",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "ValidationError",
    "ValidationResult",
    "Violation",
    "rule_func",
]
