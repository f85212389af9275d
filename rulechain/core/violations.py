"""Violation records, error codes and message customisation.

A Violation is the unit of failure reported by a rule set. Violations are
plain data: rule sets return them in lists instead of raising, so that a
single apply call can report every independent problem with a value.

This module also defines:
- ErrorCode: the closed set of violation categories
- ErrorType: the coarse split between input problems and library defects
- MessageCatalog: code -> (short, long) message templates, replaceable per call
- ErrorConfig: per-rule-set overrides for code, messages, links, meta and a
  callback that can rewrite each violation
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Coarse classification of a violation.

    VALIDATION means the input is at fault. INTERNAL means the library or
    the caller's output sink is at fault and the input may be fine.
    """

    VALIDATION = "validation"
    INTERNAL = "internal"


class ErrorCode(Enum):
    """Category of a single violation."""

    UNKNOWN = "unknown"
    INTERNAL = "internal"
    TYPE = "type"
    RANGE = "range"
    REQUIRED = "required"
    NULL = "null"
    UNEXPECTED = "unexpected"
    MIN = "min"
    MAX = "max"
    MIN_EXCLUSIVE = "min_exclusive"
    MAX_EXCLUSIVE = "max_exclusive"
    MIN_LEN = "min_len"
    MAX_LEN = "max_len"
    PATTERN = "pattern"
    FORBIDDEN = "forbidden"
    NOT_ALLOWED = "not_allowed"

    @property
    def error_type(self) -> ErrorType:
        """Return whether this code signals bad input or an internal defect."""
        if self is ErrorCode.INTERNAL:
            return ErrorType.INTERNAL
        return ErrorType.VALIDATION


_DEFAULT_MESSAGES: dict[ErrorCode, tuple[str, str]] = {
    ErrorCode.UNKNOWN: ("unknown error", "an unknown error occurred"),
    ErrorCode.INTERNAL: ("internal error", "internal error: {0}"),
    ErrorCode.TYPE: ("invalid type", "expected {0} but got {1}"),
    ErrorCode.RANGE: ("out of range", "value is out of range for {0}"),
    ErrorCode.REQUIRED: ("required", "value is required"),
    ErrorCode.NULL: ("null not allowed", "value cannot be null"),
    ErrorCode.UNEXPECTED: ("unexpected value", "value was not expected"),
    ErrorCode.MIN: ("below minimum", "must be at least {0}"),
    ErrorCode.MAX: ("above maximum", "must be at most {0}"),
    ErrorCode.MIN_EXCLUSIVE: ("below minimum", "must be greater than {0}"),
    ErrorCode.MAX_EXCLUSIVE: ("above maximum", "must be less than {0}"),
    ErrorCode.MIN_LEN: ("too short", "must be at least {0} characters long"),
    ErrorCode.MAX_LEN: ("too long", "must be at most {0} characters long"),
    ErrorCode.PATTERN: ("invalid format", "value does not match the expected format"),
    ErrorCode.FORBIDDEN: ("forbidden", "value is forbidden"),
    ErrorCode.NOT_ALLOWED: ("not allowed", "value is not one of the allowed options"),
}


class MessageCatalog:
    """Short and long message templates keyed by error code.

    Long templates use ``str.format`` positional fields, filled from the
    violation's params. Codes missing from a custom catalog fall back to the
    default English text, so a partial translation is always usable.

    Example:
        >>> catalog = MessageCatalog({ErrorCode.MIN: ("te klein", "minimaal {0}")})
        >>> catalog.long(ErrorCode.MIN, (3,))
        'minimaal 3'
        >>> catalog.short(ErrorCode.MAX)
        'above maximum'
    """

    def __init__(self, messages: Mapping[ErrorCode, tuple[str, str]] | None = None) -> None:
        self._messages = dict(_DEFAULT_MESSAGES)
        if messages:
            self._messages.update(messages)

    def short(self, code: ErrorCode) -> str:
        return self._messages.get(code, _DEFAULT_MESSAGES[ErrorCode.UNKNOWN])[0]

    def long(self, code: ErrorCode, params: tuple[Any, ...] = ()) -> str:
        template = self._messages.get(code, _DEFAULT_MESSAGES[ErrorCode.UNKNOWN])[1]
        try:
            return template.format(*params)
        except (IndexError, KeyError):
            # Too few params for the template; show it unformatted.
            return template


DEFAULT_CATALOG = MessageCatalog()


@dataclass(frozen=True)
class Violation:
    """A single reason a value failed validation.

    Attributes:
        code: Category of the failure.
        message: Long, human-readable description.
        short: Short description suitable for compact displays.
        path: JSON-pointer-style location of the value ("" for the root).
        params: Values used to render the message (bounds, type names, ...).
        meta: Extra key/value data attached by an ErrorConfig.
        docs_uri: Optional link to documentation about this failure.
        trace_uri: Optional link to a trace or log for this failure.
    """

    code: ErrorCode
    message: str
    short: str = ""
    path: str = ""
    params: tuple[Any, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
    docs_uri: str | None = None
    trace_uri: str | None = None

    @property
    def error_type(self) -> ErrorType:
        return self.code.error_type

    def is_internal(self) -> bool:
        return self.code.error_type is ErrorType.INTERNAL

    def format(self) -> str:
        """Render as ``path: message``, or just the message at the root."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class ErrorConfig:
    """Overrides applied to every violation a rule set produces.

    Any field left as None keeps the value computed from the catalog. Meta
    entries are merged into the violation's meta. The callback, if set, is
    called last with the context and the finished violation, and its return
    value replaces the violation.
    """

    short: str | None = None
    long: str | None = None
    code: ErrorCode | None = None
    docs_uri: str | None = None
    trace_uri: str | None = None
    meta: tuple[tuple[str, Any], ...] = ()
    callback: Callable[[Any, Violation], Violation] | None = None

    def apply(self, violation: Violation) -> Violation:
        changes: dict[str, Any] = {}
        if self.code is not None:
            changes["code"] = self.code
        if self.short is not None:
            changes["short"] = self.short
        if self.long is not None:
            changes["message"] = self.long
        if self.docs_uri is not None:
            changes["docs_uri"] = self.docs_uri
        if self.trace_uri is not None:
            changes["trace_uri"] = self.trace_uri
        if self.meta:
            changes["meta"] = {**violation.meta, **dict(self.meta)}
        return replace(violation, **changes) if changes else violation
