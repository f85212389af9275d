"""Custom exception classes for rulechain error handling.

This module defines the exception hierarchy for the rule-set toolkit:
- RuleConfigurationError: Invalid or unsatisfiable builder calls
- ValidationError: Raised on request when a validation produced violations

All exceptions inherit from RulechainError for consistent error handling.

Note that violations found while applying a rule set are never raised by the
rule set itself. They are returned as data (see rulechain.core.violations) so
that every failure can be reported in a single pass. Exceptions are reserved
for programmer errors and for callers that explicitly ask for one.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rulechain.core.violations import Violation


class RulechainError(Exception):
    """Base exception for all rulechain errors.

    Provides a common base class for all custom exceptions in the package,
    enabling catch-all error handling when needed.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (rule set,
                    builder name, offending arguments, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class RuleConfigurationError(RulechainError):
    """Exception raised when a rule set is built with invalid arguments.

    Raised immediately by builder methods whose arguments can never be
    satisfied or are meaningless, e.g. ``with_range(10, 3)`` or
    ``with_base(1)``. The error is raised at construction time rather than
    deferred to evaluation because it describes a broken rule set, not bad
    input.

    Context typically includes:
        - builder: Name of the builder method that was called
        - rule_set: Debug string of the chain the builder was called on
        - argument values that were rejected
    """

    def __init__(
        self,
        message: str,
        builder: str | None = None,
        rule_set: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize configuration error with builder details.

        Args:
            message: Human-readable error description
            builder: Name of the builder method that rejected its arguments
            rule_set: Debug string of the rule set being extended
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if builder is not None:
            context["builder"] = builder
        if rule_set is not None:
            context["rule_set"] = rule_set
        context.update(extra_context)

        super().__init__(message, context)


class ValidationError(RulechainError):
    """Exception raised when a caller asks for a failed validation to raise.

    Wraps the complete list of violations so nothing is lost by converting
    the result into an exception. The message follows the "first and count"
    format: the first violation's message, followed by ``(and N more)`` when
    there are more.

    Context typically includes:
        - path: Path of the first violation, if any
        - code: Error code of the first violation
        - rule_set: Debug string of the rule set that was applied
    """

    def __init__(
        self,
        violations: "list[Violation]",
        rule_set: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error from a list of violations.

        Args:
            violations: All violations produced by the validation (non-empty)
            rule_set: Debug string of the rule set that produced them
            **extra_context: Additional context information
        """
        self.violations = list(violations)

        context: dict[str, Any] = {}
        if self.violations:
            first = self.violations[0]
            if first.path:
                context["path"] = first.path
            context["code"] = first.code.value
        if rule_set is not None:
            context["rule_set"] = rule_set
        context.update(extra_context)

        super().__init__(_summarize(self.violations), context)

    def first(self) -> "Violation | None":
        """Return the first violation, or None if the list is empty."""
        return self.violations[0] if self.violations else None

    def for_path(self, path: str) -> "list[Violation]":
        """Return the violations reported for an exact path."""
        return [violation for violation in self.violations if violation.path == path]


def _summarize(violations: "list[Violation]") -> str:
    if not violations:
        return "validation failed"
    message = violations[0].message
    if len(violations) > 1:
        message = f"{message} (and {len(violations) - 1} more)"
    return message
