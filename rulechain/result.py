"""ValidationResult data structure.

This module defines the ValidationResult class returned by a rule set's
validate and evaluate methods. It holds the coerced value together with every
violation found, and provides methods for checking the outcome, formatting
it, combining several results and converting a failure into an exception.
"""

from dataclasses import dataclass, field
from typing import Any

from rulechain.core.exceptions import ValidationError
from rulechain.core.violations import Violation


@dataclass
class ValidationResult:
    """Outcome of validating one value against a rule set.

    The is_valid field indicates overall success (True if there are no
    violations). When coercion succeeded, value holds the coerced value even
    if rules reported violations; it should only be trusted when is_valid is
    True. When coercion failed, value is None.

    Attributes:
        is_valid: True if validation passed (no violations).
        value: The coerced (and possibly rounded) value.
        violations: Every violation found, in rule-execution order.
        rule_set: Debug string of the rule set that produced this result.
        metadata: Additional context, e.g. the number of combined results.

    Example:
        >>> result = Int().with_min(3).with_max(10).validate(2)
        >>> result.is_valid
        False
        >>> print(result.format())
        [IntRuleSet[int].WithMin(3).WithMax(10)] Validation failed
        Violations:
          - must be at least 3
    """

    is_valid: bool
    value: Any = None
    violations: list[Violation] = field(default_factory=list)
    rule_set: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def has_errors(self) -> bool:
        """Check if validation reported any violations.

        Returns:
            True if there are any violations, False otherwise.
        """
        return len(self.violations) > 0

    def first(self) -> Violation | None:
        """Return the first violation, or None if validation passed."""
        return self.violations[0] if self.violations else None

    def for_path(self, path: str) -> list[Violation]:
        """Return the violations reported for an exact path."""
        return [violation for violation in self.violations if violation.path == path]

    def internal(self) -> list[Violation]:
        """Return the violations that signal a defect rather than bad input."""
        return [violation for violation in self.violations if violation.is_internal()]

    def format(self) -> str:
        """Format result as human-readable string.

        Produces a formatted string showing the rule set, validation status
        and all violations. The format is designed for console output and
        log files.

        Returns:
            Formatted string with rule set, status and violations.
        """
        lines = []

        status = "passed" if self.is_valid else "failed"
        lines.append(f"[{self.rule_set}] Validation {status}")

        if self.has_errors():
            lines.append("Violations:")
            for violation in self.violations:
                lines.append(f"  - {violation.format()}")

        return "\n".join(lines)

    def raise_for_violations(self) -> None:
        """Raise ValidationError if validation reported any violations.

        Raises:
            ValidationError: Carrying every violation of this result
        """
        if self.violations:
            raise ValidationError(self.violations, rule_set=self.rule_set or None)

    def unwrap(self) -> Any:
        """Return the value, or raise ValidationError if validation failed."""
        self.raise_for_violations()
        return self.value

    @staticmethod
    def combine(results: list["ValidationResult"]) -> "ValidationResult":
        """Combine multiple results into an aggregated result.

        The combined result:
        - is_valid is False if any individual result has violations
        - violations contains all violations from all results, in order
        - value is the list of individual values
        - rule_set is "combined"
        - metadata contains the count of combined results

        This is useful when a caller validates several fields separately
        (typically with contexts carrying different paths) and wants a
        single report.

        Args:
            results: List of ValidationResults to combine

        Returns:
            Aggregated ValidationResult containing all violations

        Example:
            >>> ctx = RuleContext()
            >>> combined = ValidationResult.combine([
            ...     Int().validate("x", ctx.with_path("age")),
            ...     String().with_min_len(1).validate("", ctx.with_path("name")),
            ... ])
            >>> [v.path for v in combined.violations]
            ['/age', '/name']
        """
        all_violations: list[Violation] = []
        for result in results:
            all_violations.extend(result.violations)

        return ValidationResult(
            is_valid=len(all_violations) == 0,
            value=[result.value for result in results],
            violations=all_violations,
            rule_set="combined",
            metadata={"combined_count": len(results)},
        )
