"""Per-call evaluation context.

A RuleContext travels through one apply call: it carries the location of the
value being validated (so violations can say where they happened), the clock
used by time-relative rules, the message catalog, and the error config of the
rule set currently being applied. It is immutable; every derivation returns a
new context.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from rulechain.core.violations import (
    DEFAULT_CATALOG,
    ErrorCode,
    ErrorConfig,
    MessageCatalog,
    Violation,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _escape_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True)
class RuleContext:
    """Immutable context for a single validation call.

    Attributes:
        path: JSON-pointer-style location of the current value ("" is the root).
        catalog: Message templates used to render violations.
        clock: Callable returning the current time as an aware datetime.
        now: The time captured at the start of the current apply call. None
            until a rule set starts evaluating; rules read it through
            current_time().
        error_config: Overrides from the rule set being applied.
        rule_set: The rule set being applied, for rules that need to inspect it.

    Example:
        >>> ctx = RuleContext().with_path("items").with_index(0).with_path("price")
        >>> ctx.path
        '/items/0/price'
    """

    path: str = ""
    catalog: MessageCatalog = DEFAULT_CATALOG
    clock: Callable[[], datetime] = utcnow
    now: datetime | None = None
    error_config: ErrorConfig | None = None
    rule_set: Any = None

    def with_path(self, segment: str) -> "RuleContext":
        return replace(self, path=f"{self.path}/{_escape_segment(segment)}")

    def with_index(self, index: int) -> "RuleContext":
        return replace(self, path=f"{self.path}/{index}")

    def started(self, rule_set: Any, error_config: ErrorConfig | None) -> "RuleContext":
        """Return the context for a rule set that is starting an apply call.

        The clock is read here, once, unless the caller pinned ``now``.
        """
        now = self.now if self.now is not None else self.clock()
        return replace(self, now=now, rule_set=rule_set, error_config=error_config)

    def current_time(self) -> datetime:
        if self.now is not None:
            return self.now
        return self.clock()

    def violation(
        self,
        code: ErrorCode,
        *params: Any,
        message: str | None = None,
    ) -> Violation:
        """Build a violation at this context's path.

        The message is rendered from the catalog unless given explicitly. The
        active error config, if any, is applied last.

        Args:
            code: Category of the violation
            *params: Values for the message template
            message: Explicit long message, bypassing the catalog

        Returns:
            The finished Violation.
        """
        violation = Violation(
            code=code,
            message=message if message is not None else self.catalog.long(code, params),
            short=self.catalog.short(code),
            path=self.path,
            params=params,
        )
        config = self.error_config
        if config is not None:
            violation = config.apply(violation)
            if config.callback is not None:
                violation = config.callback(self, violation)
        return violation

    def type_violation(self, expected: str, actual: str) -> Violation:
        return self.violation(ErrorCode.TYPE, expected, actual)

    def range_violation(self, target: str) -> Violation:
        return self.violation(ErrorCode.RANGE, target)

    def internal_violation(self, detail: str) -> Violation:
        return self.violation(ErrorCode.INTERNAL, detail)
