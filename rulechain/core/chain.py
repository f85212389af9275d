"""Immutable rule-set chains.

A rule set is a linked list of nodes, each recording one builder call. The
tail node is the rule set the caller holds; following ``parent`` links leads
back to the root created by a family constructor such as Int() or Time().

Every builder returns a new tail node and never modifies an existing one, so
rule sets can be shared, branched and used from several threads without
copying or locking. Unchanged ancestors are reused by reference.

A new modifier can make earlier ones obsolete. Rules decide this through
their ``replaces`` method; flag modifiers (required, rounding, base, ...)
carry a Conflict tag and replace earlier nodes with the same tag. Obsolete
nodes are removed from the new chain by _without, which clones only the
nodes between the tail and the last removed node.

Evaluation walks from the tail back to the root, so the most recently added
rule runs first. The debug string is rendered in the opposite order, root to
tail, matching the order of the builder calls.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Generic, NamedTuple, TypeVar

from rulechain.binding import Output, Sink, SinkKind
from rulechain.coercion.inputs import Input, InputKind, classify, type_name
from rulechain.core.context import RuleContext
from rulechain.core.labels import display, quote, token
from rulechain.core.protocols import Mutated, Rule
from rulechain.core.violations import ErrorCode, ErrorConfig, Violation
from rulechain.result import ValidationResult
from rulechain.rules.wrap_any import AnyRuleSet

logger = logging.getLogger(__name__)

T = TypeVar("T")
RS = TypeVar("RS", bound="RuleSet[Any]")


class Conflict(Enum):
    """Tag identifying which flag modifier a node applies.

    Two nodes conflict when they carry the same tag. NONE never conflicts.
    """

    NONE = "none"
    REQUIRED = "required"
    NIL = "nil"
    STRICT = "strict"
    BASE = "base"
    ROUNDING = "rounding"
    UNIT = "unit"
    OUTPUT_LAYOUT = "output_layout"
    FIXED_OUTPUT = "fixed_output"
    ERROR_MESSAGE = "error_message"
    ERROR_CODE = "error_code"
    DOCS_URI = "docs_uri"
    TRACE_URI = "trace_uri"
    ERROR_CALLBACK = "error_callback"


@dataclass(frozen=True)
class Options:
    """Settings shared by every family.

    Families extend this with their own frozen dataclass. A node's options
    are copied from its parent when it is created, so the tail node always
    holds the effective settings of the whole chain.
    """

    required: bool = False
    nilable: bool = False
    error_config: ErrorConfig | None = None


class Coerced(NamedTuple):
    """A successfully coerced input.

    ``source`` carries family-specific detail about how the value was
    produced, such as the time layout that parsed a string.
    """

    value: Any
    source: Any = None


class RuleSet(ABC, Generic[T]):
    """Base class for every value family's rule set.

    Subclasses provide:
        native: The Python types accepted as the exact target type.
        target_name: Name of the target type in error messages.
        _coerce: Conversion of a classified input to the target type.
        _normalize: Optional canonicalisation applied before the rules run.
        _bind: Conversion of the final value for a resolved output sink.

    Subclasses must declare ``__slots__ = ()``; nodes are immutable and any
    attribute assignment raises AttributeError.
    """

    __slots__ = ("_options", "_label", "_parent", "_rule", "_conflict")

    native: ClassVar[tuple[type, ...]] = ()

    def __init__(self, options: Options, label: str) -> None:
        self._set(options, label, None, None, Conflict.NONE)

    def _set(
        self,
        options: Options,
        label: str,
        parent: "RuleSet[T] | None",
        rule: Rule[T] | None,
        conflict: Conflict,
    ) -> None:
        object.__setattr__(self, "_options", options)
        object.__setattr__(self, "_label", label)
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_rule", rule)
        object.__setattr__(self, "_conflict", conflict)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def parent(self) -> "RuleSet[T] | None":
        return self._parent

    @property
    def rule(self) -> Rule[T] | None:
        return self._rule

    @property
    def conflict(self) -> Conflict:
        return self._conflict

    @property
    def label(self) -> str:
        return self._label

    @property
    def options(self) -> Options:
        return self._options

    @property
    def target_name(self) -> str:
        return type(self).__name__

    # Chain construction

    def _node(
        self: RS,
        options: Options,
        label: str,
        parent: "RuleSet[T] | None",
        rule: Rule[T] | None,
        conflict: Conflict,
    ) -> RS:
        node = object.__new__(type(self))
        node._set(options, label, parent, rule, conflict)
        return node

    def _without(self: RS, conflicts: Callable[["RuleSet[T]"], bool]) -> RS | None:
        """Return this chain with every node matching ``conflicts`` removed.

        Nodes above the last removed node are cloned with their new parent.
        If nothing is removed the same object is returned, and if every node
        is removed the result is None.
        """
        if conflicts(self):
            if self._parent is None:
                return None
            return self._parent._without(conflicts)

        if self._parent is None:
            return self

        parent = self._parent._without(conflicts)
        if parent is self._parent:
            return self
        return self._node(self._options, self._label, parent, self._rule, self._conflict)

    def _derive(self: RS, label: str, conflict: Conflict = Conflict.NONE, **changes: Any) -> RS:
        """Append a flag node, replacing any earlier node with the same tag."""
        parent: RuleSet[T] | None = self
        if conflict is not Conflict.NONE:
            parent = self._without(lambda node: node._conflict is conflict)
        options = replace(self._options, **changes) if changes else self._options
        return self._node(options, label, parent, None, conflict)

    def with_rule(self: RS, rule: Rule[T]) -> RS:
        """Return a new rule set with a rule appended.

        Earlier rules that ``rule.replaces`` are removed from the new chain.
        """
        parent = self._without(lambda node: node._rule is not None and rule.replaces(node._rule))
        return self._node(self._options, "", parent, rule, Conflict.NONE)

    def find_rule(self, predicate: Callable[[Rule[T]], bool]) -> Rule[T] | None:
        """Return the most recently added rule matching ``predicate``."""
        node: RuleSet[T] | None = self
        while node is not None:
            if node._rule is not None and predicate(node._rule):
                return node._rule
            node = node._parent
        return None

    # Common modifiers

    def is_required(self) -> bool:
        return self._options.required

    def with_required(self: RS) -> RS:
        return self._derive("WithRequired()", Conflict.REQUIRED, required=True)

    def with_nil(self: RS) -> RS:
        """Return a new rule set that accepts None and writes None to the output."""
        return self._derive("WithNil()", Conflict.NIL, nilable=True)

    def _with_error_config(self: RS, label: str, conflict: Conflict, **changes: Any) -> RS:
        config = replace(self._options.error_config or ErrorConfig(), **changes)
        return self._derive(label, conflict, error_config=config)

    def with_error_message(self: RS, short: str, long: str) -> RS:
        """Override the short and long message of every violation."""
        return self._with_error_config(
            token("WithErrorMessage", quote(short), quote(long)),
            Conflict.ERROR_MESSAGE,
            short=short,
            long=long,
        )

    def with_error_code(self: RS, code: ErrorCode) -> RS:
        return self._with_error_config(
            token("WithErrorCode", code.name), Conflict.ERROR_CODE, code=code
        )

    def with_error_meta(self: RS, key: str, value: Any) -> RS:
        """Attach a meta entry to every violation. Meta entries accumulate."""
        meta = (self._options.error_config or ErrorConfig()).meta + ((key, value),)
        return self._with_error_config(
            token("WithErrorMeta", quote(key), display(value)), Conflict.NONE, meta=meta
        )

    def with_docs_uri(self: RS, uri: str) -> RS:
        return self._with_error_config(token("WithDocsURI", quote(uri)), Conflict.DOCS_URI, docs_uri=uri)

    def with_trace_uri(self: RS, uri: str) -> RS:
        return self._with_error_config(
            token("WithTraceURI", quote(uri)), Conflict.TRACE_URI, trace_uri=uri
        )

    def with_error_callback(
        self: RS, callback: Callable[[RuleContext, Violation], Violation]
    ) -> RS:
        """Pass every violation through ``callback`` and report its return value."""
        return self._with_error_config(
            "WithErrorCallback(<function>)", Conflict.ERROR_CALLBACK, callback=callback
        )

    # Family hooks

    @abstractmethod
    def _coerce(self, ctx: RuleContext, item: Input) -> Coerced | Violation:
        """Convert a classified input to the target type, or return a TYPE or RANGE violation."""

    def _normalize(self, value: T) -> T:
        return value

    def _bind(self, ctx: RuleContext, sink: Sink, value: T, coerced: Coerced) -> Any:
        if sink.kind is SinkKind.TARGET:
            return value
        return self._unsupported_sink(ctx, sink)

    def _unsupported_sink(self, ctx: RuleContext, sink: Sink) -> Violation:
        shape = sink.numeric.name if sink.numeric is not None else sink.kind.value
        return ctx.internal_violation(f"cannot assign {self.target_name} to {shape} output")

    # Evaluation

    def _start(self, ctx: RuleContext | None) -> RuleContext:
        return (ctx or RuleContext()).started(self, self._options.error_config)

    def _evaluate_rules(self, ctx: RuleContext, value: T) -> tuple[T, list[Violation]]:
        violations: list[Violation] = []
        node: RuleSet[T] | None = self
        while node is not None:
            rule = node._rule
            if rule is not None:
                outcome = rule.evaluate(ctx, value)
                if isinstance(outcome, Mutated):
                    if not outcome.violations:
                        value = outcome.value
                    outcome = outcome.violations
                if outcome:
                    violations.extend(outcome)
            node = node._parent
        return value, violations

    def apply(self, value: Any, output: Output, ctx: RuleContext | None = None) -> list[Violation]:
        """Coerce, validate and write a value into an output.

        The input is coerced to the target type. A failed coercion is
        reported as a single violation and the output is left untouched.
        Otherwise every rule in the chain runs and all of their violations
        are returned; the output receives the value even when rules fail.

        Args:
            value: Input of any type
            output: Output to write the coerced value into
            ctx: Optional context carrying a path, clock or message catalog

        Returns:
            All violations found. An empty list means success.
        """
        ctx = self._start(ctx)
        if not isinstance(output, Output):
            violation = ctx.internal_violation(f"output must be an Output, got {type(output).__name__}")
            logger.error("Cannot apply %s: %s", self, violation.message)
            return [violation]

        item = classify(value, self.native)
        if item.kind is InputKind.NONE:
            if self._options.nilable:
                output.value = None
                return []
            return [ctx.violation(ErrorCode.NULL)]

        coerced = self._coerce(ctx, item)
        if isinstance(coerced, Violation):
            logger.debug("Coercion to %s failed: %s", self.target_name, coerced.message)
            return [coerced]

        result, violations = self._evaluate_rules(ctx, self._normalize(coerced.value))

        sink = output.resolve(self.native)
        if sink is None:
            bound: Any = ctx.internal_violation(
                f"cannot assign {self.target_name} to {type_name(output.value)}"
            )
        else:
            bound = self._bind(ctx, sink, result, coerced)
        if isinstance(bound, Violation):
            if bound.is_internal():
                logger.error("Cannot write %s output: %s", self.target_name, bound.message)
            return [bound]

        output.write(sink, bound)
        if violations:
            logger.debug("%s reported %d violation(s)", self, len(violations))
        return violations

    def validate(self, value: Any, ctx: RuleContext | None = None) -> ValidationResult:
        """Apply the rule set to a value and package the outcome.

        Example:
            >>> result = Int().with_min(3).validate("7")
            >>> result.is_valid, result.value
            (True, 7)
        """
        output = Output()
        violations = self.apply(value, output, ctx)
        return ValidationResult(
            is_valid=not violations,
            value=output.value,
            violations=violations,
            rule_set=self.describe(),
        )

    def evaluate(self, value: T, ctx: RuleContext | None = None) -> ValidationResult:
        """Run the rules on a value that already has the target type.

        No coercion or output binding happens. Family canonicalisation, such
        as float rounding, still applies.
        """
        result, violations = self._evaluate_rules(self._start(ctx), self._normalize(value))
        return ValidationResult(
            is_valid=not violations,
            value=result,
            violations=violations,
            rule_set=self.describe(),
        )

    # Debugging

    def describe(self) -> str:
        """Render the chain as ``Root.WithX(...).WithY(...)`` in builder order."""
        tokens: list[str] = []
        node: RuleSet[T] | None = self
        while node is not None:
            label = node._label
            if not label and node._rule is not None:
                label = node._rule.describe()
            if label:
                tokens.append(label)
            node = node._parent
        return ".".join(reversed(tokens))

    def any(self) -> AnyRuleSet:
        """Wrap this rule set so it can be used where the value type is unknown."""
        return AnyRuleSet(self)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()}>"
