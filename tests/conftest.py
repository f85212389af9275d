"""Shared test fixtures and Hypothesis strategies for rulechain tests."""

from datetime import datetime, timezone

import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from rulechain import RuleContext
from rulechain.coercion.kinds import INTEGER_KINDS, NumericKind

# Configure Hypothesis for rule-set testing
settings.register_profile("rulechain", max_examples=100, deadline=None)
settings.load_profile("rulechain")

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_ctx() -> RuleContext:
    """Context whose clock always returns FIXED_NOW."""
    return RuleContext(clock=lambda: FIXED_NOW)


@composite
def integer_kinds(draw: st.DrawFn) -> NumericKind:
    """Draw one of the fixed-width integer kinds (int8 ... uint64)."""
    return draw(st.sampled_from(INTEGER_KINDS))


@composite
def fixed_width_integers(draw: st.DrawFn) -> tuple[NumericKind, int]:
    """Draw an integer kind and a value representable in it.

    Values near the kind's bounds are drawn often, since those are the ones
    that exercise range checks.

    Returns:
        Tuple of (kind, value)
    """
    kind = draw(integer_kinds())
    value = draw(
        st.one_of(
            st.integers(min_value=kind.min_value, max_value=kind.max_value),
            st.sampled_from([kind.min_value, kind.max_value, 0]),
        )
    )
    return kind, value


@composite
def ordered_pairs(draw: st.DrawFn) -> tuple[int, int]:
    """Draw two distinct int64 values in increasing order."""
    low = draw(st.integers(min_value=-(2**62), max_value=2**62))
    high = draw(st.integers(min_value=low + 1, max_value=2**62 + 1))
    return low, high


@composite
def strptime_layouts(draw: st.DrawFn) -> str:
    """Draw a plausible strptime layout."""
    date_part = draw(st.sampled_from(["%Y-%m-%d", "%d/%m/%Y", "%m.%d.%Y", "%Y%m%d"]))
    time_part = draw(st.sampled_from(["", " %H:%M", "T%H:%M:%S", "T%H:%M:%S%z"]))
    return date_part + time_part
