"""Tests for log output emitted while applying rule sets."""

import ctypes
import logging

from rulechain import Float64, Int, Output

LOGGER = "rulechain.core.chain"


class TestLogging:
    def test_internal_binder_errors_are_logged_at_error(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            Float64().apply(1.5, Output.numeric(ctypes.c_int32))
        assert len(caplog.records) == 1
        assert "cannot assign float64 to int32 output" in caplog.records[0].getMessage()

    def test_invalid_output_is_logged_at_error(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger=LOGGER):
            Int().apply(1, object())
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_coercion_failures_are_debug_only(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger=LOGGER):
            Int().validate("abc")
        assert [r.levelno for r in caplog.records] == [logging.DEBUG]
        assert "Coercion to int failed" in caplog.records[0].getMessage()

    def test_rule_violations_are_counted_at_debug(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger=LOGGER):
            Int().with_min(10).with_rejected_values(5).validate(5)
        assert "reported 2 violation(s)" in caplog.records[-1].getMessage()

    def test_input_violations_are_not_errors(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            Int().with_min(10).validate(5)
            Int().validate("abc")
        assert caplog.records == []
