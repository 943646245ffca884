"""Tests for nesting limits, input validation, logging and concurrent use."""

import json
import logging
import sys
import threading

import pytest

from hitung_pkg import config
from hitung_pkg.logging_config import (
    JsonFormatter,
    StructuredFormatter,
    reset_logging,
    setup_logging,
)
from hitung_pkg.parser import DoubleEvaluator, evaluate
from hitung_pkg.types import ExpressionSyntaxError, NestingDepthError, ValidationError


class TestNestingDepth:
    """Deep input fails with NestingDepthError instead of overflowing the stack."""

    def test_deep_parentheses(self):
        with pytest.raises(NestingDepthError):
            evaluate("(" * 1000 + "1" + ")" * 1000)

    def test_long_unary_chain(self):
        with pytest.raises(NestingDepthError):
            evaluate("-" * 5000 + "1")

    def test_long_exponent_chain(self):
        with pytest.raises(NestingDepthError):
            evaluate("^".join(["1"] * 500))

    def test_explicit_limit(self):
        assert evaluate("((1))", max_depth=3) == 1.0
        with pytest.raises(NestingDepthError):
            evaluate("(((1)))", max_depth=3)

    def test_limit_read_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_NESTING_DEPTH", 2)
        assert evaluate("(1)") == 1.0
        with pytest.raises(NestingDepthError):
            evaluate("((1))")

    def test_interpreter_stack_exhaustion_is_reported(self):
        deep = "(" * 4000 + "1" + ")" * 4000
        with pytest.raises(NestingDepthError):
            evaluate(deep, max_depth=10**6)

    def test_long_flat_expression_is_not_nested(self):
        assert evaluate("+".join(["1"] * 2000)) == 2000.0

    def test_evaluator_usable_after_depth_failure(self):
        with pytest.raises(NestingDepthError):
            evaluate("(" * 1000)
        assert evaluate("(2+3)*4") == 20.0


class TestInputValidation:
    """Test input validation failure modes."""

    def test_no_length_cap_by_default(self):
        assert evaluate("+".join(["1"] * 20000)) == 20000.0

    def test_long_input_with_nested_groups(self):
        expr = "+".join(["(2*(3-1))"] * 5000)
        assert len(expr) > 40000
        assert evaluate(expr) == 20000.0

    def test_too_long_input(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_INPUT_LENGTH", 100)
        with pytest.raises(ValidationError) as exc_info:
            evaluate("1" * 101)
        assert exc_info.value.code == "TOO_LONG"
        assert "too long" in str(exc_info.value).lower()

    def test_length_limit_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_INPUT_LENGTH", 3)
        assert evaluate("1+2") == 3.0
        with pytest.raises(ValidationError):
            evaluate("1+20")

    @pytest.mark.parametrize("value", [None, 42, b"1+1", ["1"]])
    def test_non_string_input(self, value):
        with pytest.raises(ValidationError):
            evaluate(value)

    def test_empty_input_is_syntax_error(self):
        with pytest.raises(ExpressionSyntaxError):
            evaluate("")


class TestIdempotence:
    """No state accumulates across calls."""

    @pytest.mark.parametrize(
        "expr", ["2+3*4", "2^3^2", "sin 30 + 1", "foo(5)", "round(-2.5)", "1/0"]
    )
    def test_repeated_evaluation(self, expr):
        results = [evaluate(expr) for _ in range(10)]
        assert all(r == results[0] for r in results)

    def test_failure_does_not_affect_next_call(self):
        with pytest.raises(ExpressionSyntaxError):
            evaluate("(2+3")
        assert evaluate("2+3") == 5.0

    def test_concurrent_threads(self):
        expressions = [f"({i}+1)^2 - sqrt({i * i})" for i in range(50)]
        expected = [evaluate(e) for e in expressions]
        errors = []

        def worker():
            try:
                for _ in range(20):
                    got = [DoubleEvaluator(e).evaluate() for e in expressions]
                    if got != expected:
                        errors.append(got)
            except Exception as e:  # noqa: BLE001 - collected and asserted below
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []


class TestLogging:
    """Evaluator log output."""

    def test_unknown_function_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="hitung"):
            assert evaluate("foo(5)") == 5.0
        assert any("foo" in record.getMessage() for record in caplog.records)

    def test_known_function_is_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="hitung"):
            evaluate("sqrt(4)")
        assert not any("Unknown function" in r.getMessage() for r in caplog.records)


class TestLoggingSetup:
    """setup_logging / reset_logging on the package logger."""

    @pytest.fixture(autouse=True)
    def _clean_handlers(self):
        yield
        reset_logging()

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_logging("DEBUG", log_file=str(tmp_path / "a.log"))
        root = setup_logging("warning")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_reset_detaches_handlers(self):
        setup_logging()
        root = reset_logging()
        assert root.handlers == []
        assert root.level == logging.NOTSET

    @pytest.mark.parametrize(
        "kwargs", [{"level": "VERBOSE"}, {"log_format": "xml"}]
    )
    def test_unknown_settings_rejected(self, kwargs):
        with pytest.raises(ValueError):
            setup_logging(**kwargs)

    def test_json_formatter_includes_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("hitung.test").makeRecord(
                "hitung.test", logging.ERROR, __file__, 1, "failed %s", ("x",),
                sys.exc_info(),
            )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["message"] == "failed x"
        assert entry["level"] == "ERROR"
        assert "RuntimeError: boom" in entry["exc"]

    def test_text_formatter_line(self):
        record = logging.getLogger("hitung.test").makeRecord(
            "hitung.test", logging.INFO, __file__, 1, "hello", (), None
        )
        line = StructuredFormatter().format(record)
        assert line.endswith(" [INFO] hitung.test: hello")
