"""Hitung package: single-pass arithmetic expression evaluator, API and CLI."""

from .parser import DoubleEvaluator, Function, evaluate
from .types import (
    EvalResult,
    EvaluationError,
    ExpressionSyntaxError,
    NestingDepthError,
    NumericFormatError,
    ValidationError,
)

__all__ = [
    "config",
    "parser",
    "api",
    "cli",
    "types",
    "logging_config",
    "DoubleEvaluator",
    "Function",
    "evaluate",
    "EvalResult",
    "EvaluationError",
    "ExpressionSyntaxError",
    "NestingDepthError",
    "NumericFormatError",
    "ValidationError",
]
