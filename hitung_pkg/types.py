"""Type definitions, error classes and result dataclasses for consistent API responses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass
class EvalResult:
    """Result of evaluating an arithmetic expression."""

    ok: bool
    value: float | None = None
    error: str | None = None
    error_code: str | None = None
    position: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Infinities and NaN become the strings "inf", "-inf" and "nan" so the
        output stays valid strict JSON.
        """
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = (
                self.value if math.isfinite(self.value) else str(self.value)
            )
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.position is not None:
            result_dict["position"] = self.position
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return (
                f"EvalResult(ok=False, error={self.error!r}, "
                f"error_code={self.error_code!r})"
            )
        return f"EvalResult(ok=True, value={self.value!r})"


class EvaluationError(Exception):
    """Base class for every failure raised while evaluating an expression.

    Attributes:
        message: Human-readable description
        code: Stable machine-readable error code
        position: 0-based offset of the offending character (input length at end of input)
        char: The offending character, or None at end of input
    """

    default_code = "EVAL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        position: int | None = None,
        char: str | None = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.position = position
        self.char = char
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ExpressionSyntaxError(EvaluationError):
    """Raised when the expression violates the grammar."""

    default_code = "SYNTAX_ERROR"


class NumericFormatError(EvaluationError, ValueError):
    """Raised when a token scanned as a number cannot be converted to a float."""

    default_code = "NUMBER_FORMAT"


class NestingDepthError(EvaluationError):
    """Raised when the expression nests deeper than the configured maximum."""

    default_code = "TOO_DEEP"


class ValidationError(EvaluationError):
    """Raised when input is rejected before parsing starts."""

    default_code = "VALIDATION_ERROR"
