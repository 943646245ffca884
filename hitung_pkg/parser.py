"""Expression scanning and single-pass recursive-descent evaluation.

This module handles:
- Input validation (type check, optional length cap)
- Character scanning over the expression string (Cursor)
- Evaluation of the grammar below, computing values while descending
- Result formatting for display

Grammar (precedence low to high):

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := '+' factor
                | '-' factor
                | '(' expression ')' ['^' factor]
                | number ['^' factor]
                | identifier '(' expression ')' ['^' factor]
                | identifier factor ['^' factor]

Arithmetic is IEEE-754 float64 through NumPy: division by zero and domain
errors produce inf/NaN instead of raising.
"""

from __future__ import annotations

import enum
from typing import Any, Callable

import numpy as np

from . import config
from .logging_config import get_logger
from .types import (
    ExpressionSyntaxError,
    NestingDepthError,
    NumericFormatError,
    ValidationError,
)

logger = get_logger("parser")

END_OF_INPUT = ""


def _is_number_char(ch: str) -> bool:
    return ch == "." or "0" <= ch <= "9"


def _is_letter(ch: str) -> bool:
    return "a" <= ch <= "z"


def round_half_up(x: np.float64) -> np.float64:
    """Round to the nearest integral value, ties toward positive infinity.

    round_half_up(2.5) == 3.0 and round_half_up(-2.5) == -2.0. NaN and
    infinities are returned unchanged.
    """
    if not np.isfinite(x):
        return x
    floor = np.floor(x)
    # x - floor(x) is exact for every finite double
    return floor + 1.0 if x - floor >= 0.5 else floor


class Function(enum.Enum):
    """Closed table of named unary functions.

    Any identifier outside the table resolves to UNKNOWN, which returns its
    argument unchanged.
    """

    SQRT = "sqrt"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ABS = "abs"
    CEIL = "ceil"
    FLOOR = "floor"
    ATAN = "atan"
    ROUND = "round"
    EXP = "exp"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "Function":
        return cls.UNKNOWN

    def apply(self, value: np.float64) -> np.float64:
        return _IMPLEMENTATIONS[self](value)


_IMPLEMENTATIONS: dict[Function, Callable[[np.float64], np.float64]] = {
    Function.SQRT: np.sqrt,
    Function.SIN: np.sin,
    Function.COS: np.cos,
    Function.TAN: np.tan,
    Function.ABS: np.abs,
    Function.CEIL: np.ceil,
    Function.FLOOR: np.floor,
    Function.ATAN: np.arctan,
    Function.ROUND: round_half_up,
    Function.EXP: np.exp,
    Function.UNKNOWN: lambda value: value,
}

KNOWN_FUNCTIONS = tuple(f.value for f in Function if f is not Function.UNKNOWN)


class Cursor:
    """Scanning position and lookahead character over one expression string."""

    __slots__ = ("text", "pos", "ch")

    def __init__(self, text: str):
        self.text = text
        self.pos = -1
        self.ch = END_OF_INPUT
        self.advance()

    def advance(self) -> None:
        self.pos += 1
        self.ch = self.text[self.pos] if self.pos < len(self.text) else END_OF_INPUT

    def eat(self, char: str) -> bool:
        """Skip spaces, then consume `char` if it is the lookahead."""
        while self.ch == " ":
            self.advance()
        if self.ch == char:
            self.advance()
            return True
        return False

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while self.ch and predicate(self.ch):
            self.advance()
        return self.text[start : self.pos]

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def describe(self) -> str:
        return "end of input" if self.at_end else self.ch


class _Evaluation:
    """One evaluation run: a fresh cursor and a nesting counter."""

    def __init__(self, text: str, max_depth: int):
        self.cursor = Cursor(text)
        self.max_depth = max_depth
        self.depth = 0

    def _error(self, error_cls: type, message: str) -> Exception:
        cursor = self.cursor
        return error_cls(
            message,
            position=cursor.pos,
            char=None if cursor.at_end else cursor.ch,
        )

    def _unexpected(self) -> ExpressionSyntaxError:
        return self._error(ExpressionSyntaxError, f"Unexpected: {self.cursor.describe()}")

    def run(self) -> np.float64:
        x = self.parse_expression()
        if not self.cursor.at_end:
            raise self._unexpected()
        return x

    def parse_expression(self) -> np.float64:
        x = self.parse_term()
        while True:
            if self.cursor.eat("+"):
                x = x + self.parse_term()
            elif self.cursor.eat("-"):
                x = x - self.parse_term()
            else:
                return x

    def parse_term(self) -> np.float64:
        x = self.parse_factor()
        while True:
            if self.cursor.eat("*"):
                x = x * self.parse_factor()
            elif self.cursor.eat("/"):
                x = x / self.parse_factor()
            else:
                return x

    def parse_factor(self) -> np.float64:
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise self._error(
                    NestingDepthError,
                    f"Expression too deeply nested (maximum depth is {self.max_depth})",
                )
            return self._factor()
        finally:
            self.depth -= 1

    def _factor(self) -> np.float64:
        cursor = self.cursor
        if cursor.eat("+"):
            return +self.parse_factor()
        if cursor.eat("-"):
            return -self.parse_factor()

        # eat() has already skipped any leading spaces
        start = cursor.pos
        if cursor.eat("("):
            x = self.parse_expression()
            if not cursor.eat(")"):
                raise self._error(ExpressionSyntaxError, "Missing ')'")
        elif _is_number_char(cursor.ch):
            x = self._number(cursor.take_while(_is_number_char), start)
        elif _is_letter(cursor.ch):
            name = cursor.take_while(_is_letter)
            if cursor.eat("("):
                x = self.parse_expression()
                if not cursor.eat(")"):
                    raise self._error(
                        ExpressionSyntaxError, f"Missing ')' after argument to {name}"
                    )
            else:
                x = self.parse_factor()
            function = Function(name)
            if function is Function.UNKNOWN:
                logger.debug(
                    "Unknown function %r at position %d returns its argument", name, start
                )
            x = function.apply(x)
        else:
            raise self._unexpected()

        if cursor.eat("^"):
            x = np.power(x, self.parse_factor())
        return x

    @staticmethod
    def _number(token: str, start: int) -> np.float64:
        try:
            return np.float64(float(token))
        except ValueError as e:
            raise NumericFormatError(
                f"Malformed number: {token!r}", position=start, char=token[0]
            ) from e


def validate_input(expression: Any) -> str:
    """Reject input that must not reach the evaluator.

    Raises:
        ValidationError: INVALID_TYPE for non-strings, TOO_LONG above MAX_INPUT_LENGTH
            (only when MAX_INPUT_LENGTH is set to a positive value)
    """
    if not isinstance(expression, str):
        raise ValidationError(
            f"Expression must be a string, got {type(expression).__name__}",
            "INVALID_TYPE",
        )
    if 0 < config.MAX_INPUT_LENGTH < len(expression):
        raise ValidationError(
            f"Input too long (max {config.MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )
    return expression


def evaluate(expression: str, max_depth: int | None = None) -> float:
    """Evaluate an arithmetic expression in a single pass.

    Args:
        expression: Expression string (e.g., "2+3*4", "sqrt(16)", "sin 0")
        max_depth: Maximum factor nesting (default: config.MAX_NESTING_DEPTH)

    Returns:
        The value as a float (may be inf or NaN)

    Raises:
        ExpressionSyntaxError: On grammar violations
        NumericFormatError: On a number token that is not a valid float literal
        NestingDepthError: When nesting exceeds max_depth
        ValidationError: When the input is not a string or is too long
    """
    validate_input(expression)
    if max_depth is None:
        max_depth = config.MAX_NESTING_DEPTH
    run = _Evaluation(expression, max_depth)
    try:
        with np.errstate(all="ignore"):
            value = run.run()
    except RecursionError:
        raise NestingDepthError(
            "Expression too deeply nested for the interpreter stack",
            position=run.cursor.pos,
        ) from None
    return float(value)


class DoubleEvaluator:
    """An expression bound to an evaluator; every evaluate() call starts from scratch."""

    ZERO: "DoubleEvaluator"

    __slots__ = ("expression", "max_depth")

    def __init__(self, expression: str, max_depth: int | None = None):
        self.expression = expression
        self.max_depth = max_depth

    def evaluate(self) -> float:
        return evaluate(self.expression, self.max_depth)

    def __repr__(self) -> str:
        return f"DoubleEvaluator({self.expression!r})"


DoubleEvaluator.ZERO = DoubleEvaluator("0")


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a numeric value with specified precision.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    if precision is None:
        precision = config.OUTPUT_PRECISION
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        # Fallback for non-numeric or invalid values
        return str(val)
