"""Public API for Hitung - returns structured objects without raising on bad input."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from . import config
from .logging_config import get_logger
from .parser import evaluate as _evaluate
from .types import EvalResult, EvaluationError

logger = get_logger("api")


def evaluate(expression: str) -> EvalResult:
    """Evaluate an arithmetic expression.

    Args:
        expression: Expression string (e.g., "2+2", "sqrt(16)", "2^3^2")

    Returns:
        EvalResult with the value, or the error message, code and position

    Example:
        >>> from hitung_pkg.api import evaluate
        >>> evaluate("2+3*4").value
        14.0
        >>> evaluate("(2+3").error
        "Missing ')'"
    """
    try:
        value = _evaluate(expression)
    except EvaluationError as e:
        logger.debug("Evaluation of %r failed [%s]: %s", expression, e.code, e)
        return EvalResult(
            ok=False, error=str(e), error_code=e.code, position=e.position
        )
    return EvalResult(ok=True, value=value)


def evaluate_many(
    expressions: Iterable[str], max_workers: int | None = None
) -> list[EvalResult]:
    """Evaluate independent expressions concurrently, preserving input order.

    Args:
        expressions: Expression strings
        max_workers: Thread count (default: config.POOL_SIZE)

    Returns:
        One EvalResult per expression
    """
    items = list(expressions)
    if not items:
        return []
    workers = max_workers if max_workers and max_workers > 0 else config.POOL_SIZE
    with ThreadPoolExecutor(max_workers=min(workers, len(items))) as pool:
        results = list(pool.map(evaluate, items))
    failed = sum(1 for r in results if not r.ok)
    if failed:
        logger.info("Batch of %d expressions finished with %d failures", len(items), failed)
    return results


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate an expression by evaluating it and discarding the value.

    Args:
        expression: Expression string to validate

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from hitung_pkg.api import validate_expression
        >>> validate_expression("2 + 2")
        (True, None)
        >>> validate_expression("2 +")
        (False, 'Unexpected: end of input')
    """
    try:
        _evaluate(expression)
    except EvaluationError as e:
        return False, str(e)
    return True, None
