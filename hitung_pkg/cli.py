from __future__ import annotations

import argparse
import json

from . import config
from .api import evaluate
from .logging_config import LEVELS, LOG_FORMATS, get_logger, setup_logging
from .parser import KNOWN_FUNCTIONS, format_number
from .types import EvalResult

logger = get_logger("cli")

QUIT_COMMANDS = {"quit", "exit"}


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running Hitung health check...")
    print("-" * 50)

    try:
        import numpy

        print(f"[OK] NumPy {numpy.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] NumPy import failed: {e}")
        checks_failed += 1

    samples = [("2+3*4", 14.0), ("(2+3)*4", 20.0), ("2^3^2", 512.0), ("sqrt(16)", 4.0)]
    for expr, expected in samples:
        try:
            result = evaluate(expr)
            if result.ok and result.value == expected:
                print(f"[OK] {expr} = {format_number(result.value)}")
                checks_passed += 1
            else:
                print(f"[FAIL] {expr}: expected {expected}, got {result!r}")
                checks_failed += 1
        except Exception as e:
            print(f"[FAIL] {expr}: {e}")
            checks_failed += 1

    syntax = evaluate("(2+3")
    number = evaluate("1.2.3")
    if syntax.error_code == "SYNTAX_ERROR" and number.error_code == "NUMBER_FORMAT":
        print("[OK] Syntax and number format errors are distinguished")
        checks_passed += 1
    else:
        print(f"[FAIL] Error kinds: {syntax!r}, {number!r}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def _positive_int(text: str) -> int:
    """argparse type for flags that only accept integers >= 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def caret_line(position: int) -> str:
    """Return a marker line pointing at `position` under the echoed expression."""
    return " " * position + "^"


def print_result_pretty(
    expression: str, res: EvalResult, output_format: str = "human"
) -> None:
    """Print result in specified format.

    Args:
        expression: The evaluated expression, echoed under errors
        res: Evaluation result
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res.to_dict(), ensure_ascii=False, allow_nan=False))
        return
    if not res.ok:
        print("Error:", res.error)
        if res.position is not None and expression:
            print(f"  {expression}")
            print(f"  {caret_line(res.position)}")
        return
    print(format_number(res.value))


def print_help_text() -> None:
    print("Enter an arithmetic expression, for example:")
    print("  2+3*4        (2+3)*4        2^3^2        -4")
    print("  sqrt(16)     sin 0          round(2.5)   1/0")
    print("Operators: + - * / ^ (right-associative), unary + and -")
    print("Functions:", ", ".join(KNOWN_FUNCTIONS))
    print("Commands: help, quit, exit")


def repl_loop(output_format: str = "human") -> None:
    """Interactive REPL loop with graceful interrupt handling."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # readline not available on Windows - that's fine
        pass

    print("Hitung — type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not raw:
            continue
        command = raw.lower()
        if command in QUIT_COMMANDS:
            print("Goodbye.")
            break
        if command == "help":
            print_help_text()
            continue
        print_result_pretty(raw, evaluate(raw), output_format=output_format)


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Hitung CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        prog="hitung", description="Evaluate arithmetic expressions."
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p",
        "--precision",
        type=_positive_int,
        help="Set output precision (significant digits)",
    )
    parser.add_argument(
        "--max-depth",
        type=_positive_int,
        help="Set maximum nesting depth (default: 100)",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LEVELS,
        default="INFO",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="text",
        help="Log line format: text or json (one object per line)",
    )
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level, log_file=args.log_file, log_format=args.log_format
    )

    # Apply CLI configuration overrides
    if args.precision is not None:
        config.OUTPUT_PRECISION = args.precision
        logger.debug("Output precision set to %d", args.precision)
    if args.max_depth is not None:
        config.MAX_NESTING_DEPTH = args.max_depth
        logger.debug("Maximum nesting depth set to %d", args.max_depth)

    if args.version:
        print(config.VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.eval_expr is not None:
        expr = args.eval_expr
        res = evaluate(expr)
        print_result_pretty(expr, res, output_format=args.format)
        return 0 if res.ok else 1

    repl_loop(output_format=args.format)
    return 0


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m hitung_pkg.cli"""
    import sys

    sys.exit(main_entry())
