#!/usr/bin/env python3
"""
Hitung - Arithmetic Expression Evaluator

Thin wrapper that delegates all functionality to the hitung_pkg package.

Usage:
    python hitung.py                    # Interactive REPL
    python hitung.py -e "2+3*4"         # Evaluate expression
    python hitung.py --help             # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Hitung.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from hitung_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import hitung_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
