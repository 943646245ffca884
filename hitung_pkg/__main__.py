"""Main entry point for running hitung_pkg as a module.

This allows running Hitung with:
    python -m hitung_pkg
    python -m hitung_pkg --health-check
    python -m hitung_pkg -e "2+2"

This is equivalent to running:
    python -m hitung_pkg.cli
    python hitung.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
