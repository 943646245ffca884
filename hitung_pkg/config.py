"""Centralized configuration for Hitung.

This module defines:
- Input validation limits (optional length cap, nesting depth)
- Output formatting precision
- Thread pool size for batch evaluation

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with HITUNG_)
"""

import os

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("hitung")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# Input validation limits
MAX_INPUT_LENGTH = int(
    os.getenv("HITUNG_MAX_INPUT_LENGTH", "0")
)  # characters, 0 disables the cap
MAX_NESTING_DEPTH = int(
    os.getenv("HITUNG_MAX_NESTING_DEPTH", "100")
)  # nested factors (parentheses, signs, exponents, function calls)

# Output configuration
OUTPUT_PRECISION = int(
    os.getenv("HITUNG_OUTPUT_PRECISION", "12")
)  # significant digits

# Batch evaluation
POOL_SIZE = int(os.getenv("HITUNG_POOL_SIZE", "4"))  # worker threads
