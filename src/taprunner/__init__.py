"""
TapRunner - a small in-process test driver that speaks TAP.

This package provides tools to:
- Register simple and parameterized test cases
- Run them in registration order or in a seeded random order
- Report each case (and optionally each sub-case) as TAP lines
- Turn the results into a process exit status
"""

__version__ = "0.1.0"
__author__ = "TapRunner Team"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
