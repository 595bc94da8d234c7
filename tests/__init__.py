"""
Clarity Tests Module - Initialization
=====================================

Unit and integration tests for the Clarity simulator.

Test Organization:
------------------
1. test_core.py       - Data model, wire codec, random source
2. test_telemetry.py  - Scoring, breakdown, reading and series generation, live driver
3. test_filtration.py - Filter life model and boundaries
4. test_analytics.py  - Rolling and calendar-day rollups
5. test_pipeline.py   - Monitor session lifecycle
6. test_utils.py      - Configuration, series I/O, CLI

Test Categories:
----------------
Unit Tests:
- Individual component functionality
- Edge cases and boundary conditions
- Contract violations

Statistical Tests:
- Band ranges over many draws
- Mixture proportions with a fixed seed

Integration Tests:
- Session startup, live appends, teardown
- End-to-end rollup scenarios

Example Test Run:
-----------------
>>> from tests import run_tests
>>> result = run_tests(verbosity=2)

Author: Clarity Simulation Team
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from . import test_core
from . import test_telemetry
from . import test_filtration
from . import test_analytics
from . import test_pipeline
from . import test_utils

__all__ = [
    "test_core",
    "test_telemetry",
    "test_filtration",
    "test_analytics",
    "test_pipeline",
    "test_utils",
]


def create_test_suite():
    """
    Create comprehensive test suite.

    Returns:
        unittest.TestSuite with all tests
    """
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for module in (test_core, test_telemetry, test_filtration,
                   test_analytics, test_pipeline, test_utils):
        suite.addTests(loader.loadTestsFromModule(module))

    return suite


def run_tests(verbosity: int = 2):
    """
    Run all tests.

    Args:
        verbosity: Output verbosity level

    Returns:
        unittest.TestResult
    """
    suite = create_test_suite()
    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


if __name__ == "__main__":
    result = run_tests()
    sys.exit(0 if result.wasSuccessful() else 1)
