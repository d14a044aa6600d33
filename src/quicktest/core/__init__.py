"""Test execution engine.

The primary public entry point is `TestRunner`, which runs test records
through a member resolver and records their verdicts.
"""

from .runner import ASSERT_FAIL, EXPECTED_VALUE_FAIL, TestRunner, describe_error

__all__ = (
    'ASSERT_FAIL',
    'EXPECTED_VALUE_FAIL',
    'TestRunner',
    'describe_error',
)
