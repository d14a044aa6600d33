"""Declarative test records and their collections.

Defines the Pydantic models for tests, arguments, member groups,
repositories and plans. The models are plain records: they hold no
references to the objects under test and can be saved, loaded and run
any number of times.
"""

from .repos import MemberTests, TestPlan, TestRepo
from .tests import Test, TestArgument, TestResult, TestType

__all__ = (
    'MemberTests',
    'Test',
    'TestArgument',
    'TestPlan',
    'TestRepo',
    'TestResult',
    'TestType',
)
