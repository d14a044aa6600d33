"""Collections of test records.

`TestRepo` groups tests by the member they target and is what an
editor keeps next to the code under test. `TestPlan` is a flat,
ordered execution list bound to one target module.
"""

import logging
from typing import TYPE_CHECKING, ClassVar, Self
from uuid import UUID  # noqa: TC003

from pydantic import Field

from quicktest import documents
from quicktest.models import RecordModel

from .tests import Test, TestResult

if TYPE_CHECKING:
    from pathlib import Path

    from quicktest.reflection import MemberResolver

logger = logging.getLogger(__name__)


class MemberTests(RecordModel):
    """All tests of one qualified member name."""

    __test__ = False

    member: str
    tests: list[Test] = Field(default_factory=list)

    def get_test(self, test_id: UUID) -> Test:
        """Return the test with the given identifier.

        Raises:
            KeyError: If no test has this identifier.
        """
        for test in self.tests:
            if test.id == test_id:
                return test

        raise KeyError(f'Test {test_id} not found for {self.member!r}')


class DocumentMixin(RecordModel):
    """Saving to and opening from YAML test documents."""

    def save(self, path: 'Path') -> None:
        """Write this record as a YAML document."""
        documents.save(self, path)

    @classmethod
    def open(cls, path: 'Path') -> Self:
        """Read a record of this type from a YAML document.

        Raises:
            DocumentError: If the document is malformed or invalid.
        """
        return documents.load_file(path, cls)


class TestRepo(DocumentMixin):
    """Tests grouped by member, at most one group per member."""

    __test__ = False

    #: File extension of saved repositories.
    FILE_EXTENSION: ClassVar[str] = '.quicktest'

    member_tests: list[MemberTests] = Field(default_factory=list)

    def get_member_tests(self, member: str) -> MemberTests:
        """Return the group for `member`, appending it if missing.

        Raises:
            ValueError: If `member` is empty.
        """
        if not member:
            raise ValueError('Member name must not be empty')

        for tests in self.member_tests:
            if tests.member == member:
                return tests

        tests = MemberTests(member=member)
        self.member_tests.append(tests)

        return tests


class TestPlan(DocumentMixin):
    """Ordered list of tests executed against one target module."""

    __test__ = False

    assembly_path: str = Field(
        default='',
        title='Target module',
        description=(
            'Dotted module name or `.py` path loaded before the tests run. '
            'Empty when the target types are already importable.'
        ),
    )

    tests: list[Test] = Field(default_factory=list)

    def run(self, resolver: 'MemberResolver | None' = None) -> list[TestResult]:
        """Load the target module and run every test in order.

        A failing test does not stop the plan.

        Args:
            resolver: Member resolver shared by all tests; a default
                `PythonResolver` is used when omitted.

        Returns:
            Verdicts in test order.

        Raises:
            ResolutionError: If the target module cannot be loaded.
        """
        from quicktest.core import TestRunner  # noqa: PLC0415

        runner = TestRunner(resolver)
        if self.assembly_path:
            runner.resolver.load_module(self.assembly_path)

        results = [runner.run(test) for test in self.tests]

        logger.info(
            'Plan finished: %d passed, %d failed, %d unknown',
            results.count(TestResult.PASS),
            results.count(TestResult.FAIL),
            results.count(TestResult.UNKNOWN),
        )
        return results
