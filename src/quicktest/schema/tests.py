"""Test and argument records.

A `Test` is a declarative description of one member test: which member
to target, how to build the receiver and the arguments, and what to
expect. Running it fills in the result fields.
"""

from datetime import datetime  # noqa: TC003
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pydantic import Field

from quicktest.codec import deserialize, serialize
from quicktest.models import RecordModel
from quicktest.names import Identifier  # noqa: TC001

if TYPE_CHECKING:
    from quicktest.reflection import MemberResolver
    from quicktest.values import RuntimeValue


class TestType(StrEnum):
    """How the target member is exercised."""

    __test__ = False

    FUNCTION = 'Function'
    PROCEDURE = 'Procedure'
    PROPERTY_GETTER = 'PropertyGetter'
    PROPERTY_SETTER = 'PropertySetter'


class TestResult(StrEnum):
    """Verdict of a test run."""

    __test__ = False

    FAIL = 'Fail'
    PASS = 'Pass'
    UNKNOWN = 'Unknown'


class TestArgument(RecordModel):
    """A named argument stored as a serialized value or an expression."""

    __test__ = False

    name: Identifier = Field(
        default='value',
        title='Argument name',
        description='Parameter name; setters conventionally use `value`.',
    )

    value_string: str = Field(
        default='',
        title='Argument value',
        description=(
            'Expression evaluated against the receiver, or an object literal '
            'materialized into `value_type`. Blank means a default instance '
            'of `value_type`, or `None` when no type is given.'
        ),
    )

    value_type: str = Field(
        default='',
        title='Argument type',
        description='Qualified type name used for object literals and blank values.',
    )

    @property
    def value(self) -> 'RuntimeValue':
        """Decode the stored pair through the value codec."""
        return deserialize(self.value_string, self.value_type)

    def assign(self, value: 'RuntimeValue') -> None:
        """Store a value through the value codec."""
        self.value_string, self.value_type = serialize(value)


class Test(RecordModel):
    """Declarative test of a single member.

    The definition fields are written by the author; `result`,
    `result_time_utc`, `value_string`, `value_type` and `fail_info`
    are written by `run` only.
    """

    __test__ = False

    id: UUID = Field(
        default_factory=uuid4,
        title='Test identifier',
        description='Unique identifier, stable across saving and loading.',
    )

    member: str = Field(
        default='',
        title='Target member',
        description=(
            'Dotted qualified name whose last segment is the member and '
            'whose remainder is the owning type.'
        ),
        examples=[
            'shop.models.Cart.total',
        ],
    )

    test_type: TestType = TestType.FUNCTION

    this_string: str = Field(
        default='',
        title='Receiver',
        description=(
            'Object literal or expression describing the receiver. '
            'Blank default-constructs the owning type; unused for static members.'
        ),
    )

    arguments: list[TestArgument] = Field(
        default_factory=list,
        title='Arguments',
        description='Arguments in call-site order.',
    )

    expected_value_string: str = Field(
        default='',
        title='Expected value',
        description=(
            'Serialized value compared as text with the captured value. '
            'Applies to functions and property getters.'
        ),
    )

    assert_string: str = Field(
        default='',
        title='Assertion',
        description='Boolean expression evaluated against the receiver after the call.',
    )

    result: TestResult = TestResult.UNKNOWN
    result_time_utc: datetime | None = None
    value_string: str = ''
    value_type: str = ''
    fail_info: str = ''

    def get_argument(self, name: str) -> TestArgument:
        """Return the argument called `name`, appending it if missing."""
        for argument in self.arguments:
            if argument.name == name:
                return argument

        argument = TestArgument(name=name)
        self.arguments.append(argument)

        return argument

    @property
    def value(self) -> 'RuntimeValue':
        """Decode the captured value through the value codec."""
        return deserialize(self.value_string, self.value_type)

    def capture(self, value: 'RuntimeValue') -> None:
        """Store a produced value through the value codec."""
        self.value_string, self.value_type = serialize(value)

    def run(self, resolver: 'MemberResolver | None' = None) -> TestResult:
        """Run the test and record its verdict.

        Args:
            resolver: Member resolver; a default `PythonResolver` is
                used when omitted.

        Returns:
            The recorded verdict.
        """
        from quicktest.core import TestRunner  # noqa: PLC0415

        return TestRunner(resolver).run(self)

    def record_results(self, other: 'Test') -> None:
        """Copy the result fields of another run of this test."""
        self.result = other.result
        self.result_time_utc = other.result_time_utc
        self.value_string = other.value_string
        self.value_type = other.value_type
        self.fail_info = other.fail_info
