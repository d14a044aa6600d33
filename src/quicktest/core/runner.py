"""Execution engine deciding the verdict of a single test record.

A run resolves the target member, builds the receiver and arguments
from their expression strings, invokes the member according to the
test type, captures the produced value and finally applies the
expected-value check and the assertion check.

Every error raised on the way is converted into a `Fail` verdict, so
`TestRunner.run` never raises.
"""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from quicktest.dsl import EvalEnv, ObjectLiteral, parse
from quicktest.errors import InvocationError, QuickTestError, ResolutionError
from quicktest.names import split_member
from quicktest.reflection import PythonResolver
from quicktest.schema.tests import TestResult, TestType
from quicktest.values import type_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from quicktest.reflection import MemberHandle, MemberResolver
    from quicktest.schema.tests import Test, TestArgument
    from quicktest.values import RuntimeValue

logger = logging.getLogger(__name__)

EXPECTED_VALUE_FAIL = 'Expected Value Fail'
ASSERT_FAIL = 'Assert Fail'

#: Test type handler: `(test, member, receiver, owner type)`.
type Scenario = Callable[['Test', 'MemberHandle', 'RuntimeValue', type], None]


def describe_error(error: BaseException) -> str:
    """Render an error as a one-line `<type>: <message>` summary."""
    message = error.message if isinstance(error, QuickTestError) else str(error)

    return f'{type(error).__name__}: {message}'


class TestRunner:
    """Runs test records against targets found through a resolver."""

    __test__ = False

    def __init__(self, resolver: 'MemberResolver | None' = None) -> None:
        """Initialize a runner.

        Args:
            resolver: Member resolution capability. A `PythonResolver`
                with settings from the environment is used when omitted.
        """
        self.resolver = resolver if resolver is not None else PythonResolver()

        self.scenarios: dict[TestType, Scenario] = {
            TestType.FUNCTION: self.run_function,
            TestType.PROCEDURE: self.run_procedure,
            TestType.PROPERTY_GETTER: self.run_property_getter,
            TestType.PROPERTY_SETTER: self.run_property_setter,
        }

    def run(self, test: 'Test') -> TestResult:
        """Run a test and record its verdict on the record.

        Prior results are cleared first, so a test can be re-run.

        Args:
            test: Test record to run; its result fields are updated.

        Returns:
            The verdict stored in `test.result`.
        """
        test.result = TestResult.UNKNOWN
        test.fail_info = ''
        test.capture(None)

        logger.debug('Running %s test of %s', test.test_type, test.member)

        try:
            self.execute(test)

        except QuickTestError as error:
            error.context = {**(error.context or {}), 'member': test.member}
            logger.debug('Run failed: %s', error)

            cause = error.cause if isinstance(error, InvocationError) else error
            self.fail(test, describe_error(cause))

        except Exception as error:  # noqa: BLE001
            self.fail(test, describe_error(error))

        test.result_time_utc = datetime.now(UTC)

        logger.info('%s %s: %s', test.member, test.test_type, test.result)
        return test.result

    def execute(self, test: 'Test') -> None:
        """Resolve the target, build the receiver and run the scenario.

        Raises:
            QuickTestError: On any resolution, construction, evaluation
                or invocation failure.
        """
        owner_name, member_name = split_member(test.member)

        owner = self.resolver.find_type(owner_name)
        member = self.resolver.find_member(owner, member_name)

        receiver = None
        if member is None:
            receiver = self.build_receiver(owner, test.this_string)
            member = self.resolver.find_member(owner, member_name, receiver)
        elif not self.resolver.is_static(member):
            receiver = self.build_receiver(owner, test.this_string)

        if member is None:
            raise ResolutionError(f'Member {member_name!r} not found in {type_name(owner)!r}')

        self.scenarios[test.test_type](test, member, receiver, owner)

    def build_receiver(self, owner: type, this_string: str) -> 'RuntimeValue':
        """Build the receiver described by a test's this-string.

        An empty string default-constructs the owner type. An object
        literal default-constructs it and applies the assignments. Any
        other expression is evaluated without a receiver and its value
        is used as the receiver.
        """
        if not this_string.strip():
            return self.resolver.construct(owner)

        expression = parse(this_string)
        if isinstance(expression, ObjectLiteral):
            receiver = self.resolver.construct(owner)
            return self.assign(receiver, owner, expression, EvalEnv(receiver, owner, self.resolver))

        return expression.eval(EvalEnv(None, owner, self.resolver))

    def assign(self, instance: 'RuntimeValue', kind: type,
               literal: ObjectLiteral, env: EvalEnv) -> 'RuntimeValue':
        """Apply object literal assignments to an instance in order.

        Raises:
            ResolutionError: If `kind` has no member with an assigned name.
            ConstructionError: If a member is not writable.
        """
        for assignment in literal.assignments:
            member = self.resolver.find_member(kind, assignment.name, instance)
            if member is None:
                raise ResolutionError(f'{assignment.name!r} not found in {type_name(kind)!r}')

            self.resolver.set_value(member, instance, assignment.value.eval(env))

        return instance

    def evaluate_arguments(self, test: 'Test', receiver: 'RuntimeValue',
                           owner: type) -> list['RuntimeValue']:
        """Evaluate argument value strings in call-site order.

        Argument expressions are evaluated against the receiver, so they
        can refer to its members.
        """
        env = EvalEnv(receiver, owner, self.resolver)

        return [
            self.evaluate_argument(argument, env)
            for argument in test.arguments
        ]

    def evaluate_argument(self, argument: 'TestArgument', env: EvalEnv) -> 'RuntimeValue':
        if not argument.value_string.strip():
            if not argument.value_type:
                return None
            return self.resolver.construct(self.resolver.find_type(argument.value_type))

        expression = parse(argument.value_string)
        if isinstance(expression, ObjectLiteral):
            kind = self.resolver.find_type(argument.value_type)
            return self.assign(self.resolver.construct(kind), kind, expression, env)

        return expression.eval(env)

    def run_function(self, test: 'Test', member: 'MemberHandle',
                     receiver: 'RuntimeValue', owner: type) -> None:
        args = self.evaluate_arguments(test, receiver, owner)
        test.capture(self.resolver.invoke(member, receiver, args))

        self.check_expected_value(test)
        self.check_asserts(test, receiver, owner)

    def run_procedure(self, test: 'Test', member: 'MemberHandle',
                      receiver: 'RuntimeValue', owner: type) -> None:
        args = self.evaluate_arguments(test, receiver, owner)
        test.capture(self.resolver.invoke(member, receiver, args))

        self.check_asserts(test, receiver, owner)

    def run_property_getter(self, test: 'Test', member: 'MemberHandle',
                            receiver: 'RuntimeValue', owner: type) -> None:
        test.capture(self.resolver.get_value(member, receiver))

        self.check_expected_value(test)
        self.check_asserts(test, receiver, owner)

    def run_property_setter(self, test: 'Test', member: 'MemberHandle',
                            receiver: 'RuntimeValue', owner: type) -> None:
        args = self.evaluate_arguments(test, receiver, owner)
        if len(args) != 1:
            raise ResolutionError(
                f'Setter of {member.name!r} takes exactly one argument, got {len(args)}',
            )

        self.resolver.set_value(member, receiver, args[0])
        test.capture(None)

        self.check_asserts(test, receiver, owner)

    def check_expected_value(self, test: 'Test') -> None:
        """Compare the captured value with the expected one as strings."""
        if test.result == TestResult.FAIL or not test.expected_value_string:
            return

        if test.value_string != test.expected_value_string:
            self.fail(test, EXPECTED_VALUE_FAIL)
        else:
            test.result = TestResult.PASS

    def check_asserts(self, test: 'Test', receiver: 'RuntimeValue', owner: type) -> None:
        """Evaluate the assertion against the receiver after the call.

        Only the boolean `True` passes; any other value fails.
        """
        if test.result == TestResult.FAIL or not test.assert_string.strip():
            return

        value = parse(test.assert_string).eval(EvalEnv(receiver, owner, self.resolver))

        if value is True:
            test.result = TestResult.PASS
        else:
            self.fail(test, ASSERT_FAIL)

    @staticmethod
    def fail(test: 'Test', fail_info: str) -> None:
        test.result = TestResult.FAIL
        test.fail_info = fail_info
