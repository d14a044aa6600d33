"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from quicktest.dsl import EvalEnv
from quicktest.reflection import PythonResolver
from quicktest.schema import Test, TestArgument, TestType
from quicktest.settings import HarnessSettings

from .examples.people import Location, Person

if TYPE_CHECKING:
    from collections.abc import Callable

PERSON = 'tests.examples.people.Person'
FRANK = '{ first_name: "Frank", last_name: "Krueger" }'


@pytest.fixture
def settings() -> HarnessSettings:
    """Provide default settings isolated from the environment."""
    return HarnessSettings(include_private=True, preload_modules=[], strict=False)


@pytest.fixture
def resolver(settings: HarnessSettings) -> PythonResolver:
    """Provide a resolver with short aliases for the example types.

    Qualified names such as `tests.examples.people.Person` resolve as
    well; the aliases only keep expressions in tests short.
    """
    return PythonResolver(settings, aliases={
        'Person': Person,
        'Location': Location,
    })


@pytest.fixture
def person_env(resolver: PythonResolver) -> 'Callable[..., EvalEnv]':
    """Provide a factory of environments bound to a `Person` receiver."""
    def factory(first_name: str = 'Frank', last_name: str = 'Krueger') -> EvalEnv:
        return EvalEnv(Person(first_name, last_name), Person, resolver)

    return factory


@pytest.fixture
def person_test() -> 'Callable[..., Test]':
    """Provide a factory of tests targeting members of `Person`.

    The receiver defaults to Frank Krueger. Arguments are given as
    `(value_string, value_type)` pairs in call-site order.
    """
    def factory(member: str, test_type: TestType = TestType.PROPERTY_GETTER, *,
                this_string: str = FRANK,
                arguments: 'list[tuple[str, str]] | None' = None,
                expected_value_string: str = '',
                assert_string: str = '') -> Test:
        return Test(
            member=f'{PERSON}.{member}',
            test_type=test_type,
            this_string=this_string,
            arguments=[
                TestArgument(name=f'arg{index}', value_string=value, value_type=kind)
                for index, (value, kind) in enumerate(arguments or [])
            ],
            expected_value_string=expected_value_string,
            assert_string=assert_string,
        )

    return factory
