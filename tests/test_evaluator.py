"""Tests for expression evaluation against a receiver."""

import re
from typing import TYPE_CHECKING

import pytest

from quicktest.dsl import EvalEnv, parse
from quicktest.errors import EvaluationError, ResolutionError

from .examples.accounts import Account
from .examples.people import Location, Person

if TYPE_CHECKING:
    from collections.abc import Callable

    from quicktest.reflection import PythonResolver


@pytest.mark.parametrize(('source', 'expected'), (
    pytest.param('first_name', 'Frank', id='field'),
    pytest.param('full_name', 'Frank Krueger', id='property'),
    pytest.param('location.lat', 0.0, id='member chain'),
    pytest.param('population', 0, id='class variable'),
    pytest.param('_location.lon', 0.0, id='private field'),
    pytest.param('42', 42, id='constant'),
    pytest.param('first_name == "Frank"', True, id='equal'),
    pytest.param('first_name == "Foo"', False, id='not equal'),
    pytest.param('location.lat == 0', True, id='numeric equality'),
    pytest.param('true && true', True, id='and'),
    pytest.param('true && false', False, id='and false'),
    pytest.param('first_name == "Frank" && last_name == "Krueger"', True, id='and of comparisons'),
    pytest.param('(first_name == "Frank")', True, id='parenthesized'),
    pytest.param('("Frank") == first_name', True, id='constant left'),
))
def test_evaluation(person_env: 'Callable[..., EvalEnv]', source: str, expected: object) -> None:
    """Test evaluation of supported expressions."""
    value = parse(source).eval(person_env())

    assert value == expected
    assert type(value) is type(expected)


def test_and_evaluates_both_sides(person_env: 'Callable[..., EvalEnv]') -> None:
    """Test that '&&' evaluates its right operand even when the left is false."""
    with pytest.raises(ResolutionError, match=r"'missing' not found"):
        parse('false && missing').eval(person_env())


@pytest.mark.parametrize('source', (
    pytest.param('first_name && true', id='string left'),
    pytest.param('true && 1', id='integer right'),
))
def test_and_requires_booleans(person_env: 'Callable[..., EvalEnv]', source: str) -> None:
    """Test that '&&' rejects non-boolean operands."""
    with pytest.raises(EvaluationError, match=r"^Operator '&&' expects booleans"):
        parse(source).eval(person_env())


@pytest.mark.parametrize(('source', 'operator'), (
    pytest.param('1 + 2', '+', id='add'),
    pytest.param('3 - 1', '-', id='subtract'),
    pytest.param('2 * 3', '*', id='multiply'),
    pytest.param('4 / 2', '/', id='divide'),
    pytest.param('1 != 2', '!=', id='not equal'),
    pytest.param('1 < 2', '<', id='less'),
    pytest.param('1 <= 2', '<=', id='less or equal'),
    pytest.param('1 > 2', '>', id='greater'),
    pytest.param('1 >= 2', '>=', id='greater or equal'),
    pytest.param('true || false', '||', id='or'),
))
def test_unsupported_operators(person_env: 'Callable[..., EvalEnv]',
                               source: str, operator: str) -> None:
    """Test that operators without evaluation rules raise."""
    message = rf"^Operator '{re.escape(operator)}' is not supported"

    with pytest.raises(EvaluationError, match=message):
        parse(source).eval(person_env())


def test_equal_with_null_left(resolver: 'PythonResolver') -> None:
    """Test that '==' with a null left operand raises."""
    person = Person('Frank', 'Krueger')
    person.first_name = None  # type: ignore[assignment]

    with pytest.raises(EvaluationError, match=r"^Left operand of '==' is null"):
        parse('first_name == "Frank"').eval(EvalEnv(person, Person, resolver))


def test_null_member_access(resolver: 'PythonResolver') -> None:
    """Test that member access on a null value raises."""
    person = Person('Frank', 'Krueger', _location=None)  # type: ignore[arg-type]

    with pytest.raises(EvaluationError, match=r"^Object is null when accessing 'lat'"):
        parse('location.lat').eval(EvalEnv(person, Person, resolver))


@pytest.mark.parametrize(('source', 'error', 'message'), (
    pytest.param('nickname', ResolutionError, r"'nickname' not found", id='unknown member'),
    pytest.param('location.alt', ResolutionError, r"'alt' not found", id='unknown chain member'),
    pytest.param('lower_case', EvaluationError, r'is a method', id='method as value'),
    pytest.param('{ a: 1 }', EvaluationError, r'^Object literal', id='object literal'),
))
def test_evaluation_errors(person_env: 'Callable[..., EvalEnv]', source: str,
                           error: type[Exception], message: str) -> None:
    """Test errors raised while evaluating member access."""
    with pytest.raises(error, match=message):
        parse(source).eval(person_env())


def test_no_receiver_type(resolver: 'PythonResolver') -> None:
    """Test that identifiers need a bound receiver type."""
    with pytest.raises(EvaluationError, match=r'^No receiver is bound'):
        parse('first_name').eval(EvalEnv(None, None, resolver))


def test_static_member_without_receiver(resolver: 'PythonResolver') -> None:
    """Test that static members resolve without a receiver."""
    assert parse('population').eval(EvalEnv(None, Person, resolver)) == 0


def test_instance_member_without_receiver(resolver: 'PythonResolver') -> None:
    """Test that instance members need a receiver."""
    with pytest.raises(EvaluationError, match=r'requires a receiver'):
        parse('first_name').eval(EvalEnv(None, Person, resolver))


def test_runtime_type_of_chained_value(resolver: 'PythonResolver') -> None:
    """Test that chained members resolve against the value's runtime type."""
    person = Person('Frank', 'Krueger', _location=Location(1.5, 2.5))
    env = EvalEnv(person, Person, resolver)

    assert parse('location.lon == 2.5').eval(env) is True


def test_expression_is_reusable(resolver: 'PythonResolver') -> None:
    """Test that one tree evaluates against different environments."""
    expression = parse('first_name == "Ada"')

    assert expression.eval(EvalEnv(Person('Ada', 'Lovelace'), Person, resolver)) is True
    assert expression.eval(EvalEnv(Person('Alan', 'Turing'), Person, resolver)) is False


def test_instance_attributes(resolver: 'PythonResolver') -> None:
    """Test identifiers naming attributes assigned in `__init__`."""
    account = Account()
    account.balance = 25

    env = EvalEnv(account, Account, resolver)

    assert parse('owner == "nobody" && balance == 25').eval(env) is True
    with pytest.raises(ResolutionError, match=r"^'currency' not found"):
        parse('currency').eval(env)


def test_chained_instance_attribute(resolver: 'PythonResolver') -> None:
    """Test member access into a value that keeps plain instance attributes."""
    person = Person('Frank', 'Krueger')
    person.account = Account()  # type: ignore[attr-defined]

    assert parse('account.owner').eval(EvalEnv(person, Person, resolver)) == 'nobody'
