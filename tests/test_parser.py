"""Tests for the expression parser."""

import pytest

from quicktest.dsl import (
    Assignment,
    BinaryOp,
    Constant,
    Member,
    ObjectLiteral,
    TokenKind,
    Variable,
    parse,
)
from quicktest.errors import LexError, ParseError


@pytest.mark.parametrize(('source', 'expected'), (
    pytest.param('42', Constant(42), id='integer'),
    pytest.param('-3', Constant(-3), id='negative integer'),
    pytest.param('2.5', Constant(2.5), id='decimal'),
    pytest.param('1e3', Constant(1000.0), id='exponent'),
    pytest.param('"text"', Constant('text'), id='string'),
    pytest.param('true', Constant(True), id='true'),
    pytest.param('false', Constant(False), id='false'),
    pytest.param('name', Variable('name'), id='identifier'),
    pytest.param('(name)', Variable('name'), id='parenthesized'),
))
def test_primary(source: str, expected: object) -> None:
    """Test literals, identifiers and grouping."""
    assert parse(source) == expected


def test_number_types() -> None:
    """Test that integers stay integers and decimals become floats."""
    assert type(parse('1').value) is int  # type: ignore[attr-defined]
    assert type(parse('1.0').value) is float  # type: ignore[attr-defined]


def test_member_chain() -> None:
    """Test that member access is left associative."""
    assert parse('a.b.c') == Member(Member(Variable('a'), 'b'), 'c')


def test_member_of_literal() -> None:
    """Test member access on a parenthesized expression."""
    assert parse('("x").length') == Member(Constant('x'), 'length')


@pytest.mark.parametrize(('source', 'expected'), (
    pytest.param('a + b * c', BinaryOp(
        TokenKind.ADD,
        Variable('a'),
        BinaryOp(TokenKind.MULTIPLY, Variable('b'), Variable('c')),
    ), id='multiplicative binds tighter'),
    pytest.param('a - b - c', BinaryOp(
        TokenKind.SUBTRACT,
        BinaryOp(TokenKind.SUBTRACT, Variable('a'), Variable('b')),
        Variable('c'),
    ), id='additive left associative'),
    pytest.param('a < b == c > d', BinaryOp(
        TokenKind.EQUAL,
        BinaryOp(TokenKind.LESS_THAN, Variable('a'), Variable('b')),
        BinaryOp(TokenKind.GREATER_THAN, Variable('c'), Variable('d')),
    ), id='relational binds tighter than equality'),
    pytest.param('a == b && c != d', BinaryOp(
        TokenKind.LOGICAL_AND,
        BinaryOp(TokenKind.EQUAL, Variable('a'), Variable('b')),
        BinaryOp(TokenKind.NOT_EQUAL, Variable('c'), Variable('d')),
    ), id='equality binds tighter than and'),
    pytest.param('a || b && c', BinaryOp(
        TokenKind.LOGICAL_OR,
        Variable('a'),
        BinaryOp(TokenKind.LOGICAL_AND, Variable('b'), Variable('c')),
    ), id='and binds tighter than or'),
    pytest.param('(a || b) && c', BinaryOp(
        TokenKind.LOGICAL_AND,
        BinaryOp(TokenKind.LOGICAL_OR, Variable('a'), Variable('b')),
        Variable('c'),
    ), id='parentheses override'),
    pytest.param('a <= 1 && b >= 2', BinaryOp(
        TokenKind.LOGICAL_AND,
        BinaryOp(TokenKind.LESS_THAN_OR_EQUAL, Variable('a'), Constant(1)),
        BinaryOp(TokenKind.GREATER_THAN_OR_EQUAL, Variable('b'), Constant(2)),
    ), id='relational variants'),
))
def test_precedence(source: str, expected: object) -> None:
    """Test operator precedence and associativity."""
    assert parse(source) == expected


@pytest.mark.parametrize(('source', 'expected'), (
    pytest.param('{}', ObjectLiteral(), id='empty'),
    pytest.param('{ a: 1 }', ObjectLiteral((
        Assignment('a', Constant(1)),
    )), id='colon'),
    pytest.param('{a=1,b=2}', ObjectLiteral((
        Assignment('a', Constant(1)),
        Assignment('b', Constant(2)),
    )), id='equals with commas'),
    pytest.param('{ a: 1 b: "x" }', ObjectLiteral((
        Assignment('a', Constant(1)),
        Assignment('b', Constant('x')),
    )), id='without commas'),
    pytest.param('{ "a": 1,, }', ObjectLiteral((
        Assignment('a', Constant(1)),
    )), id='quoted name and extra commas'),
    pytest.param('{ a: b.c }', ObjectLiteral((
        Assignment('a', Member(Variable('b'), 'c')),
    )), id='expression value'),
    pytest.param('{ a: { b: 1 } }', ObjectLiteral((
        Assignment('a', ObjectLiteral((Assignment('b', Constant(1)),))),
    )), id='nested'),
))
def test_object_literal(source: str, expected: ObjectLiteral) -> None:
    """Test object literal forms."""
    assert parse(source) == expected


def test_object_literal_keeps_order() -> None:
    """Test that assignments keep their source order."""
    literal = parse('{ z: 1, a: 2, m: 3 }')

    assert isinstance(literal, ObjectLiteral)
    assert [item.name for item in literal.assignments] == ['z', 'a', 'm']


def test_parse_is_deterministic() -> None:
    """Test that parsing the same text twice yields equal trees."""
    source = '{ a: 1 } == x.y && (b || "c")'

    assert parse(source) == parse(source)


@pytest.mark.parametrize(('source', 'message'), (
    pytest.param('', r'^Unexpected end of expression', id='empty'),
    pytest.param('a &&', r'^Unexpected end of expression', id='missing operand'),
    pytest.param('(a', r"^Expected closing '\)'", id='unclosed paren'),
    pytest.param('a.', r'^Expected member name', id='dangling dot'),
    pytest.param('a.(b)', r'^Expected member name', id='grouped member'),
    pytest.param('a b', r"^Unexpected 'b' after expression", id='trailing token'),
    pytest.param('a == b == c', r"^Unexpected '==' after expression", id='chained equality'),
    pytest.param('a < b < c', r"^Unexpected '<' after expression", id='chained relational'),
    pytest.param(')', r"^Unexpected '\)'", id='stray paren'),
    pytest.param('{ a: 1', r"^Expected closing '\}'", id='unclosed object'),
    pytest.param('{ 1: 2 }', r'^Expected member name', id='numeric name'),
    pytest.param('{ a 1 }', r"^Expected ':' or '='", id='missing separator'),
    pytest.param('1e', r'^Cannot interpret number', id='bad exponent'),
    pytest.param('2f', r"^Cannot interpret number '2f'", id='integer with suffix'),
    pytest.param('1.5f', r"^Cannot interpret number '1\.5f'", id='decimal with suffix'),
    pytest.param('-', r"^Unexpected '-'", id='lone minus'),
))
def test_parse_errors(source: str, message: str) -> None:
    """Test errors on malformed expressions."""
    with pytest.raises(ParseError, match=message):
        parse(source)


def test_parse_error_position() -> None:
    """Test that parse errors point at the offending token."""
    with pytest.raises(ParseError) as error:
        parse('a b')

    assert error.value.context is not None
    assert error.value.context.get('position') == 2
    assert 'column 3' in str(error.value)


def test_lex_errors_propagate() -> None:
    """Test that tokenizer errors surface from parsing."""
    with pytest.raises(LexError):
        parse('a # b')
