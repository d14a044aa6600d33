"""Recursive-descent expression parser.

Grammar, from lowest to highest precedence::

    or          := and ('||' and)*
    and         := equality ('&&' equality)*
    equality    := relational (('==' | '!=') relational)?
    relational  := additive (('<' | '<=' | '>' | '>=') additive)?
    additive    := multiplicative (('+' | '-') multiplicative)*
    multiplicative := postfix (('*' | '/') postfix)*
    postfix     := primary ('.' IDENTIFIER)*
    primary     := STRING | NUMBER | IDENTIFIER | '(' or ')' | object
    object      := '{' ((IDENTIFIER | STRING) (':' | '=') or ','?)* '}'

Equality and relational operators apply at most once per level, so
`a == b == c` is rejected as trailing input.
"""

import logging
from typing import TYPE_CHECKING

from quicktest.errors import ParseError

from .lexer import tokenize
from .nodes import Assignment, BinaryOp, Constant, Expression, Member, ObjectLiteral, Variable
from .tokens import TokenKind

if TYPE_CHECKING:
    from .tokens import Token

logger = logging.getLogger(__name__)

EQUALITY_KINDS = frozenset((TokenKind.EQUAL, TokenKind.NOT_EQUAL))
RELATIONAL_KINDS = frozenset((
    TokenKind.LESS_THAN,
    TokenKind.LESS_THAN_OR_EQUAL,
    TokenKind.GREATER_THAN,
    TokenKind.GREATER_THAN_OR_EQUAL,
))
ADDITIVE_KINDS = frozenset((TokenKind.ADD, TokenKind.SUBTRACT))
MULTIPLICATIVE_KINDS = frozenset((TokenKind.MULTIPLY, TokenKind.DIVIDE))

KEYWORDS = {
    'true': True,
    'false': False,
}


class Parser:
    """Parser over the fully materialized token list of one expression."""

    def __init__(self, source: str) -> None:
        """Tokenize the source text.

        Raises:
            LexError: If the source cannot be tokenized.
        """
        self.source = source
        self.tokens: list[Token] = list(tokenize(source))
        self.p = 0

    def parse(self) -> Expression:
        """Parse the whole token list as one expression.

        Raises:
            ParseError: If the tokens do not form exactly one expression.
        """
        expression = self.parse_or()

        if (token := self.peek()) is not None:
            raise self.error(f'Unexpected {token.lexeme!r} after expression', token)

        return expression

    def peek(self) -> 'Token | None':
        if self.p < len(self.tokens):
            return self.tokens[self.p]
        return None

    def accept(self, *kinds: TokenKind) -> 'Token | None':
        """Consume and return the next token if it has one of `kinds`."""
        token = self.peek()
        if token is not None and token.kind in kinds:
            self.p += 1
            return token
        return None

    def error(self, message: str, token: 'Token | None' = None) -> ParseError:
        position = token.start if token is not None else len(self.source)
        return ParseError.at(message, self.source, position)

    def parse_or(self) -> Expression:
        expression = self.parse_and()
        while self.accept(TokenKind.LOGICAL_OR):
            expression = BinaryOp(TokenKind.LOGICAL_OR, expression, self.parse_and())
        return expression

    def parse_and(self) -> Expression:
        expression = self.parse_equality()
        while self.accept(TokenKind.LOGICAL_AND):
            expression = BinaryOp(TokenKind.LOGICAL_AND, expression, self.parse_equality())
        return expression

    def parse_equality(self) -> Expression:
        expression = self.parse_relational()
        if token := self.accept(*EQUALITY_KINDS):
            expression = BinaryOp(token.kind, expression, self.parse_relational())
        return expression

    def parse_relational(self) -> Expression:
        expression = self.parse_additive()
        if token := self.accept(*RELATIONAL_KINDS):
            expression = BinaryOp(token.kind, expression, self.parse_additive())
        return expression

    def parse_additive(self) -> Expression:
        expression = self.parse_multiplicative()
        while token := self.accept(*ADDITIVE_KINDS):
            expression = BinaryOp(token.kind, expression, self.parse_multiplicative())
        return expression

    def parse_multiplicative(self) -> Expression:
        expression = self.parse_postfix()
        while token := self.accept(*MULTIPLICATIVE_KINDS):
            expression = BinaryOp(token.kind, expression, self.parse_postfix())
        return expression

    def parse_postfix(self) -> Expression:
        expression = self.parse_primary()
        while dot := self.accept(TokenKind.DOT):
            name = self.accept(TokenKind.IDENTIFIER)
            if name is None:
                raise self.error("Expected member name after '.'", self.peek() or dot)
            expression = Member(expression, name.lexeme)
        return expression

    def parse_primary(self) -> Expression:
        token = self.peek()
        if token is None:
            raise self.error('Unexpected end of expression')

        if token.kind == TokenKind.LEFT_CURLY:
            return self.parse_object_literal()

        self.p += 1

        match token.kind:
            case TokenKind.IDENTIFIER:
                if token.lexeme in KEYWORDS:
                    return Constant(KEYWORDS[token.lexeme])
                return Variable(token.lexeme)
            case TokenKind.STRING:
                return Constant(token.lexeme)
            case TokenKind.NUMBER:
                return Constant(self.parse_number(token))
            case TokenKind.LEFT_PAREN:
                expression = self.parse_or()
                if not self.accept(TokenKind.RIGHT_PAREN):
                    raise self.error("Expected closing ')'", self.peek())
                return expression

        raise self.error(f'Unexpected {token.lexeme!r}', token)

    def parse_number(self, token: 'Token') -> int | float:
        """Interpret a number token as an int when possible, else a float.

        The lexer keeps a trailing `f` in the token, but such text is
        neither an int nor a float and is rejected.

        Raises:
            ParseError: If the text is not a valid number.
        """
        text = token.lexeme
        try:
            return int(text)
        except ValueError:
            pass

        try:
            return float(text)
        except ValueError:
            raise self.error(f'Cannot interpret number {text!r}', token) from None

    def parse_object_literal(self) -> ObjectLiteral:
        opening = self.tokens[self.p]
        self.p += 1

        assignments: list[Assignment] = []

        while (token := self.peek()) is not None:
            if token.kind == TokenKind.RIGHT_CURLY:
                self.p += 1
                return ObjectLiteral(tuple(assignments))

            if self.accept(TokenKind.COMMA):
                continue

            if not self.accept(TokenKind.IDENTIFIER, TokenKind.STRING):
                raise self.error(f'Expected member name, got {token.lexeme!r}', token)

            if not self.accept(TokenKind.COLON, TokenKind.ASSIGN):
                raise self.error(f"Expected ':' or '=' after {token.lexeme!r}", self.peek())

            assignments.append(Assignment(token.lexeme, self.parse_or()))

        raise self.error("Expected closing '}'", opening)


def parse(source: str) -> Expression:
    """Parse expression text into an expression tree.

    Args:
        source: Expression text.

    Returns:
        The root expression node.

    Raises:
        LexError: If the text contains a character no token can start with.
        ParseError: If the text is not exactly one well-formed expression.
    """
    parser = Parser(source)
    logger.debug('Tokens: %s', parser.tokens)

    expression = parser.parse()
    logger.debug('AST: %s', expression)

    return expression
