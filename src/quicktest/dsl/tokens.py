"""Token kinds and token records produced by the lexer."""

from dataclasses import dataclass, field
from enum import StrEnum


class TokenKind(StrEnum):
    """Kind of a lexical token.

    Punctuation and operator kinds are valued with their source text.
    """

    DOT = '.'
    COMMA = ','
    COLON = ':'

    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_CURLY = '{'
    RIGHT_CURLY = '}'

    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'

    ASSIGN = '='

    STRING = 'string'
    NUMBER = 'number'
    IDENTIFIER = 'identifier'

    EQUAL = '=='
    NOT_EQUAL = '!='

    LESS_THAN = '<'
    LESS_THAN_OR_EQUAL = '<='
    GREATER_THAN = '>'
    GREATER_THAN_OR_EQUAL = '>='

    LOGICAL_OR = '||'
    BITWISE_OR = '|'
    LOGICAL_AND = '&&'
    BITWISE_AND = '&'
    LOGICAL_NOT = '!'


#: Kinds emitted for a single character with no lookahead.
SINGLE_CHARACTER_KINDS = {
    kind.value: kind
    for kind in (
        TokenKind.COMMA,
        TokenKind.COLON,
        TokenKind.LEFT_PAREN,
        TokenKind.RIGHT_PAREN,
        TokenKind.LEFT_CURLY,
        TokenKind.RIGHT_CURLY,
        TokenKind.ADD,
        TokenKind.MULTIPLY,
        TokenKind.DIVIDE,
    )
}

#: Operators matched longest first:
#: `first -> (second, one-character kind, two-character kind)`.
PAIRED_KINDS = {
    '=': ('=', TokenKind.ASSIGN, TokenKind.EQUAL),
    '<': ('=', TokenKind.LESS_THAN, TokenKind.LESS_THAN_OR_EQUAL),
    '>': ('=', TokenKind.GREATER_THAN, TokenKind.GREATER_THAN_OR_EQUAL),
    '|': ('|', TokenKind.BITWISE_OR, TokenKind.LOGICAL_OR),
    '&': ('&', TokenKind.BITWISE_AND, TokenKind.LOGICAL_AND),
    '!': ('=', TokenKind.LOGICAL_NOT, TokenKind.NOT_EQUAL),
}


@dataclass(frozen=True)
class Token:
    """Immutable token referencing a span of the source text.

    The lexeme is sliced from the source on access. String tokens keep
    their unescaped value instead, since it differs from the raw span.
    """

    kind: TokenKind
    source: str = field(repr=False, compare=False)
    start: int
    length: int
    value: str | None = field(default=None, repr=False)

    @property
    def lexeme(self) -> str:
        """Return the token text (the unescaped text for strings)."""
        if self.value is not None:
            return self.value

        return self.source[self.start:self.start + self.length]

    def __str__(self) -> str:
        """Return the lexeme."""
        return self.lexeme
