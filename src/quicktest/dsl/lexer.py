"""Expression tokenizer.

`tokenize` turns expression text into a lazy sequence of tokens. The
sequence is a pure function of the input and can be restarted by
calling `tokenize` again.

A `-` followed by a digit or a `.` always starts a numeric literal, so
`a -1` and `a-1` both lex as an identifier followed by the number `-1`.
"""

from typing import TYPE_CHECKING

from quicktest.errors import LexError

from .tokens import PAIRED_KINDS, SINGLE_CHARACTER_KINDS, Token, TokenKind

if TYPE_CHECKING:
    from collections.abc import Iterator


QUOTES = ('"', "'")

ESCAPES = {
    'r': '\r',
    'n': '\n',
    't': '\t',
    "'": "'",
    '"': '"',
}


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_identifier_start(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or _is_digit(ch)


def tokenize(source: str) -> 'Iterator[Token]':
    """Lazily split expression text into tokens.

    Args:
        source: Expression text.

    Yields:
        Tokens in source order.

    Raises:
        LexError: On a character that cannot start any token.
    """
    p = 0
    end = len(source)

    while p < end:
        ch = source[p]

        if ch.isspace():
            p += 1
            continue

        if kind := SINGLE_CHARACTER_KINDS.get(ch):
            yield Token(kind, source, p, 1)
            p += 1

        elif ch == '.':
            if p + 1 < end and _is_digit(source[p + 1]):
                token = _scan_number(source, p)
                yield token
                p += token.length
            else:
                yield Token(TokenKind.DOT, source, p, 1)
                p += 1

        elif ch == '-':
            if p + 1 < end and (_is_digit(source[p + 1]) or source[p + 1] == '.'):
                token = _scan_number(source, p)
                yield token
                p += token.length
            else:
                yield Token(TokenKind.SUBTRACT, source, p, 1)
                p += 1

        elif ch in PAIRED_KINDS:
            second, short, long = PAIRED_KINDS[ch]
            if p + 1 < end and source[p + 1] == second:
                yield Token(long, source, p, 2)
                p += 2
            else:
                yield Token(short, source, p, 1)
                p += 1

        elif ch in QUOTES:
            token, p = _scan_string(source, p)
            yield token

        elif _is_digit(ch):
            token = _scan_number(source, p)
            yield token
            p += token.length

        elif _is_identifier_start(ch):
            start = p
            while p < end and _is_identifier_char(source[p]):
                p += 1
            yield Token(TokenKind.IDENTIFIER, source, start, p - start)

        else:
            raise LexError.at(f'Unexpected character {ch!r}', source, p)


def _scan_string(source: str, p: int) -> tuple[Token, int]:
    """Scan a quoted string starting at the opening quote.

    An unterminated string runs to the end of the input.

    Returns:
        The string token and the offset just past the closing quote.
    """
    quote = source[p]
    start = p + 1
    end = len(source)
    chars: list[str] = []

    p = start
    while p < end:
        ch = source[p]
        if ch == '\\':
            if p + 1 < end:
                escaped = source[p + 1]
                chars.append(ESCAPES.get(escaped, escaped))
                p += 2
            else:
                chars.append(ch)
                p += 1
        elif ch == quote:
            break
        else:
            chars.append(ch)
            p += 1

    token = Token(TokenKind.STRING, source, start, p - start, value=''.join(chars))

    return token, p + 1


def _scan_number(source: str, start: int) -> Token:
    """Scan a numeric literal starting at `start`.

    Accepts digits, one `.`, one exponent marker with at most one `-`
    after it, a `-` at the very start, and a trailing `f` that ends
    the literal.
    """
    end = len(source)
    got_dot = got_e = got_e_minus = False

    p = start
    while p < end:
        ch = source[p]
        if _is_digit(ch):
            p += 1
        elif ch == '.':
            if got_dot:
                break
            got_dot = True
            p += 1
        elif ch == '-':
            if p == start:
                p += 1
            elif got_e and not got_e_minus:
                got_e_minus = True
                p += 1
            else:
                break
        elif ch in 'eE':
            if got_e:
                break
            got_e = True
            p += 1
        elif ch == 'f':
            p += 1
            break
        else:
            break

    return Token(TokenKind.NUMBER, source, start, p - start)
