"""Expression language used by test records.

Test records describe receivers, arguments and assertions as small
expressions: literals, identifiers, `.` member chains, binary operators
and object literals such as `{ first_name: "Ada", age = 36 }`.

The public entry points are `tokenize` and `parse`; evaluation happens
through `Expression.eval` with an `EvalEnv`.
"""

from .env import EvalEnv
from .lexer import tokenize
from .nodes import Assignment, BinaryOp, Constant, Expression, Member, ObjectLiteral, Variable
from .parser import parse
from .tokens import Token, TokenKind

__all__ = (
    'Assignment',
    'BinaryOp',
    'Constant',
    'EvalEnv',
    'Expression',
    'Member',
    'ObjectLiteral',
    'Token',
    'TokenKind',
    'Variable',
    'parse',
    'tokenize',
)
