"""Expression tree nodes and their evaluation rules.

Nodes are frozen dataclasses, so a parsed tree never changes and can be
evaluated any number of times against different environments. Two
parses of the same text compare equal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quicktest.errors import EvaluationError

from .tokens import TokenKind

if TYPE_CHECKING:
    from quicktest.values import RuntimeValue

    from .env import EvalEnv


class Expression(ABC):
    """Base class of all expression nodes."""

    @abstractmethod
    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        """Evaluate the expression in an environment."""


@dataclass(frozen=True)
class Constant(Expression):
    """A literal boolean, number or string."""

    value: bool | int | float | str

    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        return self.value


@dataclass(frozen=True)
class Variable(Expression):
    """A bare identifier resolved against the bound receiver."""

    name: str

    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        return env.lookup(self.name)


@dataclass(frozen=True)
class Member(Expression):
    """A `target.name` access on the value of another expression."""

    target: Expression
    name: str

    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        return env.read(self.target.eval(env), self.name)


@dataclass(frozen=True)
class BinaryOp(Expression):
    """A binary operator applied to two operands.

    Every operator the parser accepts is representable, but only `&&`
    and `==` can be evaluated; the rest raise `EvaluationError`.
    """

    operator: TokenKind
    left: Expression
    right: Expression

    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        left = self.left.eval(env)

        if self.operator == TokenKind.LOGICAL_AND:
            # Both operands are always evaluated.
            right = self.right.eval(env)
            if not isinstance(left, bool) or not isinstance(right, bool):
                raise EvaluationError(
                    f"Operator '&&' expects booleans, got "
                    f'{type(left).__name__} and {type(right).__name__}',
                )
            return left and right

        if self.operator == TokenKind.EQUAL:
            if left is None:
                raise EvaluationError("Left operand of '==' is null")
            return bool(left == self.right.eval(env))

        raise EvaluationError(f'Operator {self.operator.value!r} is not supported')


@dataclass(frozen=True)
class Assignment:
    """A single `name: value` entry of an object literal."""

    name: str
    value: Expression


@dataclass(frozen=True)
class ObjectLiteral(Expression):
    """Named assignments applied to a freshly constructed instance.

    Object literals are consumed by receiver and argument construction
    and never evaluated on their own.
    """

    assignments: tuple[Assignment, ...] = ()

    def eval(self, env: 'EvalEnv') -> 'RuntimeValue':
        raise EvaluationError('Object literal cannot be evaluated directly')
