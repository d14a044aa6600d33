"""Evaluation environment binding a receiver to a member resolver."""

from typing import TYPE_CHECKING

from quicktest.errors import EvaluationError, ResolutionError
from quicktest.values import type_name

if TYPE_CHECKING:
    from quicktest.reflection import MemberResolver
    from quicktest.values import RuntimeValue


class EvalEnv:
    """Environment for a single expression evaluation.

    Bare identifiers are looked up as members of `receiver_type` on
    `receiver`. A `None` receiver with a known type still gives access
    to static members of that type.
    """

    def __init__(self, receiver: 'RuntimeValue', receiver_type: type | None,
                 resolver: 'MemberResolver') -> None:
        """Initialize an evaluation environment.

        Args:
            receiver: Bound receiver instance, or `None`.
            receiver_type: Type whose members identifiers resolve to.
            resolver: Member resolution capability.
        """
        self.receiver = receiver
        self.receiver_type = receiver_type
        self.resolver = resolver

    def lookup(self, name: str) -> 'RuntimeValue':
        """Read a member of the bound receiver by name.

        Raises:
            EvaluationError: If no receiver type is bound or the member
                cannot be read.
            ResolutionError: If the receiver type has no such member.
        """
        if self.receiver_type is None:
            raise EvaluationError(f'No receiver is bound to resolve {name!r}')

        return self._read(self.receiver, self.receiver_type, name)

    def read(self, target: 'RuntimeValue', name: str) -> 'RuntimeValue':
        """Read a member of an evaluated value using its runtime type.

        Raises:
            EvaluationError: If the target is `None` or the member cannot
                be read.
            ResolutionError: If the target's type has no such member.
        """
        if target is None:
            raise EvaluationError(f'Object is null when accessing {name!r}')

        return self._read(target, type(target), name)

    def _read(self, target: 'RuntimeValue', kind: type, name: str) -> 'RuntimeValue':
        member = self.resolver.find_member(kind, name, target)
        if member is None:
            raise ResolutionError(f'{name!r} not found in {type_name(kind)!r}')

        if not member.readable:
            raise EvaluationError(
                f'{name!r} in {type_name(kind)!r} is a {member.kind}, not a value',
            )

        return self.resolver.get_value(member, target)
