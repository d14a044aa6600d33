"""Member resolution capability consumed by the evaluator and the runner."""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from quicktest.values import RuntimeValue


class MemberKind(StrEnum):
    """Kind of a resolved member."""

    FIELD = 'field'
    PROPERTY = 'property'
    METHOD = 'method'


@dataclass(frozen=True)
class MemberHandle:
    """Resolved member of a type.

    Attributes:
        name: Member name.
        kind: Whether the member is a field, a property or a method.
        owner: Type that declares the member.
        static: Whether the member is accessed without a receiver.
        writable: Whether a value can be assigned to the member.
    """

    name: str
    kind: MemberKind
    owner: type
    static: bool = False
    writable: bool = True

    @property
    def readable(self) -> bool:
        """Whether the member holds a value (a field or a property)."""
        return self.kind != MemberKind.METHOD


@runtime_checkable
class MemberResolver(Protocol):
    """Host capability that finds, reads, writes and invokes members.

    Implementations must raise `ResolutionError` for unknown types,
    `ConstructionError` for failed construction or assignment, and wrap
    any exception raised by the target itself in `InvocationError`.
    """

    def find_type(self, qualified_name: str) -> type:
        """Resolve a type by its qualified name."""

    def find_member(self, kind: type, name: str,
                    instance: 'RuntimeValue' = None) -> MemberHandle | None:
        """Find a member of a type, or of `instance` when given, by name."""

    def is_static(self, member: MemberHandle) -> bool:
        """Whether the member is used without a receiver."""

    def get_value(self, member: MemberHandle, receiver: 'RuntimeValue') -> 'RuntimeValue':
        """Read a field or property."""

    def set_value(self, member: MemberHandle, receiver: 'RuntimeValue',
                  value: 'RuntimeValue') -> None:
        """Write a field or property."""

    def invoke(self, member: MemberHandle, receiver: 'RuntimeValue',
               args: 'Sequence[RuntimeValue]') -> 'RuntimeValue':
        """Call a method with positional arguments."""

    def construct(self, kind: type) -> 'RuntimeValue':
        """Create an instance with parameterless construction."""

    def load_module(self, path: str) -> None:
        """Make the types of a target module resolvable."""
