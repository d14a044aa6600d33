"""Member resolution for test targets.

The evaluator and the runner never touch target objects directly; they
go through a `MemberResolver`. `PythonResolver` is the implementation
for ordinary Python classes.
"""

from .base import MemberHandle, MemberKind, MemberResolver
from .python import PythonResolver

__all__ = (
    'MemberHandle',
    'MemberKind',
    'MemberResolver',
    'PythonResolver',
)
