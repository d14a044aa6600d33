"""Identifier patterns and qualified member names.

A test targets a member by a dotted qualified name whose last segment is
the member and whose remainder is the owning type, for example
`shop.models.Cart.total`. Nested classes are separated with dots as in
their `__qualname__`.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

from quicktest.errors import ResolutionError

#: Base pattern for DSL identifiers.
_NAME_PATTERN = r'[A-Za-z_]\w*'

#: Compiled pattern for qualified member names.
MEMBER_PATTERN = regexp(
    rf'^(?P<type>{_NAME_PATTERN}(\.{_NAME_PATTERN})*)\.(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)


Identifier = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Identifier',
        description=(
            'Name of a parameter or member. Must start with an ASCII letter '
            'or underscore and may contain letters, digits, or underscores.'
        ),
        examples=[
            'value',
            'first_name',
        ],
    ),
]


def split_member(member: str) -> tuple[str, str]:
    """Split a qualified member name into type name and member name.

    Args:
        member: Dotted qualified member name.

    Returns:
        A `(type_name, member_name)` pair split at the last dot.

    Raises:
        ResolutionError: If the name has no type part or is malformed.
    """
    matched = MEMBER_PATTERN.match(member.strip())
    if not matched:
        raise ResolutionError(f'Invalid member name {member!r}')

    return matched['type'], matched['name']
