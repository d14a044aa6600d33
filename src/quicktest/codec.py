"""Conversion between runtime values and `(string, type name)` pairs.

The same pair format stores argument values, expected values and the
values captured by a test run. Rendering is locale independent and
round-trips for the supported scalar types::

    >>> serialize(2.5)
    ('2.5', 'float')
    >>> deserialize('2.5', 'float')
    2.5
"""

from collections.abc import Callable
from datetime import date, time
from enum import Enum
from typing import TYPE_CHECKING, Any

from quicktest.errors import CodecError, QuickTestError
from quicktest.values import type_name

if TYPE_CHECKING:
    from quicktest.reflection import MemberResolver
    from quicktest.values import RuntimeValue

TRUE_STRINGS = frozenset(('true',))
FALSE_STRINGS = frozenset(('false',))


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_STRINGS:
        return True
    if lowered in FALSE_STRINGS:
        return False
    raise ValueError(f'{value!r} is not a boolean')


#: Parsers keyed by exact type; subclasses are handled separately.
PARSERS: dict[type, Callable[[str], Any]] = {
    bool: _parse_bool,
    int: int,
    float: float,
    str: str,
    bytes: bytes.fromhex,
}


def render(value: 'RuntimeValue') -> str:
    """Render a non-null value as invariant, round-trippable text."""
    if isinstance(value, bool):
        return 'True' if value else 'False'

    if isinstance(value, Enum):
        return value.name

    if isinstance(value, float):
        return repr(value)

    if isinstance(value, (date, time)):
        return value.isoformat()

    if isinstance(value, bytes):
        return value.hex()

    return str(value)


def serialize(value: 'RuntimeValue') -> tuple[str, str]:
    """Serialize a value into a `(string, type name)` pair.

    Args:
        value: Any runtime value.

    Returns:
        `('', '')` for `None`, otherwise the rendered text and the
        qualified name of the value's runtime type.
    """
    if value is None:
        return '', ''

    return render(value), type_name(type(value))


def deserialize(value_string: str, value_type: str,
                resolver: 'MemberResolver | None' = None) -> 'RuntimeValue':
    """Deserialize a `(string, type name)` pair into a value.

    Args:
        value_string: Rendered value text.
        value_type: Qualified type name, or empty for `None`.
        resolver: Resolver used to find the type by name. A default
            `PythonResolver` is used when omitted.

    Returns:
        The converted value, or `None` when `value_type` is empty.

    Raises:
        ResolutionError: If the type cannot be resolved.
        CodecError: If the text cannot be converted into the type.
    """
    if not value_type:
        return None

    if resolver is None:
        from quicktest.reflection import PythonResolver  # noqa: PLC0415
        resolver = PythonResolver()

    kind = resolver.find_type(value_type)

    try:
        return _convert(value_string, kind)

    except QuickTestError:
        raise

    except Exception as error:
        raise CodecError(
            f'Cannot convert {value_string!r} to {type_name(kind)!r}: {error}',
        ) from error


def _convert(value_string: str, kind: type) -> 'RuntimeValue':
    if parser := PARSERS.get(kind):
        return parser(value_string)

    if issubclass(kind, Enum):
        return kind[value_string]

    # datetime is a date subclass.
    if issubclass(kind, (date, time)):
        return kind.fromisoformat(value_string)  # type: ignore[attr-defined]

    return kind(value_string)
