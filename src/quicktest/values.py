"""Core type definitions for runtime values.

This module defines the runtime value alias and the container type
groups shared by the evaluator, the codec and the error formatter,
together with the naming rule used for runtime types throughout
serialized test records.
"""

from datetime import date, datetime, time, timedelta
from typing import Any

#: Any Python object produced by evaluation or by an invoked member.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (date, datetime, time, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set)

BUILTINS_MODULE = 'builtins'


def type_name(kind: type) -> str:
    """Return the qualified name of a runtime type.

    Builtin types are named bare (`int`, `str`); every other type is
    named `<module>.<qualname>`, which nests inner classes with dots.

    Args:
        kind: Runtime type.

    Returns:
        A name the resolver can turn back into the same type.
    """
    if kind.__module__ == BUILTINS_MODULE:
        return kind.__qualname__

    return f'{kind.__module__}.{kind.__qualname__}'
