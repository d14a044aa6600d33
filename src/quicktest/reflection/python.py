"""Member resolution over ordinary Python classes.

Types are found by dotted qualified name: the longest importable module
prefix is imported and the remaining segments are walked as attributes,
so nested classes resolve by their `__qualname__`. Builtin types resolve
by their bare name.

Members are looked up along the method resolution order. Within each
class, annotations are consulted before the class namespace, so
dataclass fields and annotated attributes are fields even when they
have a class-level default. Attributes assigned only in `__init__`
are read from the receiver instance when one is at hand.
"""

import builtins
import dataclasses
import inspect
import logging
import sys
from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, get_origin
from warnings import warn

from quicktest.errors import (
    ConstructionError,
    EvaluationError,
    InvocationError,
    PreloadWarning,
    ResolutionError,
)
from quicktest.settings import HarnessSettings
from quicktest.values import type_name

from .base import MemberHandle, MemberKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import ModuleType

    from quicktest.values import RuntimeValue

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = '.py'


def _is_class_var(annotation: Any) -> bool:  # noqa: ANN401
    if isinstance(annotation, str):
        return annotation.startswith(('ClassVar', 'typing.ClassVar'))

    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _is_frozen(klass: type) -> bool:
    params = getattr(klass, '__dataclass_params__', None)
    return dataclasses.is_dataclass(klass) and bool(getattr(params, 'frozen', False))


class PythonResolver:
    """Resolver backed by importlib and attribute access.

    Attributes:
        settings: Resolution settings.
        aliases: Extra names mapped directly to types; consulted first.
    """

    def __init__(self, settings: HarnessSettings | None = None, *,
                 aliases: 'Mapping[str, type] | None' = None) -> None:
        """Initialize the resolver.

        Args:
            settings: Resolution settings. Read from the environment
                when omitted.
            aliases: Names that resolve directly to the given types.
        """
        self.settings = settings if settings is not None else HarnessSettings()
        self.aliases = dict(aliases or {})

    def find_type(self, qualified_name: str) -> type:
        """Resolve a type by alias, builtin name or dotted qualified name.

        Raises:
            ResolutionError: If no type has this name.
        """
        name = qualified_name.strip()
        if not name:
            raise ResolutionError('Type name is empty')

        if (kind := self.aliases.get(name)) is not None:
            return kind

        parts = name.split('.')
        if len(parts) == 1 and isinstance(kind := getattr(builtins, name, None), type):
            return kind

        for index in range(len(parts) - 1, 0, -1):
            module = self._find_module('.'.join(parts[:index]))
            if module is None:
                continue

            value: Any = module
            for part in parts[index:]:
                value = getattr(value, part, None)

            if isinstance(value, type):
                return value

        raise ResolutionError(f'Type {name!r} not found')

    def find_member(self, kind: type, name: str,
                    instance: 'RuntimeValue' = None) -> MemberHandle | None:
        """Find a member along the MRO of `kind`.

        Attributes assigned only in `__init__` are not declared on any
        class; they are found on `instance` when one is given.

        Returns:
            The member handle, or `None` if neither a class nor the
            instance has the name, or the name is private and private
            members are disabled.
        """
        if name.startswith('_') and not self.settings.include_private:
            return None

        for klass in kind.__mro__:
            annotations = inspect.get_annotations(klass)
            if name in annotations:
                return MemberHandle(
                    name,
                    MemberKind.FIELD,
                    klass,
                    static=_is_class_var(annotations[name]),
                    writable=not _is_frozen(klass),
                )

            if name in vars(klass):
                return self._classify(klass, name, vars(klass)[name])

        if name in getattr(instance, '__dict__', ()):
            return MemberHandle(name, MemberKind.FIELD, kind)

        return None

    @staticmethod
    def _classify(klass: type, name: str, attr: Any) -> MemberHandle:  # noqa: ANN401
        """Build a handle from a raw class namespace entry."""
        if isinstance(attr, property):
            return MemberHandle(name, MemberKind.PROPERTY, klass, writable=attr.fset is not None)

        if isinstance(attr, (staticmethod, classmethod)):
            return MemberHandle(name, MemberKind.METHOD, klass, static=True, writable=False)

        if inspect.isfunction(attr) or inspect.ismethoddescriptor(attr):
            return MemberHandle(name, MemberKind.METHOD, klass, writable=False)

        if inspect.ismemberdescriptor(attr):
            return MemberHandle(name, MemberKind.FIELD, klass)

        if inspect.isdatadescriptor(attr):
            return MemberHandle(name, MemberKind.PROPERTY, klass)

        return MemberHandle(name, MemberKind.FIELD, klass, static=True)

    def is_static(self, member: MemberHandle) -> bool:
        return member.static

    def get_value(self, member: MemberHandle, receiver: 'RuntimeValue') -> 'RuntimeValue':
        """Read a field or property.

        Raises:
            EvaluationError: If the member is a method, needs a missing
                receiver, or holds no value.
            InvocationError: If a property getter raises.
        """
        if not member.readable:
            raise EvaluationError(f'{member.name!r} is a {member.kind}, not a value')

        target = self._target(member, receiver)
        try:
            return getattr(target, member.name)

        except Exception as error:
            if member.kind == MemberKind.PROPERTY:
                raise InvocationError(
                    f'Getter of {member.name!r} raised {type(error).__name__}',
                    cause=error,
                ) from error
            raise EvaluationError(f'{member.name!r} has no value') from error

    def set_value(self, member: MemberHandle, receiver: 'RuntimeValue',
                  value: 'RuntimeValue') -> None:
        """Write a field or property.

        Raises:
            ConstructionError: If the member is not writable.
            InvocationError: If a property setter raises.
        """
        if not member.readable or not member.writable:
            raise ConstructionError(f'Cannot assign values to {member.name!r}')

        target = self._target(member, receiver)
        try:
            setattr(target, member.name, value)

        except Exception as error:
            if member.kind == MemberKind.PROPERTY:
                raise InvocationError(
                    f'Setter of {member.name!r} raised {type(error).__name__}',
                    cause=error,
                ) from error
            raise ConstructionError(f'Cannot assign values to {member.name!r}') from error

    def invoke(self, member: MemberHandle, receiver: 'RuntimeValue',
               args: 'Sequence[RuntimeValue]') -> 'RuntimeValue':
        """Call a method with positional arguments.

        Raises:
            ResolutionError: If the member is not a method.
            InvocationError: If the method raises.
        """
        if member.kind != MemberKind.METHOD:
            raise ResolutionError(f'{member.name!r} is a {member.kind}, not a method')

        method = getattr(self._target(member, receiver), member.name)
        try:
            return method(*args)

        except Exception as error:
            raise InvocationError(
                f'{member.name!r} raised {type(error).__name__}',
                cause=error,
            ) from error

    def construct(self, kind: type) -> 'RuntimeValue':
        """Call the type without arguments.

        Raises:
            ConstructionError: If the type cannot be constructed this way.
        """
        try:
            return kind()

        except Exception as error:
            raise ConstructionError(f'Cannot construct {type_name(kind)!r}: {error}') from error

    def load_module(self, path: str) -> None:
        """Import a target module, then the configured preload modules.

        Args:
            path: Dotted module name or path to a `.py` source file.

        Raises:
            ResolutionError: If the target cannot be imported, or a
                preload module cannot be imported in strict mode.
        """
        try:
            if path.endswith(SOURCE_SUFFIX):
                module = self._load_source(Path(path))
            else:
                module = import_module(path)

        except Exception as error:
            raise ResolutionError(f'Cannot load {path!r}: {error}') from error

        logger.info('Loaded target module %s', module.__name__)

        for name in self.settings.preload_modules:
            try:
                import_module(name)
            except Exception as error:
                if issue := self.emit_preload_issue(f'Cannot preload {name!r}: {error}'):
                    raise issue from error

    def emit_preload_issue(self, message: str) -> Exception | None:
        """Emit a preload warning or return the exception.

        Returns:
            ResolutionError on strict mode, otherwise `None`
                with producing a PreloadWarning.
        """
        if self.settings.strict:
            return ResolutionError(message)

        warn(message, category=PreloadWarning, stacklevel=3)

        return None

    @staticmethod
    def _find_module(name: str) -> 'ModuleType | None':
        if (module := sys.modules.get(name)) is not None:
            return module

        try:
            return import_module(name)
        except ImportError:
            return None

    @staticmethod
    def _load_source(location: Path) -> 'ModuleType':
        name = location.stem
        spec = spec_from_file_location(name, location)
        if spec is None or spec.loader is None:
            raise ImportError(f'No loader for {location}')

        module = module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise

        return module

    @staticmethod
    def _target(member: MemberHandle, receiver: 'RuntimeValue') -> 'RuntimeValue':
        if member.static:
            return member.owner

        if receiver is None:
            raise EvaluationError(f'Instance member {member.name!r} requires a receiver')

        return receiver
