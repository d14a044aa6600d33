"""Core exception hierarchy.

Errors raised while lexing, parsing or evaluating expressions, while
resolving and invoking members, while converting values and while
loading test documents all derive from `QuickTestError`.

Inside `Test.run` every one of them becomes a `Fail` verdict. Anywhere
else they propagate to the caller unchanged.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump
from yaml.error import MarkedYAMLError

from quicktest.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Self

if TYPE_CHECKING:
    from pydantic_core import ValidationError

#: Placeholder for objects that have no YAML representation.
OPAQUE = '<runtime object>'
#: Name shown for documents loaded from a string.
ANONYMOUS_DOCUMENT = '<unicode string>'

LOCATION_INDENT = 4
SNIPPET_INDENT = 8
YAML_INDENT = 2


class ErrorContext(TypedDict, total=False):
    """Where an error happened and what was being processed.

    Expression errors fill `source` and `position`; document errors fill
    the file location, the underlying `error` and the failing `element`.
    Every key is optional.
    """

    #: Expression text.
    source: str | None
    #: Zero-based offset into `source`.
    position: int | None

    #: Qualified member name of the running test.
    member: str | None

    #: Document name.
    filename: str | None
    #: Zero-based line in the document.
    line_num: int | None
    #: Zero-based column in the document.
    column_num: int | None

    #: Exception reported by YAML or pydantic.
    error: Exception | None
    #: Part of the document that failed validation.
    element: Any


def _plain(value: Any) -> Any:  # noqa: ANN401
    """Reduce a value to scalars, lists and dicts that YAML can dump."""
    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {key: _plain(item) for key, item in value.items()}

    if isinstance(value, SEQUENCES):
        return [_plain(item) for item in value]

    return OPAQUE


def _prefix_lines(text: str, prefix: str) -> str:
    """Prefix every non-blank line of `text`."""
    return linesep.join(
        f'{prefix}{line}'
        for line in text.splitlines()
        if line.strip()
    )


class ErrorFormatter:
    """Renders an error message followed by its location and a snippet.

    The snippet is a caret under the expression text for expression
    errors, the parser excerpt for YAML syntax errors, or the failing
    element dumped as YAML for validation errors.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Render a message with the details found in `context`.

        Args:
            message: Human-readable error message.
            context: Optional error context.

        Returns:
            The message, followed by location and snippet lines when
            the context provides them.
        """
        if not context:
            return message

        lines = [message, *cls.describe_location(context), *cls.render_snippet(context)]

        return linesep.join(lines).rstrip()

    @classmethod
    def describe_location(cls, context: ErrorContext) -> list[str]:
        """Describe the running member and the expression or document position."""
        indent = ' ' * LOCATION_INDENT
        lines = []

        if (member := context.get('member')) is not None:
            lines.append(f'{indent}while running "{member}"')

        if (source := context.get('source')) is not None:
            where = f'{indent}in expression {source!r}'
            if (position := context.get('position')) is not None:
                where += f', column {position + 1}'
            lines.append(where)

        elif 'filename' in context or 'line_num' in context:
            where = f'{indent}in "{context.get("filename") or ANONYMOUS_DOCUMENT}"'
            if (line_num := context.get('line_num')) is not None:
                where += f', line {line_num + 1}'
                if (column_num := context.get('column_num')) is not None:
                    where += f', column {column_num + 1}'
            lines.append(where)

        return lines

    @classmethod
    def render_snippet(cls, context: ErrorContext) -> list[str]:
        """Render the snippet lines illustrating the failure, if any."""
        indent = ' ' * SNIPPET_INDENT

        source = context.get('source')
        position = context.get('position')
        if source is not None and position is not None:
            return [f'{indent}{source}', f'{indent}{" " * position}^']

        error = context.get('error')
        if isinstance(error, MarkedYAMLError):
            excerpt = error.problem_mark.get_snippet(indent=0) if error.problem_mark else None
            return [_prefix_lines(excerpt, indent)] if excerpt else []

        if element := context.get('element'):
            data = dump(_plain(element), indent=YAML_INDENT, sort_keys=False)
            return [f'{indent} ...', _prefix_lines(data, indent)]

        return []


class PreloadWarning(UserWarning):
    """Warning emitted when a configured preload module cannot be imported.

    Preload failures do not stop a test plan unless the resolver runs
    in strict mode.
    """


class QuickTestError(Exception, ErrorFormatter):
    """Base exception for all quicktest errors."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description, without context.
            context: Optional error context used for formatting.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Render the message with its context."""
        return self.format(self.message, self.context)


class ExpressionSyntaxError(QuickTestError):
    """Base error for malformed expression text."""

    @classmethod
    def at(cls, message: str, source: str, position: int | None) -> 'Self':
        """Create an error pointing at an offset in the expression text."""
        return cls(message, context=ErrorContext(source=source, position=position))


class LexError(ExpressionSyntaxError):
    """A character that cannot start any token."""


class ParseError(ExpressionSyntaxError):
    """A token sequence that does not match the grammar."""


class ResolutionError(QuickTestError):
    """A type, member or module that cannot be found."""


class ConstructionError(QuickTestError):
    """An instance that cannot be created or a member that cannot be assigned."""


class EvaluationError(QuickTestError):
    """An expression that cannot be evaluated.

    Covers null dereference on member access, unsupported operators,
    operands of the wrong type and members that hold no value.
    """


class InvocationError(QuickTestError):
    """An exception raised by the target member itself.

    The target's exception is kept in `cause`; the runner reports the
    cause rather than this wrapper.
    """

    def __init__(self, message: str, *, cause: BaseException,
                 context: ErrorContext | None = None) -> None:
        """Initialize an invocation error.

        Args:
            message: Human-readable error description.
            cause: Exception raised by the invoked member.
            context: Optional error context used for formatting.
        """
        self.cause = cause

        super().__init__(message, context=context)


class CodecError(QuickTestError):
    """A serialized value that cannot be converted into its type."""


class DocumentError(QuickTestError):
    """A test document that cannot be loaded."""

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError) -> 'Self':
        """Create a document error from a YAML syntax error.

        Args:
            error: Exception raised by the YAML parser.

        Returns:
            DocumentError carrying the parser position.
        """
        context = ErrorContext(error=error)
        if mark := error.problem_mark:
            context.update(filename=mark.name, line_num=mark.line, column_num=mark.column)

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{" " * LOCATION_INDENT}{error.problem}'

        return cls(message, context=context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None) -> 'Self':
        """Create a document error from a validation failure.

        The first failure that can be traced back into `data` provides
        the message, and the failing key or item becomes the snippet.

        Args:
            error: ValidationError raised by pydantic.
            data: Loaded document data.
            filename: Name of the document.

        Returns:
            DocumentError describing the first traceable failure.
        """
        context = ErrorContext(filename=filename, error=error, element=data)

        if not isinstance(data, dict) or not data:
            return cls('Type validation error', context=context)

        for details in error.errors(include_url=False, include_input=False):
            message = next(
                (line.strip() for line in details['msg'].splitlines() if line.strip()),
                None,
            )
            element = cls._failing_element(data, details['loc'])
            if message and element is not None:
                return cls(message, context={**context, 'element': element})

        return cls('Validation error', context=context)

    @staticmethod
    def _failing_element(data: Any, loc: 'Sequence[int | str]') -> Any:  # noqa: ANN401
        """Follow a pydantic location into `data`.

        Missing keys and out-of-range indexes stop the walk early, so the
        deepest existing node is used.

        Returns:
            The last reached entry wrapped in its container shape
            (`{key: value}` or `[value]`), or `None` if the walk could not
            start or ran into a scalar.
        """
        container, node = None, data
        key: int | str | None = None

        for part in loc:
            if isinstance(node, (list, tuple)):
                if not isinstance(part, int) or not 0 <= part < len(node):
                    continue
            elif isinstance(node, dict):
                if part not in node:
                    continue
            else:
                return None

            container, node, key = node, node[part], part

        if isinstance(container, dict):
            return {key: node}
        if isinstance(container, (list, tuple)):
            return [node]

        return None
