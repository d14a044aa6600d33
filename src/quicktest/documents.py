"""YAML documents for test records.

Records are dumped in field declaration order with list order kept, so
dumping a loaded document reproduces the original text exactly.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from yaml import SafeDumper, SafeLoader, dump, load
from yaml.error import MarkedYAMLError

from quicktest.errors import DocumentError

if TYPE_CHECKING:
    from io import TextIOBase

    from quicktest.models import RecordModel

ENCODING = 'utf-8'


def dumps(record: 'RecordModel') -> str:
    """Render a record as a YAML document."""
    return dump(
        record.model_dump(mode='json'),
        Dumper=SafeDumper,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )


def loads[T: RecordModel](content: 'TextIOBase | str', model: type[T], *,
                          filename: str | None = None) -> T:
    """Load and validate a record from a YAML document.

    Args:
        content: YAML content as a string or file-like object.
        model: Record model to validate against.
        filename: Optional source name used in error messages.

    Returns:
        The validated record.

    Raises:
        DocumentError: If the YAML is malformed or fails validation.
    """
    try:
        data = load(content, Loader=SafeLoader)

    except MarkedYAMLError as base:
        raise DocumentError.from_yaml_error(base) from base

    try:
        return model.model_validate(data)

    except ValidationError as base:
        raise DocumentError.from_pydantic_error(base, data=data, filename=filename) from base


def save(record: 'RecordModel', path: Path) -> None:
    """Write a record to a YAML file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open('wt', encoding=ENCODING) as output:
        output.write(dumps(record))


def load_file[T: RecordModel](path: Path, model: type[T]) -> T:
    """Read and validate a record from a YAML file.

    Raises:
        DocumentError: If the YAML is malformed or fails validation.
    """
    path = Path(path)

    with path.open('rt', encoding=ENCODING) as content:
        return loads(content, model, filename=f'{path}')
