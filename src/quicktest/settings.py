"""Runtime settings for member resolution.

Settings are read from `QUICKTEST_*` environment variables unless given
explicitly, for example `QUICKTEST_INCLUDE_PRIVATE=false` or
`QUICKTEST_PRELOAD_MODULES='["decimal", "fractions"]'`.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .models import SettingsModel


class HarnessSettings(SettingsModel):
    """Configuration consumed by `PythonResolver`."""

    model_config = SettingsConfigDict(
        env_prefix='QUICKTEST_',
    )

    include_private: bool = Field(
        default=True,
        title='Resolve private members',
        description=(
            'Whether members whose names start with an underscore can be '
            'targeted by tests and referenced from expressions.'
        ),
    )

    preload_modules: list[str] = Field(
        default_factory=list,
        title='Preload modules',
        description=(
            'Modules imported after a test plan target is loaded, so that '
            'types they define can be resolved by name.'
        ),
    )

    strict: bool = Field(
        default=False,
        title='Strict preload',
        description=(
            'Raise instead of warning when a preload module cannot be imported.'
        ),
    )
