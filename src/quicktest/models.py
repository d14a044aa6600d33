"""Base Pydantic models for test records and settings.

This module defines the foundational model classes used by all test
records and by the runtime configuration.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordModel(BaseModel):
    """Base mutable model for all test records.

    This class serves as the root for the Pydantic models representing
    tests, arguments, member groups, repositories and plans.

    Design principles enforced by this model:
        - Validated mutation: records are updated in place by the runner,
          and every assignment is validated against the field type.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in stored documents.

    All record models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        validate_default=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for harness runtime settings.

    Settings are resolved from keyword arguments and environment
    variables. Resolved settings cannot be modified, and unrelated
    variables in the environment are ignored.

    All runtime settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
