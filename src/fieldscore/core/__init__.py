"""Core module - configuration, logging, errors, and shared models."""

from fieldscore.core.config import Settings, load_settings
from fieldscore.core.errors import (
    AlignmentViolation,
    ConfigError,
    FatalIOError,
    FieldscoreError,
    SchemaViolation,
)
from fieldscore.core.models import (
    NON_DATA_TYPE_MODIFIERS,
    SCORED_BASE_TYPES,
    ClassificationRecord,
)

__all__ = [
    # Config
    "Settings",
    "load_settings",
    # Errors
    "AlignmentViolation",
    "ConfigError",
    "FatalIOError",
    "FieldscoreError",
    "SchemaViolation",
    # Models
    "ClassificationRecord",
    "NON_DATA_TYPE_MODIFIERS",
    "SCORED_BASE_TYPES",
]
