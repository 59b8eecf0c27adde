"""Error taxonomy.

Every error here is fatal to the run that raised it. Numeric edge cases
(0/0 ratios) are not errors; they surface as NaN.
"""

from __future__ import annotations


class FieldscoreError(Exception):
    """Base class for all fieldscore errors."""


class ConfigError(FieldscoreError):
    """An option or setting could not be parsed."""


class FatalIOError(FieldscoreError):
    """An input could not be opened or read."""


class SchemaViolation(FieldscoreError):
    """A row does not match the fixed classification schema."""

    def __init__(self, source: str, line: int, message: str):
        self.source = source
        self.line = line
        self.message = message
        super().__init__(f"{source}:{line}: {message}")


class AlignmentViolation(FieldscoreError):
    """Reference and current streams do not describe the same ordered fields."""

    def __init__(self, position: int, message: str):
        self.position = position
        self.message = message
        super().__init__(f"record #{position}: {message}")
