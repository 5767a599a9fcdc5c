"""Fatal error types.

Content-level problems (a bad file, a malformed rule) are absorbed where they
occur; only failures at the I/O boundary surface as these exceptions.
"""

from __future__ import annotations


class BrainError(Exception):
    """Base class for errors that abort a run."""


class ScanError(BrainError):
    """Repository root cannot be read."""


class ConfigError(BrainError):
    """Configuration file exists but holds invalid values."""


class StorageError(BrainError):
    """Output artifacts cannot be written."""


class RuleDefinitionError(ValueError):
    """A stored or declared rule is malformed. Never fatal."""
