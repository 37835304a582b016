"""Exception hierarchy for blockinfile."""

from __future__ import annotations


class BlockInFileError(RuntimeError):
    """Base class for failures that abort a blockinfile run."""


class ConfigError(BlockInFileError):
    """Raised when options are missing, malformed, or conflicting."""


class FileIOError(BlockInFileError):
    """Raised when the target or backup file cannot be read or written."""


class FileAttributeError(BlockInFileError):
    """Raised when mode or ownership cannot be applied to the target file."""


__all__ = ["BlockInFileError", "ConfigError", "FileAttributeError", "FileIOError"]
