"""Domain exceptions for the batch transcoder."""

from pathlib import Path
from typing import Optional, Sequence


class DomainException(Exception):
    """Base exception for all domain errors."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid; fatal before any job starts."""
    pass


class SpawnError(DomainException):
    """Raised when the transcoding engine cannot be started at all.

    This aborts the whole batch: it means the engine is unreachable, not that
    one input file is bad.
    """

    def __init__(self, message: str, command: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.command = list(command) if command else []


class CleanupError(DomainException):
    """Raised when a partial output file could not be removed."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Could not remove residual output {path}{detail}")
        self.path = path
        self.cause = cause
