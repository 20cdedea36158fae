"""Domain layer package."""

from .models import Job, JobStatus, ProgressSample, TimestampSnapshot, BatchReport
from .exceptions import (
    DomainException,
    ConfigurationError,
    SpawnError,
    CleanupError,
)
from .protocols import (
    IStatusRenderer,
    ILogger,
    IMetricsCollector,
)

__all__ = [
    # Models
    "Job",
    "JobStatus",
    "ProgressSample",
    "TimestampSnapshot",
    "BatchReport",
    # Exceptions
    "DomainException",
    "ConfigurationError",
    "SpawnError",
    "CleanupError",
    # Protocols
    "IStatusRenderer",
    "ILogger",
    "IMetricsCollector",
]
