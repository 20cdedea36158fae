"""Protocol definitions for dependency inversion."""

from typing import Protocol, Optional
from .models import Job, ProgressSample


class IStatusRenderer(Protocol):
    """Human-facing status surface, keyed by job."""

    def update(self, job: Job, sample: Optional[ProgressSample] = None) -> None:
        """Render the job's current status line.

        Called on every poll tick and on every status transition; a terminal
        status ends the line.
        """
        ...

    def diagnostics(self, job: Job, text: str) -> None:
        """Show operator-facing detail for a job (engine log, cleanup errors)."""
        ...


class ILogger(Protocol):
    """Interface for logging."""

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        ...

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback."""
        ...


class IMetricsCollector(Protocol):
    """Interface for collecting metrics."""

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        ...

    def stop_timer(self, name: str) -> float:
        """Stop a named timer and return elapsed time."""
        ...

    def record_metric(self, name: str, value: float) -> None:
        """Record a metric value."""
        ...

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        ...

    def get_summary(self) -> dict:
        """Get summary of all metrics."""
        ...
