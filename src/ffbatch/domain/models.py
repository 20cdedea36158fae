"""Domain models for the batch transcoder."""

import os
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class JobStatus(Enum):
    """Lifecycle of a single job.

    PENDING is the enumerated state; the controller moves a job to STARTING
    when it picks it up. The last four members are terminal.
    """

    PENDING = "pending"
    STARTING = "starting"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({
    JobStatus.SUCCEEDED,
    JobStatus.FAILED,
    JobStatus.NOT_FOUND,
    JobStatus.CANCELLED,
})

_ALLOWED = {
    JobStatus.PENDING: {JobStatus.STARTING},
    JobStatus.STARTING: {
        JobStatus.RUNNING, JobStatus.NOT_FOUND, JobStatus.FAILED, JobStatus.CANCELLED,
    },
    JobStatus.RUNNING: {JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED},
}


@dataclass(frozen=True)
class ProgressSample:
    """Immutable snapshot of a job's progress. ``-1`` means unknown."""

    duration_seconds: float = -1.0
    elapsed_seconds: float = -1.0

    @property
    def percent(self) -> Optional[float]:
        """Percent complete, unclamped; None while either side is unknown."""
        if self.duration_seconds > 0 and self.elapsed_seconds > 0:
            return self.elapsed_seconds / self.duration_seconds * 100.0
        return None


@dataclass(frozen=True)
class TimestampSnapshot:
    """(created, modified, accessed) times of a file, in nanoseconds.

    ``created_ns`` is None on platforms that do not report a birth time.
    """

    created_ns: Optional[int]
    modified_ns: int
    accessed_ns: int

    @classmethod
    def capture(cls, path: Path) -> "TimestampSnapshot":
        st = os.stat(path)
        birthtime = getattr(st, "st_birthtime", None)
        created_ns = int(birthtime * 1_000_000_000) if birthtime is not None else None
        return cls(
            created_ns=created_ns,
            modified_ns=st.st_mtime_ns,
            accessed_ns=st.st_atime_ns,
        )


@dataclass
class Job:
    """One input-to-output transcoding task."""

    input_path: Path
    output_path: Optional[Path] = None
    captured_timestamps: Optional[TimestampSnapshot] = None
    status: JobStatus = JobStatus.PENDING
    elapsed_wall_time: float = 0.0

    # Filled in by the lifecycle controller
    pid: Optional[int] = None
    exit_code: Optional[int] = None
    progress: ProgressSample = field(default_factory=ProgressSample)
    diagnostic_log: str = ""
    cleanup_error: Optional[str] = None

    def transition(self, status: JobStatus) -> None:
        """Move to ``status``, refusing any change out of a terminal state."""
        if status not in _ALLOWED.get(self.status, set()):
            raise ValueError(f"Invalid job transition {self.status.name} -> {status.name}")
        self.status = status

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal


@dataclass
class BatchReport:
    """Outcome of a batch run."""

    jobs: List[Job] = field(default_factory=list)
    cancelled: bool = False
    duration_seconds: float = 0.0

    @property
    def counts(self) -> Dict[JobStatus, int]:
        return dict(Counter(job.status for job in self.jobs))

    @property
    def all_succeeded(self) -> bool:
        return not self.cancelled and all(
            job.status == JobStatus.SUCCEEDED for job in self.jobs
        )
