"""
Best-effort steps applied after a job succeeded.

Each step returns a StepOutcome instead of raising. The runner logs the
outcome and otherwise ignores it; a job's SUCCEEDED status never changes
because of anything in here.
"""

import os
import platform
import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ffbatch.domain.models import Job, TimestampSnapshot
from ffbatch.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Result of one post-processing step."""

    name: str
    ok: bool
    detail: str = ""


def _apply_birthtime(path: Path, created_ns: int) -> None:
    """Set the creation time where the platform offers a way to (macOS SetFile)."""
    if platform.system() != "Darwin":
        return
    setfile = shutil.which("SetFile")
    if not setfile:
        logger.debug(f"SetFile unavailable; skipping creation time for {path}")
        return
    dt = datetime.fromtimestamp(created_ns / 1_000_000_000, tz=timezone.utc).astimezone()
    proc = subprocess.run(
        [setfile, "-d", dt.strftime("%m/%d/%Y %H:%M:%S"), str(path)],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
    )
    if proc.returncode != 0:
        raise OSError(f"SetFile exited with {proc.returncode}: {proc.stderr.strip()}")


def propagate_timestamps(snapshot: TimestampSnapshot, output_path: Path) -> StepOutcome:
    """Copy the captured (created, modified, accessed) times onto the output."""
    name = "copy_timestamps"
    if not output_path.exists():
        return StepOutcome(name, False, f"output missing: {output_path}")
    try:
        if snapshot.created_ns is not None:
            _apply_birthtime(output_path, snapshot.created_ns)
        os.utime(output_path, ns=(snapshot.accessed_ns, snapshot.modified_ns))
    except (OSError, OverflowError, ValueError) as e:
        return StepOutcome(name, False, str(e))
    return StepOutcome(name, True)


def structured_move(input_path: Path, input_root: Path, destination_root: Path) -> StepOutcome:
    """
    Move ``input_path`` under ``destination_root`` keeping its path relative
    to ``input_root``, e.g. ``root/sub/a.mov`` -> ``dest/sub/a.mov``.

    Missing directories are created; an existing file at the target is
    replaced.
    """
    name = "move"
    try:
        relative = input_path.resolve().relative_to(input_root.resolve())
    except ValueError:
        relative = Path(input_path.name)
    target = destination_root / relative

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(input_path), str(target))
    except (OSError, shutil.Error) as e:
        return StepOutcome(name, False, str(e))
    return StepOutcome(name, True, str(target))


class PostProcessingPipeline:
    """Runs the enabled best-effort steps for a succeeded job."""

    def __init__(
        self,
        input_root: Path,
        copy_timestamps: bool = False,
        move_dir: Optional[Path] = None,
    ):
        self.input_root = input_root
        self.copy_timestamps = copy_timestamps
        self.move_dir = move_dir

    @property
    def enabled(self) -> bool:
        return self.copy_timestamps or self.move_dir is not None

    def run(self, job: Job) -> List[StepOutcome]:
        outcomes: List[StepOutcome] = []

        if self.copy_timestamps:
            if job.captured_timestamps is None or job.output_path is None:
                outcomes.append(StepOutcome("copy_timestamps", False, "no timestamp snapshot"))
            else:
                outcomes.append(propagate_timestamps(job.captured_timestamps, job.output_path))

        if self.move_dir is not None:
            outcomes.append(structured_move(job.input_path, self.input_root, self.move_dir))

        for outcome in outcomes:
            if outcome.ok:
                logger.debug(f"{job.input_path}: {outcome.name} ok {outcome.detail}".rstrip())
            else:
                logger.warning(f"{job.input_path}: {outcome.name} skipped: {outcome.detail}")
        return outcomes
