"""
Per-job engine process lifecycle.

    STARTING -> NOT_FOUND                      input vanished, nothing spawned
    STARTING -> RUNNING -> SUCCEEDED           exit code 0
                        -> FAILED              nonzero exit, partial output removed
                        -> CANCELLED           killed on interrupt, partial output removed

Three threads of control meet here: this polling loop, the stderr reader
feeding the ProgressTracker, and the interrupt handler acting through the
CancellationCoordinator.
"""

import os
import shlex
import subprocess
import threading
import time
from pathlib import Path
from typing import IO, Optional, Tuple

from ffbatch.domain.exceptions import CleanupError, SpawnError
from ffbatch.domain.models import Job, JobStatus, TimestampSnapshot
from ffbatch.domain.protocols import IStatusRenderer
from ffbatch.infrastructure.media.ffmpeg import FFmpegCommandBuilder
from ffbatch.infrastructure.media.progress import ProgressTracker
from ffbatch.infrastructure.process.cancellation import CancellationCoordinator, kill_process
from ffbatch.shared.logging import get_logger
from ffbatch.shared.retry import RetryStrategy

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_CLEANUP_RETRY_DELAY = 0.25
READER_JOIN_TIMEOUT = 5.0


def _pump_lines(stream: IO[str], tracker: ProgressTracker) -> None:
    try:
        for line in stream:
            line = line.rstrip("\r\n")
            if line:
                tracker.feed(line)
    except (ValueError, OSError) as e:
        # stream closed underneath us after a bounded join
        logger.debug(f"stderr reader stopped: {e}")


class ProcessLifecycleController:
    """Runs one job's engine process from spawn to a terminal status."""

    def __init__(
        self,
        command_builder: FFmpegCommandBuilder,
        coordinator: CancellationCoordinator,
        renderer: IStatusRenderer,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        cleanup_retry_delay: float = DEFAULT_CLEANUP_RETRY_DELAY,
    ):
        self._builder = command_builder
        self._coordinator = coordinator
        self._renderer = renderer
        self._poll_interval = poll_interval
        self._cleanup = RetryStrategy(
            max_attempts=2,
            backoff_seconds=cleanup_retry_delay,
            exponential=False,
            jitter=False,
            exceptions=(OSError,),
        )

    def run(self, job: Job) -> JobStatus:
        """
        Drive ``job`` to a terminal status.

        Returns:
            The terminal status

        Raises:
            SpawnError: If the engine could not be started at all
        """
        if job.output_path is None:
            raise ValueError(f"No output path allocated for {job.input_path}")

        self._set_status(job, JobStatus.STARTING)

        if not job.input_path.is_file():
            logger.info(f"Input not found: {job.input_path}")
            return self._set_status(job, JobStatus.NOT_FOUND)
        try:
            job.captured_timestamps = TimestampSnapshot.capture(job.input_path)
        except FileNotFoundError:
            logger.info(f"Input vanished before start: {job.input_path}")
            return self._set_status(job, JobStatus.NOT_FOUND)

        if self._coordinator.cancelled:
            return self._set_status(job, JobStatus.CANCELLED)

        cmd = self._builder.build(job.input_path, job.output_path)
        proc = self._spawn(job, cmd)
        tracker = ProgressTracker()
        reader = threading.Thread(
            target=_pump_lines,
            args=(proc.stderr, tracker),
            name=f"ffbatch-stderr-{proc.pid}",
            daemon=True,
        )
        reader.start()
        started = time.monotonic()

        try:
            if not self._coordinator.register(proc):
                exit_code, killed = proc.wait(), True
            else:
                job.pid = proc.pid
                self._set_status(job, JobStatus.RUNNING)
                exit_code, killed = self._poll(job, proc, tracker)
        except BaseException:
            if self._coordinator.release(proc):
                kill_process(proc)
            proc.wait()
            raise
        finally:
            job.elapsed_wall_time = time.monotonic() - started
            self._drain(proc, reader)

        job.exit_code = exit_code
        job.progress = tracker.snapshot()
        job.diagnostic_log = tracker.log
        logger.debug(
            f"pid {proc.pid} finished: exit={exit_code} killed={killed} "
            f"after {job.elapsed_wall_time:.2f}s"
        )

        if killed:
            self._discard_output(job)
            return self._set_status(job, JobStatus.CANCELLED)

        if exit_code == 0:
            return self._set_status(job, JobStatus.SUCCEEDED)

        self._discard_output(job)
        self._set_status(job, JobStatus.FAILED)
        self._renderer.diagnostics(job, job.diagnostic_log)
        if job.cleanup_error:
            self._renderer.diagnostics(job, job.cleanup_error)
        return job.status

    # ── Internal ──────────────────────────────────────────────────────────

    def _spawn(self, job: Job, cmd) -> subprocess.Popen:
        logger.debug(f"Spawning: {shlex.join(cmd)}")
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                # keep terminal Ctrl+C away from the engine; the coordinator kills it
                start_new_session=(os.name == "posix"),
            )
        except OSError as e:
            logger.error(f"Could not start engine {cmd[0]!r}: {e}")
            self._discard_output(job)
            self._set_status(job, JobStatus.FAILED)
            raise SpawnError(
                f"Failed to start {cmd[0]}: {e}. Make sure it is installed and "
                f"on the search path (PATH)",
                cmd,
            ) from e

        logger.debug(f"Engine pid {proc.pid} for {job.input_path}")
        return proc

    def _poll(self, job: Job, proc: subprocess.Popen, tracker: ProgressTracker) -> Tuple[int, bool]:
        """Wait for exit or cancellation. Returns (exit code, killed)."""
        while True:
            exit_code = proc.poll()
            if exit_code is not None:
                break

            if self._coordinator.cancelled:
                # the interrupt path may have left the kill to us
                if self._coordinator.release(proc):
                    kill_process(proc)
                return proc.wait(), True

            job.progress = tracker.snapshot()
            self._renderer.update(job, job.progress)
            time.sleep(self._poll_interval)

        # A clean exit stands even if the interrupt path emptied the slot
        # afterwards. A nonzero code there may be the kill's own signal.
        owned = self._coordinator.release(proc)
        return exit_code, not owned and exit_code != 0

    def _drain(self, proc: subprocess.Popen, reader: threading.Thread) -> None:
        reader.join(READER_JOIN_TIMEOUT)
        if reader.is_alive():
            logger.warning(f"stderr of pid {proc.pid} still open after exit; closing")
        if proc.stderr:
            proc.stderr.close()

    def _discard_output(self, job: Job) -> None:
        """Remove a partial output, retrying once; record what is left behind."""
        path: Optional[Path] = job.output_path
        if path is None:
            return
        try:
            self._cleanup.execute(path.unlink, missing_ok=True)
        except OSError as e:
            error = CleanupError(path, e)
            job.cleanup_error = str(error)
            logger.error(str(error))

    def _set_status(self, job: Job, status: JobStatus) -> JobStatus:
        job.transition(status)
        logger.debug(f"{job.input_path}: {status.name}")
        self._renderer.update(job)
        return status
