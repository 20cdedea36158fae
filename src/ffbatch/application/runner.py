"""Sequential batch runner - coordinates all components."""

from pathlib import Path
from typing import Sequence

from ffbatch.domain.models import BatchReport, Job, JobStatus
from ffbatch.domain.protocols import ILogger, IMetricsCollector
from ffbatch.infrastructure.media.output_paths import OutputPathAllocator
from ffbatch.infrastructure.process.cancellation import CancellationCoordinator
from ffbatch.infrastructure.process.controller import ProcessLifecycleController
from ffbatch.infrastructure.storage.postprocess import PostProcessingPipeline


class BatchRunner:
    """
    Runs jobs one at a time: allocate an output path, drive the engine,
    post-process on success.

    Only a SpawnError escapes ``run``; every other per-job problem ends up
    in the job's status. Once cancellation is observed no further job is
    started.
    """

    def __init__(
        self,
        allocator: OutputPathAllocator,
        controller: ProcessLifecycleController,
        postprocessor: PostProcessingPipeline,
        coordinator: CancellationCoordinator,
        logger: ILogger,
        metrics: IMetricsCollector,
        extension: str = "",
    ):
        self._allocator = allocator
        self._controller = controller
        self._postprocessor = postprocessor
        self._coordinator = coordinator
        self._logger = logger
        self._metrics = metrics
        self._extension = extension

    def run(self, input_files: Sequence[Path]) -> BatchReport:
        """Process ``input_files`` in order and report what happened to each."""
        report = BatchReport(jobs=[Job(input_path=Path(p)) for p in input_files])
        self._logger.info(f"Starting batch of {len(report.jobs)} file(s)")
        self._metrics.start_timer('total_batch')

        try:
            for index, job in enumerate(report.jobs, start=1):
                if self._coordinator.cancelled:
                    self._logger.info(
                        f"Cancelled; not starting the remaining {len(report.jobs) - index + 1} job(s)"
                    )
                    break

                self._run_job(job, index, len(report.jobs))

                if job.status == JobStatus.CANCELLED:
                    break
        finally:
            report.cancelled = self._coordinator.cancelled
            report.duration_seconds = self._metrics.stop_timer('total_batch')

        self._logger.info(
            f"Batch finished in {report.duration_seconds:.1f}s: "
            + ", ".join(f"{s.name}={n}" for s, n in report.counts.items())
        )
        self._logger.debug(f"Metrics: {self._metrics.get_summary()}")
        return report

    def _run_job(self, job: Job, index: int, total: int) -> None:
        job.output_path = self._allocator.allocate_for(job.input_path, self._extension)
        self._logger.debug(f"[{index}/{total}] {job.input_path} -> {job.output_path}")

        status = self._controller.run(job)
        self._metrics.increment_counter(status.value)
        if job.pid is not None:
            self._metrics.record_metric('job_seconds', job.elapsed_wall_time)

        if status == JobStatus.SUCCEEDED:
            self._logger.info(f"OK {job.input_path} in {job.elapsed_wall_time:.1f}s")
            if self._postprocessor.enabled:
                # outcomes are logged by the pipeline; they never change the status
                self._postprocessor.run(job)
        elif status == JobStatus.FAILED:
            self._logger.error(f"Engine failed on {job.input_path} (exit code {job.exit_code})")
        else:
            self._logger.info(f"{status.name} {job.input_path}")
