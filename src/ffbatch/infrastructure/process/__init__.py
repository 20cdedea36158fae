"""Engine process control package."""

from ffbatch.infrastructure.process.cancellation import CancellationCoordinator, kill_process
from ffbatch.infrastructure.process.controller import ProcessLifecycleController

__all__ = ["CancellationCoordinator", "kill_process", "ProcessLifecycleController"]
