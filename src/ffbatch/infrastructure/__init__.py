"""Infrastructure layer package."""

from ffbatch.infrastructure.config import ConfigLoader, BatchConfig
from ffbatch.infrastructure.media import FFmpegCommandBuilder, OutputPathAllocator, ProgressTracker
from ffbatch.infrastructure.process import CancellationCoordinator, ProcessLifecycleController
from ffbatch.infrastructure.storage import PostProcessingPipeline, find_input_files

__all__ = [
    "ConfigLoader",
    "BatchConfig",
    "FFmpegCommandBuilder",
    "OutputPathAllocator",
    "ProgressTracker",
    "CancellationCoordinator",
    "ProcessLifecycleController",
    "PostProcessingPipeline",
    "find_input_files",
]
