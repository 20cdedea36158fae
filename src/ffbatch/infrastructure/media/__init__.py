"""Media handling package."""

from ffbatch.infrastructure.media.ffmpeg import FFmpegCommandBuilder, split_params
from ffbatch.infrastructure.media.output_paths import OutputPathAllocator
from ffbatch.infrastructure.media.progress import ProgressTracker

__all__ = ["FFmpegCommandBuilder", "split_params", "OutputPathAllocator", "ProgressTracker"]
