"""Filesystem handling package."""

from ffbatch.infrastructure.storage.postprocess import (
    PostProcessingPipeline,
    StepOutcome,
    propagate_timestamps,
    structured_move,
)
from ffbatch.infrastructure.storage.scanner import find_input_files

__all__ = [
    "PostProcessingPipeline",
    "StepOutcome",
    "propagate_timestamps",
    "structured_move",
    "find_input_files",
]
