"""Common type definitions."""

from typing import Sequence, Union
from pathlib import Path

PathLike = Union[str, Path]

# Executable prefix for the engine, e.g. ("ffmpeg",) or ("python", "engine.py")
EngineCommand = Sequence[str]
