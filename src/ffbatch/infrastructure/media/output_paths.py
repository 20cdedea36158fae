"""Collision-free output path allocation."""

import threading
from pathlib import Path
from typing import Set

from ffbatch.shared.logging import get_logger
from ffbatch.shared.types import PathLike

logger = get_logger(__name__)


class OutputPathAllocator:
    """
    Hands out output paths that neither exist on disk nor were handed out
    earlier in this run.

    ``{dir}/{name}{ext}`` is tried first, then ``{name}_1{ext}``,
    ``{name}_2{ext}`` and so on. The existence check is not atomic against
    other writers; the batch is sequential and single-process, so only this
    allocator creates names in the run. Collision chains are not bounded.
    """

    def __init__(self):
        self._reserved: Set[Path] = set()
        self._lock = threading.Lock()

    def allocate(self, directory: PathLike, name: str, extension: str = "") -> Path:
        """
        Reserve and return a free output path.

        Args:
            directory: Directory the output goes into
            name: Base name, usually the input file name without extension
            extension: Output extension including the dot, or "" for none

        Returns:
            A path that does not exist and has not been returned before
        """
        directory = Path(directory)
        with self._lock:
            candidate = directory / f"{name}{extension}"
            counter = 1
            while self._is_taken(candidate):
                candidate = directory / f"{name}_{counter}{extension}"
                counter += 1
            self._reserved.add(candidate)

        if counter > 1:
            logger.debug(f"Output name collision for {name}{extension}; using {candidate.name}")
        return candidate

    def allocate_for(self, input_path: PathLike, extension: str = "") -> Path:
        """Allocate an output next to ``input_path``, named after its stem."""
        input_path = Path(input_path)
        return self.allocate(input_path.parent, input_path.stem, extension)

    def _is_taken(self, candidate: Path) -> bool:
        return candidate in self._reserved or candidate.exists()
