"""
Input file enumeration.

Pure filesystem walk plus an optional regex filter; no subprocess, easy to
test in isolation.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from ffbatch.domain.exceptions import ConfigurationError
from ffbatch.shared.types import PathLike


def find_input_files(
    input_path: PathLike,
    pattern: Optional[str] = None,
    recursive: bool = False,
) -> Tuple[List[Path], Path]:
    """
    Resolve the batch's input files.

    Args:
        input_path: A single file or a directory
        pattern: Regex searched in each file's full path (directories only)
        recursive: Descend into subdirectories

    Returns:
        (sorted files, input root). The root is the directory itself, or the
        file's parent for a single-file input.

    Raises:
        ConfigurationError: If the input is missing, the pattern is invalid,
            or nothing matches
    """
    input_path = Path(input_path)

    if input_path.is_file():
        return [input_path], input_path.parent

    if not input_path.is_dir():
        raise ConfigurationError(f"Input file or directory does not exist: {input_path}")

    regex = None
    if pattern:
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern {pattern!r}: {e}")

    candidates = input_path.rglob("*") if recursive else input_path.iterdir()
    files = sorted(
        f for f in candidates
        if f.is_file() and (regex is None or regex.search(str(f)))
    )

    if not files:
        raise ConfigurationError(f"No input files found in {input_path}")

    return files, input_path
