"""FFmpeg command construction."""

import shlex
from pathlib import Path
from typing import List, Sequence, Union

from ffbatch.shared.types import EngineCommand

DEFAULT_ENGINE = ("ffmpeg",)


def split_params(params: Union[str, Sequence[str], None]) -> List[str]:
    """Normalize forwarded engine parameters to a token list.

    A string is split with shell quoting rules; a sequence is taken as-is.
    """
    if params is None:
        return []
    if isinstance(params, str):
        return shlex.split(params)
    return [str(p) for p in params]


class FFmpegCommandBuilder:
    """
    Builds the per-job engine command line:

        <engine> -hide_banner -progress pipe:2 -i <input> <params...> -y <output>

    ``-progress pipe:2`` puts the machine-readable ``out_time=`` ticks on
    stderr next to the regular log, which is the only stream we read.
    """

    FIXED_FLAGS = ("-hide_banner", "-progress", "pipe:2")

    def __init__(self, engine: EngineCommand = DEFAULT_ENGINE, params: Union[str, Sequence[str], None] = None):
        if isinstance(engine, str):
            engine = (engine,)
        if not engine:
            raise ValueError("engine command must not be empty")
        self.engine = list(engine)
        self.params = split_params(params)

    def build(self, input_path: Path, output_path: Path) -> List[str]:
        return [
            *self.engine,
            *self.FIXED_FLAGS,
            "-i", str(input_path),
            *self.params,
            "-y", str(output_path),
        ]

    def preview(self, extension: str = "") -> str:
        """Human-readable command shape with placeholders for the paths."""
        params = shlex.join(self.params)
        return f"{shlex.join(self.engine)} -i [input] {params} -y [output]{extension}".replace("  ", " ")
