"""Terminal status line rendering."""

import sys
from typing import Optional, TextIO

from colorama import Fore, Style

from ffbatch.domain.models import BatchReport, Job, JobStatus, ProgressSample

MAX_NAME_LENGTH = 42
LABEL_WIDTH = 18


def pad_trim(text: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Pad ``text`` to ``max_length`` or cut its middle out, e.g. ``/very/lo...ile.mov``."""
    if len(text) <= max_length:
        return text.ljust(max_length)
    half = max_length // 2
    return text[:half] + "..." + text[-(max_length - half - 3):]


def format_elapsed(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{seconds / 60:.1f}m"


class TerminalStatusRenderer:
    """
    Renders one ``\\r``-refreshed line per job:

          - /in/clip.mov                    -> /in/clip.mp4                    : PROCESSING  42.0%

    Implements IStatusRenderer.
    """

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self._stream = stream or sys.stdout
        if color is None:
            color = hasattr(self._stream, "isatty") and self._stream.isatty()
        self._color = color

    def paint(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def update(self, job: Job, sample: Optional[ProgressSample] = None) -> None:
        label, color = self._label(job, sample)
        line = (
            "\r  - "
            + self.paint(pad_trim(str(job.input_path)), Fore.CYAN)
            + " -> "
            + self.paint(pad_trim(str(job.output_path or "")), Fore.CYAN)
            + ": "
            + self.paint(label.ljust(LABEL_WIDTH), color)
        )
        if job.status.is_terminal:
            line += "\n"
        self._write(line)

    def diagnostics(self, job: Job, text: str) -> None:
        if not text:
            return
        indented = "\n".join("    " + line for line in text.splitlines())
        self._write(self.paint(indented, Fore.LIGHTRED_EX) + "\n")

    def message(self, text: str, color: Optional[str] = None) -> None:
        self._write((self.paint(text, color) if color else text) + "\n")

    def summary(self, report: BatchReport) -> None:
        if report.cancelled:
            self.message("\nBatch cancelled.", Fore.MAGENTA)
        else:
            self.message("\nAll files processed.")

    def _label(self, job: Job, sample: Optional[ProgressSample]):
        status = job.status
        if status == JobStatus.RUNNING:
            percent = (sample or job.progress).percent
            text = "PROCESSING" if percent is None else f"PROCESSING {percent:5.1f}%"
            return text, Fore.YELLOW
        if status == JobStatus.SUCCEEDED:
            return f"OK [{format_elapsed(job.elapsed_wall_time)}]", Fore.GREEN
        if status == JobStatus.FAILED:
            return "ERROR", Fore.RED
        if status == JobStatus.NOT_FOUND:
            return "NOT FOUND", Fore.RED
        if status == JobStatus.CANCELLED:
            return "CANCELLED", Fore.MAGENTA
        return "STARTING", Style.DIM

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()
