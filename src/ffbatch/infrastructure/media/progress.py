"""
Progress extraction from the engine's diagnostic stream.

ffmpeg announces the input duration once near startup and, with
``-progress pipe:2``, writes ``out_time=`` ticks as it encodes:

    Duration: 00:01:30.00, start: 0.000000, bitrate: 1411 kb/s
    out_time=00:00:45.000000

Everything else is kept verbatim for failure reports.
"""

import re
import threading
from typing import List

from ffbatch.domain.models import ProgressSample

DURATION_RE = re.compile(r"Duration: (?P<hour>\d+):(?P<min>\d+):(?P<sec>\d+(\.\d+)?)")
OUT_TIME_RE = re.compile(r"out_time=(?P<hour>\d+):(?P<min>\d+):(?P<sec>\d+(\.\d+)?)")


def _to_seconds(match: "re.Match[str]") -> float:
    return (
        int(match.group("hour")) * 3600
        + int(match.group("min")) * 60
        + float(match.group("sec"))
    )


class ProgressTracker:
    """
    Stateful parser bound to one job's diagnostic stream.

    ``feed`` is called from the stream reader thread while the polling loop
    calls ``snapshot``; both go through one lock so the (duration, elapsed)
    pair is never read half-updated.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._duration = -1.0
        self._elapsed = -1.0
        self._log: List[str] = []

    def feed(self, line: str) -> None:
        """Consume one line from the diagnostic stream."""
        duration = DURATION_RE.search(line)
        if duration:
            with self._lock:
                # first announcement wins
                if self._duration < 0:
                    self._duration = _to_seconds(duration)
            return

        tick = OUT_TIME_RE.search(line)
        if tick:
            with self._lock:
                self._elapsed = _to_seconds(tick)
            return

        with self._lock:
            self._log.append(line)

    def snapshot(self) -> ProgressSample:
        with self._lock:
            return ProgressSample(
                duration_seconds=self._duration,
                elapsed_seconds=self._elapsed,
            )

    @property
    def log(self) -> str:
        """Lines that matched neither pattern, newline-joined."""
        with self._lock:
            return "\n".join(self._log)
