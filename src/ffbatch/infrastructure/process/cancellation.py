"""
Process-wide cancellation.

The coordinator owns two pieces of shared state: the "cancelled" flag, set
once and never cleared, and the slot holding the single active engine
process. The slot is guarded by a lock; whoever empties it (the polling
loop through ``release`` or the interrupt path through ``cancel``) is the
only party allowed to dispose of the process.

Signal handlers run on the main thread between bytecodes, possibly while
the main thread already holds the lock, so the handler never blocks on it.
If the lock is busy it only raises the flag and the polling loop, which
checks the flag on every tick, performs the kill itself.
"""

import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from ffbatch.shared.logging import get_logger

logger = get_logger(__name__)


def kill_process(proc: subprocess.Popen) -> None:
    """Forcibly stop ``proc``; a process that is already gone is fine."""
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    except OSError as e:
        # Windows reports access denied for a process that already exited
        if proc.poll() is None:
            raise
        logger.debug(f"kill({proc.pid}) after exit: {e}")


def _default_signals() -> Tuple[int, ...]:
    sigs = [signal.SIGINT]
    if hasattr(signal, "SIGTERM"):
        sigs.append(signal.SIGTERM)
    return tuple(sigs)


class CancellationCoordinator:
    """Cancellation flag plus the slot for the one active engine process."""

    def __init__(self):
        self._cancelled = False
        self._lock = threading.Lock()
        self._active: Optional[subprocess.Popen] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> Optional[subprocess.Popen]:
        return self._active

    def register(self, proc: subprocess.Popen) -> bool:
        """
        Make ``proc`` the active process.

        Returns:
            True if registered. False if cancellation already happened; the
            process has then been killed and the caller must not run it.

        Raises:
            RuntimeError: If another process is still registered
        """
        with self._lock:
            if not self._cancelled:
                if self._active is not None:
                    raise RuntimeError(
                        f"process {self._active.pid} is still active; refusing to register {proc.pid}"
                    )
                self._active = proc
                return True

        logger.debug(f"Cancelled before registration; killing pid {proc.pid}")
        kill_process(proc)
        return False

    def release(self, proc: subprocess.Popen) -> bool:
        """
        Empty the slot if ``proc`` still occupies it.

        Idempotent: only the first successful call returns True, and that
        caller owns the process from then on. False means the interrupt path
        already took it (and killed it) or it was never registered.
        """
        with self._lock:
            if self._active is proc:
                self._active = None
                return True
            return False

    def cancel(self, blocking: bool = True) -> None:
        """
        Raise the cancellation flag and kill the active process, if any.

        With ``blocking=False`` (signal handler) a busy lock is left to the
        polling loop, which sees the flag on its next tick. Nothing is logged
        on that path since the interrupted frame may be inside a handler.
        """
        if blocking and not self._cancelled:
            logger.info("Cancellation requested")
        self._cancelled = True

        if not self._lock.acquire(blocking):
            return
        try:
            proc, self._active = self._active, None
        finally:
            self._lock.release()

        if proc is not None:
            if blocking:
                logger.debug(f"Killing active engine process {proc.pid}")
            kill_process(proc)

    def _on_signal(self, signum, frame) -> None:
        self.cancel(blocking=False)

    @contextmanager
    def handle_interrupts(self, signals: Optional[Tuple[int, ...]] = None) -> Iterator["CancellationCoordinator"]:
        """Route interrupt signals to ``cancel`` for the duration of the block.

        Must be entered from the main thread. Previous handlers are restored
        on exit.
        """
        signals = signals or _default_signals()
        previous = {}
        for sig in signals:
            previous[sig] = signal.signal(sig, self._on_signal)
        try:
            yield self
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
