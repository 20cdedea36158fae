import logging
import sys
import os

import pytest

# Ensure src/ is on sys.path so 'ffbatch' is importable without installing
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

FAKE_ENGINE = os.path.join(os.path.dirname(__file__), 'fixtures', 'fake_engine.py')


class RecordingRenderer:
    """IStatusRenderer that remembers every update instead of drawing it."""

    def __init__(self):
        self.updates = []
        self.diagnostic_messages = []

    def update(self, job, sample=None):
        self.updates.append((job.input_path, job.status, sample))

    def diagnostics(self, job, text):
        self.diagnostic_messages.append((job.input_path, text))

    def statuses_for(self, input_path):
        return [status for path, status, _ in self.updates if path == input_path]


@pytest.fixture
def fake_engine():
    """Engine command prefix that runs the ffmpeg stand-in."""
    return (sys.executable, FAKE_ENGINE)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture(autouse=True)
def reset_ffbatch_logger():
    """Drop handlers the CLI attaches so they do not outlive the captured streams."""
    yield
    logger = logging.getLogger("ffbatch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
