"""
Unit tests for post-processing steps.
"""

import os
from pathlib import Path

from ffbatch.domain.models import Job, JobStatus, TimestampSnapshot
from ffbatch.infrastructure.storage.postprocess import (
    PostProcessingPipeline,
    propagate_timestamps,
    structured_move,
)

MTIME_NS = 1_500_000_000_000_000_000
ATIME_NS = 1_600_000_000_000_000_000


def make_tree(tmp_path):
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    src = root / "sub" / "a.mov"
    src.write_bytes(b"source")
    dest = tmp_path / "dest"
    dest.mkdir()
    return root, src, dest


class TestStructuredMove:
    """Test structured_move()."""

    def test_keeps_relative_path(self, tmp_path):
        """Test root/sub/a.mov lands at dest/sub/a.mov."""
        root, src, dest = make_tree(tmp_path)

        outcome = structured_move(src, root, dest)

        assert outcome.ok
        assert (dest / "sub" / "a.mov").read_bytes() == b"source"
        assert not src.exists()

    def test_replaces_existing_target(self, tmp_path):
        """Test an existing file at the target is overwritten."""
        root, src, dest = make_tree(tmp_path)
        (dest / "sub").mkdir()
        (dest / "sub" / "a.mov").write_bytes(b"old")

        assert structured_move(src, root, dest).ok
        assert (dest / "sub" / "a.mov").read_bytes() == b"source"

    def test_outside_root_uses_file_name(self, tmp_path):
        """Test a file not under the root is moved by name only."""
        _, src, dest = make_tree(tmp_path)
        other_root = tmp_path / "elsewhere"
        other_root.mkdir()

        assert structured_move(src, other_root, dest).ok
        assert (dest / "a.mov").exists()

    def test_missing_source_reports_failure(self, tmp_path):
        """Test failure is reported, not raised."""
        root, src, dest = make_tree(tmp_path)
        src.unlink()

        outcome = structured_move(src, root, dest)

        assert not outcome.ok
        assert outcome.detail

    def test_failed_move_keeps_existing_target(self, tmp_path):
        """Test the file already at the target survives a move that fails."""
        root, src, dest = make_tree(tmp_path)
        (dest / "sub").mkdir()
        (dest / "sub" / "a.mov").write_bytes(b"old")
        src.unlink()

        assert not structured_move(src, root, dest).ok
        assert (dest / "sub" / "a.mov").read_bytes() == b"old"


class TestPropagateTimestamps:
    """Test propagate_timestamps()."""

    def test_copies_modified_and_accessed(self, tmp_path):
        out = tmp_path / "out.mp4"
        out.write_bytes(b"")
        snapshot = TimestampSnapshot(created_ns=None, modified_ns=MTIME_NS, accessed_ns=ATIME_NS)

        assert propagate_timestamps(snapshot, out).ok

        st = os.stat(out)
        assert st.st_mtime_ns == MTIME_NS
        assert st.st_atime_ns == ATIME_NS

    def test_missing_output(self, tmp_path):
        snapshot = TimestampSnapshot(created_ns=None, modified_ns=MTIME_NS, accessed_ns=ATIME_NS)

        outcome = propagate_timestamps(snapshot, tmp_path / "missing.mp4")

        assert not outcome.ok


class TestPostProcessingPipeline:
    """Test PostProcessingPipeline."""

    def _succeeded_job(self, src, out):
        os.utime(src, ns=(ATIME_NS, MTIME_NS))
        job = Job(input_path=src, output_path=out)
        job.captured_timestamps = TimestampSnapshot.capture(src)
        job.status = JobStatus.SUCCEEDED
        return job

    def test_disabled_by_default(self, tmp_path):
        pipeline = PostProcessingPipeline(tmp_path)

        assert not pipeline.enabled
        assert pipeline.run(Job(input_path=tmp_path / "a.mov")) == []

    def test_timestamps_then_move(self, tmp_path):
        """Test both steps run, timestamps first."""
        root, src, dest = make_tree(tmp_path)
        out = root / "sub" / "a.mp4"
        out.write_bytes(b"encoded")
        job = self._succeeded_job(src, out)

        outcomes = PostProcessingPipeline(root, copy_timestamps=True, move_dir=dest).run(job)

        assert [o.name for o in outcomes] == ["copy_timestamps", "move"]
        assert all(o.ok for o in outcomes)
        assert os.stat(out).st_mtime_ns == MTIME_NS
        assert (dest / "sub" / "a.mov").exists()
        # the output stays where it was produced
        assert out.exists()

    def test_failed_step_does_not_raise(self, tmp_path):
        root, src, dest = make_tree(tmp_path)
        job = self._succeeded_job(src, root / "sub" / "never-written.mp4")

        outcomes = PostProcessingPipeline(root, copy_timestamps=True).run(job)

        assert len(outcomes) == 1
        assert not outcomes[0].ok
        assert job.status == JobStatus.SUCCEEDED
