"""Test engine command construction."""

from pathlib import Path

import pytest

from ffbatch.infrastructure.media.ffmpeg import FFmpegCommandBuilder, split_params


def test_build_places_params_between_input_and_output():
    builder = FFmpegCommandBuilder(params=["-c:v", "libx264", "-crf", "23"])

    cmd = builder.build(Path("/in/a.mov"), Path("/in/a.mp4"))

    assert cmd == [
        "ffmpeg", "-hide_banner", "-progress", "pipe:2",
        "-i", "/in/a.mov",
        "-c:v", "libx264", "-crf", "23",
        "-y", "/in/a.mp4",
    ]


def test_engine_prefix_and_string_params():
    builder = FFmpegCommandBuilder(engine=("python", "fake.py"), params="-vf 'scale=640:-2'")

    cmd = builder.build(Path("a.mov"), Path("a.mp4"))

    assert cmd[:2] == ["python", "fake.py"]
    assert "scale=640:-2" in cmd


def test_engine_as_string():
    assert FFmpegCommandBuilder(engine="/usr/bin/ffmpeg").engine == ["/usr/bin/ffmpeg"]


def test_empty_engine_rejected():
    with pytest.raises(ValueError):
        FFmpegCommandBuilder(engine=())


def test_paths_with_spaces_stay_single_arguments():
    cmd = FFmpegCommandBuilder().build(Path("/in/my clip.mov"), Path("/in/my clip.mp4"))

    assert "/in/my clip.mov" in cmd
    assert cmd[-1] == "/in/my clip.mp4"


def test_preview():
    builder = FFmpegCommandBuilder(params=["-an"])

    assert builder.preview(".mp4") == "ffmpeg -i [input] -an -y [output].mp4"
    assert FFmpegCommandBuilder().preview() == "ffmpeg -i [input] -y [output]"


@pytest.mark.parametrize("params,expected", [
    (None, []),
    ("", []),
    ("-an -sn", ["-an", "-sn"]),
    (["-crf", 23], ["-crf", "23"]),
])
def test_split_params(params, expected):
    assert split_params(params) == expected
