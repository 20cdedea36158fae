"""Sequential batch driver for ffmpeg with live progress and safe cleanup."""

__version__ = "1.0.0"
