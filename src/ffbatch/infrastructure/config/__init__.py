"""Configuration package."""

from ffbatch.infrastructure.config.loader import ConfigLoader, BatchConfig

__all__ = ["ConfigLoader", "BatchConfig"]
