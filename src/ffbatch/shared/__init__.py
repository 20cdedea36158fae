"""Shared utilities package."""

from ffbatch.shared.logging import setup_logger, get_logger, LoggerAdapter
from ffbatch.shared.retry import RetryStrategy
from ffbatch.shared.metrics import MetricsCollector
from ffbatch.shared.types import PathLike, EngineCommand

__all__ = [
    "setup_logger",
    "get_logger",
    "LoggerAdapter",
    "RetryStrategy",
    "MetricsCollector",
    "PathLike",
    "EngineCommand",
]
