"""Application layer package."""

from ffbatch.application.runner import BatchRunner

__all__ = ["BatchRunner"]
