"""Presentation layer package."""

from ffbatch.presentation.cli import main, create_runner_from_config
from ffbatch.presentation.status import TerminalStatusRenderer

__all__ = ["main", "create_runner_from_config", "TerminalStatusRenderer"]
