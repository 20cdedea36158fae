"""CLI interface for the batch transcoder."""
import sys
import logging
import argparse
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from colorama import Fore, just_fix_windows_console

from ffbatch.application.runner import BatchRunner
from ffbatch.domain.exceptions import DomainException, SpawnError
from ffbatch.infrastructure.config import BatchConfig, ConfigLoader
from ffbatch.infrastructure.media import FFmpegCommandBuilder, OutputPathAllocator
from ffbatch.infrastructure.process import CancellationCoordinator, ProcessLifecycleController
from ffbatch.infrastructure.storage import PostProcessingPipeline, find_input_files
from ffbatch.presentation.status import TerminalStatusRenderer
from ffbatch.shared.logging import setup_logger, LoggerAdapter, get_logger
from ffbatch.shared.metrics import MetricsCollector

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


def create_runner_from_config(
    config: BatchConfig,
    input_root: Path,
    renderer: TerminalStatusRenderer,
    coordinator: CancellationCoordinator,
) -> BatchRunner:
    """Create the batch runner with all dependencies from config."""
    builder = FFmpegCommandBuilder(engine=(config.ffmpeg_bin,), params=config.ffmpeg_params)
    controller = ProcessLifecycleController(
        command_builder=builder,
        coordinator=coordinator,
        renderer=renderer,
        poll_interval=config.poll_interval,
        cleanup_retry_delay=config.cleanup_retry_delay,
    )
    postprocessor = PostProcessingPipeline(
        input_root=input_root,
        copy_timestamps=config.copy_timestamps,
        move_dir=config.move_dir,
    )

    return BatchRunner(
        allocator=OutputPathAllocator(),
        controller=controller,
        postprocessor=postprocessor,
        coordinator=coordinator,
        logger=LoggerAdapter(get_logger('ffbatch.runner')),
        metrics=MetricsCollector(),
        extension=config.extension,
    )


def confirm(
    files: Sequence[Path],
    config: BatchConfig,
    renderer: TerminalStatusRenderer,
    ask: Callable[[str], str] = input,
) -> bool:
    """List what is about to happen and ask the operator to go ahead."""
    count = len(files)
    renderer.message(f"Confirm processing of following {count} file{'s' if count > 1 else ''}:", Fore.YELLOW)
    for f in files:
        renderer.message(f"  - {f}", Fore.YELLOW)

    def yes_no(flag: bool) -> str:
        return renderer.paint("Yes", Fore.GREEN) if flag else renderer.paint("No", Fore.RED)

    def value_or_none(value) -> str:
        return renderer.paint(str(value), Fore.CYAN) if value else renderer.paint("None", Fore.RED)

    preview = FFmpegCommandBuilder(engine=(config.ffmpeg_bin,), params=config.ffmpeg_params).preview(config.extension)
    renderer.message(
        "\nOptions:\n"
        f"  - Copy timestamps: {yes_no(config.copy_timestamps)}\n"
        f"  - Move directory: {value_or_none(config.move_dir)}\n"
        f"  - Output extension: {value_or_none(config.extension)}\n"
        f"  - Recursive: {yes_no(config.recursive)}\n"
        f"  - FFmpeg command: {renderer.paint(preview, Fore.CYAN)}"
    )

    try:
        choice = ask("\nProceed? (y/n): ")
    except EOFError:
        choice = "n"
    return choice.strip().lower() == "y"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffbatch",
        description="Run ffmpeg over a batch of files, one at a time",
        epilog="Every argument after the input is passed to ffmpeg unchanged "
               "(input and output are added by ffbatch).",
    )
    parser.add_argument('--tscopy', action='store_true', default=None,
                        help='Copy timestamps from input to output file')
    parser.add_argument('--move', type=Path, metavar='DIR',
                        help='Move processed input files into DIR, keeping their relative layout')
    parser.add_argument('--rgx', metavar='PATTERN',
                        help='Regular expression to filter files of an input directory')
    parser.add_argument('--ext', metavar='EXT',
                        help='Extension for output files (none if omitted)')
    parser.add_argument('--recursive', '-r', action='store_true', default=None,
                        help='Include files in subdirectories')
    parser.add_argument('--yes', '-y', action='store_true', default=None,
                        help='Skip the confirmation prompt')
    parser.add_argument('--ffmpeg', metavar='PATH', help='ffmpeg executable (default: ffmpeg on PATH)')
    parser.add_argument('--config', type=Path, help='Config YAML file (default: ./ffbatch.yaml if present)')
    parser.add_argument('--log-file', type=Path, help='Write a debug log to this file')
    parser.add_argument('--verbose', '-v', action='store_true', default=None, help='Verbose')
    parser.add_argument('input', help='Input file or directory')
    parser.add_argument('ffmpeg_params', nargs=argparse.REMAINDER,
                        help='ffmpeg parameters placed between input and output')
    return parser


def main(argv: Optional[List[str]] = None, ask: Callable[[str], str] = input) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    just_fix_windows_console()
    setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING, log_file=args.log_file)
    logger = get_logger(__name__)
    renderer = TerminalStatusRenderer()

    try:
        overrides = {
            'input_path': args.input,
            'pattern': args.rgx,
            'recursive': args.recursive,
            'extension': args.ext,
            'move_dir': args.move,
            'copy_timestamps': args.tscopy,
            'assume_yes': args.yes,
            'ffmpeg_bin': args.ffmpeg,
            'ffmpeg_params': args.ffmpeg_params or None,
            'log_file': args.log_file,
            'verbose': args.verbose,
        }
        config = ConfigLoader(config_path=args.config).load(overrides=overrides)

        if config.verbose != bool(args.verbose) or config.log_file != args.log_file:
            setup_logger(
                level=logging.DEBUG if config.verbose else logging.WARNING,
                log_file=config.log_file,
            )

        files, input_root = find_input_files(config.input_path, config.pattern, config.recursive)
        logger.info(f"{len(files)} input file(s) under {input_root}")

        if not config.assume_yes and not confirm(files, config, renderer, ask=ask):
            renderer.message("Operation cancelled.")
            return EXIT_OK

        coordinator = CancellationCoordinator()
        runner = create_runner_from_config(config, input_root, renderer, coordinator)

        renderer.message("\nProcessing files:")
        with coordinator.handle_interrupts():
            report = runner.run(files)
        renderer.summary(report)

        if report.cancelled:
            return EXIT_CANCELLED
        return EXIT_OK if report.all_succeeded else EXIT_FAILURE

    except SpawnError as e:
        logger.error(f"Batch aborted: {e}")
        renderer.message(f"\nError: {e}\n", Fore.RED)
        return EXIT_FAILURE
    except DomainException as e:
        logger.error(f"Configuration error: {e}")
        renderer.message(f"\nError: {e}\n", Fore.RED)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_CANCELLED


if __name__ == '__main__':
    sys.exit(main())
