"""
Command line entry point.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Running a comparison and printing the result
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional

import numpy as np

from diffable import __version__
from diffable.core.contract import diff
from diffable.core.diff import (
    AlignmentAlgorithm,
    DiffAlgorithm,
    PixelPatchResult,
    WhitespaceMode,
    available_algorithms,
    diff_lines,
    diff_sequences,
    format_bytes,
    format_lines,
    format_set,
    get_algorithm,
    split_lines,
)
from diffable.core.exceptions import DiffError, UnsupportedDiffError
from diffable.core.models import DiffStatistics
from diffable.services.file_io import FileIOService
from diffable.services.settings import DiffSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "diffable"
APP_VERSION = __version__

EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


# =============================================================================
# Enums
# =============================================================================

class CompareMode(Enum):
    """How the two inputs are read and compared."""
    AUTO = auto()    # Pick from file contents
    TEXT = auto()    # Line by line
    BYTES = auto()   # Byte runs
    IMAGE = auto()   # Pixel by pixel
    LINES = auto()   # Unordered sets of lines


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    left_path: str
    right_path: str
    mode: CompareMode = CompareMode.AUTO
    algorithm: Optional[str] = None
    alignment: Optional[AlignmentAlgorithm] = None
    whitespace: Optional[WhitespaceMode] = None
    ignore_case: bool = False
    output_path: Optional[str] = None
    show_stats: bool = False
    config_file: Optional[str] = None
    log_level: Optional[str] = None
    log_file: Optional[str] = None


@dataclass
class CompareOutcome:
    """Rendered comparison."""
    lines: List[str]
    is_identical: bool


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging.

    Diff output goes to stdout, so log records go to stderr.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Show the differences between two files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.txt new.txt                       Line diff
  %(prog)s --mode bytes a.bin b.bin              Byte runs in hex
  %(prog)s a.png b.png -a heatmap -o diff.png    Image heatmap
  %(prog)s a.png b.png -a pixelpatch -o d.npy    Lossless pixel patch

Exit status is 0 if inputs are identical, 1 if they differ, 2 on error.
        """
    )

    parser.add_argument('left', help='Left/original file')
    parser.add_argument('right', help='Right/modified file')

    parser.add_argument(
        '--mode',
        choices=[m.name.lower() for m in CompareMode],
        default='auto',
        help='How to read and compare the files (default: auto)'
    )
    parser.add_argument(
        '-a', '--algorithm',
        choices=available_algorithms(),
        default=None,
        help='Diff algorithm (default: from settings)'
    )
    parser.add_argument(
        '--alignment',
        choices=[a.name.lower() for a in AlignmentAlgorithm],
        default=None,
        help='Sequence alignment algorithm'
    )
    parser.add_argument(
        '-w', '--whitespace',
        choices=[w.name.lower().replace('_', '-') for w in WhitespaceMode],
        default=None,
        help='Whitespace handling for text'
    )
    parser.add_argument(
        '-i', '--ignore-case',
        action='store_true',
        help='Ignore case differences in text'
    )
    parser.add_argument(
        '-o', '--output',
        help='Output file for image results'
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print a summary line after the diff'
    )
    parser.add_argument(
        '--config',
        help='Settings file to use'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Logging level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write log records to this file'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    return CommandLineArgs(
        left_path=parsed.left,
        right_path=parsed.right,
        mode=CompareMode[parsed.mode.upper()],
        algorithm=parsed.algorithm,
        alignment=AlignmentAlgorithm[parsed.alignment.upper()] if parsed.alignment else None,
        whitespace=(
            WhitespaceMode[parsed.whitespace.upper().replace('-', '_')]
            if parsed.whitespace else None
        ),
        ignore_case=parsed.ignore_case,
        output_path=parsed.output,
        show_stats=parsed.stats,
        config_file=parsed.config,
        log_level=parsed.log_level,
        log_file=parsed.log_file,
    )


def apply_overrides(settings: DiffSettings, args: CommandLineArgs) -> DiffSettings:
    """Let command line flags take precedence over stored settings."""
    comparison = settings.comparison
    if args.alignment is not None:
        comparison.algorithm = args.alignment
    if args.whitespace is not None:
        comparison.whitespace_mode = args.whitespace
    if args.ignore_case:
        comparison.ignore_case = True
    if args.log_level:
        settings.logging.level = args.log_level
    if args.log_file:
        settings.logging.log_file = args.log_file
    return settings


# =============================================================================
# Comparison
# =============================================================================

def resolve_mode(args: CommandLineArgs, file_io: FileIOService) -> CompareMode:
    """Pick a comparison mode for AUTO from the file contents."""
    if args.mode != CompareMode.AUTO:
        return args.mode
    if file_io.is_image_file(args.left_path) and file_io.is_image_file(args.right_path):
        return CompareMode.IMAGE
    if file_io.is_binary_file(args.left_path) or file_io.is_binary_file(args.right_path):
        return CompareMode.BYTES
    return CompareMode.TEXT


def _require(algorithm: type[DiffAlgorithm], item_type: type) -> None:
    if not algorithm.supports(item_type):
        raise UnsupportedDiffError(algorithm.__name__, item_type)


def compare_text(
    args: CommandLineArgs,
    settings: DiffSettings,
    file_io: FileIOService,
    algorithm: type[DiffAlgorithm]
) -> CompareOutcome:
    _require(algorithm, str)
    left = file_io.read_text(args.left_path).text
    right = file_io.read_text(args.right_path).text
    results = diff_lines(left, right, settings.comparison.line_options())
    return _outcome(list(format_lines(results)), results, args.show_stats)


def compare_bytes(
    args: CommandLineArgs,
    settings: DiffSettings,
    file_io: FileIOService,
    algorithm: type[DiffAlgorithm]
) -> CompareOutcome:
    _require(algorithm, bytes)
    left = file_io.read_bytes(args.left_path)
    right = file_io.read_bytes(args.right_path)
    results = diff_sequences(left, right, settings.comparison.algorithm)
    return _outcome(list(format_bytes(results)), results, args.show_stats)


def compare_line_sets(
    args: CommandLineArgs,
    settings: DiffSettings,
    file_io: FileIOService,
    algorithm: type[DiffAlgorithm]
) -> CompareOutcome:
    options = settings.comparison.line_options()
    left = {options.normalize_line(line) for line in split_lines(file_io.read_text(args.left_path).text)}
    right = {options.normalize_line(line) for line in split_lines(file_io.read_text(args.right_path).text)}
    results = diff(left, right, algorithm)
    return _outcome(list(format_set(results)), results, args.show_stats)


def compare_images(
    args: CommandLineArgs,
    settings: DiffSettings,
    file_io: FileIOService,
    algorithm: type[DiffAlgorithm]
) -> CompareOutcome:
    left = file_io.load_image(args.left_path)
    right = file_io.load_image(args.right_path)
    result = diff(left, right, algorithm)

    if isinstance(result, PixelPatchResult):
        identical = result.is_identical
        if args.output_path:
            np.save(args.output_path, result.deltas)
        summary = (
            f"{result.mode} {result.size[0]}x{result.size[1]}: "
            f"{result.changed_pixels} changed pixels"
        )
    else:
        identical = (
            left.size == right.size and left.tobytes() == right.tobytes()
        )
        if args.output_path:
            result.save(args.output_path)
        summary = f"{result.mode} {result.width}x{result.height}"

    if args.output_path:
        summary = f"{summary} -> {args.output_path}"
        logging.info(f"main - Wrote {algorithm.__name__} result to {args.output_path}")

    return CompareOutcome(lines=[summary], is_identical=identical)


def _outcome(lines: List[str], results, show_stats: bool) -> CompareOutcome:
    stats = DiffStatistics.from_results(results)
    if show_stats:
        lines.append(f"{stats} ({stats.similarity_ratio:.1%} similar)")
    return CompareOutcome(lines=lines, is_identical=stats.is_identical)


COMPARATORS = {
    CompareMode.TEXT: compare_text,
    CompareMode.BYTES: compare_bytes,
    CompareMode.LINES: compare_line_sets,
    CompareMode.IMAGE: compare_images,
}


def run(args: CommandLineArgs, settings: DiffSettings) -> CompareOutcome:
    """Run the comparison described by ``args``."""
    file_io = FileIOService()
    mode = resolve_mode(args, file_io)

    if args.algorithm:
        algorithm = get_algorithm(args.algorithm)
    elif mode == CompareMode.IMAGE:
        algorithm = get_algorithm(settings.image.algorithm)
    elif mode == CompareMode.LINES:
        algorithm = get_algorithm('lcs')
    else:
        algorithm = get_algorithm('default')

    logging.info(f"main - Comparing in {mode.name} mode with {algorithm.__name__}")
    return COMPARATORS[mode](args, settings, file_io, algorithm)


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Returns:
        Exit code (0 identical, 1 different, 2 error)
    """
    args = parse_arguments(argv)

    settings = apply_overrides(SettingsManager(args.config_file).settings, args)
    log_file = Path(settings.logging.log_file) if settings.logging.log_file else None
    logger = setup_logging(settings.logging.level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        outcome = run(args, settings)
    except (DiffError, OSError, ValueError) as e:
        logger.debug(f"Comparison failed: {e}", exc_info=True)
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_ERROR

    for line in outcome.lines:
        print(line)

    return EXIT_IDENTICAL if outcome.is_identical else EXIT_DIFFERENT


if __name__ == '__main__':
    sys.exit(main())
