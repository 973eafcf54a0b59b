"""
Main entry point for the ZipDiff command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading and overrides
- Running the comparison and writing JSON output
- Mapping failures to exit codes
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

from zipdiff import __version__
from zipdiff.core.archive.comparer import ArchiveComparer
from zipdiff.core.errors import ComparisonError
from zipdiff.core.models import ArchiveCompareResult
from zipdiff.services.hashing import HashAlgorithm
from zipdiff.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "zipdiff"
APP_VERSION = __version__

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    left_path: str = ""
    right_path: str = ""
    output_path: Optional[str] = None
    config_file: Optional[str] = None
    workers: Optional[int] = None
    hash_algorithm: Optional[HashAlgorithm] = None
    summary: Optional[bool] = None
    indent: Optional[int] = None
    log_level: Optional[str] = None
    log_file: Optional[str] = None


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


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so that stdout carries only the JSON
    result.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


def set_log_level(level: str) -> None:
    """Change the level of the root logger and all of its handlers."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)


# =============================================================================
# Command Line Parsing
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
        description="Compare the entries of two ZIP archives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.zip new.zip                 Print changed entries as JSON
  %(prog)s old.zip new.zip --summary       Include counters and diagnostics
  %(prog)s old.zip new.zip -o diff.json    Write the result to a file
        """
    )

    parser.add_argument('left', help='Left/original archive')
    parser.add_argument('right', help='Right/new archive')

    # Output
    parser.add_argument(
        '-o', '--output',
        help='Write JSON to this file instead of stdout'
    )
    parser.add_argument(
        '--summary',
        action='store_true',
        default=None,
        help='Wrap differences with summary counters and entry errors'
    )
    parser.add_argument(
        '--indent',
        type=int,
        default=None,
        help='JSON indentation (default from settings: 2)'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help='Number of comparison threads'
    )
    parser.add_argument(
        '--hash-algorithm',
        choices=[algorithm.name for algorithm in HashAlgorithm],
        default=None,
        help='Fingerprint algorithm'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write log records to this file'
    )

    # Version
    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    if parsed.workers is not None and parsed.workers < 1:
        parser.error("--workers must be at least 1")

    result = CommandLineArgs()
    result.left_path = parsed.left
    result.right_path = parsed.right
    result.output_path = parsed.output
    result.config_file = parsed.config
    result.workers = parsed.workers
    result.summary = parsed.summary
    result.indent = parsed.indent
    result.log_file = parsed.log_file

    if parsed.hash_algorithm:
        result.hash_algorithm = HashAlgorithm.from_string(parsed.hash_algorithm)

    # Log level
    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Comparison
# =============================================================================

def load_settings(args: CommandLineArgs) -> ApplicationSettings:
    """Load persisted settings and apply command line overrides."""
    manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = manager.settings

    if args.workers is not None:
        settings.comparison.parallel_workers = args.workers
    if args.hash_algorithm is not None:
        settings.comparison.hash_algorithm = args.hash_algorithm
    if args.summary is not None:
        settings.output.include_summary = args.summary
    if args.indent is not None:
        settings.output.indent = args.indent
    if args.log_level is not None:
        settings.output.log_level = args.log_level

    return settings


def render_result(result: ArchiveCompareResult, settings: ApplicationSettings) -> str:
    """Render a comparison result as JSON text."""
    if settings.output.include_summary:
        payload = result.to_dict()
    else:
        payload = [diff.to_dict() for diff in result.sorted_differences()]

    indent = settings.output.indent if settings.output.indent > 0 else None
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def write_output(text: str, output_path: Optional[str]) -> None:
    """Write rendered output to a file or stdout."""
    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding='utf-8')
    else:
        sys.stdout.write(text + "\n")


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Returns:
        Exit code: 0 on success (even if some entries were unreadable),
        2 if an archive cannot be opened or cataloged, 1 on any other failure
    """
    args = parse_arguments(argv)

    # Handlers exist before the settings file is read so its warnings are kept
    logger = setup_logging(
        args.log_level or "INFO",
        Path(args.log_file) if args.log_file else None
    )
    settings = load_settings(args)
    set_log_level(settings.output.log_level)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        comparer = ArchiveComparer(settings.comparison.to_options())
        result = comparer.compare(args.left_path, args.right_path)
        write_output(render_result(result, settings), args.output_path)
    except ComparisonError as e:
        logger.error(f"Comparison failed: {e}")
        return EXIT_BAD_INPUT
    except Exception as e:
        logger.critical(f"Unexpected error: {e}", exc_info=True)
        return EXIT_FAILURE

    logger.info(
        f"{len(result.differences)} changed entries, "
        f"{len(result.errors)} unreadable, {result.compare_time:.2f}s"
    )
    return EXIT_OK


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
