#!/usr/bin/env python3
"""
detectdups CLI — Command line interface for duplicate file detection and removal.
Lists every file whose content already exists under an earlier path and,
with --delete, removes it. The first file seen for a given content is kept.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from detectdups.core.models import DetectionParams, ScanStatistics
from detectdups.core.exceptions import CacheWriteError
from detectdups.commands import DetectionCommand
from detectdups.aliases import DESCRIPTION_TEXT, CACHE_HELP_TEXT, DELETE_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description=DESCRIPTION_TEXT,
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "directories",
            nargs="+",
            metavar="DIR",
            help="One or more directories to search"
        )

        # Search options
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Search directories recursively"
        )
        parser.add_argument(
            "--cache", "-c",
            default=None,
            type=str,
            metavar="FILE",
            help=CACHE_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--delete", "-d",
            action="store_true",
            help=DELETE_HELP_TEXT
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help="With --delete: move duplicates to the system trash instead of deleting them"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress duplicate listing and summary"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and cache activity"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.trash and not args.delete:
            self.error_exit("--trash can only be used with --delete")

        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose are mutually exclusive")

        if args.cache is not None and not args.cache.strip():
            self.error_exit("Cache file name cannot be empty")

    def create_params(self, args: argparse.Namespace) -> DetectionParams:
        """Create DetectionParams from CLI arguments."""
        try:
            return DetectionParams(
                roots=list(args.directories),
                recursive=args.recursive,
                cache_file=args.cache,
                delete_files=args.delete,
                use_trash=args.trash
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def duplicate_callback(self, path: str, existing: str, size: int) -> None:
        """Print one line per duplicate, like: <path> already exists as <existing> [<n> bytes]."""
        if self.quiet:
            return
        print(f"{path} already exists as {existing} [{size} bytes]")

    def error_callback(self, path: str, error: Exception) -> None:
        """Report skipped roots and unreadable directories without aborting the run."""
        if isinstance(error, OSError) and error.strerror:
            self.warning(f"Unable to read directory '{path}': {error.strerror}")
        else:
            self.warning(f"{error}")

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_detection(self, params: DetectionParams) -> ScanStatistics:
        """Execute detection workflow."""
        command = DetectionCommand()
        try:
            stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag,
                duplicate_callback=self.duplicate_callback,
                error_callback=self.error_callback
            )
        except CacheWriteError as e:
            self.error_exit(f"Hash cache failure, stopping: {e}")

        if self.verbose:
            sys.stderr.write("\n")
        return stats

    def output_summary(self, stats: ScanStatistics) -> None:
        """Print the end-of-run summary when at least one file was checked."""
        if self.quiet or stats.files_checked <= 0:
            return
        print(stats.print_summary())

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> ScanStatistics:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("detectdups").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        stats = self.run_detection(params)
        self.output_summary(stats)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")
        return stats


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
