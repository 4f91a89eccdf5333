#!/usr/bin/env python3
"""
dupehash CLI — find duplicate files by content hash.
Scans a directory, prints (or writes) a duplicate report and can move every
copy but one into a quarantine directory or the system trash.
"""
from __future__ import annotations
import argparse
import importlib
import logging
import os
import re
import sys
import time
from pathlib import Path
from typing import NoReturn, Optional

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_REQUIRED_MODULES = ("blake3", "xxhash", "send2trash")
_missing = []
for _module in _REQUIRED_MODULES:
    try:
        importlib.import_module(_module)
    except ImportError:
        _missing.append(_module)

if _missing:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_missing)}", file=sys.stderr)
    sys.exit(1)

from dupehash.core.models import EligibilityCriteria, ScanParams, ScanResult, normalize_extensions
from dupehash.commands import DuplicateScanCommand
from dupehash.utils.convert_utils import ConvertUtils
from dupehash.services.duplicate_service import DuplicateService
from dupehash.services.file_service import FileService
from dupehash.services.report_service import ReportService, REPORT_FORMATS
from dupehash.aliases import ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Command line front end: arguments in, report (and optional relocation) out."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Avoid UnicodeEncodeError on Windows consoles
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(
            prog="dupehash",
            description="dupehash — find duplicate files by content hash",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        parser.add_argument("--input", "-i", required=True, type=str,
                            help="Directory to scan for duplicates")

        selection = parser.add_argument_group("file selection")
        selection.add_argument("--min-size", "-m", default="1", metavar="SIZE",
                               help="Minimum file size (e.g., 500KB, 1MB). Default: 1 (skips empty files)")
        selection.add_argument("--max-size", "-M", default="inf", metavar="SIZE",
                               help="Maximum file size (e.g., 10MB, 1GB, inf). Default: inf")
        selection.add_argument("--extensions", "-x", nargs="+", default=[], metavar="EXT",
                               help="Allowed extensions, case-sensitive (e.g., jpg png). Default: any")
        selection.add_argument("--pattern", "-p", default=".*", metavar="REGEX",
                               help="Regular expression searched for in each file name. Default: .*")
        selection.add_argument("--excluded-dirs", "-e", nargs="+", default=[], metavar="DIR",
                               dest="excluded_dirs", help="Directories to skip, with everything below them")

        hashing = parser.add_argument_group("hashing")
        hashing.add_argument("--algorithm", "-a", choices=ALGORITHM_CHOICES, default="blake3",
                             help=ALGORITHM_HELP_TEXT)
        hashing.add_argument("--seed", default=0, type=int, metavar="N",
                             help="Seed for xxhash. Default: 0")
        hashing.add_argument("--workers", "-w", default=None, type=int, metavar="N",
                             help="Number of hashing threads. Default: based on CPU count")
        hashing.add_argument("--verify", action="store_true",
                             help="Confirm every duplicate group byte by byte after hashing")

        output = parser.add_argument_group("output")
        output.add_argument("--format", "-f", choices=REPORT_FORMATS, default="text",
                            help="Report format. Default: text")
        output.add_argument("--output", "-o", default=None, metavar="FILE",
                            help="Write the report to FILE instead of stdout")
        output.add_argument("--quiet", "-q", action="store_true",
                            help="Suppress non-essential output")
        output.add_argument("--verbose", "-v", action="store_true",
                            help="Show progress, statistics and info logging on stderr")

        relocation = parser.add_argument_group("relocation")
        target = relocation.add_mutually_exclusive_group()
        target.add_argument("--quarantine", default=None, metavar="DIR",
                            help="Move all but the first file of each group into DIR")
        target.add_argument("--trash", action="store_true",
                            help="Move all but the first file of each group to the system trash")
        relocation.add_argument("--force", action="store_true",
                                help="Skip the confirmation prompt (for scripts)")

        return parser.parse_args(args)

    @staticmethod
    def wants_relocation(args: argparse.Namespace) -> bool:
        return bool(args.quarantine) or args.trash

    @staticmethod
    def is_interactive() -> bool:
        return sys.stdin.isatty() and sys.stdout.isatty()

    def validate_args(self, args: argparse.Namespace) -> None:
        """Reject bad input before any file is touched."""
        relocating = self.wants_relocation(args)
        if args.force and not relocating:
            self.error_exit("--force can only be used with --quarantine or --trash")
        if relocating and not args.force and not self.is_interactive():
            self.error_exit(
                "Cannot ask for confirmation in a non-interactive session.\n"
                "Pass --force to relocate files when piping output or running from scripts."
            )

        self._validate_input_dir(args.input)
        self._validate_sizes(args.min_size, args.max_size)

        try:
            re.compile(args.pattern)
        except re.error as e:
            self.error_exit(f"Invalid name pattern '{args.pattern}': {e}")

        if args.workers is not None and args.workers < 1:
            self.error_exit("Worker count must be at least 1")
        if args.seed < 0:
            self.error_exit("Seed cannot be negative")

        if args.quarantine and not Path(args.quarantine).resolve().is_dir():
            self.error_exit(f"Quarantine directory not found: {args.quarantine}")

        for excluded in args.excluded_dirs:
            path = Path(excluded).resolve()
            if not path.exists():
                self.warning(f"Excluded directory not found: {excluded}")
            elif not path.is_dir():
                self.warning(f"Excluded path is not a directory: {excluded}")

    def _validate_input_dir(self, input_dir: str) -> None:
        path = Path(input_dir).resolve()
        if not path.exists():
            self.error_exit(f"Directory not found: {input_dir}")
        if not path.is_dir():
            self.error_exit(f"Path is not a directory: {input_dir}")

    def _validate_sizes(self, min_size_str: str, max_size_str: str) -> None:
        try:
            min_size = ConvertUtils.human_to_bytes(min_size_str)
            max_size = ConvertUtils.size_limit_to_bytes(max_size_str)
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")
        if max_size is not None and max_size < min_size:
            self.error_exit("Maximum size cannot be less than minimum size")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        try:
            max_size = ConvertUtils.size_limit_to_bytes(args.max_size)
            criteria = EligibilityCriteria(
                min_size=ConvertUtils.human_to_bytes(args.min_size),
                max_size=EligibilityCriteria.max_size if max_size is None else max_size,
                allowed_extensions=normalize_extensions(args.extensions) if args.extensions else None,
                name_pattern=args.pattern,
            )
            return ScanParams(
                root_dir=str(Path(args.input).resolve()),
                criteria=criteria,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                workers=args.workers,
                excluded_dirs=[str(Path(d.strip()).resolve()) for d in args.excluded_dirs],
                verify=args.verify,
                xxhash_seed=args.seed,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """Single-line progress on stderr so stdout stays a clean report."""
        if not self.verbose:
            return
        if total:
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({current * 100 / total:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files found...")
        sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> ScanResult:
        if self.verbose:
            print(f"Finding duplicates (algorithm: {params.algorithm.display_name})...", file=sys.stderr)

        try:
            result = DuplicateScanCommand().execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except RuntimeError as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(f"\n{result.stats.summary()}", file=sys.stderr)
        return result

    def output_results(self, result: ScanResult, fmt: str, output: Optional[str]) -> None:
        """Render the report to stdout or to a file."""
        report = ReportService.render(result, fmt)

        if output:
            try:
                Path(output).write_text(report + "\n", encoding="utf-8")
            except OSError as e:
                self.error_exit(f"Cannot write report to {output}: {e}")
            if not self.quiet:
                print(f"Report written to {output}")
        elif not (self.quiet and fmt == "text"):
            print(report)

    def print_relocation_plan(self, result: ScanResult, candidates, target: str) -> None:
        freed = DuplicateService.calculate_space_savings(result.groups, candidates)
        print()
        for idx, group in enumerate(result.groups, 1):
            print(f"Group {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} | Files: {len(group.files)}")
            print("-" * 60)
            print(f"   [KEEP] {group.files[0].path}")
            for file in group.files[1:]:
                print(f"   [MOVE] {file.path}")
            print()
        print("=" * 60)
        print(f"Summary: {len(candidates)} files to {target}, {ConvertUtils.bytes_to_human(freed)} freed")
        print()

    def confirm(self, prompt: str) -> bool:
        if not self.is_interactive():
            self.error_exit("Lost the interactive terminal. Use --force in non-interactive environments.")
        return input(f"{prompt} [y/N]: ").strip().lower() in ("y", "yes")

    def execute_relocation(self, result: ScanResult, args: argparse.Namespace) -> None:
        """Move all but the first file of each group, after a preview and a confirmation."""
        if not result.groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return

        candidates = DuplicateService.quarantine_candidates(result.groups)
        target = f"quarantine ({args.quarantine})" if args.quarantine else "trash"

        if not self.quiet:
            self.print_relocation_plan(result, candidates, target)

        if args.force:
            if not self.quiet:
                print("⚠️  --force given, moving without confirmation.")
        elif not self.confirm(f"Move {len(candidates)} files to {target}?"):
            print("Cancelled by user.")
            return

        if args.quarantine:
            errors = FileService.move_multiple_to_quarantine(candidates, str(Path(args.quarantine).resolve()))
        else:
            errors = FileService.move_multiple_to_trash(candidates)

        moved = len(candidates) - len(errors)
        if errors:
            print(f"\n⚠️  Partial success: {moved}/{len(candidates)} files moved to {target}.")
            print(f"Failed to move {len(errors)} file(s):")
            print(FileService.summarize_errors(errors))
        elif not self.quiet:
            print(f"✅ Successfully moved {moved} files to {target}.")

    def warning(self, message: str) -> None:
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("dupehash").setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if args.format == "text" and not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        result = self.run_scan(params)
        self.output_results(result, args.format, args.output)

        if self.wants_relocation(args):
            self.execute_relocation(result, args)

        if self.verbose:
            print(f"\n✅ Completed in {time.time() - self.start_time:.2f} seconds", file=sys.stderr)


def main() -> None:
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
