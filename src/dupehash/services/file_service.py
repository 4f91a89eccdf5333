"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File relocation for duplicates: move into a quarantine directory or to the
system trash. Nothing here is called by the core pipeline; callers decide.
"""
import logging
import os
from pathlib import Path
from typing import List, Tuple

from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Single-file moves with batch helpers that aggregate errors.
    """

    @staticmethod
    def move_to_quarantine(file_path: str, quarantine_dir: str) -> str:
        """
        Moves a file into quarantine_dir, keeping its file name.

        Uses os.rename, which is atomic within one volume. No copy fallback:
        a cross-device move fails like any other move.

        Returns:
            The destination path

        Raises:
            FileExistsError: If the destination already has an entry with that name
            OSError: If the move fails for any other reason
        """
        source = Path(file_path)
        destination = Path(quarantine_dir) / source.name

        if os.path.lexists(destination):
            raise FileExistsError(f"Destination already exists: {destination}")

        os.rename(source, destination)
        logger.debug(f"Quarantined {source} -> {destination}")
        return str(destination)

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved {path} to trash")

    @classmethod
    def move_multiple_to_quarantine(cls, file_paths: List[str], quarantine_dir: str) -> List[Tuple[str, str]]:
        """
        Quarantines every path it can.

        Returns:
            (path, error message) for each file that could not be moved
        """
        errors = []
        for path in file_paths:
            try:
                cls.move_to_quarantine(path, quarantine_dir)
            except OSError as e:
                logger.warning(f"Failed to quarantine {path}: {e}")
                errors.append((path, str(e)))
        return errors

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]) -> List[Tuple[str, str]]:
        """Trashes every path it can; returns (path, error message) for failures."""
        errors = []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
            except (OSError, RuntimeError) as e:
                logger.warning(f"Failed to trash {path}: {e}")
                errors.append((path, str(e)))
        return errors

    @staticmethod
    def summarize_errors(errors: List[Tuple[str, str]], limit: int = 5) -> str:
        """Short multi-line summary of batch errors for console output."""
        lines = [f"  • {Path(p).name}: {msg}" for p, msg in errors[:limit]]
        if len(errors) > limit:
            lines.append(f"  • ...and {len(errors) - limit} more files")
        return "\n".join(lines)
