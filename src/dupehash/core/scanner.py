"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Traversal collaborator: walks a root directory and yields one DirectoryEntry
per regular file. Eligibility (size/extension/name) is decided later by the filter.
Features:
- os.walk traversal with directories pruned before descent
- Skips symbolic links, OS trash folders, excluded and unreadable directories
- Caches the stat result on each entry so the filter does not stat twice
"""

import os
import stat
import sys
import time
import logging
from pathlib import Path
from typing import List, Optional

from dupehash.core.interfaces import FileScanner, ProgressCallback
from dupehash.core.models import DirectoryEntry, Stage

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Scans directories recursively and collects regular files.

    Attributes:
        root_dir: Root directory to scan
        excluded_dirs: Directories (and their subtrees) to skip
        progress_interval: Report progress every N files
    """

    def __init__(
        self,
        root_dir: str,
        excluded_dirs: Optional[List[str]] = None,
        progress_interval: int = 5000
    ):
        self.root_dir = root_dir
        self.excluded_dirs = [str(Path(d).resolve()) for d in (excluded_dirs or [])]
        self.progress_interval = progress_interval

    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> List[DirectoryEntry]:
        """
        Single-pass scan. Returns regular-file entries found under the root.

        Raises:
            RuntimeError: If the root does not exist or is not a directory
        """
        root_path = Path(self.root_dir)
        problem = None
        if not root_path.exists():
            problem = "Directory does not exist"
        elif not root_path.is_dir():
            problem = "Not a directory"
        if problem:
            logger.error(f"{problem}: {self.root_dir}")
            raise RuntimeError(f"{problem}: {self.root_dir}")

        logger.debug(f"Scanning directory: {self.root_dir}")
        start_time = time.time()
        entries = []
        processed = 0

        for root, dirs, files in os.walk(str(root_path), onerror=self._on_walk_error):
            dirs[:] = [d for d in dirs if self._prefilter_dirs(Path(root) / d)]

            for filename in files:
                entry = self._process_file(os.path.join(root, filename))
                if entry is not None:
                    entries.append(entry)
                processed += 1
                if progress_callback and processed % self.progress_interval == 0:
                    progress_callback(Stage.SCAN.value, processed, None)

        if progress_callback:
            progress_callback(Stage.SCAN.value, processed, None)

        logger.debug(f"Scan completed in {time.time() - start_time:.2f}s: "
                     f"{len(entries)} regular files out of {processed} entries")
        return entries

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """True for OS trash/recycle bin folders; any resolution error counts as False."""
        try:
            resolved = str(path.resolve(strict=False))
        except (OSError, ValueError):
            return False

        if sys.platform == "win32":
            markers = ("$Recycle.Bin", "\\Recycler\\")
        elif sys.platform == "darwin":
            markers = ("/.Trash/",)
            if resolved.endswith("/.Trash"):
                return True
        else:
            markers = (".local/share/Trash", "/.trash/")
        return any(marker in resolved for marker in markers)

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """True when path is one of excluded_dirs or lies below one of them."""
        try:
            resolved = os.path.normpath(str(path.resolve(strict=False)))
        except (OSError, ValueError):
            return False
        for excluded in excluded_dirs:
            prefix = os.path.normpath(excluded)
            if resolved == prefix or resolved.startswith(prefix + os.sep):
                return True
        return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Decide whether os.walk should descend into a directory."""
        if path.is_symlink():
            logger.debug(f"Skipping symlinked directory: {path}")
            return False

        if self._is_system_trash(path):
            logger.debug(f"Skipping system trash directory: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        try:
            return path.is_dir() and os.access(path, os.R_OK | os.X_OK)
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    @staticmethod
    def _process_file(path: str) -> Optional[DirectoryEntry]:
        """
        Return an entry for a regular file, None for links, devices, sockets, etc.
        An entry whose lstat fails is still returned; the filter will drop it.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.debug(f"Could not read metadata of {path}: {e}")
            return DirectoryEntry(path)

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None
        return DirectoryEntry(path, stat_result=st)
