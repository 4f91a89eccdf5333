"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Core interfaces (Protocols) for the duplicate detection pipeline.
Structural typing keeps the scanner, filter, hasher, dispatcher and grouper
swappable in tests and in library use.

Key Components:
---------------
- Fingerprinter: Computes a content digest for one file path.
- FileScanner: Enumerates regular-file entries under a root.
- FileFilter: Decides which entries are eligible for comparison.
- Dispatcher: Turns eligible entries into FileRecords, possibly in parallel.
- DigestGrouper: Partitions FileRecords into duplicate groups.
"""

from typing import Protocol, List, Sequence, Optional, Callable, Tuple
from dupehash.core.models import DirectoryEntry, FileRecord, DuplicateGroup

ProgressCallback = Callable[[str, int, Optional[int]], None]
FingerprintFn = Callable[[str], bytes]


class Fingerprinter(Protocol):
    """Interface for computing a file's content digest."""
    def compute_digest(self, path: str) -> bytes:
        """Return the digest, or raise HashError if the file cannot be read."""
        ...


class FileScanner(Protocol):
    def scan(self, progress_callback: Optional[ProgressCallback] = None) -> List[DirectoryEntry]:
        """
        Scan files from the configured directory.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            Regular-file entries found under the root.
        """
        ...


class FileFilter(Protocol):
    def filter(self, entries: Sequence[DirectoryEntry]) -> List[DirectoryEntry]:
        """Return only the entries eligible for hashing."""
        ...


class Dispatcher(Protocol):
    def process_all(
        self,
        entries: Sequence[DirectoryEntry],
        fingerprint_fn: FingerprintFn,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[FileRecord]:
        """Produce exactly one FileRecord per entry, in unspecified order."""
        ...


class DigestGrouper(Protocol):
    def group_by_digest(self, records: Sequence[FileRecord]) -> List[DuplicateGroup]:
        """Return groups of 2+ records sharing a successful digest."""
        ...

    def partition(
        self, records: Sequence[FileRecord]
    ) -> Tuple[List[DuplicateGroup], List[FileRecord], List[FileRecord]]:
        """Split records into (duplicate groups, unique records, failed records)."""
        ...
