"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/dispatcher.py
Parallel dispatcher: fans eligible entries out over a fixed thread pool and
turns each one into exactly one FileRecord.

Each worker returns its own record and the executor's map() is the single
aggregation point, so no shared mapping is locked while hashing. A failure in
one entry (stat or read) is stored on that entry's record and the batch goes on.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from dupehash.core.interfaces import Dispatcher, FingerprintFn, ProgressCallback
from dupehash.core.models import DirectoryEntry, FileRecord, HashError, HashErrorKind, Stage

logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Pool size bounded by available parallelism (CPUs this process may run on)."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return os.cpu_count() or 1


class ParallelDispatcher(Dispatcher):
    """
    Run-to-completion fan-out of fingerprinting work.

    Attributes:
        workers: Number of worker threads (default: default_workers())
        progress_interval: Report progress every N finished entries
    """

    def __init__(self, workers: Optional[int] = None, progress_interval: int = 100):
        if workers is not None and workers < 1:
            raise ValueError("Worker count must be at least 1")
        self.workers = workers or default_workers()
        self.progress_interval = max(1, progress_interval)

    def process_all(
        self,
        entries: Sequence[DirectoryEntry],
        fingerprint_fn: FingerprintFn,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[FileRecord]:
        """
        Fingerprints every entry and returns one record per entry.
        Output order is unspecified relative to input order.
        """
        total = len(entries)
        if total == 0:
            return []

        lock = threading.Lock()
        done = 0

        def work(entry: DirectoryEntry) -> FileRecord:
            nonlocal done
            record = self._process_entry(entry, fingerprint_fn)
            if progress_callback:
                with lock:
                    done += 1
                    if done % self.progress_interval == 0 or done == total:
                        progress_callback(Stage.HASH.value, done, total)
            return record

        logger.debug(f"Dispatching {total} entries to {self.workers} workers")
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            records = list(pool.map(work, entries))

        failed = sum(1 for r in records if not r.ok)
        if failed:
            logger.info(f"{failed} of {total} files could not be hashed")
        return records

    @staticmethod
    def _process_entry(entry: DirectoryEntry, fingerprint_fn: FingerprintFn) -> FileRecord:
        """
        Builds the record for one entry. Never raises: any failure for this entry is stored on its record.
        """
        try:
            size = entry.stat().st_size
        except OSError as e:
            logger.warning(f"Could not read metadata of {entry.path}: {e}")
            error = HashError(entry.path, str(e), HashErrorKind.METADATA)
            return FileRecord(path=entry.path, size=0, error=error)

        try:
            digest = fingerprint_fn(entry.path)
        except HashError as e:
            logger.warning(f"Could not hash {entry.path}: {e.reason}")
            return FileRecord(path=entry.path, size=size, error=e)
        except OSError as e:
            logger.warning(f"Could not hash {entry.path}: {e}")
            return FileRecord(path=entry.path, size=size, error=HashError(entry.path, str(e)))
        except Exception as e:
            logger.warning(f"Fingerprinting failed for {entry.path}: {e!r}")
            return FileRecord(path=entry.path, size=size, error=HashError(entry.path, str(e) or type(e).__name__))

        return FileRecord(path=entry.path, size=size, digest=digest)
