"""
Core duplicate detection engine — scanner, filter, hasher, dispatcher and grouper.

This package holds the performance-critical pipeline of dupehash:
- FileScannerImpl: recursive traversal producing DirectoryEntry objects
- is_eligible / EligibilityFilterImpl: size, extension and name-pattern filter
- fingerprint / HasherImpl: streamed BLAKE3, xxHash64 or SHA-256 digests
- ParallelDispatcher: thread-pool fan-out with per-file failure isolation
- DigestGrouperImpl: digest grouping and optional byte-exact verification

No CLI or rendering dependencies — suitable for library use.
"""

from .models import (
    DirectoryEntry, EligibilityCriteria, HashAlgorithm, HashError, HashErrorKind,
    FileRecord, DuplicateGroup, ScanParams, ScanResult, ScanStats, Stage)
from .filter import is_eligible, EligibilityFilterImpl
from .hasher import fingerprint, HasherImpl, CHUNK_SIZE
from .dispatcher import ParallelDispatcher, default_workers
from .grouper import DigestGrouperImpl, group_by_digest, partition_records, verify_groups
from .scanner import FileScannerImpl

__all__ = [
    "DirectoryEntry",
    "EligibilityCriteria",
    "HashAlgorithm",
    "HashError",
    "HashErrorKind",
    "FileRecord",
    "DuplicateGroup",
    "ScanParams",
    "ScanResult",
    "ScanStats",
    "Stage",
    "is_eligible",
    "EligibilityFilterImpl",
    "fingerprint",
    "HasherImpl",
    "CHUNK_SIZE",
    "ParallelDispatcher",
    "default_workers",
    "DigestGrouperImpl",
    "group_by_digest",
    "partition_records",
    "verify_groups",
    "FileScannerImpl",
]
