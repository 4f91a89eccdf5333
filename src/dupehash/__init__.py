"""
dupehash — content-hash duplicate file finder.

Core features:
- Size / extension / name-pattern eligibility filter
- Streamed BLAKE3, SHA-256 or xxHash64 fingerprints computed on a thread pool
- Per-file failures reported separately instead of aborting the run
- Optional byte-by-byte confirmation of duplicate groups
- Text, JSON and HTML reports; quarantine or trash relocation of extra copies
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupehash")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API
from dupehash.commands import DuplicateScanCommand
from dupehash.core import (
    DirectoryEntry, EligibilityCriteria, HashAlgorithm, HashError, FileRecord,
    DuplicateGroup, ScanParams, ScanResult, is_eligible, fingerprint,
    ParallelDispatcher, group_by_digest)
from dupehash.utils.convert_utils import ConvertUtils
from dupehash.services import DuplicateService, FileService, ReportService

__all__ = [
    "DuplicateScanCommand",
    "DirectoryEntry",
    "EligibilityCriteria",
    "HashAlgorithm",
    "HashError",
    "FileRecord",
    "DuplicateGroup",
    "ScanParams",
    "ScanResult",
    "is_eligible",
    "fingerprint",
    "ParallelDispatcher",
    "group_by_digest",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "ReportService",
    "__version__",
]
