"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for content-based duplicate detection: directory entries, eligibility
criteria, hash algorithms, per-file records and duplicate groups.
"""

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Union, Callable, FrozenSet, Iterable, Any


# =============================
# Enums
# =============================

class HashAlgorithm(Enum):
    """
    Hash algorithm used to fingerprint file content.
    Selected once per run.
    """
    BLAKE3 = "blake3"
    XXHASH64 = "xxhash64"
    SHA256 = "sha256"

    @property
    def digest_size(self) -> int:
        """Digest length in bytes."""
        mapping = {
            HashAlgorithm.BLAKE3: 32,
            HashAlgorithm.XXHASH64: 8,
            HashAlgorithm.SHA256: 32,
        }
        return mapping[self]

    @property
    def is_cryptographic(self) -> bool:
        return self is not HashAlgorithm.XXHASH64

    @property
    def display_name(self) -> str:
        """Human-readable name for reports."""
        mapping = {
            HashAlgorithm.BLAKE3: "BLAKE3",
            HashAlgorithm.XXHASH64: "xxHash64",
            HashAlgorithm.SHA256: "SHA-256",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class HashErrorKind(Enum):
    IO = "io"
    METADATA = "metadata"


class Stage(str, Enum):
    SCAN = "Scanning"
    FILTER = "Filtering"
    HASH = "Hashing"
    GROUP = "Grouping"
    VERIFY = "Verifying"


# =============================
# Errors
# =============================

class HashError(Exception):
    """
    Raised when a file's content digest cannot be computed.
    The dispatcher stores it on the FileRecord instead of propagating it.
    """

    def __init__(self, path: str, reason: str, kind: HashErrorKind = HashErrorKind.IO):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
        self.kind = kind

    def __eq__(self, other):
        if not isinstance(other, HashError):
            return NotImplemented
        return (self.path, self.reason, self.kind) == (other.path, other.reason, other.kind)

    def __hash__(self):
        return hash((self.path, self.reason, self.kind))

    def __repr__(self):
        return f"<HashError kind={self.kind.value} path={self.path} reason={self.reason!r}>"


# ======================
#  Core Data Models
# ======================

class DirectoryEntry:
    """
    Handle to one filesystem path produced by traversal.
    Metadata is read lazily and cached after the first successful stat().
    """

    __slots__ = ("path", "name", "_stat")

    def __init__(self, path: Union[str, os.PathLike], stat_result: Optional[os.stat_result] = None):
        self.path = os.fspath(path)
        self.name = os.path.basename(self.path)
        self._stat = stat_result

    @property
    def extension(self) -> str:
        """Substring after the last dot of the name; '' if none ('.bashrc' has none)."""
        _, ext = os.path.splitext(self.name)
        return ext[1:]

    def stat(self) -> os.stat_result:
        """Return cached metadata. Raises OSError if it cannot be read."""
        if self._stat is None:
            self._stat = os.stat(self.path)
        return self._stat

    def __eq__(self, other):
        if not isinstance(other, DirectoryEntry):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"<DirectoryEntry path={self.path}>"


@dataclass(frozen=True)
class EligibilityCriteria:
    """
    Immutable filter configuration shared read-only by all filter evaluations.
    allowed_extensions=None disables the extension check; an empty set admits nothing.
    """
    min_size: int = 0
    max_size: int = 2 ** 63 - 1
    allowed_extensions: Optional[FrozenSet[str]] = None
    name_pattern: Any = ".*"

    def __post_init__(self):
        if self.min_size < 0:
            raise ValueError("Minimum size cannot be negative")
        if self.max_size < self.min_size:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.allowed_extensions is not None:
            extensions = frozenset(self.allowed_extensions)
            for ext in extensions:
                if ext.startswith("."):
                    raise ValueError(f"Extension must not start with a dot: '{ext}'")
            object.__setattr__(self, "allowed_extensions", extensions)

        if isinstance(self.name_pattern, str):
            try:
                object.__setattr__(self, "name_pattern", re.compile(self.name_pattern))
            except re.error as e:
                raise ValueError(f"Invalid name pattern '{self.name_pattern}': {e}") from e


@dataclass(frozen=True)
class FileRecord:
    """
    Outcome of fingerprinting one entry.
    Exactly one of digest/error is set.
    """
    path: str
    size: int  # in bytes
    digest: Optional[bytes] = None
    error: Optional[HashError] = None

    def __post_init__(self):
        if (self.digest is None) == (self.error is None):
            raise ValueError("FileRecord needs exactly one of digest or error")
        if self.digest is not None and not isinstance(self.digest, bytes):
            raise ValueError("Digest must be bytes")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "size": self.size}
        if self.digest is not None:
            data["digest"] = self.digest.hex()
        else:
            data["error"] = self.error.reason
        return data

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}, ok={self.ok}>"


@dataclass
class DuplicateGroup:
    """
    Two or more files sharing a byte-identical digest.
    """
    digest: bytes
    files: List[FileRecord]

    def __post_init__(self):
        if len(self.files) < 2:
            raise ValueError("A duplicate group needs at least two files")
        for file in self.files:
            if file.digest != self.digest:
                raise ValueError(f"Digest mismatch for {file.path}")

    @property
    def size(self) -> int:
        return self.files[0].size

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def wasted_bytes(self) -> int:
        """Space taken by every copy beyond the first."""
        return sum(f.size for f in self.files[1:])

    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "digest": self.digest.hex(),
            "size": self.size,
            "members": [{"path": f.path, "size": f.size} for f in self.files],
        }

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


class ScanStats:
    """
    Statistics collected during a scan.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(self, stage_name: str, files_processed: int, duration: float) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {"files": 0, "time": 0.0}
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: FILES / TIME",
        ]
        for stage, data in self.stage_stats.items():
            lines.append(f"{stage}: {data['files']} / {data['time']:.3f}s")
        return "\n".join(lines)


@dataclass
class ScanResult:
    """Everything a single run produces for downstream consumers."""
    algorithm: HashAlgorithm
    groups: List[DuplicateGroup] = field(default_factory=list)
    failures: List[FileRecord] = field(default_factory=list)
    unique_count: int = 0
    scanned_count: int = 0
    eligible_count: int = 0
    stats: ScanStats = field(default_factory=ScanStats)

    @property
    def duplicate_file_count(self) -> int:
        return sum(len(g.files) for g in self.groups)

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)


"""
DTO for scan parameters with built-in validation.
Interface-agnostic: used by the CLI and by library callers.
"""
from dupehash.utils.convert_utils import ConvertUtils


def normalize_extensions(extensions: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    if extensions is None:
        return None
    normalized = set()
    for ext in extensions:
        ext = ext.strip()
        if ext.startswith("."):
            ext = ext[1:]
        if ext:
            normalized.add(ext)
    return frozenset(normalized)


@dataclass
class ScanParams:
    """Parameters for one duplicate scan, validated on creation."""
    root_dir: str
    criteria: EligibilityCriteria = field(default_factory=EligibilityCriteria)
    algorithm: HashAlgorithm = HashAlgorithm.BLAKE3
    workers: Optional[int] = None
    excluded_dirs: List[str] = field(default_factory=list)
    verify: bool = False
    xxhash_seed: int = 0

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.workers is not None and self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        if self.xxhash_seed < 0:
            raise ValueError("Seed cannot be negative")

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "1",
            max_size_str: str = "",
            extensions_str: str = "",
            name_pattern: str = ".*",
            algorithm: HashAlgorithm = HashAlgorithm.BLAKE3,
            workers: Optional[int] = None,
            excluded_dirs: Optional[List[str]] = None,
            verify: bool = False,
            xxhash_seed: int = 0,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        An empty/"inf" max size means no upper bound; empty extensions mean no extension filter.
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str)
        max_size = ConvertUtils.size_limit_to_bytes(max_size_str)
        if max_size is None:
            max_size = EligibilityCriteria.max_size

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else None

        criteria = EligibilityCriteria(
            min_size=min_size,
            max_size=max_size,
            allowed_extensions=normalize_extensions(ext_list),
            name_pattern=name_pattern,
        )
        return ScanParams(
            root_dir=root_dir,
            criteria=criteria,
            algorithm=algorithm,
            workers=workers,
            excluded_dirs=excluded_dirs or [],
            verify=verify,
            xxhash_seed=xxhash_seed,
        )
