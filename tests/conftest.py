"""
Shared fixtures for duplicate detection tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'dupehash' is importable without installation
project_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(project_src))

from dupehash.core.models import DirectoryEntry, FileRecord, HashError


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - 2 identical .txt files (duplicates) + 1 copy in a subdirectory
    - 2 identical .txt files of a different size (second duplicate group)
    - 2 unique .txt files
    - 1 empty .txt file
    - 1 .tmp file with the same content as the first group
    - 1 upper-case .TXT file with the same content as the first group
    """
    files = {}

    # Duplicate group #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate group #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Other extensions with group #1 content
    files["filtered"] = temp_dir / "ignore.tmp"
    files["filtered"].write_bytes(content_a)
    files["upper"] = temp_dir / "SHOUT.TXT"
    files["upper"].write_bytes(content_a)

    # Subdirectory with a third copy of group #1
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


def make_entries(*paths) -> list:
    """DirectoryEntry objects for the given paths."""
    return [DirectoryEntry(p) for p in paths]


def ok_record(path: str, digest: bytes, size: int = 10) -> FileRecord:
    return FileRecord(path=path, size=size, digest=digest)


def failed_record(path: str, reason: str = "Permission denied", size: int = 10) -> FileRecord:
    return FileRecord(path=path, size=size, error=HashError(path, reason))
