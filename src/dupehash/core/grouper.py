"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups fingerprinted files into duplicate sets and, on request, confirms each
set byte by byte.

Two files are duplicates iff their digests are byte-identical. With xxHash64
that leaves a small false-positive chance; verify_groups() removes it.
Output is sorted for stable reports: members by path, groups by size
(largest first) and then by first member path.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Sequence, Tuple

from dupehash.core.interfaces import DigestGrouper
from dupehash.core.hasher import fingerprint
from dupehash.core.models import DuplicateGroup, FileRecord, HashAlgorithm, HashError, HashErrorKind

logger = logging.getLogger(__name__)

VERIFY_CHUNK_SIZE = 64 * 1024


class DigestGrouperImpl(DigestGrouper):
    """
    Partitions FileRecords by successful digest.
    Records carrying an error never join a group; they are returned as failures.
    """

    def group_by_digest(self, records: Sequence[FileRecord]) -> List[DuplicateGroup]:
        groups, _, _ = self.partition(records)
        return groups

    def partition(
        self, records: Sequence[FileRecord]
    ) -> Tuple[List[DuplicateGroup], List[FileRecord], List[FileRecord]]:
        """
        Returns (duplicate groups, unique records, failed records).
        Every input record lands in exactly one of the three.
        """
        failures = [r for r in records if not r.ok]
        classes = self._group_by([r for r in records if r.ok], lambda r: r.digest)

        groups = []
        unique = []
        for digest, members in classes.items():
            if len(members) > 1:
                groups.append(DuplicateGroup(digest=digest, files=sorted(members, key=lambda r: r.path)))
            else:
                unique.extend(members)

        logger.debug(f"{len(groups)} duplicate groups, {len(unique)} unique, {len(failures)} failed")
        return sort_groups(groups), unique, failures

    @staticmethod
    def _group_by(records: Sequence[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group records by any computed key.
        Args:
            records: Records to group
            key_func: Function that computes a hashable key from a FileRecord
        Returns:
            Dict[key, List[FileRecord]] in first-seen order
        """
        groups = defaultdict(list)
        for record in records:
            groups[key_func(record)].append(record)
        return groups


def sort_groups(groups: List[DuplicateGroup]) -> List[DuplicateGroup]:
    return sorted(groups, key=lambda g: (-g.size, g.files[0].path))


def group_by_digest(records: Sequence[FileRecord]) -> List[DuplicateGroup]:
    """Module-level shortcut for DigestGrouperImpl().group_by_digest()."""
    return DigestGrouperImpl().group_by_digest(records)


def partition_records(
    records: Sequence[FileRecord]
) -> Tuple[List[DuplicateGroup], List[FileRecord], List[FileRecord]]:
    """Module-level shortcut for DigestGrouperImpl().partition()."""
    return DigestGrouperImpl().partition(records)


# =============================
# Byte-exact verification
# =============================

def _read_chunk(f, path: str, chunk_size: int) -> bytes:
    try:
        return f.read(chunk_size)
    except OSError as e:
        raise HashError(path, str(e), HashErrorKind.IO) from e


def same_content(path_a: str, path_b: str, chunk_size: int = VERIFY_CHUNK_SIZE) -> bool:
    """
    Compares two files byte by byte.
    Raises HashError naming the file that could not be read.
    """
    try:
        fa = open(path_a, 'rb')
    except OSError as e:
        raise HashError(path_a, str(e), HashErrorKind.IO) from e
    with fa:
        try:
            fb = open(path_b, 'rb')
        except OSError as e:
            raise HashError(path_b, str(e), HashErrorKind.IO) from e
        with fb:
            while True:
                chunk_a = _read_chunk(fa, path_a, chunk_size)
                chunk_b = _read_chunk(fb, path_b, chunk_size)
                if chunk_a != chunk_b:
                    return False
                if not chunk_a:
                    return True


def _as_failure(record: FileRecord, error: HashError) -> FileRecord:
    return FileRecord(path=record.path, size=record.size, error=error)


def _rekey_class(cls: List[FileRecord], failures: List[FileRecord]) -> List[FileRecord]:
    """
    Gives a byte-identical class split off a shared digest its own SHA-256
    content digest. Members are known to be identical, so one readable
    representative is enough; unreadable representatives become failures.
    """
    while cls:
        try:
            content_digest = fingerprint(cls[0].path, HashAlgorithm.SHA256)
        except HashError as e:
            failures.append(_as_failure(cls.pop(0), e))
            continue
        return [FileRecord(path=r.path, size=r.size, digest=content_digest) for r in cls]
    return []


def _split_group(group: DuplicateGroup, chunk_size: int) -> Tuple[List[List[FileRecord]], List[FileRecord]]:
    """
    Splits one digest group into classes of byte-identical files.
    Each member is compared against the first member of every existing class.
    """
    classes: List[List[FileRecord]] = []
    failures: List[FileRecord] = []

    for record in group.files:
        placed = False
        i = 0
        while i < len(classes):
            cls = classes[i]
            try:
                same = same_content(cls[0].path, record.path, chunk_size)
            except HashError as e:
                if e.path == record.path:
                    failures.append(_as_failure(record, e))
                    placed = True
                    break
                # The class representative went away; retry with the next one
                failures.append(_as_failure(cls.pop(0), e))
                if not cls:
                    classes.pop(i)
                continue
            if same:
                cls.append(record)
                placed = True
                break
            i += 1
        if not placed:
            classes.append([record])

    return classes, failures


def verify_groups(
    groups: Sequence[DuplicateGroup], chunk_size: int = VERIFY_CHUNK_SIZE
) -> Tuple[List[DuplicateGroup], List[FileRecord], List[FileRecord]]:
    """
    Confirms digest groups byte by byte.

    When a collision leaves more than one class of two or more files, each such
    class is re-keyed by the SHA-256 of its content so digests stay distinct
    across the returned groups.

    Returns:
        (confirmed groups, records that turned out unique, records that could not be read)
    """
    confirmed = []
    unique = []
    failures = []

    for group in groups:
        classes, failed = _split_group(group, chunk_size)
        failures.extend(failed)
        unique.extend(r for cls in classes if len(cls) == 1 for r in cls)
        survivors = [cls for cls in classes if len(cls) > 1]
        if len(classes) > 1:
            logger.warning(f"Digest collision split group {group.digest.hex()} into {len(classes)} classes")

        if len(survivors) == 1:
            confirmed.append(DuplicateGroup(digest=group.digest, files=survivors[0]))
            continue
        for cls in survivors:
            members = _rekey_class(cls, failures)
            if len(members) > 1:
                confirmed.append(DuplicateGroup(digest=members[0].digest, files=members))
            else:
                unique.extend(members)

    return sort_groups(confirmed), unique, failures
