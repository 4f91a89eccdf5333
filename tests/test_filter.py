"""
Unit tests for the eligibility filter.
Covers size boundaries, case-sensitive extensions, unanchored name search
and silent exclusion of entries whose metadata cannot be read.
"""
import os
import re
import sys
import pytest
from dupehash.core.filter import is_eligible, EligibilityFilterImpl
from dupehash.core.models import DirectoryEntry, EligibilityCriteria


def _file(tmp_path, name: str, size: int) -> DirectoryEntry:
    path = tmp_path / name
    path.write_bytes(b"x" * size)
    return DirectoryEntry(path)


class TestSizeBounds:

    def test_min_size_boundary(self, tmp_path):
        """Exactly min_size is eligible, one byte less is not."""
        criteria = EligibilityCriteria(min_size=10, max_size=100)
        assert is_eligible(_file(tmp_path, "exact.txt", 10), criteria)
        assert not is_eligible(_file(tmp_path, "small.txt", 9), criteria)

    def test_max_size_boundary(self, tmp_path):
        """Exactly max_size is eligible, one byte more is not."""
        criteria = EligibilityCriteria(min_size=10, max_size=100)
        assert is_eligible(_file(tmp_path, "exact.txt", 100), criteria)
        assert not is_eligible(_file(tmp_path, "big.txt", 101), criteria)

    def test_zero_byte_file_with_zero_min_size(self, tmp_path):
        assert is_eligible(_file(tmp_path, "empty.txt", 0), EligibilityCriteria(min_size=0))
        assert not is_eligible(_file(tmp_path, "empty2.txt", 0), EligibilityCriteria(min_size=1))


class TestExtensions:

    def test_extension_match_is_case_sensitive(self, tmp_path):
        """a.TXT is not eligible when only 'txt' is allowed."""
        criteria = EligibilityCriteria(allowed_extensions={"txt"})
        assert not is_eligible(_file(tmp_path, "a.TXT", 5), criteria)
        assert is_eligible(_file(tmp_path, "b.txt", 5), criteria)

    def test_only_last_extension_counts(self, tmp_path):
        criteria = EligibilityCriteria(allowed_extensions={"gz"})
        assert is_eligible(_file(tmp_path, "backup.tar.gz", 5), criteria)
        assert not is_eligible(_file(tmp_path, "backup.gz.tar", 5), criteria)

    def test_file_without_extension(self, tmp_path):
        entry = _file(tmp_path, "Makefile", 5)
        assert not is_eligible(entry, EligibilityCriteria(allowed_extensions={"txt"}))
        assert is_eligible(entry, EligibilityCriteria(allowed_extensions={""}))

    def test_no_extension_restriction(self, tmp_path):
        criteria = EligibilityCriteria(allowed_extensions=None)
        assert is_eligible(_file(tmp_path, "anything.bin", 5), criteria)
        assert is_eligible(_file(tmp_path, "noext", 5), criteria)

    def test_empty_allow_list_admits_nothing(self, tmp_path):
        criteria = EligibilityCriteria(allowed_extensions=frozenset())
        assert not is_eligible(_file(tmp_path, "a.txt", 5), criteria)


class TestNamePattern:

    def test_pattern_is_searched_not_anchored(self, tmp_path):
        criteria = EligibilityCriteria(name_pattern="IMG")
        assert is_eligible(_file(tmp_path, "holiday_IMG_001.jpg", 5), criteria)
        assert not is_eligible(_file(tmp_path, "holiday.jpg", 5), criteria)

    def test_pattern_applies_to_base_name_only(self, tmp_path):
        subdir = tmp_path / "IMG_folder"
        subdir.mkdir()
        entry = _file(subdir, "photo.jpg", 5)
        assert not is_eligible(entry, EligibilityCriteria(name_pattern="IMG"))

    def test_anchored_pattern(self, tmp_path):
        criteria = EligibilityCriteria(name_pattern=re.compile(r"^report_\d{4}\.pdf$"))
        assert is_eligible(_file(tmp_path, "report_2024.pdf", 5), criteria)
        assert not is_eligible(_file(tmp_path, "old_report_2024.pdf", 5), criteria)


class TestMetadataUnavailable:

    def test_missing_file_is_silently_excluded(self, tmp_path):
        entry = DirectoryEntry(tmp_path / "gone.txt")
        assert is_eligible(entry, EligibilityCriteria(min_size=0)) is False

    @pytest.mark.skipif(sys.platform == "win32", reason="Symlinks need privileges on Windows")
    def test_broken_symlink_is_excluded(self, tmp_path):
        link = tmp_path / "dangling.txt"
        os.symlink(tmp_path / "nowhere.txt", link)
        assert is_eligible(DirectoryEntry(link), EligibilityCriteria(min_size=0)) is False

    def test_deleted_after_traversal(self, tmp_path):
        path = tmp_path / "race.txt"
        path.write_bytes(b"data")
        entry = DirectoryEntry(path)
        path.unlink()
        assert not is_eligible(entry, EligibilityCriteria())


class TestDeterminism:

    def test_filter_is_idempotent(self, tmp_path):
        criteria = EligibilityCriteria(min_size=1, allowed_extensions={"txt"}, name_pattern="a")
        entries = [
            _file(tmp_path, "a.txt", 3),
            _file(tmp_path, "b.txt", 3),
            _file(tmp_path, "a.md", 3),
        ]
        first = [is_eligible(e, criteria) for e in entries]
        second = [is_eligible(e, criteria) for e in entries]
        assert first == second == [True, False, False]


class TestEligibilityFilterImpl:

    def test_filters_sequence(self, test_files):
        root = test_files["dup1_a"].parent
        entries = [DirectoryEntry(p) for p in test_files.values()]
        criteria = EligibilityCriteria(min_size=1, allowed_extensions={"txt"})

        eligible = EligibilityFilterImpl(criteria).filter(entries)
        names = sorted(e.name for e in eligible)

        # empty.txt (0 bytes), ignore.tmp and SHOUT.TXT are excluded
        assert names == sorted([
            "dup1_a.txt", "dup1_b.txt", "dup2_a.txt", "dup2_b.txt",
            "unique1.txt", "unique2.txt", "dup_in_subdir.txt",
        ])
        assert all(os.path.dirname(e.path).startswith(str(root)) for e in eligible)
