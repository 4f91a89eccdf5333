"""
Tests for CLI argument parsing and validation.
"""
import re
import sys
from unittest import mock
import pytest
from dupehash.cli import CLIApplication
from dupehash.core.models import HashAlgorithm


class TestArgumentParsing:
    """Test CLI argument parsing with argparse."""

    def test_input_flag_variants(self):
        """Both long (--input) and short (-i) forms are accepted."""
        app = CLIApplication()

        with mock.patch.object(sys, 'argv', ['dupehash', '--input', '/tmp/test']):
            args = app.parse_args()
        assert args.input == "/tmp/test"

        with mock.patch.object(sys, 'argv', ['dupehash', '-i', '/tmp/test']):
            args = app.parse_args()
        assert args.input == "/tmp/test"

    def test_input_is_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication.parse_args([])
        assert exc_info.value.code == 2
        assert "--input" in capsys.readouterr().err

    def test_defaults(self):
        args = CLIApplication.parse_args(['-i', '/tmp'])
        assert args.min_size == "1"
        assert args.max_size == "inf"
        assert args.extensions == []
        assert args.pattern == ".*"
        assert args.excluded_dirs == []
        assert args.algorithm == "blake3"
        assert args.seed == 0
        assert args.workers is None
        assert args.verify is False
        assert args.format == "text"
        assert args.output is None
        assert args.quarantine is None
        assert args.trash is False
        assert args.force is False

    def test_extensions_space_separated(self):
        args = CLIApplication.parse_args(['-i', '/tmp', '-x', 'jpg', '.png', 'gif'])
        assert args.extensions == ["jpg", ".png", "gif"]

    def test_size_and_pattern_flags(self):
        args = CLIApplication.parse_args(['-i', '/tmp', '-m', '500KB', '-M', '10MB', '-p', '^IMG'])
        assert (args.min_size, args.max_size, args.pattern) == ("500KB", "10MB", "^IMG")

    @pytest.mark.parametrize("alias, expected", [
        ("blake3", HashAlgorithm.BLAKE3),
        ("sha256", HashAlgorithm.SHA256),
        ("sha-256", HashAlgorithm.SHA256),
        ("xxhash", HashAlgorithm.XXHASH64),
        ("xxh64", HashAlgorithm.XXHASH64),
    ])
    def test_algorithm_aliases(self, tmp_path, alias, expected):
        app = CLIApplication()
        args = app.parse_args(['-i', str(tmp_path), '-a', alias])
        assert app.create_params(args).algorithm is expected

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(['-i', '/tmp', '-a', 'md5'])

    def test_quarantine_and_trash_are_exclusive(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args(['-i', '/tmp', '--quarantine', '/q', '--trash'])


class TestCreateParams:

    def test_builds_criteria(self, tmp_path):
        app = CLIApplication()
        args = app.parse_args([
            '-i', str(tmp_path), '-m', '1K', '-M', '2K', '-x', '.jpg', 'png', '-p', 'IMG',
            '-w', '3', '--seed', '9', '--verify',
        ])
        params = app.create_params(args)

        assert params.root_dir == str(tmp_path.resolve())
        assert params.criteria.min_size == 1024
        assert params.criteria.max_size == 2048
        assert params.criteria.allowed_extensions == frozenset({"jpg", "png"})
        assert params.criteria.name_pattern == re.compile("IMG")
        assert params.workers == 3
        assert params.xxhash_seed == 9
        assert params.verify is True

    def test_no_extensions_means_any(self, tmp_path):
        app = CLIApplication()
        params = app.create_params(app.parse_args(['-i', str(tmp_path)]))
        assert params.criteria.allowed_extensions is None
        assert params.criteria.min_size == 1

    def test_excluded_dirs_are_resolved(self, tmp_path):
        app = CLIApplication()
        excluded = tmp_path / "cache"
        excluded.mkdir()
        params = app.create_params(app.parse_args(['-i', str(tmp_path), '-e', str(excluded)]))
        assert params.excluded_dirs == [str(excluded.resolve())]


class TestValidateArgs:
    """Invalid input exits with code 1 and a readable message."""

    def _assert_rejected(self, argv, message, capsys):
        app = CLIApplication()
        args = app.parse_args(argv)
        with pytest.raises(SystemExit) as exc_info:
            app.validate_args(args)
        assert exc_info.value.code == 1
        assert message in capsys.readouterr().err

    def test_missing_directory(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path / "nope")], "Directory not found", capsys)

    def test_input_is_a_file(self, tmp_path, capsys):
        path = tmp_path / "file.txt"
        path.write_text("x")
        self._assert_rejected(['-i', str(path)], "Path is not a directory", capsys)

    def test_bad_size(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '-m', 'lots'], "Invalid size format", capsys)

    def test_max_below_min(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '-m', '2K', '-M', '1K'],
                              "Maximum size cannot be less than minimum size", capsys)

    def test_bad_pattern(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '-p', '(oops'], "Invalid name pattern", capsys)

    def test_zero_workers(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '-w', '0'], "Worker count must be at least 1", capsys)

    def test_negative_seed(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '--seed', '-1'], "Seed cannot be negative", capsys)

    def test_force_without_action(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '--force'], "--force can only be used with", capsys)

    def test_relocation_without_force_in_non_interactive_session(self, tmp_path, capsys):
        with mock.patch.object(sys.stdin, 'isatty', return_value=False):
            self._assert_rejected(['-i', str(tmp_path), '--trash'], "non-interactive session", capsys)

    def test_missing_quarantine_dir(self, tmp_path, capsys):
        self._assert_rejected(['-i', str(tmp_path), '--quarantine', str(tmp_path / "q"), '--force'],
                              "Quarantine directory not found", capsys)

    def test_missing_excluded_dir_only_warns(self, tmp_path, capsys):
        app = CLIApplication()
        args = app.parse_args(['-i', str(tmp_path), '-e', str(tmp_path / "ghost")])
        app.validate_args(args)
        assert "Excluded directory not found" in capsys.readouterr().err
