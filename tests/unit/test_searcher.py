"""
Unit tests for search orchestration.

Tests line splitting, content and filename searchers, and complete search
runs through SearchService with the formatter writing to a buffer.
"""

import io
import logging
import os
import tempfile
import shutil
from pathlib import Path
import pytest

from fsearch.models.config import SearchConfig, OutputMode, SearchMode
from fsearch.models.entry import Entry
from fsearch.tools.formatter import ResultFormatter, create_console
from fsearch.tools.matcher import PatternMatcher
from fsearch.tools.searcher import (
    ContentSearcher,
    FilenameSearcher,
    SearchService,
    run_search,
    split_lines
)


class TestSplitLines:
    """Test cases for split_lines."""

    def test_unix_lines(self):
        assert split_lines("a\nb\nc") == ["a", "b", "c"]

    def test_trailing_newline(self):
        """Test that a final terminator does not add an empty line."""
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_windows_lines(self):
        """Test that CRLF terminators are removed."""
        assert split_lines("a\r\nb\r\n") == ["a", "b"]

    def test_blank_lines_kept(self):
        assert split_lines("a\n\nb") == ["a", "", "b"]

    def test_empty_content(self):
        assert split_lines("") == []

    def test_lone_carriage_return_kept(self):
        """Test that a carriage return inside a line is content."""
        assert split_lines("a\rb\n") == ["a\rb"]


class TestContentSearcher:
    """Test cases for the ContentSearcher class."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir).resolve()

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_matching_lines(self):
        """Test that every matching line is recorded in order."""
        path = self.test_root / "code.txt"
        path.write_text("foo one\nbar\nfoo two\n", encoding="utf-8")

        result = ContentSearcher(PatternMatcher(["foo"])).process(path)

        assert result.path == str(path)
        assert [m.line_index for m in result.lines] == [0, 2]
        assert result.lines[1].line == "foo two"

    def test_no_matches(self):
        """Test a readable file without matches."""
        path = self.test_root / "code.txt"
        path.write_text("nothing here\n", encoding="utf-8")

        result = ContentSearcher(PatternMatcher(["foo"])).process(path)

        assert result is not None
        assert not result.has_matches()

    def test_crlf_file(self):
        """Test that line content excludes CRLF terminators."""
        path = self.test_root / "dos.txt"
        path.write_bytes(b"alpha\r\nbeta foo\r\n")

        result = ContentSearcher(PatternMatcher(["foo"])).process(path)

        assert result.lines[0].line == "beta foo"
        assert result.lines[0].line_number == 2

    def test_undecodable_file_skipped(self):
        """Test that a file that is not valid UTF-8 is skipped."""
        path = self.test_root / "blob.bin"
        path.write_bytes(b"\xff\xfe\x00foo\x80")

        assert ContentSearcher(PatternMatcher(["foo"])).process(path) is None

    def test_missing_file_skipped(self):
        """Test that an unreadable file is skipped."""
        path = self.test_root / "missing.txt"
        assert ContentSearcher(PatternMatcher(["foo"])).process(path) is None

    def test_directory_skipped(self):
        """Test that reading a directory is treated as unreadable."""
        assert ContentSearcher(PatternMatcher(["foo"])).process(self.test_root) is None


class TestFilenameSearcher:
    """Test cases for the FilenameSearcher class."""

    def test_path_matches(self):
        searcher = FilenameSearcher(PatternMatcher(["report"]))
        entry = Entry(path="r.txt", canonical_path="/data/report/r.txt", depth=1)
        assert searcher.process(entry)

    def test_path_does_not_match(self):
        searcher = FilenameSearcher(PatternMatcher(["report"]))
        entry = Entry(path="r.txt", canonical_path="/data/r.txt", depth=1)
        assert not searcher.process(entry)

    def test_regex_path_match(self):
        searcher = FilenameSearcher(PatternMatcher([r"\.py$"], use_regex=True))

        assert searcher.process(Entry(path="a.py", canonical_path="/src/a.py"))
        assert not searcher.process(Entry(path="a.pyc", canonical_path="/src/a.pyc"))

    def test_entry_without_canonical_path(self):
        searcher = FilenameSearcher(PatternMatcher([""]))
        assert not searcher.process(Entry(path="broken", is_symlink=True))


class TestSearchService:
    """Test cases for complete search runs."""

    def setup_method(self):
        """Create the tree a/x.txt, a/y.txt, a/sub/z.txt, secret/data.txt."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir).resolve()

        files = {
            "a/x.txt": "foo bar\n",
            "a/y.txt": "baz\n",
            "a/sub/z.txt": "foo in sub\nno match\nfoo again\n",
            "secret/data.txt": "foo secret\n",
            "top.txt": "top foo\n",
        }
        for name, content in files.items():
            path = self.test_root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _run(self, **options):
        options.setdefault('roots', [str(self.test_root)])
        config = SearchConfig(**options)
        buffer = io.StringIO()
        formatter = ResultFormatter(config.output_mode, create_console(file=buffer, color_system=None))
        summary = SearchService(config, formatter).run()
        return buffer.getvalue().splitlines(), summary

    def _path(self, name):
        return str(self.test_root / name)

    def test_scenario_single_match(self):
        """Test the a/x.txt scenario: one line, 'foo' at offset 0."""
        root = self.test_root / "a"
        shutil.rmtree(root / "sub")
        lines, summary = self._run(roots=[str(root)], patterns=["foo"], recursive=True)

        assert lines == [f"{self._path('a/x.txt')}:foo bar"]
        assert summary.files_matched == 1
        assert summary.lines_matched == 1

    def test_recursion_gating(self):
        """Test that nested files are only found when recursive."""
        nested = self._path("a/sub/z.txt")

        lines, _ = self._run(patterns=["foo"])
        assert lines == [f"{self._path('top.txt')}:top foo"]
        assert not any(nested in line for line in lines)

        lines, _ = self._run(patterns=["foo"], recursive=True)
        assert any(line.startswith(nested + ":") for line in lines)

    def test_exclusion_in_every_mode(self):
        """Test that excluded files never appear, whatever the output mode."""
        for mode in OutputMode:
            lines, _ = self._run(patterns=["foo"], recursive=True, exclude=["secret"], output_mode=mode)
            assert not any("secret" in line for line in lines), mode

    def test_paths_with_match_emits_path_once(self):
        """Test that a file with two matching lines is listed once."""
        lines, _ = self._run(
            roots=[self._path("a/sub")],
            patterns=["foo"],
            output_mode=OutputMode.PATHS_WITH_MATCH
        )
        assert lines == [self._path("a/sub/z.txt")]

    def test_default_and_line_number_modes_emit_each_line(self):
        """Test that a file with two matching lines produces two lines."""
        root = self._path("a/sub")

        lines, _ = self._run(roots=[root], patterns=["foo"])
        assert lines == [
            f"{self._path('a/sub/z.txt')}:foo in sub",
            f"{self._path('a/sub/z.txt')}:foo again",
        ]

        lines, _ = self._run(roots=[root], patterns=["foo"], output_mode=OutputMode.LINE_NUMBERS)
        assert lines == [
            f"{self._path('a/sub/z.txt')}:1:foo in sub",
            f"{self._path('a/sub/z.txt')}:3:foo again",
        ]

    def test_paths_without_match(self):
        """Test listing files that do not match."""
        lines, _ = self._run(
            patterns=["foo"],
            recursive=True,
            output_mode=OutputMode.PATHS_WITHOUT_MATCH
        )
        assert lines == [self._path("a/y.txt")]

    def test_repeated_runs_identical(self):
        """Test that two runs over an unchanged tree print the same output."""
        first, _ = self._run(patterns=["foo", "baz"], recursive=True, output_mode=OutputMode.LINE_NUMBERS)
        second, _ = self._run(patterns=["foo", "baz"], recursive=True, output_mode=OutputMode.LINE_NUMBERS)

        assert first == second
        assert len(first) == 6

    def test_regex_failure_isolation(self, caplog):
        """Test that an invalid regex is skipped and the next one still matches."""
        (self.test_root / "cab.txt").write_text("cab\n", encoding="utf-8")

        lines, _ = self._run(
            roots=[self._path("cab.txt")],
            regex_patterns=["(", "a.*"],
            use_regex=True
        )

        assert lines == [f"{self._path('cab.txt')}:cab"]
        assert "Failed to compile regex: (" in caplog.text

    def test_compiled_regex_count_logged(self, caplog):
        """Test that the number of usable expressions is reported at debug level."""
        caplog.set_level(logging.DEBUG, logger="fsearch")

        self._run(roots=[self._path("top.txt")], regex_patterns=["(", "top"], use_regex=True)

        assert "Compiled 1 of 2 regular expressions" in caplog.text

    def test_literal_patterns_ignored_in_regex_mode(self):
        """Test that regex mode does not use literal patterns."""
        lines, _ = self._run(
            roots=[self._path("a")],
            patterns=["baz"],
            regex_patterns=["^foo"],
            use_regex=True
        )
        assert lines == [f"{self._path('a/x.txt')}:foo bar"]

    def test_undecodable_files_are_silent(self):
        """Test that binary files produce no output and no error."""
        (self.test_root / "blob.bin").write_bytes(b"\xff\xfefoo\x80")

        lines, summary = self._run(patterns=["foo"], output_mode=OutputMode.PATHS_WITHOUT_MATCH)

        assert lines == []
        assert summary.files_searched == 1

    def test_no_matches(self):
        """Test a run that finds nothing."""
        lines, summary = self._run(patterns=["absent"], recursive=True)

        assert lines == []
        assert not summary.has_matches()
        assert summary.files_searched == 5
        assert summary.walk_stats['entries_visited'] > 0

    def test_filename_search(self):
        """Test matching canonical paths of every admitted entry."""
        lines, summary = self._run(patterns=["sub"], recursive=True, search_mode=SearchMode.FILENAME)

        assert lines == [self._path("a/sub"), self._path("a/sub/z.txt")]
        assert summary.files_matched == 2

    def test_filename_search_emits_once_per_entry(self):
        """Test that an entry matching several patterns is printed once."""
        lines, _ = self._run(
            patterns=["x", ".txt", "a"],
            roots=[self._path("a/x.txt")],
            search_mode=SearchMode.FILENAME
        )
        assert lines == [self._path("a/x.txt")]

    def test_filename_search_non_recursive_includes_root(self):
        """Test that the root itself is tested in filename search."""
        lines, _ = self._run(
            patterns=[self.test_root.name],
            search_mode=SearchMode.FILENAME
        )
        assert lines == [str(self.test_root), self._path("top.txt")]

    def test_run_search_default_formatter(self, capsys):
        """Test the convenience function writing to standard output."""
        config = SearchConfig(roots=[self._path("top.txt")], patterns=["top"])
        summary = run_search(config)

        assert capsys.readouterr().out == f"{self._path('top.txt')}:top foo\n"
        assert summary.entries_emitted == 1
