"""
Search orchestration for fsearch.

This module connects the walker, the pattern matcher and the result
formatter. Content search reads each regular file as text and matches it
line by line; filename search matches the canonical path of every admitted
entry. Output for one file is complete before the next file is read.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..models.config import SearchConfig, SearchMode
from ..models.entry import Entry
from ..models.search_results import FileResult, SearchSummary
from .fs_walker import FSWalker
from .formatter import ResultFormatter
from .matcher import PatternMatcher


logger = logging.getLogger(__name__)


def split_lines(content: str) -> List[str]:
    """
    Split text into lines without their terminators.

    Lines end at ``\\n``; a ``\\r`` right before it is dropped as well. A
    terminator at the very end of the text does not start an extra line.

    Args:
        content: Decoded file content

    Returns:
        List of lines
    """
    lines = content.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


class ContentSearcher:
    """Matches the lines of a file against the configured patterns."""

    def __init__(self, matcher: PatternMatcher):
        self.matcher = matcher

    def read_text(self, path: Union[str, Path]) -> Optional[str]:
        """
        Read a whole file as UTF-8 text.

        Args:
            path: File to read

        Returns:
            File content, or None if the file cannot be read or decoded
        """
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable file {path}: {e}")
            return None

    def process(self, path: Union[str, Path]) -> Optional[FileResult]:
        """
        Search one file.

        At most one match is recorded per line: the first pattern that
        occurs in the line.

        Args:
            path: Canonical path of the file

        Returns:
            FileResult with the matching lines, or None if the file was skipped
        """
        content = self.read_text(path)
        if content is None:
            return None

        result = FileResult(path=str(path))
        for index, line in enumerate(split_lines(content)):
            line_match = self.matcher.match_line(line, index)
            if line_match is not None:
                result.add_line_match(line_match)

        return result


class FilenameSearcher:
    """Matches canonical paths against the configured patterns."""

    def __init__(self, matcher: PatternMatcher):
        self.matcher = matcher

    def process(self, entry: Entry) -> bool:
        """
        Check whether any pattern occurs in the entry's canonical path.

        Args:
            entry: Entry yielded by the walker

        Returns:
            True if the path matches
        """
        if entry.canonical_path is None:
            return False
        return self.matcher.matches_any(entry.canonical_path)


class SearchService:
    """
    Runs a complete search for one configuration.

    Every run walks the tree from scratch; nothing is kept between runs.
    """

    def __init__(self, config: SearchConfig, formatter: ResultFormatter):
        """
        Initialize the search service.

        Args:
            config: Search configuration
            formatter: Formatter that writes results as they are produced
        """
        self.config = config
        self.formatter = formatter
        self.walker = FSWalker(config)
        self.matcher = PatternMatcher(config.active_patterns(), use_regex=config.use_regex)
        self.content_searcher = ContentSearcher(self.matcher)
        self.filename_searcher = FilenameSearcher(self.matcher)

        if config.use_regex:
            logger.debug(
                f"Compiled {self.matcher.compiled_count} of {len(config.regex_patterns)} regular expressions"
            )

    def run(self) -> SearchSummary:
        """
        Execute the search and write results through the formatter.

        Returns:
            SearchSummary with counters for the run
        """
        logger.debug(f"Starting search: {self.config}")
        self.walker.reset_stats()
        summary = SearchSummary()

        for entry in self.walker.walk_paths():
            if self.config.search_mode == SearchMode.FILENAME:
                self._search_filename(entry, summary)
            else:
                self._search_content(entry, summary)

        summary.walk_stats = self.walker.get_stats()
        logger.debug(f"Search finished: {summary} | Walk: {summary.walk_stats}")
        return summary

    def _search_content(self, entry: Entry, summary: SearchSummary) -> None:
        if not os.path.isfile(entry.canonical_path):
            return

        result = self.content_searcher.process(entry.canonical_path)
        summary.record(result)
        if result is not None:
            summary.entries_emitted += self.formatter.render(result)

    def _search_filename(self, entry: Entry, summary: SearchSummary) -> None:
        summary.files_searched += 1
        if self.filename_searcher.process(entry):
            summary.files_matched += 1
            summary.entries_emitted += self.formatter.render_path(entry.canonical_path)


def run_search(config: SearchConfig, formatter: Optional[ResultFormatter] = None) -> SearchSummary:
    """
    Convenience function to run a search.

    Args:
        config: Search configuration
        formatter: Formatter to write results with, defaults to standard output

    Returns:
        SearchSummary for the run
    """
    if formatter is None:
        formatter = ResultFormatter(config.output_mode)
    return SearchService(config, formatter).run()
