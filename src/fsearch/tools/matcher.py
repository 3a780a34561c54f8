"""
Pattern matching for fsearch.

This module finds the first matching span of a set of literal patterns or
regular expressions inside a subject string. The subject is a line of text
for content search and a canonical path for filename search.

Patterns are tried in declaration order and the first pattern that hits
wins, even when a later pattern occurs earlier in the subject.
"""

import re
import logging
from typing import List, Optional

from ..models.search_results import LineMatch, Span


logger = logging.getLogger(__name__)


class PatternMatcher:
    """
    Finds the first hit of an ordered set of patterns.

    Regular expressions are compiled once, when the matcher is created. An
    expression that fails to compile is reported as a warning and skipped;
    the remaining expressions are still used.
    """

    def __init__(self, patterns: List[str], use_regex: bool = False):
        """
        Initialize the matcher.

        Args:
            patterns: Search terms in declaration order
            use_regex: Treat the search terms as regular expressions
        """
        self.patterns = list(patterns)
        self.use_regex = use_regex
        self._compiled_patterns = self._compile_patterns(self.patterns) if use_regex else []

    def _compile_patterns(self, patterns: List[str]) -> List[re.Pattern]:
        """
        Compile regex patterns, skipping the invalid ones.

        Args:
            patterns: List of regex pattern strings

        Returns:
            List of compiled regex patterns, in declaration order
        """
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                logger.warning(f"Failed to compile regex: {pattern} ({e})")
        return compiled

    @property
    def compiled_count(self) -> int:
        """Number of usable regular expressions."""
        return len(self._compiled_patterns)

    def match(self, text: str) -> Optional[Span]:
        """
        Find the span of the first pattern that occurs in the text.

        Args:
            text: Subject string (a line or a path)

        Returns:
            (start, end) offsets of the hit, or None if no pattern occurs
        """
        if self.use_regex:
            return self._match_regex(text)
        return self._match_literal(text)

    def _match_literal(self, text: str) -> Optional[Span]:
        for pattern in self.patterns:
            start = text.find(pattern)
            if start != -1:
                return (start, start + len(pattern))
        return None

    def _match_regex(self, text: str) -> Optional[Span]:
        for regex in self._compiled_patterns:
            found = regex.search(text)
            if found:
                return found.span()
        return None

    def matches_any(self, text: str) -> bool:
        """Check if any pattern occurs in the text."""
        return self.match(text) is not None

    def match_line(self, line: str, line_index: int) -> Optional[LineMatch]:
        """
        Match a single line and build its LineMatch record.

        Args:
            line: Line text without terminator
            line_index: 0-based index of the line in its file

        Returns:
            LineMatch for the first hit, or None
        """
        span = self.match(line)
        if span is None:
            return None

        start, end = span
        return LineMatch(line=line, line_index=line_index, start=start, end=end)

    def __repr__(self) -> str:
        kind = "regex" if self.use_regex else "literal"
        return f"PatternMatcher({kind}, patterns={self.patterns!r})"
