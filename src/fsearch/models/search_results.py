"""
Search results data models for fsearch.

This module defines the data structures produced while searching: single
line matches with their highlighted span, the per-file aggregate handed to
the formatter, and the summary of a complete run.
"""

from typing import Dict, List, Optional, Any, Tuple
from pathlib import Path
from pydantic import BaseModel, Field, model_validator


# Half-open (start, end) offsets of a match inside its subject string
Span = Tuple[int, int]


class LineMatch(BaseModel):
    """
    One matching occurrence inside a file.

    Attributes:
        line: Full text of the line, without its terminator
        line_index: 0-based index of the line within the file
        start: Offset where the match starts in the line
        end: Offset where the match ends in the line (exclusive)
    """

    line: str = Field(..., description="Full text of the matching line")
    line_index: int = Field(..., ge=0, description="0-based line index within the file")
    start: int = Field(..., ge=0, description="Offset where the match starts")
    end: int = Field(..., ge=0, description="Offset where the match ends (exclusive)")

    @model_validator(mode='after')
    def validate_span(self):
        """Validate that the span lies within the line."""
        if self.end < self.start:
            raise ValueError("Invalid match position")
        if self.end > len(self.line):
            raise ValueError("Match end position exceeds line length")
        return self

    @property
    def line_number(self) -> int:
        """1-based line number for display."""
        return self.line_index + 1

    @property
    def span(self) -> Span:
        return (self.start, self.end)

    def before(self) -> str:
        return self.line[:self.start]

    def matched(self) -> str:
        return self.line[self.start:self.end]

    def after(self) -> str:
        return self.line[self.end:]


class FileResult(BaseModel):
    """
    Aggregated match outcome for one file.

    Lines are kept in insertion order, which is line order. A result is
    created, populated and formatted while its file is processed and is
    never carried over to the next file.

    Attributes:
        path: Canonical absolute path of the file
        lines: Matching lines, in line order
    """

    path: str = Field(..., min_length=1, description="Canonical path of the file")
    lines: List[LineMatch] = Field(default_factory=list, description="Matching lines in line order")

    def has_matches(self) -> bool:
        """Check if any line of the file matched."""
        return len(self.lines) > 0

    def match_count(self) -> int:
        return len(self.lines)

    def add_line_match(self, line_match: LineMatch) -> None:
        """Append a line match, keeping line order."""
        if self.lines and line_match.line_index <= self.lines[-1].line_index:
            raise ValueError(
                f"Line {line_match.line_number} added out of order after line {self.lines[-1].line_number}"
            )
        self.lines.append(line_match)

    def get_filename(self) -> str:
        """Get just the filename without directory path."""
        return Path(self.path).name

    def to_dict(self) -> Dict[str, Any]:
        """Convert file result to dictionary representation."""
        data = self.model_dump()
        data['filename'] = self.get_filename()
        data['match_count'] = self.match_count()
        return data

    def __str__(self) -> str:
        return f"{self.get_filename()} | Matches: {self.match_count()}"


class SearchSummary(BaseModel):
    """
    Counters describing a completed search run.

    Attributes:
        files_searched: Files whose content (or path) was tested
        files_matched: Files with at least one match
        lines_matched: Total matching lines across all files
        entries_emitted: Paths or lines written by the formatter
        walk_stats: Traversal counters reported by the walker
    """

    files_searched: int = Field(0, ge=0, description="Files tested against the patterns")
    files_matched: int = Field(0, ge=0, description="Files with at least one match")
    lines_matched: int = Field(0, ge=0, description="Total matching lines")
    entries_emitted: int = Field(0, ge=0, description="Output records written")
    walk_stats: Dict[str, int] = Field(default_factory=dict, description="Traversal counters")

    def has_matches(self) -> bool:
        return self.files_matched > 0

    def record(self, result: Optional[FileResult]) -> None:
        """Account for one processed file."""
        if result is None:
            return
        self.files_searched += 1
        if result.has_matches():
            self.files_matched += 1
            self.lines_matched += result.match_count()

    def __str__(self) -> str:
        parts = [f"Searched {self.files_searched} files"]
        parts.append(f"Matched {self.files_matched} files")
        parts.append(f"Lines {self.lines_matched}")
        return " | ".join(parts)
