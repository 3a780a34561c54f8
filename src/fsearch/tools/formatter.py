"""
Result formatting for fsearch.

This module renders search results under one of the mutually exclusive
output modes. Every piece of output is tagged with a semantic role (path,
separator, line number, matched span, plain text) and rich turns the roles
into terminal styles. Styling is left out automatically when the output is
not a terminal, so piped output is plain text.
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.segment import Segment, Segments
from rich.style import Style

from ..models.config import OutputMode
from ..models.entry import display_path
from ..models.search_results import FileResult, LineMatch


SEPARATOR = ":"

ROLE_STYLES: Dict[str, Style] = {
    'path': Style(color="magenta", bold=True),
    'separator': Style(color="cyan", bold=True),
    'line_number': Style(color="green", bold=True),
    'match': Style(color="red", bold=True),
}


def create_console(**kwargs) -> Console:
    """Create a console that writes lines exactly as given."""
    kwargs.setdefault('highlight', False)
    kwargs.setdefault('soft_wrap', True)
    return Console(**kwargs)


class ResultFormatter:
    """
    Writes FileResults according to the selected output mode.

    - PATHS_WITHOUT_MATCH: the path, once, if the file has no match
    - PATHS_WITH_MATCH: the path, once, if the file has a match
    - LINE_NUMBERS: ``path:N:line`` for every matching line
    - DEFAULT: ``path:line`` for every matching line

    Lines are written as raw segments, so tabs and long lines are kept
    unchanged.
    """

    def __init__(self, output_mode: OutputMode = OutputMode.DEFAULT, console: Optional[Console] = None):
        """
        Initialize the formatter.

        Args:
            output_mode: Selected rendering mode
            console: Console to write to, defaults to standard output
        """
        self.output_mode = output_mode
        self.console = console or create_console()

    def render(self, result: FileResult) -> int:
        """
        Write the output for one file.

        Args:
            result: Matches collected for the file

        Returns:
            Number of output lines written
        """
        if self.output_mode == OutputMode.PATHS_WITHOUT_MATCH:
            if result.has_matches():
                return 0
            return self.render_path(result.path)

        if self.output_mode == OutputMode.PATHS_WITH_MATCH:
            if not result.has_matches():
                return 0
            return self.render_path(result.path)

        with_number = self.output_mode == OutputMode.LINE_NUMBERS
        for line_match in result.lines:
            self._emit(self.format_line(result.path, line_match, with_number))
        return result.match_count()

    def render_path(self, path: str) -> int:
        """
        Write a bare path on its own line.

        Args:
            path: Canonical path to write

        Returns:
            Number of output lines written
        """
        self._emit(self.format_path(path))
        return 1

    def format_path(self, path: str) -> List[Segment]:
        return [self._segment(display_path(path), 'path')]

    def format_line(self, path: str, line_match: LineMatch, with_number: bool = False) -> List[Segment]:
        """
        Build the segments for one matching line.

        Args:
            path: Canonical path of the file
            line_match: The matching line with its span
            with_number: Whether to include the 1-based line number

        Returns:
            Styled segments, without the trailing newline
        """
        segments = self.format_path(path)
        segments.append(self._segment(SEPARATOR, 'separator'))

        if with_number:
            segments.append(self._segment(str(line_match.line_number), 'line_number'))
            segments.append(self._segment(SEPARATOR, 'separator'))

        segments.append(self._segment(line_match.before()))
        segments.append(self._segment(line_match.matched(), 'match'))
        segments.append(self._segment(line_match.after()))

        return [segment for segment in segments if segment.text]

    def _segment(self, text: str, role: Optional[str] = None) -> Segment:
        return Segment(text, ROLE_STYLES.get(role) if role else None)

    def _emit(self, segments: List[Segment]) -> None:
        segments.append(Segment.line())
        self.console.print(Segments(segments), soft_wrap=True, crop=False)
