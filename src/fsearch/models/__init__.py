"""
Data models for fsearch.

This module contains all the core data structures used throughout the system.
"""

from .config import SearchConfig, OutputMode, SearchMode
from .entry import Entry, display_path
from .search_results import LineMatch, FileResult, SearchSummary, Span

__all__ = [
    'SearchConfig',
    'OutputMode',
    'SearchMode',
    'Entry',
    'display_path',
    'LineMatch',
    'FileResult',
    'SearchSummary',
    'Span'
]
