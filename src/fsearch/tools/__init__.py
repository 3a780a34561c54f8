"""
Search tools and utilities for fsearch.

This module contains the components of the search engine: the filesystem
walker and its tree filter, the pattern matcher, the search orchestration
and the result formatter.
"""

from .fs_walker import FSWalker, TreeFilter
from .matcher import PatternMatcher
from .formatter import ResultFormatter, create_console
from .searcher import ContentSearcher, FilenameSearcher, SearchService, run_search, split_lines

__all__ = [
    'FSWalker',
    'TreeFilter',
    'PatternMatcher',
    'ResultFormatter',
    'create_console',
    'ContentSearcher',
    'FilenameSearcher',
    'SearchService',
    'run_search',
    'split_lines'
]
