"""
Filesystem walker for fsearch.

This module provides the traversal engine shared by content search and
filename search. It walks one or more roots depth-first in pre-order, asks
the tree filter whether each entry may be yielded and descended into, and
yields entries carrying their canonical absolute path.

Entries whose metadata or canonical path cannot be read are skipped without
being reported; they are only counted in the walk statistics and logged at
debug level.
"""

import os
import stat
import logging
from pathlib import Path
from typing import Dict, List, Optional, Iterator, Tuple

from pydantic import ValidationError

from ..models.config import SearchConfig
from ..models.entry import Entry


logger = logging.getLogger(__name__)

# (st_dev, st_ino) of a directory, used to detect symlink loops
DirIdentity = Tuple[int, int]


class TreeFilter:
    """
    Decides per entry whether it is yielded and descended into.

    Rules, in order:
    - a directory is rejected when the search is not recursive, except the
      root entry of a walk, which is always admitted so traversal can start
    - an entry whose canonical path contains an exclusion substring is
      rejected, whether file or directory; an entry without a canonical path
      is never excluded
    """

    def __init__(self, config: SearchConfig):
        self.config = config

    def admit(self, entry: Entry) -> bool:
        """
        Check whether an entry passes the filter.

        Args:
            entry: Entry produced by the walker

        Returns:
            True if the entry may be yielded (and descended into, for directories)
        """
        if entry.is_dir and not self.config.recursive and not entry.is_root():
            return False

        if self.config.has_exclusions() and entry.canonical_path is not None:
            if self.config.is_excluded(entry.canonical_path):
                return False

        return True


class FSWalker:
    """
    Filesystem walker that traverses search roots.

    Children of a directory are visited in name order so repeated walks over
    an unchanged tree produce the same sequence. Symbolic links to
    directories are descended only when ``follow_symlinks`` is set; a
    directory already on the current path is never entered again.
    """

    def __init__(self, config: SearchConfig, tree_filter: Optional[TreeFilter] = None):
        """
        Initialize the filesystem walker.

        Args:
            config: Search configuration with roots and traversal options
            tree_filter: Filter deciding which entries are admitted
        """
        self.config = config
        self.tree_filter = tree_filter or TreeFilter(config)
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'entries_visited': 0,
            'directories_traversed': 0,
            'entries_ignored': 0,
            'errors': 0
        }

    def walk_paths(self, roots: Optional[List[str]] = None) -> Iterator[Entry]:
        """
        Walk through the roots and yield admitted entries.

        Each root is walked on its own and the sequences are concatenated in
        root order.

        Args:
            roots: Paths to walk, defaults to the configured roots

        Yields:
            Entry objects that passed the tree filter and have a canonical path
        """
        if roots is None:
            roots = self.config.roots

        for root in roots:
            logger.debug(f"Walking directory tree: {root}")
            yield from self._walk_directory(Path(root))

    def _walk_directory(self, root_path: Path) -> Iterator[Entry]:
        """
        Walk a single tree depth-first, parents before children.

        Args:
            root_path: Root of the walk

        Yields:
            Admitted entries with a canonical path
        """
        stack: List[Tuple[Path, int, Tuple[DirIdentity, ...]]] = [(root_path, 0, ())]

        while stack:
            path, depth, ancestors = stack.pop()

            metadata = self._read_metadata(path, depth)
            if metadata is None:
                self._stats['errors'] += 1
                continue

            entry, identity = metadata
            self._stats['entries_visited'] += 1

            if not self.tree_filter.admit(entry):
                logger.debug(f"Filtered out: {path}")
                self._stats['entries_ignored'] += 1
                continue

            if entry.has_canonical_path():
                yield entry
            else:
                logger.debug(f"Cannot resolve canonical path: {path}")
                self._stats['errors'] += 1

            if not entry.is_dir:
                continue

            if identity in ancestors:
                logger.debug(f"Skipping directory loop: {path}")
                self._stats['errors'] += 1
                continue

            children = self._list_children(path)
            self._stats['directories_traversed'] += 1

            chain = ancestors + (identity,)
            for child in reversed(children):
                stack.append((child, depth + 1, chain))

    def _read_metadata(self, path: Path, depth: int) -> Optional[Tuple[Entry, DirIdentity]]:
        """
        Read the metadata of a path and build its Entry.

        The root of a walk is always resolved through symbolic links; other
        links are resolved only when following links is enabled.

        Args:
            path: Path to inspect
            depth: Distance from the walk root

        Returns:
            Tuple of (Entry, directory identity), or None if metadata is unreadable
            or the name is not valid UTF-8
        """
        try:
            link_stat = os.lstat(path)
        except OSError as e:
            logger.debug(f"Cannot read metadata of {path}: {e}")
            return None

        is_symlink = stat.S_ISLNK(link_stat.st_mode)
        stat_result = link_stat

        if is_symlink and (self.config.follow_symlinks or depth == 0):
            try:
                stat_result = os.stat(path)
            except OSError as e:
                logger.debug(f"Cannot follow symbolic link {path}: {e}")
                return None

        try:
            entry = Entry(
                path=str(path),
                canonical_path=self._canonicalize(path),
                is_dir=stat.S_ISDIR(stat_result.st_mode),
                is_symlink=is_symlink,
                readonly=(stat_result.st_mode & 0o222) == 0,
                depth=depth
            )
        except ValidationError:
            # names that are not valid UTF-8 arrive surrogate-escaped
            logger.debug(f"Skipping entry with undecodable name: {path!r}")
            return None
        return entry, (stat_result.st_dev, stat_result.st_ino)

    def _canonicalize(self, path: Path) -> Optional[str]:
        """
        Resolve a path to its canonical absolute form.

        Args:
            path: Path to resolve

        Returns:
            Canonical path string, or None for broken links and loops
        """
        try:
            return str(path.resolve(strict=True))
        except (OSError, RuntimeError):
            return None

    def _list_children(self, path: Path) -> List[Path]:
        """
        List the children of a directory in name order.

        Args:
            path: Directory to list

        Returns:
            Child paths, empty if the directory cannot be read
        """
        try:
            with os.scandir(path) as it:
                names = sorted(child.name for child in it)
        except OSError as e:
            logger.debug(f"Cannot list directory {path}: {e}")
            self._stats['errors'] += 1
            return []

        return [path / name for name in names]

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the walk.

        Returns:
            Dictionary containing walk counters
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()
