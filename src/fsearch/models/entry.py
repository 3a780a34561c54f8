"""
Directory entry model for fsearch.

An Entry describes one filesystem object visited during traversal. Entries
are produced by the walker, consumed by the tree filter and the searchers,
and never mutated.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


VERBATIM_PREFIX = "\\\\?\\"


def display_path(path: str) -> str:
    """Strip the Windows verbatim prefix from a path before it is shown."""
    if path.startswith(VERBATIM_PREFIX):
        return path[len(VERBATIM_PREFIX):]
    return path


class Entry(BaseModel):
    """
    A filesystem object visited during traversal.

    Attributes:
        path: Path as reached by the walker (used for descending)
        canonical_path: Fully resolved absolute path, None if it cannot be computed
        is_dir: Whether the entry is a directory (following links only when enabled)
        is_symlink: Whether the entry itself is a symbolic link
        readonly: Whether the entry has no write permission bits set
        depth: Distance from the walk root (0 for the root itself)
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Path as reached by the walker")
    canonical_path: Optional[str] = Field(None, description="Resolved absolute path")
    is_dir: bool = Field(False, description="Whether the entry is a directory")
    is_symlink: bool = Field(False, description="Whether the entry is a symbolic link")
    readonly: bool = Field(False, description="Whether the entry has no write permission bits")
    depth: int = Field(0, ge=0, description="Distance from the walk root")

    def is_root(self) -> bool:
        """Check if this entry is the root a walk started from."""
        return self.depth == 0

    def has_canonical_path(self) -> bool:
        return self.canonical_path is not None

    def get_display_path(self) -> str:
        """Get the canonical path in the form shown to the user."""
        return display_path(self.canonical_path or self.path)

    def __str__(self) -> str:
        kind = "dir" if self.is_dir else "symlink" if self.is_symlink else "file"
        return f"{self.get_display_path()} ({kind}, depth {self.depth})"
