"""
Configuration data models for fsearch.

This module defines the immutable search configuration built once per
invocation from the command line, including search roots, traversal options,
exclusion substrings, search terms and the selected output mode.
"""

from typing import Dict, List, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OutputMode(Enum):
    """Mutually exclusive rendering modes for search results."""
    DEFAULT = "default"
    LINE_NUMBERS = "line_numbers"
    PATHS_WITH_MATCH = "paths_with_match"
    PATHS_WITHOUT_MATCH = "paths_without_match"


class SearchMode(Enum):
    """What a pattern is matched against."""
    CONTENT = "content"
    FILENAME = "filename"


class SearchConfig(BaseModel):
    """
    Complete configuration for a single search invocation.

    Literal patterns and regular expressions are mutually exclusive per
    invocation: when ``use_regex`` is set only ``regex_patterns`` are used
    and ``patterns`` are ignored.

    Attributes:
        roots: Paths to search, walked in order
        recursive: Whether to descend into subdirectories
        follow_symlinks: Whether to descend through symbolic links to directories
        exclude: Substrings rejected when found in an entry's canonical path
        patterns: Literal search terms, in declaration order
        regex_patterns: Regular expressions, in declaration order
        use_regex: Whether regex_patterns replace patterns
        output_mode: Selected rendering mode
        search_mode: Whether file contents or paths are searched
    """

    model_config = ConfigDict(frozen=True)

    roots: List[str] = Field(default_factory=lambda: ["."], description="Paths to search")
    recursive: bool = Field(False, description="Whether to descend into subdirectories")
    follow_symlinks: bool = Field(False, description="Whether to follow symbolic links")
    exclude: List[str] = Field(default_factory=list, description="Canonical path substrings to exclude")
    patterns: List[str] = Field(default_factory=list, description="Literal search terms")
    regex_patterns: List[str] = Field(default_factory=list, description="Regular expression search terms")
    use_regex: bool = Field(False, description="Whether regex_patterns replace patterns")
    output_mode: OutputMode = Field(OutputMode.DEFAULT, description="Selected rendering mode")
    search_mode: SearchMode = Field(SearchMode.CONTENT, description="Content or filename search")

    @field_validator('roots')
    @classmethod
    def validate_roots(cls, v: List[str]) -> List[str]:
        """Drop blank roots, keeping the given order."""
        normalized_roots = [root for root in v if root and root.strip()]
        if not normalized_roots:
            raise ValueError("No valid search paths provided")
        return normalized_roots

    @field_validator('exclude')
    @classmethod
    def validate_exclude(cls, v: List[str]) -> List[str]:
        """Remove empty and duplicate exclusion substrings."""
        unique = []
        for substring in v:
            # An empty substring would exclude every entry
            if substring and substring not in unique:
                unique.append(substring)
        return unique

    @field_validator('output_mode', mode='before')
    @classmethod
    def validate_output_mode(cls, v) -> OutputMode:
        """Accept output modes given by value."""
        if isinstance(v, str):
            try:
                return OutputMode(v)
            except ValueError:
                raise ValueError(f"Invalid output mode: {v}")
        return v

    @field_validator('search_mode', mode='before')
    @classmethod
    def validate_search_mode(cls, v) -> SearchMode:
        """Accept search modes given by value."""
        if isinstance(v, str):
            try:
                return SearchMode(v)
            except ValueError:
                raise ValueError(f"Invalid search mode: {v}")
        return v

    @model_validator(mode='after')
    def validate_search_terms(self):
        """Ensure the active pattern kind is usable for the search mode."""
        if not self.active_patterns():
            if self.use_regex:
                raise ValueError("At least one regular expression must be specified")
            raise ValueError("At least one search pattern must be specified")

        if self.search_mode == SearchMode.FILENAME and self.output_mode != OutputMode.DEFAULT:
            raise ValueError(
                f"Output mode '{self.output_mode.value}' is not supported for filename search"
            )

        return self

    def active_patterns(self) -> List[str]:
        """Get the search terms used by this invocation."""
        return self.regex_patterns if self.use_regex else self.patterns

    def has_exclusions(self) -> bool:
        """Check if any exclusion substrings are configured."""
        return bool(self.exclude)

    def is_excluded(self, canonical_path: str) -> bool:
        """Check if a canonical path contains any exclusion substring."""
        return any(substring in canonical_path for substring in self.exclude)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['output_mode'] = self.output_mode.value
        data['search_mode'] = self.search_mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Roots: {len(self.roots)} paths"]
        parts.append(f"Patterns: {len(self.active_patterns())} {'regex' if self.use_regex else 'literal'}")
        parts.append(f"Recursive: {self.recursive}")
        parts.append(f"Follow symlinks: {self.follow_symlinks}")
        if self.has_exclusions():
            parts.append(f"Exclusions: {len(self.exclude)}")
        parts.append(f"Output: {self.output_mode.value}")

        return " | ".join(parts)
