"""
Pattern Resolver
================

Expands local wildcard patterns into concrete file paths with glob.

Supported wildcards:
- '*'  any run of characters inside one path segment
- '?'  exactly one character
- '**' as a whole segment, zero or more directories

Patterns are normalized before matching: '..' segments are rejected,
doubled separators collapsed and leading './' markers stripped.
"""

import glob
import os
import re
from fnmatch import fnmatchcase
from typing import List, Optional, Sequence

from core.errors import PatternNotFoundError, UnsupportedPathError
from core.settings import DEFAULT_EXCLUDES, IS_WINDOWS

RECURSIVE_SEGMENT = "**"
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def _fold_case(pattern: str) -> str:
    """Glob pattern matching every letter in either case."""
    folded = []
    for char in pattern:
        if char.lower() != char.upper():
            folded.append(f"[{char.lower()}{char.upper()}]")
        else:
            folded.append(char)
    return "".join(folded)


def _matches_exactly(segments: Sequence[str], parts: Sequence[str]) -> bool:
    """Case-sensitive segment-by-segment match, '**' spanning directories."""
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == RECURSIVE_SEGMENT:
        return any(_matches_exactly(rest, parts[i:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _matches_exactly(rest, parts[1:])


class LocalPatternResolver:
    """
    Resolver for local file patterns.

    Follows SRP: Only handles pattern normalization and filesystem matching.
    """

    def __init__(
        self,
        base_dir: Optional[str] = None,
        case_sensitive: Optional[bool] = None,
    ):
        """
        Initialize pattern resolver.

        Args:
            base_dir: Directory relative patterns are matched against
                (default: current working directory at resolve time)
            case_sensitive: Override the platform policy (default: case-insensitive
                on Windows only)
        """
        self.base_dir = base_dir
        self.case_sensitive = (not IS_WINDOWS) if case_sensitive is None else case_sensitive

    def normalize(self, pattern: str) -> str:
        """
        Normalize a pattern without visiting the filesystem.

        Args:
            pattern: Pattern as given by the caller

        Returns:
            Pattern with '/' separators, no '//' and no leading './'

        Raises:
            UnsupportedPathError: if the pattern has a '..' segment
        """
        normalized = pattern.replace(os.sep, "/") if os.sep != "/" else pattern
        if ".." in normalized.split("/"):
            raise UnsupportedPathError(pattern)

        # collapse first: './/a.xml' must become 'a.xml', not '/a.xml'
        previous = None
        while normalized != previous:
            previous = normalized
            normalized = _REPEATED_SEPARATORS.sub("/", normalized)
            while normalized.startswith("./"):
                normalized = normalized[2:]
        return normalized

    def resolve(self, pattern: str) -> List[str]:
        """
        Find the files matching a pattern.

        Args:
            pattern: Local path, possibly with wildcards

        Returns:
            Matching file paths sorted by path, relative to the base directory
            for relative patterns and absolute for absolute ones

        Raises:
            UnsupportedPathError: if the pattern has a '..' segment
            PatternNotFoundError: if nothing matches
        """
        normalized = self.normalize(pattern)
        segments = [s for s in normalized.split("/") if s not in ("", ".")]
        if not segments:
            raise PatternNotFoundError(pattern)

        # only '*', '?' and '**' are wildcards
        search = normalized.replace("[", "[[]")
        literal = [s.replace("[", "[[]") for s in segments]
        if not self.case_sensitive and not IS_WINDOWS:
            search = _fold_case(search)

        root_dir = None if os.path.isabs(normalized) else self.base_dir
        found = glob.glob(search, root_dir=root_dir, recursive=True)

        # version-control directories are skipped unless named literally
        excluded = DEFAULT_EXCLUDES.difference(segments)
        matches = set()
        for path in found:
            parts = [p for p in re.split(r"[\\/]", path) if p not in ("", ".")]
            if excluded.intersection(parts):
                continue
            if self.case_sensitive and IS_WINDOWS and not _matches_exactly(literal, parts):
                continue
            if os.path.isfile(os.path.join(root_dir or "", path)):
                matches.add(path)

        if not matches:
            raise PatternNotFoundError(pattern)
        return sorted(matches)
