# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Lazy glob traversal producing interned paths.

Pattern syntax:

- ``*`` matches any run of characters within one path segment, ``?`` one
  character, ``[seq]`` / ``[!seq]`` a character class (``fnmatch`` rules).
- ``**`` as a whole segment matches zero or more directories.
- Segments are separated by ``/`` (or the platform separator). A trailing
  separator restricts matches to directories. An absolute pattern ignores
  the walk root.

Traversal is depth-first. The entries of each directory are visited in
sorted name order and every match is yielded as soon as it is found, as an
absolute path interned through the walker's interner. A path is yielded at
most once per walk. Each call to :meth:`GlobWalker.walk` starts a fresh,
single-pass traversal; dropping the iterator abandons it.
"""

from __future__ import annotations

import fnmatch
import os
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .logging import get_logger

if TYPE_CHECKING:
    from .interner import PathInterner
    from .path import Path

_logger = get_logger(__name__)

GLOBSTAR: Final[str] = "**"
_MAGIC: Final[re.Pattern[str]] = re.compile(r"[*?[]")
_PLATFORM_CASE_SENSITIVE: Final[bool] = os.path.normcase("A") == "A"
_SEPARATORS: Final[str] = "".join(sep for sep in (os.sep, os.altsep) if sep)
_SPLIT: Final[re.Pattern[str]] = re.compile(f"[{re.escape(_SEPARATORS)}]")


@dataclass(frozen=True, slots=True)
class GlobOptions:
    """Options controlling a glob walk.

    Attributes:
        case_sensitive: Match names case-sensitively. ``None`` uses the
            platform default (insensitive on Windows).
        include_hidden: Let wildcards match dot-prefixed names and let
            ``**`` descend into dot-prefixed directories. A segment that
            itself starts with ``.`` always matches dot-prefixed names.
        follow_symlinks: Let ``**`` descend into symlinked directories.
        include_dirs: Yield directories as well as other entries.
        exclude: Patterns, relative to the walk root, whose matches are
            neither yielded nor descended into.
    """

    case_sensitive: bool | None = None
    include_hidden: bool = False
    follow_symlinks: bool = True
    include_dirs: bool = True
    exclude: tuple[str, ...] = ()

    @property
    def effective_case_sensitive(self) -> bool:
        if self.case_sensitive is None:
            return _PLATFORM_CASE_SENSITIVE
        return self.case_sensitive


@dataclass(frozen=True, slots=True)
class _Segment:
    text: str
    case_sensitive: bool
    regex: re.Pattern[str] | None = field(default=None, repr=False)

    @classmethod
    def compile(cls, text: str, *, case_sensitive: bool) -> _Segment:
        if text == GLOBSTAR or not _MAGIC.search(text):
            return cls(text, case_sensitive)
        flags = 0 if case_sensitive else re.IGNORECASE
        return cls(text, case_sensitive, re.compile(fnmatch.translate(text), flags))

    @property
    def is_globstar(self) -> bool:
        return self.text == GLOBSTAR

    @property
    def is_literal(self) -> bool:
        """Literal segments are looked up directly instead of listed."""
        return (
            self.regex is None
            and not self.is_globstar
            and self.case_sensitive == _PLATFORM_CASE_SENSITIVE
        )

    def matches(self, name: str, *, include_hidden: bool) -> bool:
        if self.regex is None:
            if self.case_sensitive:
                return name == self.text
            return name.casefold() == self.text.casefold()
        if name.startswith(".") and not include_hidden and not self.text.startswith("."):
            return False
        return self.regex.match(name) is not None


def split_pattern(pattern: str) -> tuple[str | None, list[str], bool]:
    """Split ``pattern`` into ``(anchor, segments, directories_only)``.

    ``anchor`` is the drive and root of an absolute pattern, else ``None``.
    Empty segments and repeated ``**`` segments are dropped.
    """
    anchor: str | None = None
    if os.path.isabs(pattern):
        drive, pattern = os.path.splitdrive(pattern)
        anchor = drive + os.sep
    dirs_only = bool(pattern) and pattern[-1] in _SEPARATORS
    segments: list[str] = []
    for segment in _SPLIT.split(pattern):
        if not segment:
            continue
        if segment == GLOBSTAR and segments and segments[-1] == GLOBSTAR:
            continue
        segments.append(segment)
    return anchor, segments, dirs_only


def _match_parts(
    segments: Sequence[_Segment], parts: Sequence[str], *, include_hidden: bool
) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head.is_globstar:
        return any(
            _match_parts(rest, parts[index:], include_hidden=include_hidden)
            for index in range(len(parts) + 1)
        )
    return (
        bool(parts)
        and head.matches(parts[0], include_hidden=include_hidden)
        and _match_parts(rest, parts[1:], include_hidden=include_hidden)
    )


def match_path(
    relative: str, pattern: str, options: GlobOptions | None = None
) -> bool:
    """Return whether a root-relative path matches ``pattern``.

    Uses the same rules as a walk, without touching the filesystem::

        match_path("src/pkg/mod.py", "**/*.py")  # True
        match_path("src/.cache/x.py", "**/*.py")  # False, hidden
    """
    options = options or GlobOptions()
    case_sensitive = options.effective_case_sensitive
    _, texts, _ = split_pattern(pattern)
    segments = [_Segment.compile(t, case_sensitive=case_sensitive) for t in texts]
    parts = [part for part in _SPLIT.split(relative) if part]
    return _match_parts(segments, parts, include_hidden=True)


class GlobWalker:
    """Expand glob patterns against the filesystem, one walk per call."""

    def __init__(self, interner: PathInterner) -> None:
        super().__init__()
        self._interner = interner

    def walk(
        self,
        root: str | os.PathLike[str],
        pattern: str,
        options: GlobOptions | None = None,
    ) -> Iterator[Path]:
        """Yield interned paths under ``root`` matching ``pattern``.

        A missing root yields nothing. Entries that disappear during the
        walk are skipped; any other ``OSError`` (such as a permission
        error while listing a directory) propagates.
        """
        return _Walk(self._interner, root, pattern, options or GlobOptions()).run()


class _Walk:
    def __init__(
        self,
        interner: PathInterner,
        root: str | os.PathLike[str],
        pattern: str,
        options: GlobOptions,
    ) -> None:
        super().__init__()
        case_sensitive = options.effective_case_sensitive
        anchor, texts, dirs_only = split_pattern(pattern)
        self.interner = interner
        self.options = options
        self.root = os.path.abspath(os.fspath(root))
        self.start = anchor if anchor is not None else self.root
        self.dirs_only = dirs_only
        self.segments = [_Segment.compile(t, case_sensitive=case_sensitive) for t in texts]
        self.excludes = [
            [_Segment.compile(t, case_sensitive=case_sensitive) for t in split_pattern(p)[1]]
            for p in options.exclude
        ]
        self.seen: set[str] = set()
        self.descended: set[tuple[int, int, int]] = set()

    def run(self) -> Iterator[Path]:
        if not self.segments:
            return
        yield from self._visit(self.start, 0)

    def _visit(self, path: str, index: int) -> Iterator[Path]:
        if index == len(self.segments):
            yield from self._emit(path)
            return

        segment = self.segments[index]
        last = index + 1 == len(self.segments)

        if segment.is_globstar:
            yield from self._visit(path, index + 1)
            if not self._claim_descent(path, index):
                return
            for entry in self._scan(path):
                if entry.name.startswith(".") and not self.options.include_hidden:
                    continue
                if self._excluded(entry.path):
                    continue
                if _entry_is_dir(entry, follow_symlinks=self.options.follow_symlinks):
                    yield from self._visit(entry.path, index)
                elif last:
                    yield from self._visit(entry.path, index + 1)
            return

        if segment.is_literal:
            candidate = os.path.join(path, segment.text)
            present = os.path.lexists(candidate) if last else os.path.isdir(candidate)
            if present and not self._excluded(candidate):
                yield from self._visit(candidate, index + 1)
            return

        for entry in self._scan(path):
            if not segment.matches(entry.name, include_hidden=self.options.include_hidden):
                continue
            if self._excluded(entry.path):
                continue
            if not last and not _entry_is_dir(entry, follow_symlinks=True):
                continue
            yield from self._visit(entry.path, index + 1)

    def _emit(self, path: str) -> Iterator[Path]:
        if self.dirs_only or not self.options.include_dirs:
            is_dir = os.path.isdir(path)
            if self.dirs_only and not is_dir:
                return
            if is_dir and not self.options.include_dirs:
                return
        normalized = os.path.normpath(path)
        if normalized in self.seen:
            return
        self.seen.add(normalized)
        yield self.interner.from_segments(normalized)

    def _scan(self, path: str) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(path) as entries:
                return sorted(entries, key=lambda entry: entry.name)
        except (FileNotFoundError, NotADirectoryError):
            _logger.debug(
                "Skipping vanished glob entry.",
                event="weakpaths.glob.skip",
                context={"path": path},
            )
            return []

    def _claim_descent(self, path: str, index: int) -> bool:
        """Record a ``**`` descent; ``False`` when a symlink loop revisits it."""
        try:
            st = os.stat(path)
        except OSError:
            return True
        key = (st.st_dev, st.st_ino, index)
        if key in self.descended:
            return False
        self.descended.add(key)
        return True

    def _excluded(self, path: str) -> bool:
        if not self.excludes:
            return False
        try:
            relative = os.path.relpath(path, self.root)
        except ValueError:  # different drive
            return False
        parts = [part for part in _SPLIT.split(relative) if part]
        return any(
            _match_parts(segments, parts, include_hidden=True)
            for segments in self.excludes
        )


def _entry_is_dir(entry: os.DirEntry[str], *, follow_symlinks: bool) -> bool:
    try:
        return entry.is_dir(follow_symlinks=follow_symlinks)
    except OSError:
        return False


__all__ = [
    "GLOBSTAR",
    "GlobOptions",
    "GlobWalker",
    "match_path",
    "split_pattern",
]
