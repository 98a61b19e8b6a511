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

"""Immutable, interned filesystem path values.

A :class:`Path` wraps a single normalized path string. Values are created
only through a :class:`~weakpaths.interner.PathInterner`, so two requests for
the same path share one instance while it is alive::

    from weakpaths import Path

    config = Path.home(".config", "tool.json")
    assert config is Path.home(".config/tool.json")

    if config.exists():
        settings = config.read_json()

Every operation that looks like a mutation (``joinpath``, ``resolve``,
``expanduser``) returns another interned value. I/O methods delegate to
:mod:`weakpaths.fileops`; each has an ``async_`` twin that runs the blocking
call in a worker thread.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import os
import pathlib
import urllib.parse
from collections.abc import AsyncIterator, Iterator, Sequence
from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING, Any, Final, Self, cast

from . import fileops
from .errors import HomeDirectoryUnresolvedError
from .glob import GlobOptions, GlobWalker

if TYPE_CHECKING:
    from .interner import PathInterner

_FACTORY_TOKEN: Final = object()
_SEPARATORS: Final[tuple[str, ...]] = tuple(
    sep for sep in (os.sep, os.altsep) if sep
)


def _default_interner() -> PathInterner:
    from .interner import DEFAULT_INTERNER

    return DEFAULT_INTERNER


def _unpickle(filepath: str) -> Path:
    return _default_interner().from_segments(filepath)


@functools.total_ordering
@dataclass(frozen=True, slots=True, weakref_slot=True, eq=False, repr=False)
class Path:
    """A filesystem path held as an immutable, interned string.

    Equality and hashing use the raw ``filepath`` string, which keeps
    hashing stable. :meth:`equals` additionally treats two strings as the
    same path when their absolute forms match.

    Instances can't be constructed directly; use the class-level factories
    (:meth:`from_segments`, :meth:`cwd`, :meth:`home`, ...) or a
    :class:`~weakpaths.interner.PathInterner`.
    """

    filepath: str
    _interner: PathInterner = field(compare=False)
    _token: InitVar[object] = None

    def __post_init__(self, _token: object) -> None:
        if _token is not _FACTORY_TOKEN:
            msg = (
                "Path values are created through PathInterner factories; "
                "use Path.from_segments() instead of Path()."
            )
            raise TypeError(msg)

    # -- factories -----------------------------------------------------------

    @classmethod
    def from_segments(cls, *segments: str | os.PathLike[str]) -> Path:
        """Join ``segments`` and return the interned path."""
        return _default_interner().from_segments(*segments)

    @classmethod
    def from_file_url(cls, url: str) -> Path:
        return _default_interner().from_file_url(url)

    @classmethod
    def from_module(
        cls, module_location: str | os.PathLike[str], relative: str = ""
    ) -> Path:
        """Return a path relative to a module file.

        Example::

            Path.from_module(__file__)  # this file
            Path.from_module(__file__, ".")  # its directory
            Path.from_module(__file__, "data/schema.json")
        """
        return _default_interner().from_module(module_location, relative)

    @classmethod
    def cwd(cls, *segments: str | os.PathLike[str]) -> Path:
        return _default_interner().cwd(*segments)

    @classmethod
    def home(cls, *segments: str | os.PathLike[str]) -> Path:
        """Return a path under the home directory.

        Raises:
            HomeDirectoryUnresolvedError: If the home directory is unknown.
        """
        return _default_interner().home(*segments)

    # -- pure accessors ------------------------------------------------------

    @property
    def name(self) -> str:
        return os.path.basename(self.filepath)

    @property
    def extension(self) -> str:
        """Suffix of :attr:`name` including its dot, e.g. ``".json"``.

        Empty for names without a dot and for dotfiles such as ``.bashrc``.
        """
        return os.path.splitext(self.name)[1]

    @property
    def stem(self) -> str:
        return os.path.splitext(self.name)[0]

    @property
    def parent(self) -> Path:
        return self._interner.from_segments(os.path.dirname(self.filepath) or ".")

    @property
    def parts(self) -> tuple[str, ...]:
        return pathlib.PurePath(self.filepath).parts

    def is_absolute(self) -> bool:
        return os.path.isabs(self.filepath)

    def equals(self, other: Path | str | os.PathLike[str] | None) -> bool:
        """Return whether ``other`` names the same path.

        Checks identity, then the raw strings, then the absolute forms of
        both strings. Failing to compute an absolute form counts as "not
        equal"; this method never raises.
        """
        if other is None:
            return False
        if self is other:
            return True
        try:
            other_str = os.fspath(other)
        except TypeError:
            return False
        if self.filepath == other_str:
            return True
        try:
            return os.path.abspath(self.filepath) == os.path.abspath(other_str)
        except (OSError, ValueError):
            return False

    # -- derived paths -------------------------------------------------------

    def joinpath(self, *segments: str | os.PathLike[str]) -> Path:
        return self._interner.from_segments(self.filepath, *segments)

    def __truediv__(self, other: str | os.PathLike[str]) -> Path:
        return self.joinpath(other)

    def resolve(self) -> Path:
        """Return the interned absolute form, without following symlinks."""
        return self._interner.from_segments(os.path.abspath(self.filepath))

    def expanduser(self) -> Path:
        """Return a path with a leading ``~`` or ``~user`` expanded.

        ``~`` maps to the home directory and ``~name`` to a sibling of it
        named ``name``. A path without a leading ``~`` is returned as is.

        Raises:
            HomeDirectoryUnresolvedError: If expansion is needed and the home
                directory is unknown.
        """
        if not self.filepath.startswith("~"):
            return self

        home = self._interner.home_resolver.resolve()
        if home is None:
            raise HomeDirectoryUnresolvedError()

        cut = len(self.filepath)
        for sep in _SEPARATORS:
            index = self.filepath.find(sep, 1)
            if index != -1:
                cut = min(cut, index)
        user, rest = self.filepath[1:cut], self.filepath[cut:]
        base = os.path.join(os.path.dirname(home), user) if user else home
        return self._interner.from_segments(base + rest)

    def glob(
        self, pattern: str, options: GlobOptions | None = None, **overrides: Any
    ) -> Iterator[Path]:
        """Lazily yield interned paths under this path matching ``pattern``.

        ``overrides`` replace individual :class:`GlobOptions` fields::

            for source in Path.cwd().glob("**/*.py", exclude=("build/**",)):
                ...
        """
        resolved = options or GlobOptions()
        if overrides:
            resolved = dataclasses.replace(resolved, **overrides)
        return GlobWalker(self._interner).walk(self, pattern, resolved)

    # -- filesystem queries --------------------------------------------------

    def exists(self) -> bool:
        return fileops.exists(self.filepath)

    def is_dir(self) -> bool:
        return fileops.is_dir(self.filepath)

    def is_file(self) -> bool:
        return fileops.is_file(self.filepath)

    def is_symlink(self) -> bool:
        return fileops.is_symlink(self.filepath)

    def stat(self) -> os.stat_result:
        return fileops.stat(self.filepath)

    def lstat(self) -> os.stat_result:
        return fileops.lstat(self.filepath)

    # -- file content --------------------------------------------------------

    def ensure_dir(self) -> None:
        fileops.ensure_dir(self.filepath)

    def ensure_file(self) -> None:
        fileops.ensure_file(self.filepath)

    def read_bytes(self) -> bytes:
        return fileops.read_bytes(self.filepath)

    def write_bytes(
        self,
        data: bytes,
        *,
        append: bool = False,
        create: bool = True,
        mode: int | None = None,
    ) -> None:
        fileops.write_bytes(self.filepath, data, append=append, create=create, mode=mode)

    def read_text(self, *, encoding: str = "utf-8") -> str:
        return fileops.read_text(self.filepath, encoding=encoding)

    def write_text(
        self,
        data: str,
        *,
        encoding: str = "utf-8",
        append: bool = False,
        create: bool = True,
        mode: int | None = None,
    ) -> None:
        fileops.write_text(
            self.filepath,
            data,
            encoding=encoding,
            append=append,
            create=create,
            mode=mode,
        )

    def read_json(self) -> Any:  # noqa: ANN401
        return fileops.read_json(self.filepath)

    def write_json(
        self,
        value: object,
        *,
        keys: Sequence[str | int] | None = None,
        sort_keys: bool = False,
        indent: int | str | None = None,
        append: bool = False,
        create: bool = True,
        mode: int | None = None,
    ) -> None:
        fileops.write_json(
            self.filepath,
            value,
            keys=keys,
            sort_keys=sort_keys,
            indent=indent,
            append=append,
            create=create,
            mode=mode,
        )

    # -- async variants ------------------------------------------------------

    async def async_exists(self) -> bool:
        return await asyncio.to_thread(self.exists)

    async def async_stat(self) -> os.stat_result:
        return await asyncio.to_thread(self.stat)

    async def async_read_bytes(self) -> bytes:
        return await asyncio.to_thread(self.read_bytes)

    async def async_read_text(self, *, encoding: str = "utf-8") -> str:
        return await asyncio.to_thread(self.read_text, encoding=encoding)

    async def async_read_json(self) -> Any:  # noqa: ANN401
        return await asyncio.to_thread(self.read_json)

    async def async_write_bytes(self, data: bytes, **options: Any) -> None:
        await asyncio.to_thread(self.write_bytes, data, **options)

    async def async_write_text(self, data: str, **options: Any) -> None:
        await asyncio.to_thread(self.write_text, data, **options)

    async def async_write_json(self, value: object, **options: Any) -> None:
        await asyncio.to_thread(self.write_json, value, **options)

    async def async_glob(
        self, pattern: str, options: GlobOptions | None = None, **overrides: Any
    ) -> AsyncIterator[Path]:
        """Async form of :meth:`glob`; each step runs in a worker thread.

        Cancelling the consuming task stops the traversal after the current
        step.
        """
        walker = self.glob(pattern, options, **overrides)
        done = object()
        while True:
            item = await asyncio.to_thread(next, walker, done)
            if item is done:
                return
            yield cast(Path, item)

    # -- conversions ---------------------------------------------------------

    def to_file_url(self) -> str:
        """Return a ``file://`` URL, or a relative URL for a relative path."""
        if self.is_absolute():
            return pathlib.Path(self.filepath).as_uri()
        relative = self.filepath
        if os.altsep:
            relative = relative.replace(os.sep, os.altsep)
        return urllib.parse.quote(relative)

    def to_absolute_url(self) -> str:
        return pathlib.Path(os.path.abspath(self.filepath)).as_uri()

    def to_json(self) -> str:
        return self.filepath

    def __str__(self) -> str:
        return self.filepath

    def __fspath__(self) -> str:
        return self.filepath

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.filepath!r})"

    # -- value semantics -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self is other or self.filepath == other.filepath
        if isinstance(other, str):
            return self.filepath == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self.filepath < other.filepath
        if isinstance(other, str):
            return self.filepath < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.filepath)

    def __reduce__(self) -> tuple[Any, tuple[str]]:
        return (_unpickle, (self.filepath,))

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> Self:
        return self


__all__ = ["Path"]
