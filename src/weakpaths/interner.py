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

"""Weak-reference cache that de-duplicates :class:`~weakpaths.path.Path` values.

The interner maps a canonical key, the lexically normalized join of the
requested segments, to a :func:`weakref.ref` of the path built for it. The
cache never keeps a path alive. Entries whose referent has been collected
are removed by :meth:`PathInterner.sweep`, which runs automatically after
every ``sweep_threshold``-th creation.

Interning never touches the filesystem: ``a/./b`` and ``a/b`` share a key,
while two spellings that only agree after symlink resolution do not.

Tests build private interners with a small threshold::

    interner = PathInterner(config=InternerConfig(sweep_threshold=4))
    first = interner.from_segments("src", "main.py")
    assert first is interner.from_segments("src/main.py")
"""

from __future__ import annotations

import os
import pathlib
import sys
import threading
import urllib.parse
import urllib.request
import weakref
from dataclasses import dataclass, field
from typing import Final

from .config import InternerConfig
from .errors import HomeDirectoryUnresolvedError, InvalidUrlError
from .home import EnvironHomeResolver, HomeResolver
from .logging import get_logger
from .path import _FACTORY_TOKEN, Path

_logger = get_logger(__name__)

_LOCAL_HOSTS: Final[frozenset[str]] = frozenset({"", "localhost"})


def canonical_key(*segments: str | os.PathLike[str]) -> str:
    """Return the cache key for ``segments``.

    Segments are joined with the platform rules (an absolute segment
    restarts the join) and normalized lexically. No segments yields ``"."``.
    """
    if not segments:
        return "."
    return os.path.normpath(os.path.join(*(os.fspath(s) for s in segments)))


def file_url_to_path(url: str) -> str:
    """Decode a ``file:`` URL into a filesystem path string.

    Raises:
        InvalidUrlError: If ``url`` is not a local ``file:`` URL.
    """
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError as err:
        raise InvalidUrlError(f"Malformed file URL {url!r}: {err}") from err
    if parts.scheme.lower() != "file":
        raise InvalidUrlError(f"Must be a file URL, got {url!r}.")
    if not parts.path:
        raise InvalidUrlError(f"File URL has no path: {url!r}.")
    host = parts.netloc.lower()
    if host not in _LOCAL_HOSTS:
        if sys.platform != "win32":
            raise InvalidUrlError(f"File URL host must be local: {url!r}.")
        return urllib.request.url2pathname(f"//{parts.netloc}{parts.path}")
    # A path-only URL such as "file:a.txt" is rooted, as in "file:///a.txt".
    path = parts.path if parts.path.startswith("/") else f"/{parts.path}"
    return urllib.request.url2pathname(path)


@dataclass(slots=True, eq=False)
class PathInterner:
    """Process-wide or test-local cache of live :class:`Path` values.

    Creation, lookup, the creation counter and sweeping share one lock, so
    at most one live path exists per canonical key even when several
    threads intern the same key at once.
    """

    config: InternerConfig = field(default_factory=InternerConfig)
    home_resolver: HomeResolver = field(default_factory=EnvironHomeResolver)
    _cache: dict[str, weakref.ref[Path]] = field(
        default_factory=dict, init=False, repr=False
    )
    _created: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def created(self) -> int:
        """Number of paths constructed by this interner so far."""
        return self._created

    def from_segments(self, *segments: str | os.PathLike[str]) -> Path:
        """Return the live path for ``segments``, constructing it if needed."""
        key = canonical_key(*segments)
        with self._lock:
            ref = self._cache.get(key)
            existing = ref() if ref is not None else None
            if existing is not None:
                return existing

            path = Path(key, self, _FACTORY_TOKEN)
            self._cache[key] = weakref.ref(path)
            self._created += 1
            if self._created % self.config.sweep_threshold == 0:
                _ = self._sweep_locked()
            return path

    def from_file_url(self, url: str) -> Path:
        return self.from_segments(file_url_to_path(url))

    def from_module(
        self, module_location: str | os.PathLike[str], relative: str = ""
    ) -> Path:
        """Return ``relative`` resolved against a module's location.

        ``module_location`` is a path (usually ``__file__``) or a ``file:``
        URL. ``""`` selects the module itself and ``"."`` its directory.
        """
        location = os.fspath(module_location)
        if location.startswith("file:"):
            base = location
        else:
            base = pathlib.Path(os.path.abspath(location)).as_uri()
        return self.from_file_url(urllib.parse.urljoin(base, relative))

    def cwd(self, *segments: str | os.PathLike[str]) -> Path:
        return self.from_segments(os.getcwd(), *segments)

    def home(self, *segments: str | os.PathLike[str]) -> Path:
        """Return a path under the home directory.

        Raises:
            HomeDirectoryUnresolvedError: If the resolver finds no home.
        """
        home = self.home_resolver.resolve()
        if home is None:
            raise HomeDirectoryUnresolvedError()
        return self.from_segments(home, *segments)

    def sweep(self) -> int:
        """Drop cache entries whose path has been collected.

        Returns the number of entries removed. Live paths are unaffected.
        """
        with self._lock:
            return self._sweep_locked()

    def live_count(self) -> int:
        """Number of cache entries whose path is still alive."""
        with self._lock:
            return sum(1 for ref in self._cache.values() if ref() is not None)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        ref = self._cache.get(key)
        return ref is not None and ref() is not None

    def _sweep_locked(self) -> int:
        dead = [key for key, ref in self._cache.items() if ref() is None]
        for key in dead:
            del self._cache[key]
        _logger.debug(
            "Swept path cache.",
            event="weakpaths.interner.sweep",
            context={"removed": len(dead), "remaining": len(self._cache)},
        )
        return len(dead)


DEFAULT_INTERNER: Final[PathInterner] = PathInterner(config=InternerConfig.from_env())
"""Interner behind the ``Path.*`` class-level factories."""


__all__ = [
    "DEFAULT_INTERNER",
    "PathInterner",
    "canonical_key",
    "file_url_to_path",
]
