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

"""Exception hierarchy for :mod:`weakpaths`."""

from __future__ import annotations


class WeakPathsError(Exception):
    """Base class for all weakpaths exceptions.

    Subclasses also inherit from the matching builtin exception, so callers
    can catch either the library type or the standard one::

        try:
            data = Path.from_segments("config.json").read_json()
        except FileNotFoundError:
            data = {}
    """


class HomeDirectoryUnresolvedError(WeakPathsError, RuntimeError):
    """Raised when an operation needs the home directory and none is set."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Can't determine user home path")


class InvalidUrlError(WeakPathsError, ValueError):
    """Raised when a URL is not a usable ``file:`` URL."""


class PathNotFoundError(WeakPathsError, FileNotFoundError):
    """Raised when an operation needs an entry that does not exist.

    Presence checks (``exists``, ``is_dir``, ``is_file``, ``is_symlink``)
    never raise this; they return ``False`` instead.
    """


class JsonParseError(WeakPathsError, ValueError):
    """Raised when file content is not valid JSON."""


class JsonSerializationError(WeakPathsError, TypeError):
    """Raised when a value cannot be serialized to JSON.

    Covers unsupported types as well as circular references.
    """


__all__ = [
    "HomeDirectoryUnresolvedError",
    "InvalidUrlError",
    "JsonParseError",
    "JsonSerializationError",
    "PathNotFoundError",
    "WeakPathsError",
]
