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

"""Immutable, interned filesystem paths.

Example::

    from weakpaths import Path

    data_dir = Path.from_module(__file__, "data")
    for schema in data_dir.glob("**/*.json"):
        print(schema.name, schema.read_json())

Subsystems:

- :mod:`weakpaths.path` - the :class:`Path` value type
- :mod:`weakpaths.interner` - the weak-reference cache behind it
- :mod:`weakpaths.glob` - lazy glob traversal
- :mod:`weakpaths.fileops` - filesystem accessors on plain strings
- :mod:`weakpaths.home` - home directory resolution
"""

from __future__ import annotations

from .config import InternerConfig
from .errors import (
    HomeDirectoryUnresolvedError,
    InvalidUrlError,
    JsonParseError,
    JsonSerializationError,
    PathNotFoundError,
    WeakPathsError,
)
from .glob import GlobOptions, GlobWalker
from .home import EnvironHomeResolver, HomeResolver, resolve_home
from .interner import DEFAULT_INTERNER, PathInterner
from .path import Path

__all__ = [
    "DEFAULT_INTERNER",
    "EnvironHomeResolver",
    "GlobOptions",
    "GlobWalker",
    "HomeDirectoryUnresolvedError",
    "HomeResolver",
    "InternerConfig",
    "InvalidUrlError",
    "JsonParseError",
    "JsonSerializationError",
    "Path",
    "PathInterner",
    "PathNotFoundError",
    "WeakPathsError",
    "resolve_home",
]
