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

"""Home directory resolution from the process environment."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final, Protocol, runtime_checkable

POSIX_HOME_ENV: Final[str] = "HOME"
WINDOWS_HOME_ENV: Final[str] = "USERPROFILE"


def home_env_var(platform: str | None = None) -> str:
    """Return the environment variable holding the home directory."""
    platform = sys.platform if platform is None else platform
    return WINDOWS_HOME_ENV if platform == "win32" else POSIX_HOME_ENV


def resolve_home(
    env: Mapping[str, str] | None = None, *, platform: str | None = None
) -> str | None:
    """Return the current user's home directory, or ``None`` if unknown.

    Reads ``USERPROFILE`` on Windows and ``HOME`` everywhere else. An empty
    value counts as unset. The environment is read on every call.
    """
    env = os.environ if env is None else env
    return env.get(home_env_var(platform)) or None


@runtime_checkable
class HomeResolver(Protocol):
    """Source of the home directory used by a path interner."""

    def resolve(self) -> str | None:
        """Return the home directory, or ``None`` when it can't be found."""
        ...


@dataclass(frozen=True, slots=True)
class EnvironHomeResolver:
    """Resolve the home directory from an environment mapping.

    ``env=None`` reads :data:`os.environ` at call time, so changes made by
    the process (or by ``monkeypatch`` in tests) are observed.
    """

    env: Mapping[str, str] | None = None
    platform: str | None = None

    def resolve(self) -> str | None:
        return resolve_home(self.env, platform=self.platform)


__all__ = [
    "POSIX_HOME_ENV",
    "WINDOWS_HOME_ENV",
    "EnvironHomeResolver",
    "HomeResolver",
    "home_env_var",
    "resolve_home",
]
