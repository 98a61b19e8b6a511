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

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path as StdPath

import pytest

from weakpaths import InternerConfig, PathInterner


@dataclass(frozen=True, slots=True)
class FakeHomeResolver:
    """Home resolver returning a fixed value."""

    home: str | None

    def resolve(self) -> str | None:
        return self.home


InternerFactory = Callable[..., PathInterner]


@pytest.fixture
def interner_factory() -> InternerFactory:
    """Return a factory building isolated interners."""

    def factory(
        *, sweep_threshold: int = 4, home: str | None = "/home/alice"
    ) -> PathInterner:
        return PathInterner(
            config=InternerConfig(sweep_threshold=sweep_threshold),
            home_resolver=FakeHomeResolver(home),
        )

    return factory


@pytest.fixture
def interner(interner_factory: InternerFactory) -> PathInterner:
    return interner_factory()


@pytest.fixture
def tree(tmp_path: StdPath) -> StdPath:
    """Create ``root/{a.txt,b.txt,sub/c.txt}`` and return ``root``."""
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    for name in ("a.txt", "b.txt", "sub/c.txt"):
        _ = (root / name).write_text(name)
    return root
