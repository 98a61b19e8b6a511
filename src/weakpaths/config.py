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

"""Configuration for path interning.

The sweep threshold can be supplied directly or through the
``WEAKPATHS_SWEEP_THRESHOLD`` environment variable::

    from weakpaths.config import InternerConfig

    config = InternerConfig.from_env()
    assert config.sweep_threshold >= 1
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

SWEEP_THRESHOLD_ENV: Final[str] = "WEAKPATHS_SWEEP_THRESHOLD"
DEFAULT_SWEEP_THRESHOLD: Final[int] = 128


@dataclass(frozen=True, slots=True)
class InternerConfig:
    """Tuning knobs for :class:`~weakpaths.interner.PathInterner`.

    Attributes:
        sweep_threshold: A sweep of dead cache entries runs after every
            ``sweep_threshold``-th path creation.
    """

    sweep_threshold: int = DEFAULT_SWEEP_THRESHOLD

    def __post_init__(self) -> None:
        if isinstance(self.sweep_threshold, bool) or not isinstance(
            self.sweep_threshold, int
        ):
            msg = f"sweep_threshold must be an int, got {self.sweep_threshold!r}."
            raise TypeError(msg)
        if self.sweep_threshold < 1:
            msg = f"sweep_threshold must be >= 1, got {self.sweep_threshold}."
            raise ValueError(msg)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> InternerConfig:
        """Build a config from ``env`` (defaults to :data:`os.environ`).

        Raises:
            ValueError: If the threshold variable is set but not a positive
                integer.
        """
        env = os.environ if env is None else env
        raw = env.get(SWEEP_THRESHOLD_ENV, "").strip()
        if not raw:
            return cls()
        try:
            threshold = int(raw)
        except ValueError:
            msg = f"{SWEEP_THRESHOLD_ENV} must be an integer, got {raw!r}."
            raise ValueError(msg) from None
        return cls(sweep_threshold=threshold)


__all__ = [
    "DEFAULT_SWEEP_THRESHOLD",
    "SWEEP_THRESHOLD_ENV",
    "InternerConfig",
]
