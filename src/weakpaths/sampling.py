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

"""Random sampling without replacement."""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence

__all__ = ["sample"]


def sample[T](
    items: Sequence[T], n: int, *, rng: random.Random | None = None
) -> Iterator[T]:
    """Yield ``min(n, len(items))`` distinct items chosen uniformly at random.

    Items at distinct positions are never repeated. Pass a seeded
    :class:`random.Random` for reproducible draws.
    """
    count = max(0, min(n, len(items)))
    indices = (rng or random).sample(range(len(items)), count)  # nosec B311
    for index in indices:
        yield items[index]
