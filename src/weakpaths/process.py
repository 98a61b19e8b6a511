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

"""Thin process-spawning helper used by :mod:`weakpaths.archive`."""

from __future__ import annotations

import subprocess  # nosec: B404
from collections.abc import Sequence
from typing import IO, Final, Literal

from .logging import get_logger

__all__ = ["StreamMode", "run"]

_logger = get_logger(__name__)

StreamMode = Literal["inherit", "pipe", "null"]

_STREAMS: Final[dict[str, int | None]] = {
    "inherit": None,
    "pipe": subprocess.PIPE,
    "null": subprocess.DEVNULL,
}


def run(
    command: Sequence[str],
    *,
    check: bool = False,
    stdout: StreamMode = "inherit",
    stderr: StreamMode = "inherit",
    cwd: str | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Run ``command`` (an argument list, never a shell string).

    Args:
        command: Program and arguments.
        check: Raise :class:`subprocess.CalledProcessError` on a non-zero
            exit status.
        stdout: ``"inherit"`` the parent stream, capture it (``"pipe"``) or
            discard it (``"null"``).
        stderr: Same choices as ``stdout``.
        cwd: Working directory for the child.
    """
    if not command:
        raise ValueError("command must not be empty.")
    _logger.debug(
        "Running command.",
        event="weakpaths.process.run",
        context={"command": list(command), "cwd": cwd},
    )
    stdout_target: int | IO[bytes] | None = _STREAMS[stdout]
    stderr_target: int | IO[bytes] | None = _STREAMS[stderr]
    return subprocess.run(  # nosec B603
        list(command),
        check=check,
        stdout=stdout_target,
        stderr=stderr_target,
        cwd=cwd,
    )
