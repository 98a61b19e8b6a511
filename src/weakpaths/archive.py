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

"""Archive extraction through the platform's unzip tool."""

from __future__ import annotations

import os
import sys

from .process import run

__all__ = ["unzip", "unzip_command"]


def unzip_command(
    zip_path: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    *,
    platform: str | None = None,
) -> list[str]:
    """Return the command extracting ``zip_path`` into ``destination``.

    Windows uses PowerShell's ``Expand-Archive``; other platforms use
    ``unzip``.
    """
    archive, target = os.fspath(zip_path), os.fspath(destination)
    platform = sys.platform if platform is None else platform
    if platform == "win32":
        return [
            "PowerShell",
            "Expand-Archive",
            "-Path",
            archive,
            "-DestinationPath",
            target,
        ]
    return ["unzip", archive, "-d", target]


def unzip(zip_path: str | os.PathLike[str], destination: str | os.PathLike[str]) -> None:
    """Extract ``zip_path`` into ``destination``, discarding tool output.

    Raises:
        subprocess.CalledProcessError: If the tool exits with an error.
    """
    _ = run(
        unzip_command(zip_path, destination), check=True, stdout="null", stderr="null"
    )
