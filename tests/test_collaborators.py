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

"""Tests for the process, archive and sampling helpers."""

from __future__ import annotations

import random
import shutil
import subprocess
import sys
import zipfile
from pathlib import Path as StdPath
from typing import Any

import pytest

from weakpaths import archive, process
from weakpaths.archive import unzip, unzip_command
from weakpaths.process import run
from weakpaths.sampling import sample


class TestRun:
    """Tests for process.run."""

    def test_captures_output(self) -> None:
        result = run([sys.executable, "-c", "print('hi')"], stdout="pipe")
        assert result.returncode == 0
        assert result.stdout.strip() == b"hi"

    def test_check_raises_on_failure(self) -> None:
        with pytest.raises(subprocess.CalledProcessError):
            _ = run(
                [sys.executable, "-c", "raise SystemExit(3)"],
                check=True,
                stderr="null",
            )

    def test_without_check_returns_status(self) -> None:
        result = run([sys.executable, "-c", "raise SystemExit(3)"])
        assert result.returncode == 3

    def test_empty_command_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            _ = run([])

    def test_stream_modes_map_to_subprocess(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[dict[str, Any]] = []

        def fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
            calls.append({"command": command, **kwargs})
            return subprocess.CompletedProcess(command, 0)

        monkeypatch.setattr(process.subprocess, "run", fake_run)
        _ = run(("tool", "arg"), stdout="null", stderr="pipe", cwd="/work")

        assert calls == [
            {
                "command": ["tool", "arg"],
                "check": False,
                "stdout": subprocess.DEVNULL,
                "stderr": subprocess.PIPE,
                "cwd": "/work",
            }
        ]


class TestUnzip:
    """Tests for archive.unzip."""

    def test_posix_command(self) -> None:
        assert unzip_command("a.zip", "out", platform="linux") == [
            "unzip",
            "a.zip",
            "-d",
            "out",
        ]

    def test_windows_command(self) -> None:
        assert unzip_command(StdPath("a.zip"), "out", platform="win32")[:2] == [
            "PowerShell",
            "Expand-Archive",
        ]

    def test_unzip_runs_checked_and_quiet(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: list[tuple[list[str], dict[str, object]]] = []

        def fake_run(command: list[str], **kwargs: object) -> None:
            seen.append((command, kwargs))

        monkeypatch.setattr(archive, "run", fake_run)
        unzip("a.zip", "out")

        assert seen == [
            (
                unzip_command("a.zip", "out"),
                {"check": True, "stdout": "null", "stderr": "null"},
            )
        ]

    @pytest.mark.skipif(sys.platform == "win32", reason="uses the unzip tool")
    def test_unzip_extracts(self, tmp_path: StdPath) -> None:
        if shutil.which("unzip") is None:
            pytest.skip("unzip tool is not installed")
        bundle = tmp_path / "bundle.zip"
        with zipfile.ZipFile(bundle, "w") as handle:
            handle.writestr("inner/a.txt", "payload")
        unzip(bundle, tmp_path / "out")
        assert (tmp_path / "out" / "inner" / "a.txt").read_text() == "payload"


class TestSample:
    """Tests for sampling.sample."""

    def test_yields_distinct_items(self) -> None:
        items = list(range(20))
        picked = list(sample(items, 5, rng=random.Random(7)))
        assert len(picked) == len(set(picked)) == 5
        assert set(picked) <= set(items)

    def test_clamps_to_population(self) -> None:
        assert sorted(sample("abc", 10)) == ["a", "b", "c"]

    def test_non_positive_count_yields_nothing(self) -> None:
        assert list(sample([1, 2, 3], 0)) == []
        assert list(sample([1, 2, 3], -2)) == []

    def test_seeded_draws_are_reproducible(self) -> None:
        items = list("abcdefgh")
        first = list(sample(items, 4, rng=random.Random(1)))
        second = list(sample(items, 4, rng=random.Random(1)))
        assert first == second
