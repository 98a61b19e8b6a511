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

"""Tests for :mod:`weakpaths.interner`."""

from __future__ import annotations

import gc
import os
import sys
import threading
from collections.abc import Callable
from pathlib import Path as StdPath

import pytest
from hypothesis import given, settings, strategies as st

from weakpaths import (
    DEFAULT_INTERNER,
    HomeDirectoryUnresolvedError,
    InternerConfig,
    InvalidUrlError,
    Path,
    PathInterner,
)
from weakpaths.interner import canonical_key, file_url_to_path

InternerFactory = Callable[..., PathInterner]

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX paths")

_segment = st.text(
    alphabet=st.characters(categories=("Ll", "Lu", "Nd")),
    min_size=1,
    max_size=8,
)


class TestCanonicalKey:
    """Tests for canonical_key."""

    def test_no_segments_is_current_directory(self) -> None:
        assert canonical_key() == "."

    @posix_only
    def test_joins_with_separator(self) -> None:
        assert canonical_key("a", "b", "c.txt") == "a/b/c.txt"

    @posix_only
    def test_absolute_segment_restarts_join(self) -> None:
        assert canonical_key("a", "/b", "c") == "/b/c"

    @posix_only
    def test_normalizes_lexically(self) -> None:
        assert canonical_key("a//b/./c/") == "a/b/c"
        assert canonical_key("/this/is/a/test/path/file.ext", "..") == (
            "/this/is/a/test/path"
        )

    @posix_only
    def test_accepts_path_like_segments(self) -> None:
        assert canonical_key(StdPath("a"), "b") == "a/b"

    @given(st.lists(_segment, min_size=1, max_size=5))
    @settings(max_examples=50)
    def test_join_matches_single_string(self, segments: list[str]) -> None:
        assert canonical_key(*segments) == canonical_key(os.sep.join(segments))


class TestInterning:
    """Tests for PathInterner.from_segments."""

    def test_equal_keys_share_instance(self, interner: PathInterner) -> None:
        first = interner.from_segments("a", "b")
        assert interner.from_segments(os.path.join("a", "b")) is first

    def test_distinct_keys_get_distinct_instances(
        self, interner: PathInterner
    ) -> None:
        assert interner.from_segments("a") is not interner.from_segments("b")

    def test_creation_counter_counts_constructions_only(
        self, interner: PathInterner
    ) -> None:
        kept = interner.from_segments("a")
        _ = interner.from_segments("a")
        _ = interner.from_segments("b")
        assert interner.created == 2
        assert kept.filepath == "a"

    def test_cache_holds_no_strong_reference(self, interner: PathInterner) -> None:
        path = interner.from_segments("transient")
        assert "transient" in interner
        del path
        _ = gc.collect()
        assert "transient" not in interner

    def test_interners_are_independent(
        self, interner_factory: InternerFactory
    ) -> None:
        first, second = interner_factory(), interner_factory()
        assert first.from_segments("x") is not second.from_segments("x")

    def test_derived_paths_use_owning_interner(self, interner: PathInterner) -> None:
        base = interner.from_segments("base")
        child = base.joinpath("child")
        assert child is interner.from_segments("base", "child")
        assert child is not DEFAULT_INTERNER.from_segments("base", "child")

    def test_concurrent_interning_keeps_one_instance(
        self, interner: PathInterner
    ) -> None:
        results: list[Path] = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker() -> None:
            _ = barrier.wait()
            path = interner.from_segments("shared", "key")
            with lock:
                results.append(path)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(path) for path in results}) == 1


class TestSweep:
    """Tests for sweeping dead cache entries."""

    def test_sweep_removes_dead_entries(self, interner: PathInterner) -> None:
        kept = interner.from_segments("kept")
        batch = [interner.from_segments(f"tmp{i}") for i in range(3)]
        assert len(interner) == 4

        del batch
        _ = gc.collect()

        assert interner.sweep() == 3
        assert len(interner) == 1
        assert interner.live_count() == 1
        assert "kept" in interner
        assert kept is interner.from_segments("kept")

    def test_sweep_is_idempotent(self, interner: PathInterner) -> None:
        interner.from_segments("gone")
        _ = gc.collect()
        assert interner.sweep() == 1
        assert interner.sweep() == 0

    def test_sweep_runs_on_threshold(
        self, interner_factory: InternerFactory
    ) -> None:
        interner = interner_factory(sweep_threshold=4)
        first_batch = [interner.from_segments(f"first{i}") for i in range(3)]
        del first_batch
        _ = gc.collect()
        assert len(interner) == 3

        # The fourth creation triggers a sweep of the three dead entries.
        fourth = interner.from_segments("fourth")
        assert len(interner) == 1
        assert "fourth" in interner

        # Releasing and re-requesting a key builds a fresh instance.
        del fourth
        _ = gc.collect()
        assert "fourth" not in interner
        replacement = interner.from_segments("fourth")
        assert replacement.filepath == "fourth"
        assert interner.created == 5

    def test_sweep_logs_event(
        self, interner: PathInterner, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("DEBUG", logger="weakpaths.interner"):
            _ = interner.sweep()
        record = caplog.records[-1]
        assert record.event == "weakpaths.interner.sweep"  # type: ignore[attr-defined]
        assert record.context == {"removed": 0, "remaining": 0}  # type: ignore[attr-defined]


class TestFactories:
    """Tests for cwd, home and URL-based factories."""

    def test_cwd_joins_working_directory(
        self, interner: PathInterner, tmp_path: StdPath, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert interner.cwd("x").filepath == os.path.join(os.getcwd(), "x")

    @posix_only
    def test_home_joins_home_directory(self, interner: PathInterner) -> None:
        assert interner.home(".config", "tool").filepath == "/home/alice/.config/tool"

    def test_home_without_home_raises(
        self, interner_factory: InternerFactory
    ) -> None:
        interner = interner_factory(home=None)
        with pytest.raises(HomeDirectoryUnresolvedError):
            _ = interner.home()

    def test_home_with_cleared_environment_raises(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.delenv("USERPROFILE", raising=False)
        with pytest.raises(HomeDirectoryUnresolvedError, match="home path"):
            _ = PathInterner().home("x")

    @posix_only
    def test_from_file_url_decodes_path(self, interner: PathInterner) -> None:
        path = interner.from_file_url("file:///tmp/with%20space/a.txt")
        assert path.filepath == "/tmp/with space/a.txt"

    @posix_only
    def test_from_file_url_accepts_localhost(self, interner: PathInterner) -> None:
        assert interner.from_file_url("file://localhost/etc/hosts").filepath == (
            "/etc/hosts"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a.txt",
            "/plain/path",
            "file://",
            "file://[::1/a.txt",
        ],
    )
    def test_from_file_url_rejects_invalid(
        self, interner: PathInterner, url: str
    ) -> None:
        with pytest.raises(InvalidUrlError):
            _ = interner.from_file_url(url)

    @posix_only
    def test_path_only_url_is_rooted(self, interner: PathInterner) -> None:
        assert interner.from_file_url("file:a.txt").filepath == "/a.txt"

    @posix_only
    def test_remote_host_is_rejected(self) -> None:
        with pytest.raises(InvalidUrlError, match="local"):
            _ = file_url_to_path("file://server/share/a.txt")

    def test_from_module_returns_module_file(self, interner: PathInterner) -> None:
        assert interner.from_module(__file__).filepath == os.path.abspath(__file__)

    def test_from_module_resolves_directory(self, interner: PathInterner) -> None:
        directory = interner.from_module(__file__, ".")
        assert directory.filepath == os.path.dirname(os.path.abspath(__file__))

    def test_from_module_resolves_sibling(self, interner: PathInterner) -> None:
        sibling = interner.from_module(__file__, "conftest.py")
        assert sibling.is_file()

    def test_from_module_accepts_file_url(self, interner: PathInterner) -> None:
        url = StdPath(os.path.abspath(__file__)).as_uri()
        parent = interner.from_module(url, "../README.md")
        assert parent.name == "README.md"


class TestConfig:
    """Tests for InternerConfig."""

    def test_default_threshold(self) -> None:
        assert InternerConfig().sweep_threshold == 128

    def test_rejects_non_positive_threshold(self) -> None:
        with pytest.raises(ValueError, match=">= 1"):
            _ = InternerConfig(sweep_threshold=0)

    def test_rejects_non_int_threshold(self) -> None:
        with pytest.raises(TypeError):
            _ = InternerConfig(sweep_threshold=True)

    def test_from_env_reads_threshold(self) -> None:
        config = InternerConfig.from_env({"WEAKPATHS_SWEEP_THRESHOLD": " 16 "})
        assert config.sweep_threshold == 16

    def test_from_env_defaults_when_unset(self) -> None:
        assert InternerConfig.from_env({}).sweep_threshold == 128

    def test_from_env_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="must be an integer"):
            _ = InternerConfig.from_env({"WEAKPATHS_SWEEP_THRESHOLD": "many"})
