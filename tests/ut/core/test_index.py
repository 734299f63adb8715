"""仓库索引缓存测试"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from chartlock.core.constraint import parse_constraint
from chartlock.core.exceptions import RepoIndexInvalid, RepoIndexMissing
from chartlock.core.repo.index import load_index_file
from chartlock.core.repo.repo_file import Home


class TestLoadIndexFile:
    def test_entries_sorted_descending(self, make_index: Callable[..., Path]) -> None:
        path = make_index("stable", {"alpine": ["0.1.0", "0.10.0", "0.2.0", "0.2.0-rc.1"]})
        index = load_index_file(path)
        assert index.api_version == "v1"
        assert [cv.version for cv in index.entries["alpine"]] == [
            "0.10.0", "0.2.0", "0.2.0-rc.1", "0.1.0",
        ]

    def test_missing_file(self, home: Home) -> None:
        with pytest.raises(RepoIndexMissing):
            load_index_file(home.cache_index("nope"))

    @pytest.mark.parametrize("raw", [
        "entries: [unclosed\n",
        "- just\n- a list\n",
        "entries: {}\n",
        "apiVersion: v1\nentries: [a, b]\n",
        "apiVersion: v1\nentries:\n  alpine: 0.1.0\n",
        "",
    ])
    def test_invalid_content(self, make_index: Callable[..., Path], raw: str) -> None:
        with pytest.raises(RepoIndexInvalid):
            load_index_file(make_index("bad", raw=raw))

    def test_empty_entries_allowed(self, make_index: Callable[..., Path]) -> None:
        index = load_index_file(make_index("empty", raw="apiVersion: v1\n"))
        assert index.entries == {}
        assert not index.has("alpine")


class TestIndexGet:
    def test_highest_satisfying(self, home: Home) -> None:
        index = load_index_file(home.cache_index("kubernetes-charts"))
        best = index.get("mariadb", parse_constraint("<1.0.0"))
        assert best is not None
        assert best.version == "0.4.1"
        assert best.urls == ["http://example.com/mariadb-0.4.1.tgz"]

    def test_unknown_chart(self, home: Home) -> None:
        index = load_index_file(home.cache_index("kubernetes-charts"))
        assert index.get("redis", parse_constraint("*")) is None

    def test_original_version_string_kept(self, make_index: Callable[..., Path]) -> None:
        index = load_index_file(make_index("v", raw=(
            "apiVersion: v1\n"
            "entries:\n"
            "  app:\n"
            "    - {version: v1.4, urls: [http://x/app.tgz]}\n"
        )))
        best = index.get("app", parse_constraint("^1.0.0"))
        assert best is not None
        assert best.version == "v1.4"
        assert best.name == "app"
