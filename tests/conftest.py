"""共享 fixture - 在 tmp_path 下构造 chart 目录与 home 索引缓存"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from chartlock.core.repo.repo_file import Home

STABLE_URL = "http://example.com"

# 与 kubernetes-charts 缓存一致的最小索引
DEFAULT_INDEX: dict[str, list[str]] = {
    "alpine": ["0.1.0", "0.2.0"],
    "mariadb": ["0.3.0", "0.4.1", "1.0.0-beta.1"],
}


def _index_doc(entries: dict[str, list[str]]) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "entries": {
            name: [
                {
                    "name": name,
                    "version": ver,
                    "urls": [f"{STABLE_URL}/{name}-{ver}.tgz"],
                }
                for ver in versions
            ]
            for name, versions in entries.items()
        },
    }


@pytest.fixture()
def home(tmp_path: Path) -> Home:
    """带 kubernetes-charts 索引缓存的 home 目录"""
    h = Home(tmp_path / "home")
    h.cache().mkdir(parents=True)
    h.cache_index("kubernetes-charts").write_text(
        yaml.safe_dump(_index_doc(DEFAULT_INDEX)), encoding="utf-8",
    )
    return h


@pytest.fixture()
def make_index(home: Home) -> Callable[..., Path]:
    """在 home 下写入一个索引缓存: make_index("name", {"chart": ["1.0.0"]})"""

    def _make(name: str, entries: dict[str, list[str]] | None = None, raw: str | None = None) -> Path:
        path = home.cache_index(name)
        if raw is not None:
            path.write_text(raw, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(_index_doc(entries or {})), encoding="utf-8")
        return path

    return _make


@pytest.fixture()
def make_chart(tmp_path: Path) -> Callable[..., Path]:
    """写入 chart 目录: make_chart("app", version="1.0.0", dependencies=[...])"""

    def _make(
        rel: str,
        *,
        name: str = "",
        version: str = "0.1.0",
        api_version: str = "v2",
        dependencies: list[dict[str, Any]] | None = None,
        values: dict[str, Any] | None = None,
    ) -> Path:
        root = tmp_path / rel
        root.mkdir(parents=True, exist_ok=True)
        meta: dict[str, Any] = {
            "apiVersion": api_version,
            "name": name or Path(rel).name,
            "version": version,
        }
        if dependencies is not None:
            meta["dependencies"] = dependencies
        (root / "Chart.yaml").write_text(yaml.safe_dump(meta, sort_keys=False), encoding="utf-8")
        if values is not None:
            (root / "values.yaml").write_text(yaml.safe_dump(values), encoding="utf-8")
        return root

    return _make
