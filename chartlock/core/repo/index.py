"""仓库索引缓存

索引文件（<alias>-index.yaml）由外部的仓库刷新流程下载到 cache 目录，
这里只负责读取和查询，从不访问网络。

格式:
  apiVersion: v1
  entries:
    alpine:
      - name: alpine
        version: 0.2.0
        urls: [https://example.com/alpine-0.2.0.tgz]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from semantic_version import Version

from chartlock.core.exceptions import RepoIndexInvalid, RepoIndexMissing
from chartlock.core.constraint import Constraint, parse_version
from chartlock.utils.yaml_io import StrScalarLoader, read_yaml

logger = logging.getLogger(__name__)


@dataclass
class ChartVersion:
    """索引中的一个 chart 版本"""

    name: str
    version: str
    urls: list[str] = field(default_factory=list)
    digest: str = ""
    description: str = ""

    @property
    def semver(self) -> Version | None:
        """解析后的版本，无法解析时返回 None"""
        try:
            return parse_version(self.version)
        except ValueError:
            return None


def _sort_key(cv: ChartVersion) -> tuple[bool, Version]:
    v = cv.semver
    return (v is not None, v or Version("0.0.0"))


@dataclass
class IndexFile:
    """一个来源的索引"""

    api_version: str
    entries: dict[str, list[ChartVersion]] = field(default_factory=dict)

    def sort_entries(self) -> None:
        """各 chart 的版本按语义化版本降序排列，无法解析的排在最后"""
        for versions in self.entries.values():
            versions.sort(key=_sort_key, reverse=True)

    def has(self, name: str) -> bool:
        return name in self.entries

    def get(self, name: str, constraint: Constraint) -> ChartVersion | None:
        """返回满足约束的最高版本

        版本号无法解析或没有下载地址的条目视为无效条目，直接跳过。
        """
        candidates: dict[Version, ChartVersion] = {}
        for cv in self.entries.get(name, []):
            v = cv.semver
            if v is None or not cv.urls:
                logger.debug("跳过无效索引条目: %s %s", name, cv.version)
                continue
            candidates.setdefault(v, cv)
        best = constraint.select(candidates)
        return candidates[best] if best is not None else None


def _parse_entries(raw: Any, path: Path) -> dict[str, list[ChartVersion]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise RepoIndexInvalid(f"索引 entries 必须是映射: {path}")
    entries: dict[str, list[ChartVersion]] = {}
    for name, versions in raw.items():
        if not isinstance(versions, list):
            raise RepoIndexInvalid(f"索引条目 {name} 必须是列表: {path}")
        parsed = []
        for item in versions:
            if not isinstance(item, dict):
                raise RepoIndexInvalid(f"索引条目 {name} 含非法元素: {path}")
            urls = item.get("urls") or []
            parsed.append(ChartVersion(
                name=str(item.get("name") or name),
                version=str(item.get("version") or ""),
                urls=[str(u) for u in urls] if isinstance(urls, list) else [str(urls)],
                digest=str(item.get("digest") or ""),
                description=str(item.get("description") or ""),
            ))
        entries[str(name)] = parsed
    return entries


def load_index_file(path: str | Path) -> IndexFile:
    """读取并校验索引缓存文件

    异常:
        RepoIndexMissing: 文件不存在
        RepoIndexInvalid: 内容无法解析或缺少 apiVersion
    """
    p = Path(path)
    if not p.is_file():
        raise RepoIndexMissing(f"索引缓存不存在: {p}（请先刷新仓库）")

    try:
        data = read_yaml(p, StrScalarLoader)
    except (yaml.YAMLError, ValueError) as e:
        raise RepoIndexInvalid(f"索引缓存无法解析: {p}: {e}") from e

    if not isinstance(data, dict):
        raise RepoIndexInvalid(f"索引缓存内容不是映射: {p}")
    api_version = data.get("apiVersion")
    if not api_version:
        raise RepoIndexInvalid(f"索引缓存缺少 apiVersion: {p}")

    index = IndexFile(
        api_version=str(api_version),
        entries=_parse_entries(data.get("entries"), p),
    )
    index.sort_entries()
    logger.debug("已加载索引 %s: %d 个 chart", p, len(index.entries))
    return index
