"""依赖来源分类

解析开始时对 repository 字段做一次分类，后续只按类型分派，不再重复嗅探字符串:
  - LocalPath:     file:// 前缀，相对引用方 chart 目录解析
  - IndexedSource: URL、@alias、alias:name 或裸别名，通过索引缓存解析
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chartlock.core.chart.models import LOCAL_SCHEME

ALIAS_PREFIXES = ("@", "alias:")


@dataclass(frozen=True)
class LocalPath:
    """本地目录来源"""

    path: str

    def resolve(self, chart_path: str | Path) -> Path:
        p = Path(self.path)
        if p.is_absolute():
            return p
        return Path(chart_path) / p


@dataclass(frozen=True)
class IndexedSource:
    """索引来源；key 为 URL 或去掉前缀后的别名"""

    key: str
    is_alias: bool = False


Source = LocalPath | IndexedSource


def classify(repository: str) -> Source:
    if repository.startswith(LOCAL_SCHEME):
        return LocalPath(path=repository[len(LOCAL_SCHEME):])
    for prefix in ALIAS_PREFIXES:
        if repository.startswith(prefix):
            return IndexedSource(key=repository[len(prefix):], is_alias=True)
    return IndexedSource(key=repository)
