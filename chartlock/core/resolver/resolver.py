"""依赖解析器

把声明的依赖列表解析为精确版本的 Lock:

  1. 校验版本约束（InvalidConstraint）
  2. 分类来源:
     - 本地路径: 读取该目录的 Chart.yaml，缺失、无法读取或版本不满足约束（ChartNotFound）
     - 索引来源: 定位索引缓存（RepoIndexMissing / RepoIndexInvalid），
       在条目中选满足约束的最高版本（ChartNotFound / NoMatchingVersion）
  3. 按输入顺序追加 (name, 原始 repository, 精确版本)

任一依赖失败即抛出异常，不返回部分结果。解析器只读文件，不写缓存、不访问网络。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from chartlock.core.chart.loader import load_metadata
from chartlock.core.chart.models import Dependency, Lock
from chartlock.core.constraint import Constraint, parse_constraint, parse_version
from chartlock.core.exceptions import (
    ChartNotFound,
    InvalidConstraint,
    NoMatchingVersion,
    RepoIndexInvalid,
    RepoIndexMissing,
    ValidationError,
)
from chartlock.core.repo.index import load_index_file
from chartlock.core.repo.repo_file import Home
from chartlock.core.resolver.hasher import hash_req
from chartlock.core.resolver.sources import IndexedSource, LocalPath, classify

logger = logging.getLogger(__name__)


class Resolver:
    """依赖解析器

    chart_path: 引用方 chart 的目录，本地路径依赖相对它解析
    home: home 目录，索引缓存位于 <home>/repository/cache/
    """

    def __init__(self, chart_path: str | Path, home: Home | str | Path) -> None:
        self.chart_path = Path(chart_path)
        self.home = home if isinstance(home, Home) else Home(home)

    def resolve(
        self,
        dependencies: Sequence[Dependency],
        alias_table: Mapping[str, str],
        digest: str = "",
        *,
        repo_names: Mapping[str, str] | None = None,
    ) -> Lock:
        """解析全部依赖并生成 Lock

        alias_table 以 repository 字符串（URL 或去掉前缀的别名）为键；
        repo_names 以依赖名为键（Helm repoNames 的约定），两张表互不混查。

        digest 参数仅用于和重新计算的结果比对，Lock.digest 总是基于
        dependencies 重新计算，避免调用方传入过期的值。
        """
        locked: list[Dependency] = []
        for dep in dependencies:
            constraint = self._constraint(dep)
            source = classify(dep.repository)
            if isinstance(source, LocalPath):
                version = self._resolve_local(dep, source, constraint)
            else:
                version = self._resolve_indexed(
                    dep, source, constraint, alias_table, repo_names or {},
                )
            logger.info("已锁定 %s@%s (%s)", dep.name, version, dep.repository)
            locked.append(Dependency(
                name=dep.name, repository=dep.repository, version=version,
            ))

        computed = hash_req(dependencies)
        if digest and digest != computed:
            logger.debug("调用方提供的 digest 已过期: %s != %s", digest, computed)
        return Lock(dependencies=locked, digest=computed)

    @staticmethod
    def _constraint(dep: Dependency) -> Constraint:
        try:
            return parse_constraint(dep.version)
        except ValueError as e:
            raise InvalidConstraint(
                f"依赖 {dep.name!r} 的版本约束格式无效: {dep.version!r} ({e})",
                dependency=dep.name, constraint=dep.version,
            ) from e

    def _resolve_local(
        self, dep: Dependency, source: LocalPath, constraint: Constraint,
    ) -> str:
        path = source.resolve(self.chart_path)
        try:
            metadata = load_metadata(path)
        except ChartNotFound as e:
            raise ChartNotFound(
                f"依赖 {dep.name!r} 的本地目录下没有 chart: {path}",
                dependency=dep.name,
            ) from e
        except ValidationError as e:
            raise ChartNotFound(
                f"依赖 {dep.name!r} 的本地 chart 清单无法读取: {path} ({e})",
                dependency=dep.name,
            ) from e

        try:
            satisfied = constraint.allows(parse_version(metadata.version))
        except ValueError:
            satisfied = False
        if not satisfied:
            raise ChartNotFound(
                f"依赖 {dep.name!r} 的本地 chart 版本 {metadata.version!r} "
                f"不满足约束 {dep.version!r}: {path}",
                dependency=dep.name,
            )
        return metadata.version

    def _cache_name(
        self,
        dep: Dependency,
        source: IndexedSource,
        alias_table: Mapping[str, str],
        repo_names: Mapping[str, str],
    ) -> str:
        name = alias_table.get(source.key) or repo_names.get(dep.name)
        if not name and source.is_alias:
            name = source.key
        if not name:
            raise RepoIndexMissing(
                f"依赖 {dep.name!r} 的仓库 {dep.repository!r} 没有对应的索引缓存"
                "（请先添加仓库并刷新）",
                dependency=dep.name,
            )
        return name

    def _resolve_indexed(
        self,
        dep: Dependency,
        source: IndexedSource,
        constraint: Constraint,
        alias_table: Mapping[str, str],
        repo_names: Mapping[str, str],
    ) -> str:
        cache_name = self._cache_name(dep, source, alias_table, repo_names)
        index_path = self.home.cache_index(cache_name)
        if not index_path.is_file():
            raise RepoIndexMissing(
                f"依赖 {dep.name!r} 的索引缓存不存在: {index_path}（请先刷新仓库）",
                dependency=dep.name,
            )
        try:
            index = load_index_file(index_path)
        except RepoIndexInvalid as e:
            # 索引加载层不知道是哪个依赖触发的，这里补上上下文
            raise RepoIndexInvalid(str(e), dependency=dep.name) from e

        if not index.has(dep.name):
            raise ChartNotFound(
                f"仓库 {dep.repository!r} 中没有 chart {dep.name!r}",
                dependency=dep.name,
            )
        best = index.get(dep.name, constraint)
        if best is None:
            raise NoMatchingVersion(
                f"仓库 {dep.repository!r} 中 chart {dep.name!r} "
                f"没有满足约束 {dep.version!r} 的版本",
                dependency=dep.name, constraint=dep.version,
            )
        return best.version
