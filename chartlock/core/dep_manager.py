"""依赖管理器

针对一个 chart 目录维护 Chart.lock:

  - update(): 重新解析全部依赖并写入 Chart.lock（内容不变则不重写）
  - build():  已有 Chart.lock 时校验其 digest 与当前声明一致，
              不一致抛出 LockOutOfSync；没有锁文件时等同 update()
  - list_status(): 列出每个声明依赖的锁定状态

仓库 URL 到索引缓存名的映射来自 repositories.yaml（RepoRegistry），
依赖的下载不在这里处理。

用法:
    from chartlock.core.dep_manager import DependencyManager

    dm = DependencyManager("charts/myapp", home="~/.chartlock")
    lock = dm.update()
    for row in dm.list_status():
        print(row["name"], row["status"])
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from chartlock.core.chart.loader import LOCK_FILE, load_lock, load_metadata
from chartlock.core.chart.models import Dependency, Lock, Metadata
from chartlock.core.exceptions import LockOutOfSync
from chartlock.core.repo.repo_file import Home, RepoRegistry
from chartlock.core.resolver.hasher import hash_req
from chartlock.core.resolver.resolver import Resolver
from chartlock.core.resolver.sources import IndexedSource, classify
from chartlock.utils.yaml_io import dump_yaml, save_yaml

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNLOCKED = "unlocked"
STATUS_STALE = "stale"


class DependencyManager:
    """单个 chart 目录的依赖锁定管理"""

    def __init__(
        self,
        chart_path: str | Path = "",
        home: Home | str | Path = "",
        registry: RepoRegistry | None = None,
    ) -> None:
        if not chart_path or not home:
            from chartlock.core.config import get_config
            cfg = get_config()
            chart_path = chart_path or cfg.chart_path
            home = home or cfg.home
        self.chart_path = Path(chart_path)
        self.home = home if isinstance(home, Home) else Home(home)
        self.registry = registry or RepoRegistry(self.home)
        self.resolver = Resolver(self.chart_path, self.home)

    @property
    def lock_path(self) -> Path:
        return self.chart_path / LOCK_FILE

    def _metadata(self) -> Metadata:
        return load_metadata(self.chart_path)

    def alias_table(self, dependencies: list[Dependency]) -> dict[str, str]:
        """repository 字符串 -> 索引缓存名

        @x / alias:x 直接映射为 x；已注册的仓库名（裸别名）映射为自身；
        URL 通过注册表反查；未注册的 URL 不放入映射，由解析器报告 RepoIndexMissing。
        """
        table: dict[str, str] = {}
        for dep in dependencies:
            source = classify(dep.repository)
            if not isinstance(source, IndexedSource):
                continue
            if source.is_alias or self.registry.get(source.key) is not None:
                table[source.key] = source.key
                continue
            name = self.registry.name_for_url(source.key)
            if name:
                table[source.key] = name
            else:
                logger.warning("仓库未注册: %s（依赖 %s）", dep.repository, dep.name)
        return table

    def update(self) -> Lock:
        """重新解析全部依赖并写入 Chart.lock"""
        metadata = self._metadata()
        deps = metadata.dependencies
        lock = self.resolver.resolve(deps, self.alias_table(deps), hash_req(deps))
        self._write_lock(lock)
        return lock

    def build(self) -> Lock:
        """校验已有 Chart.lock 与声明一致；没有锁文件则执行 update()"""
        metadata = self._metadata()
        lock = load_lock(self.chart_path)
        if lock is None:
            logger.info("%s 下没有锁文件，执行 update", self.chart_path)
            return self.update()
        if not lock.is_valid_for(metadata.dependencies):
            raise LockOutOfSync(
                f"{self.lock_path} 与 Chart.yaml 中的依赖声明不一致，"
                "请执行 dep update 重新生成",
            )
        logger.info("锁文件有效: %s", self.lock_path)
        return lock

    def list_status(self) -> list[dict[str, Any]]:
        """列出每个声明依赖的锁定状态"""
        metadata = self._metadata()
        lock = load_lock(self.chart_path)
        stale = lock is not None and not lock.is_valid_for(metadata.dependencies)
        results: list[dict[str, Any]] = []
        for dep in metadata.dependencies:
            locked = lock.version_of(dep.name) if lock else ""
            if not locked:
                status = STATUS_UNLOCKED
            elif stale:
                status = STATUS_STALE
            else:
                status = STATUS_OK
            results.append({
                "name": dep.name,
                "version": dep.version,
                "repository": dep.repository,
                "locked": locked,
                "status": status,
            })
        return results

    def _write_lock(self, lock: Lock) -> None:
        """写入 Chart.lock；内容不变时保持文件不动"""
        data = lock.to_dict()
        if self.lock_path.is_file():
            current = self.lock_path.read_text(encoding="utf-8")
            if current == dump_yaml(data):
                logger.info("锁文件未变化: %s", self.lock_path)
                return
        save_yaml(self.lock_path, data)
        logger.info("已写入锁文件: %s (%d 个依赖)", self.lock_path, len(lock.dependencies))
