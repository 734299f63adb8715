"""Chart 树

一个 Chart 独占其子 chart（依赖），子 chart 通过弱引用指回父节点，
父引用只用于向上导航（root / chart_path），不参与生命周期管理。

不变量: 任何节点都不会成为自己的祖先。挂载前沿父节点的祖先链检查，
违反时抛出 DependencyCycleError 且不做任何修改。

重新挂载是原子的: 已属于其他父节点的子 chart 会先从旧父节点的列表中摘除。
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from typing import Any

from chartlock.core.chart.models import File, Lock, Metadata
from chartlock.core.exceptions import DependencyCycleError


class Chart:
    """一个 chart 包: 元信息、默认配置、模板、文件以及零个或多个子 chart"""

    def __init__(
        self,
        metadata: Metadata | None = None,
        *,
        lock: Lock | None = None,
        templates: list[File] | None = None,
        files: list[File] | None = None,
        values: dict[str, Any] | None = None,
    ) -> None:
        self.metadata = metadata
        self.lock = lock
        self.templates: list[File] = list(templates or [])
        self.files: list[File] = list(files or [])
        self.values: dict[str, Any] = dict(values or {})
        self._parent: weakref.ReferenceType[Chart] | None = None
        self._dependencies: list[Chart] = []

    def __repr__(self) -> str:
        return f"Chart({self.chart_path()!r})"

    @property
    def name(self) -> str:
        if self.metadata is None:
            return ""
        return self.metadata.name

    @property
    def parent(self) -> Chart | None:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def dependencies(self) -> tuple[Chart, ...]:
        return tuple(self._dependencies)

    def is_root(self) -> bool:
        return self.parent is None

    def ancestors(self) -> Iterator[Chart]:
        """从父节点开始向上逐级产出祖先"""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> Chart:
        node = self
        for node in self.ancestors():
            pass
        return node

    def add_dependency(self, *charts: Chart) -> None:
        """挂载子 chart，并把每个子 chart 的父引用指向自己

        异常:
            DependencyCycleError: 待挂载节点是自己或自己的祖先
        """
        lineage = {id(self)} | {id(a) for a in self.ancestors()}
        for child in charts:
            if id(child) in lineage:
                raise DependencyCycleError(
                    f"不能把 {child.name or '<unnamed>'} 挂到 "
                    f"{self.chart_path() or '<unnamed>'} 下: 会形成环",
                )

        for child in charts:
            old = child.parent
            if old is not None:
                old._detach(child)
            child._parent = weakref.ref(self)
            self._dependencies.append(child)

    def set_dependencies(self, *charts: Chart) -> None:
        """替换全部子 chart"""
        for child in list(self._dependencies):
            self._detach(child)
        self.add_dependency(*charts)

    def _detach(self, child: Chart) -> None:
        self._dependencies = [c for c in self._dependencies if c is not child]
        if child.parent is self:
            child._parent = None

    def _lineage(self) -> list[Chart]:
        chain = [self, *self.ancestors()]
        chain.reverse()
        return chain

    def chart_path(self) -> str:
        """点号分隔的完整路径，如 parent.child"""
        return ".".join(c.name for c in self._lineage())

    def chart_full_path(self) -> str:
        """归档内的目录路径，如 parent/charts/child"""
        return "/charts/".join(c.name for c in self._lineage())
