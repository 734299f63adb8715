"""Chart 树测试 - 挂载、路径计算、环检测"""

from __future__ import annotations

import gc

import pytest

from chartlock.core.chart.chart import Chart
from chartlock.core.chart.models import Metadata
from chartlock.core.exceptions import DependencyCycleError


def _chart(name: str) -> Chart:
    return Chart(Metadata(name=name, version="0.1.0", api_version="v2"))


@pytest.fixture()
def tree() -> tuple[Chart, Chart, Chart]:
    root, child, grandchild = _chart("foo"), _chart("bar"), _chart("baz")
    root.add_dependency(child)
    child.add_dependency(grandchild)
    return root, child, grandchild


class TestPaths:
    def test_root_chart(self) -> None:
        root = _chart("foo")
        assert root.is_root()
        assert root.root() is root
        assert root.chart_path() == "foo"
        assert root.chart_full_path() == "foo"

    def test_nested(self, tree: tuple[Chart, Chart, Chart]) -> None:
        root, child, grandchild = tree
        assert not grandchild.is_root()
        assert grandchild.parent is child
        assert grandchild.root() is root
        assert grandchild.chart_path() == "foo.bar.baz"
        assert grandchild.chart_full_path() == "foo/charts/bar/charts/baz"

    def test_name_without_metadata(self) -> None:
        assert Chart().name == ""


class TestAddDependency:
    def test_append_order(self) -> None:
        root = _chart("foo")
        a, b, c = _chart("a"), _chart("b"), _chart("c")
        root.add_dependency(a, b)
        root.add_dependency(c)
        assert [d.name for d in root.dependencies] == ["a", "b", "c"]
        assert all(d.parent is root for d in root.dependencies)

    def test_reparent_detaches_from_old_owner(self) -> None:
        old, new, child = _chart("old"), _chart("new"), _chart("child")
        old.add_dependency(child)
        new.add_dependency(child)
        assert child.parent is new
        assert old.dependencies == ()
        assert new.dependencies == (child,)

    def test_set_dependencies_replaces(self) -> None:
        root = _chart("foo")
        a, b = _chart("a"), _chart("b")
        root.add_dependency(a)
        root.set_dependencies(b)
        assert root.dependencies == (b,)
        assert a.is_root()
        assert b.parent is root

    def test_self_cycle_rejected(self) -> None:
        root = _chart("foo")
        with pytest.raises(DependencyCycleError):
            root.add_dependency(root)
        assert root.dependencies == ()

    def test_ancestor_cycle_rejected(self, tree: tuple[Chart, Chart, Chart]) -> None:
        root, child, grandchild = tree
        other = _chart("other")
        with pytest.raises(DependencyCycleError):
            grandchild.add_dependency(other, root)
        # 整批拒绝，不做部分修改
        assert grandchild.dependencies == ()
        assert other.is_root()
        assert root.is_root()

    def test_parent_reference_is_weak(self) -> None:
        parent, child = _chart("parent"), _chart("child")
        parent.add_dependency(child)
        del parent
        gc.collect()
        assert child.is_root()
        assert child.chart_path() == "child"
