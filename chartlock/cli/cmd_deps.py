"""CLI - 依赖锁定命令"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chartlock.cli import _fail
from chartlock.core.chart.models import Lock
from chartlock.core.exceptions import ChartlockError

if TYPE_CHECKING:
    from chartlock.core.dep_manager import DependencyManager


def register(group: click.Group) -> None:
    group.add_command(dep)


def _manager(chart_path: str) -> DependencyManager:
    # 未指定目录时使用配置中的 chart_path
    from chartlock.core.config import get_config
    from chartlock.core.dep_manager import DependencyManager
    return DependencyManager(chart_path, home=get_config().home)


def _echo_lock(lock: Lock) -> None:
    for d in lock.dependencies:
        click.echo(f"  {d.name:20s} {d.version:12s} {d.repository}")
    click.echo(f"digest: {lock.digest}")


@click.group()
def dep() -> None:
    """依赖锁定（update / build / list）"""


@dep.command()
@click.argument("chart_path", default="")
def update(chart_path: str) -> None:
    """重新解析依赖并写入 Chart.lock"""
    try:
        lock = _manager(chart_path).update()
    except ChartlockError as e:
        raise _fail(e) from e
    click.echo(f"已锁定 {len(lock.dependencies)} 个依赖:")
    _echo_lock(lock)


@dep.command()
@click.argument("chart_path", default="")
def build(chart_path: str) -> None:
    """校验 Chart.lock 与声明一致（无锁文件时执行 update）"""
    try:
        lock = _manager(chart_path).build()
    except ChartlockError as e:
        raise _fail(e) from e
    click.echo("锁文件有效:")
    _echo_lock(lock)


@dep.command(name="list")
@click.argument("chart_path", default="")
def list_deps(chart_path: str) -> None:
    """列出声明的依赖及锁定状态"""
    try:
        rows = _manager(chart_path).list_status()
    except ChartlockError as e:
        raise _fail(e) from e
    if not rows:
        click.echo("没有声明任何依赖。")
        return
    click.echo(f"  {'NAME':20s} {'VERSION':12s} {'LOCKED':12s} {'STATUS':9s} REPOSITORY")
    for r in rows:
        click.echo(
            f"  {r['name']:20s} {r['version'] or '*':12s} "
            f"{r['locked'] or '-':12s} {r['status']:9s} {r['repository']}"
        )
