"""CLI - 仓库注册命令"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chartlock.cli import _fail
from chartlock.core.exceptions import ChartlockError

if TYPE_CHECKING:
    from chartlock.core.repo.repo_file import RepoRegistry


def register(group: click.Group) -> None:
    group.add_command(repo)


def _registry() -> RepoRegistry:
    from chartlock.core.config import get_config
    from chartlock.core.repo.repo_file import Home, RepoRegistry
    return RepoRegistry(Home(get_config().home))


@click.group()
def repo() -> None:
    """仓库注册（add / list / remove）"""


@repo.command()
@click.argument("name")
@click.argument("url")
@click.option("--force", is_flag=True, help="覆盖同名仓库")
def add(name: str, url: str, force: bool) -> None:
    """注册仓库（索引缓存需由刷新流程写入 cache 目录）"""
    try:
        _registry().add(name, url, force=force)
    except ChartlockError as e:
        raise _fail(e) from e
    click.echo(f"已注册: {name} -> {url}")


@repo.command(name="list")
def list_repos() -> None:
    """列出已注册仓库"""
    entries = _registry().list()
    if not entries:
        click.echo("没有已注册的仓库。")
        return
    for e in entries:
        click.echo(f"  {e['name']:20s} {e['url']}")


@repo.command()
@click.argument("name")
def remove(name: str) -> None:
    """删除仓库"""
    if not _registry().remove(name):
        raise click.ClickException(f"仓库不存在: {name}")
    click.echo(f"已删除: {name}")
