"""CLI - 引用解析、依赖 digest"""

from __future__ import annotations

import click

from chartlock.cli import _fail
from chartlock.core.exceptions import ChartlockError


def register(group: click.Group) -> None:
    group.add_command(ref)
    group.add_command(hash_cmd)


@click.command()
@click.argument("reference")
def ref(reference: str) -> None:
    """解析来源引用 [host[:port]/]path[:tag]"""
    from chartlock.core.reference import parse_reference
    try:
        parsed = parse_reference(reference)
    except ChartlockError as e:
        raise _fail(e) from e
    click.echo(f"repo: {parsed.repo}")
    click.echo(f"tag:  {parsed.tag}")


@click.command(name="hash")
@click.argument("chart_path", default=".")
def hash_cmd(chart_path: str) -> None:
    """计算 chart 依赖声明的 digest"""
    from chartlock.core.chart.loader import load_metadata
    from chartlock.core.resolver.hasher import hash_req
    try:
        metadata = load_metadata(chart_path)
    except ChartlockError as e:
        raise _fail(e) from e
    click.echo(hash_req(metadata.dependencies))
