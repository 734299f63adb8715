"""chartlock 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os

import click

from chartlock import __version__
from chartlock.core.config import HOME_ENV, get_config, init_config
from chartlock.core.exceptions import ChartlockError
from chartlock.utils.logger import setup_logging


def _fail(exc: ChartlockError) -> click.ClickException:
    """业务异常转为 click 错误（退出码 1，输出到 stderr）"""
    return click.ClickException(f"[{exc.code}] {exc}")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", default="chartlock.yml", help="配置文件路径")
@click.option("--home", envvar=HOME_ENV, default=None, help="chartlock home 目录")
def main(config: str, home: str | None) -> None:
    """chartlock - Chart 依赖解析与锁定"""
    setup_logging(
        level=os.getenv("CHARTLOCK_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("CHARTLOCK_LOG_JSON", "") == "1",
    )
    try:
        init_config(config)
    except ChartlockError as e:
        raise _fail(e) from e
    if home:
        get_config().home = home


# 注册各领域子命令
from chartlock.cli.cmd_deps import register as _reg_deps  # noqa: E402
from chartlock.cli.cmd_misc import register as _reg_misc  # noqa: E402
from chartlock.cli.cmd_repo import register as _reg_repo  # noqa: E402

_reg_deps(main)
_reg_repo(main)
_reg_misc(main)
