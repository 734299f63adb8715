"""集中配置管理

提供统一的配置入口：chartlock home 目录、默认 chart 目录。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

from chartlock.core.exceptions import ConfigError
from chartlock.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

HOME_ENV = "CHARTLOCK_HOME"


def default_home() -> str:
    """home 目录：优先环境变量 CHARTLOCK_HOME，否则 ~/.chartlock"""
    return os.environ.get(HOME_ENV) or str(Path.home() / ".chartlock")


@dataclass
class Config:
    """全局配置"""

    # 目录
    home: str = field(default_factory=default_home)
    chart_path: str = "."

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "chartlock.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        for key, value in matched.items():
            if not isinstance(value, str):
                raise ConfigError(f"配置项 {key} 必须是字符串: {value!r} ({path})")
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "chartlock.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
