"""YAML 文件统一读写工具

集中管理 Chart.yaml / Chart.lock / 索引缓存 / repositories.yaml 的读写，
统一 encoding="utf-8"、空值保护、目录自动创建、原子写入。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# YAML 文件最大大小限制 (10MB)，索引缓存可能较大但不应超过此值
MAX_YAML_SIZE = 10 * 1024 * 1024


class StrScalarLoader(yaml.SafeLoader):
    """数字形态的纯标量保留原文字符串，其余与 SafeLoader 相同

    Chart.yaml / 索引缓存中未加引号的版本号（如 0.10、1.10）不能当作浮点数解析，
    否则 str() 后会变成 0.1、1.1。
    """


_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")
StrScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏

    参数:
        path: 目标文件路径
        content: 要写入的内容

    异常:
        OSError: 文件写入或移动失败
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_yaml(path: str | Path, loader: type = yaml.SafeLoader) -> Any:
    """读取 YAML 文件，返回原始解析结果（可能是任意类型）

    与 load_yaml 不同，不做字典类型保护，供需要自行校验结构的调用方使用
    （如索引文件解析需要区分“空文件”和“格式错误”）。
    loader 默认 SafeLoader；需要保留版本号原文时传 StrScalarLoader。

    异常:
        FileNotFoundError: 文件不存在
        ValueError: 文件过大（超过 MAX_YAML_SIZE）
        yaml.YAMLError: YAML 格式错误
    """
    p = Path(path)
    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"YAML 文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_YAML_SIZE} 字节"
        )
    with open(p, encoding="utf-8") as f:
        return yaml.load(f, Loader=loader)  # noqa: S506


def load_yaml(path: str | Path, loader: type = yaml.SafeLoader) -> dict[str, Any]:
    """安全读取 YAML 文件

    参数:
        path: YAML 文件路径
        loader: 传给 read_yaml 的 Loader 类

    返回:
        dict: 解析后的字典。如果文件不存在、为空、或内容不是字典类型，返回空字典

    异常:
        PermissionError: 无读取权限
        yaml.YAMLError: YAML 格式错误
        ValueError: 文件过大（超过 MAX_YAML_SIZE）

    示例:
        >>> meta = load_yaml("mychart/Chart.yaml")
        >>> name = meta.get("name", "")
    """
    p = Path(path)
    if not p.exists():
        return {}

    try:
        result = read_yaml(p, loader)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", path, e)
        raise
    except (PermissionError, OSError) as e:
        logger.error("读取文件失败: %s, 错误: %s", path, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，返回空字典",
            path, type(result).__name__,
        )
        return {}
    return result


def dump_yaml(data: Any) -> str:
    """序列化为 YAML 文本：保持键顺序，允许 Unicode 字符"""
    return yaml.dump(
        data, default_flow_style=False,
        allow_unicode=True, sort_keys=False,
    )


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML 文件

    参数:
        path: YAML 文件路径
        data: 要保存的数据（dict、list 等任何可序列化的类型）

    异常:
        OSError: 文件写入失败
        yaml.YAMLError: YAML 序列化失败

    示例:
        >>> save_yaml("mychart/Chart.lock", {"digest": "sha256:...", "dependencies": []})
    """
    p = Path(path)
    try:
        atomic_write(p, dump_yaml(data))
    except yaml.YAMLError as e:
        logger.error("序列化 YAML 数据失败: %s, 错误: %s", path, e)
        raise
    except (PermissionError, OSError) as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise
