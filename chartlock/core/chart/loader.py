"""Chart 目录加载器

目录结构:
  Chart.yaml          元信息（必需）
  requirements.yaml   apiVersion v1 的依赖声明（v2 写在 Chart.yaml 的 dependencies 中）
  values.yaml         默认配置
  Chart.lock          锁定结果（v1 为 requirements.lock）
  templates/          模板
  charts/<name>/      子 chart（递归加载）
  其他文件             归入 files
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from chartlock.core.chart.chart import Chart
from chartlock.core.chart.models import API_VERSION_V1, Dependency, File, Lock, Metadata
from chartlock.core.exceptions import ChartNotFound, ValidationError
from chartlock.utils.yaml_io import StrScalarLoader, load_yaml

logger = logging.getLogger(__name__)

CHART_FILE = "Chart.yaml"
VALUES_FILE = "values.yaml"
LOCK_FILE = "Chart.lock"
REQUIREMENTS_FILE = "requirements.yaml"
REQUIREMENTS_LOCK_FILE = "requirements.lock"
TEMPLATES_DIR = "templates"
CHARTS_DIR = "charts"

_RESERVED = {
    CHART_FILE, VALUES_FILE, LOCK_FILE,
    REQUIREMENTS_FILE, REQUIREMENTS_LOCK_FILE,
}


def _load_yaml_file(path: Path, loader: type = StrScalarLoader) -> dict:
    # 清单与锁文件中的版本号按原文读取，values.yaml 仍按标准类型解析
    try:
        return load_yaml(path, loader)
    except yaml.YAMLError as e:
        raise ValidationError(f"YAML 格式错误: {path}", details=[str(e)]) from e


def load_metadata(chart_dir: str | Path) -> Metadata:
    """只读取 Chart.yaml（以及 v1 的 requirements.yaml），不加载模板和子 chart

    异常:
        ChartNotFound: 目录下不存在 Chart.yaml
        ValidationError: 文件格式错误
    """
    root = Path(chart_dir)
    chart_file = root / CHART_FILE
    if not chart_file.is_file():
        raise ChartNotFound(f"目录下没有 {CHART_FILE}: {root}")

    metadata = Metadata.from_dict(_load_yaml_file(chart_file))
    if metadata.api_version == API_VERSION_V1 and not metadata.dependencies:
        reqs = _load_yaml_file(root / REQUIREMENTS_FILE).get("dependencies") or []
        metadata.dependencies = [Dependency.from_dict(d) for d in reqs]
    return metadata


def load_lock(chart_dir: str | Path) -> Lock | None:
    """读取 Chart.lock（回退到 requirements.lock），不存在则返回 None"""
    root = Path(chart_dir)
    for name in (LOCK_FILE, REQUIREMENTS_LOCK_FILE):
        path = root / name
        if path.is_file():
            return Lock.from_dict(_load_yaml_file(path))
    return None


def _read_files(base: Path, root: Path) -> list[File]:
    return [
        File(name=p.relative_to(root).as_posix(), data=p.read_bytes())
        for p in sorted(base.rglob("*"))
        if p.is_file()
    ]


def load_dir(chart_dir: str | Path) -> Chart:
    """递归加载 chart 目录，返回以该目录为根的 Chart 树"""
    root = Path(chart_dir)
    metadata = load_metadata(root)
    metadata.validate()

    chart = Chart(
        metadata,
        lock=load_lock(root),
        values=_load_yaml_file(root / VALUES_FILE, yaml.SafeLoader),
    )

    templates_dir = root / TEMPLATES_DIR
    if templates_dir.is_dir():
        chart.templates = _read_files(templates_dir, root)

    for entry in sorted(root.iterdir()):
        if entry.name in _RESERVED or entry.name in (TEMPLATES_DIR, CHARTS_DIR):
            continue
        if entry.name.startswith("."):
            continue
        if entry.is_file():
            chart.files.append(File(name=entry.name, data=entry.read_bytes()))
        elif entry.is_dir():
            chart.files.extend(_read_files(entry, root))

    charts_dir = root / CHARTS_DIR
    if charts_dir.is_dir():
        subcharts = [
            load_dir(sub) for sub in sorted(charts_dir.iterdir())
            if sub.is_dir() and (sub / CHART_FILE).is_file()
        ]
        chart.add_dependency(*subcharts)

    logger.debug(
        "已加载 chart %s: %d 个模板, %d 个子 chart",
        chart.name, len(chart.templates), len(chart.dependencies),
    )
    return chart
