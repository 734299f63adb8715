"""Chart 数据模型与目录加载

- models.py: Dependency / Lock / Metadata / File
- chart.py: Chart 树（子 chart 挂载、root / 路径计算）
- loader.py: 从目录加载 Chart
"""

from chartlock.core.chart.chart import Chart
from chartlock.core.chart.loader import load_dir, load_lock, load_metadata
from chartlock.core.chart.models import Dependency, File, Lock, Metadata

__all__ = [
    "Chart",
    "Dependency",
    "File",
    "Lock",
    "Metadata",
    "load_dir",
    "load_lock",
    "load_metadata",
]
