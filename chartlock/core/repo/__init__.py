"""仓库索引与注册表

- index.py: 索引缓存读取与版本查询
- repo_file.py: home 目录布局、仓库注册表
"""

from chartlock.core.repo.index import ChartVersion, IndexFile, load_index_file
from chartlock.core.repo.repo_file import Home, RepoRegistry

__all__ = [
    "ChartVersion",
    "Home",
    "IndexFile",
    "RepoRegistry",
    "load_index_file",
]
