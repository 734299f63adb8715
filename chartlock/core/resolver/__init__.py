"""依赖解析

- hasher.py: 声明列表 digest
- sources.py: 来源分类（本地路径 / 索引来源）
- resolver.py: 解析器
"""

from chartlock.core.resolver.hasher import hash_req
from chartlock.core.resolver.resolver import Resolver
from chartlock.core.resolver.sources import IndexedSource, LocalPath, classify

__all__ = [
    "IndexedSource",
    "LocalPath",
    "Resolver",
    "classify",
    "hash_req",
]
