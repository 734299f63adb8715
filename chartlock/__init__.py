"""chartlock - Chart 依赖解析与锁定工具"""

__version__ = "0.1.0"
