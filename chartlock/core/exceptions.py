"""统一异常体系

所有业务异常继承 ChartlockError，CLI 层据此输出友好提示。
依赖解析相关异常继承 ResolveError，携带出错的依赖名便于调用方定位问题。
"""

from __future__ import annotations


class ChartlockError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(ChartlockError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(ChartlockError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class DependencyCycleError(ValidationError):
    """子 chart 挂载会使某个节点成为自己的祖先"""

    code = "DEPENDENCY_CYCLE"


class InvalidReference(ChartlockError):
    """来源引用字符串为空或存在歧义（冒号过多）"""

    code = "INVALID_REFERENCE"

    def __init__(self, message: str, ref: str = "") -> None:
        super().__init__(message)
        self.ref = ref


class ResolveError(ChartlockError):
    """依赖解析失败基类，任一依赖失败即中止整次解析"""

    code = "RESOLVE_ERROR"

    def __init__(self, message: str, *, dependency: str = "") -> None:
        super().__init__(message)
        self.dependency = dependency


class InvalidConstraint(ResolveError):
    """版本约束表达式无法解析"""

    code = "INVALID_CONSTRAINT"

    def __init__(
        self, message: str, *, dependency: str = "", constraint: str = "",
    ) -> None:
        super().__init__(message, dependency=dependency)
        self.constraint = constraint


class ChartNotFound(ResolveError):
    """本地路径下没有 chart，或索引中没有该 chart"""

    code = "CHART_NOT_FOUND"


class RepoIndexMissing(ResolveError):
    """来源没有对应的本地索引缓存"""

    code = "REPO_INDEX_MISSING"


class RepoIndexInvalid(ResolveError):
    """索引缓存内容无法解析"""

    code = "REPO_INDEX_INVALID"


class NoMatchingVersion(ResolveError):
    """索引中有该 chart，但没有满足约束的版本"""

    code = "NO_MATCHING_VERSION"

    def __init__(
        self, message: str, *, dependency: str = "", constraint: str = "",
    ) -> None:
        super().__init__(message, dependency=dependency)
        self.constraint = constraint


class LockOutOfSync(ChartlockError):
    """Chart.lock 的 digest 与当前声明的依赖列表不一致"""

    code = "LOCK_OUT_OF_SYNC"
