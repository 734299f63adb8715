"""Chart 数据模型

数据类:
- Dependency: 声明的依赖（或锁定后的精确依赖）
- Lock: 依赖锁定结果 + 声明列表的 digest
- Metadata: Chart.yaml 内容
- File: 模板 / 杂项文件
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from semantic_version import Version

from chartlock.core.exceptions import ValidationError

API_VERSION_V1 = "v1"
API_VERSION_V2 = "v2"

# 本地路径依赖前缀，相对于引用方 chart 目录解析
LOCAL_SCHEME = "file://"


@dataclass(frozen=True)
class Dependency:
    """单个依赖声明

    version 在声明中是约束表达式（如 ">=1.0.0"，空表示任意版本），
    在 Lock 中是精确版本。
    """

    name: str
    repository: str = ""
    version: str = ""
    condition: str = ""
    tags: tuple[str, ...] = ()
    enabled: bool = False
    import_values: tuple[Any, ...] = ()
    alias: str = ""

    @property
    def is_local(self) -> bool:
        return self.repository.startswith(LOCAL_SCHEME)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        if not isinstance(data, dict) or not data.get("name"):
            raise ValidationError(f"依赖声明缺少 name: {data!r}")
        return cls(
            name=str(data["name"]),
            repository=str(data.get("repository") or ""),
            version=str(data.get("version") or ""),
            condition=str(data.get("condition") or ""),
            tags=tuple(data.get("tags") or ()),
            enabled=bool(data.get("enabled", False)),
            import_values=tuple(data.get("import-values") or ()),
            alias=str(data.get("alias") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """持久化形态，字段顺序固定，未设置的可选字段省略"""
        out: dict[str, Any] = {"name": self.name}
        if self.version:
            out["version"] = self.version
        out["repository"] = self.repository
        if self.condition:
            out["condition"] = self.condition
        if self.tags:
            out["tags"] = list(self.tags)
        if self.enabled:
            out["enabled"] = True
        if self.import_values:
            out["import-values"] = list(self.import_values)
        if self.alias:
            out["alias"] = self.alias
        return out


@dataclass
class Lock:
    """依赖锁定结果"""

    dependencies: list[Dependency] = field(default_factory=list)
    digest: str = ""

    def is_valid_for(self, dependencies: list[Dependency]) -> bool:
        """判断锁是否对应给定的声明列表（唯一的过期判定依据）"""
        from chartlock.core.resolver.hasher import hash_req
        return hash_req(dependencies) == self.digest

    def version_of(self, name: str) -> str:
        for dep in self.dependencies:
            if dep.name == name:
                return dep.version
        return ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lock:
        deps = data.get("dependencies") or []
        if not isinstance(deps, list):
            raise ValidationError("Chart.lock 的 dependencies 必须是列表")
        return cls(
            dependencies=[Dependency.from_dict(d) for d in deps],
            digest=str(data.get("digest") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "digest": self.digest,
            "dependencies": [
                {"name": d.name, "repository": d.repository, "version": d.version}
                for d in self.dependencies
            ],
        }


@dataclass
class Metadata:
    """Chart.yaml 元信息"""

    name: str = ""
    version: str = ""
    api_version: str = API_VERSION_V2
    description: str = ""
    app_version: str = ""
    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metadata:
        deps = data.get("dependencies") or []
        if not isinstance(deps, list):
            raise ValidationError("Chart.yaml 的 dependencies 必须是列表")
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            api_version=str(data.get("apiVersion") or ""),
            description=str(data.get("description") or ""),
            app_version=str(data.get("appVersion") or ""),
            dependencies=[Dependency.from_dict(d) for d in deps],
        )

    def validate(self) -> None:
        problems: list[str] = []
        if not self.api_version:
            problems.append("apiVersion 为必填")
        if not self.name:
            problems.append("name 为必填")
        if not self.version:
            problems.append("version 为必填")
        else:
            try:
                Version.coerce(self.version.lstrip("v"))
            except ValueError:
                problems.append(f"version 不是合法的语义化版本: {self.version}")
        if problems:
            raise ValidationError(
                f"chart 元信息无效: {self.name or '<unnamed>'}", details=problems,
            )


@dataclass(frozen=True)
class File:
    """chart 内的文件（模板或杂项），name 为相对 chart 根目录的路径"""

    name: str
    data: bytes = b""
