"""版本约束

约束语法:
  - "||" 分隔多个可选分组，满足任一分组即可
  - 分组内比较器以空格或逗号分隔，需同时满足
  - 支持 = != > >= < <= ~ ^、x 通配（1.2.x、*）、连字符区间（1.2 - 1.4）
  - 版本号可带 v 前缀，运算符后允许空格
  - 空表达式表示任意版本

除 "!=" 外的比较器交给 semantic_version.NpmSpec 求值，
"!=" 单独作为排除项。预发布版本只在分组内某个比较器显式写出
同一 major.minor.patch 的预发布版本时才会被接受（NpmSpec 语义）。
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from semantic_version import NpmSpec, Version

_OP_SPACE_RE = re.compile(r"(>=|<=|!=|>|<|=|~|\^)\s+")
_V_PREFIX_RE = re.compile(r"(^|[\s=<>~^!])v(?=\d)")


def parse_version(text: str) -> Version:
    """宽松解析版本号: 允许 v 前缀和省略的 minor/patch

    异常:
        ValueError: 无法解析
    """
    text = text.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    return Version.coerce(text)


@dataclass(frozen=True)
class _Group:
    spec: NpmSpec
    excluded: frozenset[Version] = field(default_factory=frozenset)

    def allows(self, version: Version) -> bool:
        return version not in self.excluded and version in self.spec


class Constraint:
    """已解析的版本约束"""

    def __init__(self, expression: str, groups: list[_Group]) -> None:
        self.expression = expression
        self._groups = groups

    def __repr__(self) -> str:
        return f"Constraint({self.expression!r})"

    def allows(self, version: Version) -> bool:
        return any(g.allows(version) for g in self._groups)

    def select(self, versions: Iterable[Version]) -> Version | None:
        """返回满足约束的最高版本，没有则返回 None"""
        matched = [v for v in versions if self.allows(v)]
        return max(matched) if matched else None


def _parse_group(text: str) -> _Group:
    text = _OP_SPACE_RE.sub(r"\1", text.replace(",", " "))
    text = _V_PREFIX_RE.sub(r"\1", text)
    tokens = text.split()
    if not tokens:
        raise ValueError("约束分组为空")
    excluded = frozenset(parse_version(t[2:]) for t in tokens if t.startswith("!="))
    rest = " ".join(t for t in tokens if not t.startswith("!="))
    return _Group(spec=NpmSpec(rest or "*"), excluded=excluded)


def parse_constraint(expression: str) -> Constraint:
    """解析约束表达式

    只有整个表达式为空（或全是空白）时表示任意版本；
    "||" 两侧或逗号分隔后出现空分组视为格式错误。

    异常:
        ValueError: 表达式不合法（如 ">a1"、">=1.0.0 ||"）
    """
    if not expression.strip():
        return Constraint(expression, [_Group(spec=NpmSpec("*"))])
    groups = [_parse_group(part) for part in expression.split("||")]
    return Constraint(expression, groups)
