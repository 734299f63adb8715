"""来源引用解析

把紧凑的引用字符串 ``[host[:port]/]path[:tag]`` 拆分为 (repo, tag)。

冒号可能是主机端口分隔符，也可能是 tag 分隔符，判定规则:
  - tag 不可能包含 "/"，冒号后面带 "/" 的只能是端口分隔符
  - 两个冒号且中间段全是数字时，视为 ``name:port:tag`` 自建仓库简写
  - 其余两个及以上冒号的写法一律拒绝，不做猜测
"""

from __future__ import annotations

from dataclasses import dataclass

from chartlock.core.exceptions import InvalidReference


@dataclass(frozen=True)
class Reference:
    """解析后的来源引用"""

    repo: str
    tag: str = ""

    @property
    def full_name(self) -> str:
        if not self.tag:
            return self.repo
        return f"{self.repo}:{self.tag}"

    def __str__(self) -> str:
        return self.full_name


def _is_port(part: str) -> bool:
    # str.isdigit() 会接受全角数字等 Unicode 字符，端口只允许 ASCII
    return bool(part) and all("0" <= ch <= "9" for ch in part)


def parse_reference(ref: str) -> Reference:
    """解析引用字符串

    示例:
        >>> parse_reference("myrepo:5001/mychart:1.5.0")
        Reference(repo='myrepo:5001/mychart', tag='1.5.0')

    异常:
        InvalidReference: 空字符串，或冒号用法存在歧义
    """
    if not ref:
        raise InvalidReference("引用为空", ref=ref)

    colons = ref.count(":")
    if colons == 0:
        return Reference(repo=ref)

    if colons == 1:
        head, tail = ref.split(":")
        if "/" in tail:
            return Reference(repo=ref)
        return Reference(repo=head, tag=tail)

    if colons == 2:
        head, middle, tail = ref.split(":")
        if "/" in middle or _is_port(middle):
            return Reference(repo=f"{head}:{middle}", tag=tail)

    raise InvalidReference(f"引用包含过多冒号 ({colons}): {ref}", ref=ref)
