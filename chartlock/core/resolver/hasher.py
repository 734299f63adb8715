"""依赖声明列表哈希

对声明列表做规范化 JSON 序列化（保留顺序、紧凑分隔符）后取 SHA-256，
格式为 ``sha256:<64 位小写十六进制>``。顺序敏感: 只有内容和顺序都不变时，
锁文件才能逐字节重现。

字节形式与 Helm 写出的 Chart.lock 一致: 非 ASCII 字符原样输出，
但 < > & 以及 U+2028 / U+2029 转义为 \\uXXXX（Go encoding/json 的 HTML 安全转义），
否则带范围约束（如 ">=0.1.0"）的锁文件会被误判为过期。
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence

from chartlock.core.chart.models import Dependency

DIGEST_PREFIX = "sha256:"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_html(text: str) -> str:
    for raw, escaped in _HTML_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def canonical_bytes(dependencies: Sequence[Dependency]) -> bytes:
    payload = [d.to_dict() for d in dependencies]
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return _escape_html(text).encode("utf-8")


def hash_req(dependencies: Sequence[Dependency]) -> str:
    """计算声明列表的 digest"""
    return DIGEST_PREFIX + hashlib.sha256(canonical_bytes(dependencies)).hexdigest()
