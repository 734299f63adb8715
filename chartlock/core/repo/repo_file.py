"""仓库注册表与 home 目录布局

home 目录结构:
  <home>/repository/repositories.yaml       已注册的仓库（name -> url）
  <home>/repository/cache/<name>-index.yaml  各仓库的索引缓存

索引缓存由外部刷新流程写入；注册表只维护 name/url 映射，
供依赖管理器把依赖的 repository URL 翻译成缓存名。
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from chartlock.core.exceptions import ValidationError
from chartlock.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

_SAFE_NAME_RE = re.compile(r"^[a-zA-Z0-9_.\-]+$")


class Home:
    """chartlock home 目录布局"""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()

    def __repr__(self) -> str:
        return f"Home({str(self.root)!r})"

    def repository(self) -> Path:
        return self.root / "repository"

    def repository_file(self) -> Path:
        return self.repository() / "repositories.yaml"

    def cache(self) -> Path:
        return self.repository() / "cache"

    def cache_index(self, name: str) -> Path:
        return self.cache() / f"{name}-index.yaml"


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


class RepoRegistry:
    """仓库注册表: repositories.yaml 的增删查"""

    section_key = "repositories"

    def __init__(self, home: Home) -> None:
        self.home = home
        self.registry_file = home.repository_file()
        self._data: dict[str, Any] = load_yaml(self.registry_file)

    def _section(self) -> dict[str, dict[str, Any]]:
        result: dict[str, dict[str, Any]] = self._data.setdefault(self.section_key, {})
        return result

    def _save(self) -> None:
        save_yaml(self.registry_file, self._data)

    def add(self, name: str, url: str, *, force: bool = False) -> dict[str, Any]:
        """注册一个仓库"""
        if not name or not _SAFE_NAME_RE.match(name):
            raise ValidationError(f"仓库名包含非法字符: {name!r}")
        if not url:
            raise ValidationError(f"仓库 {name} 必须指定 url")
        if name in self._section() and not force:
            raise ValidationError(f"仓库已存在: {name}（使用 force 覆盖）")

        entry = {"url": url, "cache": self.home.cache_index(name).name}
        self._section()[name] = entry
        self._save()
        logger.info("仓库已注册: %s -> %s", name, url)
        return entry

    def get(self, name: str) -> dict[str, Any] | None:
        entry = self._section().get(name)
        if entry is None:
            return None
        return {"name": name, **entry}

    def list(self) -> list[dict[str, Any]]:
        return [{"name": k, **v} for k, v in self._section().items()]

    def remove(self, name: str) -> bool:
        section = self._section()
        if name not in section:
            return False
        del section[name]
        self._save()
        logger.info("仓库已删除: %s", name)
        return True

    def name_for_url(self, url: str) -> str | None:
        """按 URL 反查仓库名，忽略末尾斜杠"""
        target = _normalize_url(url)
        for name, entry in self._section().items():
            if _normalize_url(str(entry.get("url", ""))) == target:
                return name
        return None
