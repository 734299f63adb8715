"""生命周期钩子注册表测试"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from chartlock.core.exceptions import ValidationError
from chartlock.plugins import (
    POST_INSTALL,
    PRE_INSTALL,
    PRE_UPGRADE,
    HookRegistry,
    load_plugins,
)


class TestHookRegistry:
    def test_runs_in_registration_order(self) -> None:
        registry = HookRegistry()
        calls: list[tuple[str, Any, str]] = []
        registry.register(PRE_INSTALL, "first", lambda ctx, args: calls.append(("first", ctx, args)))
        registry.register(PRE_INSTALL, "second", lambda ctx, args: calls.append(("second", ctx, args)))
        registry.register(POST_INSTALL, "other", lambda ctx, args: calls.append(("other", ctx, args)))

        registry.run(PRE_INSTALL, "chart", "--dry-run")
        assert calls == [("first", "chart", "--dry-run"), ("second", "chart", "--dry-run")]
        assert registry.hooks(PRE_INSTALL) == ["first", "second"]
        assert registry.hooks(PRE_UPGRADE) == []

    def test_duplicate_name_rejected(self) -> None:
        registry = HookRegistry()
        registry.register(PRE_INSTALL, "check", lambda ctx, args: None)
        with pytest.raises(ValidationError, match="check"):
            registry.register(PRE_INSTALL, "check", lambda ctx, args: None)
        registry.register(POST_INSTALL, "check", lambda ctx, args: None)

    def test_unknown_phase(self) -> None:
        registry = HookRegistry()
        with pytest.raises(ValidationError, match="未知"):
            registry.register("pre_rollback", "x", lambda ctx, args: None)
        with pytest.raises(ValidationError):
            registry.run("pre_rollback", None)

    def test_failure_stops_later_hooks(self) -> None:
        registry = HookRegistry()
        seen: list[str] = []

        def reject(ctx: Any, args: str) -> None:
            raise RuntimeError("values 校验失败")

        registry.register(PRE_INSTALL, "reject", reject)
        registry.register(PRE_INSTALL, "after", lambda ctx, args: seen.append("after"))
        with pytest.raises(RuntimeError, match="校验失败"):
            registry.run(PRE_INSTALL, None)
        assert seen == []


class TestLoadPlugins:
    def test_loads_register_function(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "chartlock_demo_plugin.py").write_text(
            "def register(registry):\n"
            "    registry.register('post_install', 'notify', lambda ctx, args: None)\n",
            encoding="utf-8",
        )
        (tmp_path / "chartlock_empty_plugin.py").write_text("VALUE = 1\n", encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path))

        registry = HookRegistry()
        load_plugins(["chartlock_demo_plugin", "chartlock_empty_plugin"], registry)
        assert registry.hooks(POST_INSTALL) == ["notify"]

    def test_missing_module_raises(self) -> None:
        with pytest.raises(ImportError):
            load_plugins(["chartlock_no_such_plugin"], HookRegistry())
