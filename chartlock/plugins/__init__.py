"""插件系统 - 生命周期钩子

钩子按阶段（pre_install / post_install ...）分组，每组内按注册顺序执行。
注册表是显式对象，由需要它的编排方构造并传入；不存在全局实例，
解析器和 chart 模型也不依赖它。

钩子签名: hook(context, args) -> None，抛出异常表示校验失败，
异常会原样向上传播并中止后续钩子。

注册插件：创建一个包含 `register(registry)` 函数的模块即可。
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from chartlock.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PRE_INSTALL = "pre_install"
POST_INSTALL = "post_install"
PRE_UPGRADE = "pre_upgrade"
POST_UPGRADE = "post_upgrade"
PRE_DELETE = "pre_delete"
POST_DELETE = "post_delete"

PHASES = (
    PRE_INSTALL, POST_INSTALL,
    PRE_UPGRADE, POST_UPGRADE,
    PRE_DELETE, POST_DELETE,
)

Hook = Callable[[Any, str], None]


class HookRegistry:
    """按阶段分组的钩子注册表"""

    def __init__(self) -> None:
        self._hooks: dict[str, list[tuple[str, Hook]]] = {p: [] for p in PHASES}

    def _phase(self, phase: str) -> list[tuple[str, Hook]]:
        if phase not in self._hooks:
            raise ValidationError(f"未知的钩子阶段: {phase}")
        return self._hooks[phase]

    def register(self, phase: str, name: str, hook: Hook) -> None:
        hooks = self._phase(phase)
        if any(n == name for n, _ in hooks):
            raise ValidationError(f"钩子 {name} 已在阶段 {phase} 注册")
        hooks.append((name, hook))
        logger.debug("钩子已注册: %s -> %s", phase, name)

    def hooks(self, phase: str) -> list[str]:
        """返回某阶段已注册的钩子名（按执行顺序）"""
        return [n for n, _ in self._phase(phase)]

    def run(self, phase: str, context: Any, args: str = "") -> None:
        for name, hook in self._phase(phase):
            logger.info("执行钩子 %s (%s)", name, phase)
            hook(context, args)


def load_plugins(plugin_names: list[str], registry: HookRegistry) -> None:
    """按模块名加载插件并注册"""
    for name in plugin_names:
        try:
            mod = importlib.import_module(name)
        except ImportError:
            logger.error("加载插件失败: %s", name)
            raise
        if hasattr(mod, "register"):
            mod.register(registry)
            logger.info("插件已加载: %s", name)
        else:
            logger.warning("插件 '%s' 没有 register() 函数，跳过。", name)
