"""站点上下文切换.

当前站点栈保存在 `flask.g` 上,生命周期与单次请求一致.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from flask import current_app, g

from app.utils.structlog_config import SITE_CONTEXT_STACK_ATTR, log_debug


class SiteContext:
    """当前站点解析与临时切换."""

    def __init__(self, default_site_id: int | None = None) -> None:
        self._default_site_id = default_site_id

    @property
    def default_site_id(self) -> int:
        if self._default_site_id is not None:
            return self._default_site_id
        return int(current_app.config.get("DEFAULT_SITE_ID", 1))

    @staticmethod
    def _stack() -> list[int]:
        stack = g.get(SITE_CONTEXT_STACK_ATTR)
        if stack is None:
            stack = []
            setattr(g, SITE_CONTEXT_STACK_ATTR, stack)
        return stack

    @property
    def current_site_id(self) -> int:
        stack = self._stack()
        return stack[-1] if stack else self.default_site_id

    @contextmanager
    def switch_to(self, site_id: int) -> Iterator[int]:
        """临时切换到指定站点,退出时无论是否异常都恢复原站点."""
        stack = self._stack()
        previous = self.current_site_id
        stack.append(site_id)
        log_debug("切换站点上下文", module="users_table", from_site_id=previous, to_site_id=site_id)
        try:
            yield site_id
        finally:
            stack.pop()


def get_site_context() -> SiteContext:
    """返回应用注册的站点上下文,未注册时使用默认实现."""
    context = current_app.extensions.get("users_table.site_context")
    return context if isinstance(context, SiteContext) else SiteContext()
