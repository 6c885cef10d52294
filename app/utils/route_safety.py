"""路由安全执行.

`safe_route_call` 包装视图逻辑: 业务异常原样抛出交给全局错误处理器,
未预期异常记录后转换为对外文案统一的 SystemError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from flask import has_request_context
from flask_login import current_user
from werkzeug.exceptions import HTTPException

from app.errors import AppError, SystemError
from app.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.types import ContextDict

R = TypeVar("R")


def _actor_id() -> int | None:
    if not has_request_context():
        return None
    return getattr(current_user, "id", None)


def safe_route_call(
    func: Callable[..., R],
    *,
    module: str,
    action: str,
    public_error: str,
    func_args: tuple[Any, ...] | None = None,
    func_kwargs: dict[str, Any] | None = None,
    context: ContextDict | None = None,
) -> R:
    """执行视图逻辑并集中记录失败日志.

    Args:
        func: 业务函数,通常为捕获了请求参数的局部闭包.
        module: 日志中的模块名.
        action: 日志中的动作名,例如 "index"、"bulk_actions".
        public_error: 未预期异常时暴露给客户端的文案.
        func_args: 传入业务函数的位置参数.
        func_kwargs: 传入业务函数的命名参数.
        context: 附加到日志中的上下文字段,例如站点 ID.

    Raises:
        AppError: 业务逻辑主动抛出,或未预期异常被包装为 SystemError.

    """
    try:
        return func(*(func_args or ()), **(func_kwargs or {}))
    except (AppError, HTTPException) as exc:
        get_logger("app").warning(
            f"{action}执行失败",
            module=module,
            action=action,
            actor_id=_actor_id(),
            error_type=exc.__class__.__name__,
            message_code=getattr(exc, "message_key", None),
            **(context or {}),
        )
        raise
    except Exception as exc:
        get_logger("app").error(
            f"{action}执行失败",
            module=module,
            action=action,
            actor_id=_actor_id(),
            error_type=exc.__class__.__name__,
            unexpected=True,
            **(context or {}),
        )
        raise SystemError(public_error) from exc
