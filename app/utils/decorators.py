"""站点用户管理 - 访问控制装饰器."""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from flask import request
from flask_login import current_user

from app.constants import ErrorMessages, HttpHeaders
from app.errors import AuthenticationError, AuthorizationError
from app.utils.structlog_config import get_system_logger, should_log_debug

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")


def _request_log_fields() -> dict[str, str | None]:
    return {
        "request_path": request.path,
        "request_method": request.method,
        "ip_address": request.remote_addr,
        "user_agent": request.headers.get(HttpHeaders.USER_AGENT, ""),
    }


def _ensure_authenticated(permission_type: str) -> None:
    if current_user.is_authenticated:
        return
    get_system_logger().warning(
        "未认证访问受保护资源",
        module="decorators",
        user_id=None,
        permission_type=permission_type,
        failure_reason="not_authenticated",
        **_request_log_fields(),
    )
    raise AuthenticationError(
        ErrorMessages.AUTHENTICATION_REQUIRED,
        message_key="AUTHENTICATION_REQUIRED",
        extra={
            "request_path": request.path,
            "request_method": request.method,
            "permission_type": permission_type,
        },
    )


def login_required(func: Callable[P, R]) -> Callable[P, R]:
    """要求调用者已登录的装饰器.

    未登录时抛出 AuthenticationError,由全局错误处理器转换为统一的 401 响应.
    """

    @wraps(func)
    def decorated_function(*args: P.args, **kwargs: P.kwargs) -> R:
        _ensure_authenticated("login")
        if should_log_debug():
            get_system_logger().debug(
                "登录权限验证通过",
                module="decorators",
                user_id=current_user.id,
                request_path=request.path,
                permission_type="login",
            )
        return func(*args, **kwargs)

    return decorated_function


def capability_required(capability: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """要求当前用户在当前站点上具备指定能力的装饰器.

    Args:
        capability: 基础能力名称,例如 ``list_users``、``manage_sites``.

    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def decorated_function(*args: P.args, **kwargs: P.kwargs) -> R:
            # 延迟导入,避免 utils 与 services 的循环依赖
            from app.services.users_table.permissions import get_permission_checker

            _ensure_authenticated(capability)
            if not get_permission_checker().can(current_user, capability):
                get_system_logger().warning(
                    "权限不足访问受保护资源",
                    module="decorators",
                    user_id=current_user.id,
                    user_login=getattr(current_user, "user_login", None),
                    permission_type=capability,
                    failure_reason="insufficient_capability",
                    **_request_log_fields(),
                )
                raise AuthorizationError(
                    ErrorMessages.PERMISSION_REQUIRED.format(permission=capability),
                    message_key="PERMISSION_REQUIRED",
                    extra={
                        "request_path": request.path,
                        "request_method": request.method,
                        "permission_type": capability,
                    },
                )

            if should_log_debug():
                get_system_logger().debug(
                    "能力验证通过",
                    module="decorators",
                    user_id=current_user.id,
                    request_path=request.path,
                    permission_type=capability,
                )
            return func(*args, **kwargs)

        return decorated_function

    return decorator
