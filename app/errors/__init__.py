"""站点用户管理 - 统一异常定义.

每个异常类通过 `metadata` 声明 HTTP 状态码、分类、严重度与默认 message key;
抛出时只需给出 `message_key`,文案从 `ErrorMessages` 中按 key 查找.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from werkzeug.exceptions import HTTPException

from app.constants import HttpStatus
from app.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from app.types.structures import LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常类的元信息."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str


def resolve_error_message(message_key: str) -> str:
    """按 message key 查找中文文案,未登记的 key 回退为通用错误文案."""
    return getattr(ErrorMessages, message_key, ErrorMessages.INTERNAL_ERROR)


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,为空时根据 ``message_key`` 推导.
        message_key: 返回给客户端的 `message_code`,为空时使用类的默认 key.
        extra: 随错误响应一起记录的上下文.
        severity: 覆盖类默认的严重度.
        status_code: 覆盖类默认的 HTTP 状态码.

    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or resolve_error_message(self.message_key)
        self.extra = dict(extra or {})
        self.severity = severity or self.metadata.severity
        self.status_code = status_code or self.metadata.status_code
        super().__init__(self.message)

    @property
    def category(self) -> ErrorCategory:
        return self.metadata.category

    @property
    def recoverable(self) -> bool:
        """严重度为 LOW 或 MEDIUM 时视为可恢复."""
        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ValidationError(AppError):
    """查询参数、表单或批量操作不合法,默认返回 400."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.BAD_REQUEST,
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )


class AuthenticationError(AppError):
    """请求未携带有效登录会话,默认返回 401."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.UNAUTHORIZED,
        category=ErrorCategory.AUTHENTICATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="AUTHENTICATION_REQUIRED",
    )


class AuthorizationError(AppError):
    """当前主体缺少所需能力或无权分配目标角色,默认返回 403."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.FORBIDDEN,
        category=ErrorCategory.AUTHORIZATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="PERMISSION_DENIED",
    )


class NotFoundError(AppError):
    """目标站点不存在,默认返回 404."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class SystemError(AppError):
    """路由执行中出现的未预期异常,默认返回 500."""


def map_exception_to_status(error: Exception, default: int = HttpStatus.INTERNAL_SERVER_ERROR) -> int:
    """根据异常类型推导 HTTP 状态码."""
    if isinstance(error, AppError):
        return error.status_code
    if isinstance(error, HTTPException) and error.code is not None:
        return int(error.code)
    return default


__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "SystemError",
    "ValidationError",
    "map_exception_to_status",
    "resolve_error_message",
]
