"""站点用户管理 - 统一响应工具.

提供统一的成功/错误响应结构,避免在业务层散落 JSON 拼装逻辑.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from flask import Response, jsonify
from werkzeug.exceptions import HTTPException

from app.constants import HttpStatus
from app.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, SuccessMessages
from app.errors import AppError, map_exception_to_status
from app.utils.time_utils import time_utils

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.types import JsonDict, JsonValue


def unified_success_response(
    data: object | None = None,
    message: object | None = None,
    *,
    status: int = HttpStatus.OK,
    meta: Mapping[str, object] | None = None,
) -> tuple[JsonDict, int]:
    """生成统一的成功响应载荷.

    Args:
        data: 响应数据,可选.
        message: 成功消息,可选,默认为"操作成功".
        status: HTTP 状态码,默认为 200.
        meta: 元数据,可选.

    Returns:
        (响应载荷字典, HTTP 状态码).

    """
    payload: JsonDict = {
        "success": True,
        "error": False,
        "message": str(message) if message is not None else SuccessMessages.OPERATION_SUCCESS,
        "timestamp": time_utils.now().isoformat(),
    }
    if data is not None:
        payload["data"] = cast("JsonValue | JsonDict | list[JsonDict]", data)
    if meta:
        payload["meta"] = cast("JsonDict", dict(meta))
    return payload, status


def unified_error_response(
    error: BaseException,
    *,
    status_code: int | None = None,
    extra: Mapping[str, JsonValue] | None = None,
) -> tuple[JsonDict, int]:
    """生成统一的错误响应载荷.

    AppError 使用自身的分类、严重度与文案; 其他异常统一按系统错误处理,
    不向客户端暴露原始异常信息.
    """
    if isinstance(error, AppError):
        category = error.category
        severity = error.severity
        message_code = error.message_key
        message = error.message
        recoverable = error.recoverable
    elif isinstance(error, HTTPException) and (error.code or 500) < HttpStatus.INTERNAL_SERVER_ERROR:
        category = ErrorCategory.VALIDATION
        severity = ErrorSeverity.LOW
        message_code = "INVALID_REQUEST"
        message = error.description or ErrorMessages.INVALID_REQUEST
        recoverable = True
    else:
        category = ErrorCategory.SYSTEM
        severity = ErrorSeverity.HIGH
        message_code = "INTERNAL_ERROR"
        message = ErrorMessages.INTERNAL_ERROR
        recoverable = False

    payload: JsonDict = {
        "success": False,
        "error": True,
        "category": category.value,
        "severity": severity.value,
        "message_code": message_code,
        "message": message,
        "timestamp": time_utils.now().isoformat(),
        "recoverable": recoverable,
    }
    if extra:
        payload["extra"] = dict(extra)

    safe_error = error if isinstance(error, Exception) else Exception(str(error))
    final_status = status_code or map_exception_to_status(safe_error, default=HttpStatus.INTERNAL_SERVER_ERROR)
    return payload, final_status


def jsonify_unified_success(*args: object, **kwargs: object) -> tuple[Response, int]:
    """返回 Flask Response 对象的成功响应便捷函数."""
    payload, status = unified_success_response(*args, **kwargs)  # type: ignore[arg-type]
    return jsonify(payload), status


def jsonify_unified_error(*args: object, **kwargs: object) -> tuple[Response, int]:
    """返回 Flask Response 对象的错误响应便捷函数."""
    payload, status = unified_error_response(*args, **kwargs)  # type: ignore[arg-type]
    return jsonify(payload), status
