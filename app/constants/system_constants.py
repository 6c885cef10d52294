"""站点用户管理 - 错误分类、严重度与提示文案.

ErrorMessages 的属性名即错误响应中的 `message_code`.
"""

from enum import Enum


class ErrorCategory(Enum):
    """错误分类."""

    VALIDATION = "validation"
    BUSINESS = "business"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorMessages:
    """错误文案,按 message_code 索引."""

    INTERNAL_ERROR = "服务器内部错误"
    INVALID_REQUEST = "无效的请求"
    VALIDATION_ERROR = "数据验证失败"
    AUTHENTICATION_REQUIRED = "请先登录"
    PERMISSION_DENIED = "权限不足"
    PERMISSION_REQUIRED = "需要 {permission} 权限"
    RESOURCE_NOT_FOUND = "资源不存在"

    # 用户列表
    INVALID_SORT_FIELD = "不支持的排序字段"
    SITE_NOT_FOUND = "站点不存在"
    CSRF_TOKEN_INVALID = "确认令牌无效或已过期"

    # 批量/行内操作
    UNKNOWN_BULK_ACTION = "不支持的批量操作"
    BULK_ACTION_MODE_MISMATCH = "当前部署模式不支持该操作"
    ROLE_NOT_EDITABLE = "无权分配该角色"
    NO_USERS_SELECTED = "请选择要操作的用户"


class SuccessMessages:
    """成功文案."""

    OPERATION_SUCCESS = "操作成功"
    USERS_TABLE_RENDERED = "用户列表获取成功"
    BULK_ACTION_DONE = "批量操作已完成"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "SuccessMessages",
]
