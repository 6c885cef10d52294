"""常量模块。

集中管理系统常量，包括错误消息、HTTP 相关常量、角色与能力、用户列表文案等。
"""

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

# 导入能力常量
from .capabilities import Capability

# 导入HTTP头常量
from .http_headers import HttpHeaders

# 导入所有系统常量
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    SuccessMessages,
)

# 导入用户角色常量
from .user_roles import UserRole

# 导入用户列表常量
from .users_table import (
    BulkActions,
    PendingUsers,
    UsersTableColumns,
    UsersTableLabels,
    UsersTablePaths,
    UsersTableViews,
)

__all__ = [
    "BulkActions",
    "Capability",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpHeaders",
    "HttpStatus",
    "PendingUsers",
    "SuccessMessages",
    "UserRole",
    "UsersTableColumns",
    "UsersTableLabels",
    "UsersTablePaths",
    "UsersTableViews",
]
