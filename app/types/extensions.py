"""框架扩展协议与运行期挂载属性类型声明.

集中管理 Flask 应用在运行期挂载的扩展/属性,为 Pyright 提供静态类型支持.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from flask import Flask
from flask_login import LoginManager

if TYPE_CHECKING:
    from app.services.users_table.hooks import UsersTableHooks


class SiteUsersFlask(Flask):
    """定制的 Flask 子类,补充运行期挂载的扩展属性."""

    users_table_hooks: UsersTableHooks


class SiteUsersLoginManager(LoginManager):
    """登录管理器子类,标注初始化阶段写入的配置属性."""

    login_view: str | None
    login_message: str
    login_message_category: str
    session_protection: str | None
    remember_cookie_duration: int | float | timedelta
    remember_cookie_httponly: bool


__all__ = [
    "SiteUsersFlask",
    "SiteUsersLoginManager",
]
