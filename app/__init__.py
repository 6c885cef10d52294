"""站点用户管理 - Flask 应用初始化.

内容管理后台中的站点用户列表: 分页、筛选、排序与批量操作.
"""

import logging
import sys
from functools import lru_cache
from importlib import import_module
from typing import TYPE_CHECKING

from flask import Blueprint, Flask, jsonify
from flask.typing import ResponseReturnValue
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

from app.settings import Settings
from app.types.extensions import SiteUsersFlask, SiteUsersLoginManager
from app.utils.response_utils import unified_error_response
from app.utils.structlog_config import configure_structlog, get_system_logger

if TYPE_CHECKING:
    from app.models.user import User

# 初始化扩展
db = SQLAlchemy()
migrate = Migrate()
login_manager: SiteUsersLoginManager = SiteUsersLoginManager()
csrf = CSRFProtect()

CONSOLE_HANDLER_NAME = "site_users_console"


@lru_cache(maxsize=1)
def get_user_model() -> type["User"]:
    """延迟加载 User 模型,避免循环导入."""
    return import_module("app.models.user").User


def create_app(*, settings: Settings | None = None) -> SiteUsersFlask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        SiteUsersFlask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = SiteUsersFlask(__name__)

    # 配置应用
    app.config.from_mapping(resolved_settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")

    # 配置会话安全
    configure_security(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 注册用户列表扩展点与协作组件
    configure_users_table(app)

    # 注册蓝图
    configure_blueprints(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 挂载控制台日志处理器并设置全局日志级别
    configure_logging(app)

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error)
        if status_code >= 500:
            get_system_logger().error(
                "未处理的请求异常",
                module="system",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        return jsonify(payload), status_code

    return app


def configure_logging(app: Flask) -> None:
    """为根 logger 挂载控制台处理器.

    structlog 通过标准库 logger 输出,根 logger 没有处理器时 INFO 级别事件会被丢弃.
    重复创建应用时只保留一个同名处理器.

    Args:
        app: Flask 应用实例.

    """
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = next((item for item in root_logger.handlers if item.get_name() == CONSOLE_HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(CONSOLE_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    handler.setLevel(level)


def configure_security(app: Flask, settings: Settings) -> None:
    """配置会话安全参数与 Cookie 选项.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,提供会话超时等参数.

    """
    app.config["PERMANENT_SESSION_LIFETIME"] = settings.session_lifetime_seconds
    app.config["SESSION_COOKIE_SECURE"] = settings.is_production
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_NAME"] = "site_users_session"


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库、迁移、CSRF 与登录管理扩展.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,用于扩展初始化参数注入.

    """
    # 初始化数据库
    db.init_app(app)
    migrate.init_app(app, db)

    # 初始化CSRF保护
    csrf.init_app(app)

    # 初始化登录管理
    login_manager.init_app(app)
    login_manager.login_view = None
    login_manager.login_message = "请先登录"
    login_manager.login_message_category = "info"

    # 会话安全配置
    login_manager.session_protection = "basic"
    login_manager.remember_cookie_duration = settings.session_lifetime_seconds
    login_manager.remember_cookie_httponly = True

    # 用户加载器
    @login_manager.user_loader
    def load_user(user_id: str) -> "User | None":
        user_model = get_user_model()
        return db.session.get(user_model, int(user_id))


def configure_users_table(app: SiteUsersFlask) -> None:
    """注册用户列表的扩展回调表、站点上下文与能力检查器.

    Args:
        app: Flask 应用实例.

    """
    from app.services.users_table import CapabilityPermissionChecker, SiteContext, UsersTableHooks

    site_context = SiteContext()
    app.users_table_hooks = UsersTableHooks()
    app.extensions["users_table.site_context"] = site_context
    app.extensions["users_table.permission_checker"] = CapabilityPermissionChecker(site_context=site_context)


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由.

    Args:
        app: Flask 应用实例.

    """
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("app.routes.users", "users_bp", "/users"),
        ("app.routes.site_users", "site_users_bp", "/sites"),
    ]

    blueprints: list[tuple[Blueprint, str | None]] = []
    for module_path, attr_name, prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        blueprints.append((blueprint, prefix))

    for blueprint, prefix in blueprints:
        if prefix:
            app.register_blueprint(blueprint, url_prefix=prefix)
        else:
            app.register_blueprint(blueprint)


from app.models import (  # noqa: F401, E402
    post,
    signup,
    site,
    site_option,
    user,
    user_meta,
)
