"""用户列表 Service.

职责:
- 编排 展示状态解析 -> 分页查询 -> 表格渲染
- 不做 Query 细节、不返回 Response、不 commit
"""

from __future__ import annotations

from flask import current_app

from app.constants import UsersTablePaths
from app.errors import NotFoundError
from app.repositories.user_meta_repository import UserMetaRepository
from app.repositories.users_repository import UsersRepository
from app.schemas.users_table import UsersTableQuery
from app.services.users_table.hooks import UsersTableHooks, get_users_table_hooks
from app.services.users_table.pending_users import PendingUsersSource
from app.services.users_table.permissions import CapabilityPermissionChecker, get_permission_checker
from app.services.users_table.query_adapter import UserQueryAdapter
from app.services.users_table.site_context import SiteContext, get_site_context
from app.services.users_table.table_renderer import UsersTableRenderer
from app.services.users_table.view_state import UsersTableViewStateResolver
from app.types.users_table import UsersTablePage
from app.utils.structlog_config import log_info


class UsersTableService:
    """用户列表业务编排服务."""

    def __init__(
        self,
        repository: UsersRepository | None = None,
        meta_repository: UserMetaRepository | None = None,
        permission_checker: CapabilityPermissionChecker | None = None,
        site_context: SiteContext | None = None,
        hooks: UsersTableHooks | None = None,
        pending_source: PendingUsersSource | None = None,
    ) -> None:
        self._repository = repository or UsersRepository()
        self._meta_repository = meta_repository or UserMetaRepository()
        self._permission_checker = permission_checker
        self._site_context = site_context
        self._hooks = hooks
        self._pending_source = pending_source

    def render_table(
        self,
        query: UsersTableQuery,
        *,
        actor: object,
        tenant_site_id: int | None = None,
        request_uri: str = "",
        csrf_token: str = "",
    ) -> UsersTablePage:
        """渲染当前站点(或指定站点)的用户列表.

        Args:
            query: 已规范化的请求参数.
            actor: 当前登录主体.
            tenant_site_id: 按站点查看时的目标站点 ID.
            request_uri: 当前请求 URI,用于编辑链接回跳.
            csrf_token: 删除/移除链接携带的确认令牌.

        Raises:
            NotFoundError: 目标站点不存在时抛出.

        """
        checker = self._permission_checker or get_permission_checker()
        site_context = self._site_context or get_site_context()
        hooks = self._hooks or get_users_table_hooks()

        if tenant_site_id is not None and self._repository.get_site(tenant_site_id) is None:
            raise NotFoundError(message_key="SITE_NOT_FOUND", extra={"site_id": tenant_site_id})

        base_url = (
            UsersTablePaths.SITE_USERS.format(site_id=tenant_site_id)
            if tenant_site_id is not None
            else UsersTablePaths.USERS
        )
        state = UsersTableViewStateResolver(self._meta_repository, hooks).resolve(
            query,
            actor=actor,
            current_site_id=site_context.current_site_id,
            base_url=base_url,
            tenant_site_id=tenant_site_id,
        )

        adapter = UserQueryAdapter(self._repository, checker.registry, site_context)
        page = adapter.fetch_page(state.filter)

        renderer = UsersTableRenderer(
            permission_checker=checker,
            hooks=hooks,
            site_context=site_context,
            users_repository=self._repository,
            pending_source=self._pending_source,
            multisite=bool(current_app.config.get("MULTISITE", False)) or tenant_site_id is not None,
            protected_login=str(current_app.config.get("PROTECTED_ACCOUNT_LOGIN") or ""),
        )
        result = renderer.render(state, page, actor=actor, request_uri=request_uri, csrf_token=csrf_token)

        log_info(
            "用户列表渲染完成",
            module="users_table",
            site_id=state.site_id,
            tenant_scoped=state.tenant_scoped,
            pending_view=state.pending_view,
            page=page.page,
            per_page=page.limit,
            total=page.total,
            row_count=result.row_count,
        )
        return result
