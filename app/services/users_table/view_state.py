"""列表展示状态解析.

请求参数在这里一次性解析为 PageFilter 与列定义,渲染阶段不再读取请求.
"""

from __future__ import annotations

from flask import current_app

from app.constants import UsersTableColumns, UsersTableViews
from app.repositories.user_meta_repository import UserMetaRepository
from app.schemas.users_table import UsersTableQuery
from app.services.users_table.hooks import UsersTableHooks, get_users_table_hooks
from app.types.users_table import ColumnSpec, PageFilter, UsersTableViewState
from app.utils.pagination_utils import resolve_page_size


def build_columns(
    *,
    tenant_scoped: bool,
    pending_enabled: bool,
    hooks: UsersTableHooks | None = None,
) -> tuple[ColumnSpec, ...]:
    """构建列定义.

    按站点查看时不显示文章数列; 启用待激活用户功能时追加状态列.
    复选框列与用户名列始终存在,扩展回调无法移除.
    """
    column_ids = [
        column for column in UsersTableColumns.BASE if not (tenant_scoped and column == UsersTableColumns.POSTS)
    ]
    if pending_enabled:
        column_ids.append(UsersTableColumns.STATUS)

    columns = [
        ColumnSpec(
            id=column_id,
            label=UsersTableColumns.LABELS[column_id],
            sortable=UsersTableColumns.SORTABLE.get(column_id),
        )
        for column_id in column_ids
    ]
    if hooks is None:
        return tuple(columns)

    columns = hooks.apply_columns(columns)
    present = {column.id for column in columns}
    if UsersTableColumns.CHECKBOX not in present:
        columns.insert(0, ColumnSpec(id=UsersTableColumns.CHECKBOX, label=""))
    if UsersTableColumns.USERNAME not in present:
        columns.insert(
            1,
            ColumnSpec(
                id=UsersTableColumns.USERNAME,
                label=UsersTableColumns.LABELS[UsersTableColumns.USERNAME],
                sortable=UsersTableColumns.SORTABLE[UsersTableColumns.USERNAME],
            ),
        )
    if tenant_scoped:
        columns = [column for column in columns if column.id != UsersTableColumns.POSTS]

    hidden = hooks.hidden_column_ids() - {UsersTableColumns.CHECKBOX, UsersTableColumns.USERNAME}
    return tuple(
        ColumnSpec(id=column.id, label=column.label, sortable=column.sortable, hidden=column.id in hidden)
        for column in columns
    )


class UsersTableViewStateResolver:
    """将请求参数与用户偏好解析为表格展示状态."""

    def __init__(
        self,
        meta_repository: UserMetaRepository | None = None,
        hooks: UsersTableHooks | None = None,
    ) -> None:
        self._meta_repository = meta_repository or UserMetaRepository()
        self._hooks = hooks

    def resolve_per_page(self, actor: object, *, tenant_scoped: bool) -> int:
        option = UsersTableViews.SITE_USERS_PER_PAGE_OPTION if tenant_scoped else UsersTableViews.PER_PAGE_OPTION
        actor_id = getattr(actor, "id", None)
        raw = self._meta_repository.get_value(actor_id, option) if actor_id is not None else None
        return resolve_page_size(
            raw,
            default=int(current_app.config.get("DEFAULT_USERS_PER_PAGE", 20)),
            maximum=UsersTableViews.MAX_PER_PAGE,
            module="users_table",
            option=option,
        )

    def resolve(
        self,
        query: UsersTableQuery,
        *,
        actor: object,
        current_site_id: int,
        base_url: str,
        tenant_site_id: int | None = None,
    ) -> UsersTableViewState:
        tenant_scoped = tenant_site_id is not None
        pending_enabled = bool(current_app.config.get("PENDING_USERS_ENABLED", True))
        hooks = self._hooks or get_users_table_hooks()

        page_filter = PageFilter(
            search=query.search,
            role=query.role,
            sort_field=query.sort_field,
            sort_order=query.sort_order,
            page=query.page,
            per_page=self.resolve_per_page(actor, tenant_scoped=tenant_scoped),
            site_id=tenant_site_id,
        )
        return UsersTableViewState(
            filter=page_filter,
            columns=build_columns(tenant_scoped=tenant_scoped, pending_enabled=pending_enabled, hooks=hooks),
            pending_view=pending_enabled and query.pending_view,
            tenant_scoped=tenant_scoped,
            site_id=tenant_site_id if tenant_site_id is not None else current_site_id,
            base_url=base_url,
        )
