"""用户列表表格渲染.

输出顺序: 角色视图链接、顶部工具栏、表头、表体、表尾、底部工具栏.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlencode

from markupsafe import Markup, escape

from app.constants import BulkActions, Capability, UsersTableColumns, UsersTableLabels, UsersTableViews
from app.repositories.users_repository import UsersRepository
from app.services.users_table.hooks import UsersTableHooks
from app.services.users_table.pending_users import PendingUsersSource
from app.services.users_table.permissions import CapabilityPermissionChecker
from app.services.users_table.row_renderer import UsersTableRowRenderer, resolve_display_role
from app.services.users_table.site_context import SiteContext
from app.types.listing import PaginatedResult
from app.types.users_table import (
    ColumnSpec,
    UserRecord,
    UsersTablePage,
    UsersTablePagination,
    UsersTableViewState,
    ViewLink,
)


def build_url(base_url: str, params: Mapping[str, object]) -> str:
    query = urlencode({key: value for key, value in params.items() if value not in (None, "")})
    return f"{base_url}?{query}" if query else base_url


def items_label(total: int) -> str:
    return UsersTableLabels.ITEM_COUNT if total == 1 else UsersTableLabels.ITEMS_COUNT.format(count=total)


class UsersTableRenderer:
    """组装完整的用户列表表格."""

    def __init__(
        self,
        *,
        permission_checker: CapabilityPermissionChecker,
        hooks: UsersTableHooks,
        site_context: SiteContext,
        users_repository: UsersRepository | None = None,
        pending_source: PendingUsersSource | None = None,
        multisite: bool = False,
        protected_login: str = "",
    ) -> None:
        self._checker = permission_checker
        self._registry = permission_checker.registry
        self._hooks = hooks
        self._site_context = site_context
        self._repository = users_repository or UsersRepository()
        self._pending_source = pending_source or PendingUsersSource(
            users_repository=self._repository,
            registry=self._registry,
        )
        self._multisite = multisite
        self._protected_login = protected_login

    def build_views(self, state: UsersTableViewState) -> list[ViewLink]:
        """按角色生成视图链接,计数在切换到目标站点后统计."""
        with self._site_context.switch_to(state.site_id):
            role_counts, total = self._repository.count_by_role(state.site_id)

        current_role = state.filter.role
        views = [
            ViewLink(
                role=UsersTableViews.ALL_ROLES,
                label=UsersTableLabels.ALL,
                count=total,
                url=state.base_url,
                current=current_role is None and not state.pending_view,
            ),
        ]
        for role, name in self._registry.names().items():
            count = role_counts.get(role, 0)
            if count <= 0:
                continue
            views.append(
                ViewLink(
                    role=role,
                    label=name,
                    count=count,
                    url=build_url(state.base_url, {"role": role}),
                    current=current_role == role,
                ),
            )
        return views

    @staticmethod
    def render_views(views: list[ViewLink]) -> Markup:
        last = len(views) - 1
        items = []
        for position, view in enumerate(views):
            current = Markup(' class="current"') if view.current else Markup("")
            separator = Markup(" |") if position < last else Markup("")
            items.append(
                Markup('<li class="{}"><a href="{}"{}>{} <span class="count">({})</span></a>{}</li>').format(
                    view.role,
                    view.url,
                    current,
                    view.label,
                    view.count,
                    separator,
                ),
            )
        return Markup('<ul class="subsubsub">{}</ul>').format(Markup("").join(items))

    def bulk_actions(self, actor: object) -> dict[str, str]:
        actions: dict[str, str] = {}
        if self._multisite:
            if self._checker.can(actor, Capability.REMOVE_USERS):
                actions[BulkActions.REMOVE] = UsersTableLabels.REMOVE
        elif self._checker.can(actor, Capability.DELETE_USERS):
            actions[BulkActions.DELETE] = UsersTableLabels.DELETE
        return actions

    @staticmethod
    def render_bulk_actions(actions: Mapping[str, str], *, which: str) -> Markup:
        if not actions:
            return Markup("")
        name = "action" if which == "top" else "action2"
        options = Markup("").join(
            Markup('<option value="{}">{}</option>').format(action_id, label) for action_id, label in actions.items()
        )
        return Markup(
            '<div class="alignleft actions bulkactions"><select name="{}">'
            '<option value="{}" selected="selected">{}</option>{}</select>'
            '<input type="submit" class="button action" value="{}" /></div>',
        ).format(name, BulkActions.NONE_SELECTED, UsersTableLabels.BULK_ACTIONS, options, UsersTableLabels.APPLY)

    def render_toolbar(self, state: UsersTableViewState, actor: object) -> Markup:
        """顶部扩展工具栏,待激活视图下不显示."""
        if state.pending_view:
            return Markup("")
        content = Markup("")
        if self._checker.can(actor, Capability.PROMOTE_USERS):
            options = Markup("").join(
                Markup('<option value="{}">{}</option>').format(role, self._registry.display_name(role) or role)
                for role in self._checker.editable_roles(actor)
            )
            content += Markup(
                '<label class="screen-reader-text" for="new_role">{}</label>'
                '<select name="new_role" id="new_role"><option value="">{}</option>{}</select>'
                '<input type="submit" name="changeit" id="changeit" class="button" value="{}" />',
            ).format(UsersTableLabels.CHANGE_ROLE_TO, UsersTableLabels.CHANGE_ROLE_TO, options, UsersTableLabels.CHANGE)
        content += self._hooks.render_toolbar()
        return Markup('<div class="alignleft actions">{}</div>').format(content)

    def render_tablenav(
        self,
        state: UsersTableViewState,
        actor: object,
        page: PaginatedResult[UserRecord],
        *,
        which: str,
    ) -> Markup:
        bulk = self.render_bulk_actions(self.bulk_actions(actor), which=which)
        toolbar = self.render_toolbar(state, actor) if which == "top" else Markup("")
        count = Markup('<div class="tablenav-pages"><span class="displaying-num">{}</span></div>').format(
            items_label(page.total),
        )
        return Markup('<div class="tablenav {}">{}{}{}<br class="clear" /></div>').format(which, bulk, toolbar, count)

    @staticmethod
    def _sort_link(state: UsersTableViewState, column: ColumnSpec) -> tuple[str, str]:
        """返回 (排序样式, 链接). 点击当前排序列时翻转排序方向."""
        current_field = state.filter.sort_field
        current_order = (state.filter.sort_order or "asc").lower()
        if current_field == column.sortable:
            order = "desc" if current_order == "asc" else "asc"
            css = f"sorted {current_order}"
        else:
            order = "asc"
            css = "sortable desc"
        params = {
            "s": state.filter.search.strip("*"),
            "role": state.filter.role,
            "status": UsersTableViews.PENDING_STATUS if state.pending_view else None,
            "orderby": column.sortable,
            "order": order,
        }
        return css, build_url(state.base_url, params)

    def render_headers(self, state: UsersTableViewState, *, footer: bool) -> Markup:
        cells = []
        for column in state.columns:
            style = Markup(' style="display:none;"') if column.hidden else Markup("")
            id_attr = Markup(' id="{}"').format(column.id) if not footer else Markup("")
            if column.id == UsersTableColumns.CHECKBOX:
                select_id = f"cb-select-all-{2 if footer else 1}"
                cells.append(
                    Markup(
                        '<th scope="col"{} class="manage-column column-cb check-column"{}>'
                        '<label class="screen-reader-text" for="{}">{}</label>'
                        '<input id="{}" type="checkbox" /></th>',
                    ).format(id_attr, style, select_id, UsersTableLabels.SELECT_ALL, select_id),
                )
                continue

            if column.sortable:
                css, url = self._sort_link(state, column)
                label = Markup('<a href="{}"><span>{}</span><span class="sorting-indicator"></span></a>').format(
                    url,
                    column.label,
                )
            else:
                css, label = "", escape(column.label)
            css_class = f"manage-column column-{column.id} {css}".strip()
            cells.append(
                Markup('<th scope="col"{} class="{}"{}>{}</th>').format(id_attr, css_class, style, label),
            )
        return Markup("<tr>{}</tr>").format(Markup("").join(cells))

    def _active_rows(
        self,
        state: UsersTableViewState,
        page: PaginatedResult[UserRecord],
        row_renderer: UsersTableRowRenderer,
        editable_roles: list[str],
        status: str,
    ) -> list[Markup]:
        post_counts: dict[int, int] = {}
        has_posts_column = not state.tenant_scoped and UsersTableColumns.POSTS in state.column_ids
        if has_posts_column:
            ids = [user.id for user in page.items if user.id is not None]
            post_counts = self._repository.count_posts_by_authors(ids, state.site_id)

        registry_order = self._registry.role_ids()
        rows: list[Markup] = []
        for user in page.items:
            # 多站点模式下跳过在当前站点没有任何能力的成员
            if self._multisite and not user.capabilities:
                continue
            role = resolve_display_role(user.roles, editable_roles, registry_order)
            rows.append(
                row_renderer.render_row(
                    user,
                    index=len(rows),
                    role=role,
                    post_count=post_counts.get(user.id) if user.id is not None else None,
                    status=status,
                ),
            )
        return rows

    def _pending_rows(
        self,
        state: UsersTableViewState,
        page: PaginatedResult[UserRecord],
        row_renderer: UsersTableRowRenderer,
        editable_roles: list[str],
    ) -> list[Markup]:
        records = self._pending_source.collect(state.site_id, seen_emails=[user.email for user in page.items])
        registry_order = self._registry.role_ids()
        return [
            row_renderer.render_row(
                record,
                index=index,
                role=resolve_display_role(record.roles, editable_roles, registry_order),
                status=UsersTableLabels.STATUS_UNACTIVE,
            )
            for index, record in enumerate(records)
        ]

    def render(
        self,
        state: UsersTableViewState,
        page: PaginatedResult[UserRecord],
        *,
        actor: object,
        request_uri: str = "",
        csrf_token: str = "",
    ) -> UsersTablePage:
        """渲染整张表格并附带分页元数据."""
        row_renderer = UsersTableRowRenderer(
            actor=actor,
            state=state,
            permission_checker=self._checker,
            registry=self._registry,
            hooks=self._hooks,
            multisite=self._multisite,
            protected_login=self._protected_login,
            request_uri=request_uri,
            csrf_token=csrf_token,
        )
        editable_roles = self._checker.editable_roles(actor)
        pending_enabled = UsersTableColumns.STATUS in state.column_ids

        if state.pending_view:
            rows = self._pending_rows(state, page, row_renderer, editable_roles)
        else:
            status = UsersTableLabels.STATUS_ACTIVE if pending_enabled else ""
            rows = self._active_rows(state, page, row_renderer, editable_roles, status)

        show_no_items = not rows if state.pending_view else not page.items
        if show_no_items:
            colspan = sum(1 for column in state.columns if not column.hidden)
            body = Markup('<tr class="no-items"><td class="colspanchange" colspan="{}">{}</td></tr>').format(
                colspan,
                UsersTableLabels.NO_ITEMS,
            )
        else:
            body = Markup("").join(rows)

        html = Markup("").join(
            (
                self.render_views(self.build_views(state)),
                self.render_tablenav(state, actor, page, which="top"),
                Markup(
                    '<table class="wp-list-table widefat fixed users" cellspacing="0">'
                    "<thead>{}</thead><tfoot>{}</tfoot>"
                    '<tbody id="the-list" data-wp-lists="list:user">{}</tbody></table>',
                ).format(
                    self.render_headers(state, footer=False),
                    self.render_headers(state, footer=True),
                    body,
                ),
                self.render_tablenav(state, actor, page, which="bottom"),
            ),
        )
        return UsersTablePage(
            html=html,
            pagination=UsersTablePagination(
                total_items=page.total,
                per_page=page.limit,
                total_pages=page.pages,
                page=page.page,
            ),
            row_count=len(rows),
        )
