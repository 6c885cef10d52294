"""用户列表行渲染.

单行的可见内容由主体能力决定: 没有 `list_users` 时只输出纯文本用户名与空复选框单元格.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from urllib.parse import urlencode

from markupsafe import Markup, escape

from app.constants import BulkActions, Capability, UsersTableColumns, UsersTableLabels, UsersTablePaths
from app.services.users_table.hooks import UsersTableHooks
from app.services.users_table.permissions import PermissionChecker
from app.services.users_table.roles import RoleRegistry
from app.types.users_table import RowAction, RowActionSet, UserRecord, UsersTableViewState

AVATAR_SIZE = 32


def resolve_display_role(
    user_roles: Sequence[str],
    editable_roles: Collection[str],
    registry_order: Sequence[str],
) -> str:
    """选出行上显示的角色.

    只有一个角色时直接使用; 有多个角色时取注册表顺序中第一个同时被持有且可分配的角色,
    都不可分配时退回用户角色列表中的第一个.
    """
    if not user_roles:
        return ""
    if len(user_roles) == 1:
        return user_roles[0]
    held = set(user_roles)
    for role in registry_order:
        if role in held and role in editable_roles:
            return role
    return user_roles[0]


def actions_path(state: UsersTableViewState) -> str:
    if state.tenant_scoped:
        return UsersTablePaths.SITE_USERS_ACTIONS.format(site_id=state.site_id)
    return UsersTablePaths.USERS_ACTIONS


class UsersTableRowRenderer:
    """按主体能力渲染单行.

    一次渲染过程中创建一个实例,主体、视图状态与确认令牌在构造时固定.
    """

    def __init__(
        self,
        *,
        actor: object,
        state: UsersTableViewState,
        permission_checker: PermissionChecker,
        registry: RoleRegistry,
        hooks: UsersTableHooks,
        multisite: bool,
        protected_login: str = "",
        request_uri: str = "",
        csrf_token: str = "",
    ) -> None:
        self._actor = actor
        self._actor_id = getattr(actor, "id", None)
        self._actor_login = getattr(actor, "user_login", None)
        self._state = state
        self._checker = permission_checker
        self._registry = registry
        self._hooks = hooks
        self._multisite = multisite
        self._protected_login = protected_login
        self._request_uri = request_uri
        self._csrf_token = csrf_token
        self._can_list = permission_checker.can(actor, Capability.LIST_USERS)

    def _is_protected(self, user: UserRecord) -> bool:
        if not self._protected_login or user.user_login != self._protected_login:
            return False
        return self._actor_login != self._protected_login

    def edit_url(self, user_id: int) -> str:
        path = UsersTablePaths.EDIT_USER.format(user_id=user_id)
        if not self._request_uri:
            return path
        return f"{path}?{urlencode({'wp_http_referer': self._request_uri})}"

    def destructive_url(self, action: str, user_id: int) -> str:
        query = urlencode({"action": action, "user": user_id, "_token": self._csrf_token})
        return f"{actions_path(self._state)}?{query}"

    def build_actions(self, user: UserRecord, *, linked: bool) -> RowActionSet:
        """按部署模式与能力组装行内操作,再交给扩展回调过滤."""
        actions: RowActionSet = {}
        if user.id is None:
            return self._hooks.apply_row_actions(actions, user)

        protected = self._is_protected(user)
        if linked and not protected:
            actions["edit"] = RowAction(label=UsersTableLabels.EDIT, url=self.edit_url(user.id))

        is_self = user.id == self._actor_id
        if (
            not self._multisite
            and not is_self
            and not protected
            and self._checker.can(self._actor, Capability.DELETE_USER, user.id)
        ):
            actions[BulkActions.DELETE] = RowAction(
                label=UsersTableLabels.DELETE,
                url=self.destructive_url(BulkActions.DELETE, user.id),
                token=self._csrf_token,
                css_class="submitdelete",
            )
        if (
            self._multisite
            and not is_self
            and not user.pending
            and self._checker.can(self._actor, Capability.REMOVE_USER, user.id)
        ):
            actions[BulkActions.REMOVE] = RowAction(
                label=UsersTableLabels.REMOVE,
                url=self.destructive_url(BulkActions.REMOVE, user.id),
                token=self._csrf_token,
                css_class="submitdelete",
            )
        return self._hooks.apply_row_actions(actions, user)

    @staticmethod
    def render_actions(actions: RowActionSet) -> Markup:
        if not actions:
            return Markup("")
        last = len(actions) - 1
        spans = []
        for position, (key, action) in enumerate(actions.items()):
            class_attr = Markup(' class="{}"').format(action.css_class) if action.css_class else Markup("")
            separator = Markup(" | ") if position < last else Markup("")
            spans.append(
                Markup('<span class="{}"><a href="{}"{}>{}</a>{}</span>').format(
                    key,
                    action.url,
                    class_attr,
                    action.label,
                    separator,
                ),
            )
        return Markup('<div class="row-actions">{}</div>').format(Markup("").join(spans))

    @staticmethod
    def render_avatar(user: UserRecord) -> Markup:
        if not user.avatar_url:
            return Markup("")
        return Markup('<img alt="" src="{}" class="avatar avatar-{} photo" height="{}" width="{}" />').format(
            user.avatar_url,
            AVATAR_SIZE,
            AVATAR_SIZE,
            AVATAR_SIZE,
        )

    def _username_and_checkbox(self, user: UserRecord, role: str) -> tuple[Markup, Markup]:
        if not self._can_list:
            return Markup("<strong>{}</strong>").format(user.user_login), Markup("")

        linked = (
            user.id is not None
            and not user.pending
            and self._checker.can(self._actor, Capability.EDIT_USER, user.id)
        )
        if linked:
            edit = Markup('<strong><a href="{}">{}</a></strong><br />').format(
                self.edit_url(user.id),
                user.user_login,
            )
        else:
            edit = Markup("<strong>{}</strong><br />").format(user.user_login)
        edit += self.render_actions(self.build_actions(user, linked=linked))

        if user.id is None:
            return edit, Markup("")

        checkbox_id = f"user_{user.id}"
        checkbox = Markup(
            '<label class="screen-reader-text" for="{}">{}</label>'
            '<input type="checkbox" name="users[]" id="{}" class="{}" value="{}" />',
        ).format(
            checkbox_id,
            UsersTableLabels.SELECT_USER.format(login=user.user_login),
            checkbox_id,
            role,
            user.id,
        )
        return edit, checkbox

    def _posts_cell(self, user: UserRecord, post_count: int | None) -> Markup:
        if user.pending:
            return escape(UsersTableLabels.PENDING_POSTS_PLACEHOLDER)
        count = post_count or 0
        if count > 0 and user.id is not None:
            href = f"{UsersTablePaths.AUTHOR_POSTS}?{urlencode({'author': user.id})}"
            return Markup('<a href="{}" title="{}" class="edit">{}</a>').format(
                href,
                UsersTableLabels.VIEW_POSTS,
                count,
            )
        return Markup("0")

    def render_row(
        self,
        user: UserRecord,
        *,
        index: int,
        role: str,
        post_count: int | None = None,
        status: str = "",
    ) -> Markup:
        """渲染一行 `<tr>`.

        Args:
            user: 行数据.
            index: 本次渲染中的行序号(从 0 开始),偶数行带 `alternate` 样式.
            role: 已按平局规则选出的显示角色.
            post_count: 已发布文章数,按站点查看时忽略.
            status: 状态列文案.

        """
        edit, checkbox = self._username_and_checkbox(user, role)

        cells: list[Markup] = []
        for column in self._state.columns:
            style = Markup(' style="display:none;"') if column.hidden else Markup("")
            if column.id == UsersTableColumns.CHECKBOX:
                cells.append(Markup('<th scope="row" class="check-column"{}>{}</th>').format(style, checkbox))
                continue

            if column.id == UsersTableColumns.USERNAME:
                content = Markup("{} {}").format(self.render_avatar(user), edit)
            elif column.id == UsersTableColumns.NAME:
                content = escape(f"{user.first_name} {user.last_name}".strip())
            elif column.id == UsersTableColumns.EMAIL:
                content = Markup('<a href="mailto:{}" title="{}">{}</a>').format(
                    user.email,
                    UsersTableLabels.EMAIL_TITLE.format(email=user.email),
                    user.email,
                )
            elif column.id == UsersTableColumns.ROLE:
                content = escape(self._registry.display_name(role) or UsersTableLabels.NONE_ROLE)
            elif column.id == UsersTableColumns.POSTS:
                if self._state.tenant_scoped:
                    continue
                content = self._posts_cell(user, post_count)
            elif column.id == UsersTableColumns.STATUS:
                content = escape(status)
            else:
                content = self._hooks.render_custom_column(column.id, user.id)

            extra_class = " num" if column.id == UsersTableColumns.POSTS else ""
            cells.append(
                Markup('<td class="{} column-{}{}"{}>{}</td>').format(
                    column.id,
                    column.id,
                    extra_class,
                    style,
                    content,
                ),
            )

        row_id = Markup(' id="user-{}"').format(user.id) if user.id is not None else Markup("")
        row_class = Markup(' class="alternate"') if index % 2 == 0 else Markup("")
        return Markup("<tr{}{}>{}</tr>").format(row_id, row_class, Markup("").join(cells))
