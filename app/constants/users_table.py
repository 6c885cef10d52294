"""用户列表表格常量.

界面文案、列定义、链接路径与待激活用户相关的键名.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import ClassVar


class UsersTableLabels:
    """界面文案."""

    NO_ITEMS: ClassVar[str] = "No matching users were found."
    ALL: ClassVar[str] = "All"
    NONE_ROLE: ClassVar[str] = "None"
    EDIT: ClassVar[str] = "Edit"
    DELETE: ClassVar[str] = "Delete"
    REMOVE: ClassVar[str] = "Remove"
    CHANGE: ClassVar[str] = "Change"
    CHANGE_ROLE_TO: ClassVar[str] = "Change role to…"
    BULK_ACTIONS: ClassVar[str] = "Bulk Actions"
    APPLY: ClassVar[str] = "Apply"
    SELECT_USER: ClassVar[str] = "Select {login}"
    SELECT_ALL: ClassVar[str] = "Select All"
    EMAIL_TITLE: ClassVar[str] = "E-mail: {email}"
    VIEW_POSTS: ClassVar[str] = "View posts by this author"
    ITEMS_COUNT: ClassVar[str] = "{count} items"
    ITEM_COUNT: ClassVar[str] = "1 item"
    STATUS_ACTIVE: ClassVar[str] = "Active"
    STATUS_UNACTIVE: ClassVar[str] = "Unactive"
    PENDING_POSTS_PLACEHOLDER: ClassVar[str] = "-"


class UsersTableColumns:
    """列 ID 与标题."""

    CHECKBOX: ClassVar[str] = "cb"
    USERNAME: ClassVar[str] = "username"
    NAME: ClassVar[str] = "name"
    EMAIL: ClassVar[str] = "email"
    ROLE: ClassVar[str] = "role"
    POSTS: ClassVar[str] = "posts"
    STATUS: ClassVar[str] = "user_status"

    BASE: ClassVar[tuple[str, ...]] = (CHECKBOX, USERNAME, NAME, EMAIL, ROLE, POSTS)

    LABELS: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            CHECKBOX: "",
            USERNAME: "Username",
            NAME: "Name",
            EMAIL: "E-mail",
            ROLE: "Role",
            POSTS: "Posts",
            STATUS: "Status",
        },
    )

    # 列 ID -> 排序字段
    SORTABLE: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            USERNAME: "login",
            NAME: "name",
            EMAIL: "email",
            POSTS: "post_count",
        },
    )


class UsersTablePaths:
    """表格中生成链接使用的路径模板."""

    USERS: ClassVar[str] = "/users/"
    SITE_USERS: ClassVar[str] = "/sites/{site_id}/users/"
    USERS_ACTIONS: ClassVar[str] = "/users/actions"
    SITE_USERS_ACTIONS: ClassVar[str] = "/sites/{site_id}/users/actions"
    EDIT_USER: ClassVar[str] = "/users/{user_id}/edit"
    AUTHOR_POSTS: ClassVar[str] = "/posts/"
    AVATAR: ClassVar[str] = "https://secure.gravatar.com/avatar/{digest}?s={size}&d=mm"


class UsersTableViews:
    """列表视图模式与每页数量偏好键."""

    PENDING_STATUS: ClassVar[str] = "unactive"
    ALL_ROLES: ClassVar[str] = "all"
    PER_PAGE_OPTION: ClassVar[str] = "users_per_page"
    SITE_USERS_PER_PAGE_OPTION: ClassVar[str] = "site_users_network_per_page"
    MAX_PER_PAGE: ClassVar[int] = 999


class PendingUsers:
    """待激活邀请相关键名."""

    OPTION_MARKER: ClassVar[str] = "new_user"
    OPTION_USER_ID_KEY: ClassVar[str] = "user_id"
    OPTION_ROLE_KEY: ClassVar[str] = "role"
    SIGNUP_SITE_KEY: ClassVar[str] = "add_to_blog"
    SIGNUP_ROLE_KEY: ClassVar[str] = "new_role"


class BulkActions:
    """批量操作 ID."""

    DELETE: ClassVar[str] = "delete"
    REMOVE: ClassVar[str] = "remove"
    PROMOTE: ClassVar[str] = "promote"
    NONE_SELECTED: ClassVar[str] = "-1"

    ALL: ClassVar[tuple[str, ...]] = (DELETE, REMOVE, PROMOTE)
