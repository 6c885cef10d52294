"""用户列表表格 query/form schema.

目标:
- 将 request.args / request.form 的规范化、默认值与降级处理收敛到 schema 单入口.
- 非法的分页、排序参数降级为默认值, 不向客户端报 400.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from app.constants import BulkActions, UsersTableViews
from app.schemas.base import PayloadSchema

_DEFAULT_PAGE = 1


def _parse_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _parse_positive_int(value: Any) -> int | None:
    cleaned = _parse_text(value)
    # bool 是 int 的子类,分页参数不应接受 bool.
    if isinstance(value, bool) or not cleaned:
        return None
    try:
        parsed = int(cleaned, 10)
    except ValueError:
        return None
    return parsed if parsed >= 1 else None


class UsersTableQuery(PayloadSchema):
    """用户列表 query 参数 schema.

    - `s`: 搜索词, 非空时包裹为 `*term*` 通配形式.
    - `role`: 为空或 `all` 时表示不过滤.
    - `orderby`/`order`: 仅在非空时透传给存储层.
    - `paged`: 非整数或小于 1 时回退到第 1 页.
    - `status=unactive`: 切换到待激活用户视图.
    """

    search: str = Field(default="", validation_alias=AliasChoices("s", "search"))
    role: str | None = None
    sort_field: str | None = Field(default=None, validation_alias=AliasChoices("orderby", "sort_field"))
    sort_order: str | None = Field(default=None, validation_alias=AliasChoices("order", "sort_order"))
    page: int = Field(default=_DEFAULT_PAGE, validation_alias=AliasChoices("paged", "page"))
    status: str | None = None
    site_id: int | None = Field(default=None, validation_alias=AliasChoices("id", "site_id"))

    @field_validator("search", mode="before")
    @classmethod
    def _parse_search(cls, value: Any) -> str:
        cleaned = _parse_text(value)
        return f"*{cleaned}*" if cleaned else ""

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> str | None:
        cleaned = _parse_text(value)
        if not cleaned or cleaned == UsersTableViews.ALL_ROLES:
            return None
        return cleaned

    @field_validator("sort_field", "sort_order", "status", mode="before")
    @classmethod
    def _parse_optional_str(cls, value: Any) -> str | None:
        cleaned = _parse_text(value)
        return cleaned or None

    @field_validator("page", mode="before")
    @classmethod
    def _parse_page(cls, value: Any) -> int:
        return _parse_positive_int(value) or _DEFAULT_PAGE

    @field_validator("site_id", mode="before")
    @classmethod
    def _parse_site_id(cls, value: Any) -> int | None:
        return _parse_positive_int(value)

    @property
    def pending_view(self) -> bool:
        return self.status == UsersTableViews.PENDING_STATUS


class UsersBulkActionForm(PayloadSchema):
    """批量/行内操作表单 schema.

    `users` 对应表单中的 `users[]` 多值字段, 也接受单个 `user` 字段(行内操作链接).
    """

    action: str | None = None
    action2: str | None = None
    changeit: str | None = None
    new_role: str | None = None
    users: tuple[int, ...] = Field(default=(), validation_alias=AliasChoices("users[]", "users", "user"))

    @field_validator("action", "action2", "changeit", "new_role", mode="before")
    @classmethod
    def _parse_optional_str(cls, value: Any) -> str | None:
        cleaned = _parse_text(value)
        return cleaned or None

    @field_validator("users", mode="before")
    @classmethod
    def _parse_users(cls, value: Any) -> tuple[int, ...]:
        if value is None:
            return ()
        raw_items = value if isinstance(value, (list, tuple)) else [value]
        parsed: list[int] = []
        for item in raw_items:
            user_id = _parse_positive_int(item)
            if user_id is None:
                raise ValueError("用户 ID 必须为正整数")
            if user_id not in parsed:
                parsed.append(user_id)
        return tuple(parsed)

    def resolve_action(self) -> str | None:
        """解析实际要执行的操作.

        选择了新角色并点击了 Change 按钮时一律视为 promote,
        否则依次取上下两个批量操作下拉框中有效的值.
        """
        if self.changeit is not None and self.new_role:
            return BulkActions.PROMOTE
        for candidate in (self.action, self.action2):
            if candidate and candidate != BulkActions.NONE_SELECTED:
                return candidate
        return None
