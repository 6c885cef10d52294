"""用户列表扩展点.

扩展方通过向回调列表追加函数来定制列表,回调按注册顺序依次执行:

- columns: ``(columns) -> columns``,追加或调整列定义
- hidden_columns: ``() -> Iterable[str]``,返回需要隐藏的列 ID
- row_actions: ``(actions, user) -> actions``,过滤行内操作
- custom_column: ``(value, column_id, user_id) -> value``,渲染未知列的单元格,待激活注册行的 user_id 为 None
- toolbar: ``() -> str``,在顶部工具栏末尾输出额外控件

回调返回的普通字符串会被转义,需要原样输出时返回 ``Markup``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from flask import current_app
from markupsafe import Markup, escape

from app.types.users_table import ColumnSpec, RowActionSet, UserRecord

ColumnsHook = Callable[[list[ColumnSpec]], list[ColumnSpec]]
HiddenColumnsHook = Callable[[], Iterable[str]]
RowActionsHook = Callable[[RowActionSet, UserRecord], RowActionSet]
CustomColumnHook = Callable[[str, str, int | None], str]
ToolbarHook = Callable[[], str]


@dataclass(slots=True)
class UsersTableHooks:
    """用户列表回调注册表."""

    columns: list[ColumnsHook] = field(default_factory=list)
    hidden_columns: list[HiddenColumnsHook] = field(default_factory=list)
    row_actions: list[RowActionsHook] = field(default_factory=list)
    custom_column: list[CustomColumnHook] = field(default_factory=list)
    toolbar: list[ToolbarHook] = field(default_factory=list)

    def apply_columns(self, columns: list[ColumnSpec]) -> list[ColumnSpec]:
        for callback in self.columns:
            columns = list(callback(list(columns)))
        return columns

    def hidden_column_ids(self) -> frozenset[str]:
        hidden: set[str] = set()
        for callback in self.hidden_columns:
            hidden.update(callback())
        return frozenset(hidden)

    def apply_row_actions(self, actions: RowActionSet, user: UserRecord) -> RowActionSet:
        for callback in self.row_actions:
            actions = dict(callback(dict(actions), user))
        return actions

    def render_custom_column(self, column_id: str, user_id: int | None) -> Markup:
        value = ""
        for callback in self.custom_column:
            value = callback(value, column_id, user_id)
        return escape(value)

    def render_toolbar(self) -> Markup:
        return Markup("").join(escape(callback()) for callback in self.toolbar)


def get_users_table_hooks() -> UsersTableHooks:
    """返回应用注册的回调,未注册时返回空注册表."""
    hooks = getattr(current_app, "users_table_hooks", None)
    return hooks if isinstance(hooks, UsersTableHooks) else UsersTableHooks()
