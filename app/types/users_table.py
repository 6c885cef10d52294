"""用户列表表格相关类型定义."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from markupsafe import Markup


@dataclass(frozen=True, slots=True)
class UserRecord:
    """列表中的一行用户数据.

    `pending=True` 表示由待激活邀请合成的伪记录,不对应存储中的成员关系.
    邀请注册表(signup)合成的记录没有 `id`.
    """

    id: int | None
    user_login: str
    email: str
    display_name: str = ""
    first_name: str = ""
    last_name: str = ""
    avatar_url: str = ""
    roles: tuple[str, ...] = ()
    capabilities: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    post_count: int | None = None
    pending: bool = False


@dataclass(frozen=True, slots=True)
class PageFilter:
    """一次列表请求的查询条件.

    `site_id` 仅在按站点查看(tenant-scoped)时设置.
    """

    search: str = ""
    role: str | None = None
    sort_field: str | None = None
    sort_order: str | None = None
    page: int = 1
    per_page: int = 20
    site_id: int | None = None

    def __post_init__(self) -> None:
        if self.page < 1 or self.per_page < 1:
            msg = "page 与 per_page 必须大于等于 1"
            raise ValueError(msg)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """表格列定义. `sortable` 为排序字段名,不可排序时为 None."""

    id: str
    label: str
    sortable: str | None = None
    hidden: bool = False


@dataclass(frozen=True, slots=True)
class RowAction:
    """行内操作链接."""

    label: str
    url: str
    token: str | None = None
    css_class: str | None = None


RowActionSet = dict[str, RowAction]


@dataclass(frozen=True, slots=True)
class ViewLink:
    """按角色筛选的视图链接."""

    role: str
    label: str
    count: int
    url: str
    current: bool = False


@dataclass(frozen=True, slots=True)
class UsersTableViewState:
    """单次请求解析得到的表格展示状态."""

    filter: PageFilter
    columns: tuple[ColumnSpec, ...]
    pending_view: bool
    tenant_scoped: bool
    site_id: int
    base_url: str

    @property
    def column_ids(self) -> tuple[str, ...]:
        return tuple(column.id for column in self.columns)


@dataclass(frozen=True, slots=True)
class UsersTablePagination:
    """附加在渲染结果上的分页元数据."""

    total_items: int
    per_page: int
    total_pages: int
    page: int


@dataclass(frozen=True, slots=True)
class UsersTablePage:
    """表格渲染结果."""

    html: Markup
    pagination: UsersTablePagination
    row_count: int
