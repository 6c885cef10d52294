"""用户查询适配器.

把存储层的 ORM 对象转换为渲染使用的 UserRecord. 过滤、排序、计数都由存储层完成,
存储层抛出的异常原样向上传播.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

from app.constants import UsersTablePaths
from app.models.user import User
from app.repositories.users_repository import UsersRepository
from app.services.users_table.roles import RoleRegistry
from app.services.users_table.site_context import SiteContext, get_site_context
from app.types.listing import PaginatedResult
from app.types.users_table import PageFilter, UserRecord

AVATAR_SIZE = 32


def avatar_url(email: str, size: int = AVATAR_SIZE) -> str:
    digest = hashlib.md5((email or "").strip().lower().encode("utf-8"), usedforsecurity=False).hexdigest()
    return UsersTablePaths.AVATAR.format(digest=digest, size=size)


def build_record(
    *,
    user_id: int | None,
    user_login: str,
    email: str,
    roles: Iterable[str],
    registry: RoleRegistry,
    display_name: str = "",
    first_name: str = "",
    last_name: str = "",
    post_count: int | None = None,
    pending: bool = False,
) -> UserRecord:
    """组装 UserRecord,能力映射由角色推导."""
    role_tuple = tuple(roles)
    return UserRecord(
        id=user_id,
        user_login=user_login,
        email=email,
        display_name=display_name,
        first_name=first_name,
        last_name=last_name,
        avatar_url=avatar_url(email),
        roles=role_tuple,
        capabilities=registry.capabilities_for(role_tuple),
        post_count=post_count,
        pending=pending,
    )


class UserQueryAdapter:
    """按 PageFilter 读取一页站点成员."""

    def __init__(
        self,
        repository: UsersRepository | None = None,
        registry: RoleRegistry | None = None,
        site_context: SiteContext | None = None,
    ) -> None:
        self._repository = repository or UsersRepository()
        self._registry = registry or RoleRegistry()
        self._site_context = site_context

    def scope_site_id(self, page_filter: PageFilter) -> int:
        if page_filter.site_id is not None:
            return page_filter.site_id
        return (self._site_context or get_site_context()).current_site_id

    def to_record(self, user: User, roles: Iterable[str], *, pending: bool = False) -> UserRecord:
        return build_record(
            user_id=user.id,
            user_login=user.user_login,
            email=user.user_email or "",
            roles=roles,
            registry=self._registry,
            display_name=user.display_name or "",
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            pending=pending,
        )

    def fetch_page(self, page_filter: PageFilter) -> PaginatedResult[UserRecord]:
        site_id = self.scope_site_id(page_filter)
        page = self._repository.list_page(page_filter, site_id)
        roles_by_user = self._repository.roles_for_users([user.id for user in page.items], site_id)
        items = [self.to_record(user, roles_by_user.get(user.id, ())) for user in page.items]
        return PaginatedResult(items=items, total=page.total, page=page.page, pages=page.pages, limit=page.limit)
