"""站点用户 Repository.

职责:
- 负责站点成员查询的 Query 组装与数据库读取(read)
- 负责成员角色变更、移除成员与删除用户的落库(write)
- 不做序列化、不返回 Response、不 commit
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Any, cast

from sqlalchemy import func, or_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from app import db
from app.errors import ValidationError
from app.models.post import Post
from app.models.site import MembershipRole, Site, SiteMembership
from app.models.user import User
from app.types.listing import PaginatedResult
from app.types.users_table import PageFilter
from app.utils.query_utils import LIKE_ESCAPE_CHAR, wildcard_to_like

DEFAULT_SORT_FIELD = "login"


class UsersRepository:
    """站点用户查询 Repository."""

    def get_by_id(self, user_id: int) -> User | None:
        return cast("User | None", db.session.get(User, user_id))

    def get_by_ids(self, user_ids: Collection[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        users = User.query.filter(User.id.in_(list(user_ids))).all()
        return {user.id: user for user in users}

    def get_site(self, site_id: int) -> Site | None:
        return cast("Site | None", db.session.get(Site, site_id))

    def get_membership(self, site_id: int, user_id: int) -> SiteMembership | None:
        return cast(
            "SiteMembership | None",
            SiteMembership.query.filter_by(site_id=site_id, user_id=user_id).first(),
        )

    def roles_for_users(self, user_ids: Collection[int], site_id: int) -> dict[int, tuple[str, ...]]:
        """批量读取用户在站点上的有序角色列表,非成员不出现在结果中."""
        if not user_ids:
            return {}
        memberships = (
            SiteMembership.query.filter(
                SiteMembership.site_id == site_id,
                SiteMembership.user_id.in_(list(user_ids)),
            )
            .all()
        )
        return {membership.user_id: membership.role_names for membership in memberships}

    def list_page(self, filters: PageFilter, site_id: int) -> PaginatedResult[User]:
        """分页列出站点成员.

        Raises:
            ValidationError: 排序字段不受支持时抛出.

        """
        query: Query[Any] = cast(
            Query[Any],
            User.query.join(SiteMembership, SiteMembership.user_id == User.id).filter(
                SiteMembership.site_id == site_id,
            ),
        )

        if filters.search:
            pattern = wildcard_to_like(filters.search)
            query = query.filter(
                or_(
                    User.user_login.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    User.user_email.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    User.display_name.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                ),
            )

        if filters.role:
            role_exists = (
                db.session.query(MembershipRole.id)
                .filter(
                    MembershipRole.membership_id == SiteMembership.id,
                    MembershipRole.role == filters.role,
                )
                .exists()
            )
            query = query.filter(role_exists)

        order_column = self._resolve_order_column(filters.sort_field or DEFAULT_SORT_FIELD, site_id)
        descending = (filters.sort_order or "").lower() == "desc"
        query = query.order_by(order_column.desc() if descending else order_column.asc(), User.id.asc())

        pagination = cast(Any, query).paginate(page=filters.page, per_page=filters.per_page, error_out=False)
        return PaginatedResult(
            items=list(pagination.items),
            total=pagination.total or 0,
            page=filters.page,
            pages=pagination.pages,
            limit=filters.per_page,
        )

    @staticmethod
    def _resolve_order_column(sort_field: str, site_id: int) -> ColumnElement[Any]:
        if sort_field == "post_count":
            post_count = (
                db.session.query(func.count(Post.id))
                .filter(
                    Post.author_id == User.id,
                    Post.site_id == site_id,
                    Post.status == Post.STATUS_PUBLISH,
                )
                .correlate(User)
                .scalar_subquery()
            )
            return cast(ColumnElement[Any], post_count)

        sortable_fields: dict[str, ColumnElement[Any]] = {
            "login": cast(ColumnElement[Any], User.user_login),
            "name": cast(ColumnElement[Any], User.display_name),
            "email": cast(ColumnElement[Any], User.user_email),
            "registered": cast(ColumnElement[Any], User.registered_at),
            "id": cast(ColumnElement[Any], User.id),
        }
        if sort_field not in sortable_fields:
            raise ValidationError(
                message_key="INVALID_SORT_FIELD",
                extra={"sort_field": sort_field},
            )
        return sortable_fields[sort_field]

    @staticmethod
    def count_by_role(site_id: int) -> tuple[dict[str, int], int]:
        """统计站点成员总数与各角色成员数."""
        total = int(SiteMembership.query.filter_by(site_id=site_id).count() or 0)
        rows = (
            db.session.query(MembershipRole.role, func.count(func.distinct(SiteMembership.user_id)))
            .join(SiteMembership, SiteMembership.id == MembershipRole.membership_id)
            .filter(SiteMembership.site_id == site_id)
            .group_by(MembershipRole.role)
            .all()
        )
        return {str(role): int(count or 0) for role, count in rows}, total

    @staticmethod
    def count_posts_by_authors(user_ids: Collection[int], site_id: int) -> dict[int, int]:
        """批量统计作者在站点上的已发布文章数,没有文章的作者计为 0."""
        if not user_ids:
            return {}
        rows = (
            db.session.query(Post.author_id, func.count(Post.id))
            .filter(
                Post.author_id.in_(list(user_ids)),
                Post.site_id == site_id,
                Post.status == Post.STATUS_PUBLISH,
            )
            .group_by(Post.author_id)
            .all()
        )
        counts = {int(author_id): int(count or 0) for author_id, count in rows}
        return {user_id: counts.get(user_id, 0) for user_id in user_ids}

    def set_roles(self, membership: SiteMembership, roles: Sequence[str]) -> SiteMembership:
        """覆盖成员关系上的角色列表."""
        membership.roles.clear()
        db.session.flush()
        for position, role in enumerate(roles):
            membership.roles.append(MembershipRole(role=role, position=position))
        db.session.flush()
        return membership

    def remove_membership(self, membership: SiteMembership) -> None:
        db.session.delete(membership)
        db.session.flush()

    def delete_user(self, user: User) -> None:
        """删除用户及其文章、成员关系与偏好设置."""
        Post.query.filter(Post.author_id == user.id).delete(synchronize_session=False)
        db.session.delete(user)
        db.session.flush()
