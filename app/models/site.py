"""站点用户管理 - 站点与成员关系模型."""

from __future__ import annotations

from app import db
from app.utils.time_utils import time_utils


class Site(db.Model):
    """站点模型.

    单站点部署只有一条记录; 多站点部署下每个站点维护独立的成员集合.
    """

    __tablename__ = "sites"

    id = db.Column(db.Integer, primary_key=True)
    domain = db.Column(db.String(200), nullable=False, default="")
    path = db.Column(db.String(100), nullable=False, default="/")
    name = db.Column(db.String(200), nullable=False, default="")

    memberships = db.relationship(
        "SiteMembership",
        back_populates="site",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Site {self.id} {self.domain}{self.path}>"


class SiteMembership(db.Model):
    """用户在站点上的成员关系.

    没有任何角色的成员关系表示该用户在站点上的能力映射为空.
    """

    __tablename__ = "site_memberships"
    __table_args__ = (db.UniqueConstraint("site_id", "user_id", name="uq_site_memberships_site_user"),)

    id = db.Column(db.Integer, primary_key=True)
    site_id = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)

    site = db.relationship("Site", back_populates="memberships")
    user = db.relationship("User", back_populates="memberships")
    roles = db.relationship(
        "MembershipRole",
        back_populates="membership",
        cascade="all, delete-orphan",
        order_by="MembershipRole.position",
    )

    @property
    def role_names(self) -> tuple[str, ...]:
        """按声明顺序返回角色 ID."""
        return tuple(role.role for role in self.roles)

    def __repr__(self) -> str:
        return f"<SiteMembership site={self.site_id} user={self.user_id}>"


class MembershipRole(db.Model):
    """成员关系上的一个角色,`position` 决定角色列表顺序."""

    __tablename__ = "membership_roles"
    __table_args__ = (db.UniqueConstraint("membership_id", "role", name="uq_membership_roles_membership_role"),)

    id = db.Column(db.Integer, primary_key=True)
    membership_id = db.Column(
        db.Integer,
        db.ForeignKey("site_memberships.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = db.Column(db.String(50), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    membership = db.relationship("SiteMembership", back_populates="roles")

    def __repr__(self) -> str:
        return f"<MembershipRole {self.role}>"
