"""站点用户管理 - 用户模型."""

from __future__ import annotations

from flask_login import UserMixin

from app import db
from app.utils.time_utils import time_utils


class User(UserMixin, db.Model):
    """用户模型.

    用户账号本身不带角色,角色挂在站点成员关系上(见 SiteMembership).
    继承 Flask-Login 的 UserMixin 提供会话管理功能.

    Attributes:
        id: 用户 ID,主键.
        user_login: 登录名,唯一索引.
        user_email: 邮箱.
        display_name: 显示名称.
        first_name: 名.
        last_name: 姓.
        registered_at: 注册时间.
        is_super_admin: 是否为网络超级管理员,拥有所有站点上的全部能力.

    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    user_login = db.Column(db.String(60), unique=True, nullable=False, index=True)
    user_email = db.Column(db.String(100), nullable=False, default="", index=True)
    display_name = db.Column(db.String(250), nullable=False, default="")
    first_name = db.Column(db.String(100), nullable=False, default="")
    last_name = db.Column(db.String(100), nullable=False, default="")
    registered_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    is_super_admin = db.Column(db.Boolean, nullable=False, default=False)

    memberships = db.relationship(
        "SiteMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    preferences = db.relationship(
        "UserMeta",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        """名与姓拼接后的姓名."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        return f"<User {self.user_login}>"
