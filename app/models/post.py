"""站点用户管理 - 文章模型."""

from __future__ import annotations

from typing import ClassVar

from app import db
from app.utils.time_utils import time_utils


class Post(db.Model):
    """文章模型.

    用户列表只统计作者在站点上已发布(`publish`)的文章数.
    """

    __tablename__ = "posts"

    STATUS_PUBLISH: ClassVar[str] = "publish"
    STATUS_DRAFT: ClassVar[str] = "draft"

    id = db.Column(db.Integer, primary_key=True)
    site_id = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False, default="")
    status = db.Column(db.String(20), nullable=False, default=STATUS_DRAFT, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)

    def __repr__(self) -> str:
        return f"<Post {self.id} author={self.author_id} {self.status}>"
