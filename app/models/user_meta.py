"""站点用户管理 - 用户偏好模型."""

from __future__ import annotations

from app import db


class UserMeta(db.Model):
    """用户级键值偏好,例如各列表页的每页数量."""

    __tablename__ = "user_meta"
    __table_args__ = (db.UniqueConstraint("user_id", "meta_key", name="uq_user_meta_user_key"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    meta_key = db.Column(db.String(255), nullable=False, index=True)
    meta_value = db.Column(db.Text, nullable=True)

    user = db.relationship("User", back_populates="preferences")

    def __repr__(self) -> str:
        return f"<UserMeta user={self.user_id} {self.meta_key}>"
