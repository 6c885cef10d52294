"""站点用户管理 - 注册申请模型."""

from __future__ import annotations

import json

from app import db
from app.utils.time_utils import time_utils


class Signup(db.Model):
    """自助注册/邀请注册记录.

    `meta` 为 JSON 文本,其中 `add_to_blog` 指向邀请加入的站点,
    `new_role` 为激活后授予的角色. `active=False` 表示尚未激活.
    """

    __tablename__ = "signups"

    id = db.Column(db.Integer, primary_key=True)
    user_login = db.Column(db.String(60), nullable=False, default="", index=True)
    user_email = db.Column(db.String(100), nullable=False, default="", index=True)
    registered_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    active = db.Column(db.Boolean, nullable=False, default=False)
    activation_key = db.Column(db.String(50), nullable=False, default="")
    meta = db.Column(db.Text, nullable=False, default="")

    def decoded_meta(self) -> dict[str, object]:
        """解析 meta JSON,无法解析或不是对象时返回空字典."""
        try:
            payload = json.loads(self.meta or "")
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def __repr__(self) -> str:
        return f"<Signup {self.user_login} active={self.active}>"
