"""站点用户管理 - 站点选项模型."""

from __future__ import annotations

import json

from app import db


class SiteOption(db.Model):
    """站点级键值选项.

    待激活的用户邀请以 `new_user_<key>` 为名保存,值为
    `{"user_id": <int>, "role": <str>}` 的 JSON 文本.
    """

    __tablename__ = "site_options"
    __table_args__ = (db.UniqueConstraint("site_id", "option_name", name="uq_site_options_site_name"),)

    id = db.Column(db.Integer, primary_key=True)
    site_id = db.Column(db.Integer, db.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    option_name = db.Column(db.String(191), nullable=False, index=True)
    option_value = db.Column(db.Text, nullable=False, default="")

    def decoded_value(self) -> object:
        """解析 JSON 值,无法解析时返回 None."""
        try:
            return json.loads(self.option_value or "")
        except ValueError:
            return None

    def __repr__(self) -> str:
        return f"<SiteOption site={self.site_id} {self.option_name}>"
