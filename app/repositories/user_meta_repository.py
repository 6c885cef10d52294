"""用户偏好 Repository."""

from __future__ import annotations

from typing import cast

from app import db
from app.models.user_meta import UserMeta


class UserMetaRepository:
    """读写用户级偏好设置,不 commit."""

    def get_value(self, user_id: int, meta_key: str) -> str | None:
        meta = cast("UserMeta | None", UserMeta.query.filter_by(user_id=user_id, meta_key=meta_key).first())
        return meta.meta_value if meta is not None else None

    def set_value(self, user_id: int, meta_key: str, meta_value: str) -> UserMeta:
        meta = cast("UserMeta | None", UserMeta.query.filter_by(user_id=user_id, meta_key=meta_key).first())
        if meta is None:
            meta = UserMeta(user_id=user_id, meta_key=meta_key)
            db.session.add(meta)
        meta.meta_value = meta_value
        db.session.flush()
        return meta
