"""待激活邀请 Repository.

邀请有两个来源: 站点选项中的 `new_user_<key>` 记录,以及尚未激活的注册申请.
"""

from __future__ import annotations

from app.constants import PendingUsers
from app.models.signup import Signup
from app.models.site_option import SiteOption
from app.utils.query_utils import LIKE_ESCAPE_CHAR, escape_like


class PendingInvitationsRepository:
    """只读查询,结果按主键升序返回."""

    @staticmethod
    def list_invitation_options(site_id: int) -> list[SiteOption]:
        pattern = f"%{escape_like(PendingUsers.OPTION_MARKER)}%"
        return (
            SiteOption.query.filter(
                SiteOption.site_id == site_id,
                SiteOption.option_name.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
            )
            .order_by(SiteOption.id.asc())
            .all()
        )

    @staticmethod
    def list_inactive_signups() -> list[Signup]:
        return Signup.query.filter(Signup.active.is_(False)).order_by(Signup.id.asc()).all()
