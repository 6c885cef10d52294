"""待激活用户来源.

待激活用户不是站点成员,由两类邀请合成为 `pending=True` 的 UserRecord:
站点选项中的 `new_user_<key>` 邀请,以及邀请到当前站点、尚未激活的注册申请.
同一邮箱只保留扫描顺序中的第一条.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from app.constants import PendingUsers
from app.repositories.pending_invitations_repository import PendingInvitationsRepository
from app.repositories.users_repository import UsersRepository
from app.services.users_table.query_adapter import build_record
from app.services.users_table.roles import RoleRegistry
from app.types.users_table import UserRecord
from app.utils.structlog_config import log_warning


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _coerce_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class PendingUsersSource:
    """读取并合成站点的待激活用户."""

    def __init__(
        self,
        invitations_repository: PendingInvitationsRepository | None = None,
        users_repository: UsersRepository | None = None,
        registry: RoleRegistry | None = None,
    ) -> None:
        self._invitations = invitations_repository or PendingInvitationsRepository()
        self._users = users_repository or UsersRepository()
        self._registry = registry or RoleRegistry()

    def invitation_entries(self, site_id: int) -> Iterator[UserRecord]:
        """站点选项中的邀请,引用的用户不存在或值格式错误时跳过."""
        for option in self._invitations.list_invitation_options(site_id):
            value = option.decoded_value()
            user_id = _coerce_int(value.get(PendingUsers.OPTION_USER_ID_KEY)) if isinstance(value, dict) else None
            if user_id is None:
                log_warning(
                    "待激活邀请格式错误,已跳过",
                    module="users_table",
                    site_id=site_id,
                    option_name=option.option_name,
                )
                continue

            user = self._users.get_by_id(user_id)
            if user is None:
                log_warning(
                    "待激活邀请引用的用户不存在,已跳过",
                    module="users_table",
                    site_id=site_id,
                    option_name=option.option_name,
                    user_id=user_id,
                )
                continue

            role = value.get(PendingUsers.OPTION_ROLE_KEY)
            yield build_record(
                user_id=user.id,
                user_login=user.user_login,
                email=user.user_email or "",
                roles=(role,) if isinstance(role, str) and role else (),
                registry=self._registry,
                display_name=user.display_name or "",
                first_name=user.first_name or "",
                last_name=user.last_name or "",
                pending=True,
            )

    def signup_entries(self, site_id: int) -> Iterator[UserRecord]:
        """邀请到该站点且尚未激活的注册申请,合成的记录没有用户 ID."""
        for signup in self._invitations.list_inactive_signups():
            meta = signup.decoded_meta()
            if _coerce_int(meta.get(PendingUsers.SIGNUP_SITE_KEY)) != site_id:
                continue
            role = meta.get(PendingUsers.SIGNUP_ROLE_KEY)
            yield build_record(
                user_id=None,
                user_login=signup.user_login,
                email=signup.user_email or "",
                roles=(role,) if isinstance(role, str) and role else (),
                registry=self._registry,
                pending=True,
            )

    def collect(self, site_id: int, seen_emails: Iterable[str] = ()) -> list[UserRecord]:
        """按扫描顺序合并两类邀请,跳过已出现过的邮箱."""
        seen = {normalize_email(email) for email in seen_emails}
        records: list[UserRecord] = []
        for record in (*self.invitation_entries(site_id), *self.signup_entries(site_id)):
            email = normalize_email(record.email)
            if email in seen:
                continue
            seen.add(email)
            records.append(record)
        return records
