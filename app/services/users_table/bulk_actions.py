"""用户列表批量/行内操作.

职责:
- 解析表单中实际要执行的操作
- 按主体能力逐个处理选中的用户,无权处理的用户计入 skipped
- 统一 commit 一次
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypedDict

from flask import current_app

from app import db
from app.constants import BulkActions, Capability, ErrorMessages
from app.errors import AuthorizationError, ValidationError
from app.repositories.users_repository import UsersRepository
from app.schemas.users_table import UsersBulkActionForm
from app.services.users_table.permissions import CapabilityPermissionChecker, get_permission_checker
from app.utils.structlog_config import log_info


class BulkActionResult(TypedDict):
    """批量操作结果."""

    action: str
    processed: list[int]
    skipped: list[int]


class UsersBulkActionService:
    """批量/行内操作分发服务."""

    def __init__(
        self,
        repository: UsersRepository | None = None,
        permission_checker: CapabilityPermissionChecker | None = None,
    ) -> None:
        self._repository = repository or UsersRepository()
        self._checker = permission_checker

    @property
    def checker(self) -> CapabilityPermissionChecker:
        return self._checker or get_permission_checker()

    @staticmethod
    def current_action(form: UsersBulkActionForm) -> str | None:
        """返回要执行的操作,选择了新角色并提交 Change 时总是 promote."""
        return form.resolve_action()

    @staticmethod
    def _multisite() -> bool:
        return bool(current_app.config.get("MULTISITE", False))

    def _require(self, actor: object, capability: str) -> None:
        if not self.checker.can(actor, capability):
            raise AuthorizationError(
                ErrorMessages.PERMISSION_REQUIRED.format(permission=capability),
                message_key="PERMISSION_REQUIRED",
                extra={"permission_type": capability},
            )

    def dispatch(
        self,
        action: str | None,
        user_ids: Sequence[int],
        *,
        actor: object,
        site_id: int,
        new_role: str | None = None,
        tenant_scoped: bool = False,
    ) -> BulkActionResult:
        """执行操作并提交事务.

        按站点查看 (``tenant_scoped``) 时总是按多站点模式处理,只允许移出站点.

        Raises:
            ValidationError: 操作未知、未选择用户或与部署模式不匹配时抛出.
            AuthorizationError: 主体缺少操作所需的能力或无权分配目标角色时抛出.

        """
        if action not in BulkActions.ALL:
            raise ValidationError(message_key="UNKNOWN_BULK_ACTION", extra={"action": action})
        if not user_ids:
            raise ValidationError(message_key="NO_USERS_SELECTED")

        multisite = tenant_scoped or self._multisite()

        if action == BulkActions.PROMOTE:
            processed, skipped = self._promote(user_ids, actor=actor, site_id=site_id, new_role=new_role or "")
        elif action == BulkActions.DELETE:
            processed, skipped = self._delete(user_ids, actor=actor, multisite=multisite)
        else:
            processed, skipped = self._remove(user_ids, actor=actor, site_id=site_id, multisite=multisite)

        db.session.commit()
        self.checker.reset_cache()
        log_info(
            "用户批量操作完成",
            module="users_table",
            action=action,
            site_id=site_id,
            processed=processed,
            skipped=skipped,
            actor_id=getattr(actor, "id", None),
        )
        return {"action": action, "processed": processed, "skipped": skipped}

    def _promote(
        self,
        user_ids: Sequence[int],
        *,
        actor: object,
        site_id: int,
        new_role: str,
    ) -> tuple[list[int], list[int]]:
        self._require(actor, Capability.PROMOTE_USERS)
        if new_role not in self.checker.editable_roles(actor):
            raise AuthorizationError(message_key="ROLE_NOT_EDITABLE", extra={"role": new_role})

        processed: list[int] = []
        skipped: list[int] = []
        for user_id in user_ids:
            membership = self._repository.get_membership(site_id, user_id)
            if membership is None or not self.checker.can(actor, Capability.PROMOTE_USER, user_id):
                skipped.append(user_id)
                continue
            self._repository.set_roles(membership, [new_role])
            processed.append(user_id)
        return processed, skipped

    def _delete(
        self,
        user_ids: Sequence[int],
        *,
        actor: object,
        multisite: bool,
    ) -> tuple[list[int], list[int]]:
        if multisite:
            raise ValidationError(message_key="BULK_ACTION_MODE_MISMATCH", extra={"action": BulkActions.DELETE})
        self._require(actor, Capability.DELETE_USERS)

        protected_login = str(current_app.config.get("PROTECTED_ACCOUNT_LOGIN") or "")
        actor_id = getattr(actor, "id", None)
        actor_login = getattr(actor, "user_login", None)
        users = self._repository.get_by_ids(user_ids)

        processed: list[int] = []
        skipped: list[int] = []
        for user_id in user_ids:
            user = users.get(user_id)
            protected = bool(protected_login) and user is not None and user.user_login == protected_login
            if (
                user is None
                or user_id == actor_id
                or (protected and actor_login != protected_login)
                or not self.checker.can(actor, Capability.DELETE_USER, user_id)
            ):
                skipped.append(user_id)
                continue
            self._repository.delete_user(user)
            processed.append(user_id)
        return processed, skipped

    def _remove(
        self,
        user_ids: Sequence[int],
        *,
        actor: object,
        site_id: int,
        multisite: bool,
    ) -> tuple[list[int], list[int]]:
        if not multisite:
            raise ValidationError(message_key="BULK_ACTION_MODE_MISMATCH", extra={"action": BulkActions.REMOVE})
        self._require(actor, Capability.REMOVE_USERS)

        actor_id = getattr(actor, "id", None)
        processed: list[int] = []
        skipped: list[int] = []
        for user_id in user_ids:
            membership = self._repository.get_membership(site_id, user_id)
            if (
                membership is None
                or user_id == actor_id
                or not self.checker.can(actor, Capability.REMOVE_USER, user_id)
            ):
                skipped.append(user_id)
                continue
            self._repository.remove_membership(membership)
            processed.append(user_id)
        return processed, skipped
