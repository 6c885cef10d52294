"""能力检查.

检查器根据主体在当前站点上的角色推导能力映射. 元能力(如 `edit_user`)针对具体目标用户,
先做目标相关的限制,再映射到基础能力. 任何异常都按拒绝处理.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from flask import current_app, g, has_app_context

from app.constants import Capability
from app.repositories.users_repository import UsersRepository
from app.services.users_table.roles import RoleRegistry
from app.services.users_table.site_context import SiteContext, get_site_context
from app.utils.structlog_config import log_warning

_CACHE_ATTR = "_actor_capabilities_cache"


class PermissionChecker(Protocol):
    """能力检查接口."""

    def can(self, actor: object, capability: str, target_id: int | None = None) -> bool: ...


class CapabilityPermissionChecker:
    """基于角色能力映射的检查器."""

    def __init__(
        self,
        repository: UsersRepository | None = None,
        registry: RoleRegistry | None = None,
        site_context: SiteContext | None = None,
    ) -> None:
        self._repository = repository or UsersRepository()
        self._registry = registry or RoleRegistry()
        self._site_context = site_context

    @property
    def registry(self) -> RoleRegistry:
        return self._registry

    def _current_site_id(self) -> int:
        context = self._site_context or get_site_context()
        return context.current_site_id

    def capabilities_for(self, actor: object, site_id: int | None = None) -> Mapping[str, bool]:
        """返回主体在站点上的能力映射,同一请求内按 (主体, 站点) 缓存."""
        actor_id = getattr(actor, "id", None)
        if actor_id is None or not getattr(actor, "is_authenticated", False):
            return {}
        resolved_site_id = site_id if site_id is not None else self._current_site_id()

        cache: dict[tuple[int, int], Mapping[str, bool]] | None = None
        if has_app_context():
            cache = g.setdefault(_CACHE_ATTR, {})
            cached = cache.get((actor_id, resolved_site_id))
            if cached is not None:
                return cached

        if getattr(actor, "is_super_admin", False):
            capabilities = dict.fromkeys(self._registry.all_capabilities() | set(Capability.NETWORK_ONLY), True)
        else:
            roles = self._repository.roles_for_users([actor_id], resolved_site_id).get(actor_id, ())
            capabilities = self._registry.capabilities_for(roles)

        if cache is not None:
            cache[(actor_id, resolved_site_id)] = capabilities
        return capabilities

    @staticmethod
    def reset_cache() -> None:
        """角色变更后清空本请求内的能力缓存."""
        if has_app_context():
            g.pop(_CACHE_ATTR, None)

    def can(self, actor: object, capability: str, target_id: int | None = None) -> bool:
        try:
            return self._evaluate(actor, capability, target_id)
        except Exception as exc:
            log_warning(
                "能力检查失败,按拒绝处理",
                module="users_table",
                exception=exc,
                capability=capability,
                target_id=target_id,
            )
            return False

    def _evaluate(self, actor: object, capability: str, target_id: int | None) -> bool:
        capabilities = self.capabilities_for(actor)
        if not Capability.is_meta(capability):
            return bool(capabilities.get(capability, False))

        actor_id = getattr(actor, "id", None)
        if capability == Capability.EDIT_USER and target_id is not None and target_id == actor_id:
            return bool(capabilities.get(Capability.READ, False))

        if target_id is not None and not getattr(actor, "is_super_admin", False):
            target = self._repository.get_by_id(target_id)
            # 只有超级管理员可以管理其他超级管理员
            if target is not None and target.is_super_admin:
                return False

        primitive = Capability.META_TO_PRIMITIVE[capability]
        return bool(capabilities.get(primitive, False))

    def editable_roles(self, actor: object) -> list[str]:
        """主体在当前站点可以分配的角色,按注册表顺序."""
        return self._registry.editable_roles(
            self.capabilities_for(actor),
            unrestricted=bool(getattr(actor, "is_super_admin", False)),
        )


def get_permission_checker() -> CapabilityPermissionChecker:
    """返回应用注册的能力检查器,未注册时使用默认实现."""
    checker = current_app.extensions.get("users_table.permission_checker")
    return checker if isinstance(checker, CapabilityPermissionChecker) else CapabilityPermissionChecker()
