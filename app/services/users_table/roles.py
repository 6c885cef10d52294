"""角色注册表.

角色的枚举顺序即 `UserRole.ALL` 的声明顺序,显示角色的平局规则依赖该顺序.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from app.constants import UserRole


class RoleRegistry:
    """站点角色注册表,提供显示名称、能力映射与可分配角色计算."""

    def __init__(
        self,
        capabilities: Mapping[str, Iterable[str]] | None = None,
        display_names: Mapping[str, str] | None = None,
    ) -> None:
        source = capabilities if capabilities is not None else UserRole.CAPABILITIES
        self._capabilities: dict[str, frozenset[str]] = {role: frozenset(caps) for role, caps in source.items()}
        self._display_names = dict(display_names if display_names is not None else UserRole.DISPLAY_NAMES)

    def names(self) -> dict[str, str]:
        """按注册表顺序返回 角色 ID -> 显示名称."""
        return {role: self._display_names.get(role, role) for role in self._capabilities}

    def role_ids(self) -> tuple[str, ...]:
        return tuple(self._capabilities)

    def display_name(self, role: str) -> str | None:
        if role not in self._capabilities:
            return None
        return self._display_names.get(role, role)

    def all_capabilities(self) -> frozenset[str]:
        merged: set[str] = set()
        for caps in self._capabilities.values():
            merged.update(caps)
        return frozenset(merged)

    def capabilities_for(self, roles: Iterable[str]) -> dict[str, bool]:
        """合并多个角色的能力; 未注册的角色不贡献任何能力."""
        merged: dict[str, bool] = {}
        for role in roles:
            for capability in self._capabilities.get(role, ()):
                merged[capability] = True
        return merged

    def editable_roles(self, actor_capabilities: Mapping[str, bool], *, unrestricted: bool = False) -> list[str]:
        """返回当前主体可以分配的角色.

        角色的全部能力都被主体持有时视为可分配; `unrestricted=True`(超级管理员)时全部可分配.
        """
        if unrestricted:
            return list(self._capabilities)
        held = {capability for capability, granted in actor_capabilities.items() if granted}
        return [role for role, caps in self._capabilities.items() if caps <= held]
