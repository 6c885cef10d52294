"""用户角色常量.

定义站点角色、角色能力与显示名称,避免魔法字符串.
角色的声明顺序即角色注册表的枚举顺序.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import ClassVar

from app.constants.capabilities import Capability

_SUBSCRIBER_CAPS = (Capability.READ,)
_CONTRIBUTOR_CAPS = (*_SUBSCRIBER_CAPS, Capability.EDIT_POSTS)
_AUTHOR_CAPS = (*_CONTRIBUTOR_CAPS, Capability.PUBLISH_POSTS)
_EDITOR_CAPS = (*_AUTHOR_CAPS, Capability.EDIT_OTHERS_POSTS, Capability.MODERATE_COMMENTS)
_ADMINISTRATOR_CAPS = (
    *_EDITOR_CAPS,
    Capability.LIST_USERS,
    Capability.CREATE_USERS,
    Capability.EDIT_USERS,
    Capability.DELETE_USERS,
    Capability.REMOVE_USERS,
    Capability.PROMOTE_USERS,
    Capability.MANAGE_OPTIONS,
)


class UserRole:
    """站点用户角色常量."""

    # 角色值
    ADMINISTRATOR: ClassVar[str] = "administrator"  # 管理员
    EDITOR: ClassVar[str] = "editor"  # 编辑
    AUTHOR: ClassVar[str] = "author"  # 作者
    CONTRIBUTOR: ClassVar[str] = "contributor"  # 投稿者
    SUBSCRIBER: ClassVar[str] = "subscriber"  # 订阅者

    # 所有角色(注册表顺序)
    ALL: ClassVar[tuple[str, ...]] = (ADMINISTRATOR, EDITOR, AUTHOR, CONTRIBUTOR, SUBSCRIBER)

    # 角色能力映射
    CAPABILITIES: ClassVar[Mapping[str, tuple[str, ...]]] = MappingProxyType(
        {
            ADMINISTRATOR: _ADMINISTRATOR_CAPS,
            EDITOR: _EDITOR_CAPS,
            AUTHOR: _AUTHOR_CAPS,
            CONTRIBUTOR: _CONTRIBUTOR_CAPS,
            SUBSCRIBER: _SUBSCRIBER_CAPS,
        },
    )

    # 角色显示名称
    DISPLAY_NAMES: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            ADMINISTRATOR: "Administrator",
            EDITOR: "Editor",
            AUTHOR: "Author",
            CONTRIBUTOR: "Contributor",
            SUBSCRIBER: "Subscriber",
        },
    )
