"""能力(capability)常量.

基础能力挂在角色上; 元能力(meta capability)针对具体目标用户,由权限检查器映射到基础能力.
"""

from __future__ import annotations

from typing import ClassVar


class Capability:
    """能力名称常量."""

    # 基础能力
    READ: ClassVar[str] = "read"
    EDIT_POSTS: ClassVar[str] = "edit_posts"
    PUBLISH_POSTS: ClassVar[str] = "publish_posts"
    EDIT_OTHERS_POSTS: ClassVar[str] = "edit_others_posts"
    MODERATE_COMMENTS: ClassVar[str] = "moderate_comments"
    LIST_USERS: ClassVar[str] = "list_users"
    CREATE_USERS: ClassVar[str] = "create_users"
    EDIT_USERS: ClassVar[str] = "edit_users"
    DELETE_USERS: ClassVar[str] = "delete_users"
    REMOVE_USERS: ClassVar[str] = "remove_users"
    PROMOTE_USERS: ClassVar[str] = "promote_users"
    MANAGE_OPTIONS: ClassVar[str] = "manage_options"
    # 仅超级管理员拥有
    MANAGE_SITES: ClassVar[str] = "manage_sites"

    # 元能力 -> 基础能力
    EDIT_USER: ClassVar[str] = "edit_user"
    DELETE_USER: ClassVar[str] = "delete_user"
    REMOVE_USER: ClassVar[str] = "remove_user"
    PROMOTE_USER: ClassVar[str] = "promote_user"

    META_TO_PRIMITIVE: ClassVar[dict[str, str]] = {
        EDIT_USER: EDIT_USERS,
        DELETE_USER: DELETE_USERS,
        REMOVE_USER: REMOVE_USERS,
        PROMOTE_USER: PROMOTE_USERS,
    }

    NETWORK_ONLY: ClassVar[tuple[str, ...]] = (MANAGE_SITES,)

    @classmethod
    def is_meta(cls, capability: str) -> bool:
        """判断是否为针对目标用户的元能力."""
        return capability in cls.META_TO_PRIMITIVE
