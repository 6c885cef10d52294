"""LIKE 查询模式构造工具.

用户输入中的 `%`、`_` 与反斜杠按字面量匹配, 只有首尾的 `*` 作为通配符.
"""

from __future__ import annotations

LIKE_ESCAPE_CHAR = "\\"


def escape_like(value: str) -> str:
    """转义 LIKE 元字符, 配合 ``escape=LIKE_ESCAPE_CHAR`` 使用."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def wildcard_to_like(search: str) -> str:
    """把首尾 `*` 通配的搜索词转换为 LIKE 模式, 中间的 `*` 按字面量匹配."""
    prefix = "%" if search.startswith("*") else ""
    suffix = "%" if search.endswith("*") else ""
    return f"{prefix}{escape_like(search.strip('*'))}{suffix}"
