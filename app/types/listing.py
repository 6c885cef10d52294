"""列表/分页通用结构类型."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class PaginatedResult(Generic[T]):
    """一页查询结果.

    `pages` 为 0 表示没有任何记录; `limit` 是实际使用的每页数量.
    """

    items: list[T]
    total: int
    page: int
    pages: int
    limit: int
