"""统一时间处理工具模块."""

from __future__ import annotations

from datetime import UTC, datetime


class TimeUtils:
    """统一时间处理工具类.

    所有持久化时间戳与响应时间均使用带时区信息的 UTC 时间.
    """

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间."""
        return datetime.now(UTC)

    @staticmethod
    def to_iso(value: datetime | None) -> str | None:
        """格式化为 ISO 8601 字符串, 无时区信息时视为 UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.isoformat()


time_utils = TimeUtils()
