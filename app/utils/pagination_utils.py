"""分页参数解析工具.

用于统一解析列表页的每页数量偏好, 非法值回退到默认值.
"""

from __future__ import annotations

from app.utils.structlog_config import log_debug


def _safe_int(value: object, *, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip(), 10)
    except (TypeError, ValueError):
        return default


def resolve_page_size(
    raw: object,
    *,
    default: int = 20,
    maximum: int = 999,
    module: str | None = None,
    option: str | None = None,
) -> int:
    """解析每页数量.

    Args:
        raw: 原始值(通常来自用户偏好设置).
        default: 缺省或非法时使用的每页数量.
        maximum: 上限.
        module: 结构化日志模块名,用于记录回退.
        option: 偏好键名,用于记录回退.

    Returns:
        解析后的每页数量. 非正整数回退为默认值, 超过上限时截断.

    """
    page_size = _safe_int(raw, default=default)
    if page_size < 1:
        if module:
            log_debug("每页数量偏好非法,回退默认值", module=module, option=option, raw=str(raw))
        page_size = default
    return min(page_size, maximum)
