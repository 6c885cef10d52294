"""HTTP 头常量.

定义用到的请求/响应头名称,避免魔法字符串.
"""

from typing import ClassVar


class HttpHeaders:
    """HTTP 头名称常量."""

    CONTENT_TYPE: ClassVar[str] = "Content-Type"
    USER_AGENT: ClassVar[str] = "User-Agent"
    X_CSRF_TOKEN: ClassVar[str] = "X-CSRFToken"

    # 分页元数据
    X_TOTAL_COUNT: ClassVar[str] = "X-Total-Count"
    X_TOTAL_PAGES: ClassVar[str] = "X-Total-Pages"
    X_PER_PAGE: ClassVar[str] = "X-Per-Page"
    X_PAGE: ClassVar[str] = "X-Page"
