"""Schema 基础设施."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PayloadSchema(BaseModel):
    """请求参数/表单 payload 的基础 schema.

    约定:
    - 默认忽略未知字段, 以兼容前端/扩展插件附带的字段.
    - schema 负责规范化与默认值, 非法值按字段降级而不是报错.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)
