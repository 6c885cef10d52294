"""Pydantic schemas.

集中维护请求参数与表单 payload 的 schema, 负责:
- 类型转换与默认值
- 非法值按字段降级
- 表单字段 alias(例如 `users[]`)
"""
