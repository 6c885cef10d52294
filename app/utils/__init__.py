"""工具模块.

主要工具:
- structlog_config: 结构化日志配置
- route_safety: 路由安全执行与上下文日志
- response_utils: 统一响应结构
- decorators: 登录与能力校验装饰器
- pagination_utils: 每页数量解析
- time_utils: 时间处理工具
"""
