"""服务层模块.

主要模块:
- users_table: 站点用户列表的展示状态解析、查询、渲染与批量操作
"""
