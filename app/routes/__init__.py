"""路由模块.

主要路由:
- users: 当前站点的用户列表、JSON 接口与批量/行内操作
- site_users: 网络管理下按站点查看的用户列表与操作
"""
