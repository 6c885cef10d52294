# tests/unit/routes/conftest.py
"""路由契约测试专用 fixtures.

提供 test_client 和认证会话相关的 fixtures.
"""

import pytest

from app import db


@pytest.fixture(scope="function")
def client(app):
    """创建测试客户端."""
    return app.test_client()


@pytest.fixture(scope="function")
def login_as(app):
    """返回一个把会话切换到指定用户的函数."""

    def _login(client, user_id: int):
        with client.session_transaction() as session:
            session["_user_id"] = str(user_id)
        return client

    return _login


@pytest.fixture(scope="function")
def seeded_site(app, factory):
    """单站点数据: 管理员 admin、编辑 bob、订阅者 sub; 站点 2 只有 eve; 超级管理员 root 不属于任何站点.

    返回 登录名 -> 用户 ID.
    """
    with app.app_context():
        admin = factory.user("admin", roles=["administrator"])
        bob = factory.user("bob", roles=["editor"])
        sub = factory.user("sub", roles=["subscriber"])
        eve = factory.user("eve", roles=["author"], site_id=2)
        root = factory.user("root", site_id=None, is_super_admin=True)
        factory.post(bob)
        db.session.commit()
        ids = {user.user_login: user.id for user in (admin, bob, sub, eve, root)}
    return ids
