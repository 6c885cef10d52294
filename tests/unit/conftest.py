# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供隔离环境变量、应用实例(内存 SQLite)与测试数据构造工具.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator

import pytest

from app import create_app, db
from app.models.post import Post
from app.models.signup import Signup
from app.models.site import MembershipRole, Site, SiteMembership
from app.models.site_option import SiteOption
from app.models.user import User
from app.models.user_meta import UserMeta
from app.settings import Settings

_SETTINGS_ENV_KEYS = (
    "FLASK_DEBUG",
    "LOG_LEVEL",
    "ENABLE_DEBUG_LOG",
    "MULTISITE",
    "DEFAULT_SITE_ID",
    "DEFAULT_USERS_PER_PAGE",
    "PROTECTED_ACCOUNT_LOGIN",
    "PENDING_USERS_ENABLED",
    "SESSION_LIFETIME",
)


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 只依赖内存 SQLite
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    for key in _SETTINGS_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def app():
    """创建测试应用实例并建表.

    不保持 app context, 避免测试客户端的多次请求共享同一个 `g`.
    """
    app = create_app(settings=Settings.load())
    app.config["TESTING"] = True
    app.config["WTF_CSRF_ENABLED"] = False

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app) -> Iterator[None]:
    """在 app context 内执行 service/repository 测试."""
    with app.app_context():
        yield


class SiteUsersFactory:
    """构造站点、用户、成员关系与邀请数据,只 flush 不 commit."""

    def site(self, site_id: int = 1, *, domain: str = "example.test", path: str = "/") -> Site:
        site = db.session.get(Site, site_id)
        if site is None:
            site = Site(id=site_id, domain=domain, path=path, name=f"Site {site_id}")
            db.session.add(site)
            db.session.flush()
        return site

    def user(
        self,
        login: str,
        *,
        email: str | None = None,
        roles: Iterable[str] = (),
        site_id: int | None = 1,
        **fields: object,
    ) -> User:
        user = User(user_login=login, user_email=email or f"{login}@example.test", **fields)
        db.session.add(user)
        db.session.flush()
        if site_id is not None:
            self.membership(user, site_id, roles)
        return user

    def membership(self, user: User, site_id: int, roles: Iterable[str] = ()) -> SiteMembership:
        self.site(site_id)
        membership = SiteMembership(site_id=site_id, user_id=user.id)
        for position, role in enumerate(roles):
            membership.roles.append(MembershipRole(role=role, position=position))
        db.session.add(membership)
        db.session.flush()
        return membership

    def post(self, author: User, *, site_id: int = 1, status: str = Post.STATUS_PUBLISH) -> Post:
        post = Post(site_id=site_id, author_id=author.id, title=f"post by {author.user_login}", status=status)
        db.session.add(post)
        db.session.flush()
        return post

    def invitation(self, site_id: int, key: str, *, value: object) -> SiteOption:
        self.site(site_id)
        option = SiteOption(
            site_id=site_id,
            option_name=f"new_user_{key}",
            option_value=value if isinstance(value, str) else json.dumps(value),
        )
        db.session.add(option)
        db.session.flush()
        return option

    def signup(
        self,
        login: str,
        email: str,
        *,
        site_id: int,
        role: str,
        active: bool = False,
    ) -> Signup:
        signup = Signup(
            user_login=login,
            user_email=email,
            active=active,
            activation_key=f"key-{login}",
            meta=json.dumps({"add_to_blog": site_id, "new_role": role}),
        )
        db.session.add(signup)
        db.session.flush()
        return signup

    def preference(self, user: User, key: str, value: str) -> UserMeta:
        meta = UserMeta(user_id=user.id, meta_key=key, meta_value=value)
        db.session.add(meta)
        db.session.flush()
        return meta


@pytest.fixture
def factory() -> SiteUsersFactory:
    return SiteUsersFactory()
