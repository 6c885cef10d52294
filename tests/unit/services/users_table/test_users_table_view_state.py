import pytest
from markupsafe import Markup

from app.constants import UsersTableViews
from app.repositories.user_meta_repository import UserMetaRepository
from app.schemas.users_table import UsersTableQuery
from app.schemas.validation import validate_or_raise
from app.services.users_table.hooks import UsersTableHooks
from app.services.users_table.view_state import UsersTableViewStateResolver, build_columns
from app.types.users_table import ColumnSpec


class StubMetaRepository(UserMetaRepository):
    def __init__(self, values=None):
        self.values = dict(values or {})
        self.requested: list[tuple[int, str]] = []

    def get_value(self, user_id, meta_key):
        self.requested.append((user_id, meta_key))
        return self.values.get(meta_key)


class _Actor:
    id = 1
    is_authenticated = True


@pytest.mark.unit
def test_build_columns_default_layout() -> None:
    columns = build_columns(tenant_scoped=False, pending_enabled=False)

    assert [column.id for column in columns] == ["cb", "username", "name", "email", "role", "posts"]
    assert {column.id: column.sortable for column in columns} == {
        "cb": None,
        "username": "login",
        "name": "name",
        "email": "email",
        "role": None,
        "posts": "post_count",
    }


@pytest.mark.unit
def test_build_columns_tenant_scoped_with_pending_status() -> None:
    columns = build_columns(tenant_scoped=True, pending_enabled=True)

    assert [column.id for column in columns] == ["cb", "username", "name", "email", "role", "user_status"]
    assert columns[-1].label == "Status"


@pytest.mark.unit
def test_build_columns_keeps_required_columns_and_applies_hidden_hook() -> None:
    hooks = UsersTableHooks()
    hooks.columns.append(
        lambda columns: [column for column in columns if column.id not in {"cb", "username"}]
        + [ColumnSpec(id="team", label="Team")],
    )
    hooks.hidden_columns.append(lambda: ["email", "cb", "username"])

    columns = build_columns(tenant_scoped=False, pending_enabled=False, hooks=hooks)

    assert [column.id for column in columns] == ["cb", "username", "name", "email", "role", "posts", "team"]
    hidden = {column.id for column in columns if column.hidden}
    assert hidden == {"email"}
    assert columns[1].sortable == "login"


@pytest.mark.unit
def test_build_columns_hook_cannot_add_posts_in_tenant_scoped_mode() -> None:
    hooks = UsersTableHooks()
    hooks.columns.append(lambda columns: [*columns, ColumnSpec(id="posts", label="Posts", sortable="post_count")])

    columns = build_columns(tenant_scoped=True, pending_enabled=False, hooks=hooks)

    assert "posts" not in [column.id for column in columns]


@pytest.mark.unit
def test_resolve_per_page_reads_preference(app_context) -> None:
    meta = StubMetaRepository({UsersTableViews.PER_PAGE_OPTION: "5"})
    resolver = UsersTableViewStateResolver(meta, UsersTableHooks())

    assert resolver.resolve_per_page(_Actor(), tenant_scoped=False) == 5
    assert meta.requested == [(1, UsersTableViews.PER_PAGE_OPTION)]


@pytest.mark.unit
def test_resolve_per_page_uses_network_option_and_default(app_context) -> None:
    meta = StubMetaRepository({UsersTableViews.SITE_USERS_PER_PAGE_OPTION: "not-a-number"})
    resolver = UsersTableViewStateResolver(meta, UsersTableHooks())

    assert resolver.resolve_per_page(_Actor(), tenant_scoped=True) == 20
    assert meta.requested == [(1, UsersTableViews.SITE_USERS_PER_PAGE_OPTION)]


@pytest.mark.unit
def test_resolve_builds_filter_and_state(app_context) -> None:
    resolver = UsersTableViewStateResolver(StubMetaRepository(), UsersTableHooks())
    query = validate_or_raise(UsersTableQuery, {"s": "bob", "role": "editor", "orderby": "email", "paged": "2"})

    state = resolver.resolve(query, actor=_Actor(), current_site_id=1, base_url="/users/")

    assert state.filter.search == "*bob*"
    assert state.filter.role == "editor"
    assert state.filter.sort_field == "email"
    assert state.filter.page == 2
    assert state.filter.per_page == 20
    assert state.filter.offset == 20
    assert state.filter.site_id is None
    assert state.site_id == 1
    assert state.tenant_scoped is False
    assert "posts" in state.column_ids
    assert "user_status" in state.column_ids


@pytest.mark.unit
def test_resolve_tenant_scoped_state(app_context) -> None:
    resolver = UsersTableViewStateResolver(StubMetaRepository(), UsersTableHooks())
    query = validate_or_raise(UsersTableQuery, {})

    state = resolver.resolve(query, actor=_Actor(), current_site_id=1, base_url="/sites/3/users/", tenant_site_id=3)

    assert state.tenant_scoped is True
    assert state.site_id == 3
    assert state.filter.site_id == 3
    assert "posts" not in state.column_ids


@pytest.mark.unit
def test_pending_view_requires_feature_flag(app) -> None:
    app.config["PENDING_USERS_ENABLED"] = False
    resolver = UsersTableViewStateResolver(StubMetaRepository(), UsersTableHooks())
    query = validate_or_raise(UsersTableQuery, {"status": "unactive"})

    with app.app_context():
        state = resolver.resolve(query, actor=_Actor(), current_site_id=1, base_url="/users/")

    assert state.pending_view is False
    assert "user_status" not in state.column_ids


@pytest.mark.unit
def test_hooks_escape_plain_strings_but_keep_markup() -> None:
    hooks = UsersTableHooks()
    hooks.toolbar.append(lambda: "<b>plain</b>")
    hooks.toolbar.append(lambda: Markup('<button id="export">Export</button>'))

    assert hooks.render_toolbar() == Markup('&lt;b&gt;plain&lt;/b&gt;<button id="export">Export</button>')
