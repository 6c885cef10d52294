from types import SimpleNamespace

import pytest
from markupsafe import Markup

from app.constants import Capability
from app.services.users_table.hooks import UsersTableHooks
from app.services.users_table.query_adapter import build_record
from app.services.users_table.roles import RoleRegistry
from app.services.users_table.row_renderer import UsersTableRowRenderer
from app.services.users_table.view_state import build_columns
from app.types.users_table import ColumnSpec, PageFilter, UserRecord, UsersTableViewState

ADMIN_CAPS = frozenset(
    {
        Capability.LIST_USERS,
        Capability.EDIT_USER,
        Capability.DELETE_USER,
        Capability.REMOVE_USER,
        Capability.PROMOTE_USER,
    },
)


class StubPermissionChecker:
    """按能力集合放行,`denied_targets` 中的目标用户一律拒绝."""

    def __init__(self, capabilities=ADMIN_CAPS, denied_targets=()):
        self.capabilities = set(capabilities)
        self.denied_targets = set(denied_targets)

    def can(self, actor, capability, target_id=None):
        if target_id is not None and target_id in self.denied_targets:
            return False
        return capability in self.capabilities


def _actor(user_id: int = 1, login: str = "admin"):
    return SimpleNamespace(id=user_id, user_login=login, is_authenticated=True, is_super_admin=False)


def _state(*, tenant_scoped: bool = False) -> UsersTableViewState:
    return UsersTableViewState(
        filter=PageFilter(),
        columns=build_columns(tenant_scoped=tenant_scoped, pending_enabled=True),
        pending_view=False,
        tenant_scoped=tenant_scoped,
        site_id=2 if tenant_scoped else 1,
        base_url="/sites/2/users/" if tenant_scoped else "/users/",
    )


def _record(user_id: int | None = 2, login: str = "bob", *, roles=("editor",), pending: bool = False) -> UserRecord:
    return build_record(
        user_id=user_id,
        user_login=login,
        email=f"{login}@example.test",
        roles=roles,
        registry=RoleRegistry(),
        first_name="Bob",
        last_name="Builder",
        pending=pending,
    )


def _renderer(
    *,
    checker=None,
    actor=None,
    multisite: bool = False,
    protected_login: str = "",
    hooks: UsersTableHooks | None = None,
    tenant_scoped: bool = False,
) -> UsersTableRowRenderer:
    return UsersTableRowRenderer(
        actor=actor or _actor(),
        state=_state(tenant_scoped=tenant_scoped),
        permission_checker=checker or StubPermissionChecker(),
        registry=RoleRegistry(),
        hooks=hooks or UsersTableHooks(),
        multisite=multisite,
        protected_login=protected_login,
        request_uri="/users/",
        csrf_token="tok",
    )


@pytest.mark.unit
def test_row_without_list_users_is_plain_text() -> None:
    renderer = _renderer(checker=StubPermissionChecker(capabilities=set()))

    html = renderer.render_row(_record(), index=1, role="editor", post_count=0)

    assert "<strong>bob</strong>" in html
    assert "row-actions" not in html
    assert '<th scope="row" class="check-column"></th>' in html
    assert 'name="users[]"' not in html


@pytest.mark.unit
def test_single_site_row_has_edit_and_delete_actions() -> None:
    html = _renderer().render_row(_record(), index=1, role="editor", post_count=0)

    assert '<strong><a href="/users/2/edit?wp_http_referer=%2Fusers%2F">bob</a></strong>' in html
    assert '<span class="edit">' in html
    assert (
        '<a href="/users/actions?action=delete&amp;user=2&amp;_token=tok" class="submitdelete">Delete</a>' in html
    )
    assert '<span class="remove">' not in html
    assert '<input type="checkbox" name="users[]" id="user_2" class="editor" value="2" />' in html


@pytest.mark.unit
def test_multisite_row_has_remove_but_no_delete() -> None:
    html = _renderer(multisite=True).render_row(_record(), index=1, role="editor", post_count=0)

    assert '<span class="remove">' in html
    assert "action=remove&amp;user=2" in html
    assert '<span class="delete">' not in html


@pytest.mark.unit
@pytest.mark.parametrize("multisite", [False, True])
def test_own_row_has_no_destructive_actions(multisite: bool) -> None:
    html = _renderer(multisite=multisite).render_row(
        _record(user_id=1, login="admin", roles=("administrator",)),
        index=0,
        role="administrator",
        post_count=0,
    )

    assert '<span class="edit">' in html
    assert '<span class="delete">' not in html
    assert '<span class="remove">' not in html


@pytest.mark.unit
def test_denied_target_is_not_linked() -> None:
    renderer = _renderer(checker=StubPermissionChecker(denied_targets={2}))

    html = renderer.render_row(_record(), index=1, role="editor", post_count=0)

    assert "<strong>bob</strong><br />" in html
    assert '<span class="edit">' not in html
    assert '<span class="delete">' not in html
    # 仍可勾选以便批量操作
    assert 'id="user_2"' in html


@pytest.mark.unit
def test_protected_account_hides_edit_and_delete_for_other_actors() -> None:
    renderer = _renderer(protected_login="root")

    html = renderer.render_row(_record(user_id=3, login="root"), index=1, role="editor", post_count=0)

    assert '<span class="edit">' not in html
    assert '<span class="delete">' not in html


@pytest.mark.unit
def test_protected_account_can_manage_itself() -> None:
    renderer = _renderer(protected_login="root", actor=_actor(user_id=3, login="root"))

    html = renderer.render_row(_record(user_id=3, login="root"), index=1, role="editor", post_count=0)

    assert '<span class="edit">' in html
    # 自身所在行不提供删除
    assert '<span class="delete">' not in html


@pytest.mark.unit
def test_pending_row_is_not_linked_and_has_no_remove() -> None:
    renderer = _renderer(multisite=True)

    html = renderer.render_row(_record(pending=True), index=0, role="editor", status="Unactive")

    assert "<strong>bob</strong><br />" in html
    assert '<span class="remove">' not in html
    assert '<td class="posts column-posts num">-</td>' in html
    assert '<td class="user_status column-user_status">Unactive</td>' in html


@pytest.mark.unit
def test_signup_row_without_id_has_no_actions_or_checkbox() -> None:
    html = _renderer().render_row(_record(user_id=None, login="carol", pending=True), index=0, role="author")

    assert "row-actions" not in html
    assert 'id="user-' not in html
    assert 'name="users[]"' not in html
    assert 'value=""' not in html
    assert '<th scope="row" class="check-column"></th>' in html


@pytest.mark.unit
def test_row_action_hook_can_filter_actions() -> None:
    hooks = UsersTableHooks()
    hooks.row_actions.append(lambda actions, user: {key: value for key, value in actions.items() if key != "delete"})

    html = _renderer(hooks=hooks).render_row(_record(), index=1, role="editor", post_count=0)

    assert '<span class="edit">' in html
    assert '<span class="delete">' not in html


@pytest.mark.unit
def test_alternate_class_follows_render_index() -> None:
    renderer = _renderer()

    assert '<tr id="user-2" class="alternate">' in renderer.render_row(_record(), index=0, role="editor")
    assert '<tr id="user-2">' in renderer.render_row(_record(), index=1, role="editor")
    assert '<tr id="user-2" class="alternate">' in renderer.render_row(_record(), index=2, role="editor")


@pytest.mark.unit
def test_cells_render_name_email_role_and_posts() -> None:
    html = _renderer().render_row(_record(), index=1, role="editor", post_count=3, status="Active")

    assert '<td class="name column-name">Bob Builder</td>' in html
    assert 'href="mailto:bob@example.test" title="E-mail: bob@example.test"' in html
    assert '<td class="role column-role">Editor</td>' in html
    assert '<a href="/posts/?author=2" title="View posts by this author" class="edit">3</a>' in html
    assert '<td class="user_status column-user_status">Active</td>' in html


@pytest.mark.unit
def test_zero_posts_and_missing_role() -> None:
    html = _renderer().render_row(_record(roles=()), index=1, role="", post_count=0)

    assert '<td class="posts column-posts num">0</td>' in html
    assert '<td class="role column-role">None</td>' in html


@pytest.mark.unit
def test_tenant_scoped_row_has_no_posts_cell() -> None:
    html = _renderer(tenant_scoped=True).render_row(_record(), index=0, role="editor", post_count=5)

    assert "column-posts" not in html
    assert "/posts/" not in html


@pytest.mark.unit
def test_user_supplied_values_are_escaped() -> None:
    html = _renderer().render_row(
        _record(login="<script>x</script>"),
        index=1,
        role="editor",
        post_count=0,
    )

    assert "<script>" not in html
    assert "&lt;script&gt;x&lt;/script&gt;" in html


@pytest.mark.unit
def test_custom_column_rendered_through_hook() -> None:
    hooks = UsersTableHooks()
    hooks.custom_column.append(lambda value, column_id, user_id: f"<b>user-{user_id}</b>")
    hooks.custom_column.append(lambda value, column_id, user_id: Markup(value.upper()) if column_id == "team" else value)
    renderer = UsersTableRowRenderer(
        actor=_actor(),
        state=UsersTableViewState(
            filter=PageFilter(),
            columns=build_columns(
                tenant_scoped=False,
                pending_enabled=False,
                hooks=_with_team_column(hooks),
            ),
            pending_view=False,
            tenant_scoped=False,
            site_id=1,
            base_url="/users/",
        ),
        permission_checker=StubPermissionChecker(),
        registry=RoleRegistry(),
        hooks=hooks,
        multisite=False,
    )

    html = renderer.render_row(_record(), index=1, role="editor", post_count=0)

    assert '<td class="team column-team"><B>USER-2</B></td>' in html


def _with_team_column(hooks: UsersTableHooks) -> UsersTableHooks:
    hooks.columns.append(lambda columns: [*columns, ColumnSpec(id="team", label="Team")])
    return hooks
