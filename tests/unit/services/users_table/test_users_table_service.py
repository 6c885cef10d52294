import re

import pytest

from app import db
from app.constants import UsersTableViews
from app.errors import NotFoundError
from app.schemas.users_table import UsersTableQuery
from app.schemas.validation import validate_or_raise
from app.services.users_table import UsersTableHooks, UsersTableService
from app.services.users_table.permissions import get_permission_checker


def _render(actor, args=None, **kwargs):
    query = validate_or_raise(UsersTableQuery, args or {})
    return UsersTableService().render_table(query, actor=actor, csrf_token="tok", **kwargs)


def _tbody(html: str) -> str:
    match = re.search(r'<tbody id="the-list"[^>]*>(.*)</tbody>', str(html))
    assert match is not None
    return match.group(1)


@pytest.fixture
def site_users(app_context, factory):
    admin = factory.user("admin", email="a@x.com", roles=["administrator"])
    bob = factory.user("bob", email="b@x.com", roles=["editor"])
    root = factory.user("root", site_id=None, is_super_admin=True)
    factory.post(bob)
    return {"admin": admin, "bob": bob, "root": root}


@pytest.mark.unit
def test_empty_site_renders_no_items_row(app_context, factory) -> None:
    factory.site(1)
    root = factory.user("root", site_id=None, is_super_admin=True)

    page = _render(root)

    body = _tbody(page.html)
    assert body == '<tr class="no-items"><td class="colspanchange" colspan="7">No matching users were found.</td></tr>'
    assert page.row_count == 0
    assert page.pagination.total_items == 0
    assert page.pagination.total_pages == 0
    assert 'All <span class="count">(0)</span>' in page.html
    assert '<span class="displaying-num">0 items</span>' in page.html


@pytest.mark.unit
def test_page_size_one_second_page_renders_second_record_with_first_row_style(site_users, factory) -> None:
    factory.preference(site_users["admin"], UsersTableViews.PER_PAGE_OPTION, "1")

    page = _render(site_users["admin"], {"paged": "2"})

    body = _tbody(page.html)
    assert body.count("<tr") == 1
    assert f'<tr id="user-{site_users["bob"].id}" class="alternate">' in body
    assert page.row_count == 1
    assert (page.pagination.total_items, page.pagination.per_page, page.pagination.total_pages) == (2, 1, 2)
    assert page.pagination.page == 2


@pytest.mark.unit
def test_active_rows_include_post_counts_and_status(site_users) -> None:
    page = _render(site_users["admin"])

    body = _tbody(page.html)
    assert body.count("<tr") == 2
    assert f'<a href="/posts/?author={site_users["bob"].id}"' in body
    assert '<td class="user_status column-user_status">Active</td>' in body
    assert '<td class="role column-role">Administrator</td>' in body


@pytest.mark.unit
def test_views_list_roles_with_members_and_mark_current(site_users) -> None:
    html = _render(site_users["admin"], {"role": "editor"}).html

    assert '<ul class="subsubsub">' in html
    assert '<li class="all"><a href="/users/">All <span class="count">(2)</span></a> |</li>' in html
    assert 'href="/users/?role=administrator">Administrator <span class="count">(1)</span>' in html
    assert 'href="/users/?role=editor" class="current">Editor <span class="count">(1)</span>' in html
    assert "role=author" not in html
    assert html.index("role=administrator") < html.index("role=editor")


@pytest.mark.unit
def test_bulk_actions_and_toolbar_for_single_site_admin(site_users) -> None:
    html = _render(site_users["admin"]).html

    assert '<select name="action">' in html
    assert '<select name="action2">' in html
    assert '<option value="delete">Delete</option>' in html
    assert '<option value="remove">' not in html
    assert '<select name="new_role" id="new_role">' in html
    assert '<option value="editor">Editor</option>' in html
    assert 'name="changeit"' in html


@pytest.mark.unit
def test_multisite_offers_remove_and_skips_members_without_capabilities(app, site_users, factory) -> None:
    app.config["MULTISITE"] = True
    ghost = factory.user("ghost", roles=[])

    page = _render(site_users["admin"])

    assert '<option value="remove">Remove</option>' in page.html
    assert '<option value="delete">' not in page.html
    assert f'id="user-{ghost.id}"' not in page.html
    assert page.row_count == 2


@pytest.mark.unit
def test_single_site_lists_members_without_roles(site_users, factory) -> None:
    ghost = factory.user("ghost", roles=[])

    page = _render(site_users["admin"])

    assert f'id="user-{ghost.id}"' in page.html
    assert page.row_count == 3


@pytest.mark.unit
def test_sortable_headers_flip_current_direction(site_users) -> None:
    html = _render(site_users["admin"], {"orderby": "email", "order": "asc", "s": "x"}).html

    assert 'class="manage-column column-email sorted asc"' in html
    assert 'href="/users/?s=x&amp;orderby=email&amp;order=desc"' in html
    assert 'class="manage-column column-username sortable desc"' in html
    assert 'class="manage-column column-role"' in html


@pytest.mark.unit
def test_tenant_scoped_table_has_no_posts_column(site_users, factory) -> None:
    factory.user("eve", roles=["author"], site_id=2)

    page = _render(site_users["root"], tenant_site_id=2)

    assert "column-posts" not in page.html
    assert "/posts/?author=" not in page.html
    assert 'href="/sites/2/users/?role=author"' in page.html
    assert page.pagination.total_items == 1


@pytest.mark.unit
def test_tenant_scoped_table_offers_remove_instead_of_delete(site_users, factory) -> None:
    factory.user("eve", roles=["author"], site_id=2)

    page = _render(site_users["root"], tenant_site_id=2)

    assert "action=delete" not in page.html
    assert '<option value="delete">' not in page.html
    assert '<option value="remove">Remove</option>' in page.html
    assert "action=remove" in page.html


@pytest.mark.unit
def test_tenant_scoped_missing_site_raises_not_found(site_users) -> None:
    with pytest.raises(NotFoundError):
        _render(site_users["root"], tenant_site_id=42)


@pytest.mark.unit
def test_pending_view_renders_only_outstanding_invitations(site_users, factory) -> None:
    invited = factory.user("invited", email="new@x.com", site_id=None)
    factory.invitation(1, "abc", value={"user_id": invited.id, "role": "editor"})

    page = _render(site_users["admin"], {"status": "unactive"})

    body = _tbody(page.html)
    assert page.row_count == 1
    assert body.count("<tr") == 1
    assert "invited" in body
    assert '<td class="user_status column-user_status">Unactive</td>' in body
    assert '<td class="posts column-posts num">-</td>' in body
    assert '<select name="new_role"' not in page.html


@pytest.mark.unit
def test_pending_view_skips_invitations_for_listed_emails(site_users, factory) -> None:
    factory.invitation(1, "dup", value={"user_id": site_users["bob"].id, "role": "author"})
    factory.signup("bobby", "B@x.com", site_id=1, role="author")

    page = _render(site_users["admin"], {"status": "unactive"})

    assert page.row_count == 0
    assert "No matching users were found." in page.html


@pytest.mark.unit
def test_pending_view_renders_signups_without_id(site_users, factory) -> None:
    factory.signup("carol", "c@x.com", site_id=1, role="author")

    body = _tbody(_render(site_users["admin"], {"status": "unactive"}).html)

    assert "<strong>carol</strong>" in body
    assert '<tr class="alternate">' in body
    assert '<td class="role column-role">Author</td>' in body
    assert 'name="users[]"' not in body


@pytest.mark.unit
def test_hooks_add_columns_hide_columns_and_extend_toolbar(app, site_users) -> None:
    hooks = UsersTableHooks()
    hooks.hidden_columns.append(lambda: ["email"])
    hooks.toolbar.append(lambda: "<export>")
    app.users_table_hooks = hooks

    html = _render(site_users["admin"]).html

    assert '<th scope="col" id="email" class="manage-column column-email sortable desc" style="display:none;">' in html
    assert '<td class="email column-email" style="display:none;">' in html
    assert "&lt;export&gt;" in html


@pytest.mark.unit
def test_role_change_is_visible_after_cache_reset(site_users) -> None:
    checker = get_permission_checker()
    bob = site_users["bob"]
    assert checker.can(bob, "list_users") is False

    bob.memberships[0].roles[0].role = "administrator"
    db.session.flush()
    checker.reset_cache()

    assert checker.can(bob, "list_users") is True
