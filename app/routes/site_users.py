"""站点用户管理 - 按站点查看用户列表路由(网络管理)."""

from __future__ import annotations

from flask import Blueprint, Response

from app.constants import Capability
from app.routes.users import dispatch_actions, render_table_page, table_fragment_response
from app.services.users_table.site_context import get_site_context
from app.utils.decorators import capability_required, login_required
from app.utils.route_safety import safe_route_call

site_users_bp = Blueprint("site_users", __name__)


@site_users_bp.route("/<int:site_id>/users/")
@login_required
@capability_required(Capability.MANAGE_SITES)
def index(site_id: int) -> Response:
    """指定站点的用户列表 HTML 片段,不含文章数列."""
    return safe_route_call(
        lambda: table_fragment_response(render_table_page(tenant_site_id=site_id)),
        module="site_users",
        action="index",
        public_error="加载站点用户列表失败",
        context={"site_id": site_id},
    )


@site_users_bp.route("/<int:site_id>/users/actions", methods=["GET", "POST"])
@login_required
@capability_required(Capability.MANAGE_SITES)
def actions(site_id: int) -> tuple[Response, int]:
    """指定站点的批量/行内操作,在切换到该站点后执行."""

    def _execute() -> tuple[Response, int]:
        with get_site_context().switch_to(site_id):
            return dispatch_actions(site_id=site_id, tenant_scoped=True)

    return safe_route_call(
        _execute,
        module="site_users",
        action="bulk_actions",
        public_error="站点用户批量操作失败",
        context={"site_id": site_id},
    )
