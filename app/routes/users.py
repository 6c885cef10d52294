"""站点用户管理 - 用户列表路由."""

from __future__ import annotations

from flask import Blueprint, Response, request
from flask_login import current_user
from flask_restx import marshal
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms import ValidationError as CsrfValidationError

from app.constants import Capability, HttpHeaders, SuccessMessages
from app.errors import ValidationError
from app.routes.users_restx_models import BULK_ACTION_RESULT_FIELDS, USERS_TABLE_FIELDS
from app.schemas.users_table import UsersBulkActionForm, UsersTableQuery
from app.schemas.validation import validate_or_raise
from app.services.users_table import UsersBulkActionService, UsersTableService
from app.services.users_table.site_context import get_site_context
from app.types.users_table import UsersTablePage
from app.utils.decorators import capability_required, login_required
from app.utils.response_utils import jsonify_unified_success
from app.utils.route_safety import safe_route_call

# 创建蓝图
users_bp = Blueprint("users", __name__)
_users_table_service = UsersTableService()
_bulk_action_service = UsersBulkActionService()


def _request_uri() -> str:
    return request.full_path.rstrip("?")


def render_table_page(*, tenant_site_id: int | None = None) -> UsersTablePage:
    """解析请求参数并渲染表格."""
    query = validate_or_raise(UsersTableQuery, request.args.to_dict())
    return _users_table_service.render_table(
        query,
        actor=current_user,
        tenant_site_id=tenant_site_id,
        request_uri=_request_uri(),
        csrf_token=generate_csrf(),
    )


def table_fragment_response(page: UsersTablePage) -> Response:
    """HTML 片段响应,分页元数据写入响应头."""
    response = Response(str(page.html), mimetype="text/html")
    response.headers[HttpHeaders.X_TOTAL_COUNT] = str(page.pagination.total_items)
    response.headers[HttpHeaders.X_TOTAL_PAGES] = str(page.pagination.total_pages)
    response.headers[HttpHeaders.X_PER_PAGE] = str(page.pagination.per_page)
    response.headers[HttpHeaders.X_PAGE] = str(page.pagination.page)
    return response


def dispatch_actions(*, site_id: int, tenant_scoped: bool = False) -> tuple[Response, int]:
    """解析操作表单并分发.

    POST 请求由全局 CSRF 保护校验; GET 请求来自行内操作链接,需要校验链接上的确认令牌.
    """
    if request.method == "GET":
        try:
            validate_csrf(request.args.get("_token"))
        except CsrfValidationError as exc:
            raise ValidationError(message_key="CSRF_TOKEN_INVALID") from exc
        source = request.args
    else:
        source = request.form

    payload: dict[str, object] = source.to_dict()
    if source.getlist("users[]"):
        payload["users[]"] = source.getlist("users[]")
    form = validate_or_raise(UsersBulkActionForm, payload)
    result = _bulk_action_service.dispatch(
        _bulk_action_service.current_action(form),
        form.users,
        actor=current_user,
        site_id=site_id,
        new_role=form.new_role,
        tenant_scoped=tenant_scoped,
    )
    return jsonify_unified_success(
        data=marshal(result, BULK_ACTION_RESULT_FIELDS),
        message=SuccessMessages.BULK_ACTION_DONE,
    )


@users_bp.route("/")
@login_required
@capability_required(Capability.LIST_USERS)
def index() -> Response:
    """当前站点的用户列表 HTML 片段.

    Query Parameters:
        s: 搜索关键词,可选.
        role: 角色筛选,可选.
        orderby: 排序字段,可选.
        order: 排序方向('asc'、'desc'),可选.
        paged: 页码,默认 1.
        status: 'unactive' 时显示待激活用户.

    """
    return safe_route_call(
        lambda: table_fragment_response(render_table_page()),
        module="users",
        action="index",
        public_error="加载用户列表失败",
        context={"endpoint": "users_index"},
    )


@users_bp.route("/api/table")
@login_required
@capability_required(Capability.LIST_USERS)
def table_api() -> tuple[Response, int]:
    """用户列表 JSON 接口,返回 HTML 片段与分页元数据."""

    def _execute() -> tuple[Response, int]:
        page = render_table_page()
        return jsonify_unified_success(
            data=marshal(
                {"html": str(page.html), "row_count": page.row_count, "pagination": page.pagination},
                USERS_TABLE_FIELDS,
            ),
            message=SuccessMessages.USERS_TABLE_RENDERED,
        )

    return safe_route_call(
        _execute,
        module="users",
        action="table_api",
        public_error="获取用户列表失败",
        context={"endpoint": "users_table_api"},
    )


@users_bp.route("/actions", methods=["GET", "POST"])
@login_required
@capability_required(Capability.LIST_USERS)
def actions() -> tuple[Response, int]:
    """当前站点的批量/行内操作."""
    site_id = get_site_context().current_site_id
    return safe_route_call(
        dispatch_actions,
        module="users",
        action="bulk_actions",
        public_error="用户批量操作失败",
        func_kwargs={"site_id": site_id},
        context={"site_id": site_id},
    )
