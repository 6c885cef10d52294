"""用户列表表格服务."""

from app.services.users_table.bulk_actions import UsersBulkActionService
from app.services.users_table.hooks import UsersTableHooks
from app.services.users_table.permissions import CapabilityPermissionChecker, PermissionChecker
from app.services.users_table.service import UsersTableService
from app.services.users_table.site_context import SiteContext

__all__ = [
    "CapabilityPermissionChecker",
    "PermissionChecker",
    "SiteContext",
    "UsersBulkActionService",
    "UsersTableHooks",
    "UsersTableService",
]
