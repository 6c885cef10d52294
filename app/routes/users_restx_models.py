"""Users 路由序列化模型(Flask-RESTX marshal fields)."""

from flask_restx import fields

USERS_TABLE_PAGINATION_FIELDS: dict[str, type[fields.Raw]] = {
    "total_items": fields.Integer,
    "per_page": fields.Integer,
    "total_pages": fields.Integer,
    "page": fields.Integer,
}

USERS_TABLE_FIELDS: dict[str, object] = {
    "html": fields.String,
    "row_count": fields.Integer,
    "pagination": fields.Nested(USERS_TABLE_PAGINATION_FIELDS),
}

BULK_ACTION_RESULT_FIELDS: dict[str, object] = {
    "action": fields.String,
    "processed": fields.List(fields.Integer),
    "skipped": fields.List(fields.Integer),
}
