"""Schema 校验与错误映射."""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_FALLBACK_MESSAGE = "参数校验失败"


def validate_or_raise(model: type[ModelT], payload: object, *, message_key: str = "VALIDATION_ERROR") -> ModelT:
    """校验请求参数或表单,失败时抛出项目的 ValidationError.

    只取第一条错误: 字段校验器抛出的 ValueError 保留原始中文文案,出错字段写入 extra.
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        message, field = _first_error(exc)
        raise ValidationError(message, message_key=message_key, extra={"field": field}) from None


def _first_error(exc: PydanticValidationError) -> tuple[str, str | None]:
    errors = exc.errors()
    if not errors:
        return _FALLBACK_MESSAGE, None

    first = errors[0]
    loc = first.get("loc") or ()
    field = loc[0] if loc and isinstance(loc[0], str) else None

    ctx = first.get("ctx") or {}
    if isinstance(ctx.get("error"), BaseException):
        return str(ctx["error"]), field
    return str(first.get("msg") or _FALLBACK_MESSAGE), field
