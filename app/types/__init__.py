"""类型定义包."""

from app.types.structures import (
    ContextDict,
    ContextValue,
    JsonDict,
    JsonValue,
    LoggerExtra,
    ScalarValue,
    StructlogEventDict,
)

__all__ = [
    "ContextDict",
    "ContextValue",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "ScalarValue",
    "StructlogEventDict",
]
