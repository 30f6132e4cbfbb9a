from typing import Any

from pydantic import BaseModel


def escape(token: str | int) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")


def join(pointer: str, *tokens: str | int) -> str:
    """
    Appends reference tokens to an RFC 6901 pointer. The root is the empty
    string, so ``join("", "entry", 0)`` gives ``/entry/0``.
    """
    return pointer + "".join("/" + escape(token) for token in tokens)


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (dict, BaseModel)):
        return "object"
    return type(value).__name__
