"""
Decoding and encoding of records.

pydantic does the validation; this module turns its ``ValidationError`` into
``DecodeError`` values located by a JSON pointer into the input document.
"""

import json
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from fhir_definitions.models.errors import (
    DecodeError,
    DecodeResult,
    ErrorKind,
)
from fhir_definitions.models.fhir.types import ResourceType
from fhir_definitions.services.fhir.json_pointer import join, json_type_name

M = TypeVar("M", bound=BaseModel)

INVARIANT_CODES = {"period_order", "cardinality_order"}

CODES_BY_TYPE = {
    "extra_forbidden": "unknown_field",
    "missing": "missing_field",
    "greater_than_equal": "out_of_range",
    "less_than_equal": "out_of_range",
    "int_parsing_size": "out_of_range",
    "integer64_range": "out_of_range",
    "integer64_parsing": "wrong_type",
    "string_too_short": "empty_value",
    "literal_error": "invalid_value",
    "value_error": "invalid_value",
    "union_tag_invalid": "unknown_resource",
    "union_tag_not_found": "missing_field",
}

EXPECTED_BY_TYPE = {
    "extra_forbidden": "no such field",
    "missing": "required field",
    "string_type": "string",
    "bool_type": "boolean",
    "int_type": "integer",
    "int_from_float": "integer",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
    "tuple_type": "array",
    "list_type": "array",
    "string_too_short": "non-empty string",
    "union_tag_not_found": "resource type name",
}

UNION_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}
RESOURCE_TAGS = {t.value for t in ResourceType}


def _code_for(error: ErrorDetails) -> str:
    error_type = error["type"]
    if error_type == "literal_error" and error["loc"] and error["loc"][-1] == "resourceType":
        return "discriminator_mismatch"
    if error_type in CODES_BY_TYPE:
        return CODES_BY_TYPE[error_type]
    if error_type.endswith("_type") or error_type.endswith("_parsing"):
        return "wrong_type"
    return error_type


def _expected_for(error: ErrorDetails) -> str | None:
    ctx = error.get("ctx") or {}
    if "expected" in ctx:
        return str(ctx["expected"])
    if "ge" in ctx:
        return f">= {ctx['ge']}"
    if "le" in ctx:
        return f"<= {ctx['le']}"
    if "group" in ctx:
        return f"at most one variant of {ctx['group']}"
    if error["type"] == "union_tag_invalid":
        return "one of " + ", ".join(t.value for t in ResourceType)
    return EXPECTED_BY_TYPE.get(error["type"])


def _observed_for(error: ErrorDetails, code: str) -> str:
    if error["type"] in ("missing", "union_tag_not_found"):
        return "absent"
    value = error.get("input")
    ctx = error.get("ctx") or {}
    if error["type"] == "union_tag_invalid":
        return str(ctx["tag"])
    if code == "discriminator_mismatch" and isinstance(value, str):
        return value
    if "index" in ctx and isinstance(value, (list, tuple)) and ctx["index"] < len(value):
        value = value[ctx["index"]]
    if "field" in ctx:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)
        if isinstance(value, dict):
            if ctx["field"] not in value:
                return "absent"
            value = value[ctx["field"]]
    return json_type_name(value)


def _location(error: ErrorDetails) -> List[str | int]:
    # a tagged union puts the tag of the chosen variant after the field name
    loc = error["loc"]
    tokens: List[str | int] = []
    for i, token in enumerate(loc):
        if i > 0 and loc[i - 1] == "resource" and token in RESOURCE_TAGS:
            continue
        tokens.append(token)
    if error["type"] in UNION_TAG_ERRORS:
        tokens.append("resourceType")
    return tokens


def translate_validation_error(exc: ValidationError, pointer: str = "") -> List[DecodeError]:
    """
    Converts every pydantic error into a DecodeError. Custom errors may name
    the offending member through ``index`` and ``field`` in their context,
    which are appended to the location pydantic reports.
    """
    errors = []
    for error in exc.errors():
        ctx = error.get("ctx") or {}
        tokens = _location(error)
        if "index" in ctx:
            tokens.append(ctx["index"])
        if "field" in ctx:
            tokens.append(ctx["field"])
        code = _code_for(error)
        errors.append(
            DecodeError(
                kind=ErrorKind.INVARIANT if code in INVARIANT_CODES else ErrorKind.STRUCTURAL,
                code=code,
                pointer=join(pointer, *tokens),
                expected=_expected_for(error),
                observed=_observed_for(error, code),
                message=error["msg"],
            )
        )
    return errors


def decode(model: Type[M], data: Any, pointer: str = "") -> DecodeResult[M]:
    try:
        return DecodeResult(value=model.model_validate(data))
    except ValidationError as e:
        return DecodeResult(errors=tuple(translate_validation_error(e, pointer)))


def decode_json(model: Type[M], text: str | bytes) -> DecodeResult[M]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return DecodeResult(errors=(syntax_error(e),))
    return decode(model, data)


def encode(record: BaseModel) -> Dict[str, Any]:
    """Returns the JSON form of a record, without absent fields."""
    return record.model_dump(mode="json", by_alias=True)


def syntax_error(e: json.JSONDecodeError, offset: int = 0) -> DecodeError:
    return DecodeError(
        kind=ErrorKind.JSON,
        code="syntax",
        expected="JSON value",
        message=f"{e.msg} (line {e.lineno}, column {e.colno})",
        offset=offset + e.pos,
    )
