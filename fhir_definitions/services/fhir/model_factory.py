from typing import Any, Type

from fhir_definitions.models.errors import DecodeError, DecodeResult, ErrorKind
from fhir_definitions.models.fhir.r5.resources import (
    CanonicalResource,
    CapabilityStatement,
    CodeSystem,
    CompartmentDefinition,
    ConceptMap,
    DataElement,
    NamingSystem,
    OperationDefinition,
    SearchParameter,
    StructureDefinition,
    ValueSet,
)
from fhir_definitions.models.fhir.types import ResourceType
from fhir_definitions.services.fhir.codec import decode
from fhir_definitions.services.fhir.json_pointer import join, json_type_name


def model_for(resource_type: ResourceType) -> Type[CanonicalResource]:
    match resource_type:
        case ResourceType.STRUCTURE_DEFINITION:
            return StructureDefinition

        case ResourceType.VALUE_SET:
            return ValueSet

        case ResourceType.CODE_SYSTEM:
            return CodeSystem

        case ResourceType.CONCEPT_MAP:
            return ConceptMap

        case ResourceType.SEARCH_PARAMETER:
            return SearchParameter

        case ResourceType.DATA_ELEMENT:
            return DataElement

        case ResourceType.OPERATION_DEFINITION:
            return OperationDefinition

        case ResourceType.NAMING_SYSTEM:
            return NamingSystem

        case ResourceType.CAPABILITY_STATEMENT:
            return CapabilityStatement

        case ResourceType.COMPARTMENT_DEFINITION:
            return CompartmentDefinition


def create_resource(data: Any, pointer: str = "") -> DecodeResult[CanonicalResource]:
    """
    Decodes one resource, choosing the record from its ``resourceType``.
    A tag that names no known resource gives an ``unknown_resource`` error.
    """
    if not isinstance(data, dict):
        return _failure(
            "wrong_type", pointer, "object", json_type_name(data), "Resource should be a JSON object"
        )
    if "resourceType" not in data:
        return _failure(
            "missing_field",
            join(pointer, "resourceType"),
            "resource type name",
            "absent",
            "Resource has no resourceType",
        )

    tag = data["resourceType"]
    try:
        resource_type = ResourceType(tag)
    except ValueError:
        return _failure(
            "unknown_resource",
            join(pointer, "resourceType"),
            "one of " + ", ".join(t.value for t in ResourceType),
            str(tag) if isinstance(tag, str) else json_type_name(tag),
            f"Unknown resourceType {tag!r}",
        )
    return decode(model_for(resource_type), data, pointer)


def _failure(
    code: str, pointer: str, expected: str, observed: str, message: str
) -> DecodeResult[CanonicalResource]:
    error = DecodeError(
        kind=ErrorKind.STRUCTURAL,
        code=code,
        pointer=pointer,
        expected=expected,
        observed=observed,
        message=message,
    )
    return DecodeResult(errors=(error,))
