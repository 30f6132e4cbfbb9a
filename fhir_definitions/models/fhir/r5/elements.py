"""
Aggregates built from the datatypes: ElementDefinition and the backbone
elements of the conformance and terminology resources.
"""

import re
from typing import Self

from pydantic import ConfigDict, field_validator, model_validator
from pydantic_core import PydanticCustomError

from fhir_definitions.models.fhir.r5.base import (
    Boolean,
    Decimal,
    FhirModel,
    Integer,
    Integer64,
    UnsignedInt,
)
from fhir_definitions.models.fhir.r5.datatypes import (
    Binding,
    CodeableConcept,
    Coding,
    Constraint,
    Element,
    ElementType,
    Example,
    Extension,
    Period,
    Property,
    Quantity,
    Target,
)

PATH_PATTERN = re.compile(
    r"^[A-Za-z][A-Za-z0-9_]*(\[x\])?(\.[A-Za-z][A-Za-z0-9_]*(\[x\])?)*$"
)
MAX_PATTERN = re.compile(r"^(\*|0|[1-9][0-9]*)$")


def check_max(value: str | None) -> str | None:
    if value is not None and not MAX_PATTERN.match(value):
        raise PydanticCustomError(
            "invalid_cardinality",
            "max must be '*' or a non-negative integer, got {value}",
            {"value": value, "expected": "'*' or non-negative integer string"},
        )
    return value


def check_cardinality(min_value: int | None, max_value: str | None) -> None:
    if min_value is None or max_value is None or max_value == "*":
        return
    if int(max_value) < min_value:
        raise PydanticCustomError(
            "cardinality_order",
            "max {max} is less than min {min}",
            {"min": min_value, "max": max_value, "field": "max"},
        )


class BackboneElement(Element):
    modifier_extension: tuple[Extension, ...] | None = None


class Base(FhirModel):
    path: str
    min: UnsignedInt
    max: str

    _check_max = field_validator("max")(check_max)

    @model_validator(mode="after")
    def _check_cardinality(self) -> Self:
        check_cardinality(self.min, self.max)
        return self


class Discriminator(Element):
    type: str
    path: str


class Slicing(Element):
    discriminator: tuple[Discriminator, ...] | None = None
    description: str | None = None
    ordered: Boolean | None = None
    rules: str


class ElementMapping(Element):
    identity: str
    language: str | None = None
    map: str
    comment: str | None = None


class ElementDefinition(BackboneElement):
    """
    One element of a snapshot or differential.

    The value[x] groups are typed for the variants found in the R5
    definitions; any other variant of those groups is kept as raw JSON.
    """

    model_config = ConfigDict(extra="allow")
    choice_groups = ("defaultValue", "fixed", "pattern", "minValue", "maxValue")
    open_choices = ("defaultValue", "fixed", "pattern", "minValue", "maxValue")

    path: str
    representation: tuple[str, ...] | None = None
    slice_name: str | None = None
    slice_is_constraining: Boolean | None = None
    label: str | None = None
    code: tuple[Coding, ...] | None = None
    slicing: Slicing | None = None
    short: str | None = None
    definition: str | None = None
    comment: str | None = None
    requirements: str | None = None
    alias: tuple[str, ...] | None = None
    min: UnsignedInt | None = None
    max: str | None = None
    base: Base | None = None
    content_reference: str | None = None
    type: tuple[ElementType, ...] = ()
    meaning_when_missing: str | None = None
    order_meaning: str | None = None
    fixed_code: str | None = None
    fixed_string: str | None = None
    fixed_uri: str | None = None
    fixed_markdown: str | None = None
    fixed_codeable_concept: CodeableConcept | None = None
    fixed_quantity: Quantity | None = None
    pattern_code: str | None = None
    pattern_string: str | None = None
    pattern_coding: Coding | None = None
    pattern_codeable_concept: CodeableConcept | None = None
    example: tuple[Example, ...] | None = None
    min_value_integer: Integer | None = None
    max_value_integer: Integer | None = None
    min_value_integer64: Integer64 | None = None
    max_value_integer64: Integer64 | None = None
    min_value_decimal: Decimal | None = None
    max_value_decimal: Decimal | None = None
    max_length: Integer | None = None
    condition: tuple[str, ...] | None = None
    constraint: tuple[Constraint, ...] = ()
    must_have_value: Boolean | None = None
    value_alternatives: tuple[str, ...] | None = None
    must_support: Boolean | None = None
    is_modifier: Boolean | None = None
    is_modifier_reason: str | None = None
    is_summary: Boolean | None = None
    binding: Binding | None = None
    mapping: tuple[ElementMapping, ...] | None = None

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not PATH_PATTERN.match(value):
            raise PydanticCustomError(
                "invalid_path",
                "path {value} is not a dot-separated list of identifiers",
                {"value": value, "expected": "dot-separated identifier segments"},
            )
        return value

    _check_max = field_validator("max")(check_max)

    @field_validator("constraint")
    @classmethod
    def _check_constraint_keys(
        cls, value: tuple[Constraint, ...]
    ) -> tuple[Constraint, ...]:
        seen: set[str] = set()
        for index, constraint in enumerate(value):
            if constraint.key in seen:
                raise PydanticCustomError(
                    "duplicate_constraint_key",
                    "constraint key {key} is used more than once",
                    {"key": constraint.key, "index": index, "field": "key"},
                )
            seen.add(constraint.key)
        return value

    @model_validator(mode="after")
    def _check_cardinality(self) -> Self:
        check_cardinality(self.min, self.max)
        return self


class Snapshot(Element):
    element: tuple[ElementDefinition, ...] = ()


class Differential(Element):
    element: tuple[ElementDefinition, ...] = ()


class StructureDefinitionMapping(Element):
    identity: str
    uri: str | None = None
    name: str | None = None
    comment: str | None = None


class StructureDefinitionContext(Element):
    type: str
    expression: str


# Terminology


class Designation(Element):
    language: str | None = None
    use: Coding | None = None
    additional_use: tuple[Coding, ...] | None = None
    value: str


class ConceptReference(Element):
    code: str
    display: str | None = None
    designation: tuple[Designation, ...] | None = None


class ConceptSetFilter(Element):
    property: str
    op: str
    value: str


class ConceptSet(Element):
    system: str | None = None
    version: str | None = None
    concept: tuple[ConceptReference, ...] | None = None
    filter: tuple[ConceptSetFilter, ...] | None = None
    value_set: tuple[str, ...] | None = None
    copyright: str | None = None


class Compose(Element):
    locked_date: str | None = None
    inactive: Boolean | None = None
    include: tuple[ConceptSet, ...] = ()
    exclude: tuple[ConceptSet, ...] | None = None
    property: tuple[str, ...] | None = None


class ExpansionParameter(Element):
    choice_groups = ("value",)

    name: str
    value_string: str | None = None
    value_boolean: Boolean | None = None
    value_integer: Integer | None = None
    value_decimal: Decimal | None = None
    value_uri: str | None = None
    value_code: str | None = None
    value_date_time: str | None = None


class ExpansionContains(Element):
    system: str | None = None
    abstract: Boolean | None = None
    inactive: Boolean | None = None
    version: str | None = None
    code: str | None = None
    display: str | None = None
    designation: tuple[Designation, ...] | None = None
    contains: tuple["ExpansionContains", ...] | None = None


class Expansion(Element):
    identifier: str | None = None
    next: str | None = None
    timestamp: str
    total: Integer | None = None
    offset: Integer | None = None
    parameter: tuple[ExpansionParameter, ...] | None = None
    property: tuple[Property, ...] | None = None
    contains: tuple[ExpansionContains, ...] | None = None


class ValueSetScope(Element):
    inclusion_criteria: str | None = None
    exclusion_criteria: str | None = None


class ConceptProperty(Element):
    choice_groups = ("value",)

    code: str
    value_code: str | None = None
    value_coding: Coding | None = None
    value_string: str | None = None
    value_integer: Integer | None = None
    value_boolean: Boolean | None = None
    value_date_time: str | None = None
    value_decimal: Decimal | None = None


class CodeSystemConcept(Element):
    code: str
    display: str | None = None
    definition: str | None = None
    designation: tuple[Designation, ...] | None = None
    property: tuple[ConceptProperty, ...] | None = None
    concept: tuple["CodeSystemConcept", ...] | None = None


class CodeSystemFilter(Element):
    code: str
    description: str | None = None
    operator: tuple[str, ...] = ()
    value: str


class SourceElement(Element):
    code: str | None = None
    display: str | None = None
    value_set: str | None = None
    no_map: Boolean | None = None
    target: tuple[Target, ...] | None = None


class Unmapped(Element):
    mode: str
    code: str | None = None
    display: str | None = None
    value_set: str | None = None
    relationship: str | None = None
    other_map: str | None = None


class Group(Element):
    source: str | None = None
    target: str | None = None
    element: tuple[SourceElement, ...] = ()
    unmapped: Unmapped | None = None


class ConceptMapProperty(Element):
    code: str
    uri: str | None = None
    description: str | None = None
    type: str
    system: str | None = None


class UniqueId(Element):
    type: str
    value: str
    preferred: Boolean | None = None
    comment: str | None = None
    period: Period | None = None
    authoritative: Boolean | None = None


# Conformance


class Interaction(Element):
    code: str
    documentation: str | None = None


class ResourceInner(Element):
    """A resource entry of a CompartmentDefinition."""

    code: str
    param: tuple[str, ...] | None = None
    documentation: str | None = None
    start_param: str | None = None
    end_param: str | None = None


class RestSearchParam(Element):
    name: str
    definition: str | None = None
    type: str
    documentation: str | None = None


class RestOperation(Element):
    name: str
    definition: str
    documentation: str | None = None


class Security(Element):
    cors: Boolean | None = None
    service: tuple[CodeableConcept, ...] | None = None
    description: str | None = None


class RestResource(Element):
    type: str
    profile: str | None = None
    supported_profile: tuple[str, ...] | None = None
    documentation: str | None = None
    interaction: tuple[Interaction, ...] | None = None
    versioning: str | None = None
    read_history: Boolean | None = None
    update_create: Boolean | None = None
    conditional_create: Boolean | None = None
    conditional_read: str | None = None
    conditional_update: Boolean | None = None
    conditional_patch: Boolean | None = None
    conditional_delete: str | None = None
    reference_policy: tuple[str, ...] | None = None
    search_include: tuple[str, ...] | None = None
    search_rev_include: tuple[str, ...] | None = None
    search_param: tuple[RestSearchParam, ...] | None = None
    operation: tuple[RestOperation, ...] | None = None


class Rest(Element):
    mode: str
    documentation: str | None = None
    security: Security | None = None
    resource: tuple[RestResource, ...] | None = None
    interaction: tuple[Interaction, ...] | None = None
    search_param: tuple[RestSearchParam, ...] | None = None
    operation: tuple[RestOperation, ...] | None = None
    compartment: tuple[str, ...] | None = None


class Software(Element):
    name: str
    version: str | None = None
    release_date: str | None = None


class Implementation(Element):
    description: str
    url: str | None = None


class ParameterBinding(Element):
    strength: str
    value_set: str


class ReferencedFrom(Element):
    source: str
    source_id: str | None = None


class OperationParameter(Element):
    name: str
    use: str
    scope: tuple[str, ...] | None = None
    min: UnsignedInt
    max: str
    documentation: str | None = None
    type: str | None = None
    allowed_type: tuple[str, ...] | None = None
    target_profile: tuple[str, ...] | None = None
    search_type: str | None = None
    binding: ParameterBinding | None = None
    referenced_from: tuple[ReferencedFrom, ...] | None = None
    part: tuple["OperationParameter", ...] | None = None

    _check_max = field_validator("max")(check_max)

    @model_validator(mode="after")
    def _check_cardinality(self) -> Self:
        check_cardinality(self.min, self.max)
        return self


class Overload(Element):
    parameter_name: tuple[str, ...] | None = None
    comment: str | None = None


class SearchParameterComponent(Element):
    definition: str
    expression: str


ExpansionContains.model_rebuild()
CodeSystemConcept.model_rebuild()
OperationParameter.model_rebuild()
