"""
Resource variants found in the FHIR R5 definition bundles.

Every variant pins ``resourceType`` to its own literal, so decoding a
document with another tag reports both the expected and the observed value.
"""

from typing import Literal

from pydantic import JsonValue

from fhir_definitions.models.fhir.r5.base import (
    Boolean,
    FhirModel,
    Integer,
    NonEmptyString,
)
from fhir_definitions.models.fhir.r5.datatypes import (
    AdditionalAttribute,
    CodeableConcept,
    Coding,
    ContactDetail,
    Extension,
    Identifier,
    Jurisdiction,
    Meta,
    Narrative,
    Period,
    Property,
    RelatedArtifact,
    Topic,
    UsageContext,
)
from fhir_definitions.models.fhir.r5.elements import (
    CodeSystemConcept,
    CodeSystemFilter,
    Compose,
    ConceptMapProperty,
    Differential,
    ElementDefinition,
    Expansion,
    Group,
    Implementation,
    OperationParameter,
    Overload,
    ResourceInner,
    Rest,
    SearchParameterComponent,
    Snapshot,
    Software,
    StructureDefinitionContext,
    StructureDefinitionMapping,
    UniqueId,
    ValueSetScope,
)


class Resource(FhirModel):
    resource_type: str
    id: str | None = None
    meta: Meta | None = None
    implicit_rules: str | None = None
    language: str | None = None


class DomainResource(Resource):
    text: Narrative | None = None
    contained: tuple[dict[str, JsonValue], ...] | None = None
    extension: tuple[Extension, ...] | None = None
    modifier_extension: tuple[Extension, ...] | None = None


class CanonicalResource(DomainResource):
    choice_groups = ("versionAlgorithm",)

    url: str | None = None
    identifier: tuple[Identifier, ...] | None = None
    version: str | None = None
    version_algorithm_string: str | None = None
    version_algorithm_coding: Coding | None = None
    name: str | None = None
    title: str | None = None
    status: str
    experimental: Boolean | None = None
    date: str | None = None
    publisher: str | None = None
    contact: tuple[ContactDetail, ...] | None = None
    description: str | None = None
    use_context: tuple[UsageContext, ...] | None = None
    jurisdiction: tuple[Jurisdiction, ...] | None = None
    purpose: str | None = None
    copyright: str | None = None
    copyright_label: str | None = None


class MetadataResource(CanonicalResource):
    approval_date: str | None = None
    last_review_date: str | None = None
    effective_period: Period | None = None
    topic: tuple[Topic, ...] | None = None
    author: tuple[ContactDetail, ...] | None = None
    editor: tuple[ContactDetail, ...] | None = None
    reviewer: tuple[ContactDetail, ...] | None = None
    endorser: tuple[ContactDetail, ...] | None = None
    related_artifact: tuple[RelatedArtifact, ...] | None = None


class StructureDefinition(CanonicalResource):
    resource_type: Literal["StructureDefinition"]
    id: str
    url: str
    keyword: tuple[Coding, ...] | None = None
    fhir_version: str | None = None
    mapping: tuple[StructureDefinitionMapping, ...] | None = None
    kind: NonEmptyString
    abstract: Boolean | None = None
    context: tuple[StructureDefinitionContext, ...] | None = None
    context_invariant: tuple[str, ...] | None = None
    type: NonEmptyString
    base_definition: str | None = None
    derivation: NonEmptyString | None = None
    snapshot: Snapshot | None = None
    differential: Differential | None = None


class ValueSet(MetadataResource):
    resource_type: Literal["ValueSet"]
    id: str
    url: str
    immutable: Boolean | None = None
    compose: Compose | None = None
    expansion: Expansion | None = None
    scope: ValueSetScope | None = None


class CodeSystem(MetadataResource):
    resource_type: Literal["CodeSystem"]
    case_sensitive: Boolean | None = None
    value_set: str | None = None
    hierarchy_meaning: str | None = None
    compositional: Boolean | None = None
    version_needed: Boolean | None = None
    content: str
    supplements: str | None = None
    count: Integer | None = None
    filter: tuple[CodeSystemFilter, ...] | None = None
    property: tuple[Property, ...] | None = None
    concept: tuple[CodeSystemConcept, ...] | None = None


class ConceptMap(MetadataResource):
    resource_type: Literal["ConceptMap"]
    choice_groups = ("versionAlgorithm", "sourceScope", "targetScope")

    id: str
    url: str
    property: tuple[ConceptMapProperty, ...] | None = None
    additional_attribute: tuple[AdditionalAttribute, ...] | None = None
    source_scope_uri: str | None = None
    source_scope_canonical: str | None = None
    target_scope_uri: str | None = None
    target_scope_canonical: str | None = None
    group: tuple[Group, ...] = ()


class SearchParameter(CanonicalResource):
    resource_type: Literal["SearchParameter"]
    id: str
    status: str | None = None
    derived_from: str | None = None
    code: str
    base: tuple[str, ...] = ()
    type: str
    expression: str
    processing_mode: str | None = None
    constraint: str | None = None
    target: tuple[str, ...] | None = None
    multiple_or: Boolean | None = None
    multiple_and: Boolean | None = None
    comparator: tuple[str, ...] | None = None
    modifier: tuple[str, ...] | None = None
    chain: tuple[str, ...] | None = None
    component: tuple[SearchParameterComponent, ...] | None = None


class DataElement(CanonicalResource):
    """
    A reusable field definition: a named list of element definitions that
    other definitions can refer to.
    """

    resource_type: Literal["DataElement"]
    stringency: str | None = None
    mapping: tuple[StructureDefinitionMapping, ...] | None = None
    element: tuple[ElementDefinition, ...] = ()


class OperationDefinition(CanonicalResource):
    resource_type: Literal["OperationDefinition"]
    kind: str
    affects_state: Boolean | None = None
    code: str
    comment: str | None = None
    base: str | None = None
    resource: tuple[str, ...] | None = None
    system: Boolean
    type: Boolean
    instance: Boolean
    input_profile: str | None = None
    output_profile: str | None = None
    parameter: tuple[OperationParameter, ...] | None = None
    overload: tuple[Overload, ...] | None = None


class NamingSystem(MetadataResource):
    resource_type: Literal["NamingSystem"]
    kind: str
    responsible: str | None = None
    type: CodeableConcept | None = None
    usage: str | None = None
    unique_id: tuple[UniqueId, ...] = ()


class CapabilityStatement(CanonicalResource):
    resource_type: Literal["CapabilityStatement"]
    date: str
    kind: str
    instantiates: tuple[str, ...] | None = None
    imports: tuple[str, ...] | None = None
    software: Software | None = None
    implementation: Implementation | None = None
    fhir_version: str
    format: tuple[str, ...] = ()
    patch_format: tuple[str, ...] | None = None
    accept_language: tuple[str, ...] | None = None
    implementation_guide: tuple[str, ...] | None = None
    rest: tuple[Rest, ...] | None = None
    messaging: tuple[dict[str, JsonValue], ...] | None = None
    document: tuple[dict[str, JsonValue], ...] | None = None


class CompartmentDefinition(CanonicalResource):
    resource_type: Literal["CompartmentDefinition"]
    url: str
    name: str
    code: str
    search: Boolean
    resource: tuple[ResourceInner, ...] | None = None
