"""
The Bundle envelope of the distribution files.

``BundleEntry.resource`` is a closed union over the resource variants, keyed
on ``resourceType``. Bundles read from disk are assembled entry by entry by
``services.fhir.bundle.bundle_parser`` so that every entry reports its own
errors.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from fhir_definitions.models.fhir.r5.base import FhirModel, UnsignedInt
from fhir_definitions.models.fhir.r5.datatypes import Element, Identifier, Meta
from fhir_definitions.models.fhir.r5.resources import (
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

AnyResource = Annotated[
    Union[
        StructureDefinition,
        ValueSet,
        CodeSystem,
        ConceptMap,
        SearchParameter,
        DataElement,
        OperationDefinition,
        NamingSystem,
        CapabilityStatement,
        CompartmentDefinition,
    ],
    Field(discriminator="resource_type"),
]


class BundleLink(Element):
    relation: str
    url: str


class BundleEntry(Element):
    link: tuple[BundleLink, ...] | None = None
    full_url: str | None = None
    resource: AnyResource | None = None


class Bundle(FhirModel):
    resource_type: Literal["Bundle"]
    id: str | None = None
    meta: Meta | None = None
    implicit_rules: str | None = None
    language: str | None = None
    identifier: Identifier | None = None
    type: str | None = None
    timestamp: str | None = None
    total: UnsignedInt | None = None
    link: tuple[BundleLink, ...] | None = None
    entry: tuple[BundleEntry, ...] = ()
