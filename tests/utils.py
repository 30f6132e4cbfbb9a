import json
from typing import Any, Dict, Type

from pydantic import BaseModel

from fhir_definitions.models.fhir.r5.bundle import Bundle
from fhir_definitions.models.fhir.r5.datatypes import (
    AdditionalAttribute,
    Additional,
    Binding,
    CodeableConcept,
    Coding,
    Constraint,
    ContactPoint,
    DependsOn,
    ElementType,
    Example,
    Extension,
    Identifier,
    Jurisdiction,
    Meta,
    Period,
    Property,
    Quantity,
    Range,
    RelatedArtifact,
    Target,
    Topic,
    UnderscoreCode,
    UsageContext,
)
from fhir_definitions.models.fhir.r5.elements import (
    Base,
    Compose,
    ElementDefinition,
    Interaction,
    ResourceInner,
    Unmapped,
)
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
from fhir_definitions.models.fhir.r5.version_info import VersionInfo
from fhir_definitions.services.fixtures.fixture_index import (
    get_fixture_index,
    record_name,
)

FIXTURE_MODELS: Dict[str, Type[BaseModel]] = {
    record_name(model): model
    for model in (
        Coding,
        CodeableConcept,
        Identifier,
        Period,
        Quantity,
        Range,
        Meta,
        Extension,
        ContactPoint,
        RelatedArtifact,
        Jurisdiction,
        Topic,
        Binding,
        Additional,
        Constraint,
        Example,
        ElementType,
        UnderscoreCode,
        Property,
        AdditionalAttribute,
        DependsOn,
        Target,
        UsageContext,
        Interaction,
        ResourceInner,
        Unmapped,
        Compose,
        Base,
        ElementDefinition,
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
        Bundle,
        VersionInfo,
    )
}


def load_fixture(name_or_model: str | Type[BaseModel]) -> Any:
    with open(get_fixture_index().path_for(name_or_model), encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Any, data: Any) -> str:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return str(path)
