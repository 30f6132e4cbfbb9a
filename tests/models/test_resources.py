from typing import Any

import pytest

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
from fhir_definitions.services.fhir.codec import decode, encode
from tests.utils import load_fixture


def minimal_structure_definition(**fields: Any) -> dict[str, Any]:
    return {
        "resourceType": "StructureDefinition",
        "id": "Example",
        "url": "http://example.org/StructureDefinition/Example",
        "name": "Example",
        "status": "draft",
        "kind": "resource",
        "abstract": False,
        "type": "Example",
        **fields,
    }


def test_structure_definition_should_decode_fixture() -> None:
    definition = decode(StructureDefinition, load_fixture(StructureDefinition)).unwrap()

    assert definition.id == "Period"
    assert definition.kind == "complex-type"
    assert definition.type == "Period"
    assert definition.derivation == "specialization"
    assert definition.snapshot is not None
    assert [e.path for e in definition.snapshot.element] == ["Period", "Period.start"]
    assert definition.jurisdiction is not None
    assert definition.jurisdiction[0].coding[0].code == "001"


@pytest.mark.parametrize("field", ["kind", "type"])
def test_structure_definition_should_require_non_empty(field: str) -> None:
    data = minimal_structure_definition()

    missing = decode(StructureDefinition, {k: v for k, v in data.items() if k != field})
    empty = decode(StructureDefinition, {**data, field: ""})

    assert missing.errors[0].code == "missing_field"
    assert missing.errors[0].pointer == f"/{field}"
    assert empty.errors[0].code == "empty_value"
    assert empty.errors[0].pointer == f"/{field}"


def test_structure_definition_derivation_should_be_non_empty_when_present() -> None:
    assert decode(StructureDefinition, minimal_structure_definition()).ok
    assert decode(StructureDefinition, minimal_structure_definition(derivation="constraint")).ok

    result = decode(StructureDefinition, minimal_structure_definition(derivation=""))

    assert result.errors[0].code == "empty_value"
    assert result.errors[0].pointer == "/derivation"


def test_resource_should_report_discriminator_mismatch() -> None:
    data = {**minimal_structure_definition(), "resourceType": "ValueSet"}

    result = decode(StructureDefinition, data)

    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.code == "discriminator_mismatch"
    assert error.pointer == "/resourceType"
    assert error.expected is not None and "StructureDefinition" in error.expected
    assert error.observed == "ValueSet"


def test_resource_should_reject_two_version_algorithms() -> None:
    data = minimal_structure_definition()
    data["versionAlgorithmString"] = "semver"
    data["versionAlgorithmCoding"] = {"code": "semver"}

    assert decode(StructureDefinition, data).errors[0].code == "choice_conflict"


def test_value_set_should_decode_fixture() -> None:
    value_set = decode(ValueSet, load_fixture(ValueSet)).unwrap()

    assert value_set.compose is not None
    assert value_set.compose.include[0].system == "http://hl7.org/fhir/administrative-gender"
    assert value_set.expansion is not None
    assert [c.code for c in value_set.expansion.contains or ()] == ["male", "female"]
    assert value_set.related_artifact is not None
    assert value_set.related_artifact[0].type == "derived-from"


def test_code_system_should_nest_concepts() -> None:
    code_system = decode(CodeSystem, load_fixture(CodeSystem)).unwrap()

    assert code_system.concept is not None
    female = code_system.concept[1]
    assert female.concept is not None
    assert female.concept[0].code == "female-adult"
    assert code_system.property is not None
    assert code_system.property[0].code == "priority"


def test_concept_map_should_decode_fixture() -> None:
    concept_map = decode(ConceptMap, load_fixture(ConceptMap)).unwrap()

    group = concept_map.group[0]
    assert group.unmapped is not None
    assert group.unmapped.mode == "fixed"
    target = group.element[0].target
    assert target is not None
    assert target[0].depends_on is not None
    assert target[0].depends_on[0].attribute == "ex3"
    assert concept_map.choice("sourceScope") is not None


def test_concept_map_should_reject_two_source_scopes() -> None:
    data = load_fixture(ConceptMap)
    data["sourceScopeUri"] = "http://example.org"

    assert decode(ConceptMap, data).errors[0].code == "choice_conflict"


def test_search_parameter_should_decode_minimal() -> None:
    data = {
        "resourceType": "SearchParameter",
        "id": "p",
        "code": "birthdate",
        "base": ["Patient"],
        "type": "date",
        "expression": "Patient.birthDate",
    }

    parameter = decode(SearchParameter, data).unwrap()

    assert parameter.base == ("Patient",)
    assert parameter.comparator is None
    assert encode(parameter) == data


def test_search_parameter_should_decode_fixture() -> None:
    parameter = decode(SearchParameter, load_fixture(SearchParameter)).unwrap()

    assert parameter.comparator == ("eq", "ne", "gt", "lt")


def test_data_element_should_decode_fixture() -> None:
    data_element = decode(DataElement, load_fixture(DataElement)).unwrap()

    assert data_element.element[0].binding is not None
    assert data_element.element[0].binding.strength == "required"


def test_operation_definition_should_decode_fixture() -> None:
    operation = decode(OperationDefinition, load_fixture(OperationDefinition)).unwrap()

    assert operation.code == "expand"
    assert operation.parameter is not None
    assert [p.name for p in operation.parameter] == ["url", "return"]


def test_naming_system_should_check_unique_id_period() -> None:
    data = load_fixture(NamingSystem)
    data["uniqueId"][0]["period"] = {"start": "2030-01-01T00:00:00Z", "end": "2020-01-01T00:00:00Z"}

    result = decode(NamingSystem, data)

    assert result.errors[0].code == "period_order"
    assert result.errors[0].pointer == "/uniqueId/0/period/end"


def test_capability_statement_should_decode_fixture() -> None:
    statement = decode(CapabilityStatement, load_fixture(CapabilityStatement)).unwrap()

    assert statement.rest is not None
    resource = statement.rest[0].resource
    assert resource is not None
    assert resource[0].interaction is not None
    assert resource[0].interaction[0].documentation == "Read is supported for all instances"


def test_compartment_definition_should_decode_fixture() -> None:
    compartment = decode(CompartmentDefinition, load_fixture(CompartmentDefinition)).unwrap()

    assert compartment.code == "Patient"
    assert compartment.resource is not None
    assert compartment.resource[1].param is None


def test_version_info_should_keep_dependencies_opaque() -> None:
    data = {
        "packageId": "hl7.fhir.us.core",
        "version": "5.0.1",
        "fhirVersion": "4.0.1",
        "title": "US Core",
        "canonical": "http://hl7.org/fhir/us/core",
        "date": "2023-01-15",
        "publisher": "HL7",
        "dependencies": {"hl7.fhir.r4.core": "4.0.1"},
    }

    version_info = decode(VersionInfo, data).unwrap()

    assert version_info.package_id == "hl7.fhir.us.core"
    assert version_info.dependencies == {"hl7.fhir.r4.core": "4.0.1"}
    assert encode(version_info) == data


def test_version_info_should_require_package_id() -> None:
    result = decode(VersionInfo, {"version": "5.0.1"})

    assert "/packageId" in [e.pointer for e in result.errors]
