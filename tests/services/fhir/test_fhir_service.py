from typing import Any, Dict

from fhir_definitions.models.fhir.r5.bundle import Bundle
from fhir_definitions.models.fhir.r5.resources import CompartmentDefinition
from fhir_definitions.models.fhir.r5.version_info import VersionInfo
from fhir_definitions.services.fhir.fhir_service import FhirService
from tests.utils import load_fixture


def quokka_bundle() -> Dict[str, Any]:
    data = load_fixture(Bundle)
    data["entry"][0]["resource"]["resourceType"] = "Quokka"
    return data


def test_create_resource_should_return_typed_variant(fhir_service: FhirService) -> None:
    result = fhir_service.create_resource(load_fixture(CompartmentDefinition))

    assert isinstance(result.value, CompartmentDefinition)


def test_create_bundle_should_be_strict_by_default(fhir_service: FhirService) -> None:
    result = fhir_service.create_bundle(quokka_bundle())

    assert result.value is None
    assert result.errors[0].code == "unknown_resource"


def test_create_bundle_should_skip_entries_when_permissive(
    permissive_fhir_service: FhirService,
) -> None:
    result = permissive_fhir_service.create_bundle(quokka_bundle())

    assert result.value is not None
    assert len(result.value.entry) == 1
    assert [type(r) for r in permissive_fhir_service.get_resources(result.value)] == [
        CompartmentDefinition
    ]


def test_create_bundle_entry_should_carry_offset(fhir_service: FhirService) -> None:
    result = fhir_service.create_bundle_entry({"resource": {"resourceType": "Quokka"}}, 4, 1024)

    assert result.errors[0].pointer == "/entry/4/resource/resourceType"
    assert result.errors[0].entry_index == 4
    assert result.errors[0].offset == 1024


def test_create_version_info(fhir_service: FhirService) -> None:
    result = fhir_service.create_version_info(load_fixture(VersionInfo))

    assert result.unwrap().fhir_version == "4.0.1"


def test_to_json_should_use_json_names(fhir_service: FhirService) -> None:
    data = load_fixture(VersionInfo)

    assert fhir_service.to_json(fhir_service.create_version_info(data).unwrap()) == data
