import pytest

from fhir_definitions.models.fhir.r5.bundle import Bundle
from fhir_definitions.services.fhir.bundle.bundle_parser import parse_bundle
from fhir_definitions.services.fhir.codec import decode, encode
from fhir_definitions.services.fixtures.fixture_index import get_fixture_index
from tests.utils import FIXTURE_MODELS, load_fixture


def test_every_record_should_have_a_fixture() -> None:
    index = get_fixture_index()

    assert sorted(name for name in FIXTURE_MODELS if name not in index) == []


@pytest.mark.parametrize("name", sorted(FIXTURE_MODELS))
def test_fixture_should_decode_and_encode_unchanged(name: str) -> None:
    data = load_fixture(name)
    model = FIXTURE_MODELS[name]

    if model is Bundle:
        result = parse_bundle(data)
    else:
        result = decode(model, data)

    assert result.errors == ()
    record = result.unwrap()
    assert encode(record) == data
    assert decode(model, encode(record)).unwrap() == record
