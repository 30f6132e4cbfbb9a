import os
import pathlib
from collections.abc import Generator
from typing import Any

import pytest

# fixtures live next to the tests unless the environment points elsewhere
os.environ.setdefault(
    "FHIR_FIXTURES_DIR", str(pathlib.Path(__file__).parent / "fixtures")
)

from fhir_definitions.config import reset_config, set_config  # noqa: E402
from fhir_definitions.services.fhir.fhir_service import FhirService  # noqa: E402
from fhir_definitions.services.fixtures.fixture_index import (  # noqa: E402
    FixtureIndex,
    get_fixture_index,
)
from tests.test_config import get_test_config  # noqa: E402


@pytest.fixture(autouse=True)
def config_for_tests() -> Generator[None, Any, None]:
    set_config(get_test_config())
    yield
    reset_config()


@pytest.fixture
def fixture_index() -> FixtureIndex:
    return get_fixture_index()


@pytest.fixture
def fhir_service() -> FhirService:
    return FhirService(permissive=False)


@pytest.fixture
def permissive_fhir_service() -> FhirService:
    return FhirService(permissive=True)
