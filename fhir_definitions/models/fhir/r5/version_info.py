from pydantic import JsonValue

from fhir_definitions.models.fhir.r5.base import FhirModel


class VersionInfo(FhirModel):
    """
    Package metadata shipped next to the bundles as ``version.info``.

    ``dependencies`` maps package ids to versions in the files seen so far and
    is kept as raw JSON.
    """

    package_id: str
    version: str
    fhir_version: str
    title: str
    canonical: str
    date: str
    publisher: str
    dependencies: dict[str, JsonValue] | None = None
