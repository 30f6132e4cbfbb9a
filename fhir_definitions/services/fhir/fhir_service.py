from typing import Any, Dict, Iterator

from fhir_definitions.models.errors import DecodeResult
from fhir_definitions.models.fhir.r5.bundle import Bundle, BundleEntry
from fhir_definitions.models.fhir.r5.resources import CanonicalResource
from fhir_definitions.models.fhir.r5.version_info import VersionInfo
from fhir_definitions.services.fhir.bundle.bundle_parser import (
    BundleParseResult,
    create_bundle_entry,
    create_bundle_envelope,
    iter_resources,
    parse_bundle,
)
from fhir_definitions.services.fhir.codec import decode, encode
from fhir_definitions.services.fhir.model_factory import create_resource


class FhirService:
    def __init__(self, permissive: bool = False) -> None:
        self.permissive = permissive

    def create_resource(self, data: Dict[str, Any]) -> DecodeResult[CanonicalResource]:
        """
        Decodes a single resource document into its typed variant.
        """
        return create_resource(data)

    def create_bundle(self, data: Dict[str, Any]) -> BundleParseResult:
        """
        Decodes a Bundle with its entries, skipping failing entries when the
        service is permissive.
        """
        return parse_bundle(data, self.permissive)

    @staticmethod
    def create_bundle_envelope(data: Dict[str, Any]) -> DecodeResult[Bundle]:
        return create_bundle_envelope(data)

    @staticmethod
    def create_bundle_entry(
        data: Dict[str, Any], index: int, offset: int | None = None
    ) -> DecodeResult[BundleEntry]:
        return create_bundle_entry(data, index, offset)

    @staticmethod
    def create_version_info(data: Dict[str, Any]) -> DecodeResult[VersionInfo]:
        return decode(VersionInfo, data)

    @staticmethod
    def get_resources(bundle: Bundle) -> Iterator[CanonicalResource]:
        """
        Yields the resources of a Bundle in entry order.
        """
        return iter_resources(bundle)

    @staticmethod
    def to_json(record: Any) -> Dict[str, Any]:
        return encode(record)
