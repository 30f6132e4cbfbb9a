import json
import logging
from os import path as os_path
from typing import Any, Iterator, Tuple

from fhir_definitions.config import ConfigLoader
from fhir_definitions.models.errors import DecodeError, DecodeResult
from fhir_definitions.models.fhir.r5.version_info import VersionInfo
from fhir_definitions.models.fhir.types import DistributionFile
from fhir_definitions.services.corpus.entry_stream import StreamItem, stream_entries
from fhir_definitions.services.corpus.file_errors import io_error
from fhir_definitions.services.fhir.bundle.bundle_parser import BundleParseResult
from fhir_definitions.services.fhir.codec import syntax_error
from fhir_definitions.services.fhir.fhir_service import FhirService

logger = logging.getLogger(__name__)


class CorpusLoader:
    """
    Reads the files of an unpacked FHIR R5 definitions distribution.

    Failures to open or parse a file are returned as errors, like any other
    decoding problem.
    """

    def __init__(
        self,
        definitions_dir: str = ".",
        permissive: bool = False,
        chunk_size: int = 65536,
    ) -> None:
        self.definitions_dir = definitions_dir
        self.chunk_size = chunk_size
        self.__fhir_service = FhirService(permissive)

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "CorpusLoader":
        return cls(config.definitions_dir, config.permissive, config.chunk_size)

    @property
    def permissive(self) -> bool:
        return self.__fhir_service.permissive

    def open_and_parse(self, path: str) -> BundleParseResult:
        data, error = self._read_json(path)
        if error is not None:
            return DecodeResult(errors=(error,))
        return self.__fhir_service.create_bundle(data)

    def stream(self, path: str) -> Iterator[StreamItem]:
        """
        Lazily decodes the entries of a bundle file, one ``(index, result)``
        pair per entry. A failing entry does not stop the iteration.
        """
        return stream_entries(path, self.chunk_size, self.__fhir_service)

    def read_version_info(self, path: str) -> DecodeResult[VersionInfo]:
        data, error = self._read_json(path)
        if error is not None:
            return DecodeResult(errors=(error,))
        return self.__fhir_service.create_version_info(data)

    def resolve(self, file: DistributionFile) -> str:
        return os_path.join(self.definitions_dir, file.value)

    def profiles_resources(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.PROFILES_RESOURCES))

    def profiles_types(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.PROFILES_TYPES))

    def profiles_others(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.PROFILES_OTHERS))

    def value_sets(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.VALUE_SETS))

    def concept_maps(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.CONCEPT_MAPS))

    def data_elements(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.DATA_ELEMENTS))

    def search_parameters(self) -> BundleParseResult:
        return self.open_and_parse(self.resolve(DistributionFile.SEARCH_PARAMETERS))

    def version_info(self) -> DecodeResult[VersionInfo]:
        return self.read_version_info(self.resolve(DistributionFile.VERSION_INFO))

    @staticmethod
    def _read_json(path: str) -> Tuple[Any, DecodeError | None]:
        logger.info(f"Reading {path}")
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            return None, io_error(path, e)

        try:
            return json.loads(text), None
        except json.JSONDecodeError as e:
            return None, syntax_error(e)
