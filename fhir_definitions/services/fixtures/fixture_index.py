"""
Process-wide lookup of the reference JSON fixtures, keyed by record name.

The index is built on first use from ``FHIR_FIXTURES_DIR`` (or
``[fixtures] dir`` in the configuration) and never changes afterwards.
"""

import logging
import re
import threading
from os import environ, listdir, path as os_path
from types import MappingProxyType
from typing import Mapping, Type

from pydantic import BaseModel

from fhir_definitions.config import FIXTURES_DIR_ENV, get_config

logger = logging.getLogger(__name__)

_INDEX: "FixtureIndex | None" = None
_LOCK = threading.Lock()


def record_name(model: Type[BaseModel]) -> str:
    """``CodeableConcept`` becomes ``codeable_concept``."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", model.__name__).lower()


class FixtureIndex:
    def __init__(self, root: str, paths: Mapping[str, str]) -> None:
        self.root = root
        self.__paths = MappingProxyType(dict(paths))

    @classmethod
    def build(cls, root: str) -> "FixtureIndex":
        paths = {}
        for name in sorted(listdir(root)):
            candidate = os_path.join(root, name, f"{name}.json")
            if os_path.isfile(candidate):
                paths[name] = candidate
        logger.debug(f"Indexed {len(paths)} fixtures in {root}")
        return cls(root, paths)

    @property
    def names(self) -> list[str]:
        return list(self.__paths)

    def path_for(self, name_or_model: str | Type[BaseModel]) -> str:
        name = name_or_model if isinstance(name_or_model, str) else record_name(name_or_model)
        try:
            return self.__paths[name]
        except KeyError:
            raise KeyError(f"No fixture for {name} in {self.root}") from None

    def __contains__(self, name: object) -> bool:
        return name in self.__paths

    def __len__(self) -> int:
        return len(self.__paths)


def _fixtures_dir() -> str:
    root = environ.get(FIXTURES_DIR_ENV) or get_config().fixtures.dir
    if not root:
        raise RuntimeError(f"{FIXTURES_DIR_ENV} is not set and no [fixtures] dir is configured")
    if not os_path.isdir(root):
        raise NotADirectoryError(f"Fixtures directory does not exist: {root}")
    return root


def get_fixture_index() -> FixtureIndex:
    global _INDEX

    if _INDEX is not None:
        return _INDEX
    with _LOCK:
        if _INDEX is None:
            _INDEX = FixtureIndex.build(_fixtures_dir())
    return _INDEX


def reset_fixture_index() -> None:
    global _INDEX
    with _LOCK:
        _INDEX = None
