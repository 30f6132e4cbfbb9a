from enum import Enum
import configparser
from os import environ
from os.path import exists
from typing import Any
import logging

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

_PATH = "fhir-definitions{suffix}.conf"
_CONFIG = None

FIXTURES_DIR_ENV = "FHIR_FIXTURES_DIR"


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class ConfigApp(BaseModel):
    loglevel: LogLevel = Field(default=LogLevel.info)

    @field_validator("loglevel", mode="before")
    def validate_loglevel(cls, v: Any) -> Any:
        if v in (None, "", " "):
            return LogLevel.info
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ConfigLoader(BaseModel):
    definitions_dir: str = Field(default=".")
    permissive: bool = Field(default=False)
    # characters read per step when streaming a bundle
    chunk_size: int = Field(default=65536, ge=1)

    @field_validator("definitions_dir", mode="before")
    def validate_definitions_dir(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "."
        return str(v)

    @field_validator("permissive", mode="before")
    def validate_permissive(cls, v: Any) -> bool:
        if v in (None, "", " "):
            return False
        if isinstance(v, str):
            return v.lower() in ("yes", "true", "t", "1")
        return bool(v)

    @field_validator("chunk_size", mode="before")
    def validate_chunk_size(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 65536
        return int(v)


class ConfigFixtures(BaseModel):
    dir: str | None = Field(default=None)

    @field_validator("dir", mode="before")
    def validate_dir(cls, v: Any) -> str | None:
        if v in (None, "", " "):
            return None
        return str(v)


class ConfigCodegen(BaseModel):
    out_dir: str = Field(default="tmp/out")

    @field_validator("out_dir", mode="before")
    def validate_out_dir(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "tmp/out"
        return str(v)


class Config(BaseModel):
    app: ConfigApp = Field(default_factory=ConfigApp)
    loader: ConfigLoader = Field(default_factory=ConfigLoader)
    fixtures: ConfigFixtures = Field(default_factory=ConfigFixtures)
    codegen: ConfigCodegen = Field(default_factory=ConfigCodegen)


def read_ini_file(path: str) -> Any:
    ini_data = configparser.ConfigParser()
    ini_data.read(path)

    ret = {}
    for section in ini_data.sections():
        ret[section] = dict(ini_data[section])

    return ret


def reset_config() -> None:
    global _CONFIG
    _CONFIG = None


def set_config(config: Config) -> None:
    global _CONFIG
    _CONFIG = config


def get_config(path: str | None = None) -> Config:
    global _CONFIG

    if _CONFIG is not None:
        return _CONFIG

    ini_data: dict[str, Any] = {}
    if path is None:
        suffix = environ.get("APP_ENV", "")
        if suffix:
            suffix = f".{suffix}"
        default_path = _PATH.replace("{suffix}", suffix)
        if exists(default_path):
            logger.info(f"Reading configuration using file: {default_path}")
            ini_data = read_ini_file(default_path)
        else:
            logger.debug(f"No configuration file {default_path}, using defaults")
    else:
        if not exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        logger.info(f"Reading configuration using file: {path}")
        ini_data = read_ini_file(path)

    # the environment wins over the file for the fixtures directory
    fixtures_dir = environ.get(FIXTURES_DIR_ENV)
    if fixtures_dir:
        ini_data.setdefault("fixtures", {})["dir"] = fixtures_dir

    try:
        _CONFIG = Config(**ini_data)
    except ValidationError as e:
        logger.error(f"Configuration validation error: {e}")
        raise e

    return _CONFIG
