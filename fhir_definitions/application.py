import argparse
import logging
import sys
from os import path as os_path
from typing import Any, Sequence, TextIO

from fhir_definitions.config import get_config, reset_config
from fhir_definitions.models.errors import DecodeResult, ErrorKind
from fhir_definitions.models.fhir.r5.bundle import Bundle
from fhir_definitions.models.fhir.types import DistributionFile
from fhir_definitions.services.codegen.skeleton import write_skeletons
from fhir_definitions.services.corpus.loader import CorpusLoader

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DECODE_ERROR = 1
EXIT_IO_ERROR = 2


def setup_logging() -> None:
    loglevel = logging.getLevelName(get_config().app.loglevel.upper())

    if isinstance(loglevel, str):
        raise ValueError(f"Invalid loglevel {loglevel.upper()}")
    logging.basicConfig(
        level=loglevel,
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fhir-definitions",
        description="Read the FHIR R5 definition files into typed records",
    )
    parser.add_argument("--config", help="Path to the configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser(
        "parse", help="Decode a bundle or version.info file and report its errors"
    )
    parse.add_argument("path", help="File to decode")
    parse.add_argument(
        "--permissive",
        action="store_true",
        help="Skip bundle entries that fail to decode instead of failing the file",
    )
    parse.add_argument(
        "--config", default=argparse.SUPPRESS, help="Path to the configuration file"
    )

    skeleton = subparsers.add_parser(
        "skeleton",
        help="Write a Python source skeleton for every StructureDefinition in a bundle",
    )
    skeleton.add_argument("path", help="Bundle to read, usually profiles-types.json")
    skeleton.add_argument(
        "--out", help="Directory to write the modules to (default: [codegen] out_dir)"
    )
    skeleton.add_argument(
        "--permissive",
        action="store_true",
        help="Skip bundle entries that fail to decode instead of failing the file",
    )
    skeleton.add_argument(
        "--config", default=argparse.SUPPRESS, help="Path to the configuration file"
    )
    return parser


def exit_code(result: DecodeResult[Any]) -> int:
    if any(e.kind == ErrorKind.IO for e in result.errors):
        return EXIT_IO_ERROR
    if result.value is None:
        return EXIT_DECODE_ERROR
    return EXIT_OK


def report(result: DecodeResult[Any], path: str, out: TextIO, err: TextIO) -> None:
    for error in result.errors:
        print(error.to_json_line(), file=err)
    if isinstance(result.value, Bundle):
        print(f"{path}: {len(result.value.entry)} entries", file=out)
    elif result.value is not None:
        print(f"{path}: {type(result.value).__name__}", file=out)


def _loader(permissive: bool) -> CorpusLoader:
    config = get_config()
    return CorpusLoader(
        config.loader.definitions_dir,
        permissive or config.loader.permissive,
        config.loader.chunk_size,
    )


def parse_file(path: str, permissive: bool) -> DecodeResult[Any]:
    loader = _loader(permissive)
    if os_path.basename(path) == DistributionFile.VERSION_INFO.value:
        return loader.read_version_info(path)
    return loader.open_and_parse(path)


def generate_skeletons(
    path: str, out_dir: str, permissive: bool, out: TextIO
) -> DecodeResult[Bundle]:
    result = _loader(permissive).open_and_parse(path)
    if result.value is not None:
        for written in write_skeletons(result.value, out_dir):
            print(written, file=out)
    return result


def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.config is not None:
        reset_config()
    try:
        get_config(args.config)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_IO_ERROR
    setup_logging()

    if args.command == "skeleton":
        out_dir = args.out or get_config().codegen.out_dir
        result = generate_skeletons(args.path, out_dir, args.permissive, sys.stdout)
        for error in result.errors:
            print(error.to_json_line(), file=sys.stderr)
        return exit_code(result)

    result = parse_file(args.path, args.permissive)
    report(result, args.path, sys.stdout, sys.stderr)
    return exit_code(result)
