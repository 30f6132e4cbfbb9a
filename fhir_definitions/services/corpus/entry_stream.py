"""
Incremental reading of a bundle file.

The file is read in chunks and scanned with ``json.JSONDecoder.raw_decode``,
so only the entry being decoded has to be held in memory. Entries are
yielded as soon as their closing brace has been read.
"""

import json
import logging
from typing import Any, Dict, Iterator, NoReturn, TextIO, Tuple

from fhir_definitions.models.errors import DecodeError, DecodeResult, ErrorKind
from fhir_definitions.services.corpus.file_errors import io_error
from fhir_definitions.services.fhir.codec import syntax_error
from fhir_definitions.services.fhir.fhir_service import FhirService

logger = logging.getLogger(__name__)

WHITESPACE = " \t\n\r"
NUMBER_CHARS = "0123456789.eE+-"

StreamItem = Tuple[int | None, DecodeResult[Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class StreamSyntaxError(Exception):
    def __init__(self, error: DecodeError) -> None:
        super().__init__(error.message)
        self.error = error


class JsonScanner:
    """Reads JSON tokens and values from a text file one chunk at a time."""

    def __init__(self, handle: TextIO, chunk_size: int) -> None:
        self.handle = handle
        self.chunk_size = chunk_size
        self.decoder = json.JSONDecoder()
        self.buffer = ""
        self.pos = 0
        # characters dropped from the front of the buffer
        self.consumed = 0
        self.eof = False

    @property
    def offset(self) -> int:
        return self.consumed + self.pos

    def _fill(self, size: int | None = None) -> None:
        if self.pos > self.chunk_size:
            self.consumed += self.pos
            self.buffer = self.buffer[self.pos:]
            self.pos = 0
        chunk = self.handle.read(size or self.chunk_size)
        if chunk == "":
            self.eof = True
        self.buffer += chunk

    def peek(self) -> str:
        """Returns the next non-whitespace character, or "" at the end of the file."""
        while True:
            while self.pos < len(self.buffer) and self.buffer[self.pos] in WHITESPACE:
                self.pos += 1
            if self.pos < len(self.buffer):
                return self.buffer[self.pos]
            if self.eof:
                return ""
            self._fill()

    def expect(self, char: str) -> None:
        found = self.peek()
        if found != char:
            self.fail(f"Expecting {char!r}, found {found or 'end of file'}")
        self.pos += 1

    def read_value(self) -> Any:
        self.peek()
        while True:
            try:
                value, end = self.decoder.raw_decode(self.buffer, self.pos)
            except json.JSONDecodeError as e:
                if self.eof:
                    raise StreamSyntaxError(syntax_error(e, self.consumed))
                self._fill(max(self.chunk_size, len(self.buffer) - self.pos))
                continue
            # a number may continue in the next chunk
            if self.eof or (
                end < len(self.buffer)
                and not (_is_number(value) and self.buffer[end] in NUMBER_CHARS)
            ):
                self.pos = end
                return value
            self._fill(max(self.chunk_size, len(self.buffer) - self.pos))

    def fail(self, message: str) -> NoReturn:
        raise StreamSyntaxError(
            DecodeError(
                kind=ErrorKind.JSON,
                code="syntax",
                expected="JSON bundle",
                message=message,
                offset=self.offset,
            )
        )


def stream_entries(
    path: str, chunk_size: int, service: FhirService
) -> Iterator[StreamItem]:
    """
    Yields ``(index, result)`` for every entry of the bundle in ``path``.

    Problems with the file or the bundle itself are yielded once with index
    None and end the iteration. The file is closed when the generator is
    exhausted, closed or garbage collected.
    """
    try:
        with open(path, encoding="utf-8") as handle:
            logger.info(f"Streaming bundle entries from {path}")
            yield from _scan_bundle(JsonScanner(handle, chunk_size), service)
    except (OSError, UnicodeDecodeError) as e:
        yield None, DecodeResult(errors=(io_error(path, e),))


def _scan_bundle(scanner: JsonScanner, service: FhirService) -> Iterator[StreamItem]:
    envelope: Dict[str, Any] = {}
    try:
        scanner.expect("{")
        if scanner.peek() == "}":
            scanner.pos += 1
        else:
            while True:
                key = scanner.read_value()
                if not isinstance(key, str):
                    scanner.fail("Expecting property name enclosed in double quotes")
                scanner.expect(":")
                if key == "entry" and scanner.peek() == "[":
                    yield from _scan_entries(scanner, service)
                else:
                    envelope[key] = scanner.read_value()
                    if key == "resourceType" and envelope[key] != "Bundle":
                        yield None, service.create_bundle_envelope({key: envelope[key]})
                        return

                separator = scanner.peek()
                scanner.pos += 1
                if separator == "}":
                    break
                if separator != ",":
                    scanner.pos -= 1
                    scanner.fail("Expecting ',' delimiter")
        if scanner.peek() != "":
            scanner.fail("Extra data after the bundle")
    except StreamSyntaxError as e:
        yield None, DecodeResult(errors=(e.error,))
        return

    result = service.create_bundle_envelope(envelope)
    if result.errors:
        yield None, result


def _scan_entries(scanner: JsonScanner, service: FhirService) -> Iterator[StreamItem]:
    scanner.expect("[")
    if scanner.peek() == "]":
        scanner.pos += 1
        return

    index = 0
    while True:
        scanner.peek()
        offset = scanner.offset
        result = service.create_bundle_entry(scanner.read_value(), index, offset)
        if result.errors and service.permissive:
            logger.warning(
                "Bundle entry %d at offset %d has errors: %s",
                index,
                offset,
                "; ".join(str(e) for e in result.errors),
            )
        yield index, result
        index += 1

        separator = scanner.peek()
        scanner.pos += 1
        if separator == "]":
            return
        if separator != ",":
            scanner.pos -= 1
            scanner.fail("Expecting ',' delimiter")
