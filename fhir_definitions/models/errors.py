"""
Error values returned by the decoders.

Decoding never raises on bad input. Every failure is described by a
``DecodeError`` and collected in a ``DecodeResult``; ``DecodeFailed`` is only
raised by ``DecodeResult.unwrap()`` for callers that prefer exceptions.
"""

import json
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ErrorKind(str, Enum):
    IO = "io"
    JSON = "json"
    STRUCTURAL = "structural"
    INVARIANT = "invariant"


class DecodeError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    code: str
    pointer: str = ""
    expected: str | None = None
    observed: str | None = None
    message: str = ""
    entry_index: int | None = None
    offset: int | None = None

    def with_context(
        self, prefix: str = "", entry_index: int | None = None, offset: int | None = None
    ) -> "DecodeError":
        """
        Returns a copy located inside a bigger document: ``prefix`` is put in
        front of the pointer, entry index and offset are only set when given.
        """
        update: dict[str, object] = {"pointer": prefix + self.pointer}
        if entry_index is not None:
            update["entry_index"] = entry_index
        if offset is not None:
            update["offset"] = offset
        return self.model_copy(update=update)

    def to_json_line(self) -> str:
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True),
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def __str__(self) -> str:
        location = self.pointer or "/"
        return f"{self.kind.value} error ({self.code}) at {location}: {self.message}"


class DecodeFailed(Exception):
    def __init__(self, errors: list[DecodeError]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors) or "decoding failed")


class DecodeResult(BaseModel, Generic[T]):
    """The decoded value, or the errors that prevented decoding it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: T | None = None
    errors: tuple[DecodeError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def unwrap(self) -> T:
        if self.value is None or self.errors:
            raise DecodeFailed(list(self.errors))
        return self.value
