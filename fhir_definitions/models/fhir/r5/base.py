import re
from typing import Annotated, Any, ClassVar, NamedTuple, Self

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    StrictBool,
    StrictInt,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INTEGER64_PATTERN = re.compile(r"-?(0|[1-9][0-9]*)")


def _validate_decimal(value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError(
            "decimal_type",
            "Input should be a JSON number",
            {"expected": "number"},
        )
    return value


def _validate_integer64(value: str) -> str:
    if not INTEGER64_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "integer64_parsing",
            "Input should be a decimal integer string",
            {"expected": "integer64 string"},
        )
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise PydanticCustomError(
            "integer64_range",
            "Input should be within the signed 64-bit range",
            {"expected": f">= {INT64_MIN} and <= {INT64_MAX}"},
        )
    return value


Boolean = StrictBool
Integer = Annotated[StrictInt, Field(ge=INT32_MIN, le=INT32_MAX)]
UnsignedInt = Annotated[StrictInt, Field(ge=0, le=INT32_MAX)]
PositiveInt = Annotated[StrictInt, Field(ge=1, le=INT32_MAX)]
Integer64 = Annotated[str, AfterValidator(_validate_integer64)]
Decimal = Annotated[int | float, PlainValidator(_validate_decimal)]
NonEmptyString = Annotated[str, Field(min_length=1)]


class Choice(NamedTuple):
    """One populated variant of a ``value[x]`` style group."""

    type_name: str
    value: Any


def is_variant_of(key: str, prefix: str) -> bool:
    return (
        len(key) > len(prefix)
        and key.startswith(prefix)
        and key[len(prefix)].isupper()
    )


class FhirModel(BaseModel):
    """
    Base for every record read from the FHIR definition files.

    Records are immutable, use lowerCamelCase JSON names and reject JSON keys
    they do not declare. Null and absent are the same on input, and absent
    values are never written on output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
    )

    # JSON prefixes of the value[x] groups declared on the record
    choice_groups: ClassVar[tuple[str, ...]] = ()
    # groups that also accept variants which are not declared as fields
    open_choices: ClassVar[tuple[str, ...]] = ()
    # JSON keys that start like a group but are fields of their own
    not_choices: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @model_validator(mode="after")
    def _check_choices(self) -> Self:
        for key in self.__pydantic_extra__ or {}:
            if not any(self._is_variant(key, prefix) for prefix in self.open_choices):
                raise PydanticCustomError(
                    "unknown_field",
                    "Extra inputs are not permitted: {field}",
                    {"field": key},
                )

        populated = self._populated_keys()
        for prefix in self.choice_groups:
            variants = [key for key in populated if self._is_variant(key, prefix)]
            if len(variants) > 1:
                raise PydanticCustomError(
                    "choice_conflict",
                    "At most one of {variants} may be present",
                    {"group": f"{prefix}[x]", "variants": ", ".join(variants)},
                )
        return self

    @model_serializer(mode="wrap")
    def _omit_absent(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Any:
        """
        Drops absent fields from the output. List fields that default to an
        empty list are dropped when empty too, so ``{"constraint": []}`` encodes
        as ``{}``; optional lists keep an explicit ``[]``.
        """
        data = handler(self)
        if not isinstance(data, dict):
            return data
        for name, field in type(self).model_fields.items():
            value = getattr(self, name, None)
            if value is None or (value == () and field.default == ()):
                key = (field.alias or name) if info.by_alias else name
                data.pop(key, None)
        return data

    @classmethod
    def _is_variant(cls, key: str, prefix: str) -> bool:
        return key not in cls.not_choices and is_variant_of(key, prefix)

    def _populated_keys(self) -> list[str]:
        keys = [
            field.alias or name
            for name, field in type(self).model_fields.items()
            if getattr(self, name) is not None
        ]
        keys.extend(self.__pydantic_extra__ or {})
        return keys

    def choice(self, prefix: str) -> Choice | None:
        """
        Returns the populated variant of the ``<prefix>[x]`` group, or None.
        Variants received through an open group are returned as raw JSON.
        """
        extra = self.__pydantic_extra__ or {}
        for name, field in type(self).model_fields.items():
            key = field.alias or name
            value = getattr(self, name)
            if value is not None and self._is_variant(key, prefix):
                return Choice(key[len(prefix):], value)
        for key, value in extra.items():
            if self._is_variant(key, prefix):
                return Choice(key[len(prefix):], value)
        return None
