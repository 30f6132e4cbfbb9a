"""
FHIR R5 datatypes as they occur in the definition bundles.

Only the shapes needed to read the specification files are modelled. Every
record inherits from ``Element`` so that ``id`` and ``extension`` are accepted
where FHIR allows them.
"""

from datetime import datetime
from typing import Self

from pydantic import Field, ConfigDict, JsonValue, model_validator
from pydantic_core import PydanticCustomError

from fhir_definitions.models.fhir.r5.base import (
    Boolean,
    Decimal,
    FhirModel,
    Integer,
    Integer64,
    PositiveInt,
    UnsignedInt,
)


class Element(FhirModel):
    id: str | None = None
    extension: tuple["Extension", ...] | None = None


class Coding(Element):
    system: str | None = None
    version: str | None = None
    code: str | None = None
    display: str | None = None
    user_selected: Boolean | None = None


class CodeableConcept(Element):
    coding: tuple[Coding, ...] | None = None
    text: str | None = None


class Jurisdiction(Element):
    """Jurisdiction of a canonical resource, a CodeableConcept with at least one coding."""

    coding: tuple[Coding, ...] = ()
    text: str | None = None


class Topic(Element):
    coding: tuple[Coding, ...] = ()
    text: str | None = None


class Reference(Element):
    reference: str | None = None
    type: str | None = None
    identifier: "Identifier | None" = None
    display: str | None = None


class Period(Element):
    start: str | None = None
    end: str | None = None

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.start is None or self.end is None:
            return self
        start = _parse_instant(self.start)
        end = _parse_instant(self.end)
        if start is not None and end is not None and start > end:
            raise PydanticCustomError(
                "period_order",
                "Period start {start} is after end {end}",
                {"start": self.start, "end": self.end, "field": "end"},
            )
        return self


def _parse_instant(value: str) -> datetime | None:
    # only full-precision timestamps with an offset take part in ordering
    if "T" not in value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


class Identifier(Element):
    use: str | None = None
    type: CodeableConcept | None = None
    system: str | None = None
    value: str | None = None
    period: Period | None = None
    assigner: Reference | None = None


class Quantity(Element):
    value: Decimal | None = None
    comparator: str | None = None
    unit: str | None = None
    system: str | None = None
    code: str | None = None


class Range(Element):
    low: Quantity | None = None
    high: Quantity | None = None


class Meta(Element):
    version_id: str | None = None
    last_updated: str | None = None
    source: str | None = None
    profile: tuple[str, ...] | None = None
    security: tuple[Coding, ...] | None = None
    tag: tuple[Coding, ...] | None = None


class Narrative(Element):
    status: str
    div: str


class ContactPoint(Element):
    system: str | None = None
    value: str | None = None
    use: str | None = None
    rank: PositiveInt | None = None
    period: Period | None = None


class ContactDetail(Element):
    name: str | None = None
    telecom: tuple[ContactPoint, ...] | None = None


class Attachment(Element):
    content_type: str | None = None
    language: str | None = None
    data: str | None = None
    url: str | None = None
    size: Integer64 | None = None
    hash: str | None = None
    title: str | None = None
    creation: str | None = None


class RelatedArtifact(Element):
    type: str
    classifier: tuple[CodeableConcept, ...] | None = None
    label: str | None = None
    display: str | None = None
    citation: str | None = None
    url: str | None = None
    document: Attachment | None = None
    resource: str | None = None
    resource_reference: Reference | None = None
    publication_status: str | None = None
    publication_date: str | None = None

    @model_validator(mode="after")
    def _check_target(self) -> Self:
        if all(
            target is None
            for target in (self.citation, self.url, self.document, self.resource)
        ):
            raise PydanticCustomError(
                "missing_target",
                "RelatedArtifact needs one of citation, url, document or resource",
                {"expected": "citation | url | document | resource"},
            )
        return self


class UsageContext(Element):
    choice_groups = ("value",)

    code: Coding
    value_codeable_concept: CodeableConcept | None = None
    value_quantity: Quantity | None = None
    value_range: Range | None = None
    value_reference: Reference | None = None


class Extension(Element):
    """
    Extension with its value[x]. The commonly used value types are typed, any
    other ``value<Type>`` is kept as raw JSON.
    """

    model_config = ConfigDict(extra="allow")
    choice_groups = ("value",)
    open_choices = ("value",)

    url: str
    value_boolean: Boolean | None = None
    value_canonical: str | None = None
    value_code: str | None = None
    value_date: str | None = None
    value_date_time: str | None = None
    value_decimal: Decimal | None = None
    value_id: str | None = None
    value_integer: Integer | None = None
    value_integer64: Integer64 | None = None
    value_markdown: str | None = None
    value_positive_int: PositiveInt | None = None
    value_string: str | None = None
    value_unsigned_int: UnsignedInt | None = None
    value_uri: str | None = None
    value_url: str | None = None
    value_coding: Coding | None = None
    value_codeable_concept: CodeableConcept | None = None
    value_identifier: Identifier | None = None
    value_period: Period | None = None
    value_quantity: Quantity | None = None
    value_reference: Reference | None = None


class UnderscoreCode(FhirModel):
    """Primitive extension sibling of ``code``, serialized as ``_code``."""

    id: str | None = None
    extension: tuple[Extension, ...] = ()


class Additional(Element):
    purpose: str
    value_set: str
    documentation: str | None = None
    short_doco: str | None = None
    usage: tuple[UsageContext, ...] | None = None
    any: Boolean | None = None


class Binding(Element):
    strength: str
    description: str | None = None
    value_set: str | None = None
    additional: tuple[Additional, ...] | None = None


class Constraint(Element):
    key: str
    requirements: str | None = None
    severity: str
    suppress: Boolean | None = None
    human: str
    expression: str | None = None
    source: str | None = None


class Example(Element):
    model_config = ConfigDict(extra="allow")
    choice_groups = ("value",)
    open_choices = ("value",)

    label: str
    value_string: str | None = None
    value_code: str | None = None
    value_uri: str | None = None
    value_coding: Coding | None = None
    value_codeable_concept: CodeableConcept | None = None
    value_quantity: Quantity | None = None
    value_reference: Reference | None = None


class ElementType(Element):
    code: str
    profile: tuple[str, ...] | None = None
    target_profile: tuple[str, ...] | None = None
    aggregation: tuple[str, ...] | None = None
    versioning: str | None = None


class Property(Element):
    code: str
    underscore_code: UnderscoreCode | None = Field(default=None, alias="_code")
    uri: str | None = None
    description: str | None = None
    type: str | None = None


class AdditionalAttribute(Element):
    code: str
    uri: str | None = None
    description: str | None = None
    type: str


class DependsOn(Element):
    choice_groups = ("value",)
    not_choices = ("valueSet",)

    attribute: str
    value_code: str | None = None
    value_coding: Coding | None = None
    value_string: str | None = None
    value_boolean: Boolean | None = None
    value_quantity: Quantity | None = None
    value_set: str | None = None

    @model_validator(mode="after")
    def _check_value_or_value_set(self) -> Self:
        value = self.choice("value")
        if value is not None and self.value_set is not None:
            raise PydanticCustomError(
                "choice_conflict",
                "value{type_name} and valueSet may not both be present",
                {
                    "type_name": value.type_name,
                    "group": "value[x] | valueSet",
                    "expected": "value[x] or valueSet, not both",
                    "field": "valueSet",
                },
            )
        return self


class MappingProperty(Element):
    choice_groups = ("value",)

    code: str
    value_coding: Coding | None = None
    value_string: str | None = None
    value_integer: Integer | None = None
    value_boolean: Boolean | None = None
    value_date_time: str | None = None
    value_decimal: Decimal | None = None
    value_code: str | None = None


class Target(Element):
    code: str | None = None
    display: str | None = None
    value_set: str | None = None
    relationship: str
    comment: str | None = None
    property: tuple[MappingProperty, ...] | None = None
    depends_on: tuple[DependsOn, ...] | None = None
    product: tuple[DependsOn, ...] | None = None


JsonObject = dict[str, JsonValue]


for _model in (
    Element,
    Coding,
    CodeableConcept,
    Jurisdiction,
    Topic,
    Reference,
    Period,
    Identifier,
    Quantity,
    Range,
    Meta,
    Narrative,
    ContactPoint,
    ContactDetail,
    Attachment,
    RelatedArtifact,
    UsageContext,
    Extension,
    UnderscoreCode,
    Additional,
    Binding,
    Constraint,
    Example,
    ElementType,
    Property,
    AdditionalAttribute,
    DependsOn,
    MappingProperty,
    Target,
):
    _model.model_rebuild()
