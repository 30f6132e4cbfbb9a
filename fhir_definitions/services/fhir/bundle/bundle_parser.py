import logging
from typing import Any, Dict, Iterator, List

from fhir_definitions.models.errors import DecodeError, DecodeResult, ErrorKind
from fhir_definitions.models.fhir.r5.bundle import Bundle, BundleEntry
from fhir_definitions.models.fhir.r5.resources import CanonicalResource
from fhir_definitions.services.fhir.codec import decode
from fhir_definitions.services.fhir.json_pointer import join, json_type_name
from fhir_definitions.services.fhir.model_factory import create_resource

logger = logging.getLogger(__name__)

BundleParseResult = DecodeResult[Bundle]


def create_bundle_envelope(data: Any) -> DecodeResult[Bundle]:
    """
    Validates everything of a bundle except its entries. The returned bundle
    has no entries, they are decoded one by one with ``create_bundle_entry``.
    """
    if isinstance(data, dict):
        entries = data.get("entry")
        if entries is not None and not isinstance(entries, list):
            error = DecodeError(
                kind=ErrorKind.STRUCTURAL,
                code="wrong_type",
                pointer="/entry",
                expected="array",
                observed=json_type_name(entries),
                message="Bundle entry should be a JSON array",
            )
            return DecodeResult(errors=(error,))
        data = {key: value for key, value in data.items() if key != "entry"}
    return decode(Bundle, data)


def create_bundle_entry(
    data: Any, index: int, offset: int | None = None
) -> DecodeResult[BundleEntry]:
    pointer = join("", "entry", index)
    if not isinstance(data, dict):
        result = decode(BundleEntry, data, pointer)
        return DecodeResult(errors=_in_entry(result.errors, index, offset))

    envelope = decode(
        BundleEntry, {k: v for k, v in data.items() if k != "resource"}, pointer
    )
    errors = list(envelope.errors)
    resource: CanonicalResource | None = None
    if data.get("resource") is None:
        errors.append(
            DecodeError(
                kind=ErrorKind.STRUCTURAL,
                code="missing_field",
                pointer=join(pointer, "resource"),
                expected="resource object",
                observed="absent",
                message="Bundle entry has no resource",
            )
        )
    else:
        decoded = create_resource(data["resource"], join(pointer, "resource"))
        errors.extend(decoded.errors)
        resource = decoded.value

    if errors or envelope.value is None:
        return DecodeResult(errors=_in_entry(errors, index, offset))
    return DecodeResult(value=envelope.value.model_copy(update={"resource": resource}))


def _in_entry(
    errors: tuple[DecodeError, ...] | List[DecodeError], index: int, offset: int | None
) -> tuple[DecodeError, ...]:
    return tuple(e.with_context(entry_index=index, offset=offset) for e in errors)


def parse_bundle(data: Dict[str, Any] | Any, permissive: bool = False) -> BundleParseResult:
    """
    Decodes a bundle document with all of its entries, in input order.

    In strict mode any error leaves the result without a bundle. In
    permissive mode entries that fail are skipped and their errors are
    returned next to the bundle of the entries that did decode.
    """
    envelope = create_bundle_envelope(data)
    if envelope.value is None:
        return envelope

    entries: List[BundleEntry] = []
    errors: List[DecodeError] = []
    for index, entry_data in enumerate(data.get("entry") or []):
        result = create_bundle_entry(entry_data, index)
        if result.value is not None:
            entries.append(result.value)
            continue
        errors.extend(result.errors)
        if permissive:
            logger.warning(
                "Skipping bundle entry %d: %s", index, "; ".join(str(e) for e in result.errors)
            )

    if errors and not permissive:
        return DecodeResult(errors=tuple(errors))
    bundle = envelope.value.model_copy(update={"entry": tuple(entries)})
    return DecodeResult(value=bundle, errors=tuple(errors))


def iter_resources(bundle: Bundle) -> Iterator[CanonicalResource]:
    for entry in bundle.entry:
        if entry.resource is not None:
            yield entry.resource
