"""
Python source skeletons generated from StructureDefinition snapshots.

Every StructureDefinition becomes one module holding a ``FhirModel``
subclass with one attribute per snapshot element below the root element.
Attributes are left untyped; the element's ``short`` text is written above
each attribute and its first type code after it.
"""

import logging
from os import makedirs, path as os_path
from typing import List

from fhir_definitions.models.fhir.r5.bundle import Bundle
from fhir_definitions.models.fhir.r5.elements import ElementDefinition
from fhir_definitions.models.fhir.r5.resources import StructureDefinition
from fhir_definitions.services.codegen.naming import (
    first_word,
    identifier,
    last_word,
    pascal_case,
    snake_case,
    words,
)
from fhir_definitions.services.fhir.bundle.bundle_parser import iter_resources

logger = logging.getLogger(__name__)

ATTRIBUTE_INDENT = "    "
MISSING_SHORT = "Short description goes here."
UNKNOWN = "unknown"

MODULE_HEADER = '''"""
{name}

URL: {url}

Version: {version}

{description}
"""

from typing import Any

from fhir_definitions.models.fhir.r5.base import FhirModel


class {name}(FhirModel):
'''


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _docstring_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def is_root(element: ElementDefinition) -> bool:
    return element.path == first_word(element.path)


def attribute_name(element: ElementDefinition) -> str:
    """
    ``Timing.repeat.bounds[x]`` becomes ``repeat_bounds``. The element id is
    preferred over the path so that slices get names of their own.
    """
    location = (element.id or element.path).replace("[x]", "")
    return identifier(".".join(words(location)[1:]))


def type_code(element: ElementDefinition) -> str | None:
    if not element.type:
        return None
    # system types are URLs such as http://hl7.org/fhirpath/System.String
    return last_word(element.type[0].code)


def element_attribute(element: ElementDefinition) -> str:
    short = _one_line(element.short or MISSING_SHORT)
    line = f"{ATTRIBUTE_INDENT}{attribute_name(element)}: Any = None"
    code = type_code(element)
    if code:
        line += f"  # {code}"
    return f"{ATTRIBUTE_INDENT}# {short}\n{line}\n"


def attribute_block(resource: StructureDefinition) -> str:
    elements = resource.snapshot.element if resource.snapshot is not None else ()
    attributes = [element_attribute(e) for e in elements if not is_root(e)]
    if not attributes:
        return f"{ATTRIBUTE_INDENT}pass\n"
    return "\n".join(attributes)


def skeleton_source(resource: StructureDefinition) -> str:
    header = MODULE_HEADER.format(
        name=pascal_case(resource.id),
        url=_docstring_text(resource.url),
        version=_docstring_text(resource.version or UNKNOWN),
        description=_docstring_text(resource.description or UNKNOWN),
    )
    return header + attribute_block(resource)


def skeleton_path(resource: StructureDefinition, out_dir: str) -> str:
    return os_path.join(out_dir, f"{snake_case(resource.id)}.py")


def write_skeleton(resource: StructureDefinition, out_dir: str) -> str:
    path = skeleton_path(resource, out_dir)
    makedirs(out_dir, exist_ok=True)
    logger.info(f"Writing skeleton of {resource.id} to {path}")
    with open(path, "w", encoding="utf-8") as f:
        f.write(skeleton_source(resource))
    return path


def write_skeletons(bundle: Bundle, out_dir: str) -> List[str]:
    """Writes one skeleton per StructureDefinition in the bundle, in entry order."""
    return [
        write_skeleton(resource, out_dir)
        for resource in iter_resources(bundle)
        if isinstance(resource, StructureDefinition)
    ]
