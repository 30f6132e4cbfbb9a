import keyword
import re

WORD_PATTERN = re.compile(r"[A-Za-z0-9]+")


def words(value: str) -> list[str]:
    """Splits on every non-alphanumeric character, dropping empty parts."""
    return WORD_PATTERN.findall(value)


def first_word(value: str) -> str:
    found = words(value)
    return found[0] if found else ""


def last_word(value: str) -> str:
    found = words(value)
    return found[-1] if found else ""


def pascal_case(value: str) -> str:
    """``simple-quantity`` and ``SimpleQuantity`` both become ``SimpleQuantity``."""
    return "".join(word[0].upper() + word[1:] for word in words(value))


def snake_case(value: str) -> str:
    """``SimpleQuantity`` becomes ``simple_quantity``, ``valueSet`` becomes ``value_set``."""
    parts = [
        re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", word).lower() for word in words(value)
    ]
    return "_".join(parts)


def identifier(value: str) -> str:
    """A snake_case name that is a valid Python identifier."""
    name = snake_case(value) or "_"
    if name[0].isdigit():
        return f"_{name}"
    if keyword.iskeyword(name):
        return f"{name}_"
    return name
