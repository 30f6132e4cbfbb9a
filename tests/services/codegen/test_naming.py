import pytest

from fhir_definitions.services.codegen.naming import (
    first_word,
    identifier,
    last_word,
    pascal_case,
    snake_case,
)


@pytest.mark.parametrize(
    "value, first, last",
    [
        ("alfa", "alfa", "alfa"),
        ("alfa bravo", "alfa", "bravo"),
        ("alfa bravo charlie", "alfa", "charlie"),
        ("Timing.repeat.bounds", "Timing", "bounds"),
        ("", "", ""),
    ],
)
def test_first_and_last_word(value: str, first: str, last: str) -> None:
    assert first_word(value) == first
    assert last_word(value) == last


def test_pascal_case() -> None:
    assert pascal_case("AlfaBravoCharlie") == "AlfaBravoCharlie"
    assert pascal_case("alfa-bravo") == "AlfaBravo"


def test_snake_case() -> None:
    assert snake_case("AlfaBravoCharlie") == "alfa_bravo_charlie"
    assert snake_case("valueSet") == "value_set"
    assert snake_case("repeat.boundsDuration") == "repeat_bounds_duration"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("for", "for_"),
        ("class", "class_"),
        ("1st", "_1st"),
        ("", "_"),
        ("contentType", "content_type"),
    ],
)
def test_identifier_should_be_valid_python(value: str, expected: str) -> None:
    assert identifier(value) == expected
    assert expected.isidentifier()
