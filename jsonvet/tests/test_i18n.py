from __future__ import annotations

import pytest

from jsonvet.constraints import Length, Range
from jsonvet.i18n import (
    DEFAULT_TRANSLATOR,
    DefaultTranslator,
    add_translation,
    translator_for,
    translator_for_accept_language,
)
from jsonvet.validation import JsonType, PropertyValidator, Validator


def test_english_passes_keys_through() -> None:
    assert DEFAULT_TRANSLATOR.translate_message("Missing property") == "Missing property"
    assert DEFAULT_TRANSLATOR.translate_format("Value must be greater than {0}", 3) == "Value must be greater than 3"
    assert DEFAULT_TRANSLATOR.translate_token("string") == "string"


def test_unknown_keys_fall_back_to_key() -> None:
    fr = DefaultTranslator("fr")
    assert fr.translate_message("Something custom") == "Something custom"
    assert fr.translate_format("Custom {0}", 1) == "Custom 1"


def test_violation_messages_are_translated() -> None:
    validator = Validator(
        properties={
            "name": PropertyValidator(type=JsonType.STRING, mandatory=True),
            "age": PropertyValidator(type=JsonType.INTEGER),
        }
    )
    result = validator.validate({"age": "old"}, translator=DefaultTranslator("fr"))
    assert [v.message for v in result.violations] == [
        "Propriété manquante",
        "La valeur devrait être de type entier",
    ]


def test_constraint_messages_use_tokens() -> None:
    de = DefaultTranslator("de")
    assert Length(minimum=1, maximum=5).default_message(de) == (
        "Wertlänge muss zwischen 1 (inklusive) und 5 (inklusive) liegen"
    )
    assert Range(minimum=1.0, maximum=2.0, exclusive_max=True).default_message(DEFAULT_TRANSLATOR) == (
        "Value must be between 1.0 (inclusive) and 2.0 (exclusive)"
    )


@pytest.mark.parametrize(
    "header, language",
    [
        ("fr-CH, fr;q=0.9, en;q=0.8", "fr"),
        ("de;q=0.5, es;q=0.9", "es"),
        ("ja, it;q=0.1", "it"),
        ("ja", "en"),
        ("", "en"),
        (None, "en"),
        ("fr;q=abc, de", "de"),
        ("fr;q=0", "en"),
    ],
)
def test_accept_language(header, language) -> None:
    assert translator_for_accept_language(header).language == language


def test_translator_for_unsupported_language() -> None:
    assert translator_for("pt").language == "en"
    assert translator_for("IT_it").language == "it"


def test_add_translation() -> None:
    add_translation("es", "Tea is required", "Se requiere té")
    assert DefaultTranslator("es").translate_message("Tea is required") == "Se requiere té"
    add_translation("es", "Blend {0} unknown", "Mezcla {0} desconocida", kind="format")
    assert DefaultTranslator("es").translate_format("Blend {0} unknown", "x") == "Mezcla x desconocida"
    with pytest.raises(ValueError):
        add_translation("es", "k", "v", kind="colour")
