"""Message translation used by violations and constraints."""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Protocol, Tuple

from .settings import settings

LOGGER = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "fr", "de", "es", "it")

# English message key -> {language: translation}
_MESSAGES: Dict[str, Dict[str, str]] = {
    "Request body is empty": {
        "fr": "Le corps de la requête est vide",
        "de": "Anfragetext ist leer",
        "es": "El cuerpo de la solicitud está vacío",
        "it": "Il corpo della richiesta è vuoto",
    },
    "Unable to decode as JSON": {
        "fr": "Impossible de décoder en JSON",
        "de": "Kann nicht als JSON dekodiert werden",
        "es": "No se puede decodificar como JSON",
        "it": "Impossibile decodificare come JSON",
    },
    "JSON must not be JSON null": {
        "fr": "JSON ne doit pas être JSON null",
        "de": "JSON darf nicht JSON null sein",
        "es": "JSON no debe ser JSON null",
        "it": "JSON non deve essere JSON null",
    },
    "JSON must not be JSON array": {
        "fr": "JSON ne doit pas être un tableau JSON",
        "de": "JSON darf kein JSON-Array sein",
        "es": "JSON no debe ser una matriz JSON",
        "it": "JSON non deve essere un array JSON",
    },
    "JSON must not be JSON object": {
        "fr": "JSON ne doit pas être un objet JSON",
        "de": "JSON darf kein JSON-Objekt sein",
        "es": "JSON no debe ser un objeto JSON",
        "it": "JSON non deve essere un oggetto JSON",
    },
    "JSON expected to be JSON object or array": {
        "fr": "JSON devrait être un objet ou un tableau JSON",
        "de": "JSON sollte ein JSON-Objekt oder -Array sein",
        "es": "Se esperaba que JSON fuera un objeto o una matriz JSON",
        "it": "JSON dovrebbe essere un oggetto o un array JSON",
    },
    "JSON array element must not be null": {
        "fr": "L'élément du tableau JSON ne doit pas être null",
        "de": "JSON-Array-Element darf nicht null sein",
        "es": "El elemento de la matriz JSON no debe ser null",
        "it": "L'elemento dell'array JSON non deve essere null",
    },
    "JSON array element must be an object": {
        "fr": "L'élément du tableau JSON doit être un objet",
        "de": "JSON-Array-Element muss ein Objekt sein",
        "es": "El elemento de la matriz JSON debe ser un objeto",
        "it": "L'elemento dell'array JSON deve essere un oggetto",
    },
    "Missing property": {
        "fr": "Propriété manquante",
        "de": "Fehlende Eigenschaft",
        "es": "Propiedad faltante",
        "it": "Proprietà mancante",
    },
    "Property must not be present": {
        "fr": "La propriété ne doit pas être présente",
        "de": "Eigenschaft darf nicht vorhanden sein",
        "es": "La propiedad no debe estar presente",
        "it": "La proprietà non deve essere presente",
    },
    "Unknown property": {
        "fr": "Propriété inconnue",
        "de": "Unbekannte Eigenschaft",
        "es": "Propiedad desconocida",
        "it": "Proprietà sconosciuta",
    },
    "Value cannot be null": {
        "fr": "La valeur ne peut pas être nulle",
        "de": "Wert darf nicht null sein",
        "es": "El valor no puede ser nulo",
        "it": "Il valore non può essere nullo",
    },
    "Value must be an object": {
        "fr": "La valeur doit être un objet",
        "de": "Wert muss ein Objekt sein",
        "es": "El valor debe ser un objeto",
        "it": "Il valore deve essere un oggetto",
    },
    "Value must be an array": {
        "fr": "La valeur doit être un tableau",
        "de": "Wert muss ein Array sein",
        "es": "El valor debe ser una matriz",
        "it": "Il valore deve essere un array",
    },
    "Value must be an object or array": {
        "fr": "La valeur doit être un objet ou un tableau",
        "de": "Wert muss ein Objekt oder Array sein",
        "es": "El valor debe ser un objeto o una matriz",
        "it": "Il valore deve essere un oggetto o un array",
    },
}

_FORMATS: Dict[str, Dict[str, str]] = {
    "Value expected to be of type {0}": {
        "fr": "La valeur devrait être de type {0}",
        "de": "Wert sollte vom Typ {0} sein",
        "es": "Se esperaba que el valor fuera de tipo {0}",
        "it": "Il valore dovrebbe essere di tipo {0}",
    },
    "Value length must be at least {0}": {
        "fr": "La longueur de la valeur doit être d'au moins {0}",
        "de": "Wertlänge muss mindestens {0} sein",
        "es": "La longitud del valor debe ser al menos {0}",
        "it": "La lunghezza del valore deve essere almeno {0}",
    },
    "Value length must be between {0} ({1}) and {2} ({3})": {
        "fr": "La longueur de la valeur doit être comprise entre {0} ({1}) et {2} ({3})",
        "de": "Wertlänge muss zwischen {0} ({1}) und {2} ({3}) liegen",
        "es": "La longitud del valor debe estar entre {0} ({1}) y {2} ({3})",
        "it": "La lunghezza del valore deve essere compresa tra {0} ({1}) e {2} ({3})",
    },
    "Value must be between {0} ({1}) and {2} ({3})": {
        "fr": "La valeur doit être comprise entre {0} ({1}) et {2} ({3})",
        "de": "Wert muss zwischen {0} ({1}) und {2} ({3}) liegen",
        "es": "El valor debe estar entre {0} ({1}) y {2} ({3})",
        "it": "Il valore deve essere compreso tra {0} ({1}) e {2} ({3})",
    },
    "Value must be greater than {0}": {
        "fr": "La valeur doit être supérieure à {0}",
        "de": "Wert muss größer als {0} sein",
        "es": "El valor debe ser mayor que {0}",
        "it": "Il valore deve essere maggiore di {0}",
    },
    "Value must be less than {0}": {
        "fr": "La valeur doit être inférieure à {0}",
        "de": "Wert muss kleiner als {0} sein",
        "es": "El valor debe ser menor que {0}",
        "it": "Il valore deve essere minore di {0}",
    },
    'String value must be valid token - "{0}"': {
        "fr": 'La chaîne doit être un jeton valide - "{0}"',
        "de": 'Zeichenkette muss ein gültiges Token sein - "{0}"',
        "es": 'La cadena debe ser un token válido - "{0}"',
        "it": 'La stringa deve essere un token valido - "{0}"',
    },
}

_TOKENS: Dict[str, Dict[str, str]] = {
    "string": {"fr": "chaîne", "de": "Zeichenkette", "es": "cadena", "it": "stringa"},
    "number": {"fr": "nombre", "de": "Zahl", "es": "número", "it": "numero"},
    "integer": {"fr": "entier", "de": "Ganzzahl", "es": "entero", "it": "intero"},
    "boolean": {"fr": "booléen", "de": "Boolesch", "es": "booleano", "it": "booleano"},
    "object": {"fr": "objet", "de": "Objekt", "es": "objeto", "it": "oggetto"},
    "array": {"fr": "tableau", "de": "Array", "es": "matriz", "it": "array"},
    "inclusive": {"fr": "inclus", "de": "inklusive", "es": "inclusivo", "it": "incluso"},
    "exclusive": {"fr": "exclus", "de": "exklusive", "es": "exclusivo", "it": "escluso"},
}

_lock = threading.Lock()


class Translator(Protocol):
    """Anything able to localize messages, format strings and tokens."""

    def translate_message(self, message: str) -> str: ...

    def translate_format(self, fmt: str, *args: object) -> str: ...

    def translate_token(self, token: str) -> str: ...


class DefaultTranslator:
    """Table-driven translator; unknown keys pass through unchanged."""

    def __init__(self, language: str = "en"):
        self.language = _normalise_language(language)

    def __repr__(self) -> str:
        return f"DefaultTranslator({self.language!r})"

    def translate_message(self, message: str) -> str:
        return _lookup(_MESSAGES, message, self.language)

    def translate_format(self, fmt: str, *args: object) -> str:
        return _lookup(_FORMATS, fmt, self.language).format(*args)

    def translate_token(self, token: str) -> str:
        return _lookup(_TOKENS, token, self.language)


def _normalise_language(language: str) -> str:
    lang = (language or "").strip().lower().replace("_", "-").split("-")[0]
    return lang or "en"


def _lookup(table: Dict[str, Dict[str, str]], key: str, language: str) -> str:
    if language == "en":
        return key
    with _lock:
        translations = table.get(key)
        if translations is None:
            return key
        return translations.get(language, key)


def add_translation(language: str, key: str, text: str, *, kind: str = "message") -> None:
    """Register an extra translation (``kind`` is message, format or token)."""
    tables = {"message": _MESSAGES, "format": _FORMATS, "token": _TOKENS}
    if kind not in tables:
        raise ValueError(f"unknown translation kind '{kind}'")
    with _lock:
        tables[kind].setdefault(key, {})[_normalise_language(language)] = text


def _parse_accept_language(header: str) -> List[Tuple[str, float]]:
    ranked: List[Tuple[str, float]] = []
    for part in header.split(","):
        piece = part.strip()
        if not piece:
            continue
        lang, _, params = piece.partition(";")
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                LOGGER.debug("Ignoring malformed Accept-Language weight %r", params)
                continue
        ranked.append((_normalise_language(lang), weight))
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked


def translator_for(language: str | None = None) -> DefaultTranslator:
    lang = _normalise_language(language or settings.DEFAULT_LANGUAGE)
    if lang not in SUPPORTED_LANGUAGES:
        lang = _normalise_language(settings.DEFAULT_LANGUAGE)
    return DefaultTranslator(lang)


def translator_for_accept_language(header: str | None) -> DefaultTranslator:
    """Pick the best supported language from an Accept-Language header."""
    if header:
        for lang, weight in _parse_accept_language(header):
            if weight > 0 and lang in SUPPORTED_LANGUAGES:
                return DefaultTranslator(lang)
    return translator_for(None)


DEFAULT_TRANSLATOR = DefaultTranslator("en")

__all__ = [
    "SUPPORTED_LANGUAGES",
    "Translator",
    "DefaultTranslator",
    "DEFAULT_TRANSLATOR",
    "add_translation",
    "translator_for",
    "translator_for_accept_language",
]
