"""Natural-language explanations of fact definitions for operator review."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "es")

_PHRASES: dict[str, dict[str, str]] = {
    "en": {
        "exists": 'field "{field}" is present',
        "not_exists": 'field "{field}" is NOT present',
        "equals": 'field "{field}" equals "{value}"',
        "any_exists": "at least one of fields: {fields}",
        "all_exists": "all of fields: {fields}",
        "composite": "{quantifier} of these facts are true: {facts}",
        "all": "ALL",
        "any": "ANY",
        "unknown": "unknown fact definition",
    },
    "es": {
        "exists": 'Existe el campo "{field}"',
        "not_exists": 'NO existe el campo "{field}"',
        "equals": 'El campo "{field}" es igual a "{value}"',
        "any_exists": "Al menos uno de estos campos existe: {fields}",
        "all_exists": "Todos estos campos existen: {fields}",
        "composite": "{quantifier} de estos facts son verdaderos: {facts}",
        "all": "TODOS",
        "any": "AL MENOS UNO",
        "unknown": "Definición desconocida",
    },
}


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def _join(items: Any) -> str:
    if not isinstance(items, list):
        return ""
    return ", ".join(_format_value(item) for item in items)


def explain(definition: Any, locale: str = "en") -> str:
    """Render one fact definition as a sentence.

    Total over any input: missing or malformed payloads render as "?" or an
    empty list instead of raising.
    """
    if locale not in _PHRASES:
        raise ValueError(f"Unsupported locale {locale!r}. Expected one of: {', '.join(SUPPORTED_LOCALES)}")
    phrases = _PHRASES[locale]

    if isinstance(definition, BaseModel):
        definition = definition.model_dump()
    if not isinstance(definition, Mapping):
        return phrases["unknown"]

    fact_type = definition.get("type")
    field = definition.get("field")
    field_text = _format_value(field) if field is not None else "?"

    if fact_type in ("exists", "not_exists"):
        return phrases[fact_type].format(field=field_text)
    if fact_type == "equals":
        value = _format_value(definition["value"]) if "value" in definition else "?"
        return phrases["equals"].format(field=field_text, value=value)
    if fact_type in ("any_exists", "all_exists"):
        return phrases[fact_type].format(fields=_join(definition.get("fields")))
    if fact_type == "composite":
        logic = definition.get("logic") or "all"
        quantifier = phrases["any"] if logic == "any" else phrases["all"]
        conditions = definition.get("conditions")
        facts = [
            c.get("fact")
            for c in (conditions if isinstance(conditions, list) else [])
            if isinstance(c, Mapping)
        ]
        return phrases["composite"].format(quantifier=quantifier, facts=_join(facts))
    return phrases["unknown"]


def explain_all(definitions: list[Any], locale: str = "en") -> list[str]:
    return [explain(d, locale) for d in definitions]
