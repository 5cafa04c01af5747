"""Core facts — built-in signals the orchestrator derives on its own.

Core facts are always available at runtime. They are read-only for
operators, are not part of an agent's editable fact definitions and are
not checked by the set validator.
"""

from typing import Any, Literal

from pydantic import BaseModel


class CoreFact(BaseModel):
    label: str
    value_type: Literal["string", "boolean"]
    values: list[Any]
    description: str


CORE_FACTS: dict[str, CoreFact] = {
    "operation_type": CoreFact(
        label="Operation type",
        value_type="string",
        values=["RENT", "SELL", None],
        description="Operation type normalized from collected tipo_operacion",
    ),
    "property_found": CoreFact(
        label="Property found",
        value_type="boolean",
        values=[True, False, None],
        description="Whether collected-data carries a property_id",
    ),
    "has_contact": CoreFact(
        label="Has contact",
        value_type="boolean",
        values=[True, False, None],
        description="Name plus a valid email were collected",
    ),
    "has_search_params": CoreFact(
        label="Has search parameters",
        value_type="boolean",
        values=[True, False, None],
        description="tipo_propiedad, estado and presupuesto were collected",
    ),
}


def get_available_facts(custom_definitions: list[Any] | None = None) -> dict[str, CoreFact]:
    """Core facts plus one boolean entry per custom definition.

    Custom definitions win on a name clash. Definitions without a usable
    name are skipped.
    """
    facts = dict(CORE_FACTS)
    for definition in custom_definitions or []:
        if isinstance(definition, BaseModel):
            definition = definition.model_dump()
        if not isinstance(definition, dict):
            continue
        name = definition.get("name")
        if not name or not isinstance(name, str):
            continue
        facts[name] = CoreFact(
            label=name,
            value_type="boolean",
            values=[True, False, None],
            description=f"Custom fact: {definition.get('type')}",
        )
    return facts
