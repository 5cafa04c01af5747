"""Fact definition models — Pydantic shapes for operator-declared facts.

A fact is a named boolean signal derived from the conversation's
collected-data map. Operators declare facts as rules; the orchestrator
evaluates them at runtime. Six rule shapes exist:

- exists / not_exists: one field is (not) present in collected-data
- equals: one field equals a scalar value exactly
- any_exists / all_exists: at least one / every field of a list is present
- composite: ALL / ANY of other facts are true

The models describe well-formed rules only. Editor drafts are plain dicts
and are checked by fact_validation, which never raises.
"""

import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

FACT_TYPES: tuple[str, ...] = (
    "exists",
    "not_exists",
    "equals",
    "any_exists",
    "all_exists",
    "composite",
)

COMPOSITE_LOGIC: tuple[str, ...] = ("all", "any")

FACT_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_valid_fact_name(name: Any) -> bool:
    return isinstance(name, str) and FACT_NAME_PATTERN.fullmatch(name) is not None


class _FactBase(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_is_identifier(cls, v: str) -> str:
        if not is_valid_fact_name(v):
            raise ValueError(f"name {v!r} must match {FACT_NAME_PATTERN.pattern}")
        return v


class _SingleFieldFact(_FactBase):
    field: str

    @field_validator("field")
    @classmethod
    def field_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("field must not be empty")
        return v


class _MultiFieldFact(_FactBase):
    fields: list[str]

    @field_validator("fields")
    @classmethod
    def fields_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("fields must not be empty")
        return v


class ExistsFact(_SingleFieldFact):
    """True when `field` is present in collected-data."""

    type: Literal["exists"]


class NotExistsFact(_SingleFieldFact):
    """True when `field` is absent from collected-data."""

    type: Literal["not_exists"]


class EqualsFact(_SingleFieldFact):
    """True when collected-data[field] == value.

    `value` is required but may be any scalar, including "", 0, False and None.
    """

    type: Literal["equals"]
    value: Any


class AnyExistsFact(_MultiFieldFact):
    type: Literal["any_exists"]


class AllExistsFact(_MultiFieldFact):
    type: Literal["all_exists"]


class FactCondition(BaseModel):
    fact: str

    @field_validator("fact")
    @classmethod
    def fact_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("fact must not be empty")
        return v


class CompositeFact(_FactBase):
    """Combines other facts: logic="all" is AND, logic="any" is OR."""

    type: Literal["composite"]
    logic: Literal["all", "any"] = "all"
    conditions: list[FactCondition]

    @field_validator("conditions")
    @classmethod
    def conditions_not_empty(cls, v: list[FactCondition]) -> list[FactCondition]:
        if not v:
            raise ValueError("conditions must not be empty")
        return v

    @property
    def referenced_facts(self) -> list[str]:
        return [c.fact for c in self.conditions]


FactDefinition = Annotated[
    Union[ExistsFact, NotExistsFact, EqualsFact, AnyExistsFact, AllExistsFact, CompositeFact],
    Field(discriminator="type"),
]

_fact_definition_adapter: TypeAdapter[FactDefinition] = TypeAdapter(FactDefinition)


def parse_fact_definition(data: Any) -> FactDefinition:
    """Parse a raw rule dict into its typed variant.

    Raises pydantic.ValidationError on any malformed shape, including an
    unknown `type`. Use fact_validation for non-raising operator feedback.
    """
    return _fact_definition_adapter.validate_python(data)


def dump_fact_definition(definition: FactDefinition) -> dict[str, Any]:
    """Serialize a typed definition to its persisted JSON shape."""
    return definition.model_dump(mode="json")


def create_empty_fact_definition(fact_type: str = "exists") -> dict[str, Any]:
    """Return the blank draft an operator starts from when adding a rule."""
    base: dict[str, Any] = {"name": "", "type": fact_type}

    if fact_type in ("exists", "not_exists"):
        return {**base, "field": ""}
    if fact_type == "equals":
        return {**base, "field": "", "value": ""}
    if fact_type in ("any_exists", "all_exists"):
        return {**base, "fields": []}
    if fact_type == "composite":
        return {**base, "logic": "all", "conditions": []}
    return base
