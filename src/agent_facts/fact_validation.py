"""Fact definition validation.

Three layers:

- validate_fact_definition(): one rule's shape against its declared type
- validate_fact_definitions(): a whole rule set (per-rule checks, duplicate
  names, composite references to undefined facts)
- check_fact_definitions(): the set checks plus circular dependencies,
  with errors routed to editor rows. This is the gate before persisting.

Validators take raw editor drafts (dicts), typed models, or arbitrary junk
and never raise: every problem comes back as an operator-facing string.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .fact_graph import find_cycles
from .fact_models import COMPOSITE_LOGIC, FACT_TYPES, is_valid_fact_name

_ROW_PREFIX = re.compile(r"^Definition (\d+)")

_MISSING = object()


@dataclass(frozen=True)
class FactValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def _as_mapping(definition: Any) -> Mapping[str, Any]:
    if isinstance(definition, BaseModel):
        return definition.model_dump()
    if isinstance(definition, Mapping):
        return definition
    return {}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def validate_fact_definition(definition: Any) -> FactValidationResult:
    """Check one fact definition. All violations are collected."""
    d = _as_mapping(definition)
    errors: list[str] = []

    name = d.get("name")
    if not _is_non_empty_str(name):
        errors.append("name is required and must be a string")
    elif not is_valid_fact_name(name):
        errors.append(
            "name must start with a letter or underscore and contain only "
            "letters, digits and underscores (e.g., has_budget, is_qualified)"
        )

    fact_type = d.get("type")
    if fact_type not in FACT_TYPES:
        errors.append(f"type must be one of: {', '.join(FACT_TYPES)}")

    if fact_type in ("exists", "not_exists"):
        if not _is_non_empty_str(d.get("field")):
            errors.append(f"{fact_type} requires 'field' property (string)")

    elif fact_type == "equals":
        if not _is_non_empty_str(d.get("field")):
            errors.append("equals requires 'field' property (string)")
        # Only an absent key is missing: "", 0, False and None are values.
        if d.get("value", _MISSING) is _MISSING:
            errors.append("equals requires 'value' property")

    elif fact_type in ("any_exists", "all_exists"):
        fields = d.get("fields")
        if not isinstance(fields, list) or not fields:
            errors.append(f"{fact_type} requires non-empty 'fields' array")
        elif not all(isinstance(f, str) for f in fields):
            errors.append(f"{fact_type} 'fields' must be an array of strings")

    elif fact_type == "composite":
        conditions = d.get("conditions")
        if not isinstance(conditions, list) or not conditions:
            errors.append("composite requires non-empty 'conditions' array")
        elif not all(
            isinstance(c, Mapping) and _is_non_empty_str(c.get("fact")) for c in conditions
        ):
            errors.append("composite conditions must have 'fact' property (string)")
        logic = d.get("logic")
        if logic is not None and logic not in COMPOSITE_LOGIC:
            errors.append("composite logic must be 'all' or 'any'")

    return FactValidationResult(valid=not errors, errors=errors)


def _composite_references(d: Mapping[str, Any]) -> list[str]:
    if d.get("type") != "composite":
        return []
    conditions = d.get("conditions")
    if not isinstance(conditions, list):
        return []
    return [
        c["fact"]
        for c in conditions
        if isinstance(c, Mapping) and _is_non_empty_str(c.get("fact"))
    ]


def validate_fact_definitions(definitions: list[Any]) -> FactValidationResult:
    """Check a rule set: each rule, duplicate names and undefined references.

    Per-rule errors are prefixed "Definition <n> (<name>): " with n 1-based,
    which lets editors route them to the right row.
    """
    errors: list[str] = []
    names: set[str] = set()
    mappings = [_as_mapping(d) for d in definitions]

    for index, d in enumerate(mappings, start=1):
        result = validate_fact_definition(d)
        label = d.get("name") or "unnamed"
        for error in result.errors:
            errors.append(f"Definition {index} ({label}): {error}")

        name = d.get("name")
        if _is_non_empty_str(name):
            if name in names:
                errors.append(f'Duplicate fact name: "{name}"')
            names.add(name)

    for d in mappings:
        for fact in _composite_references(d):
            if fact not in names:
                errors.append(
                    f'Composite fact "{d.get("name")}" references undefined fact: "{fact}"'
                )

    return FactValidationResult(valid=not errors, errors=errors)


@dataclass(frozen=True)
class FactSetReport:
    """Set validation and cycle detection over one rule set."""

    set_errors: list[str] = field(default_factory=list)
    circular_errors: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [*self.set_errors, *self.circular_errors]

    @property
    def valid(self) -> bool:
        return not self.set_errors and not self.circular_errors

    @property
    def row_errors(self) -> dict[int, list[str]]:
        """0-based definition index → errors reported for that row."""
        rows: dict[int, list[str]] = {}
        for error in self.set_errors:
            match = _ROW_PREFIX.match(error)
            if match:
                rows.setdefault(int(match.group(1)) - 1, []).append(error)
        return rows

    @property
    def global_errors(self) -> list[str]:
        return [
            *(e for e in self.set_errors if not _ROW_PREFIX.match(e)),
            *self.circular_errors,
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "row_errors": {str(k): v for k, v in self.row_errors.items()},
            "global_errors": self.global_errors,
        }


def check_fact_definitions(definitions: list[Any]) -> FactSetReport:
    result = validate_fact_definitions(definitions)
    return FactSetReport(
        set_errors=list(result.errors),
        circular_errors=find_cycles(definitions),
    )
