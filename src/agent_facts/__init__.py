"""Agent facts — operator-declared fact definitions for agent orchestration."""

from .core_facts import CORE_FACTS, get_available_facts
from .fact_explain import explain
from .fact_graph import build_dependency_graph, dependency_order, find_cycles
from .fact_models import FactDefinition, create_empty_fact_definition, parse_fact_definition
from .fact_validation import (
    FactSetReport,
    FactValidationResult,
    check_fact_definitions,
    validate_fact_definition,
    validate_fact_definitions,
)

__all__ = [
    "CORE_FACTS",
    "FactDefinition",
    "FactSetReport",
    "FactValidationResult",
    "build_dependency_graph",
    "check_fact_definitions",
    "create_empty_fact_definition",
    "dependency_order",
    "explain",
    "find_cycles",
    "get_available_facts",
    "parse_fact_definition",
    "validate_fact_definition",
    "validate_fact_definitions",
]
