"""Editing session for an agent's fact definitions.

Keeps the last persisted list and a working draft. Every mutation is
re-validated through `report`; only a clean draft can be saved, and a save
replaces the persisted list wholesale.
"""

import copy
import logging
from typing import Any

import psycopg
from pydantic import BaseModel

from .fact_explain import explain_all
from .fact_models import create_empty_fact_definition, dump_fact_definition
from .fact_store import load_fact_definitions, save_fact_definitions
from .fact_validation import FactSetReport, check_fact_definitions

logger = logging.getLogger(__name__)


def _as_draft(definition: Any) -> Any:
    if isinstance(definition, BaseModel):
        return dump_fact_definition(definition)
    return copy.deepcopy(definition)


class FactEditorSession:
    def __init__(self, agent_id: str, persisted: list[Any] | None = None):
        self.agent_id = agent_id
        self._persisted: list[Any] = [_as_draft(d) for d in persisted or []]
        self.definitions: list[Any] = copy.deepcopy(self._persisted)

    @classmethod
    async def load(cls, conn: psycopg.AsyncConnection[Any], agent_id: str) -> "FactEditorSession":
        return cls(agent_id, await load_fact_definitions(conn, agent_id))

    @property
    def persisted(self) -> list[Any]:
        return copy.deepcopy(self._persisted)

    @property
    def is_dirty(self) -> bool:
        return self.definitions != self._persisted

    @property
    def report(self) -> FactSetReport:
        return check_fact_definitions(self.definitions)

    def add(self, fact_type: str = "exists") -> int:
        """Append an empty definition of the given type; returns its index."""
        self.definitions.append(create_empty_fact_definition(fact_type))
        return len(self.definitions) - 1

    def update(self, index: int, definition: Any) -> None:
        self.definitions[index] = _as_draft(definition)

    def set_field(self, index: int, key: str, value: Any) -> None:
        draft = self.definitions[index]
        if not isinstance(draft, dict):
            raise TypeError(f"Definition {index + 1} is not editable: {draft!r}")
        draft[key] = copy.deepcopy(value)

    def remove(self, index: int) -> None:
        del self.definitions[index]

    def discard(self) -> None:
        """Drop unsaved edits and return to the last persisted list."""
        self.definitions = copy.deepcopy(self._persisted)

    def explanations(self, locale: str = "en") -> list[str]:
        return explain_all(self.definitions, locale)

    async def save(self, conn: psycopg.AsyncConnection[Any]) -> FactSetReport:
        """Persist the draft. On any failure the persisted baseline is unchanged."""
        report = await save_fact_definitions(conn, self.agent_id, self.definitions)
        self._persisted = copy.deepcopy(self.definitions)
        logger.info("Fact definitions for agent %s are now the persisted baseline", self.agent_id)
        return report
