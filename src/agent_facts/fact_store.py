"""Persistence of fact definitions in an agent's orchestration config.

Agents live in the `agents` table; their orchestration config is a JSONB
document and the fact definitions are its "fact_definitions" list:

    agents(id TEXT PRIMARY KEY, orchestration JSONB, updated_at TIMESTAMPTZ)

A save replaces the whole list in one UPDATE. There is no per-rule write:
either the new list lands or the previously stored list stays in place.
"""

import logging
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Json
from pydantic import BaseModel

from .fact_models import dump_fact_definition
from .fact_validation import FactSetReport, check_fact_definitions

logger = logging.getLogger(__name__)


class FactStoreError(Exception):
    """Base class for fact definition persistence failures."""


class AgentNotFoundError(FactStoreError, LookupError):
    def __init__(self, agent_id: str):
        super().__init__(f"Agent not found: {agent_id!r}")
        self.agent_id = agent_id


class FactDefinitionsRejected(FactStoreError, ValueError):
    """The rule set failed validation and was not persisted."""

    def __init__(self, report: FactSetReport):
        super().__init__(
            f"Fact definitions rejected with {len(report.errors)} error(s): "
            + "; ".join(report.errors)
        )
        self.report = report


def _to_payload(definition: Any) -> Any:
    if isinstance(definition, BaseModel):
        return dump_fact_definition(definition)
    return definition


async def load_fact_definitions(
    conn: psycopg.AsyncConnection[Any],
    agent_id: str,
) -> list[dict[str, Any]]:
    """Return the persisted fact definitions for an agent ([] if none)."""
    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(
            """
            SELECT orchestration -> 'fact_definitions' AS fact_definitions
            FROM agents
            WHERE id = %s
            """,
            (agent_id,),
        )
        row = await cur.fetchone()

    if row is None:
        raise AgentNotFoundError(agent_id)

    definitions = row["fact_definitions"]
    if not isinstance(definitions, list):
        return []
    return definitions


async def save_fact_definitions(
    conn: psycopg.AsyncConnection[Any],
    agent_id: str,
    definitions: list[Any],
) -> FactSetReport:
    """Validate and persist an agent's complete fact definition list.

    Raises FactDefinitionsRejected without touching the database when the
    set has validation or circular-dependency errors.
    """
    report = check_fact_definitions(definitions)
    if not report.valid:
        logger.warning(
            "Rejected fact definitions for agent %s (%d errors)",
            agent_id, len(report.errors),
            extra={"facts_agent_id": agent_id, "facts_error_count": len(report.errors)},
        )
        raise FactDefinitionsRejected(report)

    payload = [_to_payload(d) for d in definitions]

    try:
        cur = await conn.execute(
            """
            UPDATE agents
            SET orchestration = jsonb_set(
                    COALESCE(NULLIF(orchestration, 'null'::jsonb), '{}'::jsonb),
                    '{fact_definitions}',
                    %s::jsonb,
                    true
                ),
                updated_at = NOW()
            WHERE id = %s
            """,
            (Json(payload), agent_id),
        )
        if cur.rowcount == 0:
            await conn.rollback()
            raise AgentNotFoundError(agent_id)
        await conn.commit()
    except psycopg.Error:
        logger.exception("Failed to save fact definitions for agent %s", agent_id)
        await conn.rollback()
        raise

    logger.info(
        "Saved %d fact definitions for agent %s",
        len(payload), agent_id,
        extra={"facts_agent_id": agent_id, "facts_definition_count": len(payload)},
    )
    return report
