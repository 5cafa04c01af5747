"""CLI for reviewing and publishing agent fact definitions."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
import psycopg

from .config import Config
from .core_facts import CORE_FACTS
from .fact_explain import SUPPORTED_LOCALES, explain
from .fact_store import (
    AgentNotFoundError,
    FactDefinitionsRejected,
    load_fact_definitions,
    save_fact_definitions,
)
from .fact_validation import check_fact_definitions
from .logging import setup_logging


def _read_definitions(path: Path) -> list[Any]:
    """Load a JSON list of definitions, or an object with "fact_definitions"."""
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise click.BadParameter(f"not a readable JSON file: {exc}", param_hint="FILE") from exc
    if isinstance(data, dict):
        data = data.get("fact_definitions", [])
    if not isinstance(data, list):
        raise click.BadParameter(
            "expected a JSON list of fact definitions or an object with 'fact_definitions'",
            param_hint="FILE",
        )
    return data


def _echo_json(data: Any, err: bool = False) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False), err=err)


def _database_url(config: Config) -> str:
    try:
        return config.require_database_url()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.pass_context
def main(ctx: click.Context):
    """Agent fact definition tools."""
    try:
        config = Config.from_env()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        setup_logging(config.log_format, config.log_level)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = config


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(file: Path):
    """Validate a fact definition file (exit 1 when invalid)."""
    report = check_fact_definitions(_read_definitions(file))
    _echo_json(report.to_dict())
    if not report.valid:
        sys.exit(1)


@main.command("explain")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--locale", type=click.Choice(SUPPORTED_LOCALES), default=None,
              help="Output language (defaults to AGENT_FACTS_LOCALE).")
@click.pass_obj
def explain_cmd(config: Config, file: Path, locale: str | None):
    """Print one explanation line per fact definition."""
    for definition in _read_definitions(file):
        name = definition.get("name") if isinstance(definition, dict) else None
        click.echo(f"{name or 'unnamed'}: {explain(definition, locale or config.locale)}")


@main.command("core-facts")
def core_facts():
    """List the built-in facts available to every agent."""
    _echo_json({name: fact.model_dump() for name, fact in CORE_FACTS.items()})


async def _show(database_url: str, agent_id: str) -> list[dict[str, Any]]:
    async with await psycopg.AsyncConnection.connect(database_url) as conn:
        return await load_fact_definitions(conn, agent_id)


async def _save(database_url: str, agent_id: str, definitions: list[Any]) -> None:
    async with await psycopg.AsyncConnection.connect(database_url) as conn:
        await save_fact_definitions(conn, agent_id, definitions)


@main.command()
@click.option("--agent-id", required=True, help="Agent whose fact definitions to print.")
@click.pass_obj
def show(config: Config, agent_id: str):
    """Print an agent's persisted fact definitions."""
    try:
        definitions = asyncio.run(_show(_database_url(config), agent_id))
    except AgentNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(definitions)


@main.command()
@click.option("--agent-id", required=True, help="Agent whose fact definitions to replace.")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def save(config: Config, agent_id: str, file: Path):
    """Validate FILE and replace the agent's fact definitions with it."""
    definitions = _read_definitions(file)
    report = check_fact_definitions(definitions)
    if report.valid:
        try:
            asyncio.run(_save(_database_url(config), agent_id, definitions))
        except FactDefinitionsRejected as exc:
            report = exc.report
        except AgentNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc
    if not report.valid:
        click.echo("Fact definitions rejected, nothing saved:", err=True)
        _echo_json(report.to_dict(), err=True)
        sys.exit(1)
    click.echo(f"Saved {len(definitions)} fact definitions for agent {agent_id}.")


if __name__ == "__main__":
    main()
