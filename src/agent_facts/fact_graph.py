"""Dependency graph over composite facts.

Each composite fact points at the facts named in its conditions. Only
composite facts have outgoing edges; other facts can only be targets.
"""

from collections import deque
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def build_dependency_graph(definitions: list[Any]) -> dict[str, tuple[str, ...]]:
    """Return {composite name: referenced fact names}, in definition order.

    References keep their first-seen order and are deduplicated. A later
    composite with a repeated name replaces the earlier one's edges.
    """
    graph: dict[str, tuple[str, ...]] = {}
    for definition in definitions:
        if isinstance(definition, BaseModel):
            definition = definition.model_dump()
        if not isinstance(definition, Mapping) or definition.get("type") != "composite":
            continue
        name = definition.get("name")
        conditions = definition.get("conditions")
        if not isinstance(name, str) or not isinstance(conditions, list):
            continue
        refs = [
            c.get("fact")
            for c in conditions
            if isinstance(c, Mapping) and isinstance(c.get("fact"), str) and c.get("fact")
        ]
        graph[name] = tuple(dict.fromkeys(refs))
    return graph


def find_cycles(definitions: list[Any]) -> list[str]:
    """Detect circular dependencies between composite facts.

    Depth-first search from every unvisited node. An edge into a node on
    the current path closes a cycle: the edge is reported and the rest of
    that traversal is abandoned. Fully explored nodes are never revisited,
    so a dense graph may report fewer messages than it has cycles.

    Uses an explicit stack; reports the same edges, in the same order, as
    the recursive pre-order formulation.
    """
    graph = build_dependency_graph(definitions)
    errors: list[str] = []
    visited: set[str] = set()

    for root in graph:
        if root in visited:
            continue

        visited.add(root)
        on_path = {root}
        stack = [(root, iter(graph.get(root, ())))]

        while stack:
            node, neighbors = stack[-1]
            for neighbor in neighbors:
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_path.add(neighbor)
                    stack.append((neighbor, iter(graph.get(neighbor, ()))))
                    break
                if neighbor in on_path:
                    errors.append(f"Circular dependency detected: {node} → {neighbor}")
                    stack.clear()
                    break
            else:
                on_path.discard(node)
                stack.pop()

    return errors


def dependency_order(definitions: list[Any]) -> list[str]:
    """Order fact names so every composite comes after the facts it uses.

    Kahn's algorithm over the dependency graph; ties keep definition order.
    Referenced names that are not defined in the set (core facts, typos)
    are included where first needed. Raises ValueError on a cycle.
    """
    graph = build_dependency_graph(definitions)

    nodes: dict[str, None] = {}
    for definition in definitions:
        if isinstance(definition, BaseModel):
            definition = definition.model_dump()
        if isinstance(definition, Mapping) and isinstance(definition.get("name"), str):
            nodes.setdefault(definition["name"], None)
    for deps in graph.values():
        for dep in deps:
            nodes.setdefault(dep, None)

    pending = {name: len(graph.get(name, ())) for name in nodes}
    dependents: dict[str, list[str]] = {name: [] for name in nodes}
    for name, deps in graph.items():
        for dep in deps:
            dependents[dep].append(name)

    queue = deque(name for name in nodes if pending[name] == 0)
    order: list[str] = []
    while queue:
        name = queue.popleft()
        order.append(name)
        for dependent in dependents[name]:
            pending[dependent] -= 1
            if pending[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(nodes):
        stuck = [name for name in nodes if pending[name] > 0]
        raise ValueError(f"Fact definitions contain a dependency cycle: {', '.join(stuck)}")
    return order
