"""Helpers shared by the builtin command definitions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from automation_engine.commands.types import EntityRef
from automation_engine.context import Record

ROLES: tuple[str, ...] = ("researcher", "builder", "curator", "validator", "orchestrator")

EVERYONE: tuple[str, ...] = ("researcher", "builder", "curator", "orchestrator")


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def ref_id(value: Any) -> str:
    """Reference-typed arguments may arrive as an :class:`EntityRef` or a bare id."""

    if isinstance(value, EntityRef):
        return value.id
    return str(value)


def find_agent(agents: list[Record], ref: Any) -> Record | None:
    """Find an agent by id or by name."""

    key = ref_id(ref)
    for agent in agents:
        if agent.get("id") == key or agent.get("name") == key:
            return agent
    return None


def require_agent(agents: list[Record], ref: Any, *, label: str = "Agent") -> Record:
    agent = find_agent(agents, ref)
    if agent is None:
        raise LookupError(f"{label} '{ref_id(ref)}' not found")
    return agent


def find_channel_between(channels: list[Record], a: str, b: str) -> Record | None:
    for channel in channels:
        ends = (channel.get("from"), channel.get("to"))
        if ends == (a, b) or ends == (b, a):
            return channel
    return None
