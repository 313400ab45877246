"""Execution context handed to every command and automation.

The host owns all domain state. The engine only sees it through these capability
groups, one Protocol per collaborator. Domain records (agents, channels, groups,
messages, jobs, artifacts, networks, bridges) are plain dicts: their shape
belongs to the host, not to the engine.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from automation_engine.automations.types import AutomationRun

Record = dict[str, Any]


class WorkspaceCapability(Protocol):
    """Domain entities of the active workspace, their mutators and a log sink."""

    @property
    def agents(self) -> list[Record]: ...

    @property
    def channels(self) -> list[Record]: ...

    @property
    def groups(self) -> list[Record]: ...

    @property
    def messages(self) -> list[Record]: ...

    def set_agents(self, items: list[Record]) -> None: ...

    def set_channels(self, items: list[Record]) -> None: ...

    def set_groups(self, items: list[Record]) -> None: ...

    def set_messages(self, items: list[Record]) -> None: ...

    def remove_agent(self, agent_id: str) -> None: ...

    def remove_channel(self, channel_id: str) -> None: ...

    def remove_group(self, group_id: str) -> None: ...

    def add_log(self, message: str) -> None: ...


class JobsCapability(Protocol):
    """Job queue, job catalog and artifact operations of the external job system."""

    @property
    def all_artifacts(self) -> list[Record]: ...

    def add_job(self, job: Record) -> str: ...

    def remove_job(self, job_id: str) -> None: ...

    def pause_queue(self) -> None: ...

    def resume_queue(self) -> None: ...

    def get_queue(self) -> list[Record]: ...

    def clear_jobs(self) -> None: ...

    def get_catalog(self) -> list[Record]: ...

    def save_definition(self, definition: Record) -> None: ...

    def delete_definition(self, definition_id: str) -> None: ...

    def add_artifact(self, job_id: str, artifact: Record) -> None: ...

    def import_artifact(self, artifact: Record) -> None: ...

    def remove_artifact(self, artifact_id: str) -> None: ...


class EcosystemCapability(Protocol):
    """Saved networks and the bridges between them."""

    @property
    def ecosystems(self) -> list[Record]: ...

    @property
    def bridges(self) -> list[Record]: ...

    @property
    def active_network_id(self) -> str | None: ...

    def set_ecosystems(self, items: list[Record]) -> None: ...

    def set_bridges(self, items: list[Record]) -> None: ...


@dataclass(frozen=True, slots=True)
class User:
    id: str
    role: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class AuthCapability:
    """Caller identity. Authorization decisions are made by the host."""

    user: User | None


class SystemCapability(Protocol):
    def set_api_key(self, key: str) -> None: ...

    def set_model(self, model: str) -> None: ...


class ArchitectCapability(Protocol):
    """Generation hooks for building networks from a prompt."""

    async def generate_network(self, prompt: str) -> Any: ...

    async def deploy_network(self) -> Any: ...


class AutomationsCapability(Protocol):
    """Lets a running automation trigger another one."""

    @property
    def runs(self) -> Sequence[AutomationRun]: ...

    async def run_automation(self, automation_id: str) -> AutomationRun: ...


class WorkspaceManagerCapability(Protocol):
    """Multi-workspace lifecycle."""

    def list(self) -> list[Record]: ...

    async def create(self, name: str, description: str | None = None) -> str: ...

    async def switch(self, workspace_id: str) -> None: ...

    async def delete(self, workspace_id: str) -> None: ...

    async def duplicate(self, source_id: str, name: str | None = None) -> str: ...


@dataclass(frozen=True, slots=True)
class CommandContext:
    """The bundle of host-owned state passed into every execution.

    Keep this explicit. Commands must reach domain state only through it.
    """

    workspace: WorkspaceCapability
    jobs: JobsCapability
    ecosystem: EcosystemCapability
    auth: AuthCapability
    system: SystemCapability
    architect: ArchitectCapability
    automations: AutomationsCapability
    workspace_manager: WorkspaceManagerCapability | None = None
