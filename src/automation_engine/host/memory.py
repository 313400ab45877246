"""In-memory implementations of the execution-context capabilities.

This is the state a standalone host (the CLI, the REST adapter, tests) runs the
engine against. Nothing here is persisted.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from automation_engine.context import Record

logger = logging.getLogger(__name__)


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class InMemoryWorkspace:
    agents: list[Record] = field(default_factory=list)
    channels: list[Record] = field(default_factory=list)
    groups: list[Record] = field(default_factory=list)
    messages: list[Record] = field(default_factory=list)
    log: list[str] = field(default_factory=list)

    def set_agents(self, items: list[Record]) -> None:
        self.agents = list(items)

    def set_channels(self, items: list[Record]) -> None:
        self.channels = list(items)

    def set_groups(self, items: list[Record]) -> None:
        self.groups = list(items)

    def set_messages(self, items: list[Record]) -> None:
        self.messages = list(items)

    def remove_agent(self, agent_id: str) -> None:
        """Remove an agent along with its channels and group memberships."""

        self.agents = [a for a in self.agents if a["id"] != agent_id]
        self.channels = [
            c for c in self.channels if c.get("from") != agent_id and c.get("to") != agent_id
        ]
        self.groups = [
            {**g, "members": [m for m in g.get("members", []) if m != agent_id]}
            for g in self.groups
        ]
        self.add_log(f"Agent {agent_id} removed")

    def remove_channel(self, channel_id: str) -> None:
        self.channels = [c for c in self.channels if c["id"] != channel_id]
        self.messages = [m for m in self.messages if m.get("channelId") != channel_id]
        self.add_log(f"Channel {channel_id} removed")

    def remove_group(self, group_id: str) -> None:
        self.groups = [g for g in self.groups if g["id"] != group_id]
        self.add_log(f"Group {group_id} dissolved")

    def add_log(self, message: str) -> None:
        self.log.append(message)
        logger.info(message, extra={"source": "workspace"})

    def snapshot(self) -> dict[str, list[Record]]:
        return copy.deepcopy(
            {
                "agents": self.agents,
                "channels": self.channels,
                "groups": self.groups,
                "messages": self.messages,
            }
        )

    def restore(self, snapshot: dict[str, list[Record]]) -> None:
        data = copy.deepcopy(snapshot)
        self.agents = data.get("agents", [])
        self.channels = data.get("channels", [])
        self.groups = data.get("groups", [])
        self.messages = data.get("messages", [])


@dataclass
class InMemoryJobs:
    queue: list[Record] = field(default_factory=list)
    catalog: list[Record] = field(default_factory=list)
    artifacts: list[Record] = field(default_factory=list)
    paused: bool = False

    @property
    def all_artifacts(self) -> list[Record]:
        return list(self.artifacts)

    def add_job(self, job: Record) -> str:
        job_id = uuid.uuid4().hex
        self.queue.append({"id": job_id, "status": "queued", "createdAt": _utc_iso_now(), **job})
        logger.info("Job queued", extra={"job_id": job_id, "job_type": job.get("type")})
        return job_id

    def remove_job(self, job_id: str) -> None:
        self.queue = [j for j in self.queue if j["id"] != job_id]

    def pause_queue(self) -> None:
        self.paused = True

    def resume_queue(self) -> None:
        self.paused = False

    def get_queue(self) -> list[Record]:
        return list(self.queue)

    def clear_jobs(self) -> None:
        self.queue = []

    def get_catalog(self) -> list[Record]:
        return list(self.catalog)

    def save_definition(self, definition: Record) -> None:
        # Saving an existing id replaces it.
        self.catalog = [d for d in self.catalog if d["id"] != definition["id"]]
        self.catalog.append(definition)

    def delete_definition(self, definition_id: str) -> None:
        self.catalog = [d for d in self.catalog if d["id"] != definition_id]

    def add_artifact(self, job_id: str, artifact: Record) -> None:
        self.artifacts.append({**artifact, "jobId": job_id})

    def import_artifact(self, artifact: Record) -> None:
        self.artifacts.append(dict(artifact))

    def remove_artifact(self, artifact_id: str) -> None:
        self.artifacts = [a for a in self.artifacts if a.get("id") != artifact_id]


@dataclass
class InMemoryEcosystem:
    ecosystems: list[Record] = field(default_factory=list)
    bridges: list[Record] = field(default_factory=list)
    active_network_id: str | None = None

    def set_ecosystems(self, items: list[Record]) -> None:
        self.ecosystems = list(items)

    def set_bridges(self, items: list[Record]) -> None:
        self.bridges = list(items)


@dataclass
class InMemorySystem:
    api_key: str | None = None
    model: str | None = None

    def set_api_key(self, key: str) -> None:
        self.api_key = key

    def set_model(self, model: str) -> None:
        self.model = model


@dataclass
class InMemoryArchitect:
    """Holds one pending network design between generation and deployment.

    Generation only records the prompt; a host wiring a real model replaces this
    capability.
    """

    workspace: InMemoryWorkspace
    pending: Record | None = None

    async def generate_network(self, prompt: str) -> Record:
        self.pending = {"id": uuid.uuid4().hex, "prompt": prompt, "agents": [], "channels": []}
        return self.pending

    async def deploy_network(self) -> Record:
        if self.pending is None:
            raise RuntimeError("No generated network to deploy")
        design, self.pending = self.pending, None
        self.workspace.set_agents([*self.workspace.agents, *design["agents"]])
        self.workspace.set_channels([*self.workspace.channels, *design["channels"]])
        return {"networkId": design["id"], "agents": len(design["agents"])}


@dataclass
class InMemoryWorkspaceManager:
    """Named workspaces; switching swaps the live workspace contents."""

    workspace: InMemoryWorkspace
    workspaces: dict[str, Record] = field(default_factory=dict)
    active_id: str = ""

    def __post_init__(self) -> None:
        if not self.workspaces:
            self.active_id = uuid.uuid4().hex
            self.workspaces[self.active_id] = {
                "id": self.active_id,
                "name": "Default",
                "description": None,
                "createdAt": _utc_iso_now(),
                "snapshot": {},
            }

    def list(self) -> list[Record]:
        return [
            {
                "id": w["id"],
                "name": w["name"],
                "description": w["description"],
                "createdAt": w["createdAt"],
                "active": w["id"] == self.active_id,
            }
            for w in self.workspaces.values()
        ]

    def _require(self, workspace_id: str) -> Record:
        entry = self.workspaces.get(workspace_id)
        if entry is None:
            raise LookupError(f"Workspace '{workspace_id}' not found")
        return entry

    async def create(self, name: str, description: str | None = None) -> str:
        workspace_id = uuid.uuid4().hex
        self.workspaces[workspace_id] = {
            "id": workspace_id,
            "name": name,
            "description": description,
            "createdAt": _utc_iso_now(),
            "snapshot": {},
        }
        return workspace_id

    async def switch(self, workspace_id: str) -> None:
        target = self._require(workspace_id)
        if workspace_id == self.active_id:
            return
        self.workspaces[self.active_id]["snapshot"] = self.workspace.snapshot()
        self.workspace.restore(target["snapshot"])
        self.active_id = workspace_id

    async def delete(self, workspace_id: str) -> None:
        self._require(workspace_id)
        if workspace_id == self.active_id:
            raise ValueError("Cannot delete the active workspace")
        del self.workspaces[workspace_id]

    async def duplicate(self, source_id: str, name: str | None = None) -> str:
        source = self._require(source_id)
        snapshot = (
            self.workspace.snapshot()
            if source_id == self.active_id
            else copy.deepcopy(source["snapshot"])
        )
        workspace_id = await self.create(name or f"{source['name']} (copy)", source["description"])
        self.workspaces[workspace_id]["snapshot"] = snapshot
        return workspace_id

