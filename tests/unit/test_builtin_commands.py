"""Builtin commands that manage and export agents, channels, groups and messages."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from automation_engine.commands.definitions import BUILTIN_COMMANDS
from automation_engine.errors import MissingArgument, ValidationFailed
from automation_engine.host import Engine
from automation_engine.host.memory import InMemoryWorkspace


def _exec(engine: Engine, command_id: str, args: dict[str, Any] | None = None) -> Any:
    return asyncio.run(engine.commands.execute(command_id, dict(args or {}), engine.context))


def test_builtin_ids_are_unique_and_registered(engine: Engine) -> None:
    ids = [d.id for d in BUILTIN_COMMANDS]

    assert len(ids) == len(set(ids))
    assert all(command_id in engine.commands for command_id in ids)
    # Every builtin declares who may run it.
    assert all(d.rbac for d in BUILTIN_COMMANDS)


def test_create_agent(engine: Engine, workspace: InMemoryWorkspace) -> None:
    engine.ecosystem.active_network_id = "net-1"

    result = _exec(engine, "create_agent", {"name": "Alice", "role": "researcher"})

    agent = workspace.agents[0]
    assert result == {"agentId": agent["id"], "did": agent["did"]}
    assert agent["did"].startswith("did:key:z")
    assert agent["prompt"] == ""
    assert agent["status"] == "active"
    assert agent["networkId"] == "net-1"
    assert set(agent["keys"]) == {"publicKey", "privateKey"}
    assert workspace.log[-1] == "Created agent: Alice (researcher)"


@pytest.mark.parametrize(
    ("args", "message"),
    [
        ({"name": "Al", "role": "builder"}, "Argument name invalid: Name must be at least 3 characters"),
        ({"name": "Alice", "role": "pilot"}, "Argument role invalid: Invalid role"),
    ],
)
def test_create_agent_rejects_invalid_args(
    engine: Engine, workspace: InMemoryWorkspace, args: dict[str, Any], message: str
) -> None:
    with pytest.raises(ValidationFailed) as exc:
        _exec(engine, "create_agent", args)

    assert str(exc.value) == message
    assert workspace.agents == []


def test_ping_agent(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    assert _exec(engine, "ping_agent", {"agentId": "Bob"}) == {"agentId": "a2", "status": "online"}

    seeded_workspace.set_agents([{**seeded_workspace.agents[0], "status": "offline"}])
    with pytest.raises(RuntimeError, match="Agent 'Alice' is not responding"):
        _exec(engine, "ping_agent", {"agentId": "a1"})
    with pytest.raises(LookupError, match="Agent 'ghost' not found"):
        _exec(engine, "ping_agent", {"agentId": "ghost"})


def test_update_and_delete_agent(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    _exec(engine, "create_channel", {"from": "a1", "to": "a2"})

    _exec(engine, "update_agent_prompt", {"id": "Alice", "prompt": "Read papers"})
    assert seeded_workspace.agents[0]["prompt"] == "Read papers"

    assert _exec(engine, "delete_agent", {"id": "a1"}) == {"success": True}
    assert [a["id"] for a in seeded_workspace.agents] == ["a2", "a3"]
    assert seeded_workspace.channels == []


def test_create_channel(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    result = _exec(engine, "create_channel", {"from": "Alice", "to": "a2"})

    channel = seeded_workspace.channels[0]
    assert result == {"status": "created", "channelId": channel["id"]}
    assert (channel["from"], channel["to"], channel["type"]) == ("a1", "a2", "data")
    assert "networkId" not in channel

    # Either direction counts as the same channel.
    again = _exec(engine, "create_channel", {"from": "Bob", "to": "Alice"})
    assert again == {"status": "exists", "message": "Channel already exists"}
    assert len(seeded_workspace.channels) == 1


def test_create_channel_network_falls_back_to_sender(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    seeded_workspace.set_agents(
        [{**seeded_workspace.agents[0], "networkId": "net-a"}, *seeded_workspace.agents[1:]]
    )

    _exec(engine, "create_channel", {"from": "a1", "to": "a2"})
    _exec(engine, "create_channel", {"from": "a2", "to": "a3", "networkId": "net-b"})

    assert [c.get("networkId") for c in seeded_workspace.channels] == ["net-a", "net-b"]


def test_create_channel_errors(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    with pytest.raises(ValueError, match="Cannot create channel to self"):
        _exec(engine, "create_channel", {"from": "a1", "to": "Alice"})
    with pytest.raises(LookupError, match="Agent 'Zed' not found"):
        _exec(engine, "create_channel", {"from": "a1", "to": "Zed"})


def test_edit_channel(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    channel_id = _exec(engine, "create_channel", {"from": "a1", "to": "a2"})["channelId"]

    _exec(engine, "edit_channels", {"id": channel_id, "type": "task"})
    assert seeded_workspace.channels[0]["type"] == "task"

    with pytest.raises(ValidationFailed):
        _exec(engine, "edit_channels", {"id": channel_id, "type": "voice"})
    with pytest.raises(LookupError):
        _exec(engine, "edit_channels", {"id": "nope", "type": "data"})


def test_create_group_adds_missing_consensus_channels(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    _exec(engine, "create_channel", {"from": "a1", "to": "a2"})

    result = _exec(
        engine,
        "create_group",
        {"name": "Core", "members": ["Alice", "a2", "Carol", "a1"], "governance": "threshold"},
    )

    group = seeded_workspace.groups[0]
    assert result == {"status": "created", "groupId": group["id"], "channelCount": 2}
    assert group["members"] == ["a1", "a2", "a3"]
    assert group["threshold"] == 2
    assert group["did"].startswith("did:group:z")
    assert [c["type"] for c in seeded_workspace.channels] == ["data", "consensus", "consensus"]


def test_create_group_validation(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    with pytest.raises(ValueError, match="Group must have at least 2 members"):
        _exec(engine, "create_group", {"name": "Solo", "members": ["a1", "Alice"], "governance": "majority"})
    with pytest.raises(ValidationFailed):
        _exec(engine, "create_group", {"name": "Bad", "members": ["a1", "a2"], "governance": "anarchy"})
    with pytest.raises(MissingArgument):
        _exec(engine, "create_group", {"name": "Bad", "members": ["a1", "a2"]})


def test_toggle_group_member_and_delete_group(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    group_id = _exec(
        engine, "create_group", {"name": "Core", "members": ["a1", "a2", "a3"], "governance": "majority"}
    )["groupId"]

    removed = _exec(engine, "toggle_group_member", {"groupId": group_id, "agentId": "Carol"})
    assert removed == {"success": True, "action": "removed", "members": ["a1", "a2"]}
    assert seeded_workspace.groups[0]["threshold"] == 1

    added = _exec(engine, "toggle_group_member", {"groupId": group_id, "agentId": "a3"})
    assert added["action"] == "added"

    _exec(engine, "delete_group", {"id": group_id})
    assert seeded_workspace.groups == []
    assert seeded_workspace.log[-1] == f"Group {group_id} dissolved"


def test_send_message_requires_a_channel(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    args = {"from_agent_name": "Alice", "to_agent_name": "Bob", "message": "hi"}
    with pytest.raises(LookupError, match="No channel exists between Alice and Bob"):
        _exec(engine, "send_message", args)

    channel_id = _exec(engine, "create_channel", {"from": "a1", "to": "a2"})["channelId"]
    result = _exec(engine, "send_message", args)

    message = seeded_workspace.messages[0]
    assert result == {"status": "sent", "messageId": message["id"]}
    assert (message["channelId"], message["fromId"], message["toId"]) == (channel_id, "a1", "a2")
    assert message["status"] == "sent"


def test_broadcast_message(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    group_id = _exec(
        engine, "create_group", {"name": "Core", "members": ["a1", "a2", "a3"], "governance": "majority"}
    )["groupId"]

    result = _exec(engine, "broadcast_message", {"group_id": group_id, "message": "sync"})

    assert result == {"success": True, "count": 2}
    assert {m["toId"] for m in seeded_workspace.messages} == {"a2", "a3"}
    assert all(m["content"] == "[GROUP BROADCAST - Core] sync" for m in seeded_workspace.messages)

    with pytest.raises(LookupError, match="Group not found"):
        _exec(engine, "broadcast_message", {"group_id": "nope", "message": "sync"})


def test_list_queries(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    seeded_workspace.set_messages([{"id": f"m{i}"} for i in range(5)])

    assert len(_exec(engine, "list_agents")["agents"]) == 3
    assert _exec(engine, "list_channels") == {"channels": []}
    assert _exec(engine, "list_groups") == {"groups": []}
    assert [m["id"] for m in _exec(engine, "list_messages", {"limit": 2})["messages"]] == ["m3", "m4"]
    assert len(_exec(engine, "list_messages")["messages"]) == 5


def test_bulk_delete_agents_cascades(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    _exec(engine, "create_group", {"name": "Core", "members": ["a1", "a2", "a3"], "governance": "majority"})
    _exec(engine, "send_message", {"from_agent_name": "Alice", "to_agent_name": "Bob", "message": "x"})

    result = _exec(engine, "bulk_delete", {"type": "agents", "ids": ["a1"]})

    assert result == "Deleted 1 agents"
    assert [a["id"] for a in seeded_workspace.agents] == ["a2", "a3"]
    assert len(seeded_workspace.channels) == 1
    assert seeded_workspace.groups[0]["members"] == ["a2", "a3"]
    assert seeded_workspace.messages == []

    with pytest.raises(ValidationFailed, match="Unknown type: bridges"):
        _exec(engine, "bulk_delete", {"type": "bridges", "ids": []})


def test_reset_workspace_clears_entities_and_job_queue(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    _exec(engine, "create_channel", {"from": "a1", "to": "a2"})
    _exec(engine, "queue_new_job", {"type": "list_agents"})

    assert _exec(engine, "reset_workspace") == "Workspace reset"
    assert (seeded_workspace.agents, seeded_workspace.channels) == ([], [])
    assert engine.jobs.queue == []


def test_export_workspace_and_full_backup(
    engine: Engine, seeded_workspace: InMemoryWorkspace
) -> None:
    engine.ecosystem.set_bridges([{"id": "b1", "fromNetworkId": "n1", "toNetworkId": "n2"}])

    workspace_export = _exec(engine, "export_workspace")
    assert workspace_export["version"] == "1.0"
    assert workspace_export["type"] == "workspace"
    assert "exportedAt" in workspace_export
    assert [a["id"] for a in workspace_export["data"]["agents"]] == ["a1", "a2", "a3"]
    assert set(workspace_export["data"]) == {"agents", "channels", "groups", "messages"}

    backup = _exec(engine, "export_full_backup")
    assert backup["type"] == "full-backup"
    assert backup["data"]["workspace"]["agents"] == seeded_workspace.agents
    assert backup["data"]["ecosystem"] == {"ecosystems": [], "bridges": engine.ecosystem.bridges}

    ecosystem_export = _exec(engine, "export_ecosystem")
    assert ecosystem_export["type"] == "ecosystem"
    assert ecosystem_export["data"]["bridges"][0]["id"] == "b1"


def test_export_data_by_type_and_id(engine: Engine, seeded_workspace: InMemoryWorkspace) -> None:
    engine.ecosystem.set_bridges([{"id": "b1", "fromNetworkId": "n1", "toNetworkId": "n2"}])

    assert _exec(engine, "export_data", {"type": "agent", "id": "a2"})["name"] == "Bob"
    assert _exec(engine, "export_data", {"type": "bridge", "id": "b1"})["toNetworkId"] == "n2"

    with pytest.raises(LookupError, match="agent with ID ghost not found."):
        _exec(engine, "export_data", {"type": "agent", "id": "ghost"})
    with pytest.raises(ValueError, match="Unknown entity type: planet"):
        _exec(engine, "export_data", {"type": "planet", "id": "a1"})


def test_exports_are_restricted_by_role(engine: Engine) -> None:
    assert engine.commands.get("export_full_backup").rbac == ("orchestrator",)
    assert engine.commands.get("export_workspace").rbac == ("orchestrator", "curator")
    assert "researcher" in engine.commands.get("export_data").rbac
