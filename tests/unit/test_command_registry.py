"""Unit tests for command registration, argument validation and dispatch."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

import pytest

from automation_engine.commands.registry import CommandRegistry, validate_args
from automation_engine.commands.types import ArgType, CommandDefinition, EntityRef, arg
from automation_engine.context import AuthCapability, CommandContext
from automation_engine.errors import (
    ArgumentError,
    CommandNotFound,
    MissingArgument,
    TypeMismatch,
    ValidationFailed,
)


def _typed_command(arg_type: ArgType, **kwargs: Any) -> CommandDefinition:
    async def execute(args: dict[str, Any], _context: CommandContext) -> Any:
        return args.get("x")

    return CommandDefinition(
        id=f"takes_{arg_type.value}",
        description="",
        args=dict([arg("x", arg_type, **kwargs)]),
        execute=execute,
    )


def test_execute_unknown_command_raises_not_found(
    commands: CommandRegistry, context: CommandContext
) -> None:
    with pytest.raises(CommandNotFound) as exc_info:
        asyncio.run(commands.execute("nope", {}, context))

    assert str(exc_info.value) == "Command nope not found"
    assert exc_info.value.command_id == "nope"


def test_missing_required_argument_rejects_and_supplying_it_succeeds(
    commands: CommandRegistry, context: CommandContext, calls: list
) -> None:
    with pytest.raises(MissingArgument) as exc_info:
        asyncio.run(commands.execute("greet", {}, context))
    assert str(exc_info.value) == "Missing required argument: name"
    assert exc_info.value.argument == "name"
    assert calls == []

    assert asyncio.run(commands.execute("greet", {"name": "Ada"}, context)) == "Hello, Ada"


def test_none_counts_as_missing(commands: CommandRegistry, context: CommandContext) -> None:
    with pytest.raises(MissingArgument):
        asyncio.run(commands.execute("greet", {"name": None}, context))


def test_default_is_observed_by_command_and_written_back(
    commands: CommandRegistry, context: CommandContext, calls: list
) -> None:
    args: dict[str, Any] = {"name": "Ada"}
    asyncio.run(commands.execute("greet", args, context))

    assert calls == [("greet", {"name": "Ada", "greeting": "Hello"})]
    # Resolved defaults are visible to the caller.
    assert args["greeting"] == "Hello"


def test_mutable_defaults_are_not_shared_between_calls(context: CommandContext) -> None:
    async def execute(args: dict[str, Any], _context: CommandContext) -> Any:
        args["items"].append(1)
        return list(args["items"])

    registry = CommandRegistry()
    registry.register(
        CommandDefinition(
            id="append",
            description="",
            args=dict([arg("items", ArgType.ARRAY, default=[])]),
            execute=execute,
        )
    )

    assert asyncio.run(registry.execute("append", {}, context)) == [1]
    assert asyncio.run(registry.execute("append", {}, context)) == [1]


@pytest.mark.parametrize(
    ("arg_type", "bad_value", "expected_message"),
    [
        (ArgType.STRING, 42, "Argument x must be a string"),
        (ArgType.NUMBER, "42", "Argument x must be a number"),
        (ArgType.NUMBER, True, "Argument x must be a number"),
        (ArgType.BOOLEAN, "true", "Argument x must be a boolean"),
        (ArgType.ARRAY, "a,b", "Argument x must be an array"),
    ],
)
def test_primitive_type_mismatch_rejects(
    context: CommandContext, arg_type: ArgType, bad_value: Any, expected_message: str
) -> None:
    registry = CommandRegistry()
    registry.register(_typed_command(arg_type))

    with pytest.raises(TypeMismatch) as exc_info:
        asyncio.run(registry.execute(f"takes_{arg_type.value}", {"x": bad_value}, context))

    assert str(exc_info.value) == expected_message


@pytest.mark.parametrize(
    ("arg_type", "value"),
    [
        (ArgType.OBJECT, "not really an object"),
        (ArgType.AGENT, 123),
        (ArgType.CHANNEL, EntityRef(ArgType.CHANNEL, "c1")),
        (ArgType.GROUP, ["g1"]),
        (ArgType.NETWORK, "n1"),
    ],
)
def test_object_and_reference_types_are_not_checked(
    context: CommandContext, arg_type: ArgType, value: Any
) -> None:
    registry = CommandRegistry()
    registry.register(_typed_command(arg_type))

    assert asyncio.run(registry.execute(f"takes_{arg_type.value}", {"x": value}, context)) == value


def test_validator_string_becomes_failure_reason(context: CommandContext) -> None:
    registry = CommandRegistry()
    registry.register(
        _typed_command(ArgType.STRING, validation=lambda v: v.startswith("sk-") or "bad prefix")
    )

    with pytest.raises(ValidationFailed) as exc_info:
        asyncio.run(registry.execute("takes_string", {"x": "nope"}, context))
    assert str(exc_info.value) == "Argument x invalid: bad prefix"
    assert asyncio.run(registry.execute("takes_string", {"x": "sk-1"}, context)) == "sk-1"


def test_validator_false_uses_generic_reason() -> None:
    definition = _typed_command(ArgType.NUMBER, validation=lambda v: v > 0)

    with pytest.raises(ValidationFailed, match="Validation failed"):
        validate_args(definition, {"x": -1})


def test_validator_runs_on_defaulted_value() -> None:
    definition = _typed_command(
        ArgType.STRING, required=False, default="", validation=lambda v: bool(v) or "empty"
    )

    with pytest.raises(ValidationFailed, match="empty"):
        validate_args(definition, {})


def test_optional_argument_without_default_is_left_untouched() -> None:
    seen: list[Any] = []

    def validation(value: Any) -> bool:
        seen.append(value)
        return True

    definition = _typed_command(ArgType.STRING, required=False, validation=validation)
    args: dict[str, Any] = {}

    assert validate_args(definition, args) is args
    assert "x" not in args
    assert seen == []


def test_undeclared_arguments_pass_through(
    commands: CommandRegistry, context: CommandContext, calls: list
) -> None:
    asyncio.run(commands.execute("greet", {"name": "Ada", "extra": {"k": 1}}, context))

    assert calls[0][1]["extra"] == {"k": 1}


def test_argument_errors_share_a_base_class() -> None:
    for error in (MissingArgument("a"), TypeMismatch("a", "number"), ValidationFailed("a", "r")):
        assert isinstance(error, ArgumentError)
        assert isinstance(error, ValueError)


def test_command_errors_propagate_unchanged(
    commands: CommandRegistry, context: CommandContext
) -> None:
    with pytest.raises(RuntimeError, match="kaput"):
        asyncio.run(commands.execute("fail", {"message": "kaput"}, context))


def test_reregistering_replaces_without_raising(
    commands: CommandRegistry, context: CommandContext, caplog: pytest.LogCaptureFixture
) -> None:
    async def execute(_args: dict[str, Any], _context: CommandContext) -> str:
        return "v2"

    replacement = CommandDefinition(id="echo", description="second", execute=execute)
    with caplog.at_level(logging.WARNING, logger="automation_engine.commands.registry"):
        commands.register(replacement)

    assert commands.get("echo") is replacement
    assert len([d for d in commands.get_all() if d.id == "echo"]) == 1
    assert asyncio.run(commands.execute("echo", {}, context)) == "v2"
    assert any("overwriting" in r.getMessage() for r in caplog.records)


def test_registry_does_not_enforce_rbac(
    commands: CommandRegistry, context: CommandContext
) -> None:
    # greet is restricted to orchestrators; the registry runs it for anyone.
    assert commands.get("greet").rbac == ("orchestrator",)
    guest_context = dataclasses.replace(context, auth=AuthCapability(user=None))

    assert asyncio.run(commands.execute("greet", {"name": "Eve"}, guest_context)) == "Hello, Eve"


def test_unregister_and_membership(commands: CommandRegistry) -> None:
    assert "echo" in commands
    assert len(commands) == 3

    commands.unregister("echo")
    commands.unregister("echo")

    assert "echo" not in commands
    assert commands.get("echo") is None
    assert len(commands) == 2


def test_definition_to_json_omits_callables() -> None:
    definition = _typed_command(ArgType.NUMBER, required=False, default=5)

    payload = definition.to_json()

    assert payload["args"] == {
        "x": {"name": "x", "type": "number", "required": False, "description": "", "default": 5}
    }
    assert "execute" not in payload


def test_entity_ref_requires_reference_type() -> None:
    assert str(EntityRef(ArgType.AGENT, "a1")) == "a1"
    with pytest.raises(ValueError):
        EntityRef(ArgType.STRING, "a1")
