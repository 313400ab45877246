"""Command definitions, argument validation and the command registry."""

from automation_engine.commands.registry import CommandRegistry, validate_args
from automation_engine.commands.types import (
    MISSING,
    ArgType,
    CommandArg,
    CommandDefinition,
    EntityRef,
    arg,
)

__all__ = [
    "MISSING",
    "ArgType",
    "CommandArg",
    "CommandDefinition",
    "CommandRegistry",
    "EntityRef",
    "arg",
    "validate_args",
]
