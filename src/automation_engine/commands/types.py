from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from automation_engine.context import CommandContext


class ArgType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    AGENT = "agent"
    CHANNEL = "channel"
    GROUP = "group"
    NETWORK = "network"

    @property
    def is_reference(self) -> bool:
        return self in _REFERENCE_TYPES


_REFERENCE_TYPES = frozenset({ArgType.AGENT, ArgType.CHANNEL, ArgType.GROUP, ArgType.NETWORK})


class _Missing:
    """Sentinel for "no default declared" (``None`` is a legitimate default)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(frozen=True, slots=True)
class EntityRef:
    """A reference to a host-owned domain entity, by kind and id."""

    kind: ArgType
    id: str

    def __post_init__(self) -> None:
        if not self.kind.is_reference:
            raise ValueError(f"{self.kind.value} is not a reference type")

    def __str__(self) -> str:
        return self.id


ArgValue = str | int | float | bool | list[Any] | dict[str, Any] | EntityRef | None

Validator = Callable[[Any], bool | str]
CommandHandler = Callable[[dict[str, Any], CommandContext], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class CommandArg:
    """Declares one parameter of a command.

    ``required`` defaults to True. A declared ``default`` is filled in when the
    caller supplies nothing (or ``None``), which also satisfies ``required``.
    """

    name: str
    type: ArgType
    required: bool = True
    description: str = ""
    default: Any = MISSING
    validation: Validator | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "name": self.name,
            "type": self.type.value,
            "required": self.required,
            "description": self.description,
        }
        if self.has_default:
            out["default"] = self.default
        return out


@dataclass(frozen=True, slots=True)
class CommandDefinition:
    """A named, typed operation the host can invoke.

    ``rbac`` lists the roles allowed to run the command. It is metadata only:
    the registry never checks it. The host dispatch layer does.
    """

    id: str
    description: str
    execute: CommandHandler
    args: Mapping[str, CommandArg] = field(default_factory=dict)
    rbac: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    output: str = ""
    output_schema: Mapping[str, Any] | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "id": self.id,
            "description": self.description,
            "args": {name: arg.to_json() for name, arg in self.args.items()},
            "rbac": list(self.rbac),
            "tags": list(self.tags),
            "output": self.output,
        }
        if self.output_schema is not None:
            out["output_schema"] = dict(self.output_schema)
        return out


def arg(
    name: str,
    type: ArgType,
    description: str = "",
    *,
    required: bool = True,
    default: Any = MISSING,
    validation: Validator | None = None,
) -> tuple[str, CommandArg]:
    """Shorthand for building the ``args`` mapping: ``dict([arg(...), arg(...)])``."""

    return name, CommandArg(
        name=name,
        type=type,
        required=required,
        description=description,
        default=default,
        validation=validation,
    )
