"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiCommandArg(BaseModel):
    name: str
    type: str
    required: bool
    description: str = ""
    default: Any = None


class ApiCommand(BaseModel):
    id: str
    description: str
    args: dict[str, ApiCommandArg] = Field(default_factory=dict)
    rbac: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    output: str = ""
    output_schema: dict[str, Any] | None = None


class ExecuteRequest(BaseModel):
    args: dict[str, Any] = Field(default_factory=dict)
    role: str | None = Field(
        default=None,
        description="Role to check against the command's rbac list; defaults to the host user's role.",
    )


class ExecuteResponse(BaseModel):
    command_id: str
    result: Any = None
