"""Job workflow records shared with the external job queue.

The engine neither schedules nor executes these. Commands build them and hand
them to the host's ``jobs`` capability; the queue that consumes them is external.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

JobMode = Literal["serial", "parallel"]
JobStepStatus = Literal["pending", "running", "completed", "failed", "skipped"]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class JobStep(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    command_id: str
    args: dict[str, Any] = Field(default_factory=dict)
    status: JobStepStatus = "pending"
    condition: str | None = None


class JobDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    mode: JobMode = "serial"
    steps: list[JobStep] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
