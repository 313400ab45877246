"""Command and automation REST API.

All routes are mounted under `/api`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from automation_engine.automations.types import AutomationRun, AutomationSummary
from automation_engine.context import User
from automation_engine.errors import (
    ArgumentError,
    AutomationNotFound,
    CommandNotFound,
    PermissionDenied,
)
from automation_engine.host import Engine
from automation_engine.server.models import ApiCommand, ExecuteRequest, ExecuteResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "engine", None)
    if not isinstance(engine, Engine):
        raise HTTPException(status_code=500, detail="Engine not configured")
    return engine


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/commands", response_model=list[ApiCommand])
def list_commands(request: Request, tag: str | None = Query(default=None)) -> list[ApiCommand]:
    definitions = _engine(request).commands.get_all()
    if tag:
        definitions = [d for d in definitions if tag in d.tags]
    return [ApiCommand.model_validate(d.to_json()) for d in definitions]


@router.get("/commands/{command_id}", response_model=ApiCommand)
def get_command(request: Request, command_id: str) -> ApiCommand:
    definition = _engine(request).commands.get(command_id)
    if definition is None:
        raise HTTPException(status_code=404, detail=f"Command {command_id} not found")
    return ApiCommand.model_validate(definition.to_json())


@router.post("/commands/{command_id}/execute", response_model=ExecuteResponse)
async def execute_command(
    request: Request, command_id: str, body: ExecuteRequest
) -> ExecuteResponse:
    engine = _engine(request)
    user = None
    if body.role is not None:
        user = User(id=engine.settings.default_user, role=body.role)

    try:
        result = await engine.dispatcher.execute(command_id, body.args, user=user)
    except CommandNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    except ArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.warning("Command failed", extra={"command_id": command_id, "error": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ExecuteResponse(command_id=command_id, result=result)


@router.get("/automations", response_model=list[AutomationSummary])
def list_automations(request: Request) -> list[AutomationSummary]:
    return [AutomationSummary.of(d) for d in _engine(request).automations.registry.get_all()]


@router.post("/automations/{automation_id}/runs", response_model=AutomationRun, status_code=201)
async def run_automation(request: Request, automation_id: str) -> AutomationRun:
    try:
        return await _engine(request).automations.run_automation(automation_id)
    except AutomationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/runs", response_model=list[AutomationRun])
def list_runs(
    request: Request, automation_id: str | None = Query(default=None)
) -> list[AutomationRun]:
    return _engine(request).automations.history.list(automation_id)


@router.get("/runs/{run_id}", response_model=AutomationRun)
def get_run(request: Request, run_id: str) -> AutomationRun:
    run = _engine(request).automations.history.get(run_id)
    if run is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return run
