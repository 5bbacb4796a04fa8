"""Login and logout endpoints backed by the workflow controller."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from ..models import schemas
from ..services.workflow import WorkflowController

router = APIRouter(prefix="/session", tags=["session"])


def get_workflow(request: Request) -> WorkflowController:
    return request.app.state.workflow


@router.post("/login", response_model=schemas.SessionStateResponse)
async def login(payload: schemas.LoginRequest, request: Request) -> schemas.SessionStateResponse:
    """Authenticate with the backend and switch the workflow to the design view."""

    workflow = get_workflow(request)
    if workflow.state.login_status.in_flight:
        raise HTTPException(status_code=409, detail="Login already in progress")
    if workflow.is_logged_in:
        raise HTTPException(status_code=409, detail="Already logged in; log out first")
    session = await workflow.login(payload.username, payload.password)
    if session is None:
        raise HTTPException(status_code=401, detail=workflow.error)
    return workflow.snapshot()


@router.post("/logout", response_model=schemas.SessionStateResponse)
async def logout(request: Request) -> schemas.SessionStateResponse:
    workflow = get_workflow(request)
    workflow.logout()
    return workflow.snapshot()


@router.get("/state", response_model=schemas.SessionStateResponse)
async def get_state(request: Request) -> schemas.SessionStateResponse:
    """Return the current view, request statuses and input gating flags."""

    return get_workflow(request).snapshot()
