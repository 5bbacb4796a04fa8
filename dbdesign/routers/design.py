"""Design generation endpoints and the diagram feed for the renderer."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..models import schemas
from .session import get_workflow

router = APIRouter(prefix="/design", tags=["design"])


@router.post("/generate", response_model=schemas.GenerateDesignResult)
async def generate_design(payload: schemas.SourceRequest, request: Request) -> schemas.GenerateDesignResult:
    """Request a design from the backend and return the rendered Mermaid diagram."""

    workflow = get_workflow(request)
    if not workflow.is_logged_in:
        raise HTTPException(status_code=401, detail="Not logged in")
    if workflow.state.generate_status.in_flight:
        raise HTTPException(status_code=409, detail="Design generation already in progress")

    diagram = await workflow.generate_design(payload)
    if diagram is None:
        raise HTTPException(status_code=502, detail=workflow.error)
    return schemas.GenerateDesignResult(diagram=diagram, state=workflow.snapshot())


@router.get("/diagram", response_class=PlainTextResponse)
async def get_diagram(request: Request) -> str:
    """Mermaid erDiagram text for the current result; hidden while a generation runs."""

    diagram = get_workflow(request).visible_diagram
    if diagram is None:
        raise HTTPException(status_code=404, detail="No diagram available")
    return diagram


@router.get("/result")
async def get_result(request: Request) -> Dict[str, Any]:
    result = get_workflow(request).state.design_result
    if result is None:
        raise HTTPException(status_code=404, detail="No design result available")
    return result.raw
