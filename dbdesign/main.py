"""FastAPI application entrypoint for the design workflow client."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from .config import settings
from .routers import design, session
from .services.backend_client import DesignBackendClient
from .services.workflow import WorkflowController

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def create_app(client: Optional[DesignBackendClient] = None) -> FastAPI:
    """Instantiate the application with a single workflow controller."""

    application = FastAPI(
        title="Database Design Workflow",
        description=(
            "Local session that logs in to the design backend, requests generated "
            "database designs and serves the resulting Mermaid ER diagram."
        ),
        version="0.1.0",
    )
    application.state.workflow = WorkflowController(client)
    application.include_router(session.router)
    application.include_router(design.router)

    @application.get("/")
    async def root() -> dict[str, str]:
        """Lightweight health endpoint for service discovery."""
        return {"service": "dbdesign-workflow", "status": "ok"}

    logger.info("Design backend configured at %s", settings.api_base_url)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
