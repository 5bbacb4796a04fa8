"""Async client for the authentication and design generation backends."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..models.schemas import GenerateDesignResponse, LoginRequest, LoginResponse, SourceRequest

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Login failed. Please check your credentials."
DESIGN_FAILED_MESSAGE = "Failed to generate database design."


class BackendError(RuntimeError):
    """Base class for failures reported by the backend collaborators."""

    message = "Backend request failed."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class AuthError(BackendError):
    """Any login failure: bad credentials, transport error or malformed reply."""

    message = LOGIN_FAILED_MESSAGE


class DesignError(BackendError):
    """Any design generation failure, collapsed the same way as ``AuthError``."""

    message = DESIGN_FAILED_MESSAGE


class DesignBackendClient:
    """Thin wrapper over the two backend endpoints the workflow consumes."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        raw_base = (base_url or settings.api_base_url or "").strip()
        if not raw_base:
            raise RuntimeError("API_BASE_URL missing; set the design backend URL")
        if not raw_base.startswith(("http://", "https://")):
            raise RuntimeError("API_BASE_URL must include http/https scheme")
        self._base_url = raw_base.rstrip("/")
        self._timeout = timeout or settings.api_timeout_seconds
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self, headers: Optional[dict[str, str]] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers=headers,
        )

    async def _post_json(self, path: str, payload: dict[str, Any], *, headers: Optional[dict[str, str]] = None) -> Any:
        async with self._client(headers) as client:
            resp = await client.post(path, json=payload)
            resp.raise_for_status()
            return resp.json()

    async def login(self, username: str, password: str) -> str:
        """Authenticate and return the opaque session token."""

        logger.info("Posting login request to %s/api/login", self._base_url)
        try:
            body = LoginRequest(username=username, password=password)
            data = await self._post_json("/api/login", body.model_dump())
            token = LoginResponse.model_validate(data).token
        except (httpx.HTTPError, ValueError) as exc:
            # ValidationError and JSON decode errors are both ValueErrors.
            logger.warning("Login request failed: %s", exc.__class__.__name__)
            raise AuthError() from exc
        logger.info("Login succeeded")
        return token

    async def generate_design(self, request: SourceRequest, token: str) -> dict[str, Any]:
        """Request a design for ``request`` and return the raw response body.

        The body is checked against ``GenerateDesignResponse`` so callers can
        rely on ``designRecommendations.tables`` being present.
        """

        payload = request.to_payload()
        logger.info(
            "Posting design request to %s/api/generate-design (sourceType=%s)",
            self._base_url,
            payload["sourceType"],
        )
        try:
            data = await self._post_json(
                "/api/generate-design",
                payload,
                headers={"Authorization": f"Bearer {token}"},
            )
            GenerateDesignResponse.model_validate(data)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Design request failed: %s", exc.__class__.__name__)
            raise DesignError() from exc
        logger.info("Design response payload keys: %s", list(data.keys()))
        return data
