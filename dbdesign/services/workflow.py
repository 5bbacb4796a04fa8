"""Workflow controller for the login → generate → display → logout cycle."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from ..models.schemas import GenerateDesignResponse, SessionStateResponse, SourceRequest
from .backend_client import AuthError, DesignBackendClient, DesignError
from .diagram import render_er_diagram

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "Please log in before generating a design."


class View(Enum):
    """Top-level screens of the workflow."""
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


class RequestState(Enum):
    """Lifecycle of one asynchronous backend operation."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestStatus:
    state: RequestState = RequestState.IDLE
    message: Optional[str] = None

    @classmethod
    def failed(cls, message: str) -> "RequestStatus":
        return cls(RequestState.FAILED, message)

    @property
    def in_flight(self) -> bool:
        return self.state is RequestState.IN_FLIGHT


IDLE = RequestStatus()
IN_FLIGHT = RequestStatus(RequestState.IN_FLIGHT)
SUCCEEDED = RequestStatus(RequestState.SUCCEEDED)


@dataclass
class Session:
    """Client-held proof of authentication."""
    token: str
    authenticated: bool = True


@dataclass
class FormInputs:
    """Values currently typed into the login and design forms."""
    username: str = ""
    password: str = ""
    source_type: str = ""
    connection_string: str = ""


@dataclass
class DesignResult:
    """Raw backend response together with the diagram rendered from it."""
    raw: dict[str, Any]
    diagram: str

    def as_json(self) -> str:
        return json.dumps(self.raw, indent=2)


@dataclass
class WorkflowState:
    """Every piece of mutable workflow state, kept in one place."""
    view: View = View.LOGGED_OUT
    session: Optional[Session] = None
    login_status: RequestStatus = IDLE
    generate_status: RequestStatus = IDLE
    design_result: Optional[DesignResult] = None
    inputs: FormInputs = field(default_factory=FormInputs)
    error: Optional[str] = None


class WorkflowController:
    """Owns session, request statuses and the current design result.

    Failures never propagate out of ``login`` or ``generate_design``; they are
    recorded on the relevant ``RequestStatus`` and surfaced through ``error``.
    A login or generation submitted while one of the same kind is already in
    flight is rejected. Responses that resolve after a logout are discarded.
    """

    def __init__(self, client: Optional[DesignBackendClient] = None) -> None:
        self._client = client
        self.state = WorkflowState()
        # Advanced on logout so late responses can tell they are stale.
        self._epoch = 0

    def _backend(self) -> DesignBackendClient:
        if self._client is None:
            try:
                self._client = DesignBackendClient()
            except Exception as e:
                logger.error("Failed to initialize design backend client: %s", e)
                raise
        return self._client

    @property
    def view(self) -> View:
        return self.state.view

    @property
    def session(self) -> Optional[Session]:
        return self.state.session

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def is_logged_in(self) -> bool:
        return self.state.view is View.LOGGED_IN

    @property
    def diagram(self) -> Optional[str]:
        result = self.state.design_result
        return result.diagram if result else None

    @property
    def visible_diagram(self) -> Optional[str]:
        """Diagram to present; hidden while a new generation is running."""
        if self.state.generate_status.in_flight:
            return None
        return self.diagram

    @property
    def login_inputs_enabled(self) -> bool:
        return not self.state.login_status.in_flight

    @property
    def design_inputs_enabled(self) -> bool:
        return not self.state.generate_status.in_flight

    @property
    def show_spinner(self) -> bool:
        return self.state.login_status.in_flight or self.state.generate_status.in_flight

    async def login(self, username: Optional[str] = None, password: Optional[str] = None) -> Optional[Session]:
        """Authenticate against the backend and switch to the design view.

        Only allowed from the logged-out view. Missing arguments fall back to
        the current form inputs.
        """

        state = self.state
        if state.login_status.in_flight:
            logger.warning("Login already in flight; ignoring resubmission")
            return None
        if state.view is View.LOGGED_IN:
            logger.warning("Login requested while already logged in; log out first")
            return None

        if username is not None:
            state.inputs.username = username
        if password is not None:
            state.inputs.password = password

        state.error = None
        try:
            backend = self._backend()
        except RuntimeError:
            self._login_failed(AuthError.message)
            return None

        epoch = self._epoch
        state.login_status = IN_FLIGHT
        try:
            token = await backend.login(state.inputs.username, state.inputs.password)
        except AuthError as exc:
            if epoch != self._epoch:
                logger.info("Discarding login failure that resolved after logout")
                return None
            self._login_failed(exc.message)
            return None
        except Exception:
            logger.exception("Login request raised unexpectedly")
            if epoch == self._epoch:
                self._login_failed(AuthError.message)
            return None

        if epoch != self._epoch:
            logger.info("Discarding login response that resolved after logout")
            return None

        session = Session(token=token)
        state.session = session
        state.view = View.LOGGED_IN
        state.login_status = SUCCEEDED
        logger.info("Session established; switched to design view")
        return session

    def _login_failed(self, message: str) -> None:
        state = self.state
        state.session = None
        state.view = View.LOGGED_OUT
        state.design_result = None
        state.login_status = RequestStatus.failed(message)
        state.error = message

    def _generate_failed(self, message: str) -> None:
        self.state.generate_status = RequestStatus.failed(message)
        self.state.error = message

    async def generate_design(
        self,
        request: Optional[SourceRequest] = None,
        session: Optional[Session] = None,
    ) -> Optional[str]:
        """Generate a design and return its diagram, or ``None`` on failure.

        Without an authenticated session the call is rejected before any
        network traffic. On failure a previously displayed result is kept.
        """

        state = self.state
        if state.generate_status.in_flight:
            logger.warning("Design generation already in flight; ignoring resubmission")
            return None

        session = session or state.session
        if session is None or not session.authenticated or not session.token:
            logger.warning("Design generation requested without an authenticated session")
            self._generate_failed(LOGIN_REQUIRED_MESSAGE)
            return None

        if request is not None:
            state.inputs.source_type = str(request.source_type)
            state.inputs.connection_string = request.connection_string

        state.error = None
        try:
            backend = self._backend()
        except RuntimeError:
            self._generate_failed(DesignError.message)
            return None

        epoch = self._epoch
        state.generate_status = IN_FLIGHT
        try:
            if request is None:
                request = SourceRequest(
                    sourceType=state.inputs.source_type,
                    connectionString=state.inputs.connection_string,
                )
            raw = await backend.generate_design(request, session.token)
            design = GenerateDesignResponse.model_validate(raw).design_recommendations
            diagram = render_er_diagram(design)
        except (DesignError, ValidationError) as exc:
            if epoch != self._epoch:
                logger.info("Discarding design failure that resolved after logout")
                return None
            if isinstance(exc, ValidationError):
                logger.warning("Design response could not be rendered: %s", exc.error_count())
            self._generate_failed(DesignError.message)
            return None
        except Exception:
            logger.exception("Design request raised unexpectedly")
            if epoch == self._epoch:
                self._generate_failed(DesignError.message)
            return None

        if epoch != self._epoch:
            logger.info("Discarding design response that resolved after logout")
            return None

        state.design_result = DesignResult(raw=raw, diagram=diagram)
        state.generate_status = SUCCEEDED
        logger.info("Rendered diagram for %d tables", len(design.tables))
        return diagram

    def logout(self) -> None:
        """Drop the session and every piece of design and form state."""

        self._epoch += 1
        self.state = WorkflowState()
        logger.info("Logged out; workflow state reset")

    def snapshot(self) -> SessionStateResponse:
        state = self.state
        return SessionStateResponse(
            view=state.view.value,
            authenticated=bool(state.session and state.session.authenticated),
            login_status=state.login_status.state.value,
            generate_status=state.generate_status.state.value,
            error=state.error,
            login_inputs_enabled=self.login_inputs_enabled,
            design_inputs_enabled=self.design_inputs_enabled,
            show_spinner=self.show_spinner,
            has_diagram=self.visible_diagram is not None,
        )
