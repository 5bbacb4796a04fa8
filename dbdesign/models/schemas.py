"""Pydantic models describing the backend wire contract and design payloads."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Kinds of source a design can be generated from."""

    CSV = "csv"
    API = "api"
    PROMPT = "prompt"
    DATABASE = "database"


class LoginRequest(BaseModel):
    """Credentials posted to the authentication backend."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Successful authentication payload; the token is opaque and kept verbatim."""

    token: str


class SourceRequest(BaseModel):
    """User-submitted description of the source to generate a design from."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    source_type: SourceType = Field(..., alias="sourceType")
    connection_string: str = Field(default="", alias="connectionString")

    def source_config(self) -> Dict[str, str]:
        """Derive the backend ``sourceConfig`` object.

        ``path`` is only present for CSV sources and ``url`` only for API
        sources. Other source types produce an empty object rather than keys
        set to null.
        """

        config: Dict[str, str] = {}
        if self.source_type == SourceType.CSV.value:
            config["path"] = self.connection_string
        if self.source_type == SourceType.API.value:
            config["url"] = self.connection_string
        return config

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body expected by ``POST /api/generate-design``."""

        return {
            "sourceType": self.source_type,
            "connectionString": self.connection_string,
            "sourceConfig": self.source_config(),
        }


class Column(BaseModel):
    name: str
    type: str
    nullable: bool = False


class Relationship(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_table: str = Field(..., alias="targetTable")


class Table(BaseModel):
    name: str
    columns: List[Column]
    relationships: Optional[List[Relationship]] = None


class DesignRecommendation(BaseModel):
    """Backend-produced schema description that seeds the diagram."""

    tables: List[Table]


class GenerateDesignResponse(BaseModel):
    """Envelope returned by the design generation backend."""

    model_config = ConfigDict(populate_by_name=True)

    design_recommendations: DesignRecommendation = Field(..., alias="designRecommendations")


class SessionStateResponse(BaseModel):
    """Snapshot of the workflow controller exposed to the front end."""

    view: str
    authenticated: bool
    login_status: str
    generate_status: str
    error: Optional[str] = None
    login_inputs_enabled: bool
    design_inputs_enabled: bool
    show_spinner: bool
    has_diagram: bool


class GenerateDesignResult(BaseModel):
    """Response returned after a successful generation request."""

    diagram: str = Field(..., description="Mermaid erDiagram text for the renderer")
    state: SessionStateResponse
