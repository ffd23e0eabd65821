"""
API Request/Response Schemas
============================

Pydantic models for API request and response validation.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from src.app.config import DEFAULT_ENCODING
from src.script_export import ScriptEncoding, ScriptingOptions, SqlObject


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OwnerNode(BaseModel):
    """A container in an object's owner chain (server, database, ...)."""

    type: str = Field(..., min_length=1, description="Type tag, e.g. 'Server'")
    name: str = Field(..., min_length=1)
    parent: Optional["OwnerNode"] = None

    def to_sql_object(self) -> SqlObject:
        parent = self.parent.to_sql_object() if self.parent else None
        return SqlObject(type_tag=self.type, name=self.name, parent=parent)


class ObjectNode(BaseModel):
    """An object to export together with its owner chain."""

    type: str = Field(..., min_length=1, description="Type tag, e.g. 'Job'")
    name: str = Field(..., min_length=1)
    definition: Optional[str] = Field(
        default=None,
        description="Stored definition text rendered by the scripter"
    )
    parent: Optional[OwnerNode] = None

    def to_sql_object(self) -> SqlObject:
        parent = self.parent.to_sql_object() if self.parent else None
        return SqlObject(
            type_tag=self.type,
            name=self.name,
            parent=parent,
            definition=self.definition,
        )


class ExportRequest(BaseModel):
    """Request body for POST /scripts/export endpoint."""

    objects: list[ObjectNode] = Field(..., min_length=1)
    scripting_options: ScriptingOptions = Field(default_factory=ScriptingOptions)
    path: Optional[str] = Field(
        default=None,
        description="File name under the output directory; derived when omitted"
    )
    encoding: ScriptEncoding = DEFAULT_ENCODING
    append: bool = False
    passthru: bool = False
    silent: bool = False


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class DiagnosticInfo(BaseModel):
    """One per-item failure."""

    category: str
    message: str
    target: Optional[str] = None


class ExportResponse(BaseModel):
    """
    Response for POST /scripts/export.

    Three possible outcomes:
    1. status="success" → every object exported
    2. status="partial" → some objects failed or were skipped
    3. status="failed" → nothing was exported
    """

    status: Literal["success", "partial", "failed"]
    run_id: str
    files: list[str] = Field(default_factory=list)
    scripts: list[str] = Field(default_factory=list)
    diagnostics: list[DiagnosticInfo] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    status: str = "ok"


class VersionResponse(BaseModel):
    """Response for GET /version endpoint."""

    version: str
    name: str = "Script Exporter"


class ErrorResponse(BaseModel):
    """Standard error response."""

    status: str = "error"
    message: str
    detail: Optional[str] = None
