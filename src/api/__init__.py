"""
API Module
==========

API routes and schemas.
"""

from .schemas import (
    OwnerNode,
    ObjectNode,
    ExportRequest,
    ExportResponse,
    DiagnosticInfo,
    HealthResponse,
    VersionResponse,
    ErrorResponse,
)

__all__ = [
    "OwnerNode",
    "ObjectNode",
    "ExportRequest",
    "ExportResponse",
    "DiagnosticInfo",
    "HealthResponse",
    "VersionResponse",
    "ErrorResponse",
]
