"""
API Routes
==========

Endpoint definitions for the Script Exporter API.

  POST /scripts/export - Export object definitions to .sql files or text

This module wires requests into the export pipeline without adding
business logic.
"""

import logging
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter

from .schemas import (
    DiagnosticInfo,
    ExportRequest,
    ExportResponse,
    HealthResponse,
    VersionResponse,
)

from src.script_export import ExportReport, RunContext, export_scripts

from src.app import config as app_config
from src.app import exceptions as app_exceptions
from src.app import artifact_writer


logger = logging.getLogger(__name__)


# =============================================================================
# ROUTER
# =============================================================================

router = APIRouter()


# =============================================================================
# HELPERS
# =============================================================================

def _check_relative_path(path: Optional[str]) -> Optional[str]:
    """Only plain relative paths inside the output directory are accepted."""
    if path is None:
        return None
    pure = PurePath(path)
    if pure.is_absolute() or ".." in pure.parts:
        raise ValueError(f"Path must be relative to the output directory: {path}")
    return path


def _overall_status(report: ExportReport) -> str:
    if not report.completed:
        return "failed"
    if report.failed or report.skipped:
        return "partial"
    return "success"


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/scripts/export", response_model=ExportResponse)
def export_objects(request: ExportRequest) -> ExportResponse:
    """
    Export the scripts of the given objects.

    Per-object failures are returned as diagnostics; the rest of the
    batch is still exported.
    """
    try:
        run_id = artifact_writer.get_run_id()
        path = None if request.passthru else _check_relative_path(request.path)

        context = RunContext.capture(
            command_name=app_config.COMMAND_NAME,
            docs_url=app_config.DOCS_URL,
        )
        objects = [node.to_sql_object() for node in request.objects]

        report = export_scripts(
            objects,
            scripting_options=request.scripting_options,
            path=path,
            encoding=request.encoding,
            append=request.append,
            passthru=request.passthru,
            silent=request.silent,
            context=context,
            output_dir=None if request.passthru else app_config.get_output_dir(),
        )

        artifact_writer.write_export_report(run_id, report.to_dict())
        logger.info(
            "Run %s: %d exported, %d failed, %d skipped",
            run_id, len(report.completed), len(report.failed), len(report.skipped),
        )

        return ExportResponse(
            status=_overall_status(report),
            run_id=run_id,
            files=report.files,
            scripts=report.scripts,
            diagnostics=[DiagnosticInfo(**d.to_dict()) for d in report.diagnostics],
            messages=report.messages,
        )

    except Exception as e:
        raise app_exceptions.get_http_exception(e)


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")


@router.get("/version", response_model=VersionResponse)
def get_version() -> VersionResponse:
    """Get API version."""
    return VersionResponse(version=app_config.VERSION, name=app_config.APP_NAME)
