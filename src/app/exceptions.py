"""
Application Exceptions
======================

Maps internal exceptions to HTTP status codes.
"""

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTION MAPPING
# =============================================================================

# Maps exception class names to (status_code, user_message)
EXCEPTION_MAP = {
    # Root resolution
    "ResolutionError": (422, "Could not find the server that owns the object."),

    # Target planning
    "ConflictError": (409, "The output file already exists."),

    # Request handling
    "ValueError": (400, "Invalid export request."),
    "OSError": (500, "Failed to write the script file."),
}


def _lookup(exc: Exception) -> tuple[int, str]:
    """Find the mapping for ``exc`` or one of its base classes."""
    for cls in type(exc).__mro__:
        if cls.__name__ in EXCEPTION_MAP:
            return EXCEPTION_MAP[cls.__name__]
    return 500, "Internal system error."


def get_http_exception(exc: Exception) -> HTTPException:
    """
    Convert an internal exception to an HTTPException.

    Args:
        exc: The caught exception.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    status_code, user_message = _lookup(exc)
    return HTTPException(
        status_code=status_code,
        detail={
            "status": "error",
            "message": user_message,
            "detail": str(exc)
        }
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for FastAPI.

    Catches all unhandled exceptions and returns structured error response.
    """
    status_code, user_message = _lookup(exc)
    logger.exception("Unhandled error on %s", request.url.path)

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "message": user_message,
            "detail": str(exc)
        }
    )
