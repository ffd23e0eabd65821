"""
Target Planner
==============

Decides where one batch item's script goes: a named file, an
auto-derived file, or back to the caller.
"""

import os
from pathlib import Path
from typing import Optional

from .models import (
    ConsoleTarget,
    ExportTarget,
    FileTarget,
    ScriptExportError,
)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ConflictError(ScriptExportError):
    """Raised when the output file already exists and append is off."""


# =============================================================================
# CONSTANTS
# =============================================================================

SCRIPT_EXTENSION = ".sql"


# =============================================================================
# PUBLIC INTERFACE
# =============================================================================

def safe_server_name(server_name: str) -> str:
    """Replace instance separators so the name is usable in a filename."""
    return server_name.replace("\\", "$")


def derive_filename(server_name: str, kind_name: str, timestamp: str) -> str:
    """Build ``<server>-<kind>-<timestamp>.sql``."""
    return f"{safe_server_name(server_name)}-{kind_name}-{timestamp}{SCRIPT_EXTENSION}"


def plan_target(
    explicit_path: Optional[str],
    server_name: str,
    kind_name: str,
    timestamp: str,
    passthru: bool = False,
    append: bool = False,
    output_dir: Optional[str] = None,
    created_paths: Optional[set[str]] = None,
) -> ExportTarget:
    """
    Choose the export target for one item.

    Args:
        explicit_path: Path requested by the caller, if any.
        server_name: Name of the resolved server.
        kind_name: Type tag of the object being exported.
        timestamp: Run timestamp shared by the whole batch.
        passthru: Return text to the caller instead of writing a file.
        append: Append to existing files instead of refusing them.
        output_dir: Directory for derived and relative paths.
        created_paths: Files this run has already created; those are
            appended to rather than treated as conflicts.

    Returns:
        ConsoleTarget or FileTarget.

    Raises:
        ConflictError: If the file exists, append is off, and this run
            did not create it.
    """
    if passthru:
        return ConsoleTarget()

    base_dir = Path(output_dir) if output_dir else Path(os.getcwd())

    if explicit_path:
        path = Path(explicit_path)
        if not path.is_absolute():
            path = base_dir / path
    else:
        path = base_dir / derive_filename(server_name, kind_name, timestamp)

    resolved = str(path)
    already_ours = created_paths is not None and resolved in created_paths

    if not append and not already_ours and path.exists():
        raise ConflictError(
            f"Output file {resolved} already exists and append was not specified.",
            target=resolved,
        )

    return FileTarget(path=resolved, append=append)
