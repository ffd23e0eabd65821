"""
Application Configuration
=========================

Central configuration for the exporter and its API.
"""

import logging
import os
from pathlib import Path

from src.script_export.models import ScriptEncoding


# =============================================================================
# VERSION
# =============================================================================

VERSION = "1.0.0"
APP_NAME = "Script Exporter"
COMMAND_NAME = "Export-Script"
DOCS_URL = os.environ.get("SCRIPT_EXPORT_DOCS_URL", "README.md#export-script")


# =============================================================================
# OUTPUT DIRECTORY
# =============================================================================

# Default output directory (can be overridden via environment variable)
OUTPUT_DIR = os.environ.get(
    "SCRIPT_EXPORT_OUTPUT_DIR",
    str(Path(__file__).parent.parent.parent / "output")
)

DEFAULT_ENCODING = ScriptEncoding(
    os.environ.get("SCRIPT_EXPORT_ENCODING", ScriptEncoding.UTF8.value)
)


def get_output_dir() -> str:
    """
    Get the output directory path, creating it if it doesn't exist.

    Returns:
        Absolute path to output directory.
    """
    output_path = Path(OUTPUT_DIR)
    output_path.mkdir(parents=True, exist_ok=True)
    return str(output_path.resolve())


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("SCRIPT_EXPORT_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
