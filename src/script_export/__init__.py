"""
Script Export Module
====================

Exports database object definitions to .sql script files or returns
the script text to the caller.

Each object is resolved to its owning server, given an output target
(explicit path, derived path, or passthru), and written with a header
comment block. Failures are isolated per object.
"""

from .models import (
    ScriptingOptions,
    ScriptEncoding,
    RunContext,
    FileTarget,
    ConsoleTarget,
    ExportTarget,
    ItemState,
    ItemResult,
    Diagnostic,
    ExportReport,
    Identifiable,
    HasOwner,
    Scriptable,
    ScriptExportError,
    ROOT_TYPE_TAG,
)

from .root_resolver import (
    resolve_server,
    ResolutionError,
)

from .target_planner import (
    plan_target,
    derive_filename,
    ConflictError,
)

from .script_writer import (
    build_header,
    write_file,
)

from .failure_reporter import FailureReporter

from .sql_object import SqlObject

from .pipeline import export_scripts

__all__ = [
    # Primary API
    "export_scripts",

    # Stages
    "resolve_server",
    "plan_target",
    "derive_filename",
    "build_header",
    "write_file",
    "FailureReporter",

    # Data structures
    "SqlObject",
    "ScriptingOptions",
    "ScriptEncoding",
    "RunContext",
    "FileTarget",
    "ConsoleTarget",
    "ExportTarget",
    "ItemState",
    "ItemResult",
    "Diagnostic",
    "ExportReport",
    "Identifiable",
    "HasOwner",
    "Scriptable",
    "ROOT_TYPE_TAG",

    # Exceptions
    "ScriptExportError",
    "ResolutionError",
    "ConflictError",
]
