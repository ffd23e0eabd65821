"""
Export Pipeline
===============

Runs every input object through resolve -> plan -> write, one object at
a time, and collects the outcome of each into an ExportReport.

Per-item failures (no server in the owner chain, output file already
present) are reported and skipped; they never stop the batch unless
``raise_on_error`` is set. I/O errors while writing are not caught.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from .failure_reporter import FailureReporter
from .models import (
    ConsoleTarget,
    ExportReport,
    ExportTarget,
    FileTarget,
    ItemResult,
    ItemState,
    RunContext,
    ScriptEncoding,
    ScriptingOptions,
)
from .root_resolver import ResolutionError, describe, resolve_server
from .script_writer import build_header, render_console, write_file
from .target_planner import ConflictError, plan_target


logger = logging.getLogger(__name__)


# Called with (object, target) before anything is written; False skips it.
ConfirmCallback = Callable[[Any, ExportTarget], bool]


# =============================================================================
# PUBLIC INTERFACE
# =============================================================================

def export_scripts(
    input_objects: Iterable[Any],
    scripting_options: Optional[ScriptingOptions] = None,
    path: Optional[str] = None,
    encoding: ScriptEncoding = ScriptEncoding.UTF8,
    append: bool = False,
    passthru: bool = False,
    silent: bool = False,
    context: Optional[RunContext] = None,
    output_dir: Optional[str] = None,
    confirm: Optional[ConfirmCallback] = None,
    raise_on_error: bool = False,
) -> ExportReport:
    """
    Export the script of each object to a file or back to the caller.

    Args:
        input_objects: Scriptable objects, processed in order.
        scripting_options: Passed unchanged to each object's ``script``.
        path: Explicit output file; derived per server when omitted.
        encoding: Encoding used for file output.
        append: Append to existing files instead of skipping them.
        passthru: Return script text instead of writing files.
        silent: Suppress informational messages (errors still reported).
        context: Acting user, timestamp and command name for the run.
        output_dir: Directory for derived and relative paths (cwd if None).
        confirm: Optional gate consulted before writing each object.
        raise_on_error: Raise the first per-item error instead of
            collecting it.

    Returns:
        ExportReport with one ItemResult per input object.
    """
    context = context or RunContext.capture()
    options = scripting_options or ScriptingOptions()
    reporter = FailureReporter()
    report = ExportReport(context=context, diagnostics=reporter.diagnostics)
    created_paths: set[str] = set()

    def inform(message: str) -> None:
        if silent:
            return
        logger.info(message)
        report.messages.append(message)

    for index, obj in enumerate(input_objects):
        label = describe(obj)

        # Resolving
        try:
            server = resolve_server(obj)
        except ResolutionError as e:
            diagnostic = reporter.report(
                e, str(e), target=obj, continue_batch=not raise_on_error
            )
            report.items.append(ItemResult(
                index=index,
                description=label,
                state=ItemState.FAILED,
                diagnostic=diagnostic,
            ))
            continue

        server_name = server.name

        # Planning
        try:
            target = plan_target(
                explicit_path=path,
                server_name=server_name,
                kind_name=obj.type_tag,
                timestamp=context.file_stamp,
                passthru=passthru,
                append=append,
                output_dir=output_dir,
                created_paths=created_paths,
            )
        except ConflictError as e:
            diagnostic = reporter.report(
                e, str(e), target=e.target, continue_batch=not raise_on_error
            )
            report.items.append(ItemResult(
                index=index,
                description=label,
                state=ItemState.SKIPPED,
                server_name=server_name,
                diagnostic=diagnostic,
            ))
            continue

        if confirm is not None and not confirm(obj, target):
            logger.debug("Export of %s to %s declined", label, target)
            report.items.append(ItemResult(
                index=index,
                description=label,
                state=ItemState.SKIPPED,
                server_name=server_name,
            ))
            continue

        # Writing
        inform(f"Exporting {label} from {server_name}")
        result = _write_item(
            obj, target, options, context, server_name, encoding, created_paths
        )
        result.index = index
        result.description = label
        report.items.append(result)

        if isinstance(target, FileTarget):
            inform(f"Exported {label} on {server_name} to {target.path}")
        else:
            inform(f"Exported {label} on {server_name}")

    return report


# =============================================================================
# INTERNAL HELPERS
# =============================================================================

def _write_item(
    obj: Any,
    target: ExportTarget,
    options: ScriptingOptions,
    context: RunContext,
    server_name: str,
    encoding: ScriptEncoding,
    created_paths: set[str],
) -> ItemResult:
    """Produce the object's script and send it to ``target``."""
    header = build_header(context, server_name)
    script_text = obj.script(options)

    if isinstance(target, ConsoleTarget):
        return ItemResult(
            index=0,
            description="",
            state=ItemState.COMPLETED,
            server_name=server_name,
            text=render_console(header, script_text),
        )

    # Header goes out once per file per run
    first_write = target.path not in created_paths
    written = write_file(
        target.path,
        script_text,
        header=header if first_write else None,
        encoding=encoding,
        append=target.append or not first_write,
    )
    created_paths.add(target.path)

    return ItemResult(
        index=0,
        description="",
        state=ItemState.COMPLETED,
        server_name=server_name,
        path=written,
    )
