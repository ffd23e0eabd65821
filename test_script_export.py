"""
Tests for the script export pipeline.
"""
import io
from datetime import datetime

import pytest

from src.script_export import script_writer
from src.script_export import (
    ConflictError,
    ConsoleTarget,
    FileTarget,
    ItemState,
    ResolutionError,
    RunContext,
    ScriptEncoding,
    ScriptingOptions,
    SqlObject,
    build_header,
    derive_filename,
    export_scripts,
    plan_target,
    resolve_server,
    write_file,
)


CONTEXT = RunContext(
    acting_user="CORP\\dba",
    timestamp=datetime(2024, 1, 2, 3, 4, 5),
    command_name="Export-Script",
    docs_url="README.md#export-script",
)
STAMP = "20240102030405"


def make_job(name, server_name="SQL01", definition=None):
    server = SqlObject("Server", server_name)
    agent = SqlObject("JobServer", "JobServer", parent=server)
    return SqlObject("Job", name, parent=agent, definition=definition or f"EXEC add_job '{name}'")


class LoopingNode:
    """Minimal hand-written scriptable object with a mutable owner."""

    def __init__(self, type_tag, name):
        self.type_tag = type_tag
        self.name = name
        self.parent = None

    def owner(self):
        return self.parent

    def script(self, options):
        return f"-- {self.name}"


# =============================================================================
# ROOT RESOLVER
# =============================================================================

def test_resolve_direct_parent():
    server = SqlObject("Server", "SQL01")
    login = SqlObject("Login", "sa", parent=server)
    assert resolve_server(login) is server


def test_resolve_deep_chain():
    server = SqlObject("Server", "SQL01")
    db = SqlObject("Database", "sales", parent=server)
    schema = SqlObject("Schema", "dbo", parent=db)
    table = SqlObject("Table", "orders", parent=schema)
    assert resolve_server(table).name == "SQL01"


def test_resolve_no_parent_fails():
    with pytest.raises(ResolutionError) as exc_info:
        resolve_server(SqlObject("Login", "orphan"))
    assert exc_info.value.category == "InvalidData"
    assert exc_info.value.target.name == "orphan"


def test_resolve_chain_without_server_fails():
    db = SqlObject("Database", "sales")
    table = SqlObject("Table", "orders", parent=db)
    with pytest.raises(ResolutionError):
        resolve_server(table)


def test_resolve_non_scriptable_input_fails():
    with pytest.raises(ResolutionError):
        resolve_server("not an object")


def test_resolve_owner_loop_fails():
    a = LoopingNode("Database", "a")
    b = LoopingNode("Schema", "b")
    a.parent = b
    b.parent = a
    child = LoopingNode("Table", "t")
    child.parent = a
    with pytest.raises(ResolutionError):
        resolve_server(child)


def test_resolve_owner_without_identity_fails():
    child = LoopingNode("Table", "t")
    child.parent = object()
    with pytest.raises(ResolutionError) as exc_info:
        resolve_server(child)
    assert exc_info.value.category == "InvalidData"


def test_owner_without_identity_does_not_stop_batch():
    child = LoopingNode("Table", "t")
    child.parent = object()

    report = export_scripts([child, make_job("one")], passthru=True, context=CONTEXT)

    assert [i.state for i in report.items] == [ItemState.FAILED, ItemState.COMPLETED]


# =============================================================================
# TARGET PLANNER
# =============================================================================

def test_derive_filename_replaces_every_backslash():
    name = derive_filename("HOST\\INSTANCE\\X", "Job", STAMP)
    assert name == f"HOST$INSTANCE$X-Job-{STAMP}.sql"


def test_plan_passthru_ignores_path(tmp_path):
    existing = tmp_path / "exists.sql"
    existing.write_text("old")
    target = plan_target(str(existing), "SQL01", "Job", STAMP, passthru=True)
    assert isinstance(target, ConsoleTarget)


def test_plan_explicit_relative_path_uses_output_dir(tmp_path):
    target = plan_target("out.sql", "SQL01", "Job", STAMP, output_dir=str(tmp_path))
    assert target == FileTarget(path=str(tmp_path / "out.sql"), append=False)


def test_plan_derived_path(tmp_path):
    target = plan_target(None, "HOST\\INST", "Login", STAMP, output_dir=str(tmp_path))
    assert target.path == str(tmp_path / f"HOST$INST-Login-{STAMP}.sql")


def test_plan_existing_file_conflicts(tmp_path):
    existing = tmp_path / "exists.sql"
    existing.write_text("old")
    with pytest.raises(ConflictError) as exc_info:
        plan_target(str(existing), "SQL01", "Job", STAMP)
    assert exc_info.value.target == str(existing)


def test_plan_existing_file_with_append(tmp_path):
    existing = tmp_path / "exists.sql"
    existing.write_text("old")
    target = plan_target(str(existing), "SQL01", "Job", STAMP, append=True)
    assert target.append is True


def test_plan_file_created_this_run_is_not_a_conflict(tmp_path):
    existing = tmp_path / "exists.sql"
    existing.write_text("header")
    target = plan_target(
        str(existing), "SQL01", "Job", STAMP, created_paths={str(existing)}
    )
    assert target.path == str(existing)


# =============================================================================
# WRITER
# =============================================================================

def test_header_fields():
    header = build_header(CONTEXT, "SQL01")
    assert header.startswith("/*\n")
    assert header.endswith("*/")
    assert "Created by CORP\\dba using Export-Script for objects on SQL01 at 2024-01-02 03:04:05" in header
    assert "See README.md#export-script for more information" in header


def test_sql_object_script_options():
    job = make_job("nightly", definition="EXEC add_job 'nightly'")
    options = ScriptingOptions(include_comments=True, script_drops=True, batch_terminator="GO")
    assert job.script(options) == (
        "-- Job: nightly\n"
        "DROP JOB [nightly]\n"
        "GO\n"
        "EXEC add_job 'nightly'\n"
        "GO"
    )
    assert job.script(ScriptingOptions(batch_terminator=None)) == "EXEC add_job 'nightly'"


def test_scripting_options_are_immutable():
    options = ScriptingOptions()
    with pytest.raises(Exception):
        options.script_drops = True


def test_write_file_without_append_refuses_existing_file(tmp_path):
    out = tmp_path / "jobs.sql"
    out.write_bytes(b"existing")
    with pytest.raises(FileExistsError):
        write_file(str(out), "SELECT 1", header="/* h */", append=False)
    assert out.read_bytes() == b"existing"


# =============================================================================
# PIPELINE
# =============================================================================

def test_file_export_single_header_bodies_in_order(tmp_path):
    jobs = [make_job("one"), make_job("two"), make_job("three")]
    out = tmp_path / "jobs.sql"

    report = export_scripts(jobs, path=str(out), context=CONTEXT)

    content = out.read_text(encoding="utf-8")
    assert content.count("Created by") == 1
    assert content.startswith("/*")
    positions = [content.index(f"EXEC add_job '{n}'") for n in ("one", "two", "three")]
    assert positions == sorted(positions)
    assert len(report.completed) == 3
    assert report.files == [str(out)]


def test_same_server_auto_path_shares_one_file(tmp_path):
    jobs = [make_job("one"), make_job("two")]

    report = export_scripts(jobs, context=CONTEXT, output_dir=str(tmp_path))

    expected = tmp_path / f"SQL01-Job-{STAMP}.sql"
    assert report.files == [str(expected)]
    assert not report.diagnostics
    content = expected.read_text(encoding="utf-8")
    assert content.count("Created by") == 1
    assert content.index("'one'") < content.index("'two'")


def test_different_servers_get_separate_files(tmp_path):
    jobs = [make_job("one", "SQL01"), make_job("two", "HOST\\INSTANCE")]

    report = export_scripts(jobs, context=CONTEXT, output_dir=str(tmp_path))

    assert report.files == [
        str(tmp_path / f"SQL01-Job-{STAMP}.sql"),
        str(tmp_path / f"HOST$INSTANCE-Job-{STAMP}.sql"),
    ]


def test_broken_object_does_not_stop_batch(tmp_path):
    objects = [make_job("one"), SqlObject("Job", "orphan"), make_job("two")]
    out = tmp_path / "jobs.sql"

    report = export_scripts(objects, path=str(out), context=CONTEXT)

    assert [i.state for i in report.items] == [
        ItemState.COMPLETED, ItemState.FAILED, ItemState.COMPLETED,
    ]
    assert len(report.diagnostics) == 1
    assert report.diagnostics[0].category == "InvalidData"
    content = out.read_text(encoding="utf-8")
    assert "orphan" not in content
    assert "'one'" in content and "'two'" in content


def test_passthru_touches_no_files(tmp_path):
    jobs = [make_job("one"), make_job("two")]
    out = tmp_path / "never.sql"

    report = export_scripts(
        jobs, path=str(out), passthru=True, context=CONTEXT, output_dir=str(tmp_path)
    )

    assert not out.exists()
    assert list(tmp_path.iterdir()) == []
    assert len(report.scripts) == 2
    assert report.scripts[0].startswith("/*")
    assert "'one'" in report.scripts[0]
    assert "'two'" in report.scripts[1]
    assert report.files == []


def test_existing_file_without_append_is_skipped(tmp_path):
    out = tmp_path / "jobs.sql"
    out.write_bytes(b"existing")

    report = export_scripts([make_job("one")], path=str(out), context=CONTEXT)

    assert out.read_bytes() == b"existing"
    assert report.items[0].state is ItemState.SKIPPED
    assert report.diagnostics[0].category == "NotSpecified"
    assert report.diagnostics[0].target == str(out)


def test_existing_file_with_append_keeps_old_bytes(tmp_path):
    out = tmp_path / "jobs.sql"
    out.write_bytes(b"-- existing\n")

    export_scripts([make_job("one"), make_job("two")], path=str(out), append=True, context=CONTEXT)

    data = out.read_bytes()
    assert data.startswith(b"-- existing\n/*")
    assert data.count(b"Created by") == 1
    assert data.index(b"'one'") < data.index(b"'two'")


def test_encoding_is_applied(tmp_path):
    out = tmp_path / "jobs.sql"

    export_scripts([make_job("one")], path=str(out), encoding=ScriptEncoding.UNICODE, context=CONTEXT)

    assert "EXEC add_job 'one'" in out.read_bytes().decode("utf-16-le")


def test_silent_suppresses_messages_not_errors(tmp_path):
    objects = [make_job("one"), SqlObject("Job", "orphan")]

    loud = export_scripts(objects, passthru=True, context=CONTEXT)
    quiet = export_scripts(objects, passthru=True, silent=True, context=CONTEXT)

    assert loud.messages
    assert quiet.messages == []
    assert len(quiet.diagnostics) == 1


def test_declined_confirmation_skips_without_error(tmp_path):
    out = tmp_path / "jobs.sql"

    report = export_scripts(
        [make_job("one")], path=str(out), context=CONTEXT, confirm=lambda obj, target: False
    )

    assert not out.exists()
    assert report.items[0].state is ItemState.SKIPPED
    assert report.diagnostics == []


def test_raise_on_error_stops_at_first_failure():
    with pytest.raises(ResolutionError):
        export_scripts(
            [SqlObject("Job", "orphan"), make_job("one")],
            passthru=True,
            context=CONTEXT,
            raise_on_error=True,
        )


def test_scripting_options_passed_to_objects(tmp_path):
    report = export_scripts(
        [make_job("one")],
        scripting_options=ScriptingOptions(include_comments=True, batch_terminator=""),
        passthru=True,
        context=CONTEXT,
    )
    assert "-- Job: one" in report.scripts[0]
    assert not report.scripts[0].rstrip().endswith("GO")


@pytest.mark.parametrize("encoding, codec", [
    (ScriptEncoding.ASCII, "ascii"),
    (ScriptEncoding.BIG_ENDIAN_UNICODE, "utf-16-be"),
    (ScriptEncoding.BYTE, "latin-1"),
    (ScriptEncoding.STRING, "utf-16-le"),
    (ScriptEncoding.UNICODE, "utf-16-le"),
    (ScriptEncoding.UTF7, "utf-7"),
    (ScriptEncoding.UTF8, "utf-8"),
    (ScriptEncoding.UNKNOWN, "latin-1"),
])
def test_every_encoding_writes_decodable_file(tmp_path, encoding, codec):
    out = tmp_path / "jobs.sql"

    export_scripts([make_job("one"), make_job("two")], path=str(out), encoding=encoding, context=CONTEXT)

    text = out.read_bytes().decode(codec)
    assert text.startswith("/*")
    assert text.count("Created by") == 1
    assert text.index("EXEC add_job 'one'") < text.index("EXEC add_job 'two'")


def test_big_endian_unicode_byte_order(tmp_path):
    out = tmp_path / "jobs.sql"

    export_scripts([make_job("one")], path=str(out), encoding=ScriptEncoding.BIG_ENDIAN_UNICODE, context=CONTEXT)

    assert out.read_bytes()[:4] == b"\x00/\x00*"


@pytest.mark.parametrize("encoding, text", [
    (ScriptEncoding.ASCII, "SELECT 'café'"),
    (ScriptEncoding.BYTE, "SELECT '€'"),
    (ScriptEncoding.UNKNOWN, "SELECT '€'"),
])
def test_unencodable_characters_are_replaced(tmp_path, encoding, text):
    out = tmp_path / "jobs.sql"
    objects = [make_job("cafe", definition=text), make_job("two", definition="SELECT 2")]

    report = export_scripts(objects, path=str(out), encoding=encoding, context=CONTEXT)

    assert [i.state for i in report.items] == [ItemState.COMPLETED, ItemState.COMPLETED]
    content = out.read_bytes().decode(encoding.codec)
    assert "SELECT '" in content and "?'" in content
    assert "SELECT 2" in content


class BrokenFile(io.StringIO):
    """File stand-in whose writes fail like a full disk."""

    def write(self, text):
        raise OSError("No space left on device")


def test_write_error_propagates_and_closes_handle(tmp_path, monkeypatch):
    handles = []

    def broken_open(*args, **kwargs):
        handle = BrokenFile()
        handles.append(handle)
        return handle

    monkeypatch.setattr(script_writer, "open", broken_open, raising=False)

    with pytest.raises(OSError):
        export_scripts([make_job("one")], path=str(tmp_path / "jobs.sql"), context=CONTEXT)

    assert len(handles) == 1
    assert handles[0].closed
