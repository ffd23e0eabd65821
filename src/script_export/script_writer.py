"""
Script Writer
=============

Emits the header comment block and generated script text either to a
file (in the requested encoding) or as text returned to the caller.
"""

from pathlib import Path
from typing import Optional

from .models import RunContext, ScriptEncoding


# =============================================================================
# PUBLIC INTERFACE
# =============================================================================

def build_header(context: RunContext, server_name: str) -> str:
    """Comment block placed at the top of every export."""
    return (
        "/*\n"
        f"\tCreated by {context.acting_user} using {context.command_name} "
        f"for objects on {server_name} at {context.header_stamp}\n"
        f"\tSee {context.docs_url} for more information\n"
        "*/"
    )


def render_console(header: str, script_text: str) -> str:
    """Text block returned for one object in passthru mode."""
    return f"{header}\n{script_text}"


def write_file(
    path: str,
    script_text: str,
    header: Optional[str] = None,
    encoding: ScriptEncoding = ScriptEncoding.UTF8,
    append: bool = True,
) -> str:
    """
    Write an object's script to ``path``, preceded by ``header`` if given.

    With ``append`` the file is opened in append mode so earlier content
    (existing bytes or previous objects of the same batch) is preserved in
    order. Without it the file must not exist yet.

    Characters the encoding cannot represent are written as ``?``.

    Args:
        path: Target file.
        script_text: Script produced by the object.
        header: Header block; pass None when the file already has one.
        encoding: Text encoding for the written content.
        append: Append to the file instead of creating it.

    Returns:
        The path written to.

    Raises:
        FileExistsError: If ``append`` is off and the file exists.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    content = script_text + "\n"
    if header is not None:
        content = header + "\n" + content

    mode = "a" if append else "x"
    with open(file_path, mode, encoding=encoding.codec, errors="replace", newline="") as f:
        f.write(content)

    return str(file_path)
