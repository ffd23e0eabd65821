"""
SQL Objects
===========

Concrete scriptable database objects (servers, jobs, logins, tables...)
linked to their owners through ``parent``.
"""

from dataclasses import dataclass
from typing import Optional

from .models import ScriptingOptions


@dataclass(frozen=True)
class SqlObject:
    """
    A named database object with an optional stored definition.

    A server is just ``SqlObject("Server", "SQL01")``; every other object
    points at its container through ``parent``.
    """
    type_tag: str
    name: str
    parent: Optional["SqlObject"] = None
    definition: Optional[str] = None

    def owner(self) -> Optional["SqlObject"]:
        return self.parent

    def script(self, options: ScriptingOptions) -> str:
        """Render this object's definition according to ``options``."""
        terminator = options.batch_terminator
        lines: list[str] = []

        if options.include_comments:
            lines.append(f"-- {self.type_tag}: {self.name}")

        if options.script_drops:
            lines.append(f"DROP {self.type_tag.upper()} [{self.name}]")
            if terminator:
                lines.append(terminator)

        if self.definition:
            lines.append(self.definition.rstrip("\n"))
        else:
            lines.append(f"-- no definition available for {self.name}")

        if terminator:
            lines.append(terminator)

        return "\n".join(lines)

    def __str__(self) -> str:
        return f"[{self.type_tag}] {self.name}"
