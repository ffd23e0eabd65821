"""
Script Export Models
====================

Capabilities, configuration values, and result structures shared by
every stage of the export pipeline.
"""

import getpass
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ScriptExportError(Exception):
    """Base exception for per-item export failures."""
    category = "NotSpecified"

    def __init__(self, message: str, target: Any = None):
        super().__init__(message)
        self.target = target


# =============================================================================
# CONSTANTS
# =============================================================================

ROOT_TYPE_TAG = "Server"
DEFAULT_COMMAND_NAME = "Export-Script"
DEFAULT_DOCS_URL = "README.md#export-script"
FILENAME_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
HEADER_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


# =============================================================================
# CAPABILITIES
# =============================================================================

@runtime_checkable
class Identifiable(Protocol):
    """Anything that carries a type discriminant and a name."""
    type_tag: str
    name: str


@runtime_checkable
class HasOwner(Protocol):
    """Anything that can report the object that contains it."""

    def owner(self) -> Optional[Identifiable]:
        ...


@runtime_checkable
class Scriptable(Protocol):
    """An object that can produce its own textual definition."""
    type_tag: str
    name: str

    def owner(self) -> Optional[Identifiable]:
        ...

    def script(self, options: "ScriptingOptions") -> str:
        ...


# =============================================================================
# CONFIGURATION VALUES
# =============================================================================

class ScriptingOptions(BaseModel):
    """
    Options handed unchanged to each object's ``script`` method.

    The export pipeline never reads these fields; they only mean something
    to the scripting implementation.
    """
    model_config = ConfigDict(frozen=True)

    include_comments: bool = Field(
        default=False,
        description="Prefix each script with a comment naming the object"
    )
    script_drops: bool = Field(
        default=False,
        description="Emit a DROP statement before the definition"
    )
    batch_terminator: Optional[str] = Field(
        default="GO",
        description="Statement appended after each batch; empty to disable"
    )


class ScriptEncoding(str, Enum):
    """Text encodings accepted for file output."""
    ASCII = "ASCII"
    BIG_ENDIAN_UNICODE = "BigEndianUnicode"
    BYTE = "Byte"
    STRING = "String"
    UNICODE = "Unicode"
    UTF7 = "UTF7"
    UTF8 = "UTF8"
    UNKNOWN = "Unknown"

    @property
    def codec(self) -> str:
        return ENCODING_CODECS[self]


ENCODING_CODECS: dict[ScriptEncoding, str] = {
    ScriptEncoding.ASCII: "ascii",
    ScriptEncoding.BIG_ENDIAN_UNICODE: "utf-16-be",
    ScriptEncoding.BYTE: "latin-1",
    ScriptEncoding.STRING: "utf-16-le",
    ScriptEncoding.UNICODE: "utf-16-le",
    ScriptEncoding.UTF7: "utf-7",
    ScriptEncoding.UTF8: "utf-8",
    ScriptEncoding.UNKNOWN: "latin-1",
}


@dataclass(frozen=True)
class RunContext:
    """Values captured once at the start of a batch."""
    acting_user: str
    timestamp: datetime
    command_name: str = DEFAULT_COMMAND_NAME
    docs_url: str = DEFAULT_DOCS_URL

    @classmethod
    def capture(
        cls,
        command_name: str = DEFAULT_COMMAND_NAME,
        docs_url: str = DEFAULT_DOCS_URL,
    ) -> "RunContext":
        return cls(
            acting_user=getpass.getuser(),
            timestamp=datetime.now(),
            command_name=command_name,
            docs_url=docs_url,
        )

    @property
    def file_stamp(self) -> str:
        return self.timestamp.strftime(FILENAME_TIMESTAMP_FORMAT)

    @property
    def header_stamp(self) -> str:
        return self.timestamp.strftime(HEADER_TIMESTAMP_FORMAT)


# =============================================================================
# EXPORT TARGETS
# =============================================================================

@dataclass(frozen=True)
class FileTarget:
    """Script text goes to a file on disk."""
    path: str
    append: bool = False


@dataclass(frozen=True)
class ConsoleTarget:
    """Script text is returned to the caller."""

    def __str__(self) -> str:
        return "console"


ExportTarget = Union[FileTarget, ConsoleTarget]


# =============================================================================
# RESULTS
# =============================================================================

class ItemState(str, Enum):
    """Terminal states of a single batch item."""
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class Diagnostic:
    """A non-fatal, per-item error report."""
    category: str
    message: str
    target: Any = None
    error: Optional[Exception] = None

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "message": self.message,
            "target": str(self.target) if self.target is not None else None,
        }


@dataclass
class ItemResult:
    """Outcome of exporting one input object."""
    index: int
    description: str
    state: ItemState
    server_name: Optional[str] = None
    path: Optional[str] = None
    text: Optional[str] = None
    diagnostic: Optional[Diagnostic] = None


@dataclass
class ExportReport:
    """Batch-level report, items kept in input order."""
    context: RunContext
    items: list[ItemResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    @property
    def completed(self) -> list[ItemResult]:
        return [i for i in self.items if i.state is ItemState.COMPLETED]

    @property
    def failed(self) -> list[ItemResult]:
        return [i for i in self.items if i.state is ItemState.FAILED]

    @property
    def skipped(self) -> list[ItemResult]:
        return [i for i in self.items if i.state is ItemState.SKIPPED]

    @property
    def files(self) -> list[str]:
        """Distinct files written, in first-write order."""
        seen: list[str] = []
        for item in self.completed:
            if item.path and item.path not in seen:
                seen.append(item.path)
        return seen

    @property
    def scripts(self) -> list[str]:
        """Text blocks returned in passthru mode."""
        return [i.text for i in self.completed if i.text is not None]

    def to_dict(self) -> dict:
        return {
            "acting_user": self.context.acting_user,
            "command_name": self.context.command_name,
            "timestamp": self.context.timestamp.isoformat(),
            "items": [
                {
                    "index": i.index,
                    "object": i.description,
                    "state": i.state.value,
                    "server": i.server_name,
                    "path": i.path,
                }
                for i in self.items
            ],
            "files": self.files,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "messages": list(self.messages),
        }
