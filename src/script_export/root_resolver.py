"""
Root Resolver
=============

Walks an object's owner chain up to the server that contains it.
Pure in-memory traversal, no I/O.
"""

from typing import Any

from .models import (
    ROOT_TYPE_TAG,
    HasOwner,
    Identifiable,
    Scriptable,
    ScriptExportError,
)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ResolutionError(ScriptExportError):
    """Raised when no server is found in an object's owner chain."""
    category = "InvalidData"


# =============================================================================
# PUBLIC INTERFACE
# =============================================================================

def describe(obj: Any) -> str:
    """Short human-readable label used in messages."""
    type_tag = getattr(obj, "type_tag", None)
    name = getattr(obj, "name", None)
    if type_tag and name:
        return f"[{type_tag}] {name}"
    return repr(obj)


def resolve_server(obj: Any) -> Identifiable:
    """
    Find the server that owns ``obj``.

    Args:
        obj: A scriptable object.

    Returns:
        The first ancestor whose type tag is the root marker.

    Raises:
        ResolutionError: If ``obj`` is not scriptable, or its owner chain
            ends (or loops) without reaching a server.
    """
    if not isinstance(obj, Scriptable):
        raise ResolutionError(
            f"Input {describe(obj)} is not a scriptable object.", target=obj
        )

    current = obj.owner()
    visited: set[int] = set()

    while current is not None:
        if not isinstance(current, Identifiable):
            raise ResolutionError(
                f"Owner {current!r} of {describe(obj)} has no type tag or name.",
                target=obj,
            )
        if current.type_tag == ROOT_TYPE_TAG:
            break
        if id(current) in visited:
            raise ResolutionError(
                f"Owner chain of {describe(obj)} loops at {describe(current)}.",
                target=obj,
            )
        visited.add(id(current))
        current = current.owner() if isinstance(current, HasOwner) else None

    if current is None:
        raise ResolutionError(
            f"Failed to find a server in the owner chain of {describe(obj)}.",
            target=obj,
        )

    return current
