"""
Failure Reporter
================

Turns per-item export failures into structured diagnostics so the
rest of the batch can carry on.
"""

import logging
from typing import Any

from .models import Diagnostic, ScriptExportError


logger = logging.getLogger(__name__)


class FailureReporter:
    """Collects diagnostics for one batch."""

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []

    def report(
        self,
        kind: ScriptExportError,
        message: str,
        target: Any = None,
        continue_batch: bool = True,
    ) -> Diagnostic:
        """
        Record a failure for the current item.

        Args:
            kind: The exception describing the failure.
            message: Text shown to the user.
            target: The offending object or path.
            continue_batch: When False the exception is raised instead.

        Returns:
            The recorded diagnostic.

        Raises:
            ScriptExportError: ``kind`` itself, if ``continue_batch`` is False.
        """
        diagnostic = Diagnostic(
            category=kind.category,
            message=message,
            target=target,
            error=kind,
        )
        self.diagnostics.append(diagnostic)
        logger.error("%s [%s]", message, diagnostic.category)

        if not continue_batch:
            raise kind

        return diagnostic
