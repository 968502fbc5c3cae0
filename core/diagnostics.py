"""Diagnostics routines for the core subsystem."""

from __future__ import annotations

import importlib.util
import logging

from diagnostics.models import DiagnosticResult, DiagnosticStatus


def probe() -> DiagnosticResult:
    """Run a core probe to validate logging readiness.

    Returns:
        Diagnostic result indicating core readiness.
    """

    name = "core"
    from core import logging as core_logging

    logger = core_logging.logger
    if logger is None or not logger.handlers:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details="Measurement logger failed to initialize",
        )

    rich_available = importlib.util.find_spec("rich") is not None
    level = logging.getLevelName(logger.level)
    details = (
        f"Rich logging enabled at {level}"
        if rich_available
        else f"Rich logging not available, plain stream handler at {level}"
    )
    if core_logging._file_log_path is not None:
        details += f"; writing to {core_logging._file_log_path}"
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS if rich_available else DiagnosticStatus.WARN,
        details=details,
    )
