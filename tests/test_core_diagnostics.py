"""Tests for core diagnostics."""

from __future__ import annotations

import importlib.util

from diagnostics.models import DiagnosticStatus
from core.diagnostics import probe


def test_core_probe() -> None:
    """Core probe should not fail when logging is available."""

    result = probe()
    assert result.status is not DiagnosticStatus.FAIL
    if importlib.util.find_spec("rich") is not None:
        assert result.status is DiagnosticStatus.PASS


def test_core_probe_reports_file_logging(tmp_path) -> None:
    from core import logging as core_logging

    log_path = tmp_path / "log" / "measure.log"
    core_logging.enable_file_logging(log_path)
    try:
        result = probe()
    finally:
        core_logging.disable_file_logging()

    assert str(log_path) in result.details
    assert log_path.exists()
