"""Tests for measurement engine diagnostics."""

from __future__ import annotations

from diagnostics.models import DiagnosticStatus
from vision.diagnostics import probe


def test_vision_probe_passes() -> None:
    result = probe()
    assert result.status is DiagnosticStatus.PASS


def test_vision_probe_reports_wrong_reference(monkeypatch) -> None:
    monkeypatch.setattr("vision.diagnostics.find_best_reference", lambda detections: None)

    result = probe()
    assert result.status is DiagnosticStatus.FAIL
    assert "preferred reference" in result.details
