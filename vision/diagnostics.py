"""Diagnostics routines for the measurement engine."""

from __future__ import annotations

import math

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from vision.detections import BoundingBox, Detection
from vision.reference import find_best_reference
from vision.sizing import estimate_size


def probe() -> DiagnosticResult:
    """Run known-answer checks against reference selection and size estimation.

    Returns:
        Diagnostic result indicating measurement engine readiness.
    """

    name = "vision"
    failures: list[str] = []

    estimate = estimate_size(
        BoundingBox(0.1, 0.1, 0.2, 0.25),
        BoundingBox(0.3, 0.1, 0.5, 0.4),
        7.0,
        15.0,
    )
    if (
        estimate is None
        or not math.isclose(estimate.width_cm, 14.0, abs_tol=1e-6)
        or not math.isclose(estimate.height_cm, 30.0, abs_tol=1e-6)
    ):
        failures.append(f"double-size estimate wrong: {estimate}")

    off_plane = estimate_size(
        BoundingBox(0.1, 0.1, 0.2, 0.2),
        BoundingBox(0.3, 0.8, 0.4, 0.9),
        7.0,
        15.0,
    )
    if off_plane is not None:
        failures.append("off-plane target was measured")

    reference = find_best_reference(
        [
            Detection("person", 0.85, BoundingBox(0.1, 0.1, 0.2, 0.3)),
            Detection("cell phone", 0.75, BoundingBox(0.3, 0.1, 0.4, 0.2)),
            Detection("cup", 0.90, BoundingBox(0.5, 0.1, 0.6, 0.15)),
        ]
    )
    if reference is None or reference.label != "cell phone":
        failures.append(f"preferred reference not chosen: {reference}")

    if failures:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details="; ".join(failures),
        )
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details="Reference selection and size estimation self-checks passed",
    )
