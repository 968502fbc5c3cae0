"""Per-frame measurement: reference selection followed by size estimation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from config.settings import AppSettings
from core.logging import logger
from vision.detections import Detection, DetectionEvent, SizeEstimate
from vision.reference import find_best_reference, lookup_known_size
from vision.sizing import estimate_size


def measurement_key(detection: Detection) -> str:
    """Return the display key for a detection: label plus horizontal position.

    The position is the box's left edge in whole percent of frame width, so two
    same-label objects starting at the same column share a key.
    """

    return f"{detection.label}_{round(detection.bounding_box.left * 100)}"


@dataclass(frozen=True)
class FrameMeasurement:
    """Measurement output for one frame."""

    detections: list[Detection] = field(default_factory=list)
    reference: Detection | None = None
    measurements: dict[str, SizeEstimate] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "FrameMeasurement":
        return cls()

    def overlay_lines(self) -> list[str]:
        """Return one ``"<label>: <w> × <h> cm"`` line per measured detection."""

        lines: list[str] = []
        for detection in self.detections:
            estimate = self.measurements.get(measurement_key(detection))
            if estimate is None:
                continue
            lines.append(f"{detection.label}: {estimate.to_display_string()}")
        return lines


class MeasurementPipeline:
    """Turns a frame's detections into size estimates using current settings."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings if settings is not None else AppSettings()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def update_settings(self, settings: AppSettings) -> None:
        """Use ``settings`` for frames processed from now on."""

        self._settings = settings

    def process_event(self, event: DetectionEvent) -> FrameMeasurement:
        return self.process(event.detections)

    def process(self, detections: Sequence[Detection]) -> FrameMeasurement:
        """Select a reference and estimate the size of every other detection."""

        settings = self._settings
        filtered = [
            detection
            for detection in detections
            if detection.confidence >= settings.confidence_threshold
        ][: settings.max_objects]
        if not filtered:
            return FrameMeasurement.empty()

        reference = find_best_reference(
            filtered,
            preferred_labels=settings.preferred_labels,
            min_confidence=settings.reference_min_confidence,
        )
        if reference is None:
            logger.debug("[MEASURE] no reference among %d detections", len(filtered))
            return FrameMeasurement(detections=filtered)

        return FrameMeasurement(
            detections=filtered,
            reference=reference,
            measurements=self._measure(filtered, reference),
        )

    def _measure(
        self, detections: list[Detection], reference: Detection
    ) -> dict[str, SizeEstimate]:
        settings = self._settings
        known_size = lookup_known_size(settings.reference_sizes, reference.label)
        if known_size is None:
            logger.debug("[MEASURE] reference %r has no known size", reference.label)
            return {}

        measurements: dict[str, SizeEstimate] = {}
        for detection in detections:
            if detection == reference:
                continue
            estimate = estimate_size(
                reference.bounding_box,
                detection.bounding_box,
                known_size.width_cm,
                known_size.height_cm,
                same_plane_threshold=settings.same_plane_threshold,
            )
            if estimate is None:
                logger.debug(
                    "[MEASURE] skipped %r against reference %r",
                    detection.label,
                    reference.label,
                )
                continue
            measurements[measurement_key(detection)] = estimate
        return measurements
