"""Stable detection schemas for the measurement pipeline.

Bounding boxes are normalized to the source frame dimensions and represented as
``(left, top, right, bottom)`` with each value expected in the inclusive range
``[0.0, 1.0]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in normalized image coordinates."""

    left: float
    top: float
    right: float
    bottom: float

    def width(self) -> float:
        return self.right - self.left

    def height(self) -> float:
        return self.bottom - self.top

    def center_x(self) -> float:
        return (self.left + self.right) / 2.0

    def center_y(self) -> float:
        return (self.top + self.bottom) / 2.0

    def is_valid(self) -> bool:
        """Return whether coordinates are ordered and inside the frame."""

        return (
            self.left >= 0.0
            and self.top >= 0.0
            and self.right <= 1.0
            and self.bottom <= 1.0
            and self.right > self.left
            and self.bottom > self.top
        )

    def to_pixel_coordinates(self, image_width: int, image_height: int) -> "BoundingBox":
        """Scale the box to pixel coordinates for an image of the given size."""

        return BoundingBox(
            left=self.left * image_width,
            top=self.top * image_height,
            right=self.right * image_width,
            bottom=self.bottom * image_height,
        )


@dataclass(frozen=True)
class Detection:
    """Single object detection result."""

    label: str
    confidence: float
    bounding_box: BoundingBox
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def is_valid(self, min_confidence: float = 0.5) -> bool:
        """Return whether the detection clears the confidence floor with a sane box."""

        return self.confidence >= min_confidence and self.bounding_box.is_valid()


@dataclass(frozen=True)
class DetectionEvent:
    """Detection snapshot for one processed frame."""

    timestamp_ms: int
    detections: list[Detection]
    frame_id: int | None = None
    source: str = "camera"


@dataclass(frozen=True)
class KnownSize:
    """Real-world dimensions of a reference object, in centimeters."""

    width_cm: float
    height_cm: float


@dataclass(frozen=True)
class SizeEstimate:
    """Estimated real-world size of a target object."""

    width_cm: float
    height_cm: float
    confidence: float

    def is_plausible(self) -> bool:
        return self.width_cm > 0 and self.height_cm > 0

    def to_display_string(self) -> str:
        return f"{self.width_cm:.1f} × {self.height_cm:.1f} cm"
