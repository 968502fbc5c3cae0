"""Vision package exports."""

from vision.detections import BoundingBox, Detection, DetectionEvent, KnownSize, SizeEstimate
from vision.reference import find_best_reference
from vision.sizing import estimate_size

__all__ = [
    "BoundingBox",
    "Detection",
    "DetectionEvent",
    "KnownSize",
    "SizeEstimate",
    "estimate_size",
    "find_best_reference",
]
