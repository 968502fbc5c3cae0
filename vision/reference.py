"""Reference object selection for size calibration.

Priority:
    1. Preferred reference labels, in list order. The first label with a
       qualifying detection wins, even against higher-confidence detections
       further down the list or outside it.
    2. The highest-confidence qualifying detection of any label.

Equal confidences resolve to the detection that came first in the input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from vision.detections import Detection, KnownSize

MIN_REFERENCE_CONFIDENCE = 0.6

DEFAULT_REFERENCE_LABELS: tuple[str, ...] = (
    "cell phone",
    "book",
    "bottle",
    "cup",
    "keyboard",
)

KNOWN_OBJECT_SIZES: Mapping[str, KnownSize] = MappingProxyType(
    {
        "cell phone": KnownSize(7.0, 15.0),
        "book": KnownSize(15.0, 23.0),
        "bottle": KnownSize(7.0, 25.0),
        "cup": KnownSize(8.0, 10.0),
        "keyboard": KnownSize(44.0, 13.0),
    }
)


def _most_confident(detections: Iterable[Detection]) -> Detection | None:
    best: Detection | None = None
    for detection in detections:
        if best is None or detection.confidence > best.confidence:
            best = detection
    return best


def find_best_reference(
    detections: Sequence[Detection],
    preferred_labels: Sequence[str] = DEFAULT_REFERENCE_LABELS,
    min_confidence: float = MIN_REFERENCE_CONFIDENCE,
) -> Detection | None:
    """Return the detection to calibrate against, or ``None`` if none qualifies.

    Args:
        detections: Detections from a single frame.
        preferred_labels: Labels to try first, highest priority first.
            Matching ignores case.
        min_confidence: Minimum detection confidence for a reference.

    Returns:
        The chosen reference detection, or ``None``.
    """

    for label in preferred_labels:
        wanted = label.casefold()
        match = _most_confident(
            detection for detection in detections if detection.label.casefold() == wanted
        )
        if match is not None and match.is_valid(min_confidence):
            return match

    return _most_confident(
        detection for detection in detections if detection.is_valid(min_confidence)
    )


def lookup_known_size(sizes: Mapping[str, KnownSize], label: str) -> KnownSize | None:
    """Return the known size for ``label``, preferring an exact key match."""

    size = sizes.get(label)
    if size is not None:
        return size
    wanted = label.casefold()
    for key, value in sizes.items():
        if key.casefold() == wanted:
            return value
    return None
