"""Tests for reference object selection."""

from __future__ import annotations

from vision.detections import BoundingBox, Detection, KnownSize
from vision.reference import KNOWN_OBJECT_SIZES, find_best_reference, lookup_known_size


def _detection(
    label: str,
    left: float,
    top: float,
    right: float,
    bottom: float,
    confidence: float = 0.9,
) -> Detection:
    return Detection(
        label=label,
        confidence=confidence,
        bounding_box=BoundingBox(left, top, right, bottom),
    )


def test_returns_first_preferred_label_despite_higher_confidence_cup() -> None:
    detections = [
        _detection("person", 0.1, 0.1, 0.2, 0.3, 0.85),
        _detection("cell phone", 0.3, 0.1, 0.4, 0.2, 0.75),
        _detection("cup", 0.5, 0.1, 0.6, 0.15, 0.90),
    ]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "cell phone"


def test_returns_none_when_only_candidate_is_below_floor() -> None:
    detections = [_detection("cell phone", 0.1, 0.1, 0.2, 0.2, 0.30)]

    assert find_best_reference(detections) is None


def test_falls_back_to_highest_confidence_when_no_preferred_label() -> None:
    detections = [
        _detection("person", 0.1, 0.1, 0.2, 0.3, 0.70),
        _detection("chair", 0.3, 0.1, 0.4, 0.2, 0.85),
        _detection("laptop", 0.5, 0.1, 0.6, 0.15, 0.65),
    ]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "chair"


def test_preferred_label_beats_higher_confidence_non_preferred() -> None:
    detections = [
        _detection("person", 0.1, 0.1, 0.2, 0.3, 0.95),
        _detection("cell phone", 0.3, 0.1, 0.4, 0.2, 0.70),
    ]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "cell phone"


def test_empty_detections_returns_none() -> None:
    assert find_best_reference([]) is None


def test_label_match_ignores_case() -> None:
    detections = [_detection("CELL PHONE", 0.1, 0.1, 0.2, 0.2, 0.80)]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "CELL PHONE"


def test_best_match_of_label_must_qualify_before_next_label() -> None:
    detections = [
        _detection("cell phone", 0.1, 0.1, 0.2, 0.2, 0.40),
        _detection("book", 0.3, 0.1, 0.5, 0.3, 0.65),
    ]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "book"


def test_preferred_match_with_invalid_box_falls_through() -> None:
    detections = [
        _detection("cell phone", 0.3, 0.1, 0.2, 0.2, 0.95),
        _detection("chair", 0.3, 0.1, 0.4, 0.2, 0.70),
    ]

    result = find_best_reference(detections)

    assert result is not None
    assert result.label == "chair"


def test_highest_confidence_instance_of_label_is_chosen() -> None:
    low = _detection("cup", 0.1, 0.1, 0.2, 0.2, 0.70)
    high = _detection("cup", 0.5, 0.1, 0.6, 0.2, 0.80)

    assert find_best_reference([low, high]) is high


def test_equal_confidence_ties_resolve_to_input_order() -> None:
    first = _detection("cup", 0.1, 0.1, 0.2, 0.2, 0.80)
    second = _detection("cup", 0.5, 0.1, 0.6, 0.2, 0.80)
    third = _detection("chair", 0.1, 0.5, 0.2, 0.6, 0.80)
    fourth = _detection("table", 0.5, 0.5, 0.6, 0.6, 0.80)

    assert find_best_reference([first, second]) is first
    assert find_best_reference([third, fourth]) is third


def test_custom_preferred_labels_and_floor() -> None:
    detections = [
        _detection("cell phone", 0.1, 0.1, 0.2, 0.2, 0.90),
        _detection("remote", 0.3, 0.1, 0.4, 0.2, 0.55),
    ]

    result = find_best_reference(detections, preferred_labels=["remote"], min_confidence=0.5)

    assert result is not None
    assert result.label == "remote"


def test_known_object_sizes_defaults() -> None:
    assert KNOWN_OBJECT_SIZES["cell phone"] == KnownSize(7.0, 15.0)
    assert KNOWN_OBJECT_SIZES["book"] == KnownSize(15.0, 23.0)
    assert KNOWN_OBJECT_SIZES["bottle"] == KnownSize(7.0, 25.0)
    assert KNOWN_OBJECT_SIZES["cup"] == KnownSize(8.0, 10.0)
    assert KNOWN_OBJECT_SIZES["keyboard"] == KnownSize(44.0, 13.0)
    for size in KNOWN_OBJECT_SIZES.values():
        assert size.width_cm > 0
        assert size.height_cm > 0


def test_lookup_known_size_prefers_exact_then_case_insensitive() -> None:
    sizes = {"cell phone": KnownSize(7.0, 15.0), "Cell Phone": KnownSize(8.0, 16.0)}

    assert lookup_known_size(sizes, "Cell Phone") == KnownSize(8.0, 16.0)
    assert lookup_known_size(sizes, "CELL PHONE") == KnownSize(7.0, 15.0)
    assert lookup_known_size(sizes, "chair") is None
