"""Reference-based size estimation.

Converts a target bounding box to centimeters using the pixels-per-centimeter
scale of a reference object with known dimensions.

Assumptions:
    - The camera looks roughly perpendicular onto the supporting surface.
    - Reference and target rest on the same surface, approximated by the
      vertical distance between their box centers.
    - The configured reference dimensions are accurate.

Near-degenerate reference boxes that still pass validation are not clamped; the
resulting estimates can be numerically unstable.
"""

from __future__ import annotations

from vision.detections import BoundingBox, SizeEstimate

SAME_PLANE_THRESHOLD = 0.2


def are_in_same_plane(
    box_a: BoundingBox,
    box_b: BoundingBox,
    threshold: float = SAME_PLANE_THRESHOLD,
) -> bool:
    """Return whether two boxes sit close enough vertically to share a surface."""

    return abs(box_a.center_y() - box_b.center_y()) < threshold


def estimate_size(
    reference_box: BoundingBox,
    target_box: BoundingBox,
    reference_real_width: float,
    reference_real_height: float,
    same_plane_threshold: float = SAME_PLANE_THRESHOLD,
) -> SizeEstimate | None:
    """Estimate the target's real-world size from a reference of known size.

    Args:
        reference_box: Normalized box of the reference object.
        target_box: Normalized box of the object to measure.
        reference_real_width: Known reference width in centimeters.
        reference_real_height: Known reference height in centimeters.
        same_plane_threshold: Maximum vertical center distance, exclusive.

    Returns:
        The estimate, or ``None`` when either box is invalid, a reference
        dimension is not positive, or the objects are not in the same plane.
    """

    if not reference_box.is_valid() or not target_box.is_valid():
        return None

    if reference_real_width <= 0 or reference_real_height <= 0:
        return None

    if not are_in_same_plane(reference_box, target_box, same_plane_threshold):
        return None

    px_per_cm_width = reference_box.width() / reference_real_width
    px_per_cm_height = reference_box.height() / reference_real_height

    target_width_cm = target_box.width() / px_per_cm_width
    target_height_cm = target_box.height() / px_per_cm_height

    # Distortion of the reference box's proportions discounts the estimate.
    observed_ratio = reference_box.width() / reference_box.height()
    expected_ratio = reference_real_width / reference_real_height
    ratio_error = abs(observed_ratio - expected_ratio) / expected_ratio
    confidence = min(max(1.0 - ratio_error, 0.0), 1.0)

    return SizeEstimate(
        width_cm=target_width_cm,
        height_cm=target_height_cm,
        confidence=confidence,
    )
