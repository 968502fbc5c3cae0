"""Measurement settings loaded from the YAML configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from vision.detections import KnownSize
from vision.reference import DEFAULT_REFERENCE_LABELS, KNOWN_OBJECT_SIZES, MIN_REFERENCE_CONFIDENCE
from vision.sizing import SAME_PLANE_THRESHOLD


class SettingsError(ValueError):
    """Raised when configuration values cannot form valid settings."""


@dataclass(frozen=True)
class AppSettings:
    """User-adjustable parameters for the measurement pipeline."""

    confidence_threshold: float = 0.5
    max_objects: int = 10
    same_plane_threshold: float = SAME_PLANE_THRESHOLD
    reference_min_confidence: float = MIN_REFERENCE_CONFIDENCE
    preferred_labels: tuple[str, ...] = DEFAULT_REFERENCE_LABELS
    reference_sizes: Mapping[str, KnownSize] = field(
        default_factory=lambda: dict(KNOWN_OBJECT_SIZES)
    )

    def get_reference_object_sizes(self) -> dict[str, KnownSize]:
        return dict(self.reference_sizes)

    def with_reference_size(self, label: str, width_cm: float, height_cm: float) -> "AppSettings":
        """Return a copy with one reference object's size replaced."""

        sizes = dict(self.reference_sizes)
        sizes[label] = KnownSize(float(width_cm), float(height_cm))
        return replace(self, reference_sizes=sizes)

    def is_valid(self) -> bool:
        """Validate settings values are within acceptable ranges."""

        return (
            0.0 <= self.confidence_threshold <= 1.0
            and 1 <= self.max_objects <= 50
            and 0.0 <= self.same_plane_threshold <= 1.0
            and 0.0 <= self.reference_min_confidence <= 1.0
            and all(
                size.width_cm > 0 and size.height_cm > 0
                for size in self.reference_sizes.values()
            )
        )

    def to_config(self) -> dict[str, Any]:
        """Return the settings in configuration-file layout."""

        return {
            "detection": {
                "confidence_threshold": self.confidence_threshold,
                "max_objects": self.max_objects,
                "same_plane_threshold": self.same_plane_threshold,
                "reference_min_confidence": self.reference_min_confidence,
                "preferred_labels": list(self.preferred_labels),
            },
            "reference_sizes": {
                label: {"width_cm": size.width_cm, "height_cm": size.height_cm}
                for label, size in self.reference_sizes.items()
            },
        }


def _parse_reference_sizes(value: Any) -> dict[str, KnownSize]:
    if not isinstance(value, Mapping):
        raise SettingsError("reference_sizes must be a mapping of label to size")
    sizes: dict[str, KnownSize] = {}
    for label, entry in value.items():
        if not isinstance(entry, Mapping):
            raise SettingsError(f"reference size for {label!r} must be a mapping")
        default = KNOWN_OBJECT_SIZES.get(str(label))
        width = entry.get("width_cm", default.width_cm if default else None)
        height = entry.get("height_cm", default.height_cm if default else None)
        if width is None or height is None:
            raise SettingsError(f"reference size for {label!r} needs width_cm and height_cm")
        sizes[str(label)] = KnownSize(float(width), float(height))
    return sizes


def load_settings(config: Mapping[str, Any] | None = None) -> AppSettings:
    """Build settings from a configuration mapping.

    Args:
        config: Parsed configuration. Defaults to the ConfigController's
            current configuration.

    Returns:
        Validated settings, with defaults for missing keys.

    Raises:
        SettingsError: If a value has the wrong type or is out of range.
    """

    if config is None:
        from config import ConfigController

        config = ConfigController.get_instance().get_config()

    defaults = AppSettings()
    detection_cfg = config.get("detection") or {}
    if not isinstance(detection_cfg, Mapping):
        raise SettingsError("detection must be a mapping")
    try:
        labels_value = detection_cfg.get("preferred_labels", defaults.preferred_labels)
        if isinstance(labels_value, str) or not isinstance(labels_value, (list, tuple)):
            raise SettingsError("preferred_labels must be a list of labels")
        sizes_value = config.get("reference_sizes")
        settings = AppSettings(
            confidence_threshold=float(
                detection_cfg.get("confidence_threshold", defaults.confidence_threshold)
            ),
            max_objects=int(detection_cfg.get("max_objects", defaults.max_objects)),
            same_plane_threshold=float(
                detection_cfg.get("same_plane_threshold", defaults.same_plane_threshold)
            ),
            reference_min_confidence=float(
                detection_cfg.get(
                    "reference_min_confidence", defaults.reference_min_confidence
                )
            ),
            preferred_labels=tuple(str(label) for label in labels_value),
            reference_sizes=(
                defaults.get_reference_object_sizes()
                if sizes_value is None
                else {
                    **defaults.get_reference_object_sizes(),
                    **_parse_reference_sizes(sizes_value),
                }
            ),
        )
    except SettingsError:
        raise
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"Invalid settings value: {exc}") from exc

    if not settings.is_valid():
        raise SettingsError(f"Settings out of range: {settings}")
    return settings


def save_settings(settings: AppSettings) -> None:
    """Persist settings through the ConfigController override file."""

    if not settings.is_valid():
        raise SettingsError(f"Refusing to save out-of-range settings: {settings}")

    from config import ConfigController

    controller = ConfigController.get_instance()
    config = controller.get_config()
    config.update(settings.to_config())
    controller.set_config(config)


def reset_to_defaults() -> AppSettings:
    """Persist and return the default settings."""

    settings = AppSettings()
    save_settings(settings)
    return settings
