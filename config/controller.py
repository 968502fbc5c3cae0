"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

# Flat keys written by older settings files, mapped onto ``reference_sizes``.
LEGACY_REFERENCE_KEYS: dict[str, str] = {
    "cell_phone": "cell phone",
    "book": "book",
    "bottle": "bottle",
    "cup": "cup",
    "keyboard": "keyboard",
}

LEGACY_DETECTION_KEYS: tuple[str, ...] = (
    "confidence_threshold",
    "max_objects",
    "same_plane_threshold",
    "reference_min_confidence",
    "preferred_labels",
)


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path

    @classmethod
    def under(cls, config_dir: Path, config_file: str = "default.yaml") -> "ConfigPaths":
        return cls(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=config_dir / "override.yaml",
        )


def read_config(paths: ConfigPaths) -> dict[str, Any]:
    """Read default and override YAML files into one normalized mapping.

    Raises:
        OSError: If the default file cannot be read.
        yaml.YAMLError: If either file is not valid YAML.
        TypeError: If a file does not contain a mapping.
    """

    with paths.config_file.open("r", encoding="utf-8") as file:
        config = yaml.safe_load(file) or {}
    if not isinstance(config, dict):
        raise TypeError(f"{paths.config_file} must contain a mapping")

    if paths.override_file.exists():
        with paths.override_file.open("r", encoding="utf-8") as file:
            override_config = yaml.safe_load(file) or {}
        if not isinstance(override_config, dict):
            raise TypeError(f"{paths.override_file} must contain a mapping")
        if override_config:
            config = _deep_merge(config, override_config)

    return _normalize_legacy_config(config)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge dictionaries, overriding base values with override values."""

    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _normalize_legacy_config(config: dict[str, Any]) -> dict[str, Any]:
    """Fold flat detection and reference-size keys into their sections.

    Nested values win over flat ones. Flat keys are removed once folded.
    """

    normalized = dict(config)
    detection_cfg = normalized.get("detection") or {}
    sizes_cfg = normalized.get("reference_sizes") or {}
    if not isinstance(detection_cfg, dict) or not isinstance(sizes_cfg, dict):
        # Malformed sections are reported when settings are built.
        return normalized

    detection_cfg = dict(detection_cfg)
    for key in LEGACY_DETECTION_KEYS:
        if key in normalized:
            value = normalized.pop(key)
            detection_cfg.setdefault(key, value)

    sizes_cfg = {
        label: dict(size) if isinstance(size, dict) else size
        for label, size in sizes_cfg.items()
    }
    for prefix, label in LEGACY_REFERENCE_KEYS.items():
        entry = sizes_cfg.setdefault(label, {})
        if not isinstance(entry, dict):
            continue
        for axis in ("width", "height"):
            legacy_key = f"{prefix}_{axis}"
            if legacy_key in normalized:
                entry.setdefault(f"{axis}_cm", normalized.pop(legacy_key))
        if not entry:
            del sizes_cfg[label]

    if detection_cfg:
        normalized["detection"] = detection_cfg
    if sizes_cfg:
        normalized["reference_sizes"] = sizes_cfg
    return normalized


class ConfigController:
    """Singleton controller for loading and updating configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml") -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        self.paths = ConfigPaths.under(Path("config"), config_file)
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        self.config = read_config(self.paths)

    def save_config(self, config: dict[str, Any]) -> None:
        """Persist configuration to override.yaml, archiving previous overrides."""

        if self.paths.override_file.exists():
            archive_index = 1
            archive_file = self._archive_path(archive_index)
            while archive_file.exists():
                archive_index += 1
                archive_file = self._archive_path(archive_index)
            self.paths.override_file.rename(archive_file)

        with self.paths.override_file.open("w", encoding="utf-8") as file:
            yaml.safe_dump(config, file, allow_unicode=True)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def set_config(self, config: dict[str, Any]) -> None:
        """Set and persist configuration values."""

        self.config = dict(config)
        self.save_config(self.config)

    def _archive_path(self, index: int) -> Path:
        """Return the archive path for a given override index."""

        filename = f"override_{index:04d}.yaml"
        return self.paths.config_dir / filename
