"""Diagnostics routines for the configuration subsystem."""

from __future__ import annotations

from pathlib import Path

import yaml

from config.controller import ConfigPaths, read_config
from config.settings import SettingsError, load_settings
from diagnostics.models import DiagnosticResult, DiagnosticStatus


def probe(base_dir: Path | None = None) -> DiagnosticResult:
    """Run a configuration probe to validate config files and settings.

    Args:
        base_dir: Optional base directory for offline testing.

    Returns:
        Diagnostic result indicating config readiness.
    """

    name = "config"
    try:
        root_dir = base_dir if base_dir is not None else Path.cwd()
        paths = ConfigPaths.under(root_dir / "config")

        if not paths.config_dir.exists():
            return DiagnosticResult(
                name=name,
                status=DiagnosticStatus.FAIL,
                details=f"Config directory missing at {paths.config_dir}",
            )

        if not paths.config_file.exists():
            return DiagnosticResult(
                name=name,
                status=DiagnosticStatus.FAIL,
                details=f"Missing default config at {paths.config_file}",
            )

        settings = load_settings(read_config(paths))
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.PASS,
            details=(
                f"Config files readable at {paths.config_dir} "
                f"({len(settings.reference_sizes)} reference sizes)"
            ),
        )
    except OSError as exc:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Config access failed: {exc}",
        )
    except (yaml.YAMLError, TypeError) as exc:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Config parse failed: {exc}",
        )
    except SettingsError as exc:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.WARN,
            details=f"Config settings invalid: {exc}",
        )
