"""Tests for config diagnostics."""

from __future__ import annotations

from diagnostics.models import DiagnosticStatus
from config.diagnostics import probe


def test_config_probe_offline(tmp_path) -> None:
    """Config probe should pass with a default config present."""

    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "default.yaml").write_text("{}", encoding="utf-8")

    result = probe(base_dir=tmp_path)
    assert result.status is DiagnosticStatus.PASS
    assert "5 reference sizes" in result.details


def test_config_probe_missing_directory(tmp_path) -> None:
    result = probe(base_dir=tmp_path)
    assert result.status is DiagnosticStatus.FAIL


def test_config_probe_missing_default_file(tmp_path) -> None:
    (tmp_path / "config").mkdir()

    result = probe(base_dir=tmp_path)
    assert result.status is DiagnosticStatus.FAIL
    assert "default.yaml" in result.details


def test_config_probe_unparseable_yaml(tmp_path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text("detection: [unclosed", encoding="utf-8")

    result = probe(base_dir=tmp_path)
    assert result.status is DiagnosticStatus.FAIL


def test_config_probe_warns_on_out_of_range_settings(tmp_path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text("{}", encoding="utf-8")
    (config_dir / "override.yaml").write_text("max_objects: 0\n", encoding="utf-8")

    result = probe(base_dir=tmp_path)
    assert result.status is DiagnosticStatus.WARN
