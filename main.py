"""Command-line entry point for measuring objects in recorded detection frames."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any

import yaml

from config import ConfigController
from config.settings import SettingsError, load_settings
from core.logging import enable_file_logging, log_error, log_info, log_warning, logger, set_level
from vision.detections import BoundingBox, Detection, DetectionEvent
from vision.measurement import FrameMeasurement, MeasurementPipeline

LOG_FILE_NAME = "object_size.log"


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Raw command-line arguments.

    Returns:
        Parsed arguments namespace.
    """

    parser = argparse.ArgumentParser(
        description="Estimate object sizes from detection frames using a reference object."
    )
    parser.add_argument(
        "--detections",
        type=Path,
        help="YAML or JSON file with a list of frames of detections.",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Run diagnostics probes and exit.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this file.",
    )
    return parser.parse_args(argv)


def _parse_detection(raw: dict[str, Any]) -> Detection:
    left, top, right, bottom = (float(value) for value in raw["box"])
    return Detection(
        label=str(raw["label"]),
        confidence=float(raw["confidence"]),
        bounding_box=BoundingBox(left, top, right, bottom),
    )


def load_frames(path: Path) -> list[DetectionEvent]:
    """Read detection frames from ``path``.

    Each frame is either a list of detections or a mapping with a
    ``detections`` list and optional ``timestamp_ms``/``frame_id``. A detection
    is a mapping with ``label``, ``confidence`` and ``box`` as
    ``[left, top, right, bottom]``.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content does not match the layout above.
    """

    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or []
    if isinstance(raw, dict):
        raw = raw.get("frames", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a list of frames")

    events: list[DetectionEvent] = []
    for index, frame in enumerate(raw):
        if isinstance(frame, dict):
            items = frame.get("detections") or []
            timestamp_ms = int(frame.get("timestamp_ms", 0))
            frame_id = frame.get("frame_id", index)
        else:
            items = frame or []
            timestamp_ms = 0
            frame_id = index
        try:
            detections = [_parse_detection(item) for item in items]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Frame {index} has a malformed detection: {exc}") from exc
        events.append(
            DetectionEvent(
                timestamp_ms=timestamp_ms,
                detections=detections,
                frame_id=frame_id,
                source=str(path),
            )
        )
    return events


def format_frame(event: DetectionEvent, result: FrameMeasurement) -> str:
    """Return the printable report for one frame."""

    lines = [f"Frame {event.frame_id}: {len(result.detections)} detections"]
    if result.reference is None:
        lines.append("  reference: none")
    else:
        lines.append(
            f"  reference: {result.reference.label} ({result.reference.confidence:.2f})"
        )
    for line in result.overlay_lines():
        lines.append(f"  {line}")
    return "\n".join(lines)


def _load_config() -> dict[str, Any]:
    """Return the loaded configuration, or an empty one when none is shipped."""

    try:
        return ConfigController.get_instance().get_config()
    except FileNotFoundError:
        log_warning("No config/default.yaml found, using default settings")
        return {}


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    if args.log_file:
        enable_file_logging(args.log_file)
        logger.info("Writing logs to %s", args.log_file)

    if args.diagnostics:
        from diagnostics.run import main as diagnostics_main

        return diagnostics_main([])

    if args.detections is None:
        log_error("Nothing to do: pass --detections FILE or --diagnostics")
        return 1

    try:
        config = _load_config()
        set_level(str(config.get("logging_level", "INFO")))
        settings = load_settings(config)
    except (OSError, SettingsError, TypeError, yaml.YAMLError) as exc:
        log_error(f"Could not load settings: {exc}")
        return 1

    if not args.log_file and config.get("file_logging_enabled", False):
        log_file_path = Path(str(config.get("log_dir", "./log/"))).expanduser() / LOG_FILE_NAME
        try:
            enable_file_logging(log_file_path)
        except OSError as exc:
            log_warning(f"File logging unavailable at {log_file_path}: {exc}")
        else:
            logger.info("Writing logs to %s", log_file_path)

    try:
        events = load_frames(args.detections)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        log_error(f"Could not read detections from {args.detections}: {exc}")
        return 1

    log_info(f"Measuring {len(events)} frames from {args.detections}")
    pipeline = MeasurementPipeline(settings)
    for event in events:
        print(format_frame(event, pipeline.process_event(event)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
