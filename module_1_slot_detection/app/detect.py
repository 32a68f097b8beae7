"""Entry point for running one detection model against a single image."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config.settings import DetectionSettings, load_settings
from .errors import ParkingError
from .services.detector import build_slot_detector, build_vehicle_detector
from .utils.image import save_annotated_image

LOGGER = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Module 1 - Parking Slot and Vehicle Detection")
    parser.add_argument("image", type=str, help="Path to the image to analyse")
    parser.add_argument("--target", choices=["slots", "vehicle"], default="slots", help="Which model to call")
    parser.add_argument("--api-key", type=str, default=None, help="Detection API key")
    parser.add_argument("--conf", type=int, default=None, help="Confidence threshold (0-100)")
    parser.add_argument("--save-annotated", action="store_true", help="Write the annotated image if returned")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Logging format")
    return parser


def setup_logging(log_format: str) -> None:
    log_level = logging.INFO
    if log_format == "json":
        formatter = logging.Formatter('{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}')
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logging.basicConfig(level=log_level, handlers=[handler])


def resolve_settings(args: argparse.Namespace) -> DetectionSettings:
    overrides = {}
    if args.api_key:
        overrides["api_key"] = args.api_key
    if args.conf is not None:
        key = "slot_confidence" if args.target == "slots" else "vehicle_confidence"
        overrides[key] = args.conf
    if args.log_format:
        overrides["log_format"] = args.log_format
    return load_settings(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = resolve_settings(args)
    setup_logging(settings.log_format)

    image_path = Path(args.image)
    if not image_path.is_file():
        LOGGER.error("Image not found: %s", image_path)
        return 2

    builder = build_slot_detector if args.target == "slots" else build_vehicle_detector
    detector = builder(settings)
    try:
        batch = detector.detect(image_path.read_bytes())
    except ParkingError as exc:
        LOGGER.error("Detection failed: %s", exc)
        return 1
    finally:
        detector.close()

    print(json.dumps(batch.to_dict(), indent=2))
    if args.save_annotated and batch.annotated_image:
        target = settings.annotated_output_dir / f"{image_path.stem}_{args.target}.jpg"
        saved = save_annotated_image(batch.annotated_image, target)
        if saved:
            LOGGER.info("Annotated image written to %s", saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
