"""Convenience CLI for running the whole allocation flow on two images and printing the outputs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from module_1_slot_detection.app.config.settings import load_settings as load_detection_settings
from module_1_slot_detection.app.detect import setup_logging
from module_2_allocation_logic.app.settings import get_settings
from module_2_allocation_logic.services.parking_service import ParkingService, build_parking_service


def _dump(obj: object) -> str:
    return json.dumps(obj, indent=2, default=str)


def _parse_intensities(values: List[str]) -> Dict[int, int]:
    parsed: Dict[int, int] = {}
    for item in values:
        path_id, _, value = item.partition("=")
        try:
            parsed[int(path_id)] = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid intensity override '{item}', expected ID=VALUE")
    return parsed


def run_flow(
    service: ParkingService,
    parking_image: bytes,
    vehicle_image: bytes,
    overrides: Optional[Dict[int, int]] = None,
) -> dict:
    steps = (
        lambda: service.detect_slots(parking_image),
        lambda: service.detect_vehicle_and_allocate(vehicle_image),
        service.simulate_intensities,
    )
    for step in steps:
        state = step()
        if state.error:
            return service.snapshot()
    for path_id, value in (overrides or {}).items():
        service.set_intensity(path_id, value)
    service.calculate_optimal_path()
    return service.snapshot()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Allocate a parking slot and choose a path.")
    parser.add_argument("parking_image", type=Path, help="Image of the parking lot.")
    parser.add_argument("vehicle_image", type=Path, help="Image of the arriving vehicle.")
    parser.add_argument("--api-key", type=str, default=None, help="Detection API key.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for synthetic paths and intensities.")
    parser.add_argument(
        "--intensity",
        action="append",
        default=[],
        metavar="ID=VALUE",
        help="Manual vehicle intensity for a path; may be repeated.",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Also print the comparison table scored with the comparison profile.",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.seed is not None:
        settings.random_seed = args.seed
    detection_overrides = {"api_key": args.api_key} if args.api_key else {}
    detection_settings = load_detection_settings(**detection_overrides)
    setup_logging(settings.log_format)

    try:
        overrides = _parse_intensities(args.intensity)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    service = build_parking_service(settings, detection_settings)
    result = run_flow(
        service,
        args.parking_image.read_bytes(),
        args.vehicle_image.read_bytes(),
        overrides,
    )
    result.pop("detection_image", None)
    print(_dump(result))
    if args.compare:
        print("Comparison:")
        print(_dump([path.model_dump() for path in service.comparison()]))
    if result.get("error"):
        logging.getLogger(__name__).error(result["error"])
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
