from typing import Callable, List, Optional

import numpy as np
import pytest

from module_1_slot_detection.app.models import Detection, DetectionBatch
from module_2_allocation_logic.adapters.intensity_simulator import IntensitySimulator
from module_2_allocation_logic.core.path_generator import SyntheticPathGenerator
from module_2_allocation_logic.services.parking_service import ParkingService


class FakeDetector:
    def __init__(self, batch: Optional[DetectionBatch] = None, error: Optional[Exception] = None) -> None:
        self.batch = batch
        self.error = error
        self.calls = 0

    def detect(self, image: bytes) -> DetectionBatch:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.batch


def _slot(x: float, y: float, label: str, confidence: float = 0.9) -> Detection:
    return Detection(x=x, y=y, width=40, height=80, confidence=confidence, class_label=label)


@pytest.fixture()
def slot_batch() -> DetectionBatch:
    # Two physical rows, shuffled. Entrance sits at (450, 600).
    predictions: List[Detection] = [
        _slot(300, 310, "space-occupied"),
        _slot(100, 105, "car"),
        _slot(800, 95, "Empty"),
        _slot(200, 100, "car"),
        _slot(400, 110, "free"),
        _slot(100, 300, "Available slot"),
        _slot(500, 100, "car"),
        _slot(600, 102, "car"),
        _slot(700, 98, "car"),
        _slot(300, 104, "car"),
    ]
    return DetectionBatch(predictions=predictions, image_width=900, image_height=600)


@pytest.fixture()
def vehicle_batch() -> DetectionBatch:
    return DetectionBatch(
        predictions=[
            Detection(x=10, y=10, width=5, height=5, confidence=0.55, class_label="bus"),
            Detection(x=20, y=20, width=50, height=40, confidence=0.92, class_label="Sedan"),
        ]
    )


@pytest.fixture()
def make_service() -> Callable[..., ParkingService]:
    def _build(
        slot_detector: FakeDetector,
        vehicle_detector: FakeDetector,
        seed: int = 7,
    ) -> ParkingService:
        rng = np.random.default_rng(seed)
        return ParkingService(
            slot_detector=slot_detector,
            vehicle_detector=vehicle_detector,
            path_generator=SyntheticPathGenerator(rng),
            intensity_simulator=IntensitySimulator(rng, delay_seconds=0.0),
        )

    return _build


@pytest.fixture()
def fake_detector() -> Callable[..., FakeDetector]:
    return FakeDetector
