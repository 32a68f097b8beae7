from typing import Tuple

from module_1_slot_detection.app.models import DetectionBatch
from module_2_allocation_logic.core.errors import DetectionFailure
from module_2_allocation_logic.core.models import VehicleCategory, VehicleDetection

# Checked in order; the first keyword found in the label wins.
CLASS_KEYWORDS: Tuple[Tuple[str, VehicleCategory], ...] = (
    ("car", VehicleCategory.CAR),
    ("sedan", VehicleCategory.CAR),
    ("hatchback", VehicleCategory.CAR),
    ("suv", VehicleCategory.CAR),
    ("truck", VehicleCategory.TRUCK),
    ("pickup", VehicleCategory.TRUCK),
    ("bus", VehicleCategory.BUS),
    ("motorcycle", VehicleCategory.MOTORCYCLE),
    ("motorbike", VehicleCategory.MOTORCYCLE),
    ("bike", VehicleCategory.MOTORCYCLE),
    ("scooter", VehicleCategory.MOTORCYCLE),
    ("van", VehicleCategory.VAN),
    ("minivan", VehicleCategory.VAN),
)
DEFAULT_CATEGORY = VehicleCategory.CAR


def classify_label(label: str) -> VehicleCategory:
    """Map a free-text detector label onto a canonical vehicle category."""

    lowered = label.lower()
    for keyword, category in CLASS_KEYWORDS:
        if keyword in lowered:
            return category
    return DEFAULT_CATEGORY


def select_vehicle(batch: DetectionBatch) -> VehicleDetection:
    """Keep the highest-confidence prediction and classify it."""

    if not batch.predictions:
        raise DetectionFailure("No vehicle detected in the image")
    best = batch.predictions[0]
    for candidate in batch.predictions[1:]:
        if candidate.confidence > best.confidence:
            best = candidate
    return VehicleDetection(
        vehicle_type=classify_label(best.class_label),
        confidence=best.confidence,
        x=best.x,
        y=best.y,
        width=best.width,
        height=best.height,
        original_class=best.class_label,
    )
