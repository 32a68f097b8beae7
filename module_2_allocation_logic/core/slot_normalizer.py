"""Turn unordered slot detections into an addressable grid of slots."""
import math
from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence, Tuple

from module_1_slot_detection.app.models import Detection, DetectionBatch
from module_2_allocation_logic.core.errors import DetectionFailure
from module_2_allocation_logic.core.models import Slot, SlotStatus, SlotSummary

SLOTS_PER_ROW = 8
SAME_ROW_THRESHOLD = 50.0
EMPTY_KEYWORDS = ("empty", "parking spot", "available", "free")
FALLBACK_ENTRANCE = (640.0, 480.0)


def _reading_order(a: Detection, b: Detection) -> float:
    if abs(a.y - b.y) < SAME_ROW_THRESHOLD:
        return a.x - b.x
    return a.y - b.y


def sort_spatially(detections: Iterable[Detection]) -> List[Detection]:
    """Order detections top-to-bottom, left-to-right within a row band."""

    return sorted(detections, key=cmp_to_key(_reading_order))


def is_empty_label(label: str) -> bool:
    lowered = label.lower()
    return any(keyword in lowered for keyword in EMPTY_KEYWORDS)


def grid_position(index: int) -> Tuple[int, int]:
    return index // SLOTS_PER_ROW, index % SLOTS_PER_ROW


def _boundary_flags(index: int, total_slots: int) -> Tuple[bool, bool]:
    row, col = grid_position(index)
    total_rows = math.ceil(total_slots / SLOTS_PER_ROW)
    on_boundary_row = row == 0 or row == total_rows - 1
    on_boundary_col = col == 0 or col == SLOTS_PER_ROW - 1
    return on_boundary_row and on_boundary_col, on_boundary_row or on_boundary_col


def is_corner_slot(index: int, total_slots: int) -> bool:
    return _boundary_flags(index, total_slots)[0]


def is_edge_slot(index: int, total_slots: int) -> bool:
    return _boundary_flags(index, total_slots)[1]


def entrance_point(image_width: Optional[float], image_height: Optional[float]) -> Tuple[float, float]:
    """Entrance is assumed at the bottom center of the image."""

    entrance_x = image_width / 2 if image_width else FALLBACK_ENTRANCE[0]
    entrance_y = image_height if image_height else FALLBACK_ENTRANCE[1]
    return entrance_x, entrance_y


def distance_from_entrance(detection: Detection, entrance: Tuple[float, float]) -> float:
    return math.hypot(detection.x - entrance[0], detection.y - entrance[1])


def normalize_slots(batch: DetectionBatch) -> List[Slot]:
    """Build the ordered slot list for one detection batch.

    Raises DetectionFailure when the batch holds no predictions; an empty
    parking lot picture is a failed detection, not an empty result.
    """

    if not batch.predictions:
        raise DetectionFailure("No parking slots detected in the image")

    ordered = sort_spatially(batch.predictions)
    total = len(ordered)
    entrance = entrance_point(batch.image_width, batch.image_height)
    slots: List[Slot] = []
    for index, detection in enumerate(ordered):
        row, col = grid_position(index)
        corner, edge = _boundary_flags(index, total)
        slots.append(
            Slot(
                slot_number=index + 1,
                row=row,
                col=col,
                x=detection.x,
                y=detection.y,
                width=detection.width,
                height=detection.height,
                status=SlotStatus.EMPTY if is_empty_label(detection.class_label) else SlotStatus.OCCUPIED,
                is_corner=corner,
                is_edge=edge,
                distance_from_entrance=distance_from_entrance(detection, entrance),
                confidence=detection.confidence,
                original_class=detection.class_label,
            )
        )
    return slots


def empty_slots(slots: Sequence[Slot]) -> List[Slot]:
    return [slot for slot in slots if slot.status is SlotStatus.EMPTY]


def slot_placement(slot: Slot) -> str:
    """Label a slot ``corner``, ``edge`` or ``middle``; corner wins over edge."""

    if slot.is_corner:
        return "corner"
    if slot.is_edge:
        return "edge"
    return "middle"


def summarize_slots(slots: Sequence[Slot]) -> SlotSummary:
    empty = [slot.slot_number for slot in slots if slot.status is SlotStatus.EMPTY]
    occupied = [slot.slot_number for slot in slots if slot.status is SlotStatus.OCCUPIED]
    average = sum(slot.confidence for slot in slots) / len(slots) if slots else 0.0
    occupancy = 100.0 * len(occupied) / len(slots) if slots else 0.0
    return SlotSummary(
        total_slots=len(slots),
        empty_slots=empty,
        occupied_slots=occupied,
        average_confidence=average,
        occupancy_percentage=occupancy,
    )
