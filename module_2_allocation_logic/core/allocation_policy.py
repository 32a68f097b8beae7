from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence

from module_2_allocation_logic.core.errors import AllocationFailure
from module_2_allocation_logic.core.models import Slot, VehicleCategory


class AllocationPolicy(str, Enum):
    CLOSEST = "closest"
    FURTHEST = "furthest"
    CORNER_EDGE = "corner_edge"


@dataclass(frozen=True)
class VehicleRule:
    priority: AllocationPolicy
    allow_middle: bool

    def to_dict(self) -> Dict[str, object]:
        return {"priority": self.priority.value, "allow_middle": self.allow_middle}


VEHICLE_RULES: Dict[VehicleCategory, VehicleRule] = {
    VehicleCategory.CAR: VehicleRule(AllocationPolicy.CLOSEST, allow_middle=True),
    VehicleCategory.MOTORCYCLE: VehicleRule(AllocationPolicy.FURTHEST, allow_middle=True),
    VehicleCategory.TRUCK: VehicleRule(AllocationPolicy.CORNER_EDGE, allow_middle=False),
    VehicleCategory.BUS: VehicleRule(AllocationPolicy.CORNER_EDGE, allow_middle=False),
    VehicleCategory.VAN: VehicleRule(AllocationPolicy.CORNER_EDGE, allow_middle=False),
}


def rule_for(category: VehicleCategory) -> VehicleRule:
    return VEHICLE_RULES[VehicleCategory(category)]


def _closest(slots: Sequence[Slot]) -> Slot:
    best = slots[0]
    for slot in slots[1:]:
        if slot.distance_from_entrance < best.distance_from_entrance:
            best = slot
    return best


def _furthest(slots: Sequence[Slot]) -> Slot:
    best = slots[0]
    for slot in slots[1:]:
        if slot.distance_from_entrance > best.distance_from_entrance:
            best = slot
    return best


def allocate_slot(category: VehicleCategory, empty_slots: Sequence[Slot]) -> Slot:
    """Pick one empty slot for the vehicle category.

    ``empty_slots`` must keep spatial order; ties resolve to the earlier slot.
    """

    if not empty_slots:
        raise AllocationFailure("No empty slots available")

    rule = rule_for(category)
    candidates: Sequence[Slot] = empty_slots
    if not rule.allow_middle:
        candidates = [slot for slot in empty_slots if slot.is_corner or slot.is_edge]
        if not candidates:
            return empty_slots[0]

    if rule.priority is AllocationPolicy.CLOSEST:
        return _closest(candidates)
    return _furthest(candidates)
