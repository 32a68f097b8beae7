from typing import List

import pytest

from module_2_allocation_logic.core.allocation_policy import (
    VEHICLE_RULES,
    AllocationPolicy,
    VehicleRule,
    allocate_slot,
    rule_for,
)
from module_2_allocation_logic.core.errors import AllocationFailure
from module_2_allocation_logic.core.models import Slot, SlotStatus, VehicleCategory


def build_slots(distances: List[float], edges: List[bool]) -> List[Slot]:
    return [
        Slot(
            slot_number=index + 1,
            row=index // 8,
            col=index % 8,
            x=float(index),
            y=0.0,
            status=SlotStatus.EMPTY,
            is_corner=False,
            is_edge=edge,
            distance_from_entrance=distance,
            confidence=0.9,
            original_class="empty",
        )
        for index, (distance, edge) in enumerate(zip(distances, edges))
    ]


def test_car_takes_closest_and_motorcycle_furthest() -> None:
    slots = build_slots([50, 120, 80], [False, False, False])

    assert allocate_slot(VehicleCategory.CAR, slots).distance_from_entrance == 50
    assert allocate_slot(VehicleCategory.MOTORCYCLE, slots).distance_from_entrance == 120


def test_large_vehicle_falls_back_to_first_empty_slot() -> None:
    slots = build_slots([50, 120, 80], [False, False, False])

    for category in (VehicleCategory.TRUCK, VehicleCategory.BUS, VehicleCategory.VAN):
        assert allocate_slot(category, slots).slot_number == 1


def test_large_vehicle_prefers_furthest_boundary_slot() -> None:
    slots = build_slots([50, 120, 80, 60], [True, False, True, False])

    assert allocate_slot(VehicleCategory.TRUCK, slots).slot_number == 3


def test_ties_resolve_to_first_slot() -> None:
    slots = build_slots([70, 70, 70], [True, True, True])

    assert allocate_slot(VehicleCategory.CAR, slots).slot_number == 1
    assert allocate_slot(VehicleCategory.MOTORCYCLE, slots).slot_number == 1
    assert allocate_slot(VehicleCategory.BUS, slots).slot_number == 1


def test_no_empty_slots_is_an_allocation_failure() -> None:
    with pytest.raises(AllocationFailure, match="No empty slots"):
        allocate_slot(VehicleCategory.CAR, [])


def test_rule_table_describes_each_category() -> None:
    assert rule_for(VehicleCategory.CAR).to_dict() == {"priority": "closest", "allow_middle": True}
    assert rule_for(VehicleCategory.MOTORCYCLE).to_dict() == {"priority": "furthest", "allow_middle": True}
    for category in (VehicleCategory.TRUCK, VehicleCategory.BUS, VehicleCategory.VAN):
        assert rule_for(category).to_dict() == {"priority": "corner_edge", "allow_middle": False}


def test_disallowing_middle_slots_limits_candidates(monkeypatch) -> None:
    monkeypatch.setitem(
        VEHICLE_RULES,
        VehicleCategory.CAR,
        VehicleRule(AllocationPolicy.CLOSEST, allow_middle=False),
    )
    slots = build_slots([50, 120, 80, 60], [False, True, True, False])

    assert allocate_slot(VehicleCategory.CAR, slots).slot_number == 3
