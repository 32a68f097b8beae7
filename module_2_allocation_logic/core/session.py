"""Session transitions for the parking flow.

Each step takes the current ``SessionState`` and returns a new one, or raises
a ``ParkingError`` subclass without touching the input. Later-stage data is
cleared whenever an earlier stage is recomputed.
"""
from typing import Mapping

from module_1_slot_detection.app.models import DetectionBatch
from module_2_allocation_logic.core.allocation_policy import allocate_slot
from module_2_allocation_logic.core.errors import SessionStepError
from module_2_allocation_logic.core.models import SessionState, SessionStep
from module_2_allocation_logic.core.path_generator import PathGenerator
from module_2_allocation_logic.core.path_scorer import PathScorer
from module_2_allocation_logic.core.slot_normalizer import empty_slots, normalize_slots
from module_2_allocation_logic.core.vehicle_classifier import select_vehicle

MIN_INTENSITY = 0
MAX_INTENSITY = 100


def clamp_intensity(value: int) -> int:
    return max(MIN_INTENSITY, min(MAX_INTENSITY, int(value)))


def reset_session() -> SessionState:
    return SessionState()


def with_error(state: SessionState, message: str) -> SessionState:
    return state.model_copy(update={"error": message})


def apply_slot_detection(state: SessionState, batch: DetectionBatch) -> SessionState:
    slots = normalize_slots(batch)
    return SessionState(
        step=SessionStep.DETECT_VEHICLE,
        slots=slots,
        detection_image=batch.annotated_image,
    )


def apply_vehicle_detection(
    state: SessionState,
    batch: DetectionBatch,
    generator: PathGenerator,
) -> SessionState:
    if not state.slots:
        raise SessionStepError("Detect parking slots before detecting the vehicle")
    vehicle = select_vehicle(batch)
    slot = allocate_slot(vehicle.vehicle_type, empty_slots(state.slots))
    paths = generator.generate(slot)
    return state.model_copy(
        update={
            "step": SessionStep.MEASURE_INTENSITY,
            "vehicle": vehicle,
            "allocated_slot": slot,
            "paths": paths,
            "intensities": {},
            "manual_intensities": frozenset(),
            "optimal_path": None,
            "error": None,
        }
    )


def _require_paths(state: SessionState) -> None:
    if not state.paths:
        raise SessionStepError("Allocate a slot before analysing paths")


def apply_intensities(state: SessionState, simulated: Mapping[int, int]) -> SessionState:
    """Store simulated intensities; manual values already entered are kept."""

    _require_paths(state)
    merged = {path.id: clamp_intensity(simulated.get(path.id, 0)) for path in state.paths}
    for path_id in state.manual_intensities:
        merged[path_id] = state.intensities[path_id]
    return state.model_copy(
        update={
            "step": SessionStep.SCORE_PATHS,
            "intensities": merged,
            "optimal_path": None,
            "error": None,
        }
    )


def apply_manual_intensity(state: SessionState, path_id: int, value: int) -> SessionState:
    _require_paths(state)
    if path_id not in {path.id for path in state.paths}:
        raise SessionStepError(f"Unknown path id {path_id}")
    intensities = dict(state.intensities)
    intensities[path_id] = clamp_intensity(value)
    step = SessionStep.SCORE_PATHS if state.step is SessionStep.COMPLETE else state.step
    return state.model_copy(
        update={
            "step": step,
            "intensities": intensities,
            "manual_intensities": state.manual_intensities | {path_id},
            "optimal_path": None,
            "error": None,
        }
    )


def apply_optimal_path(state: SessionState, scorer: PathScorer) -> SessionState:
    _require_paths(state)
    result = scorer.select_optimal(state.paths, state.intensities)
    return state.model_copy(
        update={
            "step": SessionStep.COMPLETE,
            "paths": result.paths,
            "optimal_path": result.optimal,
            "error": None,
        }
    )
