import numpy as np
import pytest

from module_1_slot_detection.app.models import Detection, DetectionBatch
from module_2_allocation_logic.core.errors import AllocationFailure, SessionStepError
from module_2_allocation_logic.core.models import SessionState, SessionStep
from module_2_allocation_logic.core.path_generator import SyntheticPathGenerator
from module_2_allocation_logic.core.path_scorer import PathScorer
from module_2_allocation_logic.core.session import (
    apply_intensities,
    apply_manual_intensity,
    apply_optimal_path,
    apply_slot_detection,
    apply_vehicle_detection,
    reset_session,
)


def test_vehicle_step_allocates_and_generates_paths(
    slot_batch: DetectionBatch, vehicle_batch: DetectionBatch
) -> None:
    state = apply_slot_detection(reset_session(), slot_batch)
    state = apply_vehicle_detection(state, vehicle_batch, SyntheticPathGenerator(np.random.default_rng(0)))

    assert state.step is SessionStep.MEASURE_INTENSITY
    assert state.allocated_slot.slot_number == 9
    assert len(state.paths) == 4


def test_vehicle_step_requires_slots(vehicle_batch: DetectionBatch) -> None:
    with pytest.raises(SessionStepError):
        apply_vehicle_detection(reset_session(), vehicle_batch, SyntheticPathGenerator())


def test_allocation_failure_leaves_state_untouched() -> None:
    occupied = DetectionBatch(
        predictions=[Detection(x=10, y=10, width=5, height=5, confidence=0.9, class_label="car")]
    )
    vehicle = DetectionBatch(
        predictions=[Detection(x=1, y=1, width=1, height=1, confidence=0.9, class_label="van")]
    )
    state = apply_slot_detection(SessionState(), occupied)

    with pytest.raises(AllocationFailure):
        apply_vehicle_detection(state, vehicle, SyntheticPathGenerator())
    assert state.vehicle is None
    assert state.step is SessionStep.DETECT_VEHICLE


def test_manual_intensity_takes_precedence(slot_batch: DetectionBatch, vehicle_batch: DetectionBatch) -> None:
    state = apply_slot_detection(reset_session(), slot_batch)
    state = apply_vehicle_detection(state, vehicle_batch, SyntheticPathGenerator(np.random.default_rng(0)))

    state = apply_manual_intensity(state, 2, 150)
    state = apply_intensities(state, {1: 40, 2: 11, 3: 50, 4: 60})

    assert state.intensities == {1: 40, 2: 100, 3: 50, 4: 60}
    assert state.manual_intensities == frozenset({2})


def test_unknown_path_id_is_rejected(slot_batch: DetectionBatch, vehicle_batch: DetectionBatch) -> None:
    state = apply_slot_detection(reset_session(), slot_batch)
    state = apply_vehicle_detection(state, vehicle_batch, SyntheticPathGenerator(np.random.default_rng(0)))

    with pytest.raises(SessionStepError):
        apply_manual_intensity(state, 99, 10)


def test_optimal_path_completes_session(slot_batch: DetectionBatch, vehicle_batch: DetectionBatch) -> None:
    state = apply_slot_detection(reset_session(), slot_batch)
    state = apply_vehicle_detection(state, vehicle_batch, SyntheticPathGenerator(np.random.default_rng(0)))
    state = apply_intensities(state, {1: 80, 2: 10, 3: 50, 4: 60})

    state = apply_optimal_path(state, PathScorer())

    assert state.step is SessionStep.COMPLETE
    assert state.optimal_path.score == min(path.score for path in state.paths)
    assert all(path.score is not None for path in state.paths)


def test_reset_then_rerun_reproduces_results(slot_batch: DetectionBatch, vehicle_batch: DetectionBatch) -> None:
    def run() -> SessionState:
        state = apply_slot_detection(reset_session(), slot_batch)
        return apply_vehicle_detection(state, vehicle_batch, SyntheticPathGenerator(np.random.default_rng(5)))

    first = run()
    assert reset_session() == SessionState()
    second = run()

    assert first.slots == second.slots
    assert first.allocated_slot == second.allocated_slot
    assert first.paths == second.paths
