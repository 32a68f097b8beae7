import logging
from typing import Callable, List, Optional

import numpy as np

from module_1_slot_detection.app.config.settings import DetectionSettings
from module_1_slot_detection.app.config.settings import load_settings as load_detection_settings
from module_1_slot_detection.app.services.detector import (
    DetectionService,
    build_slot_detector,
    build_vehicle_detector,
)
from module_2_allocation_logic.adapters.intensity_simulator import IntensitySimulator
from module_2_allocation_logic.app.settings import AppSettings
from module_2_allocation_logic.core.allocation_policy import rule_for
from module_2_allocation_logic.core.errors import AllocationFailure, ParkingError
from module_2_allocation_logic.core.models import Path, ScoringWeights, SessionState, SlotSummary
from module_2_allocation_logic.core.path_generator import PathGenerator, SyntheticPathGenerator
from module_2_allocation_logic.core.path_scorer import (
    COMPARISON_PROFILE,
    PathScorer,
    compare_paths,
    estimated_travel_minutes,
    intensity_level,
)
from module_2_allocation_logic.core.session import (
    apply_intensities,
    apply_manual_intensity,
    apply_optimal_path,
    apply_slot_detection,
    apply_vehicle_detection,
    reset_session,
    with_error,
)
from module_2_allocation_logic.core.slot_normalizer import slot_placement, summarize_slots


logger = logging.getLogger(__name__)


class ParkingService:
    """Coordinate detection, allocation, path generation and scoring for one session."""

    def __init__(
        self,
        slot_detector: DetectionService,
        vehicle_detector: DetectionService,
        path_generator: PathGenerator,
        intensity_simulator: IntensitySimulator,
        scorer: Optional[PathScorer] = None,
        comparison_weights: ScoringWeights = COMPARISON_PROFILE,
    ) -> None:
        self.slot_detector = slot_detector
        self.vehicle_detector = vehicle_detector
        self.path_generator = path_generator
        self.intensity_simulator = intensity_simulator
        self.scorer = scorer or PathScorer()
        self.comparison_weights = comparison_weights
        self._state = reset_session()

    @property
    def state(self) -> SessionState:
        return self._state

    def _run(self, action: str, transition: Callable[[SessionState], SessionState]) -> SessionState:
        try:
            updated = transition(self._state)
        except AllocationFailure as exc:
            logger.warning("Allocation failed: %s", exc)
            self._state = with_error(self._state, str(exc))
        except ParkingError as exc:
            logger.warning("Failed to %s: %s", action, exc)
            self._state = with_error(self._state, f"Failed to {action}: {exc}")
        else:
            self._state = updated
        return self._state

    def detect_slots(self, image: Optional[bytes]) -> SessionState:
        if not image:
            return self._state

        def _transition(state: SessionState) -> SessionState:
            batch = self.slot_detector.detect(image)
            updated = apply_slot_detection(state, batch)
            summary = summarize_slots(updated.slots)
            logger.info(
                "Detected %d slots (%d empty, %d occupied)",
                summary.total_slots,
                len(summary.empty_slots),
                len(summary.occupied_slots),
            )
            return updated

        return self._run("detect parking slots", _transition)

    def detect_vehicle_and_allocate(self, image: Optional[bytes]) -> SessionState:
        if not image:
            return self._state

        def _transition(state: SessionState) -> SessionState:
            batch = self.vehicle_detector.detect(image)
            updated = apply_vehicle_detection(state, batch, self.path_generator)
            logger.info(
                "Vehicle %s allocated to slot %d with %d candidate paths",
                updated.vehicle.vehicle_type.value,
                updated.allocated_slot.slot_number,
                len(updated.paths),
            )
            return updated

        return self._run("detect vehicle", _transition)

    def simulate_intensities(self) -> SessionState:
        return self._run(
            "analyse path vehicle intensities",
            lambda state: apply_intensities(state, self.intensity_simulator.simulate(state.paths)),
        )

    def set_intensity(self, path_id: int, value: int) -> SessionState:
        return self._run(
            "set path vehicle intensity",
            lambda state: apply_manual_intensity(state, path_id, value),
        )

    def calculate_optimal_path(self) -> SessionState:
        def _transition(state: SessionState) -> SessionState:
            updated = apply_optimal_path(state, self.scorer)
            logger.info(
                "Optimal path: %s (score %.1f)",
                updated.optimal_path.name,
                updated.optimal_path.score,
            )
            return updated

        return self._run("calculate optimal path", _transition)

    def comparison(self) -> List[Path]:
        return compare_paths(self._state.paths, self._state.intensities, self.comparison_weights)

    def slot_summary(self) -> SlotSummary:
        return summarize_slots(self._state.slots)

    def snapshot(self) -> dict:
        state = self._state
        return {
            "step": int(state.step),
            "error": state.error,
            "summary": self.slot_summary().model_dump(),
            "slots": [slot.model_dump(mode="json") for slot in state.slots],
            "detection_image": state.detection_image,
            "vehicle": state.vehicle.model_dump(mode="json") if state.vehicle else None,
            "allocation_rule": rule_for(state.vehicle.vehicle_type).to_dict() if state.vehicle else None,
            "allocated_slot": (
                {**state.allocated_slot.model_dump(mode="json"), "placement": slot_placement(state.allocated_slot)}
                if state.allocated_slot
                else None
            ),
            "paths": [path.model_dump() for path in state.paths],
            "intensities": {
                str(path_id): {"value": value, "level": intensity_level(value)}
                for path_id, value in state.intensities.items()
            },
            "manual_intensities": sorted(state.manual_intensities),
            "optimal_path": (
                {
                    **state.optimal_path.model_dump(),
                    "estimated_minutes": estimated_travel_minutes(state.optimal_path),
                }
                if state.optimal_path
                else None
            ),
        }

    def reset(self) -> SessionState:
        self._state = reset_session()
        logger.info("Session reset")
        return self._state


def build_parking_service(
    settings: AppSettings,
    detection_settings: Optional[DetectionSettings] = None,
    slot_detector: Optional[DetectionService] = None,
    vehicle_detector: Optional[DetectionService] = None,
) -> ParkingService:
    """Wire the default collaborators from settings; detectors may be injected."""

    detection_settings = detection_settings or load_detection_settings()
    rng = np.random.default_rng(settings.random_seed)
    return ParkingService(
        slot_detector=slot_detector or build_slot_detector(detection_settings),
        vehicle_detector=vehicle_detector or build_vehicle_detector(detection_settings),
        path_generator=SyntheticPathGenerator(rng),
        intensity_simulator=IntensitySimulator(rng, delay_seconds=settings.intensity_delay_seconds),
        scorer=PathScorer(settings.scoring_weights),
        comparison_weights=settings.comparison_weights,
    )
