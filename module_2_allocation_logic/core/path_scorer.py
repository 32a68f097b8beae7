import math
from typing import Dict, Iterable, List, Mapping, Optional

from module_2_allocation_logic.core.models import Path, ScoredPaths, ScoringWeights

# Selection always uses the optimal profile; the comparison profile only feeds
# the side-by-side display table.
OPTIMAL_PROFILE = ScoringWeights(distance=0.1, junctions=0.6, intensity=0.3)
COMPARISON_PROFILE = ScoringWeights(distance=0.4, junctions=1.2, intensity=0.8)
SCORING_PROFILES: Dict[str, ScoringWeights] = {
    "optimal": OPTIMAL_PROFILE,
    "comparison": COMPARISON_PROFILE,
}

# Display estimate only: path distances are pixels, not metres.
PIXELS_PER_MINUTE = 30


def intensity_level(intensity: int) -> str:
    if intensity < 30:
        return "low"
    if intensity < 70:
        return "medium"
    return "high"


def estimated_travel_minutes(path: Path) -> int:
    return math.ceil(path.distance / PIXELS_PER_MINUTE)


class PathScorer:
    """Score candidate paths by distance, junction count, and vehicle intensity. Lower is better."""

    def __init__(self, weights: ScoringWeights = OPTIMAL_PROFILE) -> None:
        self.weights = weights

    def score(self, path: Path, intensity: Optional[int] = None) -> float:
        if intensity is None:
            intensity = path.vehicle_intensity or 0
        return (
            path.distance * self.weights.distance
            + path.t_junctions * self.weights.junctions
            + intensity * self.weights.intensity
        )

    def score_paths(
        self,
        paths: Iterable[Path],
        intensities: Optional[Mapping[int, int]] = None,
    ) -> List[Path]:
        """Return copies of ``paths`` with intensity and score attached, in input order."""

        intensities = intensities or {}
        scored: List[Path] = []
        for path in paths:
            intensity = intensities.get(path.id, path.vehicle_intensity or 0)
            scored.append(
                path.model_copy(
                    update={
                        "vehicle_intensity": intensity,
                        "score": self.score(path, intensity),
                    }
                )
            )
        return scored

    def select_optimal(
        self,
        paths: Iterable[Path],
        intensities: Optional[Mapping[int, int]] = None,
    ) -> ScoredPaths:
        scored = self.score_paths(paths, intensities)
        if not scored:
            raise ValueError("Cannot select a path without candidates")
        best = scored[0]
        for path in scored[1:]:
            if path.score < best.score:
                best = path
        return ScoredPaths(optimal=best, paths=scored)


def compare_paths(
    paths: Iterable[Path],
    intensities: Optional[Mapping[int, int]] = None,
    weights: ScoringWeights = COMPARISON_PROFILE,
) -> List[Path]:
    return PathScorer(weights).score_paths(paths, intensities)
