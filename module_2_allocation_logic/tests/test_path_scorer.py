import pytest

from module_2_allocation_logic.core.models import Path
from module_2_allocation_logic.core.path_scorer import (
    COMPARISON_PROFILE,
    PathScorer,
    compare_paths,
    estimated_travel_minutes,
    intensity_level,
)


def build_paths() -> list:
    return [
        Path(id=1, name="Path 1", distance=65.0, t_junctions=1),
        Path(id=2, name="Path 2", distance=90.0, t_junctions=3),
    ]


def test_scores_use_weighted_sum_and_lowest_wins() -> None:
    result = PathScorer().select_optimal(build_paths(), {1: 20, 2: 60})

    assert [path.score for path in result.paths] == pytest.approx([13.1, 28.8])
    assert [path.vehicle_intensity for path in result.paths] == [20, 60]
    assert result.optimal.id == 1


def test_intensity_can_flip_the_choice() -> None:
    result = PathScorer().select_optimal(build_paths(), {1: 90, 2: 10})

    # 6.5 + 0.6 + 27.0 against 9.0 + 1.8 + 3.0
    assert result.optimal.id == 2


def test_ties_keep_first_path() -> None:
    paths = [
        Path(id=1, name="Path 1", distance=70.0, t_junctions=2),
        Path(id=2, name="Path 2", distance=70.0, t_junctions=2),
    ]

    assert PathScorer().select_optimal(paths, {1: 40, 2: 40}).optimal.id == 1


def test_missing_intensity_counts_as_zero() -> None:
    scored = PathScorer().score_paths(build_paths(), {2: 60})

    assert scored[0].vehicle_intensity == 0
    assert scored[0].score == pytest.approx(7.1)


def test_scoring_does_not_mutate_inputs() -> None:
    paths = build_paths()

    PathScorer().select_optimal(paths, {1: 20, 2: 60})

    assert paths[0].score is None
    assert paths[0].vehicle_intensity is None


def test_comparison_profile_is_separate() -> None:
    rows = compare_paths(build_paths(), {1: 20, 2: 60})

    assert [row.score for row in rows] == pytest.approx([43.2, 87.6])
    assert PathScorer(COMPARISON_PROFILE).weights == COMPARISON_PROFILE


def test_select_optimal_requires_paths() -> None:
    with pytest.raises(ValueError):
        PathScorer().select_optimal([])


@pytest.mark.parametrize("value, level", [(0, "low"), (29, "low"), (30, "medium"), (69, "medium"), (70, "high")])
def test_intensity_level(value: int, level: str) -> None:
    assert intensity_level(value) == level


@pytest.mark.parametrize("distance, minutes", [(65.0, 3), (90.0, 3), (90.5, 4), (30.0, 1), (12.0, 1)])
def test_estimated_travel_minutes_rounds_up(distance: float, minutes: int) -> None:
    path = Path(id=1, name="Path 1", distance=distance, t_junctions=1)

    assert estimated_travel_minutes(path) == minutes
