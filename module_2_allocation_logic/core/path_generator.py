from typing import List, Optional, Protocol

import numpy as np

from module_2_allocation_logic.core.models import Path, Slot


class PathGenerator(Protocol):
    def generate(self, slot: Slot) -> List[Path]:
        ...


class SyntheticPathGenerator:
    """Placeholder route candidates toward a slot; no road topology is consulted."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        base_distance: float = 65.0,
        distance_step: float = 25.0,
        max_jitter: float = 20.0,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.base_distance = base_distance
        self.distance_step = distance_step
        self.max_jitter = max_jitter

    @staticmethod
    def path_count(slot: Slot) -> int:
        return 4 if slot.row <= 1 else 3

    def generate(self, slot: Slot) -> List[Path]:
        paths: List[Path] = []
        for i in range(self.path_count(slot)):
            jitter = float(self.rng.uniform(0.0, self.max_jitter))
            extra = int(self.rng.integers(0, 2))
            paths.append(
                Path(
                    id=i + 1,
                    name=f"Path {i + 1}",
                    distance=self.base_distance + self.distance_step * i + jitter,
                    t_junctions=1 + i + extra,
                )
            )
        return paths
