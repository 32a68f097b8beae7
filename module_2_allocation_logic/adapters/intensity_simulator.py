import logging
import time
from typing import Callable, Dict, Iterable, Optional

import numpy as np

from module_2_allocation_logic.core.models import Path

logger = logging.getLogger(__name__)


class IntensitySimulator:
    """Stand-in for traffic sensing: uniform random intensity per path after a fixed delay."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        delay_seconds: float = 2.0,
        low: int = 10,
        high: int = 90,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.delay_seconds = max(delay_seconds, 0.0)
        self.low = low
        self.high = high
        self._sleep = sleep

    def simulate(self, paths: Iterable[Path]) -> Dict[int, int]:
        if self.delay_seconds:
            self._sleep(self.delay_seconds)
        intensities = {path.id: int(self.rng.integers(self.low, self.high)) for path in paths}
        logger.debug("Simulated intensities: %s", intensities)
        return intensities
