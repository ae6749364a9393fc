"""Initial center selection: population-weighted K-means++ with competitor clearance"""
import logging
from typing import Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from config import Config
from models import Candidate, PopulationPoint, population_frame
from analysis.competitor_index import CompetitorIndex
from analysis.geometry import squared_distances

logger = logging.getLogger(__name__)


class CenterInitializer:
    """Seed up to k centers.

    The first center is the most populous area that is clear of
    competitors. Each further center is drawn with probability proportional
    to (squared distance to the nearest chosen center) x population. Seeding
    stops early when every remaining weight is zero.
    """

    def __init__(self, config: Optional[Config] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config if config else Config()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.min_clearance = self.config.FIRST_CENTER_MIN_COMPETITOR_DISTANCE

    def initialize(self, k: int,
                   points: Union[pd.DataFrame, Iterable[PopulationPoint]],
                   competitor_index: CompetitorIndex) -> Tuple[Candidate, ...]:
        if k < 0:
            raise ValueError(f"Number of centers must be non-negative, got {k}")
        df = population_frame(points)
        if k == 0 or df.empty:
            return ()

        ordered = df.sort_values('population', ascending=False, kind='mergesort')
        lats = ordered['lat'].to_numpy(dtype=float)
        longs = ordered['long'].to_numpy(dtype=float)
        pops = ordered['population'].to_numpy(dtype=float)

        first = self._first_center_index(lats, longs, competitor_index)
        centers = [self._candidate(lats[first], longs[first], competitor_index)]

        min_sq = squared_distances(lats, longs, lats[first], longs[first])
        while len(centers) < k:
            weights = min_sq * pops
            cumulative = np.cumsum(weights)
            total = cumulative[-1]
            if total == 0:
                break

            draw = self.rng.random() * total
            j = int(np.searchsorted(cumulative, draw, side='left'))
            j = min(j, len(cumulative) - 1)

            centers.append(self._candidate(lats[j], longs[j], competitor_index))
            min_sq = np.minimum(min_sq, squared_distances(lats, longs, lats[j], longs[j]))

        if len(centers) < k:
            logger.warning(f"Initialized {len(centers)} of {k} requested centers; no weight left to draw from")
        return tuple(centers)

    def _first_center_index(self, lats: np.ndarray, longs: np.ndarray,
                            competitor_index: CompetitorIndex) -> int:
        for i in range(lats.size):
            if competitor_index.nearest_distance(lats[i], longs[i]) > self.min_clearance:
                return i
        # Nothing is clear of competitors: fall back to the most populous area
        return 0

    @staticmethod
    def _candidate(lat: float, long: float, competitor_index: CompetitorIndex) -> Candidate:
        return Candidate(
            lat=float(lat),
            long=float(long),
            score=0.0,
            population_captured=0,
            nearest_competitor_distance=competitor_index.nearest_distance(lat, long),
        )
