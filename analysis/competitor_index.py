"""Nearest-competitor distance queries"""
import logging
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from config import Config
from models import Competitor, competitor_frame

logger = logging.getLogger(__name__)


class CompetitorIndex:
    """Answers "how far is the closest competitor" for a point.

    The scan stops at the first competitor closer than
    ``early_exit_distance`` and returns that distance; otherwise it returns
    the true minimum. Results depend only on the competitor set and its
    order, so repeated queries are deterministic.
    """

    def __init__(self, lats, longs, config: Optional[Config] = None):
        self.config = config if config else Config()
        self.lats = np.asarray(lats, dtype=float).reshape(-1)
        self.longs = np.asarray(longs, dtype=float).reshape(-1)
        if self.lats.shape != self.longs.shape:
            raise ValueError("Competitor latitude and longitude arrays differ in length")
        self.early_exit_distance = self.config.COMPETITOR_EARLY_EXIT_DISTANCE
        self.empty_distance = self.config.NO_COMPETITOR_DISTANCE

    @classmethod
    def from_frame(cls, competitors: Union[pd.DataFrame, Iterable[Competitor]],
                   config: Optional[Config] = None) -> 'CompetitorIndex':
        df = competitor_frame(competitors)
        return cls(df['lat'].to_numpy(dtype=float), df['long'].to_numpy(dtype=float), config)

    def __len__(self) -> int:
        return int(self.lats.size)

    def nearest_distance(self, lat: float, long: float) -> float:
        if self.lats.size == 0:
            return self.empty_distance

        dlat = self.lats - lat
        dlong = self.longs - long
        distances = np.sqrt(dlat * dlat + dlong * dlong)

        close = np.flatnonzero(distances < self.early_exit_distance)
        if close.size:
            return float(distances[close[0]])
        return float(distances.min())
