"""Stratified sampling of population areas into a bounded working set"""
import logging
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from config import Config
from models import PopulationPoint, population_frame

logger = logging.getLogger(__name__)


class SampleReducer:
    """Reduce a large population data set to at most ``max_size`` areas.

    Every high-population area is kept. Each remaining area is kept with
    probability ``sample_rate``; that pool is shuffled and truncated so the
    combined set stays within ``max_size``. When the high-population areas
    alone reach the cap, no regular areas are kept (the high set itself is
    never truncated).
    """

    def __init__(self, config: Optional[Config] = None,
                 rng: Optional[np.random.Generator] = None,
                 max_size: Optional[int] = None,
                 sample_rate: Optional[float] = None):
        self.config = config if config else Config()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.threshold = self.config.HIGH_POPULATION_THRESHOLD
        self.max_size = self.config.MAX_SAMPLE_SIZE if max_size is None else int(max_size)
        self.sample_rate = self.config.REGULAR_SAMPLE_RATE if sample_rate is None else float(sample_rate)

    def reduce(self, points: Union[pd.DataFrame, Iterable[PopulationPoint]]) -> pd.DataFrame:
        df = population_frame(points)
        if df.empty:
            logger.info("No population areas to sample")
            return df.iloc[0:0].reset_index(drop=True)

        high_mask = df['population'].to_numpy() >= self.threshold
        high = df[high_mask]
        regular = df[~high_mask]

        keep = self.rng.random(len(regular)) < self.sample_rate
        pool = regular[keep]

        room = max(0, self.max_size - len(high))
        order = self.rng.permutation(len(pool))[:room]
        regular_sample = pool.iloc[order]

        sample = pd.concat([high, regular_sample], ignore_index=True)
        logger.info(
            f"Sample: {len(high)} high-pop + {len(regular_sample)} regular = {len(sample)} total"
        )
        return sample
