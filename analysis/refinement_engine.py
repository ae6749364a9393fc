"""Iterative refinement of candidate centers with competitor avoidance"""
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from config import Config
from models import Candidate, PopulationPoint, population_frame
from analysis.competitor_index import CompetitorIndex
from analysis.geometry import distance_matrix, planar_distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IterationResult:
    centers: Tuple[Candidate, ...]
    labels: np.ndarray = field(repr=False)
    max_movement: float


@dataclass(frozen=True)
class RefinementResult:
    centers: Tuple[Candidate, ...]
    iterations: int
    converged: bool
    movement_history: Tuple[float, ...]


class RefinementEngine:
    """Assign -> Update -> Converge-check loop with a fixed iteration cap.

    Every iteration produces a fresh tuple of centers; the previous tuple is
    only read, which is what the movement-based convergence check compares
    against. A center that receives no points is carried over unchanged,
    metrics included.
    """

    def __init__(self, competitor_index: CompetitorIndex, config: Optional[Config] = None,
                 max_iterations: Optional[int] = None,
                 convergence_threshold: Optional[float] = None):
        self.config = config if config else Config()
        self.competitor_index = competitor_index
        self.max_iterations = self.config.MAX_ITERATIONS if max_iterations is None else int(max_iterations)
        self.convergence_threshold = (self.config.CONVERGENCE_THRESHOLD
                                      if convergence_threshold is None else float(convergence_threshold))
        self.proximity_threshold = self.config.COMPETITOR_PROXIMITY_THRESHOLD
        self.avoidance_radius = self.config.AVOIDANCE_RADIUS
        self.avoidance_angles = tuple(range(0, 360, self.config.AVOIDANCE_ANGLE_STEP))
        self.distance_weight = self.config.COMPETITOR_DISTANCE_WEIGHT
        self.log_interval = self.config.PROGRESS_LOG_INTERVAL

    # ---------------------- Steps ----------------------
    def assign(self, centers: Sequence[Candidate], lats: np.ndarray, longs: np.ndarray) -> np.ndarray:
        """Index of the nearest center for every point; the lowest index wins ties."""
        if not centers:
            return np.zeros(lats.size, dtype=int)
        center_lats = np.array([c.lat for c in centers], dtype=float)
        center_longs = np.array([c.long for c in centers], dtype=float)
        return np.argmin(distance_matrix(lats, longs, center_lats, center_longs), axis=1)

    def update(self, centers: Sequence[Candidate], lats: np.ndarray, longs: np.ndarray,
               pops: np.ndarray, labels: np.ndarray) -> Tuple[Candidate, ...]:
        updated = []
        for i, center in enumerate(centers):
            mask = labels == i
            if not mask.any():
                updated.append(center)
                continue

            assigned_pops = pops[mask]
            total_pop = assigned_pops.sum()
            if total_pop > 0:
                new_lat = float(np.sum(lats[mask] * assigned_pops) / total_pop)
                new_long = float(np.sum(longs[mask] * assigned_pops) / total_pop)
                new_lat, new_long = self.avoid_competitors(new_lat, new_long)
            else:
                # Weighted centroid is undefined; hold position
                new_lat, new_long = center.lat, center.long

            updated.append(self._scored(new_lat, new_long, int(total_pop)))
        return tuple(updated)

    def avoid_competitors(self, lat: float, long: float) -> Tuple[float, float]:
        """First-improvement probe around a centroid that sits too close to a competitor."""
        own = self.competitor_index.nearest_distance(lat, long)
        if own >= self.proximity_threshold:
            return lat, long

        for angle in self.avoidance_angles:
            rad = angle * math.pi / 180
            alt_lat = lat + self.avoidance_radius * math.cos(rad)
            alt_long = long + self.avoidance_radius * math.sin(rad)
            if self.competitor_index.nearest_distance(alt_lat, alt_long) > own:
                return alt_lat, alt_long
        return lat, long

    def step(self, centers: Sequence[Candidate], lats: np.ndarray, longs: np.ndarray,
             pops: np.ndarray) -> IterationResult:
        labels = self.assign(centers, lats, longs)
        new_centers = self.update(centers, lats, longs, pops, labels)
        movements = [planar_distance(old.lat, old.long, new.lat, new.long)
                     for old, new in zip(centers, new_centers)]
        max_movement = max(movements) if movements else 0.0
        return IterationResult(centers=new_centers, labels=labels, max_movement=max_movement)

    # ---------------------- Loop ----------------------
    def refine(self, centers: Sequence[Candidate],
               points: Union[pd.DataFrame, Iterable[PopulationPoint]]) -> RefinementResult:
        current = tuple(centers)
        if not current:
            return RefinementResult(centers=(), iterations=0, converged=False, movement_history=())

        df = population_frame(points)
        lats = df['lat'].to_numpy(dtype=float)
        longs = df['long'].to_numpy(dtype=float)
        pops = df['population'].to_numpy(dtype=np.int64)

        history: List[float] = []
        converged = False
        for iteration in range(self.max_iterations):
            result = self.step(current, lats, longs, pops)
            current = result.centers
            history.append(result.max_movement)
            converged = result.max_movement < self.convergence_threshold

            if iteration % self.log_interval == 0 or converged:
                logger.info(f"Iteration {iteration + 1}: Max movement = {result.max_movement:.6f}")
            if converged:
                logger.info(f"Converged after {iteration + 1} iterations")
                break
        else:
            logger.warning(f"Refinement stopped at the {self.max_iterations}-iteration limit without converging")

        return RefinementResult(
            centers=current,
            iterations=len(history),
            converged=converged,
            movement_history=tuple(history),
        )

    def _scored(self, lat: float, long: float, population_captured: int) -> Candidate:
        competitor_distance = self.competitor_index.nearest_distance(lat, long)
        return Candidate(
            lat=lat,
            long=long,
            score=population_captured * (1 + competitor_distance * self.distance_weight),
            population_captured=population_captured,
            nearest_competitor_distance=competitor_distance,
        )
