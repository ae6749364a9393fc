"""Ranking, business classification and the output record"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from config import Config
from models import (
    AlgorithmDescription, BusinessInsights, Candidate, Coordinates, LocationMetrics,
    OptimizationResult, RankedLocation, RunMetadata, RunSummary,
)

logger = logging.getLogger(__name__)


class ResultRanker:
    """Turn final candidates into the immutable OptimizationResult.

    Candidates are ordered by score, highest first. Equal scores keep the
    order the candidates were initialized in.
    """

    def __init__(self, config: Optional[Config] = None,
                 regular_sample_rate: Optional[float] = None,
                 convergence_threshold: Optional[float] = None):
        self.config = config if config else Config()
        self.precision = self.config.COORDINATE_PRECISION
        self.regular_sample_rate = (self.config.REGULAR_SAMPLE_RATE
                                    if regular_sample_rate is None else float(regular_sample_rate))
        self.convergence_threshold = (self.config.CONVERGENCE_THRESHOLD
                                      if convergence_threshold is None else float(convergence_threshold))

    # ---------------------- Classification ----------------------
    def market_potential(self, population_captured: int) -> str:
        thresholds = self.config.MARKET_POTENTIAL_THRESHOLDS
        if population_captured > thresholds["High"]:
            return "High"
        if population_captured > thresholds["Medium"]:
            return "Medium"
        return "Low"

    def competitive_advantage(self, competitor_distance: float) -> str:
        thresholds = self.config.COMPETITIVE_ADVANTAGE_THRESHOLDS
        if competitor_distance > thresholds["Strong"]:
            return "Strong"
        if competitor_distance > thresholds["Moderate"]:
            return "Moderate"
        return "Weak"

    def priority(self, rank: int) -> str:
        cutoffs = self.config.PRIORITY_RANK_CUTOFFS
        if rank <= cutoffs["High"]:
            return "High"
        if rank <= cutoffs["Medium"]:
            return "Medium"
        return "Low"

    def estimated_revenue(self, population_captured: int) -> int:
        return int(population_captured * self.config.REVENUE_PER_CAPITA)

    # ---------------------- Output ----------------------
    def rank(self, candidates: Sequence[Candidate], total_competitors: int = 0,
             total_population_areas: int = 0, timestamp: Optional[datetime] = None) -> OptimizationResult:
        ordered = sorted(candidates, key=lambda c: c.score, reverse=True)
        locations = [self._ranked_location(i + 1, c) for i, c in enumerate(ordered)]

        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return OptimizationResult(
            metadata=RunMetadata(
                timestamp=_iso_timestamp(timestamp),
                algorithm=self.config.ALGORITHM_NAME,
                total_competitors=total_competitors,
                total_population_areas=total_population_areas,
                optimized_locations=len(locations),
            ),
            summary=self._summary(ordered),
            locations=locations,
            algorithm=self.describe_algorithm(),
        )

    def describe_algorithm(self) -> AlgorithmDescription:
        cfg = self.config
        return AlgorithmDescription(
            sampling_strategy=(
                f"All high-population ({cfg.HIGH_POPULATION_THRESHOLD}+) areas + "
                f"{self.regular_sample_rate * 100:g}% random sample of regular areas"
            ),
            optimization_method="Population-weighted K-means with competitor avoidance",
            scoring_formula=f"Population × (1 + CompetitorDistance × {cfg.COMPETITOR_DISTANCE_WEIGHT})",
            convergence_threshold=self.convergence_threshold,
        )

    def _ranked_location(self, rank: int, candidate: Candidate) -> RankedLocation:
        return RankedLocation(
            rank=rank,
            coordinates=Coordinates(
                latitude=round(candidate.lat, self.precision),
                longitude=round(candidate.long, self.precision),
            ),
            metrics=LocationMetrics(
                population_captured=candidate.population_captured,
                competitor_distance=round(candidate.nearest_competitor_distance, self.precision),
                optimization_score=_round_half_up(candidate.score),
                estimated_annual_revenue=self.estimated_revenue(candidate.population_captured),
            ),
            business_insights=BusinessInsights(
                market_potential=self.market_potential(candidate.population_captured),
                competitive_advantage=self.competitive_advantage(candidate.nearest_competitor_distance),
                priority=self.priority(rank),
            ),
        )

    def _summary(self, ordered: Sequence[Candidate]) -> RunSummary:
        total_captured = sum(c.population_captured for c in ordered)
        total_score = sum(c.score for c in ordered)
        avg_distance = (sum(c.nearest_competitor_distance for c in ordered) / len(ordered)
                        if ordered else 0.0)
        return RunSummary(
            total_population_captured=total_captured,
            average_competitor_distance=round(avg_distance, self.precision),
            total_optimization_score=_round_half_up(total_score),
            estimated_annual_revenue=self.estimated_revenue(total_captured),
        )



def _round_half_up(value: float) -> int:
    """Nearest integer with .5 rounded up, as the dashboard data expects."""
    return int(math.floor(value + 0.5))


def _iso_timestamp(timestamp: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return timestamp.isoformat(timespec='milliseconds') + 'Z'
