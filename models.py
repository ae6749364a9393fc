"""Data models for the Location Optimizer

Working records (population areas, competitors, candidate centers) are
frozen dataclasses. The output record handed to the dashboard is a set of
pydantic models whose aliases are the camelCase keys of the JSON file.
"""
from dataclasses import dataclass
from typing import Iterable, List, Literal, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

POPULATION_COLUMNS = ['area_id', 'population', 'lat', 'long']
COMPETITOR_COLUMNS = ['lat', 'long']


@dataclass(frozen=True)
class PopulationPoint:
    id: str
    population: int
    lat: float
    long: float


@dataclass(frozen=True)
class Competitor:
    lat: float
    long: float


@dataclass(frozen=True)
class Candidate:
    """A working center. Refinement replaces candidates, it never mutates them."""
    lat: float
    long: float
    score: float = 0.0
    population_captured: int = 0
    nearest_competitor_distance: float = 0.0


def population_frame(points: Union[pd.DataFrame, Iterable[PopulationPoint]]) -> pd.DataFrame:
    """Return population areas as a DataFrame with POPULATION_COLUMNS."""
    if isinstance(points, pd.DataFrame):
        missing = [c for c in POPULATION_COLUMNS if c not in points.columns]
        if missing:
            raise ValueError(f"Population data is missing columns: {missing}")
        return points
    rows = [(p.id, p.population, p.lat, p.long) for p in points]
    df = pd.DataFrame(rows, columns=POPULATION_COLUMNS)
    return df.astype({'area_id': str, 'population': 'int64', 'lat': float, 'long': float})


def competitor_frame(competitors: Union[pd.DataFrame, Iterable[Competitor]]) -> pd.DataFrame:
    """Return competitor coordinates as a DataFrame with COMPETITOR_COLUMNS."""
    if isinstance(competitors, pd.DataFrame):
        missing = [c for c in COMPETITOR_COLUMNS if c not in competitors.columns]
        if missing:
            raise ValueError(f"Competitor data is missing columns: {missing}")
        return competitors
    rows = [(c.lat, c.long) for c in competitors]
    return pd.DataFrame(rows, columns=COMPETITOR_COLUMNS, dtype=float)


# ---------------------- Output record ----------------------

class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Coordinates(_Record):
    latitude: float
    longitude: float


class LocationMetrics(_Record):
    population_captured: int = Field(..., ge=0, alias='populationCaptured')
    competitor_distance: float = Field(..., ge=0, alias='competitorDistance')
    optimization_score: int = Field(..., ge=0, alias='optimizationScore')
    estimated_annual_revenue: int = Field(..., ge=0, alias='estimatedAnnualRevenue')


class BusinessInsights(_Record):
    market_potential: Literal['High', 'Medium', 'Low'] = Field(..., alias='marketPotential')
    competitive_advantage: Literal['Strong', 'Moderate', 'Weak'] = Field(..., alias='competitiveAdvantage')
    priority: Literal['High', 'Medium', 'Low']


class RankedLocation(_Record):
    rank: int = Field(..., ge=1)
    coordinates: Coordinates
    metrics: LocationMetrics
    business_insights: BusinessInsights = Field(..., alias='businessInsights')


class RunMetadata(_Record):
    timestamp: str
    algorithm: str
    total_competitors: int = Field(..., ge=0, alias='totalCompetitors')
    total_population_areas: int = Field(..., ge=0, alias='totalPopulationAreas')
    optimized_locations: int = Field(..., ge=0, alias='optimizedLocations')


class RunSummary(_Record):
    total_population_captured: int = Field(..., ge=0, alias='totalPopulationCaptured')
    average_competitor_distance: float = Field(..., ge=0, alias='averageCompetitorDistance')
    total_optimization_score: int = Field(..., ge=0, alias='totalOptimizationScore')
    estimated_annual_revenue: int = Field(..., ge=0, alias='estimatedAnnualRevenue')


class AlgorithmDescription(_Record):
    sampling_strategy: str = Field(..., alias='samplingStrategy')
    optimization_method: str = Field(..., alias='optimizationMethod')
    scoring_formula: str = Field(..., alias='scoringFormula')
    convergence_threshold: float = Field(..., alias='convergenceThreshold')


class OptimizationResult(_Record):
    metadata: RunMetadata
    summary: RunSummary
    locations: List[RankedLocation]
    algorithm: AlgorithmDescription

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
