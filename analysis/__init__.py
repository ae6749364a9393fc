"""Spatial optimization engine for the Location Optimizer"""

from .competitor_index import CompetitorIndex
from .center_initializer import CenterInitializer
from .refinement_engine import RefinementEngine, RefinementResult
from .result_ranker import ResultRanker

__all__ = ["CompetitorIndex", "CenterInitializer", "RefinementEngine", "RefinementResult", "ResultRanker"]
