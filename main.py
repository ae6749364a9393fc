"""Main application for the Location Optimizer"""
import argparse
import logging
import sys
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from config import Config
from config_validator import validate_optimization_params
from models import OptimizationResult, competitor_frame, population_frame
from data_processing.data_loader import load_inputs
from data_processing.sample_reducer import SampleReducer
from analysis import CenterInitializer, CompetitorIndex, RefinementEngine, ResultRanker
from utils.metrics import MetricsCollector, render_metrics
from utils.report import location_lines, summary_lines
from utils.results_store import save_results

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LocationOptimizationTool:
    """Runs the sample -> initialize -> refine -> rank pipeline.

    Each instance owns its random generator and builds fresh engine objects
    per run, so independent runs never share mutable state.
    """

    def __init__(self, config=None, rng: Optional[np.random.Generator] = None,
                 num_locations: Optional[int] = None, max_iterations: Optional[int] = None,
                 convergence_threshold: Optional[float] = None,
                 max_sample_size: Optional[int] = None,
                 regular_sample_rate: Optional[float] = None):
        self.config = config if config else Config()
        if rng is None:
            rng = np.random.default_rng(self.config.RANDOM_SEED)
        self.rng = rng
        self.num_locations = self.config.NUM_LOCATIONS if num_locations is None else int(num_locations)
        self.max_iterations = max_iterations
        self.convergence_threshold = convergence_threshold
        self.max_sample_size = max_sample_size
        self.regular_sample_rate = regular_sample_rate
        self.last_refinement = None

    @classmethod
    def from_params(cls, params: Dict, config=None) -> 'LocationOptimizationTool':
        """Build a tool from a validated parameter dict (see config_validator)."""
        return cls(
            config=config,
            rng=np.random.default_rng(params.get('seed')),
            num_locations=params.get('num_locations'),
            max_iterations=params.get('max_iterations'),
            convergence_threshold=params.get('convergence_threshold'),
            max_sample_size=params.get('max_sample_size'),
            regular_sample_rate=params.get('regular_sample_rate'),
        )

    # ---------------------- Stages ----------------------
    @MetricsCollector.track_stage('load')
    def load_data(self, population_path: Optional[str] = None,
                  competitors_path: Optional[str] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
        population, competitors = load_inputs(population_path, competitors_path, self.config)
        logger.info(f"Loaded {len(competitors)} competitors, {len(population)} population areas")
        return population, competitors

    @MetricsCollector.track_stage('sample')
    def sample(self, population: pd.DataFrame) -> pd.DataFrame:
        reducer = SampleReducer(self.config, rng=self.rng, max_size=self.max_sample_size,
                                sample_rate=self.regular_sample_rate)
        return reducer.reduce(population)

    @MetricsCollector.track_stage('initialize')
    def initialize(self, sampled: pd.DataFrame, index: CompetitorIndex):
        return CenterInitializer(self.config, rng=self.rng).initialize(self.num_locations, sampled, index)

    @MetricsCollector.track_stage('refine')
    def refine(self, centers, sampled: pd.DataFrame, index: CompetitorIndex):
        engine = RefinementEngine(index, self.config, max_iterations=self.max_iterations,
                                  convergence_threshold=self.convergence_threshold)
        return engine.refine(centers, sampled)

    @MetricsCollector.track_stage('rank')
    def rank(self, centers, total_competitors: int, total_population_areas: int) -> OptimizationResult:
        ranker = ResultRanker(self.config, regular_sample_rate=self.regular_sample_rate,
                              convergence_threshold=self.convergence_threshold)
        return ranker.rank(centers, total_competitors=total_competitors,
                           total_population_areas=total_population_areas)

    # ---------------------- Pipeline ----------------------
    def optimize(self, population, competitors) -> OptimizationResult:
        """Optimize from in-memory data (DataFrames or lists of records)."""
        population = population_frame(population)
        competitors = competitor_frame(competitors)

        sampled = self.sample(population)
        index = CompetitorIndex.from_frame(competitors, self.config)

        initial = self.initialize(sampled, index)
        refinement = self.refine(initial, sampled, index)
        self.last_refinement = refinement

        result = self.rank(refinement.centers, total_competitors=len(index),
                           total_population_areas=len(sampled))
        MetricsCollector.record_run(len(sampled), len(result.locations), refinement.iterations)
        return result

    @MetricsCollector.track_analysis()
    def run_full_analysis(self, population_path: Optional[str] = None,
                          competitors_path: Optional[str] = None,
                          output_path: Optional[str] = None) -> OptimizationResult:
        logger.info("=== LOCATION OPTIMIZATION ===")
        population, competitors = self.load_data(population_path, competitors_path)
        result = self.optimize(population, competitors)
        save_results(result, output_path or self.config.OUTPUT_JSON)
        return result


def log_report(result: OptimizationResult) -> None:
    logger.info("=== OPTIMIZED LOCATIONS ===")
    for line in location_lines(result):
        logger.info(line)
    logger.info("=== SUMMARY ===")
    for line in summary_lines(result):
        logger.info(line)


def build_parser(config=None) -> argparse.ArgumentParser:
    config = config if config else Config()
    ap = argparse.ArgumentParser(
        description="Select facility locations that maximize captured population away from competitors"
    )
    ap.add_argument('--population', dest='population_path', default=config.POPULATION_CSV,
                    help="CSV of area_id,population,lat,long")
    ap.add_argument('--competitors', dest='competitors_path', default=config.COMPETITORS_CSV,
                    help="CSV of <ignored>,lat,long")
    ap.add_argument('--output', dest='output_path', default=config.OUTPUT_JSON,
                    help="Where to write the results JSON")
    ap.add_argument('--locations', dest='num_locations', type=int, default=config.NUM_LOCATIONS)
    ap.add_argument('--seed', type=int, default=config.RANDOM_SEED,
                    help="Seed for reproducible runs (default: unseeded)")
    ap.add_argument('--max-iterations', dest='max_iterations', type=int, default=config.MAX_ITERATIONS)
    ap.add_argument('--metrics-file', dest='metrics_file', default=None,
                    help="Write Prometheus metrics text to this file after the run")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    try:
        params = validate_optimization_params(vars(args))
        tool = LocationOptimizationTool.from_params(params)
        result = tool.run_full_analysis(
            population_path=params.get('population_path'),
            competitors_path=params.get('competitors_path'),
            output_path=params.get('output_path'),
        )
        log_report(result)

        if params.get('metrics_file'):
            with open(params['metrics_file'], 'wb') as f:
                f.write(render_metrics())
            logger.info(f"Metrics written to {params['metrics_file']}")

    except Exception as e:
        logger.error(f"Application error: {e}")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
