"""Configuration settings for the Location Optimizer"""
import os
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name):
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return None
    return int(value)


class Config:
    # Input / output locations
    POPULATION_CSV = os.getenv('POPULATION_CSV', 'population.csv')
    COMPETITORS_CSV = os.getenv('COMPETITORS_CSV', 'week1.csv')
    OUTPUT_JSON = os.getenv('OUTPUT_JSON', 'optimization_results.json')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Loading
    LOAD_CHUNK_SIZE = int(os.getenv('LOAD_CHUNK_SIZE', '10000'))
    LOAD_PROGRESS_INTERVAL = 50000  # rows between progress log lines

    # Randomness: None means an unseeded generator (production default)
    RANDOM_SEED = _optional_int('RANDOM_SEED')

    # Sampling
    HIGH_POPULATION_THRESHOLD = 400  # areas at or above this are always kept
    REGULAR_SAMPLE_RATE = 0.05       # keep probability for every other area
    MAX_SAMPLE_SIZE = 20000          # cap on the working set

    # Competitor distance queries (planar degrees)
    NO_COMPETITOR_DISTANCE = 1.0     # sentinel when there are no competitors
    COMPETITOR_EARLY_EXIT_DISTANCE = 0.001

    # Initialization
    NUM_LOCATIONS = int(os.getenv('NUM_LOCATIONS', '10'))
    FIRST_CENTER_MIN_COMPETITOR_DISTANCE = 0.008

    # Refinement
    MAX_ITERATIONS = 30
    CONVERGENCE_THRESHOLD = 0.001
    COMPETITOR_PROXIMITY_THRESHOLD = 0.01
    AVOIDANCE_RADIUS = 0.015
    AVOIDANCE_ANGLE_STEP = 60        # degrees between probes
    PROGRESS_LOG_INTERVAL = 5        # iterations between progress log lines

    # Scoring: population x (1 + distance x weight)
    COMPETITOR_DISTANCE_WEIGHT = 5

    # Business metrics
    REVENUE_PER_CAPITA = 50          # GBP per captured person per year
    MARKET_POTENTIAL_THRESHOLDS = {
        "High": 1_000_000,
        "Medium": 500_000,
    }
    COMPETITIVE_ADVANTAGE_THRESHOLDS = {
        "Strong": 0.05,
        "Moderate": 0.02,
    }
    PRIORITY_RANK_CUTOFFS = {
        "High": 3,    # ranks 1-3
        "Medium": 7,  # ranks 4-7
    }

    # Output
    ALGORITHM_NAME = "K-means with competitor avoidance"
    COORDINATE_PRECISION = 6
