"""Run metrics collection using Prometheus"""
import time
import functools
import logging
from prometheus_client import (
    Counter, Histogram, CollectorRegistry, generate_latest
)

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry()

optimization_counter = Counter(
    'location_optimizations_total',
    'Total number of optimization runs performed',
    ['status'],
    registry=REGISTRY
)

stage_duration = Histogram(
    'optimization_stage_duration_seconds',
    'Time spent in each optimization stage',
    ['stage'],
    buckets=[0.01, 0.1, 0.5, 1, 5, 10, 30, 60, 120, 300],
    registry=REGISTRY
)

sampled_points_histogram = Histogram(
    'sampled_population_areas_count',
    'Number of population areas in the working sample',
    buckets=[10, 100, 1000, 5000, 10000, 15000, 20000, 50000],
    registry=REGISTRY
)

locations_histogram = Histogram(
    'optimized_locations_count',
    'Number of locations produced per run',
    buckets=[0, 1, 2, 3, 5, 7, 10, 15, 20, 50],
    registry=REGISTRY
)

iterations_histogram = Histogram(
    'refinement_iterations_count',
    'Refinement iterations run before stopping',
    buckets=[1, 2, 5, 10, 15, 20, 30, 50, 100],
    registry=REGISTRY
)

error_counter = Counter(
    'optimization_errors_total',
    'Total optimization errors',
    ['error_type'],
    registry=REGISTRY
)


class MetricsCollector:
    @staticmethod
    def track_analysis():
        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                start = time.time()
                status = 'success'
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    status = 'failed'
                    error_counter.labels(error_type=type(e).__name__).inc()
                    raise
                finally:
                    dur = time.time() - start
                    stage_duration.labels(stage='total').observe(dur)
                    optimization_counter.labels(status=status).inc()
                    logger.info(f"Optimization run finished: status={status}, duration={dur:.2f}s")
            return wrapper
        return decorator

    @staticmethod
    def track_stage(stage_name: str):
        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with stage_duration.labels(stage=stage_name).time():
                    return func(*args, **kwargs)
            return wrapper
        return decorator

    @staticmethod
    def record_run(sampled_points: int, locations: int, iterations: int) -> None:
        sampled_points_histogram.observe(sampled_points)
        locations_histogram.observe(locations)
        iterations_histogram.observe(iterations)


def render_metrics() -> bytes:
    """Prometheus text exposition of everything recorded so far."""
    return generate_latest(REGISTRY)
