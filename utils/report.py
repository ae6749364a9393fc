"""Console formatting of optimization results"""
from typing import List

from models import OptimizationResult


def format_number(num: float) -> str:
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return f"{num:,}"


def format_currency(amount: float) -> str:
    """GBP, whole pounds."""
    sign = "-" if amount < 0 else ""
    return f"{sign}£{abs(amount):,.0f}"


def format_distance(distance: float) -> str:
    # One planar degree is shown as roughly 100 km
    return f"{distance * 100:.1f}km"


def format_percentage(value: float, total: float) -> str:
    if not total:
        return "0.0%"
    return f"{value / total * 100:.1f}%"


def location_lines(result: OptimizationResult) -> List[str]:
    lines = []
    total = result.summary.total_population_captured
    for loc in result.locations:
        lines.extend([
            f"Location {loc.rank}:",
            f"  Coordinates: {loc.coordinates.latitude:.6f}, {loc.coordinates.longitude:.6f}",
            f"  Population: {loc.metrics.population_captured:,}",
            f"  Share of Captured Population: {format_percentage(loc.metrics.population_captured, total)}",
            f"  Competitor Distance: {loc.metrics.competitor_distance:.4f}",
            f"  Score: {loc.metrics.optimization_score}",
            f"  Priority: {loc.business_insights.priority}",
        ])
    return lines


def summary_lines(result: OptimizationResult) -> List[str]:
    s = result.summary
    return [
        f"Total Population: {s.total_population_captured:,} ({format_number(s.total_population_captured)})",
        f"Average Competitor Distance: {s.average_competitor_distance:.4f} "
        f"(~{format_distance(s.average_competitor_distance)})",
        f"Total Score: {s.total_optimization_score}",
        f"Estimated Annual Revenue: {format_currency(s.estimated_annual_revenue)}",
    ]
