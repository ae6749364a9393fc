from collections import Counter

import numpy as np
import pandas as pd
import pytest
from hypothesis import given, strategies as st, settings
from scipy.stats import chisquare

from analysis.center_initializer import CenterInitializer
from analysis.competitor_index import CompetitorIndex
from models import PopulationPoint


@pytest.fixture
def no_competitors():
    return CompetitorIndex([], [])


def test_first_center_is_most_populous_area_clear_of_competitors():
    points = [
        PopulationPoint('crowded', 1000, 0.0, 0.0),
        PopulationPoint('clear', 900, 1.0, 1.0),
        PopulationPoint('small', 10, 2.0, 2.0),
    ]
    index = CompetitorIndex([0.001], [0.0])

    centers = CenterInitializer(rng=np.random.default_rng(0)).initialize(1, points, index)

    assert len(centers) == 1
    first = centers[0]
    assert (first.lat, first.long) == (1.0, 1.0)
    assert first.score == 0.0
    assert first.population_captured == 0
    assert first.nearest_competitor_distance == pytest.approx(np.hypot(0.999, 1.0))


def test_first_center_falls_back_to_most_populous_area():
    points = [PopulationPoint('a', 50, 0.0, 0.0), PopulationPoint('b', 500, 0.002, 0.0)]
    index = CompetitorIndex([0.0, 0.002], [0.0, 0.0])

    centers = CenterInitializer(rng=np.random.default_rng(0)).initialize(1, points, index)

    assert (centers[0].lat, centers[0].long) == (0.002, 0.0)
    assert centers[0].nearest_competitor_distance == 0.0


def test_stops_early_when_no_weight_remains(no_competitors):
    points = [PopulationPoint(f'p{i}', 100, 5.0, 5.0) for i in range(4)]
    centers = CenterInitializer(rng=np.random.default_rng(0)).initialize(5, points, no_competitors)
    assert len(centers) == 1


def test_zero_population_areas_are_never_drawn(no_competitors):
    points = [PopulationPoint('a', 10, 0.0, 0.0), PopulationPoint('b', 0, 3.0, 3.0)]
    centers = CenterInitializer(rng=np.random.default_rng(0)).initialize(3, points, no_competitors)
    assert [(c.lat, c.long) for c in centers] == [(0.0, 0.0)]


def test_empty_inputs_give_no_centers(no_competitors):
    initializer = CenterInitializer(rng=np.random.default_rng(0))
    assert initializer.initialize(10, [], no_competitors) == ()
    assert initializer.initialize(0, [PopulationPoint('a', 1, 0.0, 0.0)], no_competitors) == ()


def test_negative_k_rejected(no_competitors):
    with pytest.raises(ValueError):
        CenterInitializer().initialize(-1, [PopulationPoint('a', 1, 0.0, 0.0)], no_competitors)


def test_with_no_competitors_every_center_uses_sentinel(no_competitors):
    rng = np.random.default_rng(3)
    df = pd.DataFrame({
        'area_id': [str(i) for i in range(200)],
        'population': rng.integers(1, 1000, size=200),
        'lat': rng.uniform(51, 52, size=200),
        'long': rng.uniform(-1, 0, size=200),
    })
    centers = CenterInitializer(rng=rng).initialize(6, df, no_competitors)
    assert len(centers) == 6
    assert all(c.nearest_competitor_distance == 1.0 for c in centers)


def test_draw_probability_proportional_to_squared_distance(no_competitors):
    # Equal populations; the first center is the first area at (0, 0).
    points = [PopulationPoint(str(i), 10, float(i), 0.0) for i in range(4)]
    initializer = CenterInitializer(rng=np.random.default_rng(2024))

    trials = 2800
    counts = Counter(initializer.initialize(2, points, no_competitors)[1].lat for _ in range(trials))

    assert counts.get(0.0, 0) == 0
    observed = [counts.get(1.0, 0), counts.get(2.0, 0), counts.get(3.0, 0)]
    expected = [trials * w / 14 for w in (1, 4, 9)]
    assert chisquare(observed, expected).pvalue > 0.001


@given(
    st.lists(
        st.tuples(
            st.integers(0, 10000),
            st.floats(min_value=-1, max_value=1, allow_nan=False),
            st.floats(min_value=-1, max_value=1, allow_nan=False),
        ),
        min_size=1, max_size=80,
    ),
    st.integers(1, 12),
)
@settings(max_examples=25, deadline=None)
def test_never_more_than_k_centers(rows, k):
    points = [PopulationPoint(str(i), pop, lat, long) for i, (pop, lat, long) in enumerate(rows)]
    index = CompetitorIndex([0.0], [0.0])
    centers = CenterInitializer(rng=np.random.default_rng(9)).initialize(k, points, index)
    assert 1 <= len(centers) <= k
    assert all(c.nearest_competitor_distance >= 0 for c in centers)
