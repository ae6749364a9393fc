import numpy as np
import pandas as pd
import pytest

from data_processing.sample_reducer import SampleReducer
from models import PopulationPoint


@pytest.fixture
def large_population():
    high = pd.DataFrame({
        'area_id': [f'h{i}' for i in range(5000)],
        'population': 500,
        'lat': np.linspace(50, 51, 5000),
        'long': np.linspace(-1, 0, 5000),
    })
    regular = pd.DataFrame({
        'area_id': [f'r{i}' for i in range(20000)],
        'population': 100,
        'lat': np.linspace(52, 53, 20000),
        'long': np.linspace(-2, -1, 20000),
    })
    return pd.concat([regular, high], ignore_index=True)


def test_keeps_every_high_population_area(large_population):
    sample = SampleReducer(rng=np.random.default_rng(7)).reduce(large_population)

    ids = set(sample['area_id'])
    assert {f'h{i}' for i in range(5000)} <= ids
    regular_count = int((sample['population'] < 400).sum())
    assert regular_count <= 15000
    assert len(sample) <= 20000
    # 5% of 20,000 regular areas
    assert 800 < regular_count < 1200


def test_regular_pool_truncated_to_cap(large_population):
    sample = SampleReducer(rng=np.random.default_rng(7), sample_rate=1.0).reduce(large_population)
    assert len(sample) == 20000
    assert int((sample['population'] >= 400).sum()) == 5000
    assert sample['area_id'].is_unique


def test_no_regular_areas_when_high_areas_fill_the_cap():
    df = pd.DataFrame({
        'area_id': [f'a{i}' for i in range(40)],
        'population': [1000] * 30 + [10] * 10,
        'lat': np.arange(40, dtype=float),
        'long': np.zeros(40),
    })
    sample = SampleReducer(rng=np.random.default_rng(1), max_size=20, sample_rate=1.0).reduce(df)
    assert len(sample) == 30
    assert (sample['population'] == 1000).all()


def test_threshold_is_inclusive():
    points = [PopulationPoint('edge', 400, 0.0, 0.0), PopulationPoint('below', 399, 1.0, 1.0)]
    sample = SampleReducer(rng=np.random.default_rng(3), sample_rate=0.0).reduce(points)
    assert list(sample['area_id']) == ['edge']


def test_empty_input_gives_empty_sample():
    sample = SampleReducer(rng=np.random.default_rng(0)).reduce([])
    assert sample.empty
    assert list(sample.columns) == ['area_id', 'population', 'lat', 'long']


def test_source_data_not_modified(large_population):
    before = large_population.copy()
    SampleReducer(rng=np.random.default_rng(11)).reduce(large_population)
    pd.testing.assert_frame_equal(large_population, before)


def test_same_seed_same_sample(large_population):
    a = SampleReducer(rng=np.random.default_rng(5)).reduce(large_population)
    b = SampleReducer(rng=np.random.default_rng(5)).reduce(large_population)
    pd.testing.assert_frame_equal(a, b)
