import pytest

from config import Config
from data_processing.data_loader import (
    DataSourceError, InvalidDataError, load_competitors, load_inputs, load_population,
)


class SmallChunkConfig(Config):
    LOAD_CHUNK_SIZE = 2


def _write(path, text):
    path.write_text(text, encoding='utf-8')
    return str(path)


@pytest.fixture
def population_csv(tmp_path):
    return _write(tmp_path / 'population.csv', (
        "oa_id,population,lat,long\n"
        "E001,450,51.5010,-0.1200\n"
        "E002,120,51.5020,-0.1210\n"
        "E003,0,51.5030,-0.1220\n"
        "E004,980,51.5040,-0.1230\n"
        "E005,33,51.5050,-0.1240\n"
    ))


@pytest.fixture
def competitors_csv(tmp_path):
    return _write(tmp_path / 'week1.csv', (
        "store,lat,long\n"
        "Store A,51.5100,-0.1300\n"
        "Store B,51.4900,-0.1100\n"
    ))


def test_load_population(population_csv):
    df = load_population(population_csv, SmallChunkConfig())
    assert list(df.columns) == ['area_id', 'population', 'lat', 'long']
    assert len(df) == 5
    assert df['area_id'].tolist() == ['E001', 'E002', 'E003', 'E004', 'E005']
    assert df['population'].tolist() == [450, 120, 0, 980, 33]
    assert df['lat'].iloc[3] == pytest.approx(51.504)


def test_load_competitors_ignores_first_column(competitors_csv):
    df = load_competitors(competitors_csv)
    assert list(df.columns) == ['lat', 'long']
    assert df.values.tolist() == [[51.51, -0.13], [51.49, -0.11]]


def test_missing_file_fails_the_load(tmp_path):
    with pytest.raises(DataSourceError, match="not found"):
        load_population(str(tmp_path / 'nope.csv'))


def test_non_numeric_population_reports_row(tmp_path):
    path = _write(tmp_path / 'pop.csv', (
        "oa_id,population,lat,long\n"
        "E001,10,51.5,-0.1\n"
        "E002,many,51.6,-0.2\n"
    ))
    with pytest.raises(InvalidDataError, match=r"population.*\[2\]"):
        load_population(path)


def test_bad_row_number_counts_across_chunks(tmp_path):
    path = _write(tmp_path / 'pop.csv', (
        "oa_id,population,lat,long\n"
        "E001,10,51.5,-0.1\n"
        "E002,10,51.5,-0.1\n"
        "E003,10,51.5,-0.1\n"
        "E004,10,north,-0.1\n"
    ))
    with pytest.raises(InvalidDataError, match=r"lat.*\[4\]"):
        load_population(path, SmallChunkConfig())


@pytest.mark.parametrize("value", ["-5", "12.5"])
def test_population_must_be_non_negative_integer(tmp_path, value):
    path = _write(tmp_path / 'pop.csv', f"oa_id,population,lat,long\nE001,{value},51.5,-0.1\n")
    with pytest.raises(InvalidDataError, match="non-negative integer"):
        load_population(path)


def test_missing_coordinate_is_invalid(tmp_path):
    path = _write(tmp_path / 'week1.csv', "store,lat,long\nStore A,51.5,\n")
    with pytest.raises(InvalidDataError, match="long"):
        load_competitors(path)


def test_header_only_file_is_empty_data(tmp_path):
    path = _write(tmp_path / 'pop.csv', "oa_id,population,lat,long\n")
    df = load_population(path)
    assert df.empty
    assert list(df.columns) == ['area_id', 'population', 'lat', 'long']


def test_blank_file_is_empty_data(tmp_path):
    path = _write(tmp_path / 'week1.csv', "")
    assert load_competitors(path).empty


def test_load_inputs_returns_both_sources(population_csv, competitors_csv):
    population, competitors = load_inputs(population_csv, competitors_csv)
    assert len(population) == 5
    assert len(competitors) == 2


def test_load_inputs_propagates_failures(population_csv, tmp_path):
    with pytest.raises(DataSourceError):
        load_inputs(population_csv, str(tmp_path / 'missing.csv'))
