"""Loading of population and competitor CSV sources"""
import os
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from config import Config
from models import COMPETITOR_COLUMNS, POPULATION_COLUMNS
from utils.memory_optimizer import MemoryOptimizer

logger = logging.getLogger(__name__)

MAX_REPORTED_ROWS = 5


class DataSourceError(RuntimeError):
    """An input source is missing or cannot be read."""


class InvalidDataError(ValueError):
    """An input source contains values that are not valid numbers."""


def _bad_rows(mask: np.ndarray, first_row: int) -> str:
    rows = (np.flatnonzero(mask)[:MAX_REPORTED_ROWS] + first_row + 1).tolist()
    more = int(mask.sum()) - len(rows)
    suffix = f" (and {more} more)" if more > 0 else ""
    return f"{rows}{suffix}"


def _numeric_column(chunk: pd.DataFrame, column: str, source: str, first_row: int) -> pd.Series:
    raw = chunk[column].astype(str).str.strip().where(chunk[column].notna())
    values = pd.to_numeric(raw, errors='coerce').astype(float)
    invalid = ~np.isfinite(values.to_numpy())
    if invalid.any():
        raise InvalidDataError(
            f"{source}: non-numeric or non-finite '{column}' at data rows {_bad_rows(invalid, first_row)}"
        )
    return values


def _read_source(path: str, processor, source: str, config: Config, columns) -> pd.DataFrame:
    if not path or not os.path.isfile(path):
        raise DataSourceError(f"{source} file not found: {path}")
    try:
        frames = MemoryOptimizer.read_csv_in_chunks(
            path, processor, chunk_size=config.LOAD_CHUNK_SIZE,
            header=0, dtype=str, keep_default_na=False, skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        frames = []
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise DataSourceError(f"Could not read {source} file {path}: {e}") from e

    frames = [f for f in frames if not f.empty]
    if not frames:
        return _empty_frame(columns)
    return pd.concat(frames, ignore_index=True)


def _empty_frame(columns) -> pd.DataFrame:
    dtypes = {'area_id': str, 'population': 'int64', 'lat': float, 'long': float}
    return pd.DataFrame({c: pd.Series(dtype=dtypes[c]) for c in columns})


def load_population(path: Optional[str] = None, config: Optional[Config] = None) -> pd.DataFrame:
    """Read population areas: area_id, population, lat, long (header row required)."""
    config = config if config else Config()
    path = path or config.POPULATION_CSV
    source = "Population"

    def process(chunk: pd.DataFrame, first_row: int) -> pd.DataFrame:
        if first_row % config.LOAD_PROGRESS_INTERVAL == 0:
            logger.info(f"Processed {first_row} areas...")
        if chunk.shape[1] < 4:
            raise InvalidDataError(f"{source}: expected 4 columns, found {chunk.shape[1]}")
        chunk = chunk.iloc[:, :4].copy()
        chunk.columns = POPULATION_COLUMNS

        population = _numeric_column(chunk, 'population', source, first_row)
        fractional_or_negative = ((population < 0) | (population % 1 != 0)).to_numpy()
        if fractional_or_negative.any():
            raise InvalidDataError(
                f"{source}: population must be a non-negative integer at data rows "
                f"{_bad_rows(fractional_or_negative, first_row)}"
            )
        return pd.DataFrame({
            'area_id': chunk['area_id'].astype(str),
            'population': population.astype('int64'),
            'lat': _numeric_column(chunk, 'lat', source, first_row),
            'long': _numeric_column(chunk, 'long', source, first_row),
        })

    df = _read_source(path, process, source, config, POPULATION_COLUMNS)
    logger.info(f"Loaded {len(df)} population areas from {path}")
    return df


def load_competitors(path: Optional[str] = None, config: Optional[Config] = None) -> pd.DataFrame:
    """Read competitor sites: <ignored>, lat, long (header row required)."""
    config = config if config else Config()
    path = path or config.COMPETITORS_CSV
    source = "Competitor"

    def process(chunk: pd.DataFrame, first_row: int) -> pd.DataFrame:
        if chunk.shape[1] < 3:
            raise InvalidDataError(f"{source}: expected 3 columns, found {chunk.shape[1]}")
        chunk = chunk.iloc[:, 1:3].copy()
        chunk.columns = COMPETITOR_COLUMNS
        return pd.DataFrame({
            'lat': _numeric_column(chunk, 'lat', source, first_row),
            'long': _numeric_column(chunk, 'long', source, first_row),
        })

    df = _read_source(path, process, source, config, COMPETITOR_COLUMNS)
    logger.info(f"Loaded {len(df)} competitors from {path}")
    return df


def load_inputs(population_path: Optional[str] = None, competitors_path: Optional[str] = None,
                config: Optional[Config] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load both sources concurrently; returns once both are complete."""
    config = config if config else Config()
    with ThreadPoolExecutor(max_workers=2) as executor:
        population_future = executor.submit(load_population, population_path, config)
        competitors_future = executor.submit(load_competitors, competitors_path, config)
        population = population_future.result()
        competitors = competitors_future.result()

    mu = MemoryOptimizer.get_memory_usage()
    logger.debug(f"Inputs loaded; RSS={mu['rss_mb']:.1f}MB")
    return population, competitors
