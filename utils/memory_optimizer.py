"""Memory utilities for loading large CSV inputs"""
import gc
import os
import psutil
import logging
from typing import Any, Callable, Dict, List

import pandas as pd

logger = logging.getLogger(__name__)


class MemoryOptimizer:
    @staticmethod
    def get_memory_usage() -> Dict[str, float]:
        p = psutil.Process(os.getpid())
        mi = p.memory_info()
        return {
            'rss_mb': mi.rss / 1024 / 1024,
            'vms_mb': mi.vms / 1024 / 1024,
            'percent': p.memory_percent(),
            'available_mb': psutil.virtual_memory().available / 1024 / 1024,
        }

    @staticmethod
    def read_csv_in_chunks(filepath: str, processor_func: Callable[[pd.DataFrame, int], Any],
                           chunk_size: int = 10000, **read_kwargs) -> List[Any]:
        """Apply processor_func(chunk, first_row) to each chunk and collect the results.

        first_row is the 0-based data row index of the chunk's first line.
        """
        results = []
        size_mb = os.path.getsize(filepath) / 1024 / 1024
        logger.info(f"Processing file: {filepath} ({size_mb:.1f}MB)")
        first_row = 0
        for idx, chunk in enumerate(pd.read_csv(filepath, chunksize=chunk_size, **read_kwargs), start=1):
            results.append(processor_func(chunk, first_row))
            first_row += len(chunk)
            del chunk
            if idx % 10 == 0:
                gc.collect()
                mu = MemoryOptimizer.get_memory_usage()
                logger.debug(f"Processed {idx} chunks; RSS={mu['rss_mb']:.1f}MB")
        return results
