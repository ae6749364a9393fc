"""Reading and writing optimization result files"""
import json
import os
import logging
from typing import Union

from models import OptimizationResult

logger = logging.getLogger(__name__)


def save_results(result: OptimizationResult, path: Union[str, os.PathLike]) -> str:
    """Write the output record as indented JSON and return the path written."""
    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)

    logger.info(f"Results saved to {path}")
    return path


def load_results(path: Union[str, os.PathLike]) -> OptimizationResult:
    """Load a results file, validating it against the output schema."""
    path = os.fspath(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Results file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return OptimizationResult.model_validate(data)
