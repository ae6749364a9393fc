"""Planar distance helpers.

Latitude and longitude are treated as flat Cartesian coordinates. Every
threshold in Config is calibrated against this metric, so it is kept even
though it is not geodesically accurate.
"""
import math

import numpy as np


def planar_distance(lat1: float, long1: float, lat2: float, long2: float) -> float:
    dlat = lat2 - lat1
    dlong = long2 - long1
    return math.sqrt(dlat * dlat + dlong * dlong)


def squared_distances(lats: np.ndarray, longs: np.ndarray, lat: float, long: float) -> np.ndarray:
    """Squared distance from every (lats[i], longs[i]) to a single point."""
    dlat = lat - lats
    dlong = long - longs
    return dlat * dlat + dlong * dlong


def distance_matrix(lats: np.ndarray, longs: np.ndarray,
                    center_lats: np.ndarray, center_longs: np.ndarray) -> np.ndarray:
    """(n,) points x (k,) centers -> (n, k) distance matrix."""
    dlat = center_lats[np.newaxis, :] - lats[:, np.newaxis]
    dlong = center_longs[np.newaxis, :] - longs[:, np.newaxis]
    return np.sqrt(dlat * dlat + dlong * dlong)
