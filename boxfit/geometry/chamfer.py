"""Unnormalized bidirectional Chamfer distance between point sets."""

from typing import Tuple

import numpy as np
from scipy.spatial import cKDTree

from .box import ArrayLike, as_point_cloud

CHAMFER_METHODS = ("kdtree", "brute")


def nearest_squared_distances(
    queries: np.ndarray,
    reference: np.ndarray,
    method: str = "kdtree",
) -> np.ndarray:
    """
    Squared distance from each query point to its nearest reference point.

    Args:
        queries: Query points (N, 3).
        reference: Reference points (M, 3).
        method: 'kdtree' (scipy cKDTree) or 'brute' (full N x M matrix).

    Returns:
        Array of shape (N,).
    """
    if method == "kdtree":
        # Squares taken from the matched neighbour, not from the rooted query distance.
        _, idx = cKDTree(reference).query(queries, k=1)
        return np.sum((queries - reference[idx]) ** 2, axis=-1)

    if method == "brute":
        diff = queries[:, None, :] - reference[None, :, :]
        return np.min(np.sum(diff ** 2, axis=-1), axis=1)

    raise ValueError(f"Unknown Chamfer method: {method}. Choose from {CHAMFER_METHODS}")


def chamfer_terms(
    points_a: ArrayLike,
    points_b: ArrayLike,
    method: str = "kdtree",
) -> Tuple[float, float]:
    """
    Both directed halves of the Chamfer distance.

    Returns:
        (sum over A of nearest distance to B, sum over B of nearest distance to A).
    """
    a = as_point_cloud(points_a)
    b = as_point_cloud(points_b)

    a_to_b = float(np.sum(nearest_squared_distances(a, b, method)))
    b_to_a = float(np.sum(nearest_squared_distances(b, a, method)))

    return a_to_b, b_to_a


def chamfer_distance(
    points_a: ArrayLike,
    points_b: ArrayLike,
    method: str = "kdtree",
) -> float:
    """
    Symmetric Chamfer distance with no normalization by point count.

    For every point of A the minimum squared Euclidean distance to B is
    summed, and likewise for every point of B against A. Clouds of
    different sizes are therefore not directly comparable; callers that
    need that must normalize themselves.

    Args:
        points_a: First point set (N, 3), non-empty.
        points_b: Second point set (M, 3), non-empty.
        method: Nearest-neighbour backend, 'kdtree' or 'brute'.

    Returns:
        Non-negative distance; 0 for identical sets.
    """
    a_to_b, b_to_a = chamfer_terms(points_a, points_b, method)
    return a_to_b + b_to_a
