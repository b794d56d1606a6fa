"""
Synthetic observations for demonstrations and tests.

Points are drawn uniformly along the edges of a box and perturbed with
isotropic Gaussian noise. This is how demo scans are produced, not how the
inference model assumes observations arise (the model places points in a
Gaussian cloud around the center).
"""

import numpy as np

from ..errors import NonPositiveExtentError
from ..geometry.box import BoxParameters, compute_box_edges


def sample_box_edge_points(
    params: BoxParameters,
    num_points: int,
    noise_std: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Sample noisy points along the 12 edges of a box.

    Each point picks an edge uniformly at random, a uniform position along
    it, and then receives N(0, noise_std^2) noise per coordinate.

    Args:
        params: Box to sample (sigma is ignored).
        num_points: Number of points to draw.
        noise_std: Standard deviation of the additive noise (>= 0).
        rng: Random source.

    Returns:
        Point cloud (num_points, 3).
    """
    if num_points < 0:
        raise ValueError(f"num_points must be non-negative, got {num_points}")
    if noise_std < 0:
        raise ValueError(f"noise_std must be non-negative, got {noise_std}")
    if not np.all(params.extents > 0):
        raise NonPositiveExtentError(f"Box extents must be positive, got {params.extents}")

    corners = params.corners
    edges = np.array(compute_box_edges())

    edge_ids = rng.integers(0, len(edges), size=num_points)
    offsets = rng.uniform(0.0, 1.0, size=(num_points, 1))

    starts = corners[edges[edge_ids, 0]]
    ends = corners[edges[edge_ids, 1]]
    points = starts + offsets * (ends - starts)

    return points + rng.normal(0.0, noise_std, size=points.shape)


def sample_gaussian_cluster(
    center: np.ndarray,
    spread: float,
    num_points: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Sample an isotropic Gaussian blob of points.

    Args:
        center: Blob center (x, y, z).
        spread: Standard deviation per coordinate.
        num_points: Number of points to draw.
        rng: Random source.

    Returns:
        Point cloud (num_points, 3).
    """
    return rng.normal(loc=np.asarray(center, dtype=np.float64), scale=spread, size=(num_points, 3))
