"""
Wireframe sampling of axis-aligned boxes.

A box is represented for scoring by a fixed-size point set: a sentinel at
the coordinate origin followed by evenly spaced samples along each of the
box's 12 edges.
"""

from typing import Sequence, Union

import numpy as np

from ..errors import NonPositiveExtentError
from .box import BoxParameters, compute_box_edges, compute_corners

# Always the first point of every wireframe, independent of the box.
SENTINEL_POINT = np.zeros(3, dtype=np.float64)

NUM_EDGES = 12


def num_wireframe_points(points_per_edge: int) -> int:
    """Number of points produced by map_box_to_points."""
    return NUM_EDGES * points_per_edge + 1


def map_box_to_points(
    L: float,
    W: float,
    H: float,
    center: Union[np.ndarray, Sequence[float]],
    points_per_edge: int,
) -> np.ndarray:
    """
    Map box extents and center to a wireframe point cloud.

    Edges are walked in three families (parallel to X, then Y, then Z),
    four edges each. Along an edge the samples sit at fractional offsets
    1/p, 2/p, ..., 1 from the edge's lower-coordinate corner.

    Args:
        L: Extent along X.
        W: Extent along Y.
        H: Extent along Z.
        center: Box center (x, y, z).
        points_per_edge: Samples per edge (p >= 0).

    Returns:
        Point cloud of shape (12 * p + 1, 3); row 0 is the origin.
    """
    extents = np.array([L, W, H], dtype=np.float64)
    if not np.all(extents > 0):
        raise NonPositiveExtentError(
            f"Box extents must be positive, got L={L}, W={W}, H={H}"
        )

    if int(points_per_edge) != points_per_edge or points_per_edge < 0:
        raise ValueError(f"points_per_edge must be a non-negative integer, got {points_per_edge}")
    points_per_edge = int(points_per_edge)

    cloud = np.empty((num_wireframe_points(points_per_edge), 3), dtype=np.float64)
    cloud[0] = SENTINEL_POINT

    if points_per_edge == 0:
        return cloud

    corners = compute_corners(np.asarray(center, dtype=np.float64), extents)
    offsets = np.arange(1, points_per_edge + 1, dtype=np.float64) / points_per_edge

    for edge_idx, (start_idx, end_idx) in enumerate(compute_box_edges()):
        start = corners[start_idx]
        direction = corners[end_idx] - start
        first = 1 + edge_idx * points_per_edge
        cloud[first:first + points_per_edge] = start + offsets[:, None] * direction

    return cloud


def box_to_points(params: BoxParameters, points_per_edge: int) -> np.ndarray:
    """
    Wireframe point cloud for a BoxParameters instance.

    Args:
        params: Box hypothesis.
        points_per_edge: Samples per edge.

    Returns:
        Point cloud of shape (12 * points_per_edge + 1, 3).
    """
    return map_box_to_points(params.L, params.W, params.H, params.center, points_per_edge)
