"""
Box geometry and point set comparison.

Classes:
    BoxParameters: Center, extents and point spread of one box hypothesis.

Standalone Functions:
    map_box_to_points: Sample a box wireframe as a point cloud.
    box_to_points: Same, for a BoxParameters instance.
    chamfer_distance: Unnormalized symmetric Chamfer distance.
    as_point_cloud: Validate and coerce points to an (N, 3) array.
"""

from .box import (
    BoxParameters,
    as_point_cloud,
    compute_box_edges,
    compute_corners,
    points_in_box_mask,
)
from .wireframe import map_box_to_points, box_to_points, num_wireframe_points
from .chamfer import chamfer_distance, chamfer_terms

__all__ = [
    # Classes
    "BoxParameters",
    # Standalone functions
    "as_point_cloud",
    "compute_box_edges",
    "compute_corners",
    "points_in_box_mask",
    "map_box_to_points",
    "box_to_points",
    "num_wireframe_points",
    "chamfer_distance",
    "chamfer_terms",
]
