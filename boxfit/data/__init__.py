"""Point cloud inputs: file loading and synthetic generation."""

from .pointcloud_loader import PointCloudLoader, load_points, SUPPORTED_SUFFIXES
from .synthetic import sample_box_edge_points, sample_gaussian_cluster

__all__ = [
    "PointCloudLoader",
    "load_points",
    "SUPPORTED_SUFFIXES",
    "sample_box_edge_points",
    "sample_gaussian_cluster",
]
