"""Point cloud loading for box fitting inputs."""

from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from ..geometry.box import as_point_cloud, points_in_box_mask

SUPPORTED_SUFFIXES = (".bin", ".npy", ".txt", ".xyz", ".csv")


def load_points(path: Union[str, Path]) -> np.ndarray:
    """
    Load XYZ coordinates from a point cloud file.

    Supported formats:
    - ``.bin``: KITTI Velodyne float32 records (x, y, z, intensity)
    - ``.npy``: array with at least 3 columns
    - ``.txt`` / ``.xyz``: whitespace separated columns
    - ``.csv``: comma separated columns, optional header line

    Extra columns beyond the first three are dropped.

    Args:
        path: Point cloud file.

    Returns:
        Point cloud (N, 3) as float64.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point cloud not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".bin":
        points = np.fromfile(str(path), dtype=np.float32).reshape(-1, 4)
    elif suffix == ".npy":
        points = np.load(str(path))
    elif suffix in (".txt", ".xyz"):
        points = np.loadtxt(str(path), ndmin=2)
    elif suffix == ".csv":
        points = np.genfromtxt(str(path), delimiter=",", ndmin=2)
        # Header row parses as NaN
        points = points[~np.all(np.isnan(points), axis=1)]
    else:
        raise ValueError(f"Unsupported point cloud format: {suffix}. Use one of {SUPPORTED_SUFFIXES}")

    if points.ndim != 2 or points.shape[1] < 3:
        raise ValueError(f"Expected at least 3 columns in {path}, got shape {points.shape}")

    return as_point_cloud(points[:, :3], allow_empty=True)


class PointCloudLoader:
    """Index and load point cloud files from a directory."""

    def __init__(
        self,
        data_root: Union[str, Path],
        pattern: str = "*",
        range_min: float = 0.0,
        range_max: float = np.inf,
    ):
        """
        Initialize the loader.

        Args:
            data_root: Directory containing point cloud files.
            pattern: Glob pattern selecting files inside data_root.
            range_min: Default minimum distance from the origin.
            range_max: Default maximum distance from the origin.
        """
        self.data_root = Path(data_root)
        self.pattern = pattern
        self.range_min = range_min
        self.range_max = range_max

        self._validate_path()
        self._index_pointclouds()

    def _validate_path(self) -> None:
        """Validate that the data directory exists."""
        if not self.data_root.is_dir():
            raise FileNotFoundError(f"Point cloud directory not found: {self.data_root}")

    def _index_pointclouds(self) -> None:
        """Index all supported point cloud files."""
        self.files: List[Path] = sorted(
            path for path in self.data_root.glob(self.pattern)
            if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES
        )

    def __len__(self) -> int:
        """Return the number of available point clouds."""
        return len(self.files)

    def __getitem__(self, index: int) -> np.ndarray:
        """Load point cloud by index."""
        return self.load_pointcloud(index)

    def load_pointcloud(self, index: Union[int, str]) -> np.ndarray:
        """
        Load a single point cloud.

        Args:
            index: File index (int) or file name relative to data_root (str).

        Returns:
            Point cloud (N, 3).
        """
        if isinstance(index, int):
            if index < 0 or index >= len(self.files):
                raise IndexError(f"Point cloud index {index} out of range [0, {len(self) - 1}]")
            path = self.files[index]
        else:
            path = self.data_root / index

        return load_points(path)

    def get_frame_id(self, index: int) -> str:
        """File stem of the point cloud at index."""
        return self.files[index].stem

    def filter_by_range(
        self,
        points: np.ndarray,
        range_min: Optional[float] = None,
        range_max: Optional[float] = None,
    ) -> np.ndarray:
        """
        Keep points whose distance from the origin lies in [range_min, range_max].

        Args:
            points: Point cloud (N, 3).
            range_min: Minimum range (uses instance default if None).
            range_max: Maximum range (uses instance default if None).

        Returns:
            Filtered point cloud.
        """
        range_min = self.range_min if range_min is None else range_min
        range_max = self.range_max if range_max is None else range_max

        distances = np.linalg.norm(points, axis=1)
        mask = (distances >= range_min) & (distances <= range_max)

        return points[mask]

    @staticmethod
    def crop_to_box(
        points: np.ndarray,
        center: np.ndarray,
        extents: np.ndarray,
    ) -> np.ndarray:
        """
        Keep points inside an axis-aligned region.

        Args:
            points: Point cloud (N, 3).
            center: Region center (x, y, z).
            extents: Region size along X, Y, Z.

        Returns:
            Cropped point cloud.
        """
        return points[points_in_box_mask(points, center, extents)]

    @staticmethod
    def get_statistics(points: np.ndarray) -> Dict[str, object]:
        """
        Compute point cloud statistics.

        Args:
            points: Point cloud (N, 3), non-empty.

        Returns:
            Dictionary with count, per-axis ranges and centroid.
        """
        points = as_point_cloud(points)
        return {
            "num_points": len(points),
            "x_range": (float(points[:, 0].min()), float(points[:, 0].max())),
            "y_range": (float(points[:, 1].min()), float(points[:, 1].max())),
            "z_range": (float(points[:, 2].min()), float(points[:, 2].max())),
            "centroid": points.mean(axis=0).tolist(),
        }
