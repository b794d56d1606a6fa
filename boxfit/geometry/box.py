"""
Axis-aligned box parameters and point cloud helpers.

Coordinate convention:
- L (length) spans the X axis
- W (width) spans the Y axis
- H (height) spans the Z axis

Boxes are never rotated; orientation estimation is outside the scope of
this package.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence, Tuple, Union

import numpy as np

from ..errors import EmptyObservationError

ArrayLike = Union[np.ndarray, Sequence[Sequence[float]]]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class BoxParameters:
    """
    Parameters of one box hypothesis.

    Attributes:
        xc, yc, zc: Box center.
        L, W, H: Extents along X, Y and Z.
        sigma: Isotropic spread of observed points around the center.
    """
    xc: float
    yc: float
    zc: float
    L: float
    W: float
    H: float
    sigma: float

    @property
    def center(self) -> np.ndarray:
        """Center as a (3,) array."""
        return np.array([self.xc, self.yc, self.zc], dtype=np.float64)

    @property
    def extents(self) -> np.ndarray:
        """(L, W, H) as a (3,) array."""
        return np.array([self.L, self.W, self.H], dtype=np.float64)

    @property
    def volume(self) -> float:
        """Box volume."""
        return float(self.L * self.W * self.H)

    @property
    def corners(self) -> np.ndarray:
        """
        Get the 8 corners of the box.

        Corner ordering (Z pointing up):
            7 ---- 6
           /|     /|
          4 ---- 5 |
          | 3 ---|-2
          |/     |/
          0 ---- 1

        Returns:
            Corners array (8, 3).
        """
        return compute_corners(self.center, self.extents)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for serialization."""
        return {key: float(value) for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoxParameters":
        """Build parameters from a mapping with the dataclass field names."""
        return cls(
            xc=float(data["xc"]),
            yc=float(data["yc"]),
            zc=float(data["zc"]),
            L=float(data["L"]),
            W=float(data["W"]),
            H=float(data["H"]),
            sigma=float(data["sigma"]),
        )


# =============================================================================
# Standalone Utility Functions
# =============================================================================

def as_point_cloud(points: ArrayLike, allow_empty: bool = False) -> np.ndarray:
    """
    Coerce an array-like of 3D points to a float64 (N, 3) array.

    Args:
        points: Points as an (N, 3) array or nested sequence.
        allow_empty: Whether a cloud with zero points is acceptable.

    Returns:
        Point cloud array (N, 3).
    """
    cloud = np.asarray(points, dtype=np.float64)

    if cloud.size == 0:
        if not allow_empty:
            raise EmptyObservationError("Point cloud contains no points")
        return cloud.reshape(0, 3)

    if cloud.ndim != 2 or cloud.shape[1] != 3:
        raise ValueError(f"Expected point cloud of shape (N, 3), got {cloud.shape}")

    return cloud


def compute_corners(center: np.ndarray, extents: np.ndarray) -> np.ndarray:
    """
    Compute the 8 corners of an axis-aligned box.

    Args:
        center: Box center (x, y, z).
        extents: Box extents (L, W, H).

    Returns:
        Corners array (8, 3), ordered as documented on BoxParameters.corners.
    """
    half = np.asarray(extents, dtype=np.float64) / 2.0

    signs = np.array([
        [-1, -1, -1],  # 0
        [1, -1, -1],   # 1
        [1, 1, -1],    # 2
        [-1, 1, -1],   # 3
        [-1, -1, 1],   # 4
        [1, -1, 1],    # 5
        [1, 1, 1],     # 6
        [-1, 1, 1],    # 7
    ], dtype=np.float64)

    return signs * half + np.asarray(center, dtype=np.float64)


def compute_box_edges() -> List[Tuple[int, int]]:
    """
    Get corner index pairs for the 12 box edges, grouped by axis.

    Each edge runs from its lower to its higher coordinate along its axis.

    Returns:
        List of (start_idx, end_idx) pairs: 4 X-parallel edges, then 4
        Y-parallel edges, then 4 Z-parallel edges.
    """
    return [
        # Along X
        (0, 1), (3, 2), (4, 5), (7, 6),
        # Along Y
        (0, 3), (1, 2), (4, 7), (5, 6),
        # Along Z
        (0, 4), (1, 5), (2, 6), (3, 7),
    ]


def points_in_box_mask(
    points: np.ndarray,
    center: np.ndarray,
    extents: np.ndarray,
    margin: float = 0.0,
) -> np.ndarray:
    """
    Boolean mask of points lying inside an axis-aligned box.

    Args:
        points: Point cloud (N, 3).
        center: Box center (x, y, z).
        extents: Box extents (L, W, H).
        margin: Tolerance added to each half-extent.

    Returns:
        Mask of shape (N,).
    """
    half = np.asarray(extents, dtype=np.float64) / 2.0 + margin
    offsets = np.abs(np.asarray(points, dtype=np.float64) - center)
    return np.all(offsets <= half, axis=1)
