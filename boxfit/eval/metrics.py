"""
Evaluation metrics for fitted boxes.

Metric Definitions:
-------------------
- **Fraction inside**: share of observed points lying in the box
  (optionally grown by a margin on every side)
- **Center error**: Euclidean distance between two box centers
- **Extent error**: |L1 - L2|, |W1 - W2|, |H1 - H2|
- **Axis-aligned IoU**: intersection volume / union volume of two boxes
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..geometry.box import ArrayLike, BoxParameters, as_point_cloud, points_in_box_mask


@dataclass
class HypothesisSummary:
    """Accuracy figures for one ranked hypothesis."""
    rank: int
    chamfer_score: float
    fraction_inside: float
    center_error: Optional[float] = None
    extent_error: Optional[np.ndarray] = None
    iou: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "rank": self.rank,
            "chamfer_score": self.chamfer_score,
            "fraction_inside": self.fraction_inside,
            "center_error": self.center_error,
            "extent_error": None if self.extent_error is None else self.extent_error.tolist(),
            "iou": self.iou,
        }


def fraction_inside_box(
    points: ArrayLike,
    params: BoxParameters,
    margin: float = 0.0,
) -> float:
    """
    Fraction of points inside a box.

    Args:
        points: Observed points (N, 3), non-empty.
        params: Box to test against.
        margin: Tolerance added to every half-extent.

    Returns:
        Value in [0, 1].
    """
    cloud = as_point_cloud(points)
    mask = points_in_box_mask(cloud, params.center, params.extents, margin)
    return float(np.mean(mask))


def center_error(predicted: BoxParameters, reference: BoxParameters) -> float:
    """Euclidean distance between box centers."""
    return float(np.linalg.norm(predicted.center - reference.center))


def extent_error(predicted: BoxParameters, reference: BoxParameters) -> np.ndarray:
    """Absolute (L, W, H) differences."""
    return np.abs(predicted.extents - reference.extents)


def compute_iou_axis_aligned(box1: BoxParameters, box2: BoxParameters) -> float:
    """
    Intersection over union of two axis-aligned boxes.

    Args:
        box1: First box.
        box2: Second box.

    Returns:
        IoU in [0, 1]; 0 when both volumes are zero.
    """
    low = np.maximum(box1.center - box1.extents / 2, box2.center - box2.extents / 2)
    high = np.minimum(box1.center + box1.extents / 2, box2.center + box2.extents / 2)

    intersection = float(np.prod(np.clip(high - low, 0.0, None)))
    union = box1.volume + box2.volume - intersection

    return intersection / union if union > 0 else 0.0


def summarize_hypotheses(
    ranked: Sequence[Any],
    observations: ArrayLike,
    reference: Optional[BoxParameters] = None,
    margin: float = 0.0,
) -> List[HypothesisSummary]:
    """
    Accuracy summary for ranked hypotheses.

    Args:
        ranked: RankedHypothesis objects, best first.
        observations: Observed points (N, 3).
        reference: Known box, if available, for center / extent / IoU errors.
        margin: Tolerance for fraction_inside_box.

    Returns:
        One HypothesisSummary per hypothesis.
    """
    cloud = as_point_cloud(observations)
    summaries = []

    for position, hypothesis in enumerate(ranked, start=1):
        summary = HypothesisSummary(
            rank=position,
            chamfer_score=hypothesis.chamfer_score,
            fraction_inside=fraction_inside_box(cloud, hypothesis.params, margin),
        )
        if reference is not None:
            summary.center_error = center_error(hypothesis.params, reference)
            summary.extent_error = extent_error(hypothesis.params, reference)
            summary.iou = compute_iou_axis_aligned(hypothesis.params, reference)
        summaries.append(summary)

    return summaries
