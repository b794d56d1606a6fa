"""Evaluation of fitted boxes against observations and reference boxes."""

from .metrics import (
    HypothesisSummary,
    center_error,
    compute_iou_axis_aligned,
    extent_error,
    fraction_inside_box,
    summarize_hypotheses,
)

__all__ = [
    "HypothesisSummary",
    "center_error",
    "compute_iou_axis_aligned",
    "extent_error",
    "fraction_inside_box",
    "summarize_hypotheses",
]
