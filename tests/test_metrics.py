"""Tests for box evaluation metrics."""

import numpy as np
import pytest

from boxfit.eval.metrics import (
    center_error,
    compute_iou_axis_aligned,
    extent_error,
    fraction_inside_box,
    summarize_hypotheses,
)
from boxfit.geometry.box import BoxParameters
from boxfit.inference.ranker import RankedHypothesis


def make_box(xc=0.0, yc=0.0, zc=0.0, L=1.0, W=1.0, H=1.0):
    return BoxParameters(xc=xc, yc=yc, zc=zc, L=L, W=W, H=H, sigma=0.05)


class TestFractionInside:
    """Tests for fraction_inside_box."""

    def test_half_inside(self):
        """Test two of four points inside."""
        points = np.array([
            [0.0, 0.0, 0.0],
            [0.4, -0.4, 0.1],
            [0.7, 0.0, 0.0],
            [0.0, 0.0, -2.0],
        ])
        assert fraction_inside_box(points, make_box()) == 0.5

    def test_margin(self):
        """Test the margin grows the box on every side."""
        points = np.array([[0.55, 0.0, 0.0]])

        assert fraction_inside_box(points, make_box()) == 0.0
        assert fraction_inside_box(points, make_box(), margin=0.1) == 1.0


class TestBoxErrors:
    """Tests for center / extent errors and IoU."""

    def test_center_error(self):
        """Test the Euclidean center distance."""
        assert np.isclose(center_error(make_box(xc=3.0, yc=4.0), make_box()), 5.0)

    def test_extent_error(self):
        """Test absolute extent differences."""
        error = extent_error(make_box(L=0.5, W=2.0), make_box())
        assert np.allclose(error, [0.5, 1.0, 0.0])

    def test_iou_identical(self):
        """Test identical boxes have IoU 1."""
        assert np.isclose(compute_iou_axis_aligned(make_box(), make_box()), 1.0)

    def test_iou_disjoint(self):
        """Test separated boxes have IoU 0."""
        assert compute_iou_axis_aligned(make_box(), make_box(xc=5.0)) == 0.0

    def test_iou_half_shift(self):
        """Test a half-width shift gives IoU 1/3."""
        iou = compute_iou_axis_aligned(make_box(), make_box(xc=0.5))
        assert np.isclose(iou, 1.0 / 3.0)


class TestSummarizeHypotheses:
    """Tests for summarize_hypotheses."""

    @pytest.fixture
    def ranked(self):
        return [
            RankedHypothesis(params=make_box(), chamfer_score=0.5, particle_index=3),
            RankedHypothesis(params=make_box(xc=2.0), chamfer_score=4.0, particle_index=0),
        ]

    def test_without_reference(self, ranked):
        """Test ranks and point coverage are reported."""
        points = np.zeros((10, 3))
        summaries = summarize_hypotheses(ranked, points)

        assert [s.rank for s in summaries] == [1, 2]
        assert [s.fraction_inside for s in summaries] == [1.0, 0.0]
        assert summaries[0].iou is None

    def test_with_reference(self, ranked):
        """Test reference-based errors are filled in."""
        summaries = summarize_hypotheses(ranked, np.zeros((10, 3)), reference=make_box())

        assert np.isclose(summaries[0].iou, 1.0)
        assert np.isclose(summaries[1].center_error, 2.0)
        assert summaries[1].to_dict()["extent_error"] == [0.0, 0.0, 0.0]
