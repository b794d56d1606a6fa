"""Tests for the end-to-end box fitting pipeline."""

import numpy as np
import pytest

from boxfit.data.synthetic import sample_box_edge_points
from boxfit.errors import EmptyObservationError, InvalidBoundsError
from boxfit.geometry.box import BoxParameters
from boxfit.pipeline import BoxFitPipeline, FitResult


@pytest.fixture
def small_config():
    """Fast settings for tests."""
    return {
        "inference": {"num_particles": 60, "seed": 5, "zeta": 0.05},
        "ranking": {"points_per_edge": 5, "top_k": 3},
    }


@pytest.fixture
def edge_cloud():
    """Noisy box-edge samples around (0.5, 0.5, 0.5)."""
    box = BoxParameters(xc=0.5, yc=0.5, zc=0.5, L=0.3, W=0.2, H=0.1, sigma=0.05)
    return sample_box_edge_points(box, 200, 0.005, np.random.default_rng(1))


class TestBoxFitPipeline:
    """Tests for BoxFitPipeline."""

    def test_fit(self, small_config, edge_cloud):
        """Test fit returns top-K sorted hypotheses and all particles."""
        result = BoxFitPipeline(small_config).fit(edge_cloud)

        assert isinstance(result, FitResult)
        assert len(result.particles) == 60
        assert len(result.hypotheses) == 3
        assert result.best is result.hypotheses[0]

        scores = [h.chamfer_score for h in result.hypotheses]
        assert scores == sorted(scores)

    def test_stats(self, small_config, edge_cloud):
        """Test weight diagnostics are reported."""
        result = BoxFitPipeline(small_config).fit(edge_cloud)

        assert 1.0 <= result.stats["effective_sample_size"] <= 60.0
        assert result.stats["num_degenerate"] == 0
        assert set(result.stats["posterior_mean"]) == {"xc", "yc", "zc", "L", "W", "H", "sigma"}

    def test_seeded_runs_repeat(self, small_config, edge_cloud):
        """Test the configured seed makes fits reproducible."""
        a = BoxFitPipeline(small_config).fit(edge_cloud)
        b = BoxFitPipeline(small_config).fit(edge_cloud)

        assert [h.params for h in a.hypotheses] == [h.params for h in b.hypotheses]

    def test_to_dict(self, small_config, edge_cloud):
        """Test the JSON-ready summary."""
        data = BoxFitPipeline(small_config).fit(edge_cloud).to_dict()

        assert data["num_points"] == 200
        assert data["num_particles"] == 60
        assert len(data["hypotheses"]) == 3

    def test_invalid_bounds(self, small_config):
        """Test inverted bounds in the config are rejected."""
        config = dict(small_config, bounds={"x": [1.0, 0.0]})
        with pytest.raises(InvalidBoundsError):
            BoxFitPipeline(config)

    def test_empty_cloud(self, small_config):
        """Test fitting an empty cloud fails."""
        with pytest.raises(EmptyObservationError):
            BoxFitPipeline(small_config).fit(np.zeros((0, 3)))
