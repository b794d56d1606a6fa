"""
Data-driven proposal over the box center.

The proposal narrows the center prior to a Gaussian around the mean of the
observed points. Extents and sigma are not proposed; the sampler draws
them from their priors.
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats

from ..geometry.box import ArrayLike, as_point_cloud

DEFAULT_ZETA = 0.1


@dataclass(frozen=True)
class ProposedCenter:
    """A proposed center and its log-density under the proposal."""
    xc: float
    yc: float
    zc: float
    log_q: float

    @property
    def center(self) -> np.ndarray:
        return np.array([self.xc, self.yc, self.zc], dtype=np.float64)


class CenterProposal:
    """
    Isotropic Gaussian proposal centered on the observation mean.

    Example:
        >>> proposal = CenterProposal(zeta=0.05)
        >>> draw = proposal.propose(points, np.random.default_rng(0))
        >>> draw.center, draw.log_q
    """

    def __init__(self, zeta: float = DEFAULT_ZETA):
        """
        Initialize the proposal.

        Args:
            zeta: Standard deviation of each center coordinate.
        """
        if not zeta > 0:
            raise ValueError(f"zeta must be positive, got {zeta}")
        self.zeta = float(zeta)

    @staticmethod
    def observation_mean(observations: ArrayLike) -> np.ndarray:
        """Arithmetic mean of the observed points."""
        return np.mean(as_point_cloud(observations), axis=0)

    def log_density(self, center: ArrayLike, observations: ArrayLike) -> float:
        """Log-density of a center under the proposal built from observations."""
        mean = self.observation_mean(observations)
        return float(np.sum(stats.norm.logpdf(center, loc=mean, scale=self.zeta)))

    def propose(self, observations: ArrayLike, rng: np.random.Generator) -> ProposedCenter:
        """
        Draw a center near the observation mean.

        Args:
            observations: Observed points (N, 3), non-empty.
            rng: Random source.

        Returns:
            ProposedCenter with the draw and its log-density.
        """
        return self.propose_around(self.observation_mean(observations), rng)

    def propose_around(self, mean: ArrayLike, rng: np.random.Generator) -> ProposedCenter:
        """Draw a center from a precomputed observation mean."""
        mean = np.asarray(mean, dtype=np.float64)
        center = rng.normal(loc=mean, scale=self.zeta)
        log_q = float(np.sum(stats.norm.logpdf(center, loc=mean, scale=self.zeta)))
        return ProposedCenter(
            xc=float(center[0]),
            yc=float(center[1]),
            zc=float(center[2]),
            log_q=log_q,
        )


def propose(
    observations: ArrayLike,
    zeta: float,
    rng: np.random.Generator,
) -> ProposedCenter:
    """
    Convenience function for a single proposal draw.

    Args:
        observations: Observed points (N, 3).
        zeta: Proposal standard deviation.
        rng: Random source.

    Returns:
        ProposedCenter.
    """
    return CenterProposal(zeta).propose(observations, rng)
