"""
Bayesian inference over box parameters.

Classes:
    PriorBounds: Support of the center and sigma priors.
    BoxGenerativeModel: Prior sampling and log-density evaluation.
    CenterProposal: Gaussian proposal around the observation mean.
    ImportanceSampler: Independent weighted particles.
    HypothesisRanker: Chamfer-based ranking of particles.

Example Usage:
    >>> from boxfit.inference import PriorBounds, ImportanceSampler, HypothesisRanker
    >>>
    >>> bounds = PriorBounds(0, 1, 0, 1, 0, 1, sigma_min=0.01, sigma_max=0.1)
    >>> particles = ImportanceSampler(bounds).infer(points, 500, np.random.default_rng(0))
    >>> best = HypothesisRanker(points_per_edge=50).rank(particles, points, top_k=5)
"""

from .model import BoxGenerativeModel, PriorBounds, EXTENT_BOUNDS
from .proposal import CenterProposal, ProposedCenter, propose, DEFAULT_ZETA
from .sampler import (
    DEGENERATE_LOG_WEIGHT,
    ImportanceSampler,
    Particle,
    effective_sample_size,
    infer,
    normalized_weights,
    posterior_mean,
)
from .ranker import HypothesisRanker, RankedHypothesis, rank, DEFAULT_POINTS_PER_EDGE

__all__ = [
    # Classes
    "PriorBounds",
    "BoxGenerativeModel",
    "CenterProposal",
    "ProposedCenter",
    "ImportanceSampler",
    "Particle",
    "HypothesisRanker",
    "RankedHypothesis",
    # Standalone functions
    "propose",
    "infer",
    "rank",
    "normalized_weights",
    "effective_sample_size",
    "posterior_mean",
    # Constants
    "EXTENT_BOUNDS",
    "DEFAULT_ZETA",
    "DEGENERATE_LOG_WEIGHT",
    "DEFAULT_POINTS_PER_EDGE",
]
