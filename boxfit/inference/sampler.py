"""
Importance sampling over box parameters.

Each particle draws its center from the data-driven proposal and its
extents and sigma from their priors, then is weighted by

    log_weight = log p(center) + log p(observations | center, sigma) - log q(center)

The extent and sigma prior terms cancel because those parameters are drawn
from the prior itself. Particles are independent and are never resampled.

Every particle consumes its own child generator spawned from the caller's
generator, so results do not depend on the number of worker threads.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from scipy.special import logsumexp

from ..geometry.box import ArrayLike, BoxParameters, as_point_cloud
from ..utils.logger import LoggerMixin, ProgressLogger
from .model import BoxGenerativeModel, PriorBounds
from .proposal import DEFAULT_ZETA, CenterProposal

# Weight given to particles whose observation density is zero or underflows.
DEGENERATE_LOG_WEIGHT = -np.inf


def resolve_num_workers(num_workers: Optional[int]) -> int:
    """Worker thread count; None means one per available core."""
    if num_workers is None:
        return os.cpu_count() or 1
    if num_workers < 1:
        raise ValueError(f"num_workers must be at least 1, got {num_workers}")
    return int(num_workers)


def finite_or_none(value: float) -> Optional[float]:
    """Float value for JSON output; None for -inf, inf and NaN."""
    value = float(value)
    return value if np.isfinite(value) else None


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Particle:
    """
    One weighted sample of box parameters.

    Attributes:
        params: Sampled box parameters.
        log_weight: Unnormalized log importance weight.
    """
    params: BoxParameters
    log_weight: float

    @property
    def is_degenerate(self) -> bool:
        """Whether the model assigns zero density to the observations."""
        return not np.isfinite(self.log_weight)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "params": self.params.to_dict(),
            "log_weight": finite_or_none(self.log_weight),
        }


# =============================================================================
# Importance Sampler
# =============================================================================

class ImportanceSampler(LoggerMixin):
    """
    Draw independent weighted particles for an observed point cloud.

    Example:
        >>> sampler = ImportanceSampler(bounds, zeta=0.05, num_workers=4)
        >>> particles = sampler.infer(points, 1000, np.random.default_rng(7))
    """

    def __init__(
        self,
        bounds: PriorBounds,
        zeta: float = DEFAULT_ZETA,
        num_workers: Optional[int] = 1,
    ):
        """
        Initialize the sampler.

        Args:
            bounds: Support of the center and sigma priors.
            zeta: Standard deviation of the center proposal.
            num_workers: Worker threads; None uses all available cores.
        """
        self.model = BoxGenerativeModel(bounds)
        self.proposal = CenterProposal(zeta)
        self.num_workers = resolve_num_workers(num_workers)

    @property
    def bounds(self) -> PriorBounds:
        return self.model.bounds

    def sample_particle(
        self,
        observations: np.ndarray,
        rng: np.random.Generator,
        mean: Optional[np.ndarray] = None,
    ) -> Particle:
        """
        Draw and weight a single particle.

        Args:
            observations: Observed points (N, 3).
            rng: Random source dedicated to this particle.
            mean: Observation mean; computed from observations if None.

        Returns:
            Weighted particle.
        """
        if mean is None:
            mean = self.proposal.observation_mean(observations)
        proposed = self.proposal.propose_around(mean, rng)
        L, W, H = self.model.sample_extents(rng)
        sigma = self.model.sample_sigma(rng)

        params = BoxParameters(
            xc=proposed.xc, yc=proposed.yc, zc=proposed.zc,
            L=float(L), W=float(W), H=float(H),
            sigma=sigma,
        )

        log_prior = self.model.center_log_prior(proposed.xc, proposed.yc, proposed.zc)
        if np.isneginf(log_prior):
            return Particle(params=params, log_weight=DEGENERATE_LOG_WEIGHT)

        log_likelihood = self.model.log_likelihood(observations, proposed.center, sigma)
        log_weight = log_prior + log_likelihood - proposed.log_q

        if not np.isfinite(log_weight):
            log_weight = DEGENERATE_LOG_WEIGHT

        return Particle(params=params, log_weight=float(log_weight))

    def infer(
        self,
        observations: ArrayLike,
        num_particles: int,
        rng: Optional[np.random.Generator] = None,
    ) -> List[Particle]:
        """
        Run importance sampling.

        Args:
            observations: Observed points (N, 3), non-empty.
            num_particles: Number of particles K.
            rng: Random source; a fresh unseeded generator if None.

        Returns:
            List of K particles in draw order.
        """
        points = as_point_cloud(observations)

        if num_particles < 1:
            raise ValueError(f"num_particles must be at least 1, got {num_particles}")

        rng = rng if rng is not None else np.random.default_rng()
        streams = rng.spawn(num_particles)
        mean = self.proposal.observation_mean(points)

        self.logger.debug(
            f"Sampling {num_particles} particles for {len(points)} points "
            f"(zeta={self.proposal.zeta}, workers={self.num_workers})"
        )

        particles: List[Optional[Particle]] = [None] * num_particles

        with ProgressLogger(
            num_particles,
            logger=self.logger,
            description="Importance sampling",
            level=logging.DEBUG,
        ) as progress:
            if self.num_workers == 1:
                for idx, stream in enumerate(streams):
                    particles[idx] = self.sample_particle(points, stream, mean)
                    progress.update()
            else:
                with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                    futures = {
                        executor.submit(self.sample_particle, points, stream, mean): idx
                        for idx, stream in enumerate(streams)
                    }
                    for future in as_completed(futures):
                        particles[futures[future]] = future.result()
                        progress.update()

        num_degenerate = sum(p.is_degenerate for p in particles)
        if num_degenerate:
            self.logger.debug(
                f"{num_degenerate}/{num_particles} particles have zero observation density"
            )

        return particles


def infer(
    bounds: PriorBounds,
    observations: ArrayLike,
    num_particles: int,
    zeta: float = DEFAULT_ZETA,
    seed: Optional[int] = None,
    num_workers: Optional[int] = 1,
) -> List[Particle]:
    """
    Convenience function to run importance sampling.

    Args:
        bounds: Support of the center and sigma priors.
        observations: Observed points (N, 3).
        num_particles: Number of particles K.
        zeta: Center proposal standard deviation.
        seed: Seed for the random source.
        num_workers: Worker threads.

    Returns:
        List of K particles.
    """
    sampler = ImportanceSampler(bounds, zeta=zeta, num_workers=num_workers)
    return sampler.infer(observations, num_particles, np.random.default_rng(seed))


# =============================================================================
# Weight Diagnostics
# =============================================================================

def normalized_weights(particles: Sequence[Particle]) -> np.ndarray:
    """
    Self-normalized importance weights.

    Degenerate particles get weight 0. If every particle is degenerate the
    weights are uniform.

    Args:
        particles: Particles from a single inference call.

    Returns:
        Weights of shape (K,) summing to 1.
    """
    if len(particles) == 0:
        raise ValueError("Cannot normalize weights of an empty particle set")

    log_weights = np.array([p.log_weight for p in particles], dtype=np.float64)
    finite = np.isfinite(log_weights)

    if not np.any(finite):
        return np.full(len(particles), 1.0 / len(particles))

    weights = np.zeros(len(particles), dtype=np.float64)
    weights[finite] = np.exp(log_weights[finite] - logsumexp(log_weights[finite]))
    return weights


def effective_sample_size(particles: Sequence[Particle]) -> float:
    """Kish effective sample size, 1 / sum(w_i^2)."""
    weights = normalized_weights(particles)
    return float(1.0 / np.sum(weights ** 2))


def posterior_mean(particles: Sequence[Particle]) -> BoxParameters:
    """
    Importance-weighted mean of each box parameter.

    Args:
        particles: Particles from a single inference call.

    Returns:
        BoxParameters holding the weighted means.
    """
    weights = normalized_weights(particles)
    values = np.array(
        [[p.params.xc, p.params.yc, p.params.zc,
          p.params.L, p.params.W, p.params.H, p.params.sigma] for p in particles],
        dtype=np.float64,
    )
    xc, yc, zc, L, W, H, sigma = weights @ values
    return BoxParameters(
        xc=float(xc), yc=float(yc), zc=float(zc),
        L=float(L), W=float(W), H=float(H),
        sigma=float(sigma),
    )
