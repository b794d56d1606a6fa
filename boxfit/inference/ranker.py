"""
Rank box hypotheses by Chamfer distance to the observations.

Each particle's box is sampled as a wireframe and compared with the
observed cloud. Importance weights are carried along for reference but do
not affect the ordering.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..geometry.box import ArrayLike, BoxParameters, as_point_cloud
from ..geometry.chamfer import chamfer_distance
from ..geometry.wireframe import box_to_points
from ..utils.logger import LoggerMixin
from .sampler import Particle, finite_or_none, resolve_num_workers

DEFAULT_POINTS_PER_EDGE = 100


@dataclass(frozen=True)
class RankedHypothesis:
    """
    A box hypothesis with its Chamfer score (lower is better).

    Attributes:
        params: Box parameters of the originating particle.
        chamfer_score: Unnormalized Chamfer distance to the observations.
        particle_index: Position of the particle in the input list.
        log_weight: Importance weight of the originating particle.
    """
    params: BoxParameters
    chamfer_score: float
    particle_index: int = -1
    log_weight: float = float("nan")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "center": self.params.center.tolist(),
            "dimensions": self.params.extents.tolist(),
            "sigma": self.params.sigma,
            "chamfer_score": self.chamfer_score,
            "particle_index": self.particle_index,
            "log_weight": finite_or_none(self.log_weight),
        }


class HypothesisRanker(LoggerMixin):
    """
    Score particles against observations and sort them.

    Example:
        >>> ranker = HypothesisRanker(points_per_edge=100)
        >>> best = ranker.rank(particles, points, top_k=5)
    """

    def __init__(
        self,
        points_per_edge: int = DEFAULT_POINTS_PER_EDGE,
        num_workers: Optional[int] = 1,
        chamfer_method: str = "kdtree",
    ):
        """
        Initialize the ranker.

        Args:
            points_per_edge: Wireframe samples per box edge.
            num_workers: Worker threads; None uses all available cores.
            chamfer_method: Nearest-neighbour backend for chamfer_distance.
        """
        if points_per_edge < 0:
            raise ValueError(f"points_per_edge must be non-negative, got {points_per_edge}")
        self.points_per_edge = points_per_edge
        self.num_workers = resolve_num_workers(num_workers)
        self.chamfer_method = chamfer_method

    def score(self, params: BoxParameters, observations: np.ndarray) -> float:
        """Chamfer distance between a box wireframe and the observations."""
        wireframe = box_to_points(params, self.points_per_edge)
        return chamfer_distance(wireframe, observations, method=self.chamfer_method)

    def rank(
        self,
        particles: Sequence[Particle],
        observations: ArrayLike,
        top_k: Optional[int] = None,
    ) -> List[RankedHypothesis]:
        """
        Rank particles by ascending Chamfer score.

        Ties keep the input particle order.

        Args:
            particles: Particles to score.
            observations: Observed points (N, 3), non-empty.
            top_k: Keep only the best top_k hypotheses (all if None).

        Returns:
            Sorted list of RankedHypothesis.
        """
        points = as_point_cloud(observations)

        if top_k is not None and top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")

        params_list = [particle.params for particle in particles]

        if self.num_workers == 1 or len(params_list) < 2:
            scores = [self.score(params, points) for params in params_list]
        else:
            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                scores = list(executor.map(lambda params: self.score(params, points), params_list))

        hypotheses = [
            RankedHypothesis(
                params=particle.params,
                chamfer_score=score,
                particle_index=idx,
                log_weight=particle.log_weight,
            )
            for idx, (particle, score) in enumerate(zip(particles, scores))
        ]
        hypotheses.sort(key=lambda h: h.chamfer_score)

        if hypotheses:
            self.logger.debug(
                f"Ranked {len(hypotheses)} hypotheses, best Chamfer score "
                f"{hypotheses[0].chamfer_score:.4f}"
            )

        return hypotheses if top_k is None else hypotheses[:top_k]


def rank(
    particles: Sequence[Particle],
    observations: ArrayLike,
    points_per_edge: int = DEFAULT_POINTS_PER_EDGE,
    top_k: Optional[int] = None,
) -> List[RankedHypothesis]:
    """
    Convenience function to rank particles.

    Args:
        particles: Particles to score.
        observations: Observed points (N, 3).
        points_per_edge: Wireframe samples per box edge.
        top_k: Keep only the best top_k hypotheses.

    Returns:
        Sorted list of RankedHypothesis.
    """
    return HypothesisRanker(points_per_edge=points_per_edge).rank(particles, observations, top_k)
