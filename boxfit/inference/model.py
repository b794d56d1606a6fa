"""
Generative model over box parameters and observed points.

Prior:
    xc, yc, zc ~ Uniform(caller bounds), independently
    L, W, H    ~ Uniform(0, 1), independently
    sigma      ~ Uniform(sigma_min, sigma_max)

Likelihood:
    each observed point ~ Normal((xc, yc, zc), sigma^2 * I_3), i.i.d.

The model supports forward simulation (parameters, then synthetic points)
and evaluation of log-densities against fixed observations. All densities
are closed-form; uniform log-densities are -log(hi - lo) inside the
support and -inf outside.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np
from scipy import stats

from ..errors import InvalidBoundsError
from ..geometry.box import ArrayLike, BoxParameters, as_point_cloud

EXTENT_BOUNDS = (0.0, 1.0)


# =============================================================================
# Prior Bounds
# =============================================================================

@dataclass(frozen=True)
class PriorBounds:
    """
    Support of the center and sigma priors.

    Attributes:
        x_min, x_max: Range of the center X coordinate.
        y_min, y_max: Range of the center Y coordinate.
        z_min, z_max: Range of the center Z coordinate.
        sigma_min, sigma_max: Range of the point spread; sigma_min > 0.
    """
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    z_min: float
    z_max: float
    sigma_min: float
    sigma_max: float

    def __post_init__(self):
        for name, (low, high) in self.pairs().items():
            if not (np.isfinite(low) and np.isfinite(high)):
                raise InvalidBoundsError(f"{name} bounds must be finite, got [{low}, {high}]")
            if low >= high:
                raise InvalidBoundsError(f"{name} bounds are empty: min {low} >= max {high}")
        if self.sigma_min <= 0:
            raise InvalidBoundsError(f"sigma_min must be positive, got {self.sigma_min}")

    def pairs(self) -> Dict[str, Tuple[float, float]]:
        """Bound pairs keyed by parameter name."""
        return {
            "x": (self.x_min, self.x_max),
            "y": (self.y_min, self.y_max),
            "z": (self.z_min, self.z_max),
            "sigma": (self.sigma_min, self.sigma_max),
        }

    @property
    def center_low(self) -> np.ndarray:
        return np.array([self.x_min, self.y_min, self.z_min], dtype=np.float64)

    @property
    def center_high(self) -> np.ndarray:
        return np.array([self.x_max, self.y_max, self.z_max], dtype=np.float64)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriorBounds":
        """
        Build bounds from a configuration mapping.

        Accepts either flat keys (``x_min``, ``x_max``, ...) or per-axis
        pairs (``x: [min, max]``, ..., ``sigma: [min, max]``).

        Args:
            data: Bounds mapping, e.g. the ``bounds`` section of a config.

        Returns:
            Validated PriorBounds.
        """
        values = {}
        for axis in ("x", "y", "z", "sigma"):
            if axis in data:
                pair = data[axis]
                if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                    raise InvalidBoundsError(f"{axis} bounds must be [min, max], got {pair}")
                values[f"{axis}_min"], values[f"{axis}_max"] = pair
            else:
                try:
                    values[f"{axis}_min"] = data[f"{axis}_min"]
                    values[f"{axis}_max"] = data[f"{axis}_max"]
                except KeyError as e:
                    raise InvalidBoundsError(f"Missing bound: {e.args[0]}") from e

        return cls(**{key: float(value) for key, value in values.items()})

    def to_dict(self) -> Dict[str, list]:
        """Convert to the per-axis pair form used in configs."""
        return {name: [low, high] for name, (low, high) in self.pairs().items()}


# =============================================================================
# Log-density Helpers
# =============================================================================

def uniform_log_density(value, low, high) -> float:
    """Summed log-density of values under independent Uniform(low, high)."""
    low = np.asarray(low, dtype=np.float64)
    high = np.asarray(high, dtype=np.float64)
    return float(np.sum(stats.uniform.logpdf(value, loc=low, scale=high - low)))


def isotropic_gaussian_log_density(points: np.ndarray, mean: np.ndarray, sigma: float) -> float:
    """Summed log-density of points under Normal(mean, sigma^2 * I)."""
    with np.errstate(over="ignore", under="ignore", invalid="ignore"):
        return float(np.sum(stats.norm.logpdf(points, loc=mean, scale=sigma)))


# =============================================================================
# Generative Model
# =============================================================================

class BoxGenerativeModel:
    """
    Prior and likelihood for box fitting.

    The model is stateless apart from its bounds; every sampling method
    takes an explicit numpy Generator.

    Example:
        >>> model = BoxGenerativeModel(bounds)
        >>> params, points = model.simulate(500, np.random.default_rng(0))
        >>> model.log_joint(params, points)
    """

    def __init__(self, bounds: PriorBounds):
        """
        Initialize the model.

        Args:
            bounds: Support of the center and sigma priors.
        """
        self.bounds = bounds

    # -------------------------------------------------------------------------
    # Prior Sampling
    # -------------------------------------------------------------------------

    def sample_center(self, rng: np.random.Generator) -> np.ndarray:
        """Draw (xc, yc, zc) from the center prior."""
        return rng.uniform(self.bounds.center_low, self.bounds.center_high)

    def sample_extents(self, rng: np.random.Generator) -> np.ndarray:
        """Draw (L, W, H) from the extent prior."""
        return rng.uniform(EXTENT_BOUNDS[0], EXTENT_BOUNDS[1], size=3)

    def sample_sigma(self, rng: np.random.Generator) -> float:
        """Draw sigma from its prior."""
        return float(rng.uniform(self.bounds.sigma_min, self.bounds.sigma_max))

    def sample_params(self, rng: np.random.Generator) -> BoxParameters:
        """Draw a full parameter set from the prior."""
        xc, yc, zc = self.sample_center(rng)
        L, W, H = self.sample_extents(rng)
        sigma = self.sample_sigma(rng)
        return BoxParameters(
            xc=float(xc), yc=float(yc), zc=float(zc),
            L=float(L), W=float(W), H=float(H),
            sigma=sigma,
        )

    def sample_points(
        self,
        params: BoxParameters,
        num_points: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """Draw observed points given parameters."""
        return rng.normal(loc=params.center, scale=params.sigma, size=(num_points, 3))

    def simulate(
        self,
        num_points: int,
        rng: np.random.Generator,
    ) -> Tuple[BoxParameters, np.ndarray]:
        """
        Forward-sample parameters and then num_points synthetic observations.

        Args:
            num_points: Number of points to draw from the likelihood.
            rng: Random source.

        Returns:
            Tuple of (parameters, points (num_points, 3)).
        """
        if num_points < 0:
            raise ValueError(f"num_points must be non-negative, got {num_points}")
        params = self.sample_params(rng)
        return params, self.sample_points(params, num_points, rng)

    # -------------------------------------------------------------------------
    # Log-densities
    # -------------------------------------------------------------------------

    def center_log_prior(self, xc: float, yc: float, zc: float) -> float:
        """Log-density of the center under its prior."""
        return uniform_log_density(
            np.array([xc, yc, zc], dtype=np.float64),
            self.bounds.center_low,
            self.bounds.center_high,
        )

    def extents_log_prior(self, L: float, W: float, H: float) -> float:
        """Log-density of (L, W, H) under the extent prior."""
        return uniform_log_density(
            np.array([L, W, H], dtype=np.float64), *EXTENT_BOUNDS
        )

    def sigma_log_prior(self, sigma: float) -> float:
        """Log-density of sigma under its prior."""
        return uniform_log_density(sigma, self.bounds.sigma_min, self.bounds.sigma_max)

    def log_prior(self, params: BoxParameters) -> float:
        """Sum of the center, extent and sigma prior log-densities."""
        return (
            self.center_log_prior(params.xc, params.yc, params.zc)
            + self.extents_log_prior(params.L, params.W, params.H)
            + self.sigma_log_prior(params.sigma)
        )

    def log_likelihood(
        self,
        observations: ArrayLike,
        center: ArrayLike,
        sigma: float,
    ) -> float:
        """
        Log-density of fixed observations given center and sigma.

        Only the likelihood term; the observations are not resampled.

        Args:
            observations: Observed points (N, 3), non-empty.
            center: Gaussian mean (x, y, z).
            sigma: Isotropic standard deviation, > 0.

        Returns:
            Sum of the N per-point Gaussian log-densities.
        """
        points = as_point_cloud(observations)
        if not sigma > 0:
            raise ValueError(f"sigma must be positive, got {sigma}")
        return isotropic_gaussian_log_density(
            points, np.asarray(center, dtype=np.float64), sigma
        )

    def log_joint(self, params: BoxParameters, observations: ArrayLike) -> float:
        """Joint log-density of parameters and observations."""
        log_prior = self.log_prior(params)
        if np.isneginf(log_prior):
            return log_prior
        return log_prior + self.log_likelihood(observations, params.center, params.sigma)
