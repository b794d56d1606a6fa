"""Configuration loading utilities."""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Values used for any key missing from a loaded config file.
DEFAULT_CONFIG: Dict[str, Any] = {
    "bounds": {
        "x": [0.0, 1.0],
        "y": [0.0, 1.0],
        "z": [0.0, 1.0],
        "sigma": [0.01, 0.1],
    },
    "inference": {
        "num_particles": 1000,
        "zeta": 0.1,
        "seed": None,
        "num_workers": 1,
    },
    "ranking": {
        "points_per_edge": 100,
        "top_k": 5,
        "chamfer_method": "kdtree",
    },
    "synthetic": {
        "center": [0.5, 0.5, 0.5],
        "dimensions": [0.5, 0.25, 0.1],
        "num_points": 500,
        "noise_std": 0.01,
    },
    "logging": {
        "level": "INFO",
        "log_file": None,
    },
}

REQUIRED_SECTIONS = ("bounds", "inference", "ranking")


class ConfigLoader:
    """Load YAML configurations layered over DEFAULT_CONFIG."""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory searched for bare config file names.
        """
        self.config_dir = Path(config_dir) if config_dir else Path("configs")
        self._cache: Dict[str, Dict] = {}

    def resolve(self, config_path: Union[str, Path]) -> Path:
        """Resolve a config path, falling back to config_dir for relative names."""
        config_path = Path(config_path)

        if config_path.is_absolute() or config_path.exists():
            return config_path

        return self.config_dir / config_path

    def load(
        self,
        config_path: Union[str, Path],
        use_cache: bool = True,
        with_defaults: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file.
            use_cache: Whether to use cached config.
            with_defaults: Whether to fill missing keys from DEFAULT_CONFIG.

        Returns:
            Configuration dictionary.
        """
        config_path = self.resolve(config_path)
        cache_key = f"{config_path}:{with_defaults}"

        if use_cache and cache_key in self._cache:
            return copy.deepcopy(self._cache[cache_key])

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        config = self._process_includes(config, config_path.parent)

        if with_defaults:
            config = self.merge(DEFAULT_CONFIG, config)
            validate_config(config)

        if use_cache:
            self._cache[cache_key] = config

        return copy.deepcopy(config)

    def _process_includes(self, config: Dict, base_dir: Path) -> Dict:
        """
        Replace ``"!include <file>"`` string values with the included YAML.

        Args:
            config: Configuration dictionary.
            base_dir: Base directory for relative includes.

        Returns:
            Processed configuration.
        """
        result = {}

        for key, value in config.items():
            if isinstance(value, str) and value.startswith("!include "):
                with open(base_dir / value[len("!include "):], "r") as f:
                    result[key] = yaml.safe_load(f)
            elif isinstance(value, dict):
                result[key] = self._process_includes(value, base_dir)
            else:
                result[key] = value

        return result

    def merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two configurations; override wins.

        Args:
            base: Base configuration.
            override: Override configuration.

        Returns:
            New merged configuration.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def save(self, config: Dict[str, Any], path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration dictionary.
            path: Output file path.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    def clear_cache(self) -> None:
        """Clear configuration cache."""
        self._cache.clear()


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check that the sections used by the inference pipeline are present.

    Numeric ranges are validated by the components that consume them.

    Args:
        config: Configuration dictionary.
    """
    for section in REQUIRED_SECTIONS:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Config section '{section}' is missing or not a mapping")

    num_particles = get_nested(config, "inference.num_particles")
    if not isinstance(num_particles, int) or num_particles < 1:
        raise ValueError(f"inference.num_particles must be a positive integer, got {num_particles}")

    points_per_edge = get_nested(config, "ranking.points_per_edge")
    if not isinstance(points_per_edge, int) or points_per_edge < 0:
        raise ValueError(
            f"ranking.points_per_edge must be a non-negative integer, got {points_per_edge}"
        )


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to config file; DEFAULT_CONFIG alone if None.
        overrides: Optional overrides to apply.

    Returns:
        Configuration dictionary.
    """
    loader = ConfigLoader()
    config = loader.load(config_path) if config_path else copy.deepcopy(DEFAULT_CONFIG)

    if overrides:
        config = loader.merge(config, overrides)
        validate_config(config)

    return config


def get_nested(config: Dict[str, Any], key: str, default: Any = None) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary.
        key: Dot-separated key (e.g., 'inference.zeta').
        default: Default value if key not found.

    Returns:
        Config value or default.
    """
    value = config

    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]

    return value


def set_nested(config: Dict[str, Any], key: str, value: Any) -> None:
    """
    Set nested config value using dot notation, creating sections as needed.

    Args:
        config: Configuration dictionary.
        key: Dot-separated key.
        value: Value to set.
    """
    *sections, leaf = key.split(".")
    current = config

    for section in sections:
        current = current.setdefault(section, {})

    current[leaf] = value
