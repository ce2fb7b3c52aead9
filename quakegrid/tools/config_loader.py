"""
Clustering profiles: ``configs/<profile>.yaml`` resolved into ClusterConfig.

A profile holds any of ``max_distance_km``, ``min_quakes`` and
``target_points_per_cell``; absent keys fall back to the ClusterConfig
defaults and unknown keys are ignored. The profile is picked by name, by the
``QUAKEGRID_PROFILE`` environment variable, or defaults to ``default``.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..clustering.engine import ClusterConfig
from ..spatial.events import is_finite_number


PROFILE_KEYS = ("max_distance_km", "min_quakes", "target_points_per_cell")


class ConfigLoader:
    """Locate, read and validate clustering profiles."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"
    DEFAULT_PROFILE = "default"
    ENV_VAR = "QUAKEGRID_PROFILE"

    @classmethod
    def available_profiles(cls) -> List[str]:
        """Profile names found in ``CONFIG_DIR``."""
        return sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Read the raw settings of a profile.

        Args:
            profile_name: Name of the profile (default, california, global)

        Returns:
            The profile's clustering settings (empty for an empty file)

        Raises:
            FileNotFoundError: If the profile doesn't exist
            ValueError: If the file does not hold a mapping of settings
        """
        profile_path = cls.CONFIG_DIR / f"{profile_name}.yaml"

        if not profile_path.exists():
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. "
                f"Available profiles: {', '.join(cls.available_profiles())}"
            )

        with open(profile_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Profile '{profile_name}' must be a mapping of clustering settings")
        return {key: data[key] for key in PROFILE_KEYS if key in data}

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Profile name from the QUAKEGRID_PROFILE environment variable."""
        return os.getenv(cls.ENV_VAR)

    @classmethod
    def load_cluster_config(cls, profile_name: Optional[str] = None) -> ClusterConfig:
        """
        Resolve a profile into a validated ClusterConfig.

        An explicit or environment-selected profile must exist. When neither is
        given and the default profile file is missing, the ClusterConfig
        defaults are used.
        """
        name = profile_name or cls.get_profile_from_env()
        if name:
            return config_from_dict(cls.load_profile(name))

        try:
            return config_from_dict(cls.load_profile(cls.DEFAULT_PROFILE))
        except FileNotFoundError:
            return ClusterConfig()


def config_from_dict(data: Mapping[str, Any]) -> ClusterConfig:
    """
    Build a ClusterConfig, falling back to defaults for absent keys.

    Raises:
        ValueError: If a distance or occupancy is not a positive number, or
            ``min_quakes`` is not a whole number of at least 1
    """
    defaults = ClusterConfig()
    max_distance_km = data.get("max_distance_km", defaults.max_distance_km)
    min_quakes = data.get("min_quakes", defaults.min_quakes)
    target = data.get("target_points_per_cell", defaults.target_points_per_cell)

    if not is_finite_number(max_distance_km) or max_distance_km <= 0:
        raise ValueError(f"max_distance_km must be a positive number, got {max_distance_km!r}")
    if not is_finite_number(min_quakes) or min_quakes < 1 or int(min_quakes) != min_quakes:
        raise ValueError(f"min_quakes must be a whole number >= 1, got {min_quakes!r}")
    if not is_finite_number(target) or target <= 0:
        raise ValueError(f"target_points_per_cell must be a positive number, got {target!r}")

    return ClusterConfig(
        max_distance_km=float(max_distance_km),
        min_quakes=int(min_quakes),
        target_points_per_cell=float(target),
    )


def get_cluster_config(profile_name: Optional[str] = None) -> ClusterConfig:
    """Convenience function to get the clustering configuration."""
    return ConfigLoader.load_cluster_config(profile_name)
