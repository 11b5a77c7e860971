"""
Configuration management module.

This module provides utilities for loading, saving, and managing the engine
tunables stored in config.json, and the validated EngineConfig the engine
modules consume.

Date: 2026-10-18
"""

import json
import math
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(BASE_DIR, "config.json")

# Environment variable overriding CONFIG_PATH
CONFIG_PATH_ENV = "GLOBE_MAP_CONFIG"

# Older clients wrote the tunables in camelCase
LEGACY_KEYS = {
    "minZoomSpan": "min_zoom_span",
    "maxZoomSpan": "max_zoom_span",
    "maxDensityCount": "max_density_count",
    "minThreshold": "min_threshold",
    "maxThreshold": "max_threshold",
    "zoomWeight": "zoom_weight",
    "densityWeight": "density_weight",
    "overlapRadius": "overlap_radius",
    "minCardDistance": "min_card_distance",
}

WEIGHT_TOLERANCE = 1e-9


class ConfigError(ValueError):
    """Raised when engine tunables are inconsistent."""


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for visibility scoring, opacity fading and card placement."""

    # Density scoring
    min_zoom_span: float = 0.001
    max_zoom_span: float = 100.0
    max_density_count: int = 100
    min_threshold: float = 0.2
    max_threshold: float = 0.7
    zoom_weight: float = 0.2
    density_weight: float = 0.8
    base_post_score: float = 0.6

    # Overlap fading and card placement (metres)
    overlap_radius: float = 50.0
    min_card_distance: float = 20.0

    # Display modes and clustering
    near_distance_span: float = 0.01
    mid_distance_span: float = 0.05
    cluster_radius_degrees: float = 0.05
    meters_per_degree: float = 111000.0

    # Post lifetime
    post_lifetime_hours: float = 24.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Build a config from a dictionary, ignoring unknown keys.

        Args:
            data: Dictionary of tunables (snake_case or legacy camelCase keys).

        Returns:
            EngineConfig with defaults for anything not supplied.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            key = LEGACY_KEYS.get(key, key)
            if key in known:
                values[key] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        return replace(self, **overrides)

    def validate(self) -> "EngineConfig":
        """Check the tunables are consistent.

        Returns:
            self, so calls can be chained.

        Raises:
            ConfigError: If any tunable is out of range.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigError(f"{f.name} must be a finite number")

        if self.min_zoom_span <= 0:
            raise ConfigError("min_zoom_span must be positive")
        if self.min_zoom_span >= self.max_zoom_span:
            raise ConfigError("min_zoom_span must be smaller than max_zoom_span")
        if self.max_density_count <= 0:
            raise ConfigError("max_density_count must be positive")
        if self.min_threshold > self.max_threshold:
            raise ConfigError("min_threshold must not exceed max_threshold")
        if abs(self.zoom_weight + self.density_weight - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigError("zoom_weight and density_weight must sum to 1.0")
        if self.zoom_weight < 0 or self.density_weight < 0:
            raise ConfigError("weights must not be negative")
        if self.overlap_radius < 0 or self.min_card_distance < 0:
            raise ConfigError("distances must not be negative")
        if self.near_distance_span > self.mid_distance_span:
            raise ConfigError("near_distance_span must not exceed mid_distance_span")
        if self.cluster_radius_degrees < 0 or self.meters_per_degree <= 0:
            raise ConfigError("clustering radius and scale must be positive")
        if self.post_lifetime_hours <= 0:
            raise ConfigError("post_lifetime_hours must be positive")
        return self


def get_config_path() -> str:
    """Resolve the config file path, honouring GLOBE_MAP_CONFIG."""
    return os.getenv(CONFIG_PATH_ENV) or CONFIG_PATH


def load_config() -> Dict[str, Any]:
    """Load configuration from config.json.

    Returns:
        Configuration dictionary with all required fields ensured.
    """
    try:
        with open(get_config_path(), "r", encoding="utf-8") as f:
            config = json.load(f)
    except FileNotFoundError:
        config = get_default_config()

    # Ensure all required fields are present
    config = ensure_config_fields(config)
    return config


def save_config(config: Dict[str, Any]):
    """Save configuration to config.json.

    Args:
        config: Configuration dictionary to save.
    """
    with open(get_config_path(), "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)


def get_default_config() -> Dict[str, Any]:
    """Get default configuration structure.

    Returns:
        Default configuration dictionary.
    """
    return EngineConfig().to_dict()


def ensure_config_fields(config: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure all required fields are present in the configuration.

    Args:
        config: Configuration dictionary to update.

    Returns:
        Updated configuration dictionary.
    """
    # Migrate camelCase keys
    for legacy, key in LEGACY_KEYS.items():
        if legacy in config:
            value = config.pop(legacy)
            config.setdefault(key, value)

    for key, default in get_default_config().items():
        config.setdefault(key, default)

    return config


def get_engine_config(config: Optional[Dict[str, Any]] = None) -> EngineConfig:
    """Get the validated engine configuration.

    Args:
        config: Configuration dictionary. Loaded from disk when omitted.

    Returns:
        Validated EngineConfig.

    Raises:
        ConfigError: If the stored tunables are inconsistent.
    """
    if config is None:
        config = load_config()
    return EngineConfig.from_dict(config).validate()
