"""
Configuration management for the isochrone map.

Defaults give the standard isochrone map look; a JSON file can
override any subset of them.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "isochrone_map_config.json"


class IsochroneMapConfig:
    """Manages isochrone map display settings."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or os.getenv("ISOCHRONE_MAP_CONFIG", DEFAULT_CONFIG_PATH)
        self.default_config = self._get_default_config()
        self.config = self._load_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default isochrone map configuration."""
        return {
            "gradient": {
                "stops": ["#f44242", "#f4be41", "#41f497"]
            },
            "isochrone_style": {
                "weight": 2,
                "opacity": 1.0,
                "color": "white",
                "pane": "isochronesPane",
                "pane_z_index": 450,
                "pane_opacity": 0.9
            },
            "center_marker": {
                "radius": 10,
                "neighborhood_zoom": 7
            },
            "map_settings": {
                "tiles": "https://{s}.tile.osm.org/{z}/{x}/{y}.png",
                "attribution": '&copy; <a href="https://osm.org/copyright">OpenStreetMap</a> contributors',
                "initial_center": [25.95681, -35.729687],
                "initial_zoom": 2,
                "world_bounds": [[-90, -180], [90, 180]],
                "zoom_control_position": "topright",
                "height": 700
            },
            "viewport": {
                "fit_padding": [20, 20]
            },
            "branding": {
                "text": "© Immaculate Javelin",
                "position": "bottomright"
            }
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config = json.load(f)
                logger.info(f"Loaded isochrone map configuration from {self.config_path}")

                # Merge with defaults to ensure all keys exist
                return self._merge_configs(self.default_config, config)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
                return copy.deepcopy(self.default_config)
        else:
            logger.info(f"Config file {self.config_path} not found, using defaults")
            return copy.deepcopy(self.default_config)

    def _merge_configs(self, default: Dict, user: Dict) -> Dict:
        """Recursively merge user config with defaults."""
        merged = copy.deepcopy(default)

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            config_dir = Path(self.config_path).parent
            config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=2)
            logger.info(f"Saved isochrone map configuration to {self.config_path}")
        except OSError as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")

    def get_gradient_settings(self) -> Dict[str, Any]:
        return self.config["gradient"]

    def get_isochrone_style(self) -> Dict[str, Any]:
        return self.config["isochrone_style"]

    def get_center_marker_settings(self) -> Dict[str, Any]:
        return self.config["center_marker"]

    def get_map_settings(self) -> Dict[str, Any]:
        return self.config["map_settings"]

    def get_viewport_settings(self) -> Dict[str, Any]:
        return self.config["viewport"]

    def get_branding(self) -> Dict[str, Any]:
        return self.config["branding"]

    def update_section(self, section: str, updates: Dict[str, Any]) -> None:
        """Update one configuration section, creating it if needed."""
        if section not in self.config:
            self.config[section] = {}

        self.config[section].update(updates)
