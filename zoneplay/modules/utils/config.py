"""
Centralized configuration manager.
Loads a YAML config over built-in defaults and provides typed access.

    - Schema validation for critical config fields (warnings only)
    - Dot-path access: config.get("control.volume_step")
    - Reset support for testing
"""

import copy
import os
import yaml
import logging

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
_CONFIG_DIR = os.path.join(_BASE_DIR, "config")

DEFAULTS = {
    "camera": {
        "source": 0,
        "width": 640,
        "height": 480,
        "fps": 30,
        "backend": "auto",
        "buffer_size": 1,
        "flip_horizontal": True,
        "warmup_frames": 5,
    },
    "detector": {
        "models_dir": "models",
        "max_num_boxes": 1,
        "score_threshold": 0.6,
        "detect_faces": True,
        "box_padding": 20,
    },
    "control": {
        "volume_step": 0.05,
        "seek_seconds": 5.0,
    },
    "player": {
        "media": None,
        "playlist": [],
        "media_dir": None,
        "volume": 1.0,
        "autoplay": True,
    },
    "visualization": {
        "enabled": True,
        "show_zones": True,
        "window_name": "ZonePlay",
    },
    "loop": {
        "target_fps": 30,
        "mode": "control",
    },
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
        "frontend_dir": "frontend",
        "vendor_dir": "vendor",
        "index_file": "front.html",
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size_mb": 10,
        "backup_count": 3,
    },
}

# Schema: sections and the expected types of their critical fields
_CONFIG_SCHEMA = {
    "camera": {
        "width": int,
        "height": int,
        "fps": int,
    },
    "detector": {
        "max_num_boxes": int,
        "score_threshold": float,
    },
    "control": {
        "volume_step": float,
        "seek_seconds": float,
    },
    "loop": {
        "target_fps": int,
    },
    "server": {
        "port": int,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Singleton configuration manager."""

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = copy.deepcopy(DEFAULTS)
        return cls._instance

    def load(self, config_path=None):
        """Load configuration from a YAML file on top of the defaults."""
        config_path = config_path or os.path.join(_CONFIG_DIR, "config.yaml")

        try:
            with open(config_path, "r") as f:
                file_data = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)
            file_data = {}

        self._data = _deep_merge(copy.deepcopy(DEFAULTS), file_data)
        self._validate()

        return self

    def _validate(self):
        """Validate critical config fields against schema."""
        warnings = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if not isinstance(section, dict):
                warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
                continue
            for field_name, expected_type in fields.items():
                if field_name in section:
                    value = section[field_name]
                    # Allow int where float is expected
                    if expected_type is float and isinstance(value, (int, float)):
                        continue
                    if not isinstance(value, expected_type):
                        warnings.append(
                            f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                            f"got {type(value).__name__} ({value!r})"
                        )

        if warnings:
            for w in warnings:
                logger.warning("Config validation: %s", w)
        else:
            logger.debug("Config validation passed")

        return warnings

    def get(self, key_path: str, default=None):
        """Get nested config value using dot notation: 'camera.width'."""
        keys = key_path.split(".")
        value = self._data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value):
        """Set a nested config value, creating sections as needed."""
        keys = key_path.split(".")
        section = self._data
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

    def get_section(self, section: str) -> dict:
        """Get an entire config section."""
        return self._data.get(section, {})

    @property
    def camera(self) -> dict:
        return self._data.get("camera", {})

    @property
    def detector(self) -> dict:
        return self._data.get("detector", {})

    @property
    def control(self) -> dict:
        return self._data.get("control", {})

    @property
    def player(self) -> dict:
        return self._data.get("player", {})

    @property
    def visualization(self) -> dict:
        return self._data.get("visualization", {})

    @property
    def loop(self) -> dict:
        return self._data.get("loop", {})

    @property
    def server(self) -> dict:
        return self._data.get("server", {})

    @property
    def base_dir(self) -> str:
        return _BASE_DIR

    def resolve_path(self, path: str) -> str:
        """Resolve a config path relative to the project root."""
        if os.path.isabs(path):
            return path
        return os.path.join(_BASE_DIR, path)

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._data = {}
