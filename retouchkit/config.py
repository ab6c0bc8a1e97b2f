"""
Configuration management for RetouchKit
"""

import yaml
import os
import re
import copy
from pathlib import Path
from typing import Dict, Any, Optional, Union
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

_DEFAULT_CONFIG: Dict[str, Any] = {
    'adjustments': {
        # Accepted slider ranges; these can only narrow the built-in limits
        'brightness': {'min': 0, 'max': 200},
        'contrast': {'min': 0, 'max': 200},
        'gamma': {'min': 10, 'max': 300},
        'sharpness': {'min': 0, 'max': 300},
        'angle': {'min': -180, 'max': 180},
    },
    'pipeline': {
        # Largest canvas area browsers accept (16384 x 16384)
        'max_canvas_area': 268435456,
    },
    'masking': {
        'base_brush_width': 20.0,
        'antialias': False,
        'colors': {
            'primary': [255, 0, 0, 255],
            'secondary': [255, 255, 255, 255],
        },
    },
    'viewer': {
        'zoom': {
            'min': 0.2,
            'max': 3.0,
            'step': 0.1,
        },
    },
    'resize': {
        'presets': {
            'IG Square': [1080, 1080],
            'IG Portrait': [1080, 1350],
            'IG Story': [1080, 1920],
            'Facebook Post': [1200, 630],
            'Twitter Post': [1600, 900],
        },
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}


def _expand_env_vars(obj: Union[Dict, Any]) -> Union[Dict, Any]:
    """
    Recursively expand environment variables in config values.
    Supports ${VAR_NAME} syntax.
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        pattern = r'\$\{([^}]+)\}'
        def replace_var(match):
            var_name = match.group(1)
            return os.getenv(var_name, match.group(0))  # Keep original if unset
        return re.sub(pattern, replace_var, obj)
    else:
        return obj


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``override`` onto a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file

    Values found in the file are layered over the defaults, so a partial
    file only needs the keys it changes.

    Args:
        config_path: Path to config file. If None, uses the bundled config.yaml

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return get_default_config()

    if not isinstance(config, dict):
        logger.error(f"Config file {config_path} does not contain a mapping. Using defaults.")
        return get_default_config()

    logger.info(f"Loaded configuration from {config_path}")
    config = _expand_env_vars(config)
    return _merge(_DEFAULT_CONFIG, config)


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration values

    Returns:
        Default configuration dictionary (a fresh copy)
    """
    return copy.deepcopy(_DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> bool:
    """
    Save configuration to YAML file

    Args:
        config: Configuration dictionary to save
        config_path: Path where to save the config

    Returns:
        True if successful, False otherwise
    """
    try:
        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False, indent=2, sort_keys=False)
        logger.info(f"Saved configuration to {config_path}")
        return True
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save config to {config_path}: {e}")
        return False


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation

    Args:
        config: Configuration dictionary
        key_path: Dot-separated key path (e.g., 'masking.base_brush_width')
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    keys = key_path.split('.')
    value = config

    try:
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default


def update_config_value(config: Dict[str, Any], key_path: str, value: Any) -> None:
    """
    Update a nested configuration value using dot notation

    Args:
        config: Configuration dictionary to update
        key_path: Dot-separated key path (e.g., 'viewer.zoom.max')
        value: New value to set
    """
    keys = key_path.split('.')
    current = config

    for key in keys[:-1]:
        if key not in current:
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
