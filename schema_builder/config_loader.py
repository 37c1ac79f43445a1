"""
Configuration loading utilities for the schema builder.

Loads config.yaml from the working directory and deep-merges it over the
built-in defaults. Any problem with the file falls back to the defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .validation_rules import DataType

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

# Global configuration cache
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """Get the built-in default configuration."""
    return {
        'app': {
            'name': 'Schema Builder',
            'version': '1.0.0',
            'debug': False
        },
        'ui': {
            'page_title': 'Schema Builder',
            'sidebar_title': 'Navigation',
            'default_type_to_add': 'string'
        },
        'export': {
            'indent': 2
        },
        'session': {
            'workspace_key': 'schema_builder_workspace'
        },
        'logging': {
            'level': 'INFO'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml).
            An explicit path bypasses the cache.

    Returns:
        Complete configuration dictionary
    """
    global _config_cache

    use_cache = config_path is None
    if use_cache and _config_cache is not None:
        return _config_cache

    if config_path is None:
        config_path = CONFIG_FILE

    config = _read_config(config_path)
    if use_cache:
        _config_cache = config
    return config


def _read_config(config_path: Path) -> Dict[str, Any]:
    default_config = get_default_config()

    if not config_path.exists():
        logger.info(f"No {config_path} found, running with built-in defaults")
        return default_config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Could not parse {config_path}, falling back to defaults: {e}")
        return default_config
    except OSError as e:
        logger.error(f"Could not read {config_path}, falling back to defaults: {e}")
        return default_config

    if user_config is None:
        logger.warning(f"{config_path} is empty")
        return default_config
    if not isinstance(user_config, dict):
        logger.error(f"{config_path} must contain a mapping at the top level, ignoring it")
        return default_config

    logger.info(f"Loaded configuration from {config_path}")
    return deep_merge(default_config, user_config)


def reload_config() -> None:
    """Drop the cached configuration so the next access re-reads the file."""
    global _config_cache
    _config_cache = None
    logger.debug("Configuration cache cleared")


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a single configuration value.

    Args:
        section: Top-level configuration section
        key: Key inside the section
        default: Value returned when the section or key is missing
    """
    section_values = load_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def get_logging_level(level_str: Any) -> int:
    """Map string logging level to logging constant."""
    return LOG_LEVELS.get(str(level_str).upper(), logging.INFO)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'ui', 'export', 'session', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    indent = config['export'].get('indent', 2)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        logger.warning("export.indent must be a non-negative integer")
        return False

    workspace_key = config['session'].get('workspace_key')
    if not isinstance(workspace_key, str) or not workspace_key:
        logger.warning("session.workspace_key must be a non-empty string")
        return False

    level = config['logging'].get('level', 'INFO')
    if str(level).upper() not in LOG_LEVELS:
        logger.warning(f"Unknown logging level: {level}")
        return False

    type_to_add = config['ui'].get('default_type_to_add', 'string')
    try:
        DataType(type_to_add)
    except ValueError:
        logger.warning(f"ui.default_type_to_add is not a data type: {type_to_add}")
        return False

    return True


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get a summary of the current configuration for display."""
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'debug_mode': config.get('app', {}).get('debug', False),
        'export_indent': config.get('export', {}).get('indent', 2),
        'logging_level': config.get('logging', {}).get('level', 'INFO')
    }
