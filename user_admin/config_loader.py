"""
Configuration loading utilities for the user administration console.

This module loads config.yaml, merges it over built-in defaults and
resolves the API base address. The resolved values are handed to the
components that need them at construction time.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Mapping
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

# Environment variable overriding api.base_url
API_URL_ENV_VAR = 'USER_ADMIN_API_URL'

DEFAULT_CONFIG_PATH = Path("config.yaml")


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
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'User Management',
            'version': '1.0.0'
        },
        'api': {
            'base_url': 'http://localhost:3001/users',
            'timeout': 30.0
        },
        'schema': {
            'primary_schema': 'user_schema.yaml',
            'fallback_schema': 'default_schema.yaml'
        },
        'ui': {
            'page_title': 'User Management',
            'sidebar_title': 'Console'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'
        }
    }


def _apply_environment(config: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    api_url = environ.get(API_URL_ENV_VAR)
    if api_url:
        logger.info(f"Using API base URL from {API_URL_ENV_VAR}")
        config = deep_merge(config, {'api': {'base_url': api_url}})
    return config


def load_config(config_path: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Complete configuration dictionary; defaults are used for anything
        missing or unreadable
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    if environ is None:
        environ = os.environ

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return _apply_environment(default_config, environ)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {config_path}: {e}")
        logger.info("Using default configuration")
        return _apply_environment(default_config, environ)
    except (IOError, OSError) as e:
        logger.error(f"Failed to read configuration file {config_path}: {e}")
        logger.info("Using default configuration")
        return _apply_environment(default_config, environ)

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return _apply_environment(default_config, environ)

    if not isinstance(user_config, dict):
        logger.error(f"Configuration file is not a valid dictionary: {config_path}")
        logger.info("Using default configuration")
        return _apply_environment(default_config, environ)

    config = deep_merge(default_config, user_config)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return _apply_environment(config, environ)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'api', 'schema', 'ui', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    api = config['api']
    base_url = api.get('base_url')
    if not isinstance(base_url, str) or not base_url.startswith(('http://', 'https://')):
        logger.warning(f"api.base_url must be an http(s) URL, got {base_url!r}")
        return False

    if 'timeout' in api:
        try:
            timeout = float(api['timeout'])
        except (ValueError, TypeError):
            logger.warning("api.timeout must be a number")
            return False
        if timeout <= 0:
            logger.warning("api.timeout must be positive")
            return False

    schema = config['schema']
    if not schema.get('primary_schema'):
        logger.warning("Missing schema.primary_schema")
        return False

    return True


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get a summary of the current configuration.

    Args:
        config: Configuration dictionary

    Returns:
        Dictionary with configuration summary
    """
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'api_base_url': config.get('api', {}).get('base_url', 'Unknown'),
        'api_timeout': config.get('api', {}).get('timeout', 30.0),
        'primary_schema': config.get('schema', {}).get('primary_schema', 'Unknown'),
        'log_level': config.get('logging', {}).get('level', 'INFO')
    }
