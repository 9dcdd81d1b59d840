"""
Configuration management for CMB Life Python SDK
"""

from .client_config import (
    ClientConfig,
    DEFAULT_HOST,
    DEFAULT_CLIENT_TYPE,
    load_config,
    config_from_env,
)

__all__ = [
    'ClientConfig',
    'DEFAULT_HOST',
    'DEFAULT_CLIENT_TYPE',
    'load_config',
    'config_from_env',
]
