#!/usr/bin/env python3
"""
Configuration access for the Tulen web application.

The models and env overrides live in core.config_loader; this module only
caches the result for the lifetime of the process.
"""

from pathlib import Path
from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads config.yaml from the project root and applies environment variable
    overrides (DATABASE_URL, WEB_HOST, WEB_PORT, JWT_SECRET, LOG_LEVEL).

    Returns:
        AppConfig: The application configuration.
    """
    return load_config(str(get_project_root() / 'config.yaml'))


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent
