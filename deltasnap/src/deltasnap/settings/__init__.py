"""Settings for deltasnap, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file in the working directory
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Format: DELTASNAP_SETTING_NAME
    - Case: UPPER_SNAKE_CASE (matching is case-insensitive)

Quick Start:
    >>> from deltasnap.settings import get_settings
    >>> settings = get_settings()
    >>> settings.delta_log_dir_name
    '_delta_log'
"""

from .base import DeltaSnapSettings
from .main import get_settings, reload_settings

__all__ = [
    "DeltaSnapSettings",
    "get_settings",
    "reload_settings",
]
