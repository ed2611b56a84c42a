from typing import Optional

from .base import DeltaSnapSettings


_settings: Optional[DeltaSnapSettings] = None


def get_settings(force_reload: bool = False) -> DeltaSnapSettings:
    """Get the singleton settings instance for the application.

    Settings are read from ``DELTASNAP_``-prefixed environment variables
    (and an optional ``.env`` file) on first access.

    Args:
        force_reload: If True, creates a new settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        DeltaSnapSettings: The singleton settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        new_settings = get_settings(force_reload=True)
        assert new_settings is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = DeltaSnapSettings()

    return _settings


def reload_settings() -> DeltaSnapSettings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.

    Returns:
        A fresh DeltaSnapSettings instance
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
