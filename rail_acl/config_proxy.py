"""
Configuration management for rail-acl.

This module provides a settings proxy that resolves values from runtime
overrides, the Django ``RAIL_ACL`` setting and the library defaults.
"""

from typing import Any, Optional

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from .defaults import LIBRARY_DEFAULTS


# Runtime overrides (avoids modifying Django settings)
_RUNTIME_SETTINGS: dict[str, Any] = {}


class SettingsProxy:
    """
    Proxy for accessing rail-acl settings with hierarchical resolution.

    Settings are resolved in the following order:
    1. Runtime overrides (via configure_runtime_settings)
    2. Global Django settings (RAIL_ACL)
    3. Library defaults (LIBRARY_DEFAULTS)
    """

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Setting key to retrieve (dot notation for nested keys)
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        django_settings = getattr(settings, "RAIL_ACL", None) if settings.configured else None
        for source in (_RUNTIME_SETTINGS, django_settings or {}, LIBRARY_DEFAULTS):
            value = self._get_nested_value(source, key)
            if value is not None:
                self._cache[key] = value
                return value

        return default

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve (supports dot notation for nested access)

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current = data
        for k in key.split("."):
            if not isinstance(current, dict) or k not in current:
                return None
            current = current[k]

        return current

    def clear_cache(self) -> None:
        """Clear the settings cache."""
        self._cache.clear()


# Global settings proxy instance
settings_proxy = SettingsProxy()


@receiver(setting_changed)
def _clear_cache_on_setting_change(sender, setting, **kwargs) -> None:
    """Drop cached values when RAIL_ACL changes."""
    if setting == "RAIL_ACL":
        settings_proxy.clear_cache()


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a setting value using the hierarchical settings system.

    Args:
        key: Setting key to retrieve
        default: Default value if setting is not found

    Returns:
        The setting value from the highest priority source
    """
    return settings_proxy.get(key, default)


def configure_runtime_settings(**overrides: Any) -> None:
    """
    Override settings at runtime.

    Keys are top-level sections, values are dictionaries merged into the
    existing runtime section::

        configure_runtime_settings(acl_settings={"log_denials": False})
    """
    for section, values in overrides.items():
        if isinstance(values, dict):
            _RUNTIME_SETTINGS.setdefault(section, {}).update(values)
        else:
            _RUNTIME_SETTINGS[section] = values
    settings_proxy.clear_cache()


def clear_runtime_settings(section: Optional[str] = None) -> None:
    """
    Clear runtime settings overrides.

    Args:
        section: If provided, only clear this section.
                 If None, clear all runtime settings.
    """
    if section:
        _RUNTIME_SETTINGS.pop(section, None)
    else:
        _RUNTIME_SETTINGS.clear()

    settings_proxy.clear_cache()
