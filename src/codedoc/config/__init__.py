"""Configuration for codedoc."""

from codedoc.config.settings import Settings, get_settings, settings

__all__ = ["settings", "Settings", "get_settings"]
