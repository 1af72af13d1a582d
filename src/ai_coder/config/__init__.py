"""Runtime configuration."""

from ai_coder.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
