"""Application configuration."""

from rostersearch.config.settings import IndexSettings, ObservabilitySettings, Settings

__all__ = ["IndexSettings", "ObservabilitySettings", "Settings"]
