"""Configuration for the link metadata pipeline."""

from link_metadata.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
