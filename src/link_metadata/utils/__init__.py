"""Utility modules for the link metadata pipeline."""

from link_metadata.utils.text import clip, short_description, short_title
from link_metadata.utils.urls import domain_of, favicon_url, is_valid_url

__all__ = [
    "clip",
    "short_title",
    "short_description",
    "domain_of",
    "is_valid_url",
    "favicon_url",
]
