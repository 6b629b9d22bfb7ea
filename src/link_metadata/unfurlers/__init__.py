"""Link unfurlers."""

from link_metadata.unfurlers.base import Unfurler
from link_metadata.unfurlers.microlink import MICROLINK_BASE_URL, MicrolinkUnfurler

__all__ = ["Unfurler", "MicrolinkUnfurler", "MICROLINK_BASE_URL"]
