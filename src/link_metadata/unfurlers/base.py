"""Base protocol for link unfurlers."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from link_metadata.models.metadata import LinkMetadata


@runtime_checkable
class Unfurler(Protocol):
    """
    Protocol for link unfurlers.

    All unfurlers must implement this interface.
    """

    @property
    def name(self) -> str:
        """Return the unfurler name."""
        ...

    @abstractmethod
    async def fetch(self, url: str) -> LinkMetadata:
        """
        Fetch preview metadata for a URL.

        Must not raise: any failure is reported as ``LinkMetadata.fallback(url)``.

        Args:
            url: URL to unfurl

        Returns:
            Populated metadata, or the fallback record
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the unfurler and release resources."""
        ...
