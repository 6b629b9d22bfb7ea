"""In-memory cache of unfurled link metadata."""

from collections.abc import Iterator

from link_metadata.models.metadata import LinkMetadata


class MetadataCache:
    """
    Process-lifetime map from URL to fetched metadata.

    Keys are matched exactly (no trailing slash or query normalization) and
    entries are never evicted. Failed unfurls are cached too, as fallback
    records, so a URL is fetched at most once.

    Accesses are unsynchronized: all callers share one event loop.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LinkMetadata] = {}

    def get(self, url: str) -> LinkMetadata | None:
        """
        Get cached metadata for a URL.

        Args:
            url: URL exactly as it was requested

        Returns:
            Cached metadata or None if the URL was never fetched
        """
        return self._entries.get(url)

    def set(self, url: str, metadata: LinkMetadata) -> None:
        """Store metadata for a URL, overwriting any previous entry."""
        self._entries[url] = metadata

    def has(self, url: str) -> bool:
        return url in self._entries

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def size(self) -> int:
        """Return current cache size."""
        return len(self._entries)
