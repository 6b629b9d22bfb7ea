"""Pending unfurl work, keyed and deduplicated by URL."""

from collections import OrderedDict
from enum import Enum

from link_metadata.models.note import NoteId


class EnqueueResult(str, Enum):
    """Outcome of adding a URL to the fetch queue."""

    NEWLY_QUEUED = "newly_queued"
    ALREADY_QUEUED = "already_queued"


class FetchQueue:
    """
    Insertion-ordered set of URLs awaiting an unfurl.

    Each URL maps to the note that most recently asked for it. Re-requesting
    a queued URL replaces that note id but keeps the URL's place in line, so
    URLs are processed FIFO by first request.
    """

    def __init__(self) -> None:
        self._items: OrderedDict[str, NoteId] = OrderedDict()

    def enqueue(self, url: str, note_id: NoteId) -> EnqueueResult:
        """
        Queue a URL on behalf of a note.

        Args:
            url: URL to unfurl
            note_id: Note to notify when the URL resolves

        Returns:
            ALREADY_QUEUED if the URL was pending (its note id is replaced),
            NEWLY_QUEUED if it was appended to the back of the queue
        """
        if url in self._items:
            self._items[url] = note_id
            return EnqueueResult.ALREADY_QUEUED
        self._items[url] = note_id
        return EnqueueResult.NEWLY_QUEUED

    def peek_front(self) -> tuple[str, NoteId] | None:
        """Return the oldest item without removing it."""
        if not self._items:
            return None
        url = next(iter(self._items))
        return url, self._items[url]

    def dequeue_front(self) -> tuple[str, NoteId] | None:
        """Remove and return the oldest item, or None when empty."""
        if not self._items:
            return None
        return self._items.popitem(last=False)

    def note_for(self, url: str) -> NoteId | None:
        """Note id currently recorded for a queued URL."""
        return self._items.get(url)

    def remove(self, url: str) -> bool:
        """
        Remove a URL regardless of its position.

        Returns:
            True if the URL was queued, False otherwise
        """
        return self._items.pop(url, None) is not None

    def has(self, url: str) -> bool:
        return url in self._items

    def size(self) -> int:
        return len(self._items)

    def urls(self) -> list[str]:
        """Queued URLs in processing order."""
        return list(self._items)

    def __contains__(self, url: object) -> bool:
        return url in self._items

    def __len__(self) -> int:
        return len(self._items)
