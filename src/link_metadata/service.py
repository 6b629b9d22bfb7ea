"""
Metadata service: the entry point the notes application talks to.

Ties the cache, the fetch queue and the queue processor together. Construct
one per application and use it as an async context manager; the drain task
lives in the task group opened on entry.
"""

from collections.abc import Iterable
from types import TracebackType
from typing import Any

import anyio
import httpx
import structlog
from anyio.abc import TaskGroup

from link_metadata.cache import MetadataCache
from link_metadata.config import Settings
from link_metadata.config import settings as default_settings
from link_metadata.fetch_queue import EnqueueResult, FetchQueue
from link_metadata.models.metadata import LinkMetadata
from link_metadata.models.note import Note, NoteId
from link_metadata.notes import NoteStore
from link_metadata.processor import QueueProcessor, SleepFunc
from link_metadata.unfurlers.base import Unfurler
from link_metadata.unfurlers.microlink import MicrolinkUnfurler
from link_metadata.utils.urls import is_valid_url

logger = structlog.get_logger(__name__)


class MetadataService:
    """
    Facade over the link metadata pipeline.

    ``request_metadata`` answers from the cache when it can; otherwise the
    URL is queued and the processor unfurls it in the background, then
    updates whichever note last asked for it.
    """

    def __init__(
        self,
        notes: NoteStore,
        unfurler: Unfurler,
        cache: MetadataCache | None = None,
        queue: FetchQueue | None = None,
        delay_seconds: float = 1.0,
        short_title_length: int = 50,
        backfill_limit: int = 5,
        backfill_stagger_seconds: float = 2.0,
        sleep: SleepFunc = anyio.sleep,
        close_unfurler: bool = False,
    ) -> None:
        """
        Initialize the service.

        Args:
            notes: Note storage collaborator
            unfurler: Unfurler used for cache misses
            cache: Metadata cache (a fresh one by default)
            queue: Fetch queue (a fresh one by default)
            delay_seconds: Pause between consecutive unfurls
            short_title_length: Maximum length of titles borrowed from metadata
            backfill_limit: Default number of notes handled by ``backfill``
            backfill_stagger_seconds: Default spacing between backfill requests
            sleep: Timer for the pauses (anyio.sleep unless overridden)
            close_unfurler: Close the unfurler when the service exits
        """
        self._notes = notes
        self._unfurler = unfurler
        self.cache = cache if cache is not None else MetadataCache()
        self.queue = queue if queue is not None else FetchQueue()
        self.short_title_length = short_title_length
        self.backfill_limit = backfill_limit
        self.backfill_stagger_seconds = backfill_stagger_seconds
        self._sleep = sleep
        self._close_unfurler = close_unfurler
        self._task_group: TaskGroup | None = None
        self._backfills: set[anyio.Event] = set()
        self.processor = QueueProcessor(
            self.queue,
            self.cache,
            unfurler,
            self._apply_to_note,
            delay_seconds=delay_seconds,
            sleep=sleep,
        )

    @classmethod
    def from_settings(
        cls,
        notes: NoteStore,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "MetadataService":
        """
        Build the pipeline with a Microlink unfurler configured from settings.

        Args:
            notes: Note storage collaborator
            settings: Settings to use (defaults to the global instance)
            http_client: Shared HTTP client (optional)

        Returns:
            A service that closes its unfurler on exit
        """
        settings = settings or default_settings
        unfurler = MicrolinkUnfurler(
            endpoint=settings.unfurl_endpoint,
            api_key=settings.unfurl_api_key,
            timeout_seconds=settings.request_timeout,
            http_client=http_client,
            title_max_length=settings.title_max_length,
            description_max_length=settings.description_max_length,
            verify=settings.get_ssl_context(),
        )
        logger.info(
            "metadata_service_configured",
            unfurler=unfurler.name,
            authenticated=settings.is_unfurl_authenticated(),
            delay_seconds=settings.inter_request_delay_seconds,
        )
        return cls(
            notes,
            unfurler,
            delay_seconds=settings.inter_request_delay_seconds,
            short_title_length=settings.short_title_length,
            backfill_limit=settings.backfill_limit,
            backfill_stagger_seconds=settings.backfill_stagger_seconds,
            close_unfurler=True,
        )

    async def __aenter__(self) -> "MetadataService":
        if self._task_group is not None:
            raise RuntimeError("MetadataService is already running")
        task_group = anyio.create_task_group()
        await task_group.__aenter__()
        self._task_group = task_group
        self.processor.bind(task_group)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        task_group = self._task_group
        if task_group is None:
            raise RuntimeError("MetadataService is not running")
        try:
            # Waits for an in-progress drain to finish the queue
            return await task_group.__aexit__(exc_type, exc, tb)
        finally:
            self.processor.bind(None)
            self._task_group = None
            if self._close_unfurler:
                await self._unfurler.close()

    async def request_metadata(self, note_id: NoteId, url: str) -> EnqueueResult | None:
        """
        Ask for metadata for the note ``note_id`` bookmarking ``url``.

        A cached URL is applied to the note before this returns. Otherwise
        the URL is queued and resolved in the background, which needs the
        service to be running.

        Args:
            note_id: Note to update
            url: URL to unfurl, used verbatim as the cache key

        Returns:
            None on a cache hit, else the queue's EnqueueResult

        Raises:
            RuntimeError: Cache miss outside ``async with service``; nothing is queued
        """
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("metadata_cache_hit", url=url, note_id=note_id)
            await self._apply_to_note(note_id, cached)
            return None

        if not self.processor.is_bound:
            raise RuntimeError("MetadataService is not running")

        result = self.queue.enqueue(url, note_id)
        logger.debug("metadata_requested", url=url, note_id=note_id, result=result.value)
        if result is EnqueueResult.NEWLY_QUEUED:
            self.processor.kick()
        return result

    async def request_for_note(self, note: Note) -> bool:
        """
        Request metadata for a note if it is a link with a usable URL.

        Returns:
            True if a request was made
        """
        if not note.is_link:
            return False
        url = note.url
        if not is_valid_url(url):
            logger.debug("metadata_skip_invalid_url", note_id=note.id, url=url)
            return False
        await self.request_metadata(note.id, url)
        return True

    def backfill(
        self,
        notes: Iterable[Note],
        limit: int | None = None,
        stagger_seconds: float | None = None,
    ) -> list[NoteId]:
        """
        Schedule metadata requests for link notes that have none yet.

        Used after loading or importing notes. Only the first ``limit``
        candidates are handled; their requests are issued from a background
        task, ``stagger_seconds`` apart, so this returns immediately.

        Args:
            notes: Notes to scan
            limit: Maximum notes to request (defaults to ``backfill_limit``)
            stagger_seconds: Spacing between requests (defaults to ``backfill_stagger_seconds``)

        Returns:
            Ids of the notes a request is scheduled for

        Raises:
            RuntimeError: Called outside ``async with service``
        """
        if self._task_group is None:
            raise RuntimeError("MetadataService is not running")

        limit = self.backfill_limit if limit is None else limit
        stagger = self.backfill_stagger_seconds if stagger_seconds is None else stagger_seconds

        candidates = [note for note in notes if note.is_link and note.metadata is None][:limit]
        scheduled = [note for note in candidates if is_valid_url(note.url)]
        if scheduled:
            done = anyio.Event()
            self._backfills.add(done)
            self._task_group.start_soon(self._run_backfill, scheduled, stagger, done)

        logger.info("metadata_backfill", candidates=len(candidates), scheduled=len(scheduled))
        return [note.id for note in scheduled]

    async def _run_backfill(self, notes: list[Note], stagger: float, done: anyio.Event) -> None:
        try:
            for index, note in enumerate(notes):
                if index and stagger > 0:
                    await self._sleep(stagger)
                await self.request_metadata(note.id, note.url)
        finally:
            self._backfills.discard(done)
            done.set()

    async def wait_idle(self) -> None:
        """Wait until scheduled backfills have run and every queued URL has been processed."""
        while self._backfills:
            await next(iter(self._backfills)).wait()
        await self.processor.wait_idle()

    def status(self) -> dict[str, Any]:
        """Snapshot of the pipeline for diagnostics."""
        return {
            "state": self.processor.state.value,
            "queue_size": len(self.queue),
            "cache_size": len(self.cache),
            "in_flight": self.processor.in_flight,
        }

    async def _apply_to_note(self, note_id: NoteId, metadata: LinkMetadata) -> None:
        """
        Attach metadata to a note, save it and redraw it.

        The save is awaited before the drain moves on, so a slow store also
        delays the next unfurl. Its failures are logged and never undo the
        cache entry.
        """
        note = self._notes.find_note_by_id(note_id)
        if note is None:
            logger.debug("metadata_note_missing", note_id=note_id)
            return

        note.apply_metadata(metadata, self.short_title_length)

        try:
            await self._notes.persist_note(note)
        except Exception as e:
            logger.exception("metadata_persist_failed", note_id=note_id, error=str(e))

        try:
            self._notes.on_metadata_applied(note)
        except Exception as e:
            logger.exception("metadata_render_failed", note_id=note_id, error=str(e))
