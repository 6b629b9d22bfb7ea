"""Serialized worker that drains the fetch queue one URL at a time."""

from collections.abc import Awaitable, Callable
from enum import Enum

import anyio
import structlog
from anyio.abc import TaskGroup

from link_metadata.cache import MetadataCache
from link_metadata.fetch_queue import FetchQueue
from link_metadata.models.metadata import LinkMetadata
from link_metadata.models.note import NoteId
from link_metadata.unfurlers.base import Unfurler

logger = structlog.get_logger(__name__)

ApplyCallback = Callable[[NoteId, LinkMetadata], Awaitable[None]]
SleepFunc = Callable[[float], Awaitable[None]]


class ProcessorState(str, Enum):
    """Drain loop state."""

    IDLE = "idle"
    DRAINING = "draining"


class QueueProcessor:
    """
    Single-flight drain loop over a FetchQueue.

    At most one unfurl is outstanding at any time. Between two items the loop
    waits ``delay_seconds`` to throttle calls to the unfurl API. Every URL ends
    in the cache, as real metadata or as a fallback record, and is never
    retried.

    The loop runs as a task in the task group given to ``bind``; ``kick``
    starts it when the processor is idle.
    """

    def __init__(
        self,
        queue: FetchQueue,
        cache: MetadataCache,
        unfurler: Unfurler,
        apply: ApplyCallback,
        delay_seconds: float = 1.0,
        sleep: SleepFunc = anyio.sleep,
    ) -> None:
        """
        Initialize the processor.

        Args:
            queue: Pending work
            cache: Where results are stored
            unfurler: Performs the outbound request
            apply: Called with (note id, metadata) once a URL resolves
            delay_seconds: Pause between two consecutive unfurls
            sleep: Timer used for the pause (anyio.sleep unless overridden)
        """
        self._queue = queue
        self._cache = cache
        self._unfurler = unfurler
        self._apply = apply
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._state = ProcessorState.IDLE
        self._in_flight: str | None = None
        self._task_group: TaskGroup | None = None
        self._idle: anyio.Event | None = None

    def bind(self, task_group: TaskGroup | None) -> None:
        """Attach the task group drain tasks are started in (None detaches)."""
        self._task_group = task_group

    @property
    def is_bound(self) -> bool:
        """Whether a task group is attached for drain tasks."""
        return self._task_group is not None

    @property
    def state(self) -> ProcessorState:
        return self._state

    @property
    def in_flight(self) -> str | None:
        """URL currently being unfurled, if any."""
        return self._in_flight

    def kick(self) -> bool:
        """
        Start draining if idle and there is work.

        Returns:
            True if a drain task was started
        """
        if self._state is ProcessorState.DRAINING or not len(self._queue):
            return False
        if self._task_group is None:
            raise RuntimeError("QueueProcessor is not bound to a task group")

        self._state = ProcessorState.DRAINING
        self._idle = anyio.Event()
        logger.debug("drain_start", queue_size=len(self._queue))
        self._task_group.start_soon(self._drain)
        return True

    async def wait_idle(self) -> None:
        """Wait until the current drain, if any, has emptied the queue."""
        if self._state is ProcessorState.IDLE or self._idle is None:
            return
        await self._idle.wait()

    async def _drain(self) -> None:
        try:
            while True:
                item = self._queue.peek_front()
                if item is None:
                    break
                url, note_id = item
                await self._process(url, note_id)
                if not len(self._queue):
                    break
                await self._sleep(self.delay_seconds)
        finally:
            self._in_flight = None
            self._state = ProcessorState.IDLE
            if self._idle is not None:
                self._idle.set()
            logger.debug("drain_stop")

    async def _process(self, url: str, note_id: NoteId) -> None:
        """
        Resolve one queued URL, apply the result and drop it from the queue.

        The result goes to ``note_id``, the note recorded when the item was
        taken off the front. Requests for the same URL made during the fetch
        only overwrite the queue entry that is removed afterwards.
        """
        metadata = self._cache.get(url)
        if metadata is None:
            self._in_flight = url
            try:
                metadata = await self._unfurler.fetch(url)
            except Exception:
                # Unfurlers should never raise; keep the queue moving if one does.
                logger.exception("unfurler_raised", url=url, unfurler=self._unfurler.name)
                metadata = LinkMetadata.fallback(url)
            finally:
                self._in_flight = None
            self._cache.set(url, metadata)
        else:
            logger.debug("queued_url_already_cached", url=url)

        try:
            await self._apply(note_id, metadata)
        finally:
            self._queue.remove(url)
