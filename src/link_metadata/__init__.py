"""Link metadata pipeline: cached, single-flight unfurling for link notes."""

from link_metadata.cache import MetadataCache
from link_metadata.fetch_queue import EnqueueResult, FetchQueue
from link_metadata.models import LinkMetadata, Note
from link_metadata.notes import InMemoryNoteStore, NoteStore
from link_metadata.processor import ProcessorState, QueueProcessor
from link_metadata.service import MetadataService
from link_metadata.unfurlers import MicrolinkUnfurler, Unfurler

__version__ = "0.1.0"

__all__ = [
    "EnqueueResult",
    "FetchQueue",
    "InMemoryNoteStore",
    "LinkMetadata",
    "MetadataCache",
    "MetadataService",
    "MicrolinkUnfurler",
    "Note",
    "NoteStore",
    "ProcessorState",
    "QueueProcessor",
    "Unfurler",
]
