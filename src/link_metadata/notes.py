"""Note storage interface the metadata pipeline relies on."""

from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

import structlog

from link_metadata.models.note import Note, NoteId

logger = structlog.get_logger(__name__)


@runtime_checkable
class NoteStore(Protocol):
    """
    Collaborator owned by the notes application.

    The pipeline looks notes up, saves them after attaching metadata and asks
    the UI to redraw the single note that changed.
    """

    def find_note_by_id(self, note_id: NoteId) -> Note | None:
        """Return the note with this id, or None if it no longer exists."""
        ...

    async def persist_note(self, note: Note) -> None:
        """Save a note whose metadata changed."""
        ...

    def on_metadata_applied(self, note: Note) -> None:
        """Redraw one note after its metadata changed."""
        ...


class InMemoryNoteStore:
    """
    Dict-backed NoteStore.

    Mirrors the browser-only edition of the app, where notes live in memory
    and "saving" means keeping the updated object around.
    """

    def __init__(
        self,
        notes: Iterable[Note] | None = None,
        on_applied: Callable[[Note], None] | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            notes: Initial notes
            on_applied: Optional render hook called after metadata is applied
        """
        self._notes: dict[NoteId, Note] = {}
        self._on_applied = on_applied
        self.save_count = 0
        for note in notes or []:
            self.add(note)

    def add(self, note: Note) -> Note:
        self._notes[note.id] = note
        return note

    def delete(self, note_id: NoteId) -> bool:
        return self._notes.pop(note_id, None) is not None

    def all(self) -> list[Note]:
        return list(self._notes.values())

    def find_note_by_id(self, note_id: NoteId) -> Note | None:
        return self._notes.get(note_id)

    async def persist_note(self, note: Note) -> None:
        self._notes[note.id] = note
        self.save_count += 1

    def on_metadata_applied(self, note: Note) -> None:
        logger.debug("note_metadata_applied", note_id=note.id, title=note.title)
        if self._on_applied is not None:
            self._on_applied(note)

    def __len__(self) -> int:
        return len(self._notes)
