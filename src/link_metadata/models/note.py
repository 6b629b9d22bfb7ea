"""Note model shared with the surrounding notes application."""

from typing import Literal

from pydantic import BaseModel

from link_metadata.models.metadata import LinkMetadata
from link_metadata.utils.text import short_title

NoteId = int | str
NoteType = Literal["note", "link"]


class Note(BaseModel):
    """
    A note as stored by the notes application.

    Only the fields the metadata pipeline reads or writes are declared;
    anything else the storage layer keeps (category, timestamps, ...) is
    carried through untouched.
    """

    id: NoteId
    type: NoteType = "note"
    content: str = ""
    title: str = ""
    metadata: LinkMetadata | None = None

    model_config = {"extra": "allow"}

    @property
    def is_link(self) -> bool:
        """Whether this note is a bookmark."""
        return self.type == "link"

    @property
    def url(self) -> str:
        """The bookmarked URL for link notes, "" otherwise."""
        return self.content.strip() if self.is_link else ""

    def apply_metadata(self, metadata: LinkMetadata, short_title_length: int = 50) -> None:
        """
        Attach fetched metadata to this note.

        An untitled link note also takes a shortened copy of the page title.

        Args:
            metadata: Metadata to attach
            short_title_length: Maximum length of a borrowed title
        """
        self.metadata = metadata
        if self.is_link and not self.title and metadata.title:
            self.title = short_title(metadata.title, short_title_length)
