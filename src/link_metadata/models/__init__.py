"""Pydantic models for the link metadata pipeline."""

from link_metadata.models.metadata import LinkMetadata
from link_metadata.models.note import Note, NoteId, NoteType

__all__ = [
    "LinkMetadata",
    "Note",
    "NoteId",
    "NoteType",
]
