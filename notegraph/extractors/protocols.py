"""
Core protocols defining the interfaces for note graph extraction components.
"""
from typing import Protocol, List, Optional
from dataclasses import dataclass

from ..graph_config import NotesQuery
from ..note_graph import NoteLink


@dataclass(frozen=True)
class AccountIdentity:
    """Identity of the account whose notes are traversed."""
    host: str                # Web hostname of the note service
    user_id: str
    shard_id: str            # Storage partition of the account


@dataclass(frozen=True)
class NoteSummary:
    """Metadata of one note as returned in a page of results."""
    guid: str
    title: str
    created: int = 0
    updated: int = 0


@dataclass(frozen=True)
class NotesPage:
    """One page of note summaries."""
    notes: List[NoteSummary]
    start_index: int
    total_notes: int


@dataclass(frozen=True)
class NoteContent:
    """A note together with its markup body."""
    guid: str
    title: str
    content: str


class NoteStore(Protocol):
    """Remote (or exported) collection of notes belonging to one account."""

    def account_identity(self) -> AccountIdentity:
        """Returns host, user id and shard id of the account."""
        ...

    def fetch_notes_page(
        self,
        offset: int,
        limit: int,
        query: Optional[NotesQuery] = None,
    ) -> NotesPage:
        """Returns up to ``limit`` note summaries starting at ``offset``."""
        ...

    def fetch_note_content(self, guid: str) -> NoteContent:
        """Returns the note with ``guid`` including its markup body."""
        ...


class LinkExtractor(Protocol):
    """Extract note links from the markup body of one note."""

    def extract_links(self, note_guid: str, content: str) -> List[NoteLink]:
        """Returns classified note links in document order."""
        ...
