"""
Note graph extraction with pluggable components.

This package provides the link grammar, the content link extractor, note
stores and the paginated graph builder.
"""

from .protocols import (
    AccountIdentity, NoteSummary, NotesPage, NoteContent, NotesQuery, NoteStore, LinkExtractor,
)
from .link_grammar import NoteLinkParser, EVERNOTE_HOST, SANDBOX_EVERNOTE_HOST
from .link_extractors import NoteContentLinkExtractor
from .sources import MemoryNoteStore, JSONLNoteStore
from .graph_builder import PaginatedGraphBuilder, build_note_graph

__all__ = [
    # Protocols
    "AccountIdentity",
    "NoteSummary",
    "NotesPage",
    "NoteContent",
    "NotesQuery",
    "NoteStore",
    "LinkExtractor",
    # Link grammar
    "NoteLinkParser",
    "EVERNOTE_HOST",
    "SANDBOX_EVERNOTE_HOST",
    # Link Extractors
    "NoteContentLinkExtractor",
    # Sources
    "MemoryNoteStore",
    "JSONLNoteStore",
    # Core Builder
    "PaginatedGraphBuilder",
    "build_note_graph",
]
