"""
Graph of the notes of a note-taking account and the note links between them.
"""

from .exceptions import NoteGraphError, GrammarConfigError, MarkupParseError, RemoteFetchError
from .note_graph import Note, NoteLink, NoteGraph, URLKind
from .graph_config import GraphConfig
from .graph_export import convert_note_graph, save_note_graph

__all__ = [
    "NoteGraphError",
    "GrammarConfigError",
    "MarkupParseError",
    "RemoteFetchError",
    "Note",
    "NoteLink",
    "NoteGraph",
    "URLKind",
    "GraphConfig",
    "convert_note_graph",
    "save_note_graph",
]
