"""
Error kinds raised while building a note graph.

Broken links are not errors: they are a normal output of a run and are
reported after the graph has been built.
"""


class NoteGraphError(Exception):
    """Base exception for all note graph errors."""
    pass


class GrammarConfigError(NoteGraphError, ValueError):
    """Raised when an unsupported URL kind is requested for note URLs."""
    pass


class MarkupParseError(NoteGraphError):
    """Raised when note content or an anchor href cannot be parsed."""
    pass


class RemoteFetchError(NoteGraphError):
    """Raised when a note store fails to return a page or a note."""
    pass
