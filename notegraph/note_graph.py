"""
In-memory graph of notes and the links between them.

A NoteGraph is filled once per traversal run and only read afterwards. Links
may point at notes that are not part of the graph (broken links); this is an
expected state and is reported rather than raised.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .exceptions import GrammarConfigError


class URLKind(Enum):
    """Kinds of URLs that reference a note."""

    APP_LINK = "AppLink"              # In-app note link
    WEB_LINK = "WebLink"              # Note link opened in the web client
    PUBLIC_LINK = "PublicLink"        # Shared note link
    SHORTENED_LINK = "ShortenedLink"  # Shortened URL, target unknown

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "URLKind":
        """
        Look up a URL kind by its display name (case-insensitive).

        Raises:
            GrammarConfigError: If ``name`` is not a known URL kind
        """
        for kind in cls:
            if kind.value.lower() == str(name).lower():
                return kind
        raise GrammarConfigError(
            f"Unknown URL kind: {name!r}. "
            f"Available kinds: {[kind.value for kind in cls]}"
        )


# URL kinds that can serve as a note's canonical URL
CANONICAL_URL_KINDS = frozenset({URLKind.APP_LINK, URLKind.WEB_LINK})


def check_canonical_url_kind(url_kind: URLKind) -> URLKind:
    """Raise GrammarConfigError unless ``url_kind`` can be used for note URLs."""
    if url_kind not in CANONICAL_URL_KINDS:
        raise GrammarConfigError(
            f"Unsupported note URL kind [{url_kind}]. "
            f"Supported kinds: {sorted(kind.value for kind in CANONICAL_URL_KINDS)}"
        )
    return url_kind


@dataclass(frozen=True)
class Note:
    """A note of the traversed account."""
    guid: str
    title: str
    canonical_url: str
    url_kind: URLKind
    description: Optional[str] = None   # Defaults to the title

    def __post_init__(self):
        if self.description is None:
            object.__setattr__(self, "description", self.title)


@dataclass(frozen=True)
class NoteLink:
    """A hyperlink inside a note that references a note."""
    source_note_guid: str
    target_note_guid: Optional[str]     # None for shortened links
    text: str
    url: str
    url_kind: URLKind


class NoteGraph:
    """
    Notes keyed by guid plus every link discovered between them.

    Links are kept in discovery order and are never deduplicated: two anchors
    pointing at the same note produce two links.
    """

    def __init__(self):
        self.notes: Dict[str, Note] = {}
        self.note_links: List[NoteLink] = []

    def __len__(self) -> int:
        return len(self.notes)

    def __repr__(self):
        return (f"NoteGraph(notes={len(self.notes)}, "
                f"note_links={len(self.note_links)})")

    def add(self, note: Note, note_links: List[NoteLink]) -> bool:
        """
        Add a note together with the links found in it.

        Returns:
            True if the note contributed at least one link
        """
        self.notes[note.guid] = note
        self.note_links.extend(note_links)
        return len(note_links) != 0

    def get_note(self, guid: Optional[str]) -> Optional[Note]:
        return self.notes.get(guid) if guid is not None else None

    def _is_valid(self, note_link: NoteLink) -> bool:
        return (note_link.source_note_guid in self.notes
                and note_link.target_note_guid in self.notes)

    def linked_notes(self) -> List[Note]:
        """Notes at either end of a link whose both ends exist, in insertion order."""
        linked = set()
        for note_link in self.valid_links():
            linked.add(note_link.source_note_guid)
            linked.add(note_link.target_note_guid)
        return [note for guid, note in self.notes.items() if guid in linked]

    def valid_links(self) -> List[NoteLink]:
        """Links whose source and target note are both in the graph."""
        return [link for link in self.note_links if self._is_valid(link)]

    def broken_links(self) -> List[NoteLink]:
        """Links missing their source note, their target note, or both."""
        return [link for link in self.note_links if not self._is_valid(link)]
