"""
Run configuration for building and exporting a note graph.

One GraphConfig is created per run and handed to the graph builder and the
exporter; it can be saved next to the exported graph and loaded again.
"""
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Literal
import json

from .note_graph import URLKind, check_canonical_url_kind


DEFAULT_PAGE_SIZE = 100

OUTPUT_FORMATS = ('graphml', 'jsonl')

NOTE_SORT_ORDERS = ('created', 'updated', 'title')


@dataclass(frozen=True)
class NotesQuery:
    """Ordering of note summaries requested from a note store."""
    order: str = 'created'
    ascending: bool = False

    def __post_init__(self):
        if self.order not in NOTE_SORT_ORDERS:
            raise ValueError(
                f"Unknown note order: {self.order!r}. "
                f"Available orders: {list(NOTE_SORT_ORDERS)}"
            )


@dataclass
class GraphConfig:
    """
    Configuration of a note graph run.

    Attributes:
        note_url_kind: URL kind used for note URLs ('WebLink' or 'AppLink')
        page_size: Number of note summaries requested per page
        include_all_notes: Export every note instead of linked notes only
        show_progress: Show progress bars via tqdm
        query: Ordering of note summaries requested from the note store
        output_format: Format of the exported graph ('graphml' or 'jsonl')
    """

    note_url_kind: str = 'WebLink'
    page_size: int = DEFAULT_PAGE_SIZE
    include_all_notes: bool = False
    show_progress: bool = True
    query: NotesQuery = field(default_factory=NotesQuery)
    output_format: Literal['graphml', 'jsonl'] = 'graphml'

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output_format: {self.output_format}. "
                f"Available formats: {list(OUTPUT_FORMATS)}"
            )

        if isinstance(self.query, dict):
            self.query = NotesQuery(**self.query)

        # Raises GrammarConfigError before any traversal starts
        check_canonical_url_kind(self.url_kind)

    @property
    def url_kind(self) -> URLKind:
        return URLKind.from_name(self.note_url_kind)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'GraphConfig':
        """Create from dictionary."""
        return cls(**data)

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'GraphConfig':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
