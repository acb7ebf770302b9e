"""
Core graph building logic: paginated traversal of a note store.
"""
import logging
from typing import List, Optional, Tuple

from tqdm import tqdm

from ..exceptions import MarkupParseError, RemoteFetchError
from ..graph_config import GraphConfig
from ..note_graph import Note, NoteGraph, NoteLink, URLKind, check_canonical_url_kind
from .link_extractors import NoteContentLinkExtractor
from .link_grammar import NoteLinkParser
from .protocols import LinkExtractor, NoteContent, NoteStore, NoteSummary

logger = logging.getLogger(__name__)


class PaginatedGraphBuilder:
    """
    Builds a NoteGraph from every note of a note store.

    The traversal is strictly sequential:
    1. Request one page of note summaries at the current offset
    2. Fetch each note's content and extract its note links
    3. Keep AppLinks and WebLinks and add the note to the graph
    4. Advance the offset by the page size until no notes remain

    Any failure aborts the whole traversal; a partial graph is never returned.
    Store errors of any type are re-raised as RemoteFetchError with the offset
    or note they occurred at.
    """

    # PublicLinks and ShortenedLinks may point at notes of other accounts that
    # are never fetched, so they are not part of the graph
    SELECTED_URL_KINDS = frozenset({URLKind.APP_LINK, URLKind.WEB_LINK})

    def __init__(
        self,
        store: NoteStore,
        parser: NoteLinkParser,
        config: Optional[GraphConfig] = None,
        link_extractor: Optional[LinkExtractor] = None,
    ):
        """
        Args:
            store: Note store providing note summaries and content
            parser: Link grammar for the store's account, also builds note URLs
            config: Run configuration (defaults to GraphConfig())
            link_extractor: Extracts note links from content (defaults to
                NoteContentLinkExtractor using ``parser``)
        """
        self.store = store
        self.parser = parser
        self.config = config or GraphConfig()
        self.link_extractor = link_extractor or NoteContentLinkExtractor(parser)
        self.url_kind = check_canonical_url_kind(self.config.url_kind)

    @property
    def page_size(self) -> int:
        return self.config.page_size

    def build_graph(self) -> NoteGraph:
        """
        Traverse every note of the store.

        Returns:
            The populated NoteGraph

        Raises:
            RemoteFetchError: If a page or a note cannot be fetched, or a page
                comes back empty while notes remain
            MarkupParseError: If the content of a note cannot be parsed
        """
        offset = 0
        note_graph = NoteGraph()

        progress = tqdm(
            disable=not self.config.show_progress,
            desc="Processing notes",
            unit="notes",
        )
        try:
            while True:
                logger.info(
                    f"Processing metadata of notes from offset [{offset}] "
                    f"with page size [{self.page_size}]"
                )
                try:
                    page = self.store.fetch_notes_page(offset, self.page_size, self.config.query)
                except Exception as e:
                    raise RemoteFetchError(
                        f"Failed to process metadata of notes from offset [{offset}] "
                        f"with page size [{self.page_size}]: {e}"
                    ) from e

                progress.total = page.total_notes
                progress.refresh()

                for summary in page.notes:
                    note, note_links = self.process_note(summary)
                    note_graph.add(note, note_links)
                    progress.update(1)

                remaining_notes = page.total_notes - (page.start_index + len(page.notes))
                if remaining_notes <= 0:
                    break

                if not page.notes:
                    raise RemoteFetchError(
                        f"Empty page of notes at offset [{offset}] while "
                        f"[{remaining_notes}] notes remain"
                    )

                offset += self.page_size
        finally:
            progress.close()

        logger.info(f"Graph complete: {len(note_graph.notes)} notes, "
                    f"{len(note_graph.note_links)} note links")
        return note_graph

    def process_note(self, summary: NoteSummary) -> Tuple[Note, List[NoteLink]]:
        """Fetch one note and return it with its selected note links."""
        logger.debug(f"Processing note with GUID [{summary.guid}] and title [{summary.title}]")
        context = f"note with GUID [{summary.guid}] and title [{summary.title}]"

        try:
            content = self.store.fetch_note_content(summary.guid)
        except Exception as e:
            raise RemoteFetchError(f"Failed to fetch {context}: {e}") from e

        note = self.create_note(content)

        try:
            note_links = self.link_extractor.extract_links(content.guid, content.content)
        except MarkupParseError as e:
            raise MarkupParseError(f"Failed to extract note links from {context}: {e}") from e

        return note, self.select_note_links(note, note_links)

    def create_note(self, content: NoteContent) -> Note:
        """Create the graph Note for fetched note content."""
        return Note(
            guid=content.guid,
            title=content.title,
            canonical_url=self.parser.create_note_url(content.guid, self.url_kind),
            url_kind=self.url_kind,
        )

    def select_note_links(self, note: Note, note_links: List[NoteLink]) -> List[NoteLink]:
        """Keep only the note links whose kind is part of the graph."""
        selected = [link for link in note_links if link.url_kind in self.SELECTED_URL_KINDS]
        logger.debug(
            f"Selected {len(selected)} of {len(note_links)} note links "
            f"for note with GUID [{note.guid}]"
        )
        return selected


def build_note_graph(store: NoteStore, config: Optional[GraphConfig] = None) -> NoteGraph:
    """
    Build the note graph of every note in ``store``.

    This is a convenience function that sets up the PaginatedGraphBuilder
    with a link grammar for the store's account.

    Args:
        store: Note store to traverse
        config: Run configuration. If None, uses GraphConfig().

    Returns:
        The populated NoteGraph

    Example:
        >>> store = JSONLNoteStore(Path("notes.jsonl"), identity)
        >>> graph = build_note_graph(store, GraphConfig(show_progress=False))
        >>> print(f"Built graph with {len(graph)} notes")
    """
    if config is None:
        config = GraphConfig()
    check_canonical_url_kind(config.url_kind)

    try:
        identity = store.account_identity()
    except Exception as e:
        raise RemoteFetchError(f"Failed to retrieve account identity: {e}") from e

    logger.info(
        f"Using note service at [{identity.host}] with user [{identity.user_id}] "
        f"and shard [{identity.shard_id}]"
    )
    parser = NoteLinkParser.from_identity(identity)

    builder = PaginatedGraphBuilder(store, parser, config)
    return builder.build_graph()
