"""
Link extraction from note content.

Note content is ENML, an XHTML dialect wrapped in an <en-note> root element.
Every anchor is classified by the NoteLinkParser; anchors that do not
reference a note are dropped.
"""
import logging
from typing import List

from lxml import etree, html

from ..exceptions import MarkupParseError
from ..note_graph import NoteLink
from .link_grammar import NoteLinkParser
from .protocols import LinkExtractor


logger = logging.getLogger(__name__)


class NoteContentLinkExtractor(LinkExtractor):
    """
    Extracts note links from the anchors of a note's markup body.

    Links keep document order and are not deduplicated.
    """

    ANCHOR_XPATH = "//a"

    # Content is encoded as UTF-8 before parsing
    HTML_PARSER = html.HTMLParser(encoding="utf-8")

    def __init__(self, parser: NoteLinkParser):
        """
        Args:
            parser: Classifies anchor hrefs for the traversed account
        """
        self.parser = parser

    def extract_links(self, note_guid: str, content: str) -> List[NoteLink]:
        """
        Extract note links from ``content``.

        Args:
            note_guid: Guid of the note the content belongs to
            content: Markup body of the note

        Returns:
            Note links in document order

        Raises:
            MarkupParseError: If the content is not parseable markup or an
                anchor's href is not a parseable URL. Blank content has no
                links and does not raise.
        """
        if not content.strip():
            logger.debug(f"Note {note_guid} has no content")
            return []

        document = self._parse(note_guid, content)

        note_links = []
        for anchor in document.xpath(self.ANCHOR_XPATH):
            href = anchor.get("href", "")
            text = str(anchor.text_content())
            try:
                note_link = self.parser.parse_note_link(note_guid, href, text)
            except ValueError as e:
                raise MarkupParseError(
                    f"Failed to parse URL [{href}] in note with GUID [{note_guid}]: {e}"
                ) from e

            if note_link is not None:
                note_links.append(note_link)

        logger.debug(f"Detected {len(note_links)} note links in note {note_guid}")
        return note_links

    def _parse(self, note_guid: str, content: str):
        # Bytes input lets lxml accept the XML declaration that starts ENML
        try:
            return html.document_fromstring(content.encode("utf-8"), parser=self.HTML_PARSER)
        except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
            raise MarkupParseError(
                f"Failed to parse content of note with GUID [{note_guid}]: {e}"
            ) from e
