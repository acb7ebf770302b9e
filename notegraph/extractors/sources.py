"""
Note store implementations.

Provide paginated access to the notes of one account:
- MemoryNoteStore: Notes held in memory (tests, programmatic use)
- JSONLNoteStore: Notes exported to a JSON Lines file
"""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..exceptions import RemoteFetchError
from .protocols import (
    AccountIdentity, NoteContent, NoteStore, NoteSummary, NotesPage, NotesQuery,
)


logger = logging.getLogger(__name__)


class MemoryNoteStore(NoteStore):
    """
    Serves notes from memory in the order requested by a NotesQuery.

    Summaries are sorted with the same keys a remote store would use, so
    paging through a MemoryNoteStore visits every note exactly once.
    """

    def __init__(self, identity: AccountIdentity, notes: Iterable[dict]):
        """
        Args:
            identity: Account the notes belong to
            notes: Records with keys 'guid', 'title', 'content' and optionally
                'created' and 'updated'
        """
        self.identity = identity
        self._summaries: List[NoteSummary] = []
        self._contents: Dict[str, NoteContent] = {}

        for record in notes:
            self._add_record(record)

    def _add_record(self, record: dict) -> None:
        guid = record["guid"]
        title = record.get("title") or ""
        self._summaries.append(NoteSummary(
            guid=guid,
            title=title,
            created=int(record.get("created") or 0),
            updated=int(record.get("updated") or 0),
        ))
        self._contents[guid] = NoteContent(
            guid=guid,
            title=title,
            content=record.get("content") or "",
        )

    def __len__(self) -> int:
        return len(self._summaries)

    def account_identity(self) -> AccountIdentity:
        return self.identity

    def fetch_notes_page(
        self,
        offset: int,
        limit: int,
        query: Optional[NotesQuery] = None,
    ) -> NotesPage:
        query = query or NotesQuery()
        ordered = sorted(
            self._summaries,
            key=lambda summary: getattr(summary, query.order),
            reverse=not query.ascending,
        )
        notes = ordered[offset:offset + limit]
        logger.debug(f"Serving {len(notes)} notes from offset {offset} (limit {limit})")
        return NotesPage(notes=notes, start_index=offset, total_notes=len(ordered))

    def fetch_note_content(self, guid: str) -> NoteContent:
        try:
            return self._contents[guid]
        except KeyError:
            raise RemoteFetchError(f"Note with GUID [{guid}] not found") from None


class JSONLNoteStore(MemoryNoteStore):
    """
    Serves notes exported to a JSON Lines file.

    Each line holds one note: {"guid": ..., "title": ..., "content": ...},
    optionally with "created" and "updated" timestamps.
    """

    def __init__(self, input_file: Path, identity: AccountIdentity):
        """
        Args:
            input_file: Path to the JSONL export
            identity: Account the exported notes belong to

        Raises:
            RemoteFetchError: If the export is missing or malformed
        """
        self.input_file = Path(input_file)
        if not self.input_file.exists():
            raise RemoteFetchError(f"Input file does not exist: {self.input_file}")

        super().__init__(identity, self._read_records())
        logger.info(f"Loaded {len(self)} notes from {self.input_file}")

    def _read_records(self) -> List[dict]:
        records = []
        with open(self.input_file, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise RemoteFetchError(
                        f"Malformed JSON on line {line_num} of {self.input_file}: {e}"
                    ) from e

                if not isinstance(data, dict) or not data.get("guid"):
                    raise RemoteFetchError(
                        f"Note without GUID on line {line_num} of {self.input_file}"
                    )
                records.append(data)
        return records
