"""
Conversion of a NoteGraph into an attributed graph document and writers for
exchange formats.

The document is a networkx MultiDiGraph: nodes are keyed by note guid and
carry label, description and url; edges are keyed by a random uuid and carry
label and description. Several edges may connect the same pair of notes.
"""
import json
import logging
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .note_graph import Note, NoteGraph, NoteLink

logger = logging.getLogger(__name__)

# Id of the graph element in exported documents
NOTE_GRAPH_ID = "NoteGraph"


def graph_notes(note_graph: NoteGraph, include_all_notes: bool) -> List[Note]:
    """Notes to include as nodes."""
    if include_all_notes:
        return list(note_graph.notes.values())
    return note_graph.linked_notes()


def graph_note_links(note_graph: NoteGraph) -> List[NoteLink]:
    """Note links to include as edges; broken links are never rendered."""
    return note_graph.valid_links()


def convert_note_graph(note_graph: NoteGraph, include_all_notes: bool = False) -> nx.MultiDiGraph:
    """
    Convert a NoteGraph into an attributed graph document.

    Args:
        note_graph: The finished note graph
        include_all_notes: Include every note; otherwise only linked notes

    Returns:
        MultiDiGraph with one node per note and one edge per valid note link
    """
    notes = graph_notes(note_graph, include_all_notes)
    note_links = graph_note_links(note_graph)

    document = nx.MultiDiGraph(id=NOTE_GRAPH_ID)
    for note in notes:
        document.add_node(
            note.guid,
            label=note.title,
            description=note.description,
            url=note.canonical_url,
        )
    for note_link in note_links:
        document.add_edge(
            note_link.source_note_guid,
            note_link.target_note_guid,
            key=str(uuid.uuid4()),
            label=note_link.text,
            description=note_link.text,
        )

    logger.info(
        f"Converted note graph with {len(notes)} notes and {len(note_links)} note links "
        f"to {document.number_of_nodes()} nodes and {document.number_of_edges()} edges"
    )
    return document


def write_graphml(document: nx.MultiDiGraph, output_path: Path) -> None:
    """Write the document as GraphML."""
    output_path = Path(output_path)
    logger.info(f"Saving GraphML to {output_path}...")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    nx.write_graphml(document, output_path, encoding='utf-8')


def write_graph_jsonl(document: nx.MultiDiGraph, output_path: Path) -> None:
    """
    Write the document in JSONL format, one node per line.

    Each record carries the node attributes plus the sorted ids of the nodes
    it links to and is linked from.
    """
    output_path = Path(output_path)
    logger.info(f"Writing graph to {output_path}...")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        for node_id, attrs in document.nodes(data=True):
            node_data = {
                'id': node_id,
                'label': attrs.get('label'),
                'description': attrs.get('description'),
                'url': attrs.get('url'),
                'outgoing': sorted(set(document.successors(node_id))),
                'incoming': sorted(set(document.predecessors(node_id))),
            }
            f.write(json.dumps(node_data) + '\n')

    logger.info(f"Graph written to {output_path}")


WRITERS = {
    'graphml': write_graphml,
    'jsonl': write_graph_jsonl,
}


def save_note_graph(
    note_graph: NoteGraph,
    output_path: Path,
    include_all_notes: bool = False,
    output_format: str = 'graphml',
) -> nx.MultiDiGraph:
    """Convert ``note_graph`` and write it to ``output_path``."""
    writer = WRITERS.get(output_format)
    if writer is None:
        raise ValueError(
            f"Unknown output_format: {output_format}. "
            f"Available formats: {list(WRITERS.keys())}"
        )
    document = convert_note_graph(note_graph, include_all_notes)
    writer(document, output_path)
    return document


def graph_stats(note_graph: NoteGraph) -> Dict[str, int]:
    return {
        'notes': len(note_graph.notes),
        'linked_notes': len(note_graph.linked_notes()),
        'note_links': len(note_graph.note_links),
        'valid_note_links': len(note_graph.valid_links()),
        'broken_note_links': len(note_graph.broken_links()),
    }


def log_graph_stats(note_graph: NoteGraph) -> None:
    stats = graph_stats(note_graph)
    logger.info("Note graph stats")
    logger.info(f"   Notes: {stats['notes']}")
    logger.info(f"   Linked notes: {stats['linked_notes']}")
    logger.info(f"   Note links: {stats['note_links']}")
    logger.info(f"   Valid note links: {stats['valid_note_links']}")
    logger.info(f"   Broken note links: {stats['broken_note_links']}")


def broken_link_report(note_graph: NoteGraph) -> List[Tuple[str, Optional[str]]]:
    """(source guid, target guid) of every broken note link, in discovery order."""
    return [
        (link.source_note_guid, link.target_note_guid)
        for link in note_graph.broken_links()
    ]


def log_broken_links(note_graph: NoteGraph) -> None:
    broken_links = note_graph.broken_links()
    if not broken_links:
        return

    logger.info("Broken note links")
    for link in broken_links:
        source_note = note_graph.get_note(link.source_note_guid)
        target_note = note_graph.get_note(link.target_note_guid)
        logger.info(
            f"   Note link [{link.text}] ({link.url_kind}) from note "
            f"[{source_note.title if source_note else link.source_note_guid}] to note "
            f"[{target_note.title if target_note else link.target_note_guid}]"
        )
