#!/usr/bin/env python
"""
CLI for building note graphs.

Usage:
    python -m notegraph jsonl <input_file> --user-id 76136038 --shard-id s12 -o notegraph.graphml
    python -m notegraph jsonl <input_file> --user-id 76136038 --shard-id s12 --format jsonl -o notegraph.jsonl
"""
import argparse
import logging
import sys
from pathlib import Path

from notegraph.graph_config import GraphConfig, OUTPUT_FORMATS
from notegraph.note_graph import URLKind


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="notegraph",
        description="Build a graph of notes and the note links between them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="source", required=True, help="Note store type")

    # JSONL subcommand
    jsonl_parser = subparsers.add_parser(
        "jsonl",
        help="Build note graph from a JSONL note export",
        description="Build a note graph from notes exported to a JSON Lines file"
    )
    jsonl_parser.add_argument(
        "input_file",
        type=Path,
        help="JSONL file with one note per line (guid, title, content)"
    )
    jsonl_parser.add_argument(
        "--host",
        default=None,
        help="Web hostname of the note service (default: www.evernote.com)"
    )
    jsonl_parser.add_argument(
        "--sandbox",
        action="store_true",
        help="Use sandbox.evernote.com when --host is not given"
    )
    jsonl_parser.add_argument(
        "--user-id",
        required=True,
        help="Id of the account owning the notes"
    )
    jsonl_parser.add_argument(
        "--shard-id",
        required=True,
        help="Shard of the account owning the notes"
    )
    jsonl_parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("notegraph.graphml"),
        help="Output path for the exported graph (default: notegraph.graphml)"
    )
    jsonl_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with a saved GraphConfig; flags override its values"
    )
    jsonl_parser.add_argument(
        "--note-url",
        choices=[URLKind.WEB_LINK.value, URLKind.APP_LINK.value],
        default=None,
        help="URL kind used for note URLs (default: WebLink)"
    )
    jsonl_parser.add_argument(
        "--all-notes",
        action="store_true",
        default=None,
        help="Include all notes instead of linked notes only"
    )
    jsonl_parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Number of notes requested per page (default: 100)"
    )
    jsonl_parser.add_argument(
        "--format",
        dest="output_format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: graphml)"
    )
    verbosity = jsonl_parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress bars and info logging"
    )
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging"
    )

    return parser.parse_args(argv)


def config_from_args(args) -> GraphConfig:
    """Merge a saved config (if any) with the command line flags."""
    data = GraphConfig.load(args.config).to_dict() if args.config else {}

    if args.note_url is not None:
        data['note_url_kind'] = args.note_url
    if args.all_notes is not None:
        data['include_all_notes'] = args.all_notes
    if args.page_size is not None:
        data['page_size'] = args.page_size
    if args.output_format is not None:
        data['output_format'] = args.output_format
    if args.quiet:
        data['show_progress'] = False

    return GraphConfig.from_dict(data)


def main(argv=None):
    args = parse_args(argv)

    # Configure logging
    if args.quiet:
        log_level = logging.WARNING
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(levelname)s: %(message)s'
    )

    try:
        from notegraph.extractors.graph_builder import build_note_graph
        from notegraph.extractors.link_grammar import EVERNOTE_HOST, SANDBOX_EVERNOTE_HOST
        from notegraph.extractors.protocols import AccountIdentity
        from notegraph.extractors.sources import JSONLNoteStore
        from notegraph.graph_export import log_broken_links, log_graph_stats, save_note_graph

        config = config_from_args(args)

        if args.source == "jsonl":
            if not args.input_file.exists():
                logging.error(f"Input file does not exist: {args.input_file}")
                sys.exit(1)

            host = args.host or (SANDBOX_EVERNOTE_HOST if args.sandbox else EVERNOTE_HOST)
            identity = AccountIdentity(host=host, user_id=args.user_id, shard_id=args.shard_id)

            logging.info(f"Building note graph from {args.input_file}")
            store = JSONLNoteStore(args.input_file, identity)

        note_graph = build_note_graph(store, config)
        save_note_graph(
            note_graph,
            args.output,
            include_all_notes=config.include_all_notes,
            output_format=config.output_format,
        )
        logging.info(f"Built graph with {len(note_graph)} notes -> {args.output}")

        log_graph_stats(note_graph)
        log_broken_links(note_graph)

    except Exception as e:
        logging.error(f"Note graph building failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
