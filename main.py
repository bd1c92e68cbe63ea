#!/usr/bin/env python3
"""
Idea Curator - command-line entry point.

Subcommands:
  - extract:  Read page metadata for a Goodreads, YouTube/Vimeo or Wikipedia URL
  - search:   Find items by URL or name (fuzzy or exact)
  - advanced: Filter items by topic, type, duration range and quality
  - discover: Suggest one random item
  - submit:   Store a URL as a new item

Usage:
    python main.py extract https://www.goodreads.com/book/show/4671
    python main.py search gatsby --max 3
    python main.py search gatsby --exact
    python main.py advanced --type book --length 30-60 --quality educational
    python main.py discover --type book --topic fiction
    python main.py submit https://en.wikipedia.org/wiki/Curation --submitter u1 --dry-run
    python main.py --show-config
"""

import argparse
import json
import sys

from curator.config import (
    DEFAULT_MAX_RESULTS,
    print_config_summary,
    validate_config,
)
from curator.extraction import FetchError, MetadataExtractor, NullCache
from curator.models.item import ItemType, QUALITY_NAMES
from curator.pipeline import SubmissionPipeline
from curator.search import DiscoveryPicker, SearchEngine
from curator.storage import InvalidRangeError, get_store


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="idea-curator",
        description="Extract page metadata, search and discover curated items.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s extract URL                     Print metadata for a page
  %(prog)s search gatsby --max 3           Fuzzy name search
  %(prog)s search gatsby --exact           Exact name search
  %(prog)s search https://example.com/a    Items linked to a URL
  %(prog)s advanced --type book -L 30-60   Books taking 30-60 minutes
  %(prog)s discover --type book            A random book
  %(prog)s submit URL --submitter u1 -n    Dry-run a submission
        """,
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # extract
    extract = subparsers.add_parser("extract", help="Extract metadata for a URL")
    extract.add_argument("url", help="Page URL")
    extract.add_argument(
        "--canonical",
        action="store_true",
        help="Only resolve the canonical URL",
    )

    # search
    search = subparsers.add_parser("search", help="Search items by URL or name")
    search.add_argument("query", help="URL or name to search for")
    search.add_argument(
        "--max", "-m",
        type=int,
        default=DEFAULT_MAX_RESULTS,
        metavar="N",
        dest="max_results",
        help=f"Maximum results (default: {DEFAULT_MAX_RESULTS})",
    )
    search.add_argument(
        "--exact",
        action="store_true",
        help="Exact name match instead of fuzzy",
    )

    # advanced
    advanced = subparsers.add_parser("advanced", help="Filter items")
    advanced.add_argument("--topic", "-t", metavar="NAME", help="Topic name")
    advanced.add_argument("--type", dest="item_type", metavar="TYPE", help="Item type id")
    advanced.add_argument(
        "--length", "-L",
        metavar="START-FINISH",
        help="Duration range in minutes, e.g. 30-60",
    )
    advanced.add_argument(
        "--quality", "-q",
        choices=QUALITY_NAMES,
        help="Only items scoring 4 or more on this quality",
    )

    # discover
    discover = subparsers.add_parser("discover", help="Suggest a random item")
    discover.add_argument(
        "--topic", "-t",
        action="append",
        default=[],
        metavar="NAME",
        dest="topics",
        help="Topic name (repeatable)",
    )
    discover.add_argument(
        "--type",
        action="append",
        default=[],
        metavar="TYPE",
        dest="item_types",
        help=f"Item type id, e.g. {', '.join(ItemType.ALL)} (repeatable)",
    )

    # submit
    submit = subparsers.add_parser("submit", help="Store a URL as an item")
    submit.add_argument("url", help="Page URL")
    submit.add_argument("--submitter", "-s", required=True, metavar="ID", help="Submitting user id")
    submit.add_argument("--name", help="Item name (default: page title)")
    submit.add_argument("--type", dest="item_type", metavar="TYPE", help="Item type (default: guessed)")
    submit.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Resolve and extract only, store nothing",
    )

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Idea Curator Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_items(items) -> None:
    if not items:
        print("No items found.")
        return
    for item in items:
        print(f"  {item.id}  {item}")


def run_extract(args, store) -> int:
    extractor = MetadataExtractor(store.find_topic_by_name, cache=NullCache())

    if args.canonical:
        print(extractor.extract_canonical_url(args.url))
        return 0

    metadata = extractor.extract_opengraph_data(args.url)
    if metadata.is_empty:
        print(f"Unrecognized site, no metadata extracted: {args.url}")
        return 1

    print(json.dumps(metadata.to_dict(), indent=2))
    return 0


def run_search(args, store) -> int:
    items = SearchEngine(store).search(args.query, args.max_results, fuzzy=not args.exact)
    print_items(items)
    return 0


def run_advanced(args, store) -> int:
    try:
        items = SearchEngine(store).advanced_search(
            topic_name=args.topic,
            item_type=args.item_type,
            length_range=args.length,
            quality=args.quality,
        )
    except InvalidRangeError as e:
        print(f"❌ {e}")
        return 1

    print_items(items)
    return 0


def run_discover(args, store) -> int:
    topics = [t for t in (store.find_topic_by_name(n) for n in args.topics) if t is not None]
    item = DiscoveryPicker(store).discover(
        topics=topics or None,
        item_type_ids=args.item_types or None,
    )
    if item is None:
        print("Nothing to discover.")
        return 1

    print_items([item])
    return 0


def run_submit(args, store) -> int:
    overrides = {}
    if args.name:
        overrides["name"] = args.name
    if args.item_type:
        overrides["item_type"] = args.item_type

    extractor = MetadataExtractor(store.find_topic_by_name, cache=NullCache())
    pipeline = SubmissionPipeline(store, extractor, verbose=args.verbose)
    result = pipeline.submit(args.url, args.submitter, overrides=overrides, dry_run=args.dry_run)

    print(result.to_summary())
    return 0 if result.success else 1


COMMANDS = {
    "extract": run_extract,
    "search": run_search,
    "advanced": run_advanced,
    "discover": run_discover,
    "submit": run_submit,
}


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error or nothing found).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.show_config:
        show_config()
        return 0

    if not args.command:
        parser.print_help()
        return 1

    try:
        store = get_store()
        if args.verbose:
            print(f"Using {store.name} store")
        return COMMANDS[args.command](args, store)

    except FetchError as e:
        print(f"\n❌ {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
