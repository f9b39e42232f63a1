#!/usr/bin/env python3
"""Command line entry point for the Kindle library server and exclusion ledgers."""

import argparse
import sys
from pathlib import Path

from clippings.exceptions import ClippingsReadError, ExclusionError
from clippings.exclusions import ExclusionStore
from clippings.parser import ClippingsParser
from common.env import env
from common.logger import error, get_logger, progress, setup_logging, success

from .assembler import LibraryAssembler

logger = get_logger(__name__)


def cmd_serve(args):
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=args.host or env.host(),
        port=args.port or env.port(),
        reload=args.reload,
    )
    return 0


def cmd_books(args):
    """Print a summary of the parsed library."""
    store = ExclusionStore()
    assembler = LibraryAssembler(parser=ClippingsParser(args.clippings, store))
    try:
        books = assembler.assemble_sync(with_covers=not args.no_covers)
    except ClippingsReadError as e:
        error(str(e))
        return 1
    finally:
        assembler.close()

    if not books:
        progress("No books found")
        return 0

    for book in books:
        count = len(book.highlights)
        cover = book.cover_image or "-"
        progress(
            f"[bold]{book.title}[/bold] by {book.author}  "
            f"{count} highlight{'s' if count != 1 else ''}  {cover}"
        )
    success(f"{len(books)} books")
    return 0


def cmd_exclude_book(args):
    """Hide a book from the library."""
    try:
        ExclusionStore().exclude_book(args.title, args.author, args.reason)
    except ExclusionError as e:
        error(str(e))
        return 1
    success(f"Excluded '{args.title}' by {args.author}")
    return 0


def cmd_exclude_highlight(args):
    """Hide a single highlight from a book."""
    try:
        ExclusionStore().exclude_highlight(args.book_title, args.text)
    except ExclusionError as e:
        error(str(e))
        return 1
    success(f"Excluded highlight from '{args.book_title}'")
    return 0


def cmd_excluded(args):
    """List both exclusion ledgers."""
    store = ExclusionStore()

    books = store.list_excluded_books()
    progress(f"\nExcluded books ({len(books)}):")
    for record in books:
        reason = f"  ({record.reason})" if record.reason else ""
        progress(f"  {record.title} by {record.author}{reason}")

    highlights = store.list_excluded_highlights()
    progress(f"\nExcluded highlights ({len(highlights)}):")
    for record in highlights:
        progress(f"  {record.book_title}: {record.highlight_text[:80]}")
    return 0


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Browse Kindle highlights grouped by book, with cover images"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API and UI server")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT or 3000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=cmd_serve)

    books_parser = subparsers.add_parser("books", help="Parse the export and list books")
    books_parser.add_argument(
        "--clippings",
        type=Path,
        default=None,
        help="Path to 'My Clippings.txt' (default: CLIPPINGS_PATH)",
    )
    books_parser.add_argument(
        "--no-covers", action="store_true", help="Skip cover lookups (no network access)"
    )
    books_parser.set_defaults(func=cmd_books)

    exclude_book_parser = subparsers.add_parser("exclude-book", help="Hide a book")
    exclude_book_parser.add_argument("title", help="Book title as shown in the library")
    exclude_book_parser.add_argument("author", help="Book author as shown in the library")
    exclude_book_parser.add_argument("--reason", default=None, help="Why the book is hidden")
    exclude_book_parser.set_defaults(func=cmd_exclude_book)

    exclude_highlight_parser = subparsers.add_parser(
        "exclude-highlight", help="Hide a single highlight"
    )
    exclude_highlight_parser.add_argument("book_title", help="Title of the book")
    exclude_highlight_parser.add_argument("text", help="Exact highlight text")
    exclude_highlight_parser.set_defaults(func=cmd_exclude_highlight)

    excluded_parser = subparsers.add_parser("excluded", help="List hidden books and highlights")
    excluded_parser.set_defaults(func=cmd_excluded)

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
