"""
Parse a Kindle "My Clippings.txt" export into books and highlights.

Each entry of the export looks like this:

    Dune (Frank Herbert)
    - Your Highlight on page 8 | Location 120-121 | Added on Monday, ...

    I must not fear. Fear is the mind-killer.
    ==========

The first line holds the title with the author in the last pair of
parentheses, the second line holds freeform metadata (sometimes with an
ASIN), and the fourth line holds the highlighted text.
"""

import re
from collections.abc import Collection
from pathlib import Path

from common.constants import ENTRY_DELIMITER, MIN_ENTRY_LINES
from common.env import env
from common.logger import get_logger

from .exceptions import ClippingsReadError
from .exclusions import ExclusionStore, normalize_key
from .item_id import generate_book_id, generate_highlight_id
from .models import Book, Highlight

logger = get_logger(__name__)

# Greedy prefix so the LAST parenthesized group is taken as the author
TITLE_AUTHOR_RE = re.compile(r"^(?P<title>.*)\((?P<author>[^()]*)\)\s*$")
ASIN_RE = re.compile(r"ASIN:\s*([A-Z0-9]{10})")
HIGHLIGHT_PREFIX_RE = re.compile(r"^-?\s*Your Highlight on\s*", re.IGNORECASE)


def parse_title_line(line: str) -> tuple[str, str] | None:
    """
    Split an entry's first line into title and author.

    e.g., 'Dune (Frank Herbert)' -> ('Dune', 'Frank Herbert')
    e.g., 'Foundation (Foundation 1) (Isaac Asimov)' -> ('Foundation (Foundation 1)', 'Isaac Asimov')

    Returns:
        (title, author), or None if the line has no parenthesized author
    """
    match = TITLE_AUTHOR_RE.match(line.strip().lstrip("\ufeff"))
    if not match:
        return None

    title = match.group("title").strip()
    author = match.group("author").strip()
    if not title or not author:
        return None
    return title, author


def extract_catalog_id(metadata: str) -> str | None:
    """Return the ASIN embedded in a metadata line, if any."""
    match = ASIN_RE.search(metadata)
    return match.group(1) if match else None


def clean_metadata(metadata: str) -> str:
    """Strip the 'Your Highlight on' boilerplate from a metadata line.

    e.g., '- Your Highlight on page 8 | Location 120' -> 'page 8 | Location 120'
    """
    return HIGHLIGHT_PREFIX_RE.sub("", metadata.strip()).strip()


def split_entries(text: str) -> list[str]:
    """Split the raw export on delimiter lines, keeping source order."""
    entries = []
    current: list[str] = []
    for line in text.splitlines():
        if line.strip() == ENTRY_DELIMITER:
            entries.append("\n".join(current))
            current = []
        else:
            current.append(line)
    if any(line.strip() for line in current):
        entries.append("\n".join(current))
    return entries


def parse_clippings_text(
    text: str,
    excluded_books: Collection[str] = (),
    excluded_highlights: Collection[str] = (),
) -> list[Book]:
    """
    Group the entries of a clippings export into books.

    Args:
        text: Raw contents of the export
        excluded_books: Keys from ``normalize_key(title, author)`` to drop entirely
        excluded_highlights: Keys from ``normalize_key(title, text)`` to drop

    Returns:
        Books in order of first appearance, each with highlights in source order
    """
    # Insertion order of this dict IS the output order: first appearance wins
    books: dict[str, Book] = {}
    skipped = 0

    for index, entry in enumerate(split_entries(text)):
        lines = entry.strip().splitlines()
        if len(lines) < MIN_ENTRY_LINES:
            if entry.strip():
                logger.debug(f"Skipping entry {index}: only {len(lines)} lines")
                skipped += 1
            continue

        parsed = parse_title_line(lines[0])
        if parsed is None:
            logger.warning(f"Skipping entry {index}: no author found in {lines[0].strip()!r}")
            skipped += 1
            continue

        title, author = parsed
        book_key = normalize_key(title, author)
        if book_key in excluded_books:
            continue

        metadata_line = lines[1]
        book = books.get(book_key)
        if book is None:
            book = Book(
                id=generate_book_id(title, author),
                title=title,
                author=author,
                amazon_id=extract_catalog_id(metadata_line),
            )
            books[book_key] = book

        highlight_text = lines[3].strip()
        if not highlight_text:
            logger.debug(f"Skipping entry {index}: empty highlight in '{title}'")
            skipped += 1
            continue

        if normalize_key(title, highlight_text) in excluded_highlights:
            logger.debug(f"Skipping excluded highlight in '{title}'")
            continue

        book.highlights.append(
            Highlight(
                id=generate_highlight_id(highlight_text),
                text=highlight_text,
                metadata=clean_metadata(metadata_line),
            )
        )

    if skipped:
        logger.info(f"Skipped {skipped} malformed entries")

    return list(books.values())


class ClippingsParser:
    """Parse the clippings export on disk, applying the exclusion ledgers."""

    def __init__(self, clippings_path: Path | None = None, store: ExclusionStore | None = None):
        """Initialize parser.

        Args:
            clippings_path: Path to 'My Clippings.txt' (default: from env)
            store: Exclusion store (default: ledgers from env)
        """
        self.clippings_path = Path(clippings_path) if clippings_path else env.clippings_path()
        self.store = store or ExclusionStore()

    def parse(self) -> list[Book]:
        """Parse the export, re-reading the file and both ledgers.

        Returns:
            Books in order of first appearance; empty if the export is missing

        Raises:
            ClippingsReadError: If the export exists but cannot be read
        """
        excluded_books = self.store.load_excluded_books()
        excluded_highlights = self.store.load_excluded_highlights()

        try:
            text = self.clippings_path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            logger.error(f"Clippings file not found: {self.clippings_path}")
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read clippings file {self.clippings_path}: {e}")
            raise ClippingsReadError(f"Could not read {self.clippings_path.name}") from e

        books = parse_clippings_text(text, excluded_books, excluded_highlights)
        logger.info(
            f"Parsed {len(books)} books "
            f"({sum(len(book.highlights) for book in books)} highlights) "
            f"from {self.clippings_path.name}"
        )
        return books
