"""Deterministic ID generation for books and highlights."""

import hashlib


def _md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def generate_book_id(title: str, author: str) -> str:
    """
    Generate a stable book ID from title and author.

    The same (title, author) pair always yields the same ID, across runs and
    regardless of which entries were excluded.

    Args:
        title: Book title as it appears in the export
        author: Author as it appears in the export

    Returns:
        32 character hex digest
    """
    return _md5(f"{title}|{author}")


def generate_highlight_id(text: str) -> str:
    """
    Generate a stable highlight ID from the highlight text alone.

    Position and book are not part of the ID. The same passage keeps its ID
    across re-parses, and identical passages in different books share one.

    Args:
        text: The highlighted passage

    Returns:
        32 character hex digest
    """
    return _md5(text)

