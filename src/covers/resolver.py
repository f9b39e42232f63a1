"""Resolve a book's cover image through a prioritized chain of sources."""

import requests

from common.logger import get_logger

from .clients.amazon import AmazonCoverSource
from .clients.base import CoverSource, CoverSourceError
from .clients.openlibrary import OpenLibraryCoverSource

logger = get_logger(__name__)


class CoverResolver:
    """Try each cover source in order and return the first image found.

    Sources are consulted sequentially; the first one returning bytes wins.
    Failures are logged and treated as a miss, so ``resolve_cover`` never
    raises for network problems.
    """

    def __init__(self, sources: list[CoverSource] | None = None, timeout: float | None = None):
        """Initialize resolver.

        Args:
            sources: Cover sources in priority order
                (default: Amazon by ASIN, then Open Library search)
            timeout: Per-request timeout passed to the default sources
        """
        if sources is None:
            session = requests.Session()
            sources = [
                AmazonCoverSource(timeout=timeout, session=session),
                OpenLibraryCoverSource(timeout=timeout, session=session),
            ]
        self.sources = sources

    def resolve_cover(
        self, title: str, author: str, catalog_id: str | None = None
    ) -> bytes | None:
        """Fetch cover bytes for a book.

        Args:
            title: Book title
            author: Author name
            catalog_id: Optional ASIN from the clippings metadata

        Returns:
            Image bytes from the first source that has one, or None
        """
        for source in self.sources:
            try:
                data = source.fetch_cover(title, author, catalog_id)
            except CoverSourceError as e:
                logger.warning(f"Cover lookup via {source.name} failed for '{title}': {e}")
                continue

            if data:
                logger.info(f"Found cover for '{title}' via {source.name}")
                return data

        logger.info(f"No cover found for '{title}' by {author}")
        return None

    def close(self) -> None:
        """Close the sources' HTTP sessions."""
        for source in self.sources:
            source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
