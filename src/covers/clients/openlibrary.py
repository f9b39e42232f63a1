"""Open Library client for cover images."""

import re
from typing import Any

import requests

from common.logger import get_logger

from .base import CoverSource, CoverSourceError

logger = get_logger(__name__)


def clean_search_term(value: str) -> str:
    """Replace punctuation with spaces and collapse whitespace.

    Example:
        >>> clean_search_term("Dune: Messiah!")
        'Dune Messiah'
    """
    return " ".join(re.sub(r"[^\w\s]", " ", value or "").split())


class OpenLibraryCoverSource(CoverSource):
    """Cover source backed by the Open Library search and covers APIs.

    The first search result carrying a ``cover_i`` is used; its large image is
    downloaded from covers.openlibrary.org.

    API Documentation: https://openlibrary.org/dev/docs/api/search
    """

    name = "openlibrary"

    BASE_URL = "https://openlibrary.org"
    SEARCH_URL = f"{BASE_URL}/search.json"
    COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-L.jpg"

    def fetch_cover(self, title: str, author: str, catalog_id: str | None = None) -> bytes | None:
        for title_variant in self._generate_title_variations(title):
            cover_id = self.search_cover_id(title_variant, author)
            if cover_id:
                if title_variant != title:
                    logger.debug(
                        f"Found cover using title variation '{title_variant}' "
                        f"(original: '{title}')"
                    )
                return self.download_cover(cover_id)

        logger.debug(f"No Open Library cover for '{title}' by {author}")
        return None

    def _generate_title_variations(self, title: str) -> list[str]:
        """Generate title variations to try for better matching.

        Example:
            >>> source._generate_title_variations("Money: A Suicide Note")
            ['Money: A Suicide Note', 'Money']
        """
        variations = [title]

        # Kindle titles often carry a subtitle or series suffix
        for separator in [":", "—", " - ", " ("]:
            if separator in title:
                main_title = title.split(separator)[0].strip()
                if main_title and main_title not in variations:
                    variations.append(main_title)

        return variations

    def search_cover_id(self, title: str, author: str) -> int | None:
        """Search for a book and return the first result's cover id.

        Args:
            title: Book title
            author: Author name

        Returns:
            Open Library cover id, or None if no result has one

        Raises:
            CoverSourceError: If the search request fails
        """
        query = f"{clean_search_term(title)} {clean_search_term(author)}".strip()
        logger.debug(f"Searching Open Library for '{query}'")

        try:
            response = self.session.get(
                self.SEARCH_URL, params={"q": query}, timeout=self.timeout
            )
            response.raise_for_status()
            data: Any = response.json()
        except requests.exceptions.Timeout as e:
            raise CoverSourceError(f"Open Library search timeout for '{title}'") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise CoverSourceError(f"Open Library search error: {e}") from e

        docs = data.get("docs") if isinstance(data, dict) else None
        if not docs or not isinstance(docs, list):
            return None

        # First result is usually the best match
        first = docs[0]
        if not isinstance(first, dict):
            logger.debug(f"Unexpected Open Library search result for '{query}': {first!r}")
            return None
        return first.get("cover_i") or None

    def download_cover(self, cover_id: int) -> bytes | None:
        """Download the large cover image for an Open Library cover id.

        Raises:
            CoverSourceError: If the download fails
        """
        url = self.COVER_URL.format(cover_id=cover_id)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise CoverSourceError(f"Open Library cover timeout for {url}") from e
        except requests.exceptions.RequestException as e:
            raise CoverSourceError(f"Open Library cover error: {e}") from e

        return response.content or None
