"""Direct Amazon image lookups by ASIN."""

import requests

from common.constants import MIN_COVER_BYTES
from common.logger import get_logger

from .base import CoverSource, CoverSourceError

logger = get_logger(__name__)


class AmazonCoverSource(CoverSource):
    """Fetch covers from Amazon's image CDN using the book's ASIN.

    Several hosts serve the same images; they are tried in order. Unknown
    ASINs come back as a tiny placeholder, so bodies of MIN_COVER_BYTES or
    less count as a miss.
    """

    name = "amazon"

    URL_TEMPLATES = (
        "https://images-na.ssl-images-amazon.com/images/P/{asin}.01.L.jpg",
        "https://m.media-amazon.com/images/P/{asin}.01.L.jpg",
        "https://images-amazon.com/images/P/{asin}.01.LZZZZZZZ.jpg",
    )

    def fetch_cover(self, title: str, author: str, catalog_id: str | None = None) -> bytes | None:
        if not catalog_id:
            return None

        last_error: Exception | None = None
        for template in self.URL_TEMPLATES:
            url = template.format(asin=catalog_id)
            try:
                data = self._fetch(url)
            except requests.exceptions.RequestException as e:
                logger.debug(f"Amazon request failed for {url}: {e}")
                last_error = e
                continue

            if data is not None:
                logger.debug(f"Found Amazon cover for '{title}': {url}")
                return data

        if last_error is not None:
            raise CoverSourceError(f"Amazon lookup failed for ASIN {catalog_id}") from last_error
        return None

    def _fetch(self, url: str) -> bytes | None:
        """Download one candidate URL, returning None for misses."""
        logger.debug(f"Trying Amazon URL: {url}")
        response = self.session.get(url, timeout=self.timeout)
        if response.status_code != 200:
            return None
        if len(response.content) <= MIN_COVER_BYTES:
            return None
        return response.content
