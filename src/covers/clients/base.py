"""Abstract base class for cover image sources."""

from abc import ABC, abstractmethod

import requests

from common.constants import USER_AGENT
from common.env import env


class CoverSource(ABC):
    """Base class for remote cover image sources.

    Each source makes one or more time-bounded HTTP requests and either
    returns image bytes or None. Network problems are raised as
    CoverSourceError so the resolver can log them and move on.
    """

    name = "source"

    def __init__(self, timeout: float | None = None, session: requests.Session | None = None):
        """Initialize source.

        Args:
            timeout: Per-request timeout in seconds (default: COVER_TIMEOUT)
            session: Shared HTTP session (default: a new one)
        """
        self.timeout = timeout if timeout is not None else env.cover_timeout()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @abstractmethod
    def fetch_cover(self, title: str, author: str, catalog_id: str | None = None) -> bytes | None:
        """Fetch a cover image.

        Args:
            title: Book title
            author: Author name
            catalog_id: Optional ASIN from the clippings metadata

        Returns:
            Image bytes, or None if this source has no cover for the book

        Raises:
            CoverSourceError: If a request fails
        """
        pass

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CoverSourceError(Exception):
    """A cover request failed (timeout, connection error, bad status)."""

    pass
