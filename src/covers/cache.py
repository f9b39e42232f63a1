"""On-disk cover cache keyed by a hash of (title, author)."""

import hashlib
from pathlib import Path

from common.constants import COVER_EXTENSION, COVERS_URL_PREFIX
from common.env import env
from common.logger import get_logger

logger = get_logger(__name__)


def cache_key(title: str, author: str) -> str:
    """Compute the cache key for a book.

    Args:
        title: Book title
        author: Author name

    Returns:
        md5 hex digest of 'title|author'
    """
    return hashlib.md5(f"{title}|{author}".encode()).hexdigest()


class CoverCache:
    """Cover images stored as ``<cache_key>.jpg`` in a directory served statically.

    ``get`` and ``put`` return the public URL of the image (e.g.
    ``/covers/<key>.jpg``); ``resolve`` maps such a URL back to the file.
    Entries are never validated or expired.
    """

    def __init__(self, cache_dir: Path | None = None, url_prefix: str = COVERS_URL_PREFIX):
        """Initialize cache.

        Args:
            cache_dir: Directory holding cached images (default: COVERS_DIR)
            url_prefix: URL path the directory is served under
        """
        self.cache_dir = Path(cache_dir) if cache_dir else env.covers_dir()
        self.url_prefix = url_prefix.rstrip("/")

    def filename(self, title: str, author: str) -> str:
        return f"{cache_key(title, author)}{COVER_EXTENSION}"

    def path_for(self, title: str, author: str) -> Path:
        return self.cache_dir / self.filename(title, author)

    def url_for(self, title: str, author: str) -> str:
        return f"{self.url_prefix}/{self.filename(title, author)}"

    def get(self, title: str, author: str) -> str | None:
        """Return the cover URL if an image is already cached."""
        if self.path_for(title, author).is_file():
            return self.url_for(title, author)
        return None

    def put(self, data: bytes, title: str, author: str) -> str | None:
        """Store cover bytes.

        Returns:
            Cover URL, or None if the image could not be written
        """
        path = self.path_for(title, author)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Error saving cover for '{title}' to {path}: {e}")
            return None

        logger.debug(f"Cached cover for '{title}' at {path}")
        return self.url_for(title, author)

    def resolve(self, url: str) -> Path:
        """Map a cover URL returned by ``get``/``put`` to its file."""
        return self.cache_dir / Path(url).name
